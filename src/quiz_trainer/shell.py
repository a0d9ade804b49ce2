"""Interactive read-eval loop over the trainer command table."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from rich.console import Console
from rich.panel import Panel

from .commands import TrainerContext, resolve_command
from .errors import QuizTrainerError, QuestionValidationError

__all__ = ["InputProvider", "run_command", "run_shell"]

InputProvider = Callable[[], str]

logger = logging.getLogger("quiz_trainer.shell")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def run_command(
    ctx: TrainerContext, name: str, args: Sequence[str] = ()
) -> int:
    """Run one command, report any failure and return an exit code.

    Trainer errors and cancelled prompts end the command, never the caller.
    """

    spec = resolve_command(name)
    if spec is None:
        ctx.reporter.emit_error(
            f"Unknown command '{name}'. Use 'help' to list commands."
        )
        return EXIT_USAGE
    if spec.handler is None:
        return EXIT_OK

    logger.debug("Running command", extra={"command": spec.name})
    try:
        spec.handler(ctx, args)
    except QuestionValidationError as exc:
        ctx.reporter.emit_error("The quiz is invalid:")
        for message in exc.messages:
            ctx.reporter.emit_error(message)
        return EXIT_FAILED
    except QuizTrainerError as exc:
        logger.warning(
            "Command failed",
            extra={"command": spec.name, "error": type(exc).__name__},
        )
        ctx.reporter.emit_error(str(exc))
        return EXIT_FAILED
    except (EOFError, KeyboardInterrupt):
        ctx.reporter.emit("\nCommand cancelled.")
        return EXIT_FAILED
    return EXIT_OK


def run_shell(
    ctx: TrainerContext,
    *,
    console: Console,
    input_provider: InputProvider | None = None,
) -> None:
    """Read commands until ``quit`` or end of input."""

    read_line = input_provider or (
        lambda: console.input("[bold magenta]quiz[/]> ")
    )
    console.print(
        Panel(
            "Type [bold]help[/] to list the commands.",
            title="Quiz Trainer",
            border_style="magenta",
        )
    )
    while True:
        try:
            raw = read_line()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\nBye!")
            break
        parts = raw.split()
        if not parts:
            continue
        name, *args = parts
        spec = resolve_command(name)
        if spec is not None and spec.handler is None:
            console.print("Bye!")
            break
        run_command(ctx, name, args)
