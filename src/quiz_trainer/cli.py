"""Command-line entry point for the quiz trainer.

``quiz`` without a command opens the interactive shell; ``quiz <command>
[id]`` runs a single command and exits; ``quiz config ...`` manages the TOML
configuration file.
"""

from __future__ import annotations

import argparse
import sys
from importlib import metadata
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from . import config as config_mod
from .commands import TrainerContext
from .console import ConsolePrompt, ConsoleReporter
from .core import configure_logger, ensure_workspace
from .core.workspace import WorkspaceError, WorkspaceLayout
from .errors import StoreError
from .shell import EXIT_USAGE, run_command, run_shell
from .store import SEED_QUESTIONS, JsonQuestionStore

__all__ = ["build_parser", "build_context", "main"]

DISTRIBUTION = "quiz-trainer"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz",
        description=(
            "Interactive quiz trainer. Run without a command to open the "
            "shell, or pass one shell command to run it once."
        ),
        epilog="Commands: help, list, show <id>, add, delete <id>, "
        "edit <id>, test <id>, play, credits, config {init,path,validate}.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to the TOML config (defaults to QUIZ_TRAINER_CONFIG or "
        "the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (defaults to QUIZ_TRAINER_HOME "
        "or ~/.quiz-trainer).",
    )
    parser.add_argument(
        "--store",
        type=Path,
        help="Question store JSON file (overrides storage.path).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Print the installed version and exit.",
    )
    parser.add_argument("command", nargs="?")
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz config",
        description="Manage the quiz trainer configuration file.",
    )
    sub = parser.add_subparsers(dest="config_command", required=True)
    init_parser = sub.add_parser("init", help="Write the default template.")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file.",
    )
    sub.add_parser("path", help="Print the resolved config path.")
    validate_parser = sub.add_parser(
        "validate", help="Validate the active configuration."
    )
    validate_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress success output; errors still print to stderr.",
    )
    return parser


def build_context(
    cfg: config_mod.TrainerConfig,
    layout: WorkspaceLayout,
    console: Console,
    *,
    store_path: Optional[Path] = None,
) -> TrainerContext:
    path = (
        store_path.expanduser().resolve()
        if store_path is not None
        else cfg.store_path(layout)
    )
    seed = SEED_QUESTIONS if cfg.storage.seed else ()
    return TrainerContext(
        store=JsonQuestionStore(path, seed=seed),
        prompt=ConsolePrompt(console),
        reporter=ConsoleReporter(console),
        reveal_answer=cfg.play.reveal_answer,
        credits=cfg.credits,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:
        return int(exc.code or 0)

    if args.version:
        return _handle_version()

    try:
        layout = ensure_workspace(path=args.workspace)
    except WorkspaceError as exc:
        _print_error(str(exc))
        return EXIT_USAGE

    if args.command == "config":
        return _handle_config(args.args, layout=layout, explicit=args.config)

    try:
        cfg = config_mod.load_config(explicit_path=args.config, layout=layout)
    except config_mod.ConfigError as exc:
        _print_error(str(exc))
        return EXIT_USAGE

    logger, log_path = configure_logger(
        "quiz_trainer",
        log_dir=layout.path_for("logs"),
        level=cfg.logging.level,
        verbose=args.verbose or cfg.logging.verbose,
    )
    logger.debug(
        "quiz CLI invoked",
        extra={"command": args.command, "log_path": str(log_path)},
    )

    console = Console()
    try:
        ctx = build_context(cfg, layout, console, store_path=args.store)
    except StoreError as exc:
        _print_error(str(exc))
        return EXIT_USAGE

    if args.command is None:
        run_shell(ctx, console=console)
        return 0
    return run_command(ctx, args.command, args.args)


def _handle_version() -> int:
    try:
        version = metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        version = "unknown"
    print(version)
    return 0


def _handle_config(
    argv: Sequence[str],
    *,
    layout: WorkspaceLayout,
    explicit: Optional[Path],
) -> int:
    parser = _build_config_parser()
    try:
        args = parser.parse_args(list(argv))
    except SystemExit as exc:
        return int(exc.code or 0)

    try:
        path = config_mod.resolve_config_path(
            explicit_path=explicit, layout=layout
        )
        if args.config_command == "path":
            print(path)
            return 0
        if args.config_command == "init":
            config_mod.write_template(path, overwrite=args.force)
            print(f"Wrote config template to {path}")
            return 0
        cfg = config_mod.load_config(explicit_path=explicit, layout=layout)
    except config_mod.ConfigError as exc:
        _print_error(str(exc))
        return EXIT_USAGE

    if not args.quiet:
        print("Configuration OK")
        print(f"  config: {path}{'' if path.exists() else ' (defaults)'}")
        print(f"  store: {cfg.store_path(layout)}")
        print(f"  reveal_answer: {str(cfg.play.reveal_answer).lower()}")
        print(f"  log_level: {cfg.logging.level}")
    return 0


def _print_error(message: str) -> None:
    sys.stderr.write(message + "\n")


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
