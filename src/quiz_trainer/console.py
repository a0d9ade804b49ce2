"""Rich-backed prompt and output services for the trainer commands."""

from __future__ import annotations

import logging
from typing import IO, Protocol

from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.text import Text

from .store import Question

__all__ = [
    "PromptService",
    "Reporter",
    "ConsolePrompt",
    "ConsoleReporter",
    "render_big_number",
    "question_line",
]

logger = logging.getLogger("quiz_trainer.console")

_GLYPH_ROWS = 5
_GLYPHS: dict[str, tuple[str, ...]] = {
    "0": ("█████", "█   █", "█   █", "█   █", "█████"),
    "1": ("  █  ", " ██  ", "  █  ", "  █  ", " ███ "),
    "2": ("█████", "    █", "█████", "█    ", "█████"),
    "3": ("█████", "    █", " ████", "    █", "█████"),
    "4": ("█   █", "█   █", "█████", "    █", "    █"),
    "5": ("█████", "█    ", "█████", "    █", "█████"),
    "6": ("█████", "█    ", "█████", "█   █", "█████"),
    "7": ("█████", "    █", "   █ ", "  █  ", "  █  "),
    "8": ("█████", "█   █", "█████", "█   █", "█████"),
    "9": ("█████", "█   █", "█████", "    █", "█████"),
    "-": ("     ", "     ", "█████", "     ", "     "),
}


class PromptService(Protocol):
    def ask(self, text: str, *, default: str | None = None) -> str: ...


class Reporter(Protocol):
    def emit(self, line: RenderableType) -> None: ...

    def emit_error(self, line: str) -> None: ...

    def emit_banner(self, value: int) -> None: ...


def render_big_number(value: int) -> str:
    """Render ``value`` as block digits, one glyph column per character."""

    glyphs = [_GLYPHS[char] for char in str(value)]
    rows = [
        "  ".join(glyph[row] for glyph in glyphs).rstrip()
        for row in range(_GLYPH_ROWS)
    ]
    return "\n".join(rows)


def question_line(question: Question, *, with_answer: bool = False) -> Text:
    line = Text.assemble(
        " [",
        (str(question.id), "magenta"),
        "]:  ",
        question.question,
    )
    if with_answer:
        line.append(" ")
        line.append("=>", style="magenta")
        line.append(" ")
        line.append(question.answer)
    return line


class ConsolePrompt:
    """Read one trimmed line per call from the console.

    ``stream`` replaces stdin (scripts, tests); reaching its end raises
    :class:`EOFError` the same way an interactive Ctrl-D does.
    """

    def __init__(self, console: Console, *, stream: IO[str] | None = None):
        self._console = console
        self._stream = stream

    def ask(self, text: str, *, default: str | None = None) -> str:
        prompt = Text(text, style="red")
        if default:
            prompt.append(f"[{default}] ", style="dim")
        raw = self._console.input(prompt, stream=self._stream)
        if self._stream is not None and raw == "":
            raise EOFError
        answer = raw.strip()
        if not answer and default is not None:
            return default
        return answer


class ConsoleReporter:
    """One-way output sink; rendering failures are logged, not raised."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def emit(self, line: RenderableType) -> None:
        self._print(line)

    def emit_error(self, line: str) -> None:
        self._print(Text.assemble(("Error: ", "bold red"), (line, "red")))

    def emit_banner(self, value: int) -> None:
        self._print(
            Panel(
                Text(render_big_number(value), style="bold magenta"),
                border_style="magenta",
                expand=False,
            )
        )

    def _print(self, renderable: RenderableType) -> None:
        try:
            if isinstance(renderable, str):
                self._console.print(renderable, markup=False, highlight=False)
            else:
                self._console.print(renderable)
        except OSError as exc:
            logger.warning(
                "Failed to write console output", extra={"error": str(exc)}
            )
