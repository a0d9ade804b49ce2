"""Fake prompt and reporter collaborators for command and session tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Union

from rich.console import RenderableType
from rich.text import Text

Reply = Union[str, BaseException]


class ScriptedPrompt:
    """Answer prompts from a script; raise ``EOFError`` once it runs out.

    A script entry that is an exception instance is raised instead of being
    returned, which lets tests simulate Ctrl-C at a given prompt. With
    ``responder`` every reply is computed from the prompt text instead.
    """

    def __init__(
        self,
        replies: Iterable[Reply] = (),
        *,
        responder: Optional[Callable[[str], Reply]] = None,
    ) -> None:
        self._replies = list(replies)
        self._responder = responder
        self.prompts: list[str] = []
        self.defaults: list[Optional[str]] = []

    def ask(self, text: str, *, default: Optional[str] = None) -> str:
        self.prompts.append(text)
        self.defaults.append(default)
        if self._responder is not None:
            reply = self._responder(text)
        elif self._replies:
            reply = self._replies.pop(0)
        else:
            raise EOFError
        if isinstance(reply, BaseException):
            raise reply
        reply = reply.strip()
        if not reply and default is not None:
            return default
        return reply


@dataclass
class RecordingReporter:
    """Collect everything emitted, flattened to plain text."""

    lines: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    banners: list[int] = field(default_factory=list)

    def emit(self, line: RenderableType) -> None:
        self.lines.append(line.plain if isinstance(line, Text) else str(line))

    def emit_error(self, line: str) -> None:
        self.errors.append(line)

    def emit_banner(self, value: int) -> None:
        self.banners.append(value)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)
