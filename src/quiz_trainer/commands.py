"""Trainer commands: list, show, add, delete, edit, test, play and friends.

Each command takes a :class:`TrainerContext` and the raw argument tokens
typed after the command name. Errors derived from
:class:`~quiz_trainer.errors.QuizTrainerError` propagate to the caller
(the shell or the one-shot CLI), which reports them and carries on.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from rich.text import Text

from .console import PromptService, Reporter, question_line
from .errors import InvalidIdError, NotFoundError
from .normalize import answers_match
from .session import PlayResult, run_play_session
from .store import Question, QuestionStore

__all__ = [
    "TrainerContext",
    "CommandSpec",
    "COMMANDS",
    "resolve_command",
    "format_command_table",
    "validate_id",
    "list_questions",
    "show_question",
    "add_question",
    "delete_question",
    "edit_question",
    "check_question",
    "play",
]

logger = logging.getLogger("quiz_trainer.commands")

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass
class TrainerContext:
    """Collaborators and options shared by every command."""

    store: QuestionStore
    prompt: PromptService
    reporter: Reporter
    reveal_answer: bool = False
    credits: Sequence[str] = ()
    rng: Optional[random.Random] = field(default=None, repr=False)


def validate_id(token: str | None) -> int:
    """Parse the ``<id>`` argument or raise :class:`InvalidIdError`."""

    if token is None:
        raise InvalidIdError("Missing <id> parameter.")
    token = token.strip()
    if not _ID_PATTERN.fullmatch(token):
        raise InvalidIdError("The <id> value is not a number.")
    return int(token)


def _require(store: QuestionStore, question_id: int) -> Question:
    question = store.find_by_id(question_id)
    if question is None:
        raise NotFoundError(question_id)
    return question


def list_questions(ctx: TrainerContext) -> list[Question]:
    questions = ctx.store.list_all()
    for question in questions:
        ctx.reporter.emit(question_line(question))
    return questions


def show_question(ctx: TrainerContext, token: str | None) -> Question:
    question = _require(ctx.store, validate_id(token))
    ctx.reporter.emit(question_line(question, with_answer=True))
    return question


def add_question(ctx: TrainerContext) -> Question:
    text = ctx.prompt.ask(" Enter a question: ")
    answer = ctx.prompt.ask(" Enter the answer: ")
    created = ctx.store.create(text, answer)
    ctx.reporter.emit(
        Text.assemble(
            " ",
            ("Added", "magenta"),
            f": {created.question} ",
            ("=>", "magenta"),
            f" {created.answer}",
        )
    )
    return created


def delete_question(ctx: TrainerContext, token: str | None) -> int:
    question_id = validate_id(token)
    ctx.store.delete(question_id)
    ctx.reporter.emit(
        Text.assemble(" Deleted quiz ", (str(question_id), "magenta"), ".")
    )
    return question_id


def edit_question(ctx: TrainerContext, token: str | None) -> Question:
    """Prompt for new text, offering the stored values as defaults."""

    question_id = validate_id(token)
    current = _require(ctx.store, question_id)
    text = ctx.prompt.ask(" Enter the question: ", default=current.question)
    answer = ctx.prompt.ask(" Enter the answer: ", default=current.answer)
    updated = ctx.store.update(question_id, text, answer)
    ctx.reporter.emit(
        Text.assemble(
            " Quiz ",
            (str(updated.id), "magenta"),
            f" changed to: {updated.question} ",
            ("=>", "magenta"),
            f" {updated.answer}",
        )
    )
    return updated


def check_question(ctx: TrainerContext, token: str | None) -> bool:
    """Ask a single question once and report whether the reply matches."""

    question = _require(ctx.store, validate_id(token))
    reply = ctx.prompt.ask(question.question + "? ")
    correct = answers_match(question.answer, reply)
    logger.info(
        "Tested question",
        extra={"question_id": question.id, "correct": correct},
    )
    if correct:
        ctx.reporter.emit(Text(" Correct ", style="bold green"))
    else:
        ctx.reporter.emit(Text(" Incorrect ", style="bold red"))
    return correct


def play(ctx: TrainerContext) -> PlayResult:
    return run_play_session(
        ctx.store,
        ctx.prompt,
        ctx.reporter,
        reveal_answer=ctx.reveal_answer,
        rng=ctx.rng,
    )


def _show_credits(ctx: TrainerContext) -> None:
    ctx.reporter.emit("Authors:")
    for author in ctx.credits:
        ctx.reporter.emit(Text(author, style="green"))


def _show_help(ctx: TrainerContext) -> None:
    ctx.reporter.emit(format_command_table())


CommandHandler = Callable[[TrainerContext, Sequence[str]], object]


@dataclass(frozen=True)
class CommandSpec:
    """A shell command with its aliases and one-line summary."""

    name: str
    summary: str
    handler: Optional[CommandHandler] = None
    aliases: tuple[str, ...] = ()
    usage: str = ""

    @property
    def label(self) -> str:
        names = "|".join((*self.aliases, self.name))
        return f"{names} {self.usage}".rstrip()


def _first(args: Sequence[str]) -> str | None:
    return args[0] if args else None


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="help",
        aliases=("h",),
        summary="Show this help.",
        handler=lambda ctx, args: _show_help(ctx),
    ),
    CommandSpec(
        name="list",
        summary="List the stored quizzes.",
        handler=lambda ctx, args: list_questions(ctx),
    ),
    CommandSpec(
        name="show",
        usage="<id>",
        summary="Show the question and answer of a quiz.",
        handler=lambda ctx, args: show_question(ctx, _first(args)),
    ),
    CommandSpec(
        name="add",
        summary="Add a new quiz interactively.",
        handler=lambda ctx, args: add_question(ctx),
    ),
    CommandSpec(
        name="delete",
        usage="<id>",
        summary="Delete a quiz.",
        handler=lambda ctx, args: delete_question(ctx, _first(args)),
    ),
    CommandSpec(
        name="edit",
        usage="<id>",
        summary="Edit a quiz.",
        handler=lambda ctx, args: edit_question(ctx, _first(args)),
    ),
    CommandSpec(
        name="test",
        usage="<id>",
        summary="Answer a single quiz.",
        handler=lambda ctx, args: check_question(ctx, _first(args)),
    ),
    CommandSpec(
        name="play",
        aliases=("p",),
        summary="Answer every quiz once, in random order.",
        handler=lambda ctx, args: play(ctx),
    ),
    CommandSpec(
        name="credits",
        summary="Show the authors.",
        handler=lambda ctx, args: _show_credits(ctx),
    ),
    CommandSpec(
        name="quit",
        aliases=("q",),
        summary="Leave the program.",
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    key: spec
    for spec in _COMMAND_SPECS
    for key in (spec.name, *spec.aliases)
}


def resolve_command(name: str) -> CommandSpec | None:
    return COMMANDS.get(name.lower())


def format_command_table() -> str:
    width = max(len(spec.label) for spec in _COMMAND_SPECS)
    lines = ["Commands:"]
    for spec in _COMMAND_SPECS:
        lines.append(f"  {spec.label.ljust(width)}  {spec.summary}")
    return "\n".join(lines)
