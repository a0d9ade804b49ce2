"""Play-all session: ask every stored question once, in random order.

The session snapshots the store's ids into a :class:`Sampler`, then loops:
draw an id, resolve it, prompt once, compare normalized answers. A correct
answer scores a point and continues until the pool is exhausted; the first
wrong answer ends the game and discards the rest of the pool. Each prompt is
a blocking call, so the loop holds at most one outstanding store or prompt
interaction at a time.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from rich.text import Text

from .console import PromptService, Reporter
from .errors import QuizTrainerError
from .normalize import answers_match
from .sampler import Sampler
from .store import QuestionStore

__all__ = [
    "MissingQuestionError",
    "SessionInterrupted",
    "SessionStatus",
    "PlayResult",
    "PlaySessionState",
    "run_play_session",
]

logger = logging.getLogger("quiz_trainer.session")


class MissingQuestionError(QuizTrainerError):
    """A drawn id no longer resolves to a question in the store."""

    def __init__(self, question_id: int) -> None:
        super().__init__(
            f"Question id={question_id} disappeared from the store during "
            "the session; no score recorded."
        )
        self.question_id = question_id


class SessionInterrupted(QuizTrainerError):
    """The user abandoned the session at a prompt (EOF or Ctrl-C)."""

    def __init__(self) -> None:
        super().__init__("Game abandoned; no score recorded.")


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON_ALL_CORRECT = "won_all_correct"
    LOST_ON_WRONG_ANSWER = "lost_on_wrong_answer"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.IN_PROGRESS


@dataclass(frozen=True)
class PlayResult:
    """Outcome of a finished session."""

    score: int
    status: SessionStatus
    asked: int


@dataclass
class PlaySessionState:
    """Mutable state owned by the single active play loop."""

    pool: Sampler
    score: int = 0
    asked: int = 0
    status: SessionStatus = SessionStatus.IN_PROGRESS

    @classmethod
    def start(
        cls, ids: Iterable[int], *, rng: random.Random | None = None
    ) -> "PlaySessionState":
        state = cls(pool=Sampler(ids, rng=rng))
        if state.pool.is_empty():
            # Nothing to get wrong.
            state.status = SessionStatus.WON_ALL_CORRECT
        return state

    def record_correct(self) -> None:
        self._require_in_progress()
        self.asked += 1
        self.score += 1
        if self.pool.is_empty():
            self.status = SessionStatus.WON_ALL_CORRECT

    def record_wrong(self) -> None:
        self._require_in_progress()
        self.asked += 1
        self.status = SessionStatus.LOST_ON_WRONG_ANSWER

    def result(self) -> PlayResult:
        return PlayResult(score=self.score, status=self.status, asked=self.asked)

    def _require_in_progress(self) -> None:
        if self.status.is_terminal:
            raise RuntimeError(
                f"Session already finished with status {self.status.value}."
            )


def run_play_session(
    store: QuestionStore,
    prompt: PromptService,
    reporter: Reporter,
    *,
    reveal_answer: bool = False,
    rng: random.Random | None = None,
) -> PlayResult:
    """Run one play-all game and return its final score and status.

    Raises :class:`MissingQuestionError` when a drawn id cannot be resolved
    and :class:`SessionInterrupted` when the prompt reports EOF or Ctrl-C.
    In both cases no end-of-game report is emitted.
    """

    ids = [question.id for question in store.list_all()]
    state = PlaySessionState.start(ids, rng=rng)
    logger.info("Play session started", extra={"pool_size": len(ids)})

    while not state.status.is_terminal:
        _play_one(
            state,
            store=store,
            prompt=prompt,
            reporter=reporter,
            reveal_answer=reveal_answer,
        )

    _report_end(state, reporter)
    result = state.result()
    logger.info(
        "Play session finished",
        extra={
            "status": result.status.value,
            "score": result.score,
            "asked": result.asked,
            "unasked": state.pool.remaining,
        },
    )
    return result


def _play_one(
    state: PlaySessionState,
    *,
    store: QuestionStore,
    prompt: PromptService,
    reporter: Reporter,
    reveal_answer: bool,
) -> None:
    question_id = state.pool.draw_one()
    question = store.find_by_id(question_id)
    if question is None:
        logger.error(
            "Drawn question missing from store",
            extra={"question_id": question_id, "score": state.score},
        )
        raise MissingQuestionError(question_id)

    try:
        reply = prompt.ask(question.question + " ? ")
    except (EOFError, KeyboardInterrupt) as exc:
        logger.info(
            "Play session interrupted",
            extra={"question_id": question_id, "score": state.score},
        )
        raise SessionInterrupted() from exc

    correct = answers_match(question.answer, reply)
    logger.debug(
        "Answer checked",
        extra={"question_id": question_id, "correct": correct},
    )
    if correct:
        state.record_correct()
        reporter.emit(
            Text.assemble(
                ("CORRECT", "bold green"),
                f" - {state.score} correct so far.",
            )
        )
        return

    state.record_wrong()
    reporter.emit(Text("INCORRECT.", style="bold red"))
    if reveal_answer:
        reporter.emit(
            Text.assemble("The correct answer was: ", (question.answer, "bold"))
        )


def _report_end(state: PlaySessionState, reporter: Reporter) -> None:
    if state.status is SessionStatus.WON_ALL_CORRECT:
        reporter.emit("Nothing more to ask.")
        reporter.emit(f"End of quiz. Correct answers: {state.score}")
    else:
        reporter.emit(f"Game over. Correct answers: {state.score}")
    reporter.emit_banner(state.score)
