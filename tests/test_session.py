from __future__ import annotations

import random

import pytest

from fixtures import RecordingReporter, ScriptedPrompt
from quiz_trainer.sampler import Sampler
from quiz_trainer.session import (
    MissingQuestionError,
    PlaySessionState,
    SessionInterrupted,
    SessionStatus,
    run_play_session,
)
from quiz_trainer.store import MemoryQuestionStore

ANSWERS = {"2+2 ? ": "4", "capital of France ? ": "pArís"}


def test_empty_store_wins_immediately_without_prompting() -> None:
    prompt = ScriptedPrompt()
    reporter = RecordingReporter()

    result = run_play_session(MemoryQuestionStore(), prompt, reporter)

    assert result.score == 0
    assert result.asked == 0
    assert result.status is SessionStatus.WON_ALL_CORRECT
    assert prompt.prompts == []
    assert "Nothing more to ask." in reporter.lines
    assert reporter.banners == [0]


def test_all_correct_answers_win(store: MemoryQuestionStore) -> None:
    prompt = ScriptedPrompt(responder=ANSWERS.__getitem__)
    reporter = RecordingReporter()

    result = run_play_session(store, prompt, reporter, rng=random.Random(5))

    assert result.score == 2
    assert result.status is SessionStatus.WON_ALL_CORRECT
    assert sorted(prompt.prompts) == sorted(ANSWERS)
    assert "CORRECT - 1 correct so far." in reporter.lines
    assert "CORRECT - 2 correct so far." in reporter.lines
    assert "End of quiz. Correct answers: 2" in reporter.lines
    assert reporter.banners == [2]


def test_wrong_second_answer_loses_with_score_one(
    store: MemoryQuestionStore,
) -> None:
    def responder(text: str) -> str:
        return ANSWERS[text] if not prompt.prompts[:-1] else "wrong"

    prompt = ScriptedPrompt(responder=responder)
    reporter = RecordingReporter()

    result = run_play_session(store, prompt, reporter, rng=random.Random(8))

    assert result.score == 1
    assert result.asked == 2
    assert result.status is SessionStatus.LOST_ON_WRONG_ANSWER
    assert len(prompt.prompts) == 2
    assert "INCORRECT." in reporter.lines
    assert "Game over. Correct answers: 1" in reporter.lines
    assert reporter.banners == [1]


def test_first_wrong_answer_discards_rest_of_pool() -> None:
    store = MemoryQuestionStore.from_pairs(
        [(f"q{n}", f"a{n}") for n in range(10)]
    )
    prompt = ScriptedPrompt(["nope"] * 10)
    reporter = RecordingReporter()

    result = run_play_session(store, prompt, reporter)

    assert result.score == 0
    assert result.status is SessionStatus.LOST_ON_WRONG_ANSWER
    assert len(prompt.prompts) == 1
    assert not any(
        line.startswith("The correct answer") for line in reporter.lines
    )


def test_reveal_answer_option_shows_expected_answer() -> None:
    store = MemoryQuestionStore.from_pairs([("Capital de Francia", "París")])
    reporter = RecordingReporter()

    run_play_session(
        store, ScriptedPrompt(["Lyon"]), reporter, reveal_answer=True
    )

    assert "The correct answer was: París" in reporter.lines


def test_asks_every_question_once_in_random_order() -> None:
    pairs = [(f"q{n}", f"a{n}") for n in range(20)]
    store = MemoryQuestionStore.from_pairs(pairs)
    answers = {f"{q} ? ": a for q, a in pairs}
    prompt = ScriptedPrompt(responder=answers.__getitem__)

    result = run_play_session(
        store, prompt, RecordingReporter(), rng=random.Random(3)
    )

    assert result.score == 20
    assert sorted(prompt.prompts) == sorted(answers)
    assert prompt.prompts != [f"q{n} ? " for n in range(20)]


def test_long_game_does_not_recurse() -> None:
    pairs = [(f"q{n}", "x") for n in range(3000)]
    store = MemoryQuestionStore.from_pairs(pairs)

    result = run_play_session(
        store,
        ScriptedPrompt(responder=lambda text: "x"),
        RecordingReporter(),
    )

    assert result.score == 3000


class _VanishingStore(MemoryQuestionStore):
    """Lists questions it can no longer resolve."""

    def find_by_id(self, question_id: int):
        return None


def test_missing_question_aborts_without_claiming_score() -> None:
    store = _VanishingStore()
    store.create("lost", "question")
    reporter = RecordingReporter()
    prompt = ScriptedPrompt(["question"])

    with pytest.raises(MissingQuestionError) as excinfo:
        run_play_session(store, prompt, reporter)

    assert excinfo.value.question_id == 1
    assert prompt.prompts == []
    assert reporter.banners == []


def test_interrupt_abandons_session(store: MemoryQuestionStore) -> None:
    reporter = RecordingReporter()
    prompt = ScriptedPrompt([KeyboardInterrupt()])

    with pytest.raises(SessionInterrupted):
        run_play_session(store, prompt, reporter)

    assert reporter.banners == []
    assert len(prompt.prompts) == 1


def test_end_of_input_abandons_session(store: MemoryQuestionStore) -> None:
    with pytest.raises(SessionInterrupted):
        run_play_session(store, ScriptedPrompt(), RecordingReporter())


def test_state_transitions() -> None:
    state = PlaySessionState.start([1, 2], rng=random.Random(0))
    assert state.status is SessionStatus.IN_PROGRESS

    state.pool.draw_one()
    state.record_correct()
    assert state.status is SessionStatus.IN_PROGRESS
    assert state.score == 1

    state.pool.draw_one()
    state.record_correct()
    assert state.status is SessionStatus.WON_ALL_CORRECT
    assert state.result().score == 2

    with pytest.raises(RuntimeError):
        state.record_wrong()


def test_state_wrong_answer_is_terminal() -> None:
    state = PlaySessionState(pool=Sampler([1, 2, 3]))
    state.pool.draw_one()
    state.record_wrong()

    assert state.status is SessionStatus.LOST_ON_WRONG_ANSWER
    assert state.status.is_terminal
    assert state.pool.remaining == 2
    with pytest.raises(RuntimeError):
        state.record_correct()


def test_empty_state_starts_terminal() -> None:
    state = PlaySessionState.start([])

    assert state.status is SessionStatus.WON_ALL_CORRECT
    assert state.result().asked == 0
