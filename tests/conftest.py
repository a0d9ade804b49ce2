from __future__ import annotations

import logging
import random
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

ROOT = TESTS_DIR.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fixtures import (  # noqa: E402
    RecordingReporter,
    ScriptedPrompt,
)
from quiz_trainer.commands import TrainerContext  # noqa: E402
from quiz_trainer.core.workspace import WORKSPACE_ENV  # noqa: E402
from quiz_trainer.store import MemoryQuestionStore  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_workspace(tmp_path, monkeypatch) -> Iterator[Path]:
    """Keep every test away from the real ~/.quiz-trainer and its config."""

    home = tmp_path / "quiz-home"
    monkeypatch.setenv(WORKSPACE_ENV, str(home))
    monkeypatch.delenv("QUIZ_TRAINER_CONFIG", raising=False)
    yield home


@pytest.fixture
def store() -> MemoryQuestionStore:
    """Two questions: ``2+2`` -> ``4`` and ``capital of France`` -> ``Paris``."""

    return MemoryQuestionStore.from_pairs(
        [("2+2", "4"), ("capital of France", "Paris")]
    )


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def make_context(
    store: MemoryQuestionStore, reporter: RecordingReporter
) -> Callable[..., TrainerContext]:
    def _make(*replies, responder=None, **options) -> TrainerContext:
        options.setdefault("rng", random.Random(1234))
        return TrainerContext(
            store=options.pop("store", store),
            prompt=ScriptedPrompt(replies, responder=responder),
            reporter=reporter,
            **options,
        )

    return _make


@pytest.fixture(autouse=True)
def _reset_trainer_logger() -> Iterator[None]:
    """Drop handlers the CLI attaches so tests do not leak log files."""

    yield
    logger = logging.getLogger("quiz_trainer")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
