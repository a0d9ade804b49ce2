"""Interactive command-line quiz trainer."""

from .commands import TrainerContext
from .errors import (
    InvalidIdError,
    NotFoundError,
    QuestionValidationError,
    QuizTrainerError,
    StoreError,
)
from .normalize import answers_match, normalize_answer
from .sampler import EmptyPoolError, Sampler
from .session import (
    MissingQuestionError,
    PlayResult,
    PlaySessionState,
    SessionInterrupted,
    SessionStatus,
    run_play_session,
)
from .store import (
    JsonQuestionStore,
    MemoryQuestionStore,
    Question,
    QuestionStore,
)

__all__ = [
    "TrainerContext",
    "InvalidIdError",
    "NotFoundError",
    "QuestionValidationError",
    "QuizTrainerError",
    "StoreError",
    "answers_match",
    "normalize_answer",
    "EmptyPoolError",
    "Sampler",
    "MissingQuestionError",
    "PlayResult",
    "PlaySessionState",
    "SessionInterrupted",
    "SessionStatus",
    "run_play_session",
    "JsonQuestionStore",
    "MemoryQuestionStore",
    "Question",
    "QuestionStore",
]
