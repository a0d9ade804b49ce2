"""Exception hierarchy shared by the quiz-trainer commands."""

from __future__ import annotations

from typing import Sequence


class QuizTrainerError(RuntimeError):
    """Base class for errors reported to the user without ending the shell."""


class InvalidIdError(QuizTrainerError):
    """The ``<id>`` argument is missing or not an integer."""


class NotFoundError(QuizTrainerError):
    """A well-formed id does not match any stored question."""

    def __init__(self, question_id: int) -> None:
        super().__init__(f"There is no quiz with id={question_id}.")
        self.question_id = question_id


class QuestionValidationError(QuizTrainerError):
    """A question or answer failed validation before being stored."""

    def __init__(self, messages: Sequence[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = tuple(messages)


class StoreError(QuizTrainerError):
    """The question store could not be read or written."""
