"""Question records and the stores that own them.

The play session and the single-item commands only depend on the
:class:`QuestionStore` protocol. Two implementations live here: an in-memory
store (tests, throwaway sessions) and a JSON file store that persists the
question bank under the workspace ``data`` directory.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, MutableMapping, Protocol

from .errors import NotFoundError, QuestionValidationError, StoreError

__all__ = [
    "Question",
    "QuestionStore",
    "MemoryQuestionStore",
    "JsonQuestionStore",
    "SEED_QUESTIONS",
    "validate_question",
]

logger = logging.getLogger("quiz_trainer.store")

_FORMAT_VERSION = 1
_LOCK_SUFFIX = ".lock"
_LOCK_TIMEOUT_SECONDS = 5.0

SEED_QUESTIONS: tuple[tuple[str, str], ...] = (
    ("Capital de Italia", "Roma"),
    ("Capital de Francia", "París"),
    ("Capital de España", "Madrid"),
    ("Capital de Portugal", "Lisboa"),
)


@dataclass(frozen=True)
class Question:
    """A stored question/answer pair."""

    id: int
    question: str
    answer: str

    def to_dict(self) -> MutableMapping[str, Any]:
        return {"id": self.id, "question": self.question, "answer": self.answer}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Question":
        if not isinstance(payload, Mapping):
            raise StoreError("Question record must be a JSON object.")
        try:
            raw_id = payload["id"]
            question = payload["question"]
            answer = payload["answer"]
        except KeyError as exc:
            raise StoreError(
                f"Question record missing required field: {exc}"
            ) from exc
        if not isinstance(raw_id, int) or isinstance(raw_id, bool):
            raise StoreError(f"Question id must be an integer: {raw_id!r}")
        if not isinstance(question, str) or not isinstance(answer, str):
            raise StoreError(
                f"Question id={raw_id} must store text, not "
                f"{type(question).__name__}/{type(answer).__name__}."
            )
        try:
            question, answer = validate_question(question, answer)
        except QuestionValidationError as exc:
            raise StoreError(
                f"Invalid question id={raw_id}: " + " ".join(exc.messages)
            ) from exc
        return cls(id=raw_id, question=question, answer=answer)


class QuestionStore(Protocol):
    def list_all(self) -> list[Question]: ...

    def find_by_id(self, question_id: int) -> Question | None: ...

    def create(self, question: str, answer: str) -> Question: ...

    def update(
        self, question_id: int, question: str, answer: str
    ) -> Question: ...

    def delete(self, question_id: int) -> None: ...


def validate_question(question: str, answer: str) -> tuple[str, str]:
    """Return the trimmed pair or raise with every problem found."""

    question = question.strip()
    answer = answer.strip()
    problems: list[str] = []
    if not question:
        problems.append("The question must not be empty.")
    if not answer:
        problems.append("The answer must not be empty.")
    if problems:
        raise QuestionValidationError(problems)
    return question, answer


class MemoryQuestionStore:
    """Dictionary-backed store; ids increase from the largest one seen."""

    def __init__(self, questions: Iterable[Question] = ()) -> None:
        self._questions: dict[int, Question] = {}
        for item in questions:
            if item.id in self._questions:
                raise StoreError(f"Duplicate question id: {item.id}")
            self._questions[item.id] = item

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[tuple[str, str]]
    ) -> "MemoryQuestionStore":
        store = cls()
        for question, answer in pairs:
            store.create(question, answer)
        return store

    def list_all(self) -> list[Question]:
        return [self._questions[key] for key in sorted(self._questions)]

    def find_by_id(self, question_id: int) -> Question | None:
        return self._questions.get(question_id)

    def create(self, question: str, answer: str) -> Question:
        question, answer = validate_question(question, answer)
        record = Question(self._next_id(), question, answer)
        self._questions[record.id] = record
        return record

    def update(self, question_id: int, question: str, answer: str) -> Question:
        if question_id not in self._questions:
            raise NotFoundError(question_id)
        question, answer = validate_question(question, answer)
        record = Question(question_id, question, answer)
        self._questions[question_id] = record
        return record

    def delete(self, question_id: int) -> None:
        if self._questions.pop(question_id, None) is None:
            raise NotFoundError(question_id)

    def _next_id(self) -> int:
        return max(self._questions, default=0) + 1


class JsonQuestionStore:
    """Persist questions as a single JSON document.

    Every mutation re-reads the file under an exclusive lock, applies the
    change through a :class:`MemoryQuestionStore` and writes the result
    atomically, so edits from another process are never overwritten with a
    stale copy.
    """

    def __init__(
        self, path: Path, *, seed: Iterable[tuple[str, str]] = ()
    ) -> None:
        self._path = path
        seed_pairs = tuple(seed)
        if seed_pairs and not path.exists():
            with _StoreLock(self._lock_path):
                self._write(MemoryQuestionStore.from_pairs(seed_pairs))
            logger.info(
                "Seeded question store",
                extra={"path": str(path), "count": len(seed_pairs)},
            )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def _lock_path(self) -> Path:
        return self._path.with_name(self._path.name + _LOCK_SUFFIX)

    def list_all(self) -> list[Question]:
        return self._read().list_all()

    def find_by_id(self, question_id: int) -> Question | None:
        return self._read().find_by_id(question_id)

    def create(self, question: str, answer: str) -> Question:
        with _StoreLock(self._lock_path):
            memory = self._read()
            record = memory.create(question, answer)
            self._write(memory)
        logger.info("Created question", extra={"question_id": record.id})
        return record

    def update(self, question_id: int, question: str, answer: str) -> Question:
        with _StoreLock(self._lock_path):
            memory = self._read()
            record = memory.update(question_id, question, answer)
            self._write(memory)
        logger.info("Updated question", extra={"question_id": question_id})
        return record

    def delete(self, question_id: int) -> None:
        with _StoreLock(self._lock_path):
            memory = self._read()
            memory.delete(question_id)
            self._write(memory)
        logger.info("Deleted question", extra={"question_id": question_id})

    def _read(self) -> MemoryQuestionStore:
        if not self._path.exists():
            return MemoryQuestionStore()
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StoreError(
                f"Failed to parse question store: {self._path}"
            ) from exc
        except OSError as exc:
            raise StoreError(
                f"Failed to read question store: {self._path}"
            ) from exc
        if not isinstance(payload, Mapping):
            raise StoreError("Question store root must be a JSON object.")
        version = payload.get("version")
        if version != _FORMAT_VERSION:
            raise StoreError(
                f"Unsupported question store version: {version!r}"
            )
        records = payload.get("questions", [])
        if not isinstance(records, list):
            raise StoreError("'questions' must be a list.")
        return MemoryQuestionStore(Question.from_dict(item) for item in records)

    def _write(self, memory: MemoryQuestionStore) -> None:
        payload = {
            "version": _FORMAT_VERSION,
            "questions": [item.to_dict() for item in memory.list_all()],
        }
        try:
            _atomic_write_json(self._path, payload)
        except OSError as exc:
            raise StoreError(
                f"Failed to write question store: {self._path}"
            ) from exc


class _StoreLock:
    """Filesystem lock using exclusive creation of a sibling file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def __enter__(self) -> "_StoreLock":
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(
                f"Cannot create store directory: {self._path.parent}"
            ) from exc
        deadline = time.monotonic() + _LOCK_TIMEOUT_SECONDS
        while not self._acquire():
            if time.monotonic() > deadline:
                raise StoreError(
                    f"Timed out waiting for store lock: {self._path}"
                )
            time.sleep(0.05)
        return self

    def _acquire(self) -> bool:
        try:
            fd = os.open(self._path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            return False
        except OSError as exc:
            raise StoreError(
                f"Cannot create store lock: {self._path}"
            ) from exc
        os.close(fd)
        return True

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self._path.unlink(missing_ok=True)


def _atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        delete=False,
        encoding="utf-8",
        dir=str(path.parent),
        suffix=".tmp",
    )
    try:
        with handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(handle.name, path)
    except BaseException:
        Path(handle.name).unlink(missing_ok=True)
        raise
