"""JSON-lines logging for the quiz trainer.

Each command appends structured records to ``<workspace>/logs``. Values
passed through ``extra=`` are collected under ``"fields"``, so a game can be
followed through its ``Play session started``, ``Answer checked`` and
``Play session finished`` events.
"""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
]

_FILE_HANDLER = "quiz_trainer.file"
_STDERR_HANDLER = "quiz_trainer.stderr"

# Anything on a record beyond these arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS
        }
        if fields:
            entry["fields"] = fields
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=_jsonable)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Send ``name`` to a rotating JSON file, and to stderr when verbose.

    Handlers are found again by name, so configuring the same logger twice
    only adjusts levels. The log file chosen first stays in use.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handlers = {handler.get_name(): handler for handler in logger.handlers}

    file_handler = handlers.get(_FILE_HANDLER)
    if file_handler is None:
        log_name = filename or f"{name.rsplit('.', 1)[-1]}.log"
        file_handler = RotatingFileHandler(
            _log_file(log_dir, log_name),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.set_name(_FILE_HANDLER)
        file_handler.setFormatter(JsonLogFormatter())
        logger.addHandler(file_handler)
    file_handler.setLevel(logging.DEBUG if verbose else _level(level))

    stderr_handler = handlers.get(_STDERR_HANDLER)
    if verbose and stderr_handler is None:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.set_name(_STDERR_HANDLER)
        stderr_handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(stderr_handler)
    elif not verbose and stderr_handler is not None:
        logger.removeHandler(stderr_handler)
        stderr_handler.close()

    return logger, Path(file_handler.baseFilename)


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return repr(value)


def _log_file(log_dir: Path, filename: str) -> Path:
    """Create the log file (0600), using the temp dir if ``log_dir`` is
    read-only."""

    fallback = Path(tempfile.gettempdir()) / "quiz-trainer-logs"
    for directory in (log_dir, fallback):
        path = directory / filename
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.touch(mode=0o600, exist_ok=True)
        except PermissionError:
            continue
        return path
    raise PermissionError(f"No writable directory for log file {filename}")
