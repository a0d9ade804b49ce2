"""Per-user workspace holding the trainer's config, questions and logs.

Layout::

    ~/.quiz-trainer/
        config/quiz.toml
        data/questions.json
        logs/quiz_trainer.log
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

__all__ = [
    "WORKSPACE_ENV",
    "DEFAULT_WORKSPACE",
    "SUBDIRECTORIES",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]

WORKSPACE_ENV = "QUIZ_TRAINER_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quiz-trainer"
SUBDIRECTORIES = ("config", "data", "logs")


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    home: Path

    def path_for(self, name: str) -> Path:
        if name not in SUBDIRECTORIES:
            raise KeyError(f"Unknown workspace directory '{name}'.")
        return self.home / name


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Return the workspace layout, creating directories unless told not to.

    ``path`` beats ``QUIZ_TRAINER_HOME``, which beats ``~/.quiz-trainer``.
    Only the default location falls back to the temp dir when it is not
    writable; an explicitly chosen home that cannot be created is an error.
    """

    home, explicit = _home(os.environ if env is None else env, path)
    if not create:
        _check_entries(home)
        return WorkspaceLayout(home)
    try:
        return _build(home)
    except PermissionError as exc:
        if explicit:
            raise WorkspaceError(
                f"Unable to prepare workspace at {home}: {exc}"
            ) from exc
    fallback = Path(tempfile.gettempdir()) / "quiz-trainer"
    try:
        return _build(fallback)
    except PermissionError as exc:
        raise WorkspaceError(
            f"Unable to prepare workspace at {home} or {fallback}"
        ) from exc


def _home(env: Mapping[str, str], override: Path | None) -> tuple[Path, bool]:
    if override is not None:
        return override.expanduser().resolve(), True
    custom = (env.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().resolve(), True
    return DEFAULT_WORKSPACE.resolve(), False


def _check_entries(home: Path) -> None:
    if home.exists() and not home.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {home}"
        )
    for name in SUBDIRECTORIES:
        entry = home / name
        if entry.exists() and not entry.is_dir():
            raise WorkspaceError(
                f"Workspace entry '{name}' is not a directory: {entry}"
            )


def _build(home: Path) -> WorkspaceLayout:
    _check_entries(home)
    for directory in (home, *(home / name for name in SUBDIRECTORIES)):
        directory.mkdir(parents=True, exist_ok=True)
        directory.chmod(0o700)
    return WorkspaceLayout(home)
