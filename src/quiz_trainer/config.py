"""TOML configuration for the quiz trainer.

The file is optional: without one every setting takes its default. When a
file exists it is merged over the defaults and unknown keys are rejected.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .core import config as toml_helpers
from .core import workspace
from .errors import QuizTrainerError

__all__ = [
    "CONFIG_PATH_ENV",
    "CONFIG_FILENAME",
    "ConfigError",
    "StorageConfig",
    "PlayConfig",
    "LoggingConfig",
    "TrainerConfig",
    "resolve_config_path",
    "load_config",
    "config_template",
    "write_template",
]

CONFIG_PATH_ENV = "QUIZ_TRAINER_CONFIG"
CONFIG_FILENAME = "quiz.toml"
STORE_FILENAME = "questions.json"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(QuizTrainerError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class StorageConfig:
    path: Optional[Path]
    seed: bool


@dataclass(frozen=True)
class PlayConfig:
    reveal_answer: bool


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class TrainerConfig:
    storage: StorageConfig
    play: PlayConfig
    credits: tuple[str, ...]
    logging: LoggingConfig

    def store_path(self, layout: workspace.WorkspaceLayout) -> Path:
        """Return the configured store path or the workspace default."""

        if self.storage.path is not None:
            return self.storage.path
        return layout.path_for("data") / STORE_FILENAME


_DEFAULTS: Dict[str, Any] = {
    "storage": {
        "path": None,
        "seed": True,
    },
    "play": {
        "reveal_answer": False,
    },
    "credits": {
        "authors": ["Quiz Trainer contributors"],
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


_CONFIG_TEMPLATE = """
# Quiz trainer configuration

[storage]
# JSON file holding the questions (defaults to <workspace>/data/questions.json)
# path = "~/quizzes/questions.json"
# Populate a missing store with a few sample questions
seed = true

[play]
# Show the expected answer when a game ends on a wrong answer
reveal_answer = false

[credits]
authors = ["Quiz Trainer contributors"]

[logging]
level = "INFO"
verbose = false
"""


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _coerce_optional_path(value: Any, *, field: str) -> Optional[Path]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string when set.")
    return Path(value.strip()).expanduser().resolve()


def _build_storage(section: Mapping[str, Any]) -> StorageConfig:
    return StorageConfig(
        path=_coerce_optional_path(section.get("path"), field="storage.path"),
        seed=_require_bool(section.get("seed"), field="storage.seed"),
    )


def _build_play(section: Mapping[str, Any]) -> PlayConfig:
    return PlayConfig(
        reveal_answer=_require_bool(
            section.get("reveal_answer"), field="play.reveal_answer"
        )
    )


def _build_credits(section: Mapping[str, Any]) -> tuple[str, ...]:
    authors = section.get("authors")
    if not isinstance(authors, list) or not authors or not all(
        isinstance(item, str) and item.strip() for item in authors
    ):
        raise ConfigError("'credits.authors' must be a list of names.")
    return tuple(item.strip() for item in authors)


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = section.get("level")
    if not isinstance(level, str) or level.upper() not in _LEVELS:
        raise ConfigError(
            "logging.level must be one of " + ", ".join(_LEVELS) + "."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level.upper(), verbose=verbose)


def _build_config(tree: Mapping[str, Any]) -> TrainerConfig:
    return TrainerConfig(
        storage=_build_storage(tree["storage"]),
        play=_build_play(tree["play"]),
        credits=_build_credits(tree["credits"]),
        logging=_build_logging(tree["logging"]),
    )


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    layout: workspace.WorkspaceLayout | None = None,
) -> Path:
    """``explicit_path`` > ``QUIZ_TRAINER_CONFIG`` > workspace config dir."""

    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = (env_map.get(CONFIG_PATH_ENV) or "").strip()
    if env_override:
        return Path(env_override).expanduser().resolve()
    if layout is None:
        layout = workspace.ensure_workspace(env=env_map, create=False)
    return layout.path_for("config") / CONFIG_FILENAME


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    layout: workspace.WorkspaceLayout | None = None,
) -> TrainerConfig:
    """Load and validate the configuration.

    A missing file is only an error when its path was given explicitly
    (argument or environment); the implicit workspace file is optional.
    """

    env_map = os.environ if env is None else env
    explicit = explicit_path is not None or bool(
        (env_map.get(CONFIG_PATH_ENV) or "").strip()
    )
    path = resolve_config_path(
        explicit_path=explicit_path, env=env_map, layout=layout
    )
    tree = copy.deepcopy(_DEFAULTS)
    if path.exists() or explicit:
        try:
            data = toml_helpers.load_toml(path)
            tree = toml_helpers.merge_defaults(_DEFAULTS, data)
        except toml_helpers.TomlConfigError as exc:
            raise ConfigError(str(exc)) from exc
    return _build_config(tree)


def config_template() -> str:
    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return toml_helpers.write_toml_template(
            path, template=config_template(), overwrite=overwrite
        )
    except toml_helpers.TomlConfigError as exc:
        raise ConfigError(str(exc)) from exc
