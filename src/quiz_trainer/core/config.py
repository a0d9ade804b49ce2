"""TOML reading, default merging and template writing."""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any, Iterator, Mapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """Raised when a TOML file cannot be read, parsed or merged."""


def load_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise TomlConfigError(f"Cannot read config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Invalid TOML in {path}: {exc}") from exc


def merge_defaults(
    defaults: Mapping[str, Any], overrides: Mapping[str, Any]
) -> dict[str, Any]:
    """Return a copy of ``defaults`` with ``overrides`` applied.

    Every key the defaults do not know is reported at once, so one run of
    ``quiz config validate`` lists all typos in the file.
    """

    unknown = sorted(_unknown_keys(defaults, overrides))
    if unknown:
        raise TomlConfigError(
            "Unknown configuration key(s): " + ", ".join(unknown) + "."
        )
    merged = copy.deepcopy(dict(defaults))
    _apply(merged, overrides, prefix="")
    return merged


def _unknown_keys(
    defaults: Mapping[str, Any], overrides: Mapping[str, Any], prefix: str = ""
) -> Iterator[str]:
    for key, value in overrides.items():
        if key not in defaults:
            yield prefix + key
        elif isinstance(defaults[key], Mapping) and isinstance(value, Mapping):
            yield from _unknown_keys(defaults[key], value, f"{prefix}{key}.")


def _apply(
    target: dict[str, Any], overrides: Mapping[str, Any], *, prefix: str
) -> None:
    for key, value in overrides.items():
        if not isinstance(target[key], Mapping):
            target[key] = value
            continue
        if not isinstance(value, Mapping):
            raise TomlConfigError(
                f"'{prefix}{key}' must be a table, not {type(value).__name__}."
            )
        _apply(target[key], value, prefix=f"{prefix}{key}.")


def write_toml_template(
    path: Path, *, template: str, overwrite: bool = False
) -> Path:
    """Write ``template`` to ``path`` (mode 0600); keep an existing file
    unless ``overwrite`` is set."""

    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("w" if overwrite else "x", encoding="utf-8") as handle:
            handle.write(template)
    except FileExistsError as exc:
        raise TomlConfigError(f"Config already exists: {path}") from exc
    path.chmod(0o600)
    return path
