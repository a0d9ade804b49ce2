"""Answer normalization used to compare user input with stored answers."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

__all__ = ["ACCENT_MAP", "normalize_answer", "answers_match"]

_ACCENTED = "ÃÀÁÄÂÈÉËÊÌÍÏÎÒÓÖÔÙÚÜÛãàáäâèéëêìíïîòóöôùúüûÑñÇç"
_PLAIN = "AAAAAEEEEIIIIOOOOUUUUaaaaaeeeeiiiioooouuuunncc"

ACCENT_MAP: Mapping[str, str] = MappingProxyType(dict(zip(_ACCENTED, _PLAIN)))

_TRANSLATION = str.maketrans(dict(ACCENT_MAP))
_DISALLOWED = re.compile(r"[^-A-Za-z0-9]+")


def normalize_answer(text: str) -> str:
    """Return ``text`` without accents, punctuation or whitespace, lowercased.

    Only the accented Latin vowels, ``Ñ`` and ``Ç`` are folded; any other
    non-ASCII character is dropped together with punctuation and spaces.
    Hyphens are kept.
    """

    return _DISALLOWED.sub("", text.translate(_TRANSLATION)).lower()


def answers_match(expected: str, given: str) -> bool:
    return normalize_answer(expected) == normalize_answer(given)
