"""Shared testing fixtures and fakes for the quiz_trainer test suite."""

from .trainer import RecordingReporter, ScriptedPrompt  # noqa: F401

__all__ = [
    "RecordingReporter",
    "ScriptedPrompt",
]
