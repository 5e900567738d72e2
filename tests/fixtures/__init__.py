"""Shared testing fixtures for the quiz-tutor test suite."""

from .capabilities import (  # noqa: F401
    BlockingCapability,
    FakeCapability,
    mcq,
    quiz_payload,
    tf,
)
from .openai import FakeOpenAIClient  # noqa: F401
from .workspace import WorkspaceBuilder  # noqa: F401

__all__ = [
    "BlockingCapability",
    "FakeCapability",
    "FakeOpenAIClient",
    "WorkspaceBuilder",
    "mcq",
    "quiz_payload",
    "tf",
]
