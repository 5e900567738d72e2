"""Build generation requests from session settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from . import phrases
from .errors import GenerationFailed
from .models import Difficulty, QuestionType, Settings

__all__ = [
    "DEFAULT_QUESTION_COUNT",
    "GenerationRequest",
    "build_context",
    "build_request",
    "coerce_question_count",
]

DEFAULT_QUESTION_COUNT = 5


@dataclass(frozen=True)
class GenerationRequest:
    context: str
    question_type: QuestionType
    difficulty: Difficulty
    count: int
    chapter_name: str


def build_context(settings: Settings) -> str:
    """Describe the study material for the generation call.

    Deterministic: the chosen file name, or a generic phrase when no file
    was picked.
    """

    file_name = (settings.file_name or "").strip()
    if file_name:
        return phrases.file_context(file_name)
    return phrases.GENERIC_STUDY_CONTEXT


def coerce_question_count(
    value: Any, default: int = DEFAULT_QUESTION_COUNT
) -> int:
    """Return ``value`` as a positive count, or ``default`` when it is not."""

    if isinstance(value, bool):
        return default
    try:
        count = int(value)
    except (TypeError, ValueError):
        return default
    return count if count >= 1 else default


def build_request(settings: Settings) -> GenerationRequest:
    """Validate ``settings`` and assemble the request.

    The caller is expected to have coerced ``question_count`` already; a
    non-positive count here is a programming error reported as a failed
    generation.
    """

    try:
        difficulty = Difficulty(settings.difficulty)
    except ValueError as exc:
        raise GenerationFailed(
            f"Unknown difficulty: {settings.difficulty!r}"
        ) from exc
    try:
        question_type = QuestionType(settings.question_type)
    except ValueError as exc:
        raise GenerationFailed(
            f"Unknown question type: {settings.question_type!r}"
        ) from exc
    count = settings.question_count
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise GenerationFailed(f"Question count must be >= 1, got {count!r}")
    return GenerationRequest(
        context=build_context(settings),
        question_type=question_type,
        difficulty=difficulty,
        count=count,
        chapter_name=(settings.chapter_name or "").strip(),
    )
