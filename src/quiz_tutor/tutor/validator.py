"""Well-formedness rules for a single quiz question.

:func:`validate` is pure: it takes one parsed candidate and returns a
:class:`ValidationResult` describing whether the candidate is usable as-is,
usable after repair, or must be excluded from the batch.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from .models import (
    FALSE_LABEL,
    TRUE_LABEL,
    TRUTH_LABELS,
    Question,
    QuestionKind,
)

__all__ = [
    "QuestionCandidate",
    "ValidationStatus",
    "ValidationResult",
    "resolve_kind",
    "validate",
]

_KIND_ALIASES = {
    "mcq": QuestionKind.MCQ,
    "multiple_choice": QuestionKind.MCQ,
    "multiple-choice": QuestionKind.MCQ,
    "tf": QuestionKind.TF,
    "true_false": QuestionKind.TF,
    "true-false": QuestionKind.TF,
    "truefalse": QuestionKind.TF,
}

_BOOLEAN_WORDS = {
    "true": TRUE_LABEL,
    "false": FALSE_LABEL,
}


class ValidationStatus(str, enum.Enum):
    VALID = "valid"
    REPAIRED = "repaired"
    DROPPED = "dropped"
    FATAL = "fatal"


@dataclass(frozen=True)
class QuestionCandidate:
    """A loosely typed question lifted out of an AI payload.

    ``answer`` keeps whatever JSON type the provider sent (string, index,
    boolean) so the validator can decide how to interpret it.
    """

    text: str
    type: str
    answer: Any = None
    options: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ValidationResult:
    status: ValidationStatus
    question: Question | None = None
    reason: str = ""

    @property
    def usable(self) -> bool:
        return self.question is not None


def resolve_kind(raw: str) -> QuestionKind | None:
    return _KIND_ALIASES.get(raw.strip().lower())


def validate(candidate: QuestionCandidate, *, qid: int = 0) -> ValidationResult:
    """Check ``candidate`` and repair it where policy allows.

    - empty text or an unknown type is fatal;
    - a multiple-choice question with fewer than two options, or whose
      answer is not the text of one of its options, is dropped; a numeric
      answer matching a numeric option is kept as that option;
    - a true/false question with an unrecognised answer is kept with the
      first truth label and flagged as low confidence.
    """

    text = candidate.text.strip()
    if not text:
        return ValidationResult(ValidationStatus.FATAL, reason="empty text")
    kind = resolve_kind(candidate.type)
    if kind is None:
        return ValidationResult(
            ValidationStatus.FATAL,
            reason=f"unrecognized type {candidate.type!r}",
        )
    if kind is QuestionKind.MCQ:
        return _validate_mcq(candidate, text=text, qid=qid)
    return _validate_tf(candidate, text=text, qid=qid)


def _validate_mcq(
    candidate: QuestionCandidate, *, text: str, qid: int
) -> ValidationResult:
    options = tuple(
        option.strip() for option in candidate.options or () if option.strip()
    )
    if len(options) < 2:
        return ValidationResult(
            ValidationStatus.DROPPED, reason="fewer than two options"
        )
    raw = candidate.answer
    if isinstance(raw, str) and raw.strip() in options:
        question = Question(
            id=qid,
            text=text,
            type=QuestionKind.MCQ,
            answer=raw.strip(),
            options=options,
        )
        return ValidationResult(ValidationStatus.VALID, question)

    # A number is read as option text, never as an index.
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        answer = str(raw).strip()
        if answer in options:
            question = Question(
                id=qid,
                text=text,
                type=QuestionKind.MCQ,
                answer=answer,
                options=options,
            )
            return ValidationResult(
                ValidationStatus.REPAIRED,
                question,
                reason="numeric answer matched option text",
            )
    return ValidationResult(
        ValidationStatus.DROPPED,
        reason="answer not among options",
    )


def _validate_tf(
    candidate: QuestionCandidate, *, text: str, qid: int
) -> ValidationResult:
    label = _truth_label(candidate.answer)
    if label is not None:
        question = Question(
            id=qid, text=text, type=QuestionKind.TF, answer=label
        )
        return ValidationResult(ValidationStatus.VALID, question)
    question = Question(
        id=qid,
        text=text,
        type=QuestionKind.TF,
        answer=TRUTH_LABELS[0],
        low_confidence=True,
    )
    return ValidationResult(
        ValidationStatus.REPAIRED,
        question,
        reason="answer is not a truth label",
    )


def _truth_label(raw: Any) -> str | None:
    if isinstance(raw, bool):
        return TRUE_LABEL if raw else FALSE_LABEL
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if value in TRUTH_LABELS:
        return value
    return _BOOLEAN_WORDS.get(value.lower())
