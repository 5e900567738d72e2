"""Session data model: settings, quiz questions, and the chat transcript.

Every record here is an immutable dataclass. The session store swaps whole
values on mutation instead of editing them in place, so a snapshot handed to
a caller can never drift underneath it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, Literal, MutableMapping

__all__ = [
    "TRUE_LABEL",
    "FALSE_LABEL",
    "TRUTH_LABELS",
    "Difficulty",
    "QuestionType",
    "QuestionKind",
    "Settings",
    "Question",
    "ChatMessage",
    "MessageRole",
    "AppState",
]

TRUE_LABEL = "صواب"
FALSE_LABEL = "خطأ"
TRUTH_LABELS: tuple[str, str] = (TRUE_LABEL, FALSE_LABEL)

MessageRole = Literal["user", "model"]


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionType(str, enum.Enum):
    """Question mix requested for a generation."""

    MCQ = "mcq"
    TF = "tf"
    MIX = "mix"


class QuestionKind(str, enum.Enum):
    """Concrete type of a single generated question."""

    MCQ = "mcq"
    TF = "tf"


@dataclass(frozen=True)
class Settings:
    """User-chosen generation settings.

    Values are stored as given; ``question_count`` may sit at ``0`` while the
    user is still editing. Validation happens when a generation request is
    built.
    """

    difficulty: Difficulty | str = Difficulty.MEDIUM
    question_type: QuestionType | str = QuestionType.MCQ
    show_answers: bool = True
    file_name: str = ""
    question_count: int = 5
    chapter_name: str = ""

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(item.name for item in fields(cls))

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            "difficulty": _plain(self.difficulty),
            "question_type": _plain(self.question_type),
            "show_answers": self.show_answers,
            "file_name": self.file_name,
            "question_count": self.question_count,
            "chapter_name": self.chapter_name,
        }


@dataclass(frozen=True)
class Question:
    """A validated quiz question.

    ``options`` is only meaningful for multiple-choice questions; true/false
    questions always answer with one of :data:`TRUTH_LABELS`.
    ``low_confidence`` marks a question whose answer was defaulted during
    repair.
    """

    id: int
    text: str
    type: QuestionKind
    answer: str
    options: tuple[str, ...] = ()
    low_confidence: bool = False

    @property
    def choices(self) -> tuple[str, ...]:
        if self.type is QuestionKind.TF:
            return TRUTH_LABELS
        return self.options

    def to_dict(self) -> MutableMapping[str, Any]:
        payload: MutableMapping[str, Any] = {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "answer": self.answer,
        }
        if self.type is QuestionKind.MCQ:
            payload["options"] = list(self.options)
        if self.low_confidence:
            payload["low_confidence"] = True
        return payload


@dataclass(frozen=True)
class ChatMessage:
    """One transcript entry; ``timestamp`` is display text only."""

    role: MessageRole
    text: str
    timestamp: str


@dataclass(frozen=True)
class AppState:
    settings: Settings = field(default_factory=Settings)
    questions: tuple[Question, ...] = ()
    messages: tuple[ChatMessage, ...] = ()


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value
