"""Quiz generation and tutoring chat session core."""

from .errors import ChatTurnFailed, GenerationFailed
from .generation import GenerationFlow, GenerationOutcome
from .models import (
    AppState,
    ChatMessage,
    Difficulty,
    Question,
    QuestionKind,
    QuestionType,
    Settings,
)
from .session import TutorSession
from .store import SessionStore
from .turns import ChatTurnManager, TurnResult, TurnState

__all__ = [
    "AppState",
    "ChatMessage",
    "ChatTurnFailed",
    "ChatTurnManager",
    "Difficulty",
    "GenerationFailed",
    "GenerationFlow",
    "GenerationOutcome",
    "Question",
    "QuestionKind",
    "QuestionType",
    "SessionStore",
    "Settings",
    "TurnResult",
    "TurnState",
    "TutorSession",
]
