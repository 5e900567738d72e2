"""Session facade handed to the presentation layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from . import phrases
from .config import TutorConfig
from .generation import GenerationFlow, GenerationOutcome
from .models import AppState, ChatMessage, Question, Settings
from .providers import AICapability
from .request import DEFAULT_QUESTION_COUNT
from .store import Observer, SessionStore
from .timestamps import DEFAULT_LOCALE, format_timestamp
from .turns import ChatTurnManager, TurnResult, TurnState

__all__ = ["TutorSession"]


class TutorSession:
    """Wire one store to the generation flow and the chat turn manager.

    Collaborators read :attr:`state` and mutate only through the methods
    below; the store itself is never copied.
    """

    def __init__(
        self,
        capability: AICapability,
        *,
        settings: Settings | None = None,
        locale: str = DEFAULT_LOCALE,
        default_question_count: int = DEFAULT_QUESTION_COUNT,
        clock: Callable[[], datetime] = datetime.now,
        greet: bool = True,
    ) -> None:
        greeting: tuple[ChatMessage, ...] = ()
        if greet:
            greeting = (
                ChatMessage(
                    role="model",
                    text=phrases.WELCOME_MESSAGE,
                    timestamp=format_timestamp(clock(), locale),
                ),
            )
        self.store = SessionStore(settings, messages=greeting)
        self.generation = GenerationFlow(
            self.store,
            capability,
            locale=locale,
            default_count=default_question_count,
            clock=clock,
        )
        self.turns = ChatTurnManager(
            self.store, capability, locale=locale, clock=clock
        )

    @classmethod
    def from_config(
        cls, config: TutorConfig, capability: AICapability, **kwargs: Any
    ) -> "TutorSession":
        session = config.session
        return cls(
            capability,
            settings=session.initial_settings(),
            locale=session.locale,
            default_question_count=session.default_question_count,
            **kwargs,
        )

    @property
    def state(self) -> AppState:
        return self.store.state

    @property
    def turn_state(self) -> TurnState:
        return self.turns.state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        return self.store.subscribe(observer)

    def update_settings(
        self, partial: Mapping[str, Any] | None = None, **changes: Any
    ) -> AppState:
        return self.store.update_settings(partial, **changes)

    def set_questions(self, questions: Iterable[Question]) -> AppState:
        return self.store.set_questions(questions)

    def clear_questions(self) -> AppState:
        return self.store.clear_questions()

    def add_message(self, message: ChatMessage) -> AppState:
        return self.store.add_message(message)

    async def start_generation_flow(self) -> GenerationOutcome | None:
        return await self.generation.start_generation_flow()

    async def send_message(self, text: str | None) -> TurnResult | None:
        return await self.turns.send(text)
