"""Single source of truth for one tutoring session.

The store owns the current :class:`~quiz_tutor.tutor.models.AppState`. Each
mutation builds a new state value and swaps it in, then notifies observers.
There is no locking: callers serialise mutations through the one-in-flight
discipline of the generation flow and the turn manager.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping

from . import phrases
from .models import AppState, ChatMessage, Question, Settings

__all__ = ["Observer", "SessionStore"]

logger = logging.getLogger(__name__)

Observer = Callable[[AppState], None]


class SessionStore:
    """Hold the session state and expose its mutation operations."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        messages: Iterable[ChatMessage] = (),
    ) -> None:
        self._state = AppState(
            settings=settings or Settings(),
            messages=tuple(messages),
        )
        self._observers: list[Observer] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer``; the returned callable unsubscribes it."""

        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def update_settings(
        self,
        partial: Mapping[str, Any] | None = None,
        **changes: Any,
    ) -> AppState:
        """Shallow-merge ``partial`` and ``changes`` into the settings.

        Only field names are checked; values are stored as given and
        validated when a generation request is built.
        """

        merged = dict(partial or {})
        merged.update(changes)
        unknown = sorted(set(merged) - Settings.field_names())
        if unknown:
            raise KeyError(f"Unknown settings field(s): {', '.join(unknown)}")
        settings = replace(self._state.settings, **merged)
        return self._commit(replace(self._state, settings=settings))

    def set_questions(self, questions: Iterable[Question]) -> AppState:
        """Replace the whole question list."""

        return self._commit(replace(self._state, questions=tuple(questions)))

    def clear_questions(self) -> AppState:
        return self.set_questions(())

    def add_message(self, message: ChatMessage) -> AppState:
        """Append ``message`` to the transcript."""

        messages = self._state.messages + (message,)
        return self._commit(replace(self._state, messages=messages))

    def snapshot_context(self) -> str:
        """Summarise the latest committed settings for the chat capability."""

        state = self._state
        difficulty = getattr(
            state.settings.difficulty, "value", state.settings.difficulty
        )
        return phrases.chat_context(
            state.settings.file_name,
            difficulty,
            len(state.questions),
        )

    def _commit(self, state: AppState) -> AppState:
        self._state = state
        logger.debug(
            "Session state committed",
            extra={
                "questions": len(state.questions),
                "messages": len(state.messages),
            },
        )
        for observer in list(self._observers):
            observer(state)
        return state
