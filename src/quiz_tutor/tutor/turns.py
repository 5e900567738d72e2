"""Chat turn sequencing with a single in-flight request.

The manager is a two-state machine. A non-blank submission while ``IDLE``
appends the user message, asks the chat capability for a reply using a
context snapshot taken at submission time, and appends exactly one model
message whatever the outcome. Submissions while ``AWAITING_RESPONSE`` are
ignored.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from . import phrases
from .errors import ChatTurnFailed
from .models import ChatMessage, MessageRole
from .providers import AICapability
from .store import SessionStore
from .timestamps import DEFAULT_LOCALE, format_timestamp

__all__ = ["TurnState", "TurnResult", "ChatTurnManager"]

logger = logging.getLogger(__name__)


class TurnState(str, enum.Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


@dataclass(frozen=True)
class TurnResult:
    user_message: ChatMessage
    reply: ChatMessage
    failed: bool = False


class ChatTurnManager:
    def __init__(
        self,
        store: SessionStore,
        capability: AICapability,
        *,
        locale: str = DEFAULT_LOCALE,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._capability = capability
        self._locale = locale
        self._clock = clock
        self._state = TurnState.IDLE

    @property
    def state(self) -> TurnState:
        return self._state

    async def send(self, text: str | None) -> TurnResult | None:
        """Run one turn for ``text``.

        Returns ``None`` when the submission is blank or another turn is
        still awaiting its reply; neither case touches the transcript.
        """

        user_text = (text or "").strip()
        if not user_text:
            logger.debug("Blank chat submission ignored")
            return None
        if self._state is TurnState.AWAITING_RESPONSE:
            logger.info("Chat submission ignored while awaiting a reply")
            return None

        self._state = TurnState.AWAITING_RESPONSE
        try:
            context = self._store.snapshot_context()
            user_message = self._append("user", user_text)
            logger.info("Chat turn started", extra={"chars": len(user_text)})
            failed = False
            try:
                reply_text = await self._request_reply(user_text, context)
            except ChatTurnFailed as exc:
                logger.warning(
                    "Chat turn failed", extra={"reason": str(exc)}
                )
                reply_text = phrases.CONNECTION_FAILED
                failed = True
            reply = self._append("model", reply_text)
        finally:
            self._state = TurnState.IDLE
        return TurnResult(user_message=user_message, reply=reply, failed=failed)

    async def _request_reply(self, user_text: str, context: str) -> str:
        try:
            response = await asyncio.to_thread(
                self._capability.get_chat_response, user_text, context
            )
        except Exception as exc:
            raise ChatTurnFailed(f"Chat request failed: {exc}") from exc
        if response is None or not str(response).strip():
            logger.info("Chat capability returned an empty reply")
            return phrases.NEEDS_MORE_TIME
        return str(response)

    def _append(self, role: MessageRole, text: str) -> ChatMessage:
        message = ChatMessage(
            role=role,
            text=text,
            timestamp=format_timestamp(self._clock(), self._locale),
        )
        self._store.add_message(message)
        return message
