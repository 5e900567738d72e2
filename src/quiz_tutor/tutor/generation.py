"""Generation flow: settings -> request -> AI capability -> translator -> store."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from . import phrases
from .errors import GenerationFailed
from .models import ChatMessage, Question
from .providers import AICapability
from .request import (
    DEFAULT_QUESTION_COUNT,
    GenerationRequest,
    build_request,
    coerce_question_count,
)
from .store import SessionStore
from .timestamps import DEFAULT_LOCALE, format_timestamp
from .translator import TranslationResult, translate_payload

__all__ = ["GenerationOutcome", "GenerationFlow"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    """Result reported back to the presentation layer."""

    succeeded: bool
    questions: tuple[Question, ...] = ()
    error: GenerationFailed | None = None


class GenerationFlow:
    """Run one generation at a time against a session store.

    On success the new questions replace the old ones and a summary reply is
    appended to the transcript. On any failure the store's questions are
    left untouched.
    """

    def __init__(
        self,
        store: SessionStore,
        capability: AICapability,
        *,
        locale: str = DEFAULT_LOCALE,
        default_count: int = DEFAULT_QUESTION_COUNT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._capability = capability
        self._locale = locale
        self._default_count = default_count
        self._clock = clock
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def start_generation_flow(self) -> GenerationOutcome | None:
        """Generate a new quiz from the current settings.

        Returns ``None`` without doing anything when a generation is already
        running.
        """

        if self._in_flight:
            logger.info("Generation already in flight; request ignored")
            return None
        self._in_flight = True
        try:
            questions = await self._generate()
        except GenerationFailed as exc:
            logger.warning(
                "Generation failed",
                extra={"reason": exc.reason},
                exc_info=exc.__cause__ is not None,
            )
            return GenerationOutcome(succeeded=False, error=exc)
        finally:
            self._in_flight = False
        return GenerationOutcome(succeeded=True, questions=questions)

    async def _generate(self) -> tuple[Question, ...]:
        request = self._prepare_request()
        logger.info(
            "Generation started",
            extra={
                "question_type": request.question_type.value,
                "difficulty": request.difficulty.value,
                "count": request.count,
            },
        )
        payload = await self._call_capability(request)
        result = translate_payload(
            payload, requested_type=request.question_type
        )
        self._commit(request, result)
        return result.questions

    def _prepare_request(self) -> GenerationRequest:
        settings = self._store.state.settings
        count = coerce_question_count(
            settings.question_count, self._default_count
        )
        if count != settings.question_count:
            self._store.update_settings(question_count=count)
        return build_request(self._store.state.settings)

    async def _call_capability(self, request: GenerationRequest) -> object:
        try:
            return await asyncio.to_thread(
                self._capability.generate_questions,
                request.context,
                request.question_type,
                request.difficulty,
                request.count,
                request.chapter_name,
            )
        except Exception as exc:
            raise GenerationFailed(
                f"Question generation request failed: {exc}"
            ) from exc

    def _commit(
        self, request: GenerationRequest, result: TranslationResult
    ) -> None:
        self._store.set_questions(result.questions)
        summary = phrases.generation_summary(
            request.chapter_name,
            len(result.questions),
            request.difficulty.value,
        )
        self._store.add_message(
            ChatMessage(
                role="model",
                text=summary,
                timestamp=format_timestamp(self._clock(), self._locale),
            )
        )
        logger.info(
            "Generation succeeded",
            extra={
                "questions": len(result.questions),
                "repaired": result.repaired,
                "dropped": result.dropped,
                "fatal": result.fatal,
            },
        )
