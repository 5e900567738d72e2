"""AI capabilities consumed by the session core.

:class:`AICapability` is the boundary: one call that produces a raw quiz
payload and one that produces a chat reply. :class:`OpenAITutorProvider`
implements both on top of OpenAI chat completions. Provider errors are
allowed to propagate; the generation flow and the turn manager convert them.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from quiz_tutor.core.ai import load_client

from .models import FALSE_LABEL, TRUE_LABEL, Difficulty, QuestionType

__all__ = [
    "AICapability",
    "OpenAITutorProvider",
    "build_generation_prompts",
    "build_chat_messages",
]

_GENERATION_SYSTEM_PROMPT = (
    "You are an expert educational assessment designer. You write clear, "
    "unambiguous quiz questions in the same language as the study material "
    "and reply with JSON only."
)

_CHAT_SYSTEM_PROMPT = (
    "You are a friendly educational tutor. Help the student understand the "
    "material and the generated quiz. Answer concisely in the student's "
    "language."
)

_TYPE_INSTRUCTIONS = {
    QuestionType.MCQ: "Every question must be multiple-choice (type \"mcq\").",
    QuestionType.TF: "Every question must be true/false (type \"tf\").",
    QuestionType.MIX: (
        "Mix multiple-choice (type \"mcq\") and true/false (type \"tf\") "
        "questions."
    ),
}


class AICapability(Protocol):
    """Remote AI operations the session core depends on."""

    def generate_questions(
        self,
        context: str,
        question_type: QuestionType,
        difficulty: Difficulty,
        count: int,
        chapter_name: str,
    ) -> Any:
        """Return the raw quiz payload (JSON text or decoded JSON)."""

    def get_chat_response(self, user_text: str, context_snapshot: str) -> str:
        """Return the assistant reply; an empty string is a weak success."""


def build_generation_prompts(
    context: str,
    question_type: QuestionType,
    difficulty: Difficulty,
    count: int,
    chapter_name: str,
) -> tuple[str, str]:
    """Return the system and user prompts for a generation call."""

    schema = (
        '{"questions": [{"text": str, "type": "mcq" | "tf", '
        '"options": [str, ...], "answer": str}]}'
    )
    scope = f"Chapter / topic: {chapter_name}\n" if chapter_name else ""
    user_prompt = (
        f"Material: {context}\n"
        f"{scope}"
        f"Difficulty: {difficulty.value}\n"
        f"Count: {count}\n"
        f"{_TYPE_INSTRUCTIONS[question_type]}\n\n"
        f"Schema:\n{schema}\n\n"
        "Constraints: multiple-choice questions have at least two options "
        "and the answer is copied verbatim from the options; true/false "
        f'questions omit options and answer with "{TRUE_LABEL}" or '
        f'"{FALSE_LABEL}".'
    )
    return _GENERATION_SYSTEM_PROMPT, user_prompt


def build_chat_messages(
    user_text: str, context_snapshot: str
) -> list[Mapping[str, str]]:
    return [
        {"role": "system", "content": _CHAT_SYSTEM_PROMPT},
        {"role": "system", "content": f"Session context: {context_snapshot}"},
        {"role": "user", "content": user_text},
    ]


class OpenAITutorProvider:
    """:class:`AICapability` backed by OpenAI chat completions."""

    def __init__(
        self,
        *,
        model: str,
        temperature: float,
        max_output_tokens: int,
        request_timeout: int,
        api_base: str | None = None,
        client: Any | None = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._timeout = request_timeout
        if client is None:
            client = load_client(api_base=api_base, timeout=request_timeout)
        self._client = client

    @classmethod
    def from_config(
        cls, config: Any, *, client: Any | None = None
    ) -> "OpenAITutorProvider":
        provider = config.providers.openai
        return cls(
            model=provider.chat_model,
            temperature=provider.temperature,
            max_output_tokens=provider.max_output_tokens,
            request_timeout=provider.request_timeout_seconds,
            api_base=provider.api_base,
            client=client,
        )

    def generate_questions(
        self,
        context: str,
        question_type: QuestionType,
        difficulty: Difficulty,
        count: int,
        chapter_name: str,
    ) -> str:
        system_prompt, user_prompt = build_generation_prompts(
            context, question_type, difficulty, count, chapter_name
        )
        return self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
        )

    def get_chat_response(self, user_text: str, context_snapshot: str) -> str:
        return self._complete(build_chat_messages(user_text, context_snapshot))

    def _complete(
        self,
        messages: Sequence[Mapping[str, str]],
        **extra: Any,
    ) -> str:
        response = self._client.chat.completions.create(
            model=self._model,
            messages=[dict(message) for message in messages],
            temperature=self._temperature,
            max_tokens=self._max_output_tokens,
            timeout=self._timeout,
            **extra,
        )
        content = response.choices[0].message.content or ""
        return content.strip()
