"""Turn a raw AI reply into an ordered batch of validated questions.

Pipeline: decode the payload, lift each record into a
:class:`~quiz_tutor.tutor.validator.QuestionCandidate` with an explicit
fallback for every field, validate, then number the survivors ``1..N`` in
payload order. An empty result is a failure, never an empty quiz.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .errors import GenerationFailed
from .models import Question, QuestionType
from .validator import (
    QuestionCandidate,
    ValidationStatus,
    validate,
)

__all__ = [
    "TranslationResult",
    "decode_payload",
    "extract_records",
    "to_candidate",
    "translate_payload",
]

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.+?)```", re.DOTALL)
_TEXT_KEYS = ("text", "question", "stem")
_OPTION_KEYS = ("options", "choices")


@dataclass(frozen=True)
class TranslationResult:
    questions: tuple[Question, ...]
    repaired: int = 0
    dropped: int = 0
    fatal: int = 0


def translate_payload(
    payload: Any,
    *,
    requested_type: QuestionType | str = QuestionType.MIX,
) -> TranslationResult:
    """Translate ``payload`` into validated questions.

    Raises :class:`GenerationFailed` when the payload cannot be decoded or
    no record survives validation.
    """

    requested = _requested_type(requested_type)
    records = extract_records(decode_payload(payload))
    counts = {status: 0 for status in ValidationStatus}
    kept: list[Question] = []
    for position, record in enumerate(records, start=1):
        if not isinstance(record, Mapping):
            counts[ValidationStatus.FATAL] += 1
            logger.debug(
                "Skipping non-mapping record",
                extra={"position": position},
            )
            continue
        result = validate(
            to_candidate(record, requested=requested),
            qid=len(kept) + 1,
        )
        counts[result.status] += 1
        if result.status is not ValidationStatus.VALID:
            logger.debug(
                "Question %s during validation",
                result.status.value,
                extra={"position": position, "reason": result.reason},
            )
        if result.question is not None:
            kept.append(result.question)

    if not kept:
        raise GenerationFailed(
            f"No valid questions in AI response ({len(records)} records)."
        )
    return TranslationResult(
        questions=tuple(kept),
        repaired=counts[ValidationStatus.REPAIRED],
        dropped=counts[ValidationStatus.DROPPED],
        fatal=counts[ValidationStatus.FATAL],
    )


def decode_payload(payload: Any) -> Any:
    """Decode text payloads as JSON.

    The whole reply is parsed first; a fenced code block is only looked for
    when that fails.
    """

    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    if not isinstance(payload, str):
        return payload
    text = payload.strip()
    if not text:
        raise GenerationFailed("AI response was empty.")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        fenced = _FENCE_RE.search(text)
        if fenced is None:
            raise GenerationFailed(
                f"AI response is not valid JSON: {exc}"
            ) from exc
    try:
        return json.loads(fenced.group(1).strip())
    except json.JSONDecodeError as exc:
        raise GenerationFailed(f"AI response is not valid JSON: {exc}") from exc


def extract_records(data: Any) -> Sequence[Any]:
    """Return the candidate records from decoded JSON.

    Accepts ``{"questions": [...]}`` or a bare list of records.
    """

    if isinstance(data, Mapping):
        records = data.get("questions")
        if isinstance(records, list):
            return records
        raise GenerationFailed("AI response has no 'questions' list.")
    if isinstance(data, list):
        return data
    raise GenerationFailed(
        f"AI response has unexpected shape: {type(data).__name__}."
    )


def to_candidate(
    record: Mapping[str, Any],
    *,
    requested: QuestionType = QuestionType.MIX,
) -> QuestionCandidate:
    """Lift one record into a candidate, filling gaps with fallbacks.

    A missing ``type`` takes the requested type; under ``mix`` it is taken
    to be multiple-choice when the record carries options and true/false
    otherwise. Ids in the record are ignored.
    """

    text = _first_string(record, _TEXT_KEYS)
    options = _options(record)
    raw_type = record.get("type")
    if isinstance(raw_type, str) and raw_type.strip():
        kind = raw_type
    elif requested is not QuestionType.MIX:
        kind = requested.value
    else:
        kind = "mcq" if options else "tf"
    return QuestionCandidate(
        text=text,
        type=kind,
        answer=record.get("answer"),
        options=options,
    )


def _requested_type(value: QuestionType | str) -> QuestionType:
    try:
        return QuestionType(value)
    except ValueError:
        return QuestionType.MIX


def _first_string(record: Mapping[str, Any], keys: Sequence[str]) -> str:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _options(record: Mapping[str, Any]) -> tuple[str, ...] | None:
    raw = None
    for key in _OPTION_KEYS:
        if key in record:
            raw = record[key]
            break
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        raw = list(raw.values())
    if not isinstance(raw, list):
        return None
    options: list[str] = []
    for item in raw:
        if isinstance(item, Mapping):
            item = item.get("text", "")
        if item is None:
            continue
        options.append(str(item))
    return tuple(options)
