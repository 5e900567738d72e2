from __future__ import annotations

import pytest

from fixtures import FakeOpenAIClient
from quiz_tutor.core import ai
from quiz_tutor.tutor import config as config_mod
from quiz_tutor.tutor.models import Difficulty, QuestionType
from quiz_tutor.tutor.providers import (
    OpenAITutorProvider,
    build_chat_messages,
    build_generation_prompts,
)


def _provider(client):
    return OpenAITutorProvider(
        model="gpt-test",
        temperature=0.2,
        max_output_tokens=300,
        request_timeout=9,
        client=client,
    )


def test_generation_prompt_mentions_request_details():
    system, user = build_generation_prompts(
        "تحليل ملف: bio.pdf", QuestionType.TF, Difficulty.HARD, 4, "Ch.3"
    )

    assert "JSON" in system
    assert "تحليل ملف: bio.pdf" in user
    assert "Chapter / topic: Ch.3" in user
    assert "Difficulty: hard" in user
    assert "Count: 4" in user
    assert 'type "tf"' in user
    assert "صواب" in user and "خطأ" in user


def test_generation_prompt_omits_empty_chapter():
    _, user = build_generation_prompts(
        "ctx", QuestionType.MIX, Difficulty.EASY, 1, ""
    )

    assert "Chapter" not in user


def test_generate_questions_requests_json(openai_client):
    openai_client.queue_response('  {"questions": []}  ')
    provider = _provider(openai_client)

    payload = provider.generate_questions(
        "ctx", QuestionType.MCQ, Difficulty.MEDIUM, 5, ""
    )

    assert payload == '{"questions": []}'
    call = openai_client.last_call
    assert call["model"] == "gpt-test"
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 300
    assert call["timeout"] == 9
    assert call["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in call["messages"]] == ["system", "user"]


def test_chat_response_passes_snapshot(openai_client):
    openai_client.queue_response("answer")
    provider = _provider(openai_client)

    reply = provider.get_chat_response("why?", "اسم الملف: x.")

    assert reply == "answer"
    messages = openai_client.last_call["messages"]
    assert messages == build_chat_messages("why?", "اسم الملف: x.")
    assert "response_format" not in openai_client.last_call


def test_missing_content_becomes_empty_string(openai_client):
    openai_client.queue_response(None)

    assert _provider(openai_client).get_chat_response("hi", "") == ""


def test_client_errors_propagate():
    def fail(_kwargs):
        raise ConnectionError("offline")

    provider = _provider(FakeOpenAIClient(side_effect=fail))

    with pytest.raises(ConnectionError):
        provider.get_chat_response("hi", "ctx")


def test_from_config_builds_client_from_environment(monkeypatch, tmp_path):
    monkeypatch.setattr(ai, "load_dotenv", lambda: False)
    monkeypatch.setenv(ai.API_KEY_ENV, "sk-test")
    monkeypatch.setattr(ai, "OpenAI", FakeOpenAIClient)
    cfg = config_mod.load_config(
        explicit_path=tmp_path / "absent.toml", missing_ok=True
    )

    provider = OpenAITutorProvider.from_config(cfg)

    assert provider._client.init_kwargs == {"api_key": "sk-test", "timeout": 60}
    assert provider._model == "gpt-4o-mini"
