from __future__ import annotations

import pytest

from quiz_tutor.tutor.models import (
    ChatMessage,
    Difficulty,
    Question,
    QuestionKind,
    Settings,
)
from quiz_tutor.tutor.store import SessionStore

QUESTIONS = (
    Question(id=1, text="A", type=QuestionKind.TF, answer="صواب"),
    Question(id=2, text="B", type=QuestionKind.TF, answer="خطأ"),
)


def test_update_settings_merges_and_swaps_state():
    store = SessionStore()
    before = store.state

    after = store.update_settings({"difficulty": Difficulty.HARD}, file_name="x.pdf")

    assert after is store.state
    assert after is not before
    assert before.settings == Settings()
    assert after.settings.difficulty is Difficulty.HARD
    assert after.settings.file_name == "x.pdf"


def test_update_settings_stores_raw_values():
    store = SessionStore()

    store.update_settings(question_count=0)

    assert store.state.settings.question_count == 0


def test_update_settings_rejects_unknown_fields():
    store = SessionStore()

    with pytest.raises(KeyError, match="colour"):
        store.update_settings(colour="red")
    assert store.state.settings == Settings()


def test_set_questions_is_idempotent():
    store = SessionStore()

    once = store.set_questions(QUESTIONS)
    twice = store.set_questions(list(QUESTIONS))

    assert once == twice
    assert store.state.questions == QUESTIONS


def test_clear_questions():
    store = SessionStore()
    store.set_questions(QUESTIONS)

    store.clear_questions()

    assert store.state.questions == ()


def test_add_message_appends_in_order():
    greeting = ChatMessage(role="model", text="hi", timestamp="t0")
    store = SessionStore(messages=[greeting])

    store.add_message(ChatMessage(role="user", text="q", timestamp="t1"))

    assert [m.text for m in store.state.messages] == ["hi", "q"]


def test_observers_are_notified_until_unsubscribed():
    store = SessionStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.update_settings(chapter_name="Ch.2")
    unsubscribe()
    unsubscribe()
    store.clear_questions()

    assert len(seen) == 1
    assert seen[0].settings.chapter_name == "Ch.2"


def test_snapshot_context_reflects_latest_settings():
    store = SessionStore(Settings(difficulty=Difficulty.EASY))
    store.set_questions(QUESTIONS)

    assert store.snapshot_context() == (
        "اسم الملف: غير محدد. مستوى الصعوبة: easy. "
        "عدد الأسئلة المنشأة حالياً: 2."
    )

    store.update_settings(file_name="notes.pdf")
    assert "اسم الملف: notes.pdf." in store.snapshot_context()
