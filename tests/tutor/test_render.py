from __future__ import annotations

from rich.console import Console

from quiz_tutor.tutor import render
from quiz_tutor.tutor.models import ChatMessage, Question, QuestionKind


def _console():
    return Console(record=True, width=100, color_system=None)


def test_empty_quiz_prints_placeholder():
    console = _console()

    render.render_questions(console, ())

    assert "No questions generated yet." in console.export_text()


def test_questions_show_choices_and_marked_answer():
    console = _console()
    questions = (
        Question(
            id=1,
            text="Capital of France?",
            type=QuestionKind.MCQ,
            answer="Paris",
            options=("London", "Paris"),
        ),
        Question(
            id=2,
            text="Water is wet",
            type=QuestionKind.TF,
            answer="صواب",
            low_confidence=True,
        ),
    )

    render.render_questions(console, questions)
    text = console.export_text()

    assert "Capital of France?" in text
    assert "Paris ✔" in text
    assert "London ✔" not in text
    assert "صواب ✔" in text
    assert "(?)" in text


def test_hidden_answers_are_not_marked():
    console = _console()
    question = Question(
        id=1,
        text="Q",
        type=QuestionKind.MCQ,
        answer="b",
        options=("a", "b"),
    )

    render.render_questions(console, [question], show_answers=False)

    assert "✔" not in console.export_text()


def test_transcript_titles_by_role():
    console = _console()

    render.render_transcript(
        console,
        [
            ChatMessage(role="user", text="hello", timestamp="09:00 AM"),
            ChatMessage(role="model", text="hi there", timestamp="09:01 AM"),
        ],
    )
    text = console.export_text()

    assert "You" in text and "Tutor" in text
    assert "09:01 AM" in text


def test_bracketed_text_is_printed_literally():
    console = _console()

    render.render_message(
        console,
        ChatMessage(role="model", text="Use [/b] to close [bold]", timestamp="t"),
    )

    assert "Use [/b] to close [bold]" in console.export_text()
