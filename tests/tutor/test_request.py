from __future__ import annotations

import pytest

from quiz_tutor.tutor import phrases
from quiz_tutor.tutor.errors import GenerationFailed
from quiz_tutor.tutor.models import Difficulty, QuestionType, Settings
from quiz_tutor.tutor.request import (
    build_context,
    build_request,
    coerce_question_count,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 5), (-3, 5), (None, 5), ("x", 5), (True, 5), (3, 3), ("7", 7)],
)
def test_coerce_question_count(value, expected):
    assert coerce_question_count(value) == expected


def test_coerce_question_count_custom_default():
    assert coerce_question_count(0, default=8) == 8


def test_context_uses_file_name_or_generic_phrase():
    assert build_context(Settings(file_name="bio.pdf")) == "تحليل ملف: bio.pdf"
    assert build_context(Settings(file_name="  ")) == phrases.GENERIC_STUDY_CONTEXT


def test_build_request_converts_settings():
    settings = Settings(
        difficulty="easy",
        question_type="tf",
        question_count=3,
        chapter_name=" Ch.1 ",
    )

    request = build_request(settings)

    assert request.difficulty is Difficulty.EASY
    assert request.question_type is QuestionType.TF
    assert request.count == 3
    assert request.chapter_name == "Ch.1"
    assert request.context == phrases.GENERIC_STUDY_CONTEXT


@pytest.mark.parametrize(
    "settings",
    [
        Settings(difficulty="impossible"),
        Settings(question_type="essay"),
        Settings(question_count=0),
    ],
)
def test_build_request_rejects_invalid_settings(settings):
    with pytest.raises(GenerationFailed):
        build_request(settings)
