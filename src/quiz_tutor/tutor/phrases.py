"""Fixed user-facing phrases used by the session core."""

from __future__ import annotations

from typing import Any

__all__ = [
    "WELCOME_MESSAGE",
    "NEEDS_MORE_TIME",
    "CONNECTION_FAILED",
    "GENERIC_STUDY_CONTEXT",
    "UNSPECIFIED_FILE",
    "file_context",
    "chat_context",
    "generation_summary",
]

WELCOME_MESSAGE = (
    "أهلاً بك! أنا خبيرك التعليمي الذكي. 🎓 "
    "يمكنني مساعدتك في تحليل ملفاتك وتوليد أسئلة احترافية. "
    "ابدأ برفع ملفك وتحديد الفصل من الإعدادات لنبدأ!"
)
NEEDS_MORE_TIME = "عذراً، أحتاج لمزيد من الوقت للتفكير."
CONNECTION_FAILED = "حدث خطأ في الاتصال بالمساعد الذكي."
GENERIC_STUDY_CONTEXT = "دراسة مادة علمية عامة"
UNSPECIFIED_FILE = "غير محدد"


def file_context(file_name: str) -> str:
    return f"تحليل ملف: {file_name}"


def chat_context(file_name: str, difficulty: Any, question_count: int) -> str:
    return (
        f"اسم الملف: {file_name or UNSPECIFIED_FILE}. "
        f"مستوى الصعوبة: {difficulty}. "
        f"عدد الأسئلة المنشأة حالياً: {question_count}."
    )


def generation_summary(chapter_name: str, count: int, difficulty: Any) -> str:
    subject = f'الفصل "{chapter_name}"' if chapter_name else "المحتوى"
    return (
        f"لقد انتهيت من تحليل {subject}. 🚀 "
        f"قمت بتجهيز {count} أسئلة بمستوى {difficulty}. "
        "هل نراجعها سوياً؟"
    )
