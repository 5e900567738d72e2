"""Rich rendering for quiz questions and chat messages."""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ChatMessage, Question, QuestionKind

__all__ = ["render_questions", "render_message", "render_transcript"]

_KIND_LABELS = {
    QuestionKind.MCQ: "اختياري",
    QuestionKind.TF: "صواب/خطأ",
}


def render_questions(
    console: Console,
    questions: Sequence[Question],
    *,
    show_answers: bool = True,
) -> None:
    """Print each question with its choices, marking answers when asked."""

    if not questions:
        console.print(
            Panel(
                "No questions generated yet.",
                title="Quiz",
                border_style="yellow",
            )
        )
        return
    for question in questions:
        header = Text.assemble(
            (f"{question.id}. ", "bold cyan"),
            (_KIND_LABELS[question.type], "dim"),
        )
        if question.low_confidence:
            header.append("  (?)", style="yellow")
        console.print()
        console.rule(header)
        console.print(Text(question.text, style="bold"))

        table = Table(show_header=False, box=box.SIMPLE, expand=True)
        table.add_column("Key", justify="center", style="cyan")
        table.add_column("Choice")
        for index, choice in enumerate(question.choices):
            row = Text(choice)
            if show_answers and choice == question.answer:
                row.stylize("bold green")
                row.append(" ✔", style="green")
            table.add_row(chr(ord("A") + index), row)
        console.print(table)


def render_message(console: Console, message: ChatMessage) -> None:
    title = "You" if message.role == "user" else "Tutor"
    border = "green" if message.role == "user" else "blue"
    console.print(
        Panel(
            Text(message.text),
            title=title,
            subtitle=message.timestamp,
            border_style=border,
        )
    )


def render_transcript(
    console: Console, messages: Sequence[ChatMessage]
) -> None:
    for message in messages:
        render_message(console, message)
