"""Command-line entry points for the tutor session."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from quiz_tutor.core import workspace
from quiz_tutor.core.logging import configure_logger

from . import config as config_mod
from . import render
from .models import Difficulty, QuestionType
from .providers import AICapability, OpenAITutorProvider
from .session import TutorSession

__all__ = ["build_arg_parser", "main", "parse_setting", "run_chat_loop"]

_EXIT_COMMANDS = {":quit", ":q", "exit"}
_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}
_SETTING_ALIASES = {
    "type": "question_type",
    "count": "question_count",
    "file": "file_name",
    "chapter": "chapter_name",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz-tutor",
        description="Generate quizzes from study material and discuss them.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Create the data home and write the default config.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file.",
    )

    config_parser = subparsers.add_parser(
        "config",
        help="Manage the tutor configuration file.",
    )
    config_sub = config_parser.add_subparsers(
        dest="config_command", required=True
    )
    config_init = config_sub.add_parser(
        "init", help="Write the default configuration template."
    )
    config_init.add_argument("--path", type=str, help="Destination path.")
    config_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file if present.",
    )
    config_validate = config_sub.add_parser(
        "validate", help="Validate the active configuration file."
    )
    config_validate.add_argument("--path", type=str, help="Config path.")
    config_validate.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress success output; errors still print.",
    )
    config_path = config_sub.add_parser(
        "path", help="Print the resolved config path."
    )
    config_path.add_argument("--path", type=str, help="Path to normalise.")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a quiz once and print it.",
    )
    _add_session_arguments(generate_parser)
    generate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the questions as JSON instead of rich output.",
    )

    chat_parser = subparsers.add_parser(
        "chat",
        help="Start an interactive tutoring chat.",
    )
    _add_session_arguments(chat_parser)
    chat_parser.add_argument(
        "--generate-first",
        action="store_true",
        help="Generate a quiz before the first prompt.",
    )
    return parser


def _add_session_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=str, help="Path to the tutor config TOML."
    )
    parser.add_argument(
        "--file",
        type=str,
        help="Study file to quiz on; only its name is used.",
    )
    parser.add_argument("--chapter", type=str, help="Chapter or topic.")
    parser.add_argument(
        "--count", type=int, help="Number of questions to generate."
    )
    parser.add_argument(
        "--difficulty",
        choices=[item.value for item in Difficulty],
        help="Question difficulty.",
    )
    parser.add_argument(
        "--type",
        dest="question_type",
        choices=[item.value for item in QuestionType],
        help="Question type: mcq, tf, or mix.",
    )
    parser.add_argument(
        "--hide-answers",
        action="store_true",
        help="Do not mark the correct answers.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log output to stderr.",
    )


def _to_path(value: str | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser().resolve()


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.file:
        overrides["file_name"] = Path(args.file).name
    if args.chapter is not None:
        overrides["chapter_name"] = args.chapter
    if args.count is not None:
        overrides["question_count"] = args.count
    if args.difficulty:
        overrides["difficulty"] = Difficulty(args.difficulty)
    if args.question_type:
        overrides["question_type"] = QuestionType(args.question_type)
    if args.hide_answers:
        overrides["show_answers"] = False
    return overrides


def _build_capability(cfg: config_mod.TutorConfig) -> AICapability:
    return OpenAITutorProvider.from_config(cfg)


def _configure_logging(cfg: config_mod.TutorConfig, *, verbose: bool) -> Path:
    layout = workspace.ensure_workspace()
    _, log_path = configure_logger(
        "quiz_tutor",
        log_dir=layout.path_for("logs"),
        level=cfg.logging.level,
        verbose=verbose or cfg.logging.verbose,
    )
    return log_path


def _prepare_session(
    args: argparse.Namespace,
) -> tuple[TutorSession, config_mod.TutorConfig]:
    cfg = config_mod.load_config(
        explicit_path=_to_path(args.config), missing_ok=True
    )
    _configure_logging(cfg, verbose=args.verbose)
    session = TutorSession.from_config(cfg, _build_capability(cfg))
    session.update_settings(_settings_overrides(args))
    return session, cfg


def _print_error(console: Console, message: str) -> None:
    console.print(f"[red]Error:[/] {escape(message)}")


def _handle_generate(args: argparse.Namespace, console: Console) -> int:
    try:
        session, _ = _prepare_session(args)
    except RuntimeError as exc:  # config, workspace, or missing API key
        _print_error(console, str(exc))
        return 2
    if not _run_generation(session, console, as_json=args.json):
        return 1
    return 0


def _handle_chat(args: argparse.Namespace, console: Console) -> int:
    try:
        session, _ = _prepare_session(args)
    except RuntimeError as exc:  # config, workspace, or missing API key
        _print_error(console, str(exc))
        return 2
    render.render_transcript(console, session.state.messages)
    if args.generate_first:
        _run_generation(session, console)
    run_chat_loop(session, console=console)
    return 0


def _run_generation(
    session: TutorSession, console: Console, *, as_json: bool = False
) -> bool:
    outcome = asyncio.run(session.start_generation_flow())
    if outcome is None or not outcome.succeeded:
        reason = outcome.error.reason if outcome and outcome.error else ""
        _print_error(console, f"Quiz generation failed. {reason}".strip())
        return False
    if as_json:
        payload = [question.to_dict() for question in outcome.questions]
        console.print_json(json.dumps(payload, ensure_ascii=False))
        return True
    render.render_questions(
        console,
        outcome.questions,
        show_answers=session.state.settings.show_answers,
    )
    render.render_message(console, session.state.messages[-1])
    return True


def run_chat_loop(session: TutorSession, *, console: Console) -> None:
    """Read prompts until the user exits, one turn at a time.

    ``:generate`` regenerates the quiz, ``:questions`` shows it, ``:clear``
    removes it, ``:set key=value`` changes a setting for the next
    generation, and ``:quit`` leaves the loop.
    """

    console.print(
        Panel(
            "Type a question, or :generate, :questions, :clear, :set, :quit.",
            title="Quiz Tutor Chat",
        )
    )
    while True:
        try:
            prompt = console.input("[bold green]You[/]> ")
        except (EOFError, KeyboardInterrupt):
            console.print("\nExiting session.")
            break
        prompt = prompt.strip()
        if prompt in _EXIT_COMMANDS:
            console.print("Goodbye!")
            break
        if prompt == ":generate":
            _run_generation(session, console)
            continue
        if prompt == ":questions":
            render.render_questions(
                console,
                session.state.questions,
                show_answers=session.state.settings.show_answers,
            )
            continue
        if prompt == ":set" or prompt.startswith(":set "):
            _apply_setting(session, prompt[len(":set"):].strip(), console)
            continue
        if prompt == ":clear":
            session.clear_questions()
            console.print("Questions cleared.")
            continue
        result = asyncio.run(session.send_message(prompt))
        if result is None:
            continue
        render.render_message(console, result.reply)


def _apply_setting(
    session: TutorSession, assignment: str, console: Console
) -> None:
    if not assignment:
        for key, value in session.state.settings.to_dict().items():
            console.print(f"  {key}: {value}", markup=False)
        return
    try:
        changes = parse_setting(assignment)
    except ValueError as exc:
        _print_error(console, str(exc))
        return
    session.update_settings(changes)
    console.print("Settings updated.")


def parse_setting(assignment: str) -> dict[str, Any]:
    """Turn ``key=value`` into a settings change.

    Keys are settings field names or the flag names ``type``, ``count``,
    ``file`` and ``chapter``. Raises :class:`ValueError` on bad input.
    """

    key, sep, raw = assignment.partition("=")
    key = key.strip().replace("-", "_")
    key = _SETTING_ALIASES.get(key, key)
    value = raw.strip()
    if not sep or not key:
        raise ValueError("Use :set key=value, for example :set count=10.")
    if key == "difficulty":
        return {key: _parse_choice(Difficulty, value, key)}
    if key == "question_type":
        return {key: _parse_choice(QuestionType, value, key)}
    if key == "question_count":
        try:
            return {key: int(value)}
        except ValueError as exc:
            raise ValueError(f"{key} must be a whole number.") from exc
    if key == "show_answers":
        word = value.lower()
        if word in _TRUE_WORDS or word in _FALSE_WORDS:
            return {key: word in _TRUE_WORDS}
        raise ValueError(f"{key} must be true or false.")
    if key == "file_name":
        return {key: Path(value).name if value else ""}
    if key == "chapter_name":
        return {key: value}
    raise ValueError(f"Unknown setting '{key}'.")


def _parse_choice(enum_cls: Any, value: str, key: str) -> Any:
    try:
        return enum_cls(value.lower())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in enum_cls)
        raise ValueError(f"{key} must be one of {allowed}.") from exc


def _handle_init(args: argparse.Namespace, console: Console) -> int:
    try:
        layout = workspace.ensure_workspace()
        target = config_mod.resolve_config_path()
        config_mod.write_template(target, overwrite=args.force)
    except (workspace.WorkspaceError, config_mod.ConfigError) as exc:
        _print_error(console, str(exc))
        return 2
    console.print(f"Workspace ready at {layout.home}")
    console.print(f"Wrote config template to {target}")
    return 0


def _handle_config(args: argparse.Namespace, console: Console) -> int:
    explicit_path = _to_path(args.path)
    command = args.config_command
    try:
        if command == "init":
            target = config_mod.resolve_config_path(explicit_path=explicit_path)
            config_mod.write_template(target, overwrite=args.force)
            console.print(f"Wrote config template to {target}")
            return 0
        if command == "validate":
            cfg = config_mod.load_config(explicit_path=explicit_path)
            if not args.quiet:
                console.print("Configuration OK")
                console.print(
                    f"  chat_model: {cfg.providers.openai.chat_model}"
                )
                console.print(f"  locale: {cfg.session.locale}")
                console.print(
                    "  default_question_count: "
                    f"{cfg.session.default_question_count}"
                )
            return 0
        if command == "path":
            path = config_mod.resolve_config_path(explicit_path=explicit_path)
            console.print(str(path), soft_wrap=True)
            return 0
    except (config_mod.ConfigError, workspace.WorkspaceError) as exc:
        _print_error(console, str(exc))
        return 2
    raise RuntimeError(f"Unhandled config command: {command}")


_HANDLERS = {
    "init": _handle_init,
    "config": _handle_config,
    "generate": _handle_generate,
    "chat": _handle_chat,
}


def main(
    argv: Sequence[str] | None = None, *, console: Console | None = None
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    return _HANDLERS[args.command](args, console or Console())
