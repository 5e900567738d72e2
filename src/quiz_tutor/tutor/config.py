"""Configuration for the tutor session.

The TOML file groups provider, session, and logging settings. Values are
merged over :data:`_DEFAULTS` (unknown keys are rejected) and validated into
frozen dataclasses.
"""

from __future__ import annotations

import copy
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from quiz_tutor.core import workspace

from .models import Difficulty, QuestionType, Settings

__all__ = [
    "CONFIG_PATH_ENV",
    "CONFIG_FILENAME",
    "ConfigError",
    "OpenAIConfig",
    "ProvidersConfig",
    "SessionConfig",
    "LoggingConfig",
    "TutorConfig",
    "config_template",
    "default_tree",
    "load_config",
    "resolve_config_path",
    "write_template",
]

CONFIG_PATH_ENV = "QUIZ_TUTOR_CONFIG"
CONFIG_FILENAME = "tutor.toml"


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class OpenAIConfig:
    chat_model: str
    temperature: float
    max_output_tokens: int
    request_timeout_seconds: int
    api_base: Optional[str]


@dataclass(frozen=True)
class ProvidersConfig:
    openai: OpenAIConfig


@dataclass(frozen=True)
class SessionConfig:
    locale: str
    default_question_count: int
    difficulty: Difficulty
    question_type: QuestionType
    show_answers: bool

    def initial_settings(self) -> Settings:
        return Settings(
            difficulty=self.difficulty,
            question_type=self.question_type,
            show_answers=self.show_answers,
            question_count=self.default_question_count,
        )


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class TutorConfig:
    providers: ProvidersConfig
    session: SessionConfig
    logging: LoggingConfig


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer.")
    return value


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_float_range(
    value: Any, *, field: str, min_value: float, max_value: float
) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    number = float(value)
    if not (min_value <= number <= max_value):
        raise ConfigError(
            f"'{field}' must be between {min_value} and {max_value}."
        )
    return number


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _coerce_optional_string(value: Any, *, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string when set.")
    return value.strip()


def _require_choice(value: Any, *, field: str, enum_cls: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"'{field}' must be one of {allowed}.") from exc


def _build_openai(section: Mapping[str, Any]) -> OpenAIConfig:
    return OpenAIConfig(
        chat_model=_require_string(
            section.get("chat_model"), field="providers.openai.chat_model"
        ),
        temperature=_require_float_range(
            section.get("temperature"),
            field="providers.openai.temperature",
            min_value=0.0,
            max_value=2.0,
        ),
        max_output_tokens=_require_positive_int(
            section.get("max_output_tokens"),
            field="providers.openai.max_output_tokens",
        ),
        request_timeout_seconds=_require_positive_int(
            section.get("request_timeout_seconds"),
            field="providers.openai.request_timeout_seconds",
        ),
        api_base=_coerce_optional_string(
            section.get("api_base"), field="providers.openai.api_base"
        ),
    )


def _build_session(section: Mapping[str, Any]) -> SessionConfig:
    return SessionConfig(
        locale=_require_string(section.get("locale"), field="session.locale"),
        default_question_count=_require_positive_int(
            section.get("default_question_count"),
            field="session.default_question_count",
        ),
        difficulty=_require_choice(
            section.get("difficulty"),
            field="session.difficulty",
            enum_cls=Difficulty,
        ),
        question_type=_require_choice(
            section.get("question_type"),
            field="session.question_type",
            enum_cls=QuestionType,
        ),
        show_answers=_require_bool(
            section.get("show_answers"), field="session.show_answers"
        ),
    )


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = _require_string(section.get("level"), field="logging.level").upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if level not in allowed:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level, verbose=verbose)


def _build_config(tree: Mapping[str, Any]) -> TutorConfig:
    providers = tree["providers"]
    return TutorConfig(
        providers=ProvidersConfig(openai=_build_openai(providers["openai"])),
        session=_build_session(tree["session"]),
        logging=_build_logging(tree["logging"]),
    )


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Return the config path: explicit, then ``QUIZ_TUTOR_CONFIG``, then
    ``<data home>/config/tutor.toml``."""

    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = env_map.get(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()
    layout = workspace.ensure_workspace(env=env_map, create=False)
    return layout.path_for("config") / CONFIG_FILENAME


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    missing_ok: bool = False,
) -> TutorConfig:
    """Load the TOML config, applying defaults and validation.

    With ``missing_ok`` a missing file yields the built-in defaults.
    """

    path = resolve_config_path(explicit_path=explicit_path, env=env)
    tree = default_tree()
    if not (missing_ok and not path.exists()):
        _apply_overrides(tree, _read_toml(path))
    return _build_config(tree)


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path.name} is not valid TOML: {exc}") from exc


def _apply_overrides(
    tree: Dict[str, Any], overrides: Mapping[str, Any], *, section: str = ""
) -> None:
    # Only keys present in _DEFAULTS are accepted; tables stay tables.
    for key, value in overrides.items():
        name = f"{section}{key}"
        if key not in tree:
            raise ConfigError(f"Unknown configuration key '{name}'.")
        if isinstance(tree[key], dict):
            if not isinstance(value, Mapping):
                raise ConfigError(f"[{name}] must be a table.")
            _apply_overrides(tree[key], value, section=f"{name}.")
        else:
            tree[key] = value


def default_tree() -> Dict[str, Any]:
    """Return a copy of the default configuration tree."""

    return copy.deepcopy(_DEFAULTS)


def config_template() -> str:
    """Return the commented TOML template for new installs."""

    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    """Write the commented template to ``path``, readable by the owner only."""

    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config_template(), encoding="utf-8")
    path.chmod(0o600)
    return path


_DEFAULTS: Dict[str, Any] = {
    "providers": {
        "openai": {
            "chat_model": "gpt-4o-mini",
            "temperature": 0.4,
            "max_output_tokens": 2000,
            "request_timeout_seconds": 60,
            "api_base": None,
        },
    },
    "session": {
        "locale": "ar-SA",
        "default_question_count": 5,
        "difficulty": "medium",
        "question_type": "mcq",
        "show_answers": True,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


_CONFIG_TEMPLATE = """
# quiz-tutor configuration

[providers.openai]
# Chat completion model used for quiz generation and tutoring replies
chat_model = "gpt-4o-mini"
# Sampling temperature (0.0-2.0)
temperature = 0.4
max_output_tokens = 2000
request_timeout_seconds = 60
# Optional API base override
# api_base = "https://api.openai.com/v1"

[session]
# Display locale for chat timestamps
locale = "ar-SA"
# Used whenever the requested question count is below 1
default_question_count = 5
# Initial settings: easy | medium | hard, mcq | tf | mix
difficulty = "medium"
question_type = "mcq"
show_answers = true

[logging]
level = "INFO"
verbose = false
"""
