"""TOML configuration for the trivia quiz.

The config file is optional. Values not set in the file keep the defaults
below, and unknown keys are rejected so typos surface early.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - should never happen
    raise RuntimeError("Python 3.11+ required for tomllib support") from exc


CONFIG_PATH_ENV = "TRIVIA_QUIZ_CONFIG"
CONFIG_FILENAME = "trivia_quiz.toml"

_DIFFICULTIES = {"easy", "medium", "hard"}
_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    countdown_seconds: int
    shuffle_options: bool


@dataclass(frozen=True)
class SourceConfig:
    url: str
    amount: int
    category: Optional[int]
    difficulty: Optional[str]
    timeout_seconds: float
    offline: bool


@dataclass(frozen=True)
class StorageConfig:
    high_score_file: str
    high_score_key: str


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class AppConfig:
    quiz: QuizConfig
    source: SourceConfig
    storage: StorageConfig
    logging: LoggingConfig


_DEFAULTS: Dict[str, Any] = {
    "quiz": {
        "countdown_seconds": 30,
        "shuffle_options": True,
    },
    "source": {
        "url": "https://opentdb.com/api.php",
        "amount": 5,
        "category": None,
        "difficulty": None,
        "timeout_seconds": 10,
        "offline": False,
    },
    "storage": {
        "high_score_file": "high_score.json",
        "high_score_key": "highScore",
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


_CONFIG_TEMPLATE = """
# Trivia quiz configuration

[quiz]
# Seconds allowed per question before it is finalized automatically
countdown_seconds = 30
# Shuffle answer options fetched from the trivia API
shuffle_options = true

[source]
url = "https://opentdb.com/api.php"
# Number of questions requested per quiz
amount = 5
# Optional Open Trivia DB category id and difficulty (easy, medium, hard)
# category = 18
# difficulty = "medium"
timeout_seconds = 10
# Skip the network and use the built-in question set
offline = false

[storage]
# Stored in the workspace scores/ directory
high_score_file = "high_score.json"
high_score_key = "highScore"

[logging]
level = "INFO"
verbose = false
"""


def default_tree() -> Dict[str, Any]:
    """Return a copy of the default configuration tree."""

    return copy.deepcopy(_DEFAULTS)


def default_config() -> AppConfig:
    return _build_config(default_tree())


def config_template() -> str:
    return _CONFIG_TEMPLATE.strip() + "\n"


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    config_dir: Optional[Path] = None,
) -> Optional[Path]:
    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = env_map.get(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()
    if config_dir is not None:
        return config_dir / CONFIG_FILENAME
    return None


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
    config_dir: Optional[Path] = None,
) -> AppConfig:
    """Load the TOML config, applying defaults and validation.

    An explicitly requested file must exist. The workspace default file is
    optional and its absence yields the defaults.
    """

    env_map = os.environ if env is None else env
    path = resolve_config_path(
        explicit_path=explicit_path, env=env_map, config_dir=config_dir
    )
    tree = default_tree()
    required = explicit_path is not None or bool(env_map.get(CONFIG_PATH_ENV))
    if path is not None and (required or path.exists()):
        data = _load_toml(path)
        _merge_dict(tree, data)
    return _build_config(tree)


def write_template(
    path: Path, *, overwrite: bool = False, mode: int = 0o600
) -> Path:
    """Write the default template to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    with path.open("w", encoding="utf-8") as fh:
        fh.write(config_template())
    try:
        path.chmod(mode)
    except PermissionError:
        pass
    return path


def _load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc


def _merge_dict(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise ConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            _merge_dict(base_value, value, path=f"{dotted}.")
        else:
            base[key] = value


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer.")
    return value


def _require_positive_number(value: Any, *, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    if value <= 0:
        raise ConfigError(f"'{field}' must be greater than zero.")
    return float(value)


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _build_quiz(section: Mapping[str, Any]) -> QuizConfig:
    return QuizConfig(
        countdown_seconds=_require_positive_int(
            section.get("countdown_seconds"), field="quiz.countdown_seconds"
        ),
        shuffle_options=_require_bool(
            section.get("shuffle_options"), field="quiz.shuffle_options"
        ),
    )


def _build_source(section: Mapping[str, Any]) -> SourceConfig:
    category = section.get("category")
    if category is not None:
        category = _require_positive_int(category, field="source.category")
    difficulty = section.get("difficulty")
    if difficulty is not None:
        difficulty = _require_string(
            difficulty, field="source.difficulty"
        ).lower()
        if difficulty not in _DIFFICULTIES:
            raise ConfigError(
                "source.difficulty must be one of easy, medium, hard."
            )
    amount = _require_positive_int(
        section.get("amount"), field="source.amount"
    )
    if amount > 50:
        raise ConfigError("source.amount must not exceed 50.")
    return SourceConfig(
        url=_require_string(section.get("url"), field="source.url"),
        amount=amount,
        category=category,
        difficulty=difficulty,
        timeout_seconds=_require_positive_number(
            section.get("timeout_seconds"), field="source.timeout_seconds"
        ),
        offline=_require_bool(section.get("offline"), field="source.offline"),
    )


def _build_storage(section: Mapping[str, Any]) -> StorageConfig:
    return StorageConfig(
        high_score_file=_require_string(
            section.get("high_score_file"), field="storage.high_score_file"
        ),
        high_score_key=_require_string(
            section.get("high_score_key"), field="storage.high_score_key"
        ),
    )


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = _require_string(
        section.get("level"), field="logging.level"
    ).upper()
    if level not in _LEVELS:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level, verbose=verbose)


def _build_config(tree: Mapping[str, Any]) -> AppConfig:
    return AppConfig(
        quiz=_build_quiz(tree["quiz"]),
        source=_build_source(tree["source"]),
        storage=_build_storage(tree["storage"]),
        logging=_build_logging(tree["logging"]),
    )
