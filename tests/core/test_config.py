from __future__ import annotations

from pathlib import Path

import pytest

from trivia_quiz.core import config as config_mod


def _write_config(path: Path, content: str) -> Path:
    path.write_text(content.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path) -> None:
    cfg = config_mod.load_config(env={}, config_dir=tmp_path)

    assert cfg.quiz.countdown_seconds == 30
    assert cfg.quiz.shuffle_options is True
    assert cfg.source.url == "https://opentdb.com/api.php"
    assert cfg.source.amount == 5
    assert cfg.source.category is None
    assert cfg.source.timeout_seconds == 10.0
    assert cfg.storage.high_score_key == "highScore"
    assert cfg.logging.level == "INFO"


def test_workspace_config_file_overrides_defaults(tmp_path) -> None:
    _write_config(
        tmp_path / config_mod.CONFIG_FILENAME,
        """
[quiz]
countdown_seconds = 15

[source]
amount = 10
category = 18
difficulty = "Hard"

[logging]
level = "debug"
""",
    )

    cfg = config_mod.load_config(env={}, config_dir=tmp_path)

    assert cfg.quiz.countdown_seconds == 15
    assert cfg.source.amount == 10
    assert cfg.source.category == 18
    assert cfg.source.difficulty == "hard"
    assert cfg.logging.level == "DEBUG"
    assert cfg.storage.high_score_file == "high_score.json"


def test_explicit_path_must_exist(tmp_path) -> None:
    with pytest.raises(config_mod.ConfigError, match="not found"):
        config_mod.load_config(explicit_path=tmp_path / "missing.toml", env={})


def test_env_override_path(tmp_path) -> None:
    path = _write_config(
        tmp_path / "custom.toml", "[quiz]\ncountdown_seconds = 5"
    )

    cfg = config_mod.load_config(
        env={config_mod.CONFIG_PATH_ENV: str(path)}, config_dir=tmp_path
    )

    assert cfg.quiz.countdown_seconds == 5


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("[quiz]\nunknown = 1", "Unknown configuration key 'quiz.unknown'"),
        ("quiz = 3", "Expected table for 'quiz'"),
        ("[quiz]\ncountdown_seconds = 0", "quiz.countdown_seconds"),
        ("[quiz]\ncountdown_seconds = true", "quiz.countdown_seconds"),
        ("[source]\namount = 51", "must not exceed 50"),
        ("[source]\ndifficulty = \"extreme\"", "source.difficulty"),
        ("[source]\ntimeout_seconds = -1", "source.timeout_seconds"),
        ("[source]\noffline = \"yes\"", "source.offline"),
        ("[logging]\nlevel = \"LOUD\"", "logging.level"),
        ("[quiz\n", "Failed to parse"),
    ],
)
def test_invalid_config_raises(tmp_path, content, message) -> None:
    path = _write_config(tmp_path / "bad.toml", content)

    with pytest.raises(config_mod.ConfigError, match=message):
        config_mod.load_config(explicit_path=path, env={})


def test_write_template_round_trips(tmp_path) -> None:
    path = tmp_path / "config" / config_mod.CONFIG_FILENAME

    config_mod.write_template(path)

    cfg = config_mod.load_config(explicit_path=path, env={})
    assert cfg == config_mod.default_config()
    with pytest.raises(config_mod.ConfigError, match="already exists"):
        config_mod.write_template(path)
    config_mod.write_template(path, overwrite=True)
