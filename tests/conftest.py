from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Ensure src/ is importable when the package is not installed
ROOT = TESTS_DIR.parent
SRC = str(ROOT / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from fixtures import FakeClock, sample_questions  # noqa: E402
from trivia_quiz.quiz.models import Question  # noqa: E402


@pytest.fixture
def questions() -> list[Question]:
    """Three Java questions with known correct answers."""

    return sample_questions()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point TRIVIA_QUIZ_HOME at a per-test directory."""

    target = tmp_path / "home"
    monkeypatch.setenv("TRIVIA_QUIZ_HOME", str(target))
    monkeypatch.delenv("TRIVIA_QUIZ_CONFIG", raising=False)
    return target


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("trivia_quiz")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
