"""Question sources: the Open Trivia DB API and the built-in fallback set."""

from __future__ import annotations

import html
import logging
import random
from typing import Any, Mapping, Optional, Sequence

import requests

from ..core.config import SourceConfig
from .models import Question

logger = logging.getLogger(__name__)

OPENTDB_URL = "https://opentdb.com/api.php"
DEFAULT_TIMEOUT_SECONDS = 10.0

FALLBACK_QUESTIONS: tuple[Question, ...] = (
    Question(
        text="Which of these is a primitive data type in Java?",
        options=("String", "int", "Array", "Class"),
        correct_option="int",
    ),
    Question(
        text="What is the entry point for a Java application?",
        options=("main()", "start()", "run()", "execute()"),
        correct_option="main()",
    ),
    Question(
        text="What keyword is used to declare a constant in Java?",
        options=("const", "final", "static", "volatile"),
        correct_option="final",
    ),
)


class FetchError(RuntimeError):
    """Raised when questions cannot be fetched or parsed."""


class StaticSource:
    """Serve a fixed list of questions."""

    def __init__(self, questions: Sequence[Question] = FALLBACK_QUESTIONS):
        self._questions = tuple(questions)

    def fetch(self) -> list[Question]:
        if not self._questions:
            raise FetchError("No questions available.")
        return list(self._questions)


class OpenTDBSource:
    """Fetch multiple-choice questions from the Open Trivia DB API.

    Options arrive as ``incorrect_answers`` plus ``correct_answer``; they are
    shuffled with ``rng`` when ``shuffle`` is set. Text is HTML-unescaped.
    """

    def __init__(
        self,
        *,
        url: str = OPENTDB_URL,
        amount: int = 5,
        category: Optional[int] = None,
        difficulty: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        shuffle: bool = True,
        rng: Optional[random.Random] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.amount = amount
        self.category = category
        self.difficulty = difficulty
        self.timeout = timeout
        self.shuffle = shuffle
        self._rng = rng or random.Random()
        self._http = http

    @classmethod
    def from_config(
        cls,
        config: SourceConfig,
        *,
        shuffle: bool = True,
        rng: Optional[random.Random] = None,
        http: Optional[requests.Session] = None,
    ) -> "OpenTDBSource":
        return cls(
            url=config.url,
            amount=config.amount,
            category=config.category,
            difficulty=config.difficulty,
            timeout=config.timeout_seconds,
            shuffle=shuffle,
            rng=rng,
            http=http,
        )

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"amount": self.amount, "type": "multiple"}
        if self.category is not None:
            params["category"] = self.category
        if self.difficulty:
            params["difficulty"] = self.difficulty
        return params

    def fetch(self) -> list[Question]:
        getter = self._http.get if self._http is not None else requests.get
        try:
            response = getter(
                self.url, params=self.params(), timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise FetchError(f"Trivia request failed: {exc}") from exc
        except ValueError as exc:
            raise FetchError("Trivia response is not valid JSON.") from exc
        return self.parse(payload)

    def parse(self, payload: Any) -> list[Question]:
        if not isinstance(payload, Mapping):
            raise FetchError("Trivia response must be a JSON object.")
        code = payload.get("response_code", 0)
        if code != 0:
            raise FetchError(f"Trivia API returned response_code {code}.")
        results = payload.get("results")
        if not isinstance(results, list) or not results:
            raise FetchError("Trivia API returned no questions.")
        return [
            self._parse_item(item, idx) for idx, item in enumerate(results)
        ]

    def _parse_item(self, item: Any, index: int) -> Question:
        if not isinstance(item, Mapping):
            raise FetchError(f"Question {index} is not an object.")
        text = item.get("question")
        correct = item.get("correct_answer")
        incorrect = item.get("incorrect_answers")
        if not isinstance(text, str) or not isinstance(correct, str):
            raise FetchError(f"Question {index} is missing text or answer.")
        if not isinstance(incorrect, list) or not all(
            isinstance(option, str) for option in incorrect
        ):
            raise FetchError(f"Question {index} has malformed options.")
        options = [html.unescape(option) for option in incorrect]
        options.append(html.unescape(correct))
        if self.shuffle:
            self._rng.shuffle(options)
        try:
            return Question(
                text=html.unescape(text),
                options=tuple(options),
                correct_option=html.unescape(correct),
            )
        except ValueError as exc:
            raise FetchError(f"Question {index} is invalid: {exc}") from exc


def load_questions(
    source: Any,
    *,
    fallback: Sequence[Question] = FALLBACK_QUESTIONS,
) -> tuple[list[Question], bool]:
    """Fetch from ``source``, substituting ``fallback`` on any FetchError.

    Returns the questions and whether the fallback was used.
    """

    try:
        questions = source.fetch()
    except FetchError as exc:
        logger.warning(
            "Falling back to local questions",
            extra={"reason": str(exc), "fallback_count": len(fallback)},
        )
        return list(fallback), True
    logger.info("Fetched questions", extra={"count": len(questions)})
    return questions, False
