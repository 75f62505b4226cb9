from __future__ import annotations

import logging
import random

import pytest
import requests

from fixtures import FakeHTTP, FakeResponse, opentdb_payload
from trivia_quiz.core.config import default_config
from trivia_quiz.quiz.source import (
    FALLBACK_QUESTIONS,
    FetchError,
    OpenTDBSource,
    StaticSource,
    load_questions,
)

ITEM = {
    "category": "Science: Computers",
    "type": "multiple",
    "difficulty": "easy",
    "question": "What does &quot;CPU&quot; stand for?",
    "correct_answer": "Central Processing Unit",
    "incorrect_answers": [
        "Central Process Unit",
        "Computer Personal Unit",
        "Central Processor Unit",
    ],
}


def test_fetch_parses_and_unescapes() -> None:
    http = FakeHTTP(FakeResponse(opentdb_payload(ITEM)))
    source = OpenTDBSource(http=http, shuffle=False)

    questions = source.fetch()

    assert len(questions) == 1
    question = questions[0]
    assert question.text == 'What does "CPU" stand for?'
    assert question.options[-1] == "Central Processing Unit"
    assert question.correct_option == "Central Processing Unit"
    call = http.calls[0]
    assert call["url"] == "https://opentdb.com/api.php"
    assert call["params"] == {"amount": 5, "type": "multiple"}
    assert call["timeout"] == 10.0


def test_shuffle_uses_injected_random() -> None:
    first = OpenTDBSource(
        http=FakeHTTP(FakeResponse(opentdb_payload(ITEM))),
        rng=random.Random(7),
    ).fetch()[0]
    second = OpenTDBSource(
        http=FakeHTTP(FakeResponse(opentdb_payload(ITEM))),
        rng=random.Random(7),
    ).fetch()[0]

    assert first.options == second.options
    assert sorted(first.options) == sorted(
        ITEM["incorrect_answers"] + [ITEM["correct_answer"]]
    )


def test_params_include_optional_filters() -> None:
    source = OpenTDBSource(amount=10, category=18, difficulty="hard")

    assert source.params() == {
        "amount": 10,
        "type": "multiple",
        "category": 18,
        "difficulty": "hard",
    }


def test_from_config_copies_source_settings() -> None:
    config = default_config()

    source = OpenTDBSource.from_config(config.source, shuffle=False)

    assert source.url == config.source.url
    assert source.amount == 5
    assert source.timeout == 10.0
    assert source.shuffle is False


@pytest.mark.parametrize(
    "response",
    [
        requests.ConnectionError("offline"),
        requests.Timeout("slow"),
        FakeResponse(status_code=503),
        FakeResponse(json_error=True),
        FakeResponse(["not", "an", "object"]),
        FakeResponse(opentdb_payload(code=1)),
        FakeResponse(opentdb_payload()),
        FakeResponse(opentdb_payload({"question": "No answers"})),
        FakeResponse(
            opentdb_payload(
                dict(ITEM, incorrect_answers=[]),
            )
        ),
    ],
)
def test_fetch_failures_raise_fetch_error(response) -> None:
    source = OpenTDBSource(http=FakeHTTP(response))

    with pytest.raises(FetchError):
        source.fetch()


def test_load_questions_falls_back_on_failure(caplog) -> None:
    source = OpenTDBSource(http=FakeHTTP(requests.ConnectionError("down")))

    with caplog.at_level(logging.WARNING, logger="trivia_quiz"):
        questions, used_fallback = load_questions(source)

    assert used_fallback is True
    assert questions == list(FALLBACK_QUESTIONS)
    assert len(questions) == 3
    assert "Falling back" in caplog.text


def test_load_questions_returns_fetched_questions() -> None:
    source = OpenTDBSource(
        http=FakeHTTP(FakeResponse(opentdb_payload(ITEM, ITEM)))
    )

    questions, used_fallback = load_questions(source)

    assert used_fallback is False
    assert len(questions) == 2


def test_static_source_serves_fallback_questions() -> None:
    assert StaticSource().fetch() == list(FALLBACK_QUESTIONS)
    with pytest.raises(FetchError):
        StaticSource([]).fetch()
