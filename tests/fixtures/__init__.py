"""Shared testing fixtures and fakes for the trivia_quiz test suite."""

from .clock import FakeClock  # noqa: F401
from .http import FakeHTTP, FakeResponse, opentdb_payload  # noqa: F401
from .questions import make_question, sample_questions  # noqa: F401

__all__ = [
    "FakeClock",
    "FakeHTTP",
    "FakeResponse",
    "make_question",
    "opentdb_payload",
    "sample_questions",
]
