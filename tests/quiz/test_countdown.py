from __future__ import annotations

from trivia_quiz.quiz.countdown import Countdown
from trivia_quiz.quiz.models import SKIPPED
from trivia_quiz.quiz.session import QuizSession


def test_tick_forwards_to_session(questions, clock) -> None:
    session = QuizSession(questions)
    countdown = Countdown(session, clock=clock)

    assert countdown.tick() is True
    assert session.time_remaining == 29


def test_tick_after_finalize_is_dropped_until_rearmed(questions, clock):
    session = QuizSession(questions)
    countdown = Countdown(session, clock=clock)
    session.skip()

    assert countdown.tick() is False
    assert session.time_remaining == 30

    countdown.arm()
    assert countdown.turn == 1
    assert countdown.tick() is True
    assert session.time_remaining == 29


def test_catch_up_converts_elapsed_seconds(questions, clock) -> None:
    session = QuizSession(questions)
    countdown = Countdown(session, clock=clock)

    clock.advance(0.5)
    assert countdown.catch_up() == 0
    clock.advance(2.75)
    assert countdown.catch_up() == 3
    assert session.time_remaining == 27

    # The 0.25s remainder carries into the next call.
    clock.advance(0.8)
    assert countdown.catch_up() == 1
    assert session.time_remaining == 26


def test_catch_up_stops_at_expiry(questions, clock) -> None:
    session = QuizSession(questions, countdown_seconds=5)
    countdown = Countdown(session, clock=clock)

    clock.advance(60)
    applied = countdown.catch_up()

    assert applied == 5
    assert len(session.answered) == 1
    assert session.answered[0].chosen_option is SKIPPED
    # The next question's countdown is untouched until re-armed.
    assert session.time_remaining == 5
