"""External clock that drives `QuizSession.tick`."""

from __future__ import annotations

import time
from typing import Callable

from .session import QuizSession

Clock = Callable[[], float]


class Countdown:
    """Feed one tick per elapsed second into a session.

    The countdown is armed for the session's current turn. Ticks delivered
    after the turn has moved on (the question was answered or skipped) are
    dropped by the session, so a late timer callback is harmless. Call
    `arm()` again after each finalize to follow the next question.
    """

    def __init__(self, session: QuizSession, *, clock: Clock = time.monotonic):
        self._session = session
        self._clock = clock
        self._turn = session.turn
        self._last = clock()

    @property
    def turn(self) -> int:
        return self._turn

    def arm(self) -> None:
        self._turn = self._session.turn
        self._last = self._clock()

    def tick(self) -> bool:
        """Deliver a single tick; used by interval timers."""

        return self._session.tick(turn=self._turn)

    def catch_up(self) -> int:
        """Deliver one tick for every whole second since the last call.

        Used by presenters that block on input and cannot run a timer. The
        fractional remainder carries over to the next call. Returns the number
        of ticks the session accepted.
        """

        now = self._clock()
        elapsed = int(now - self._last)
        if elapsed <= 0:
            return 0
        self._last += elapsed
        applied = 0
        for _ in range(elapsed):
            if not self._session.tick(turn=self._turn):
                break
            applied += 1
        return applied
