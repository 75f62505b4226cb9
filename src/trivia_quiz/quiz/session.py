"""Quiz session state machine.

`QuizSession` is the only owner of quiz progress. Presenters forward user
intents (select, next, back, skip) and clock ticks into it and re-render from
`QuizSession.view()` afterwards. Every operation returns ``True`` when it
changed state and ``False`` when it was ignored; out-of-phase calls are
guarded no-ops so a stray button press or late timer tick never breaks a
session. Only `QuizSession.result()` raises, when asked for results early.

Going back is view-only. Questions before the frontier (the first unanswered
question) keep the answer recorded for them, and the countdown only runs on
the frontier question.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from .models import (
    SKIPPED,
    Answer,
    AnsweredQuestion,
    Phase,
    Question,
    QuizResult,
    SessionView,
)

logger = logging.getLogger(__name__)

DEFAULT_COUNTDOWN_SECONDS = 30

FinishCallback = Callable[[QuizResult], None]


class InvalidStateError(RuntimeError):
    """Raised when an operation requires a different session phase."""


class QuizSession:
    def __init__(
        self,
        questions: Sequence[Question],
        *,
        countdown_seconds: int = DEFAULT_COUNTDOWN_SECONDS,
        on_finish: Optional[FinishCallback] = None,
    ) -> None:
        if not questions:
            raise ValueError("A quiz session needs at least one question.")
        if countdown_seconds <= 0:
            raise ValueError("countdown_seconds must be positive.")
        self._questions: tuple[Question, ...] = tuple(questions)
        self._countdown_seconds = countdown_seconds
        self._on_finish = on_finish
        self._index = 0
        self._pending: str | None = None
        self._answered: list[AnsweredQuestion] = []
        self._time_remaining = countdown_seconds
        self._phase = Phase.ACTIVE
        self._result: QuizResult | None = None

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Question:
        return self._questions[self._index]

    @property
    def pending_selection(self) -> str | None:
        return self._pending

    @property
    def answered(self) -> tuple[AnsweredQuestion, ...]:
        return tuple(self._answered)

    @property
    def score(self) -> int:
        return sum(1 for item in self._answered if item.is_correct)

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def countdown_seconds(self) -> int:
        return self._countdown_seconds

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_finished(self) -> bool:
        return self._phase is Phase.FINISHED

    @property
    def turn(self) -> int:
        """Number of finalized questions; tags countdown ticks."""

        return len(self._answered)

    @property
    def reviewing(self) -> bool:
        return self._index < len(self._answered)

    def select_option(self, option: str) -> bool:
        if not self._is_active("select_option"):
            return False
        if self.reviewing:
            logger.debug(
                "Ignoring selection on a finalized question",
                extra={"index": self._index},
            )
            return False
        if option not in self.current_question.options:
            logger.debug(
                "Ignoring unknown option",
                extra={"index": self._index, "option": option},
            )
            return False
        self._pending = option
        return True

    def advance(self) -> bool:
        """Finalize the pending selection and move on ("Next"/"Submit")."""

        if not self._is_active("advance"):
            return False
        if self.reviewing:
            return self._step_forward()
        if self._pending is None:
            logger.debug(
                "Advance ignored without a selection",
                extra={"index": self._index},
            )
            return False
        self._finalize(self._pending)
        return True

    def skip(self) -> bool:
        if not self._is_active("skip"):
            return False
        if self.reviewing:
            return self._step_forward()
        self._finalize(SKIPPED)
        return True

    def go_back(self) -> bool:
        if not self._is_active("go_back"):
            return False
        if self._index == 0:
            return False
        self._index -= 1
        self._pending = None
        return True

    def tick(self, turn: int | None = None) -> bool:
        """Consume one second of the frontier question's countdown.

        ``turn`` is the value of `turn` when the tick was scheduled. A tick
        from an earlier turn is dropped. When the countdown reaches zero the
        question is finalized with the pending selection, or skipped. The
        countdown keeps running while an earlier question is being reviewed;
        expiry then returns to the frontier and skips it.
        """

        if not self._is_active("tick"):
            return False
        if turn is not None and turn != self.turn:
            logger.debug(
                "Dropping stale tick",
                extra={"tick_turn": turn, "turn": self.turn},
            )
            return False
        self._time_remaining -= 1
        if self._time_remaining <= 0:
            self._time_remaining = 0
            if self.reviewing:
                # go_back cleared the pending selection.
                self._index = len(self._answered)
                self._pending = None
            chosen: Answer = SKIPPED
            if self._pending is not None:
                chosen = self._pending
            logger.info(
                "Countdown expired",
                extra={"index": self._index, "skipped": chosen is SKIPPED},
            )
            self._finalize(chosen)
        return True

    def result(self) -> QuizResult:
        if self._result is None:
            raise InvalidStateError("The quiz is still in progress.")
        return self._result

    def view(self) -> SessionView:
        question = self.current_question
        recorded = self._answered[self._index] if self.reviewing else None
        return SessionView(
            current_index=self._index,
            total_questions=self.total_questions,
            question_text=question.text,
            options=question.options,
            selected_option=self._pending,
            time_remaining=self._time_remaining,
            phase=self._phase,
            answered_count=len(self._answered),
            score=self.score,
            recorded=recorded,
        )

    def _is_active(self, operation: str) -> bool:
        if self._phase is Phase.ACTIVE:
            return True
        logger.debug(
            "Ignoring %s on a finished session", operation,
            extra={"operation": operation},
        )
        return False

    def _step_forward(self) -> bool:
        self._index += 1
        self._pending = None
        return True

    def _finalize(self, chosen: Answer) -> None:
        record = AnsweredQuestion.finalize(self.current_question, chosen)
        self._answered.append(record)
        self._pending = None
        if self._index + 1 < self.total_questions:
            self._index += 1
            self._time_remaining = self._countdown_seconds
            return

        self._phase = Phase.FINISHED
        self._result = QuizResult(
            final_score=self.score, answered=tuple(self._answered)
        )
        logger.info(
            "Quiz finished",
            extra={
                "score": self._result.final_score,
                "total": self._result.total,
            },
        )
        if self._on_finish is not None:
            self._on_finish(self._result)
