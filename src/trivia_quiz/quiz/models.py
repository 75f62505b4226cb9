"""Immutable records shared by the quiz session and its presenters."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Literal, Union


class _Skipped(enum.Enum):
    SKIPPED = "skipped"

    def __str__(self) -> str:
        return "Skipped"


# Sentinel for "no answer given". An enum member never compares equal to a
# string, so an option literally reading "Skipped" stays a real answer.
SKIPPED = _Skipped.SKIPPED

Answer = Union[str, _Skipped]


class Phase(str, enum.Enum):
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question."""

    text: str
    options: tuple[str, ...]
    correct_option: str

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the record stays immutable.
        object.__setattr__(self, "options", tuple(self.options))
        if len(self.options) < 2:
            raise ValueError("A question needs at least two options.")
        if self.correct_option not in self.options:
            raise ValueError(
                f"Correct option {self.correct_option!r} is not one of the "
                "question's options."
            )


@dataclass(frozen=True)
class AnsweredQuestion:
    question: Question
    chosen_option: Answer
    is_correct: bool

    @classmethod
    def finalize(
        cls, question: Question, chosen: Answer
    ) -> "AnsweredQuestion":
        is_correct = (
            chosen is not SKIPPED and chosen == question.correct_option
        )
        return cls(
            question=question, chosen_option=chosen, is_correct=is_correct
        )

    @property
    def skipped(self) -> bool:
        return self.chosen_option is SKIPPED


@dataclass(frozen=True)
class QuizResult:
    """Terminal payload produced once every question is finalized."""

    final_score: int
    answered: tuple[AnsweredQuestion, ...]

    @property
    def total(self) -> int:
        return len(self.answered)

    @property
    def accuracy(self) -> float:
        if not self.answered:
            return 0.0
        return self.final_score / len(self.answered)

    @property
    def skipped_count(self) -> int:
        return sum(1 for item in self.answered if item.skipped)


@dataclass(frozen=True)
class SessionView:
    """Read model presenters render after every operation."""

    current_index: int
    total_questions: int
    question_text: str
    options: tuple[str, ...]
    selected_option: str | None
    time_remaining: int
    phase: Phase
    answered_count: int
    score: int
    recorded: AnsweredQuestion | None = None

    @property
    def reviewing(self) -> bool:
        """True while showing a question that was already finalized."""

        return self.recorded is not None

    @property
    def timer_label(self) -> str:
        """Countdown text; the frontier clock keeps running during review."""

        label = f"⏳ {self.time_remaining}s"
        if self.reviewing:
            return f"{label} · Reviewing (answer locked)"
        return label

    @property
    def is_last(self) -> bool:
        return self.current_index + 1 == self.total_questions

    @property
    def advance_label(self) -> Literal["Next", "Submit"]:
        return "Submit" if self.is_last else "Next"
