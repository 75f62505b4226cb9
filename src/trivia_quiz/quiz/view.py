"""Textual presenter for the trivia quiz."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import Button, Static

from .console import option_key, results_renderable
from .countdown import Countdown
from .models import Answer, Question, QuizResult, SessionView
from .scores import ScoreStore, ScoreStoreError
from .session import DEFAULT_COUNTDOWN_SECONDS, QuizSession

logger = logging.getLogger(__name__)

QuestionLoader = Callable[[], Sequence[Question]]


class QuestionView(Widget):
    """Render one question with its options, timer and navigation."""

    def __init__(self, view: SessionView) -> None:
        super().__init__()
        self.session_view = view

    def compose(self) -> ComposeResult:
        view = self.session_view
        yield Static(
            f"Question {view.current_index + 1} of {view.total_questions}",
            id="progress",
        )
        yield Static(self.timer_text(), id="timer")
        yield Static(Text(view.question_text), id="stem")
        marked = self.marked_option()
        with Vertical(id="choices"):
            for position, option in enumerate(view.options):
                btn = Button(
                    Text(f"{option_key(position)}) {option}"),
                    id=f"choice-{position}",
                    disabled=view.reviewing,
                )
                if option == marked:
                    btn.add_class("selected")
                yield btn
        with Horizontal(id="nav"):
            yield Button(
                "Previous", id="prev", disabled=view.current_index == 0
            )
            yield Button("Skip", id="skip")
            yield Button(view.advance_label, id="next", variant="success")

    def marked_option(self) -> Optional[Answer]:
        if self.session_view.recorded is not None:
            return self.session_view.recorded.chosen_option
        return self.session_view.selected_option

    def timer_text(self) -> str:
        return self.session_view.timer_label


class ResultsView(Widget):
    def __init__(self, result: QuizResult, high_score: Optional[int]) -> None:
        super().__init__()
        self.result = result
        self.high_score = high_score

    def compose(self) -> ComposeResult:
        yield Static(
            results_renderable(self.result, high_score=self.high_score),
            id="results",
        )
        yield Button("Restart Quiz", id="restart", variant="primary")


class QuizApp(App):
    CSS_PATH = None
    CSS = """
#choices Button.selected { background: $accent; color: black; }
#timer { color: red; text-style: bold; }
#nav { height: auto; }
"""
    BINDINGS = [
        ("n", "next", "Next"),
        ("p", "prev", "Previous"),
        ("s", "skip", "Skip"),
        ("a", "select(0)", "Select A"),
        ("b", "select(1)", "Select B"),
        ("c", "select(2)", "Select C"),
        ("d", "select(3)", "Select D"),
        ("r", "restart", "Restart"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        loader: QuestionLoader,
        *,
        countdown_seconds: int = DEFAULT_COUNTDOWN_SECONDS,
        score_store: Optional[ScoreStore] = None,
    ) -> None:
        super().__init__()
        self._loader = loader
        self._countdown_seconds = countdown_seconds
        self._score_store = score_store
        self._timer: Optional[Timer] = None
        self.high_score: Optional[int] = None
        self.fetching = False
        self.session = self._new_session(self._loader())
        self.countdown = Countdown(self.session)

    def _new_session(self, questions: Sequence[Question]) -> QuizSession:
        return QuizSession(
            list(questions),
            countdown_seconds=self._countdown_seconds,
            on_finish=self._on_finished,
        )

    def compose(self) -> ComposeResult:
        with Container(id="stage"):
            yield QuestionView(self.session.view())

    def on_mount(self) -> None:
        self._timer = self.set_interval(1.0, self.tick)

    # Pure helpers for navigation and selection (testable without running App)
    def select_answer(self, position: int) -> bool:
        options = self.session.current_question.options
        if not 0 <= position < len(options):
            return False
        changed = self.session.select_option(options[position])
        self._sync(changed)
        return changed

    def next_question(self) -> bool:
        return self._sync(self.session.advance())

    def prev_question(self) -> bool:
        return self._sync(self.session.go_back())

    def skip_question(self) -> bool:
        return self._sync(self.session.skip())

    def tick(self) -> bool:
        turn = self.session.turn
        changed = self.countdown.tick()
        if changed and self.session.turn == turn:
            self._update_timer()
            return True
        return self._sync(changed)

    def restart(self) -> bool:
        """Show the loading stage and fetch a new question set off-loop."""

        if not self.session.is_finished or self.fetching:
            return False
        self.fetching = True
        self.high_score = None
        self._render_loading()
        self._load_questions()
        return True

    @work(thread=True, exclusive=True, group="questions")
    def _load_questions(self) -> None:
        questions = list(self._loader())
        self.call_from_thread(self.start_session, questions)

    def start_session(self, questions: Sequence[Question]) -> None:
        self.session = self._new_session(questions)
        self.countdown = Countdown(self.session)
        self.high_score = None
        self.fetching = False
        if self._timer is not None:
            self._timer.resume()
        self._render_stage()

    def action_next(self) -> None:
        self.next_question()

    def action_prev(self) -> None:
        self.prev_question()

    def action_skip(self) -> None:
        self.skip_question()

    def action_select(self, position: int) -> None:
        self.select_answer(position)

    def action_restart(self) -> None:
        self.restart()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid.startswith("choice-"):
            self.select_answer(int(bid.split("-", 1)[1]))
        elif bid == "next":
            self.action_next()
        elif bid == "prev":
            self.action_prev()
        elif bid == "skip":
            self.action_skip()
        elif bid == "restart":
            self.action_restart()

    def _on_finished(self, result: QuizResult) -> None:
        if self._score_store is not None:
            try:
                self.high_score = self._score_store.record(result.final_score)
            except ScoreStoreError as exc:
                logger.warning(
                    "High score not saved", extra={"reason": str(exc)}
                )
                self.high_score = None
        if self._timer is not None:
            self._timer.pause()

    def _sync(self, changed: bool) -> bool:
        if self.countdown.turn != self.session.turn:
            self.countdown.arm()
        if changed:
            self._render_stage()
        return changed

    def _update_timer(self) -> None:
        if not self.is_running:
            return
        try:
            timer = self.query_one("#timer", Static)
        except NoMatches:
            return
        timer.update(self.session.view().timer_label)

    def _stage(self) -> Optional[Container]:
        if not self.is_running:
            return None
        try:
            return self.query_one("#stage", Container)
        except NoMatches:
            return None

    def _render_loading(self) -> None:
        stage = self._stage()
        if stage is None:
            return
        stage.remove_children()
        stage.mount(Static("Loading questions...", id="loading"))

    def _render_stage(self) -> None:
        stage = self._stage()
        if stage is None:
            return
        stage.remove_children()
        if self.session.is_finished:
            stage.mount(ResultsView(self.session.result(), self.high_score))
        else:
            stage.mount(QuestionView(self.session.view()))
