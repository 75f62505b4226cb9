"""Rich-powered console presenter for a quiz session.

A synchronous loop renders the current question, reads one command from an
input provider and forwards it to `QuizSession`. Time spent waiting for input
is converted into countdown ticks before the command is applied, so a slow
answer can expire the question just like the TUI timer would.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Sequence

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .countdown import Clock, Countdown
from .models import Question, QuizResult, SessionView
from .scores import ScoreStore, ScoreStoreError
from .session import DEFAULT_COUNTDOWN_SECONDS, QuizSession

logger = logging.getLogger(__name__)

InputProvider = Callable[[], str]
ExitAction = Literal["finished", "quit"]


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["next", "prev", "skip", "quit", "select"]
    choice: str | None = None


@dataclass(frozen=True)
class ConsoleSessionResult:
    """Return value from ``run_quiz_session``."""

    result: QuizResult | None
    exit_action: ExitAction
    high_score: int | None = None


def option_key(position: int) -> str:
    return chr(ord("A") + position)


def parse_session_command(raw: str | None) -> SessionCommand | None:
    """Parse raw user input into a structured command."""

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in {"n", "next", "submit"}:
        return SessionCommand("next")
    if lowered in {"p", "prev", "previous", "back"}:
        return SessionCommand("prev")
    if lowered in {"s", "skip"}:
        return SessionCommand("skip")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if len(text) == 1 and text.isalpha():
        return SessionCommand("select", text.upper())
    return None


def run_quiz_session(
    questions: Sequence[Question],
    console: Console,
    input_provider: InputProvider,
    *,
    countdown_seconds: int = DEFAULT_COUNTDOWN_SECONDS,
    clock: Clock = time.monotonic,
    score_store: Optional[ScoreStore] = None,
) -> ConsoleSessionResult:
    """Run one quiz attempt and render the results when it finishes."""

    session = QuizSession(questions, countdown_seconds=countdown_seconds)
    countdown = Countdown(session, clock=clock)

    while not session.is_finished:
        _render_question(console, session.view())
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            return ConsoleSessionResult(None, "quit")

        turn = session.turn
        countdown.catch_up()
        if session.turn != turn:
            console.print(
                "[bold red]Time's up![/] The question was locked in."
            )
            countdown.arm()
            continue

        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Ending quiz without results.[/]")
            return ConsoleSessionResult(None, "quit")
        _apply_command(command, session, console)
        if session.turn != turn:
            countdown.arm()

    result = session.result()
    high_score = None
    if score_store is not None:
        try:
            high_score = score_store.record(result.final_score)
        except ScoreStoreError as exc:
            logger.warning(
                "High score not saved", extra={"reason": str(exc)}
            )
            console.print(
                "[yellow]High score not saved:[/]", Text(str(exc))
            )
    render_results(console, result, high_score=high_score)
    return ConsoleSessionResult(result, "finished", high_score)


def _apply_command(
    command: SessionCommand, session: QuizSession, console: Console
) -> None:
    if command.type == "select" and command.choice:
        options = session.current_question.options
        position = ord(command.choice) - ord("A")
        if session.reviewing:
            console.print("[yellow]This question is already answered.[/]")
        elif 0 <= position < len(options) and session.select_option(
            options[position]
        ):
            console.print(f"Selected [bold]{command.choice}[/].")
        else:
            console.print(
                "[red]'%s' is not a valid choice for this question.[/red]"
                % command.choice,
            )
    elif command.type == "next":
        if not session.advance():
            console.print("[yellow]Pick an answer first, or skip.[/]")
    elif command.type == "prev":
        session.go_back()
    elif command.type == "skip":
        session.skip()


def _render_question(console: Console, view: SessionView) -> None:
    header = Text.assemble(
        (f"Question {view.current_index + 1}", "bold cyan"),
        (f" / {view.total_questions}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(
        Text(view.timer_label, style="dim" if view.reviewing else "bold red")
    )
    console.print(Text(view.question_text, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")

    marked = view.selected_option
    if view.recorded is not None:
        marked = view.recorded.chosen_option
    for position, option in enumerate(view.options):
        chosen = option == marked
        indicator = "•" if chosen else " "
        row_text = Text(indicator + " ")
        row_text.append(option, style="bold green" if chosen else "")
        table.add_row(option_key(position), row_text)

    console.print(table)
    keys = ", ".join(option_key(i) for i in range(len(view.options)))
    console.print(
        Text(
            f"Answered {view.answered_count}/{view.total_questions} | "
            f"Commands: choices [{keys}], n ({view.advance_label.lower()}), "
            "p (prev), s (skip), q (quit)",
            style="dim",
        )
    )


def results_table(result: QuizResult) -> Table:
    table = Table(title="Answers", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer")
    table.add_column("Correct answer")
    table.add_column("Result", justify="center")
    for idx, item in enumerate(result.answered, start=1):
        yours = Text(
            str(item.chosen_option),
            style="green" if item.is_correct else "red",
        )
        correct = Text("" if item.is_correct else item.question.correct_option)
        table.add_row(
            str(idx),
            Text(item.question.text),
            yours,
            correct,
            "✅" if item.is_correct else "❌",
        )
    return table


def results_renderable(
    result: QuizResult, *, high_score: int | None = None
) -> Group:
    lines = [
        Text(
            f"You scored {result.final_score} out of {result.total}",
            style="bold",
        ),
        Text(f"Accuracy {result.accuracy * 100:.1f}%", style="dim"),
    ]
    if high_score is not None:
        lines.append(Text(f"High Score: {high_score}", style="bold magenta"))
    return Group(
        Panel(Group(*lines), title="Quiz Complete!", border_style="green"),
        results_table(result),
    )


def render_results(
    console: Console, result: QuizResult, *, high_score: int | None = None
) -> None:
    console.print()
    console.rule(Text("Quiz Summary", style="bold magenta"))
    console.print(results_renderable(result, high_score=high_score))
