from __future__ import annotations

from fixtures import make_question
from trivia_quiz.quiz.models import SKIPPED
from trivia_quiz.quiz.scores import ScoreStore
from trivia_quiz.quiz.session import QuizSession
from trivia_quiz.quiz.view import QuestionView, QuizApp


def _loader(questions):
    calls = []

    def _load():
        calls.append(1)
        return list(questions)

    _load.calls = calls  # type: ignore[attr-defined]
    return _load


def test_quiz_app_initial_state(questions) -> None:
    app = QuizApp(_loader(questions))

    assert app.session.current_index == 0
    assert app.session.total_questions == 3
    assert app.countdown.turn == 0


def test_quiz_app_navigation_and_selection(questions) -> None:
    app = QuizApp(_loader(questions))

    assert app.next_question() is False
    assert app.select_answer(1) is True
    assert app.session.pending_selection == "int"
    assert app.select_answer(9) is False
    assert app.next_question() is True
    assert app.session.current_index == 1
    assert app.countdown.turn == 1
    assert app.prev_question() is True
    assert app.session.reviewing is True
    assert app.next_question() is True
    assert app.skip_question() is True
    assert app.session.current_index == 2


def test_quiz_app_tick_expires_question(questions) -> None:
    app = QuizApp(_loader(questions), countdown_seconds=2)

    app.tick()
    app.tick()

    assert app.session.answered[0].chosen_option is SKIPPED
    assert app.countdown.turn == 1
    app.tick()
    assert app.session.time_remaining == 1


def test_quiz_app_records_high_score_and_restarts(tmp_path, monkeypatch):
    store = ScoreStore(tmp_path / "high_score.json")
    store.set(3)
    loader = _loader([make_question()])
    app = QuizApp(loader, score_store=store)
    loads = []
    monkeypatch.setattr(app, "_load_questions", lambda: loads.append(1))

    assert app.restart() is False
    app.select_answer(0)
    app.next_question()

    assert app.session.is_finished
    assert app.high_score == 3
    first = app.session
    assert app.restart() is True
    assert app.fetching is True
    assert app.high_score is None
    assert app.restart() is False
    assert loads == [1]
    assert len(loader.calls) == 1

    app.start_session([make_question("Fresh")])

    assert app.fetching is False
    assert app.session is not first
    assert app.session.current_question.text == "Fresh"
    assert app.countdown.turn == 0


def test_quiz_app_finishes_when_score_write_fails(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    store = ScoreStore(blocker / "high_score.json")
    app = QuizApp(_loader([make_question()]), score_store=store)

    assert app.skip_question() is True

    assert app.session.is_finished
    assert app.high_score is None
    assert app.session.result().total == 1


def test_question_view_marks_recorded_answer(questions) -> None:
    session = QuizSession(questions)
    session.select_option("Array")
    session.advance()
    session.go_back()

    view = QuestionView(session.view())

    assert view.marked_option() == "Array"
    assert view.timer_text() == "⏳ 30s · Reviewing (answer locked)"


def test_question_view_timer_text(questions) -> None:
    session = QuizSession(questions)
    session.tick()

    view = QuestionView(session.view())

    assert view.marked_option() is None
    assert view.timer_text() == "⏳ 29s"


def test_question_view_skipped_answer_marks_no_option() -> None:
    question = make_question(
        "Which label?", ("Skipped", "Answered", "Pending"), "Answered"
    )
    session = QuizSession([question, make_question()])
    session.skip()
    session.go_back()

    view = QuestionView(session.view())

    assert view.marked_option() is SKIPPED
    assert view.marked_option() != "Skipped"
