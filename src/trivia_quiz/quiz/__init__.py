from .models import (
    SKIPPED,
    AnsweredQuestion,
    Phase,
    Question,
    QuizResult,
    SessionView,
)
from .session import (
    DEFAULT_COUNTDOWN_SECONDS,
    InvalidStateError,
    QuizSession,
)
from .countdown import Countdown
from .source import (
    FALLBACK_QUESTIONS,
    FetchError,
    OpenTDBSource,
    StaticSource,
    load_questions,
)
from .scores import HIGH_SCORE_KEY, ScoreStore, ScoreStoreError
from .console import (
    ConsoleSessionResult,
    parse_session_command,
    render_results,
    run_quiz_session,
)
from .view import QuestionView, QuizApp, ResultsView

__all__ = [
    "SKIPPED",
    "AnsweredQuestion",
    "Phase",
    "Question",
    "QuizResult",
    "SessionView",
    "DEFAULT_COUNTDOWN_SECONDS",
    "InvalidStateError",
    "QuizSession",
    "Countdown",
    "FALLBACK_QUESTIONS",
    "FetchError",
    "OpenTDBSource",
    "StaticSource",
    "load_questions",
    "HIGH_SCORE_KEY",
    "ScoreStore",
    "ScoreStoreError",
    "ConsoleSessionResult",
    "parse_session_command",
    "render_results",
    "run_quiz_session",
    "QuestionView",
    "QuizApp",
    "ResultsView",
]
