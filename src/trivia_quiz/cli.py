"""Command line entry point for the trivia quiz."""

from __future__ import annotations

import argparse
import random
import sys
from importlib import metadata
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console

from .core import (
    AppConfig,
    ConfigError,
    WorkspaceError,
    WorkspaceLayout,
    configure_logger,
    ensure_workspace,
    load_config,
    write_template,
)
from .core.config import CONFIG_FILENAME
from .quiz import (
    FALLBACK_QUESTIONS,
    OpenTDBSource,
    Question,
    QuizApp,
    ScoreStore,
    ScoreStoreError,
    StaticSource,
    load_questions,
    run_quiz_session,
)

QuestionLoader = Callable[[], Sequence[Question]]
InputProvider = Callable[[], str]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trivia-quiz",
        description="Multiple-choice trivia quiz with a per-question timer",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="store_true", help="Print the version"
    )
    parser.add_argument(
        "--home",
        type=Path,
        help="Override the data directory (defaults to TRIVIA_QUIZ_HOME "
        "or ~/.trivia-quiz)",
    )
    sub = parser.add_subparsers(dest="command")

    sp_init = sub.add_parser(
        "init", help="Create the data directory and a config template"
    )
    sp_init.add_argument(
        "--force", action="store_true", help="Overwrite an existing config"
    )

    sp_play = sub.add_parser("play", help="Start a quiz")
    sp_play.add_argument("--config", type=Path, help="Path to a TOML config")
    sp_play.add_argument(
        "--console",
        action="store_true",
        help="Use the plain console prompt instead of the TUI",
    )
    sp_play.add_argument(
        "--offline",
        action="store_true",
        help="Use the built-in questions without contacting the API",
    )
    sp_play.add_argument("--amount", type=int, help="Questions per quiz")
    sp_play.add_argument(
        "--countdown", type=int, help="Seconds allowed per question"
    )
    sp_play.add_argument(
        "--seed", type=int, help="Seed for answer option shuffling"
    )
    sp_play.add_argument(
        "--verbose", action="store_true", help="Log to stderr as well"
    )

    sp_score = sub.add_parser("score", help="Show the stored high score")
    sp_score.add_argument("--config", type=Path, help="Path to a TOML config")
    sp_score.add_argument(
        "--reset", action="store_true", help="Reset the high score to 0"
    )
    return parser


def build_loader(
    config: AppConfig,
    *,
    offline: bool = False,
    amount: Optional[int] = None,
    seed: Optional[int] = None,
) -> QuestionLoader:
    """Return a callable that fetches a fresh question list per attempt."""

    if offline or config.source.offline:
        source = StaticSource(FALLBACK_QUESTIONS)
    else:
        source = OpenTDBSource.from_config(
            config.source,
            shuffle=config.quiz.shuffle_options,
            rng=random.Random(seed) if seed is not None else None,
        )
        if amount is not None:
            source.amount = amount

    def _load() -> Sequence[Question]:
        questions, _ = load_questions(source)
        return questions

    return _load


def play_console(
    loader: QuestionLoader,
    *,
    countdown_seconds: int,
    score_store: ScoreStore,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
) -> int:
    console = console or Console()
    provider = input_provider or (lambda: console.input("> "))
    while True:
        outcome = run_quiz_session(
            loader(),
            console,
            provider,
            countdown_seconds=countdown_seconds,
            score_store=score_store,
        )
        if outcome.exit_action == "quit":
            return 0
        console.print("Play again? \\[y/N]")
        try:
            again = provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            return 0
        if again.strip().lower() not in {"y", "yes"}:
            return 0


def _prepare(
    args: argparse.Namespace,
) -> tuple[WorkspaceLayout, AppConfig]:
    layout = ensure_workspace(path=args.home)
    config = load_config(
        explicit_path=getattr(args, "config", None),
        config_dir=layout.path_for("config"),
    )
    return layout, config


def _score_store(layout: WorkspaceLayout, config: AppConfig) -> ScoreStore:
    return ScoreStore(
        layout.path_for("scores") / config.storage.high_score_file,
        key=config.storage.high_score_key,
    )


def _cmd_init(args: argparse.Namespace) -> int:
    layout = ensure_workspace(path=args.home)
    config_path = layout.path_for("config") / CONFIG_FILENAME
    lines = [f"Workspace ready at {layout.home}"]
    try:
        write_template(config_path, overwrite=bool(args.force))
        lines.append(f"Created config template {config_path}")
    except ConfigError:
        lines.append(f"Config already exists at {config_path}")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


def _cmd_play(args: argparse.Namespace) -> int:
    layout, config = _prepare(args)
    verbose = bool(args.verbose) or config.logging.verbose
    logger, log_path = configure_logger(
        "trivia_quiz",
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=verbose,
    )
    if args.amount is not None and not 1 <= args.amount <= 50:
        print("Error: --amount must be between 1 and 50.", file=sys.stderr)
        return 2
    if args.countdown is not None and args.countdown <= 0:
        print("Error: --countdown must be positive.", file=sys.stderr)
        return 2
    countdown = args.countdown or config.quiz.countdown_seconds
    loader = build_loader(
        config, offline=args.offline, amount=args.amount, seed=args.seed
    )
    store = _score_store(layout, config)
    logger.info(
        "Starting quiz",
        extra={"console": bool(args.console), "log_path": log_path},
    )
    if args.console:
        return play_console(
            loader, countdown_seconds=countdown, score_store=store
        )
    QuizApp(loader, countdown_seconds=countdown, score_store=store).run()
    return 0


def _cmd_score(args: argparse.Namespace) -> int:
    layout, config = _prepare(args)
    store = _score_store(layout, config)
    if args.reset:
        store.reset()
        print("High score reset.")
        return 0
    print(f"High score: {store.get()}")
    return 0


def _version() -> str:
    try:
        return metadata.version("trivia-quiz")
    except metadata.PackageNotFoundError:
        return "unknown"


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.version:
        print(_version())
        return 0
    handlers = {
        "init": _cmd_init,
        "play": _cmd_play,
        "score": _cmd_score,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 2
    try:
        return handler(args)
    except (ConfigError, WorkspaceError, ScoreStoreError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
