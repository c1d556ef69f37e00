"""Rich-powered console front-end for the quiz session.

The loop reads one line at a time from an input provider, feeds the parsed
command into the session reducer and renders whichever screen the resulting
session maps to. All game rules live in :mod:`mathgame.quiz.session`; this
module only prompts, parses and draws.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .session import (
    QuizSession,
    Screen,
    answer,
    cancel,
    current_problem,
    parse_count,
    read_answer,
    restart,
    start,
    view,
)

InputProvider = Callable[[], str]
ExitAction = Literal["quit", "interrupted"]

_CANCEL_WORDS = {"c", "cancel"}
_RESTART_WORDS = {"r", "restart"}

_default_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameResult:
    """Return value from ``run_game``."""

    session: QuizSession
    rounds: int
    exit_action: ExitAction


def run_game(
    console: Console,
    input_provider: InputProvider,
    *,
    requested_count: int | None = None,
    rng: random.Random | None = None,
    show_review: bool = True,
    logger: logging.Logger | None = None,
) -> GameResult:
    """Play quiz rounds until the user quits from the result screen."""

    log = logger or _default_logger
    session = QuizSession()
    pending_count = requested_count
    rounds = 0

    while True:
        screen = view(session)
        if screen is Screen.START and pending_count is not None:
            session = _start_round(pending_count, rng, console, log)
            pending_count = None
            rounds += 1
            continue

        _render(console, session, show_review=show_review)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            log.info(
                "Game interrupted",
                extra={"screen": screen.value, "rounds": rounds},
            )
            return GameResult(session, rounds, "interrupted")

        if screen is Screen.START:
            session = _start_round(parse_count(raw), rng, console, log)
            rounds += 1
        elif screen is Screen.QUESTION:
            session = _handle_question_input(session, raw, console, log)
        else:
            if raw.strip().lower() not in _RESTART_WORDS:
                log.info("Game finished", extra={"rounds": rounds})
                return GameResult(session, rounds, "quit")
            session = restart(session)
            log.info("Quiz restarted", extra={"rounds": rounds})


def _start_round(
    count: int,
    rng: random.Random | None,
    console: Console,
    log: logging.Logger,
) -> QuizSession:
    updated = start(count, rng=rng)
    log.info("Quiz started", extra={"question_count": count})
    if updated.total_questions == 0:
        console.print("[yellow]No questions requested.[/]")
        log.info("Quiz completed", extra=updated.counts)
    return updated


def _handle_question_input(
    session: QuizSession,
    raw: str,
    console: Console,
    log: logging.Logger,
) -> QuizSession:
    if raw.strip().lower() in _CANCEL_WORDS:
        updated = cancel(session)
        console.print("\n[bold yellow]Quiz cancelled.[/]")
        log.info("Quiz cancelled", extra=updated.counts)
        return updated

    problem = current_problem(session)
    value, raw_valid = read_answer(raw)
    is_correct, updated = answer(session, value, raw_valid=raw_valid)
    if is_correct:
        console.print("[bold green]Correct![/]")
    else:
        console.print(
            f"[bold red]Wrong.[/] {problem} = [bold]{problem.answer}[/]"
        )
    log.debug(
        "Answer recorded",
        extra={
            "index": session.current_index,
            "problem": str(problem),
            "correct": is_correct,
        },
    )
    if updated.is_complete:
        log.info("Quiz completed", extra=updated.counts)
    return updated


def _render(
    console: Console, session: QuizSession, *, show_review: bool
) -> None:
    screen = view(session)
    if screen is Screen.START:
        _render_start(console)
    elif screen is Screen.QUESTION:
        _render_question(console, session)
    else:
        _render_result(console, session, show_review=show_review)


def _render_start(console: Console) -> None:
    console.print()
    console.print(
        Panel(
            "Enter number of questions:",
            title="Math Game",
            border_style="cyan",
        )
    )


def _render_question(console: Console, session: QuizSession) -> None:
    problem = current_problem(session)
    scoreboard = Text.assemble(
        ("Correct: ", "bold"),
        (str(session.correct_count), "green"),
        ("  |  ", "dim"),
        ("Wrong: ", "bold"),
        (str(session.wrong_count), "red"),
    )
    header = Text.assemble(
        (f"Question {session.current_index + 1}", "bold cyan"),
        (f" / {session.total_questions}", "dim"),
    )
    console.print()
    console.print(scoreboard)
    console.rule(header)
    console.print(Text(f"{problem} = ?", style="bold"))
    console.print(
        Text("Type your answer, or 'cancel' to end the quiz.", style="dim")
    )


def _render_result(
    console: Console, session: QuizSession, *, show_review: bool
) -> None:
    console.print()
    console.rule(Text("Game Over!", style="bold magenta"))

    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Correct", str(session.correct_count))
    overview.add_row("Wrong", str(session.wrong_count))
    overview.add_row(
        "Answered", f"{session.answered_count}/{session.total_questions}"
    )
    overview.add_row("Accuracy", f"{session.accuracy * 100:.1f}%")
    console.print(overview)

    if show_review and session.responses:
        review = Table(title="Review", box=box.SIMPLE, expand=True)
        review.add_column("#", justify="right")
        review.add_column("Problem")
        review.add_column("Your answer", justify="right")
        review.add_column("Correct answer", justify="right")
        review.add_column("Result", justify="center")
        for idx, record in enumerate(session.responses, start=1):
            review.add_row(
                str(idx),
                str(record.problem),
                "-" if record.given is None else str(record.given),
                str(record.problem.answer),
                "✅" if record.is_correct else "❌",
            )
        console.print(review)

    console.print(
        Text("Type 'r' to restart, anything else to quit.", style="dim")
    )
