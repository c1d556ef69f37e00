"""Textual front-end for the quiz session.

The app keeps the current :class:`QuizSession` value and remounts one view
under ``#stage`` whenever the derived :class:`Screen` changes. The public
``submit_*``, ``cancel_quiz`` and ``restart_quiz`` helpers drive the session
and work whether or not the app is running.
"""

from __future__ import annotations

import logging
import random

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widget import Widget
from textual.widgets import Button, Input, Static

from .problems import Problem
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

_default_logger = logging.getLogger(__name__)


class MathGameApp(App):
    CSS_PATH = None
    CSS = """
#stage { align: center middle; }
StartView, QuestionView, ResultView { width: 48; height: auto; }
#stage Vertical { height: auto; }
#stage Horizontal { height: auto; }
#feedback.correct { color: $success; }
#feedback.wrong { color: $error; }
"""
    BINDINGS = [
        Binding("escape", "cancel_quiz", "Cancel", priority=True),
        Binding("ctrl+r", "restart_quiz", "Restart", priority=True),
    ]

    def __init__(
        self,
        *,
        requested_count: int | None = None,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__()
        self._problem_rng = rng
        self._game_log = logger or _default_logger
        self._quiz = QuizSession()
        self._feedback_message = ""
        if requested_count is not None:
            self._begin_round(requested_count)

    def compose(self) -> ComposeResult:
        with Container(id="stage"):
            yield self._build_stage()

    @property
    def quiz_session(self) -> QuizSession:
        return self._quiz

    @property
    def stage(self) -> Screen:
        return view(self._quiz)

    # Pure helpers driving the session (testable without running App)
    def submit_count(self, raw: str) -> Screen:
        if self.stage is not Screen.START:
            return self.stage
        self._begin_round(parse_count(raw))
        self._update_stage()
        return self.stage

    def submit_answer(self, raw: str) -> bool | None:
        """Grade ``raw`` for the current problem; ``None`` when not asking."""
        problem = current_problem(self._quiz)
        if problem is None:
            return None
        index = self._quiz.current_index
        value, raw_valid = read_answer(raw)
        is_correct, self._quiz = answer(
            self._quiz, value, raw_valid=raw_valid
        )
        self._feedback_message = _feedback_text(problem, is_correct)
        self._game_log.debug(
            "Answer recorded",
            extra={
                "index": index,
                "problem": str(problem),
                "correct": is_correct,
            },
        )
        if self._quiz.is_complete:
            self._game_log.info("Quiz completed", extra=self._quiz.counts)
        self._update_stage()
        return is_correct

    def cancel_quiz(self) -> Screen:
        if self.stage is Screen.QUESTION:
            self._quiz = cancel(self._quiz)
            self._game_log.info("Quiz cancelled", extra=self._quiz.counts)
            self._update_stage()
        return self.stage

    def restart_quiz(self) -> Screen:
        if self.stage is Screen.RESULT:
            self._quiz = restart(self._quiz)
            self._feedback_message = ""
            self._game_log.info("Quiz restarted")
            self._update_stage()
        return self.stage

    def _begin_round(self, count: int) -> None:
        self._quiz = start(count, rng=self._problem_rng)
        self._feedback_message = ""
        self._game_log.info("Quiz started", extra={"question_count": count})
        if self._quiz.is_complete:
            self._game_log.info("Quiz completed", extra=self._quiz.counts)

    def _build_stage(self) -> Widget:
        screen = self.stage
        if screen is Screen.START:
            return StartView()
        if screen is Screen.QUESTION:
            return QuestionView(self._quiz, feedback=self._feedback_message)
        return ResultView(self._quiz)

    def _update_stage(self) -> None:
        if not self.is_running:
            return
        try:
            stage = self.query_one("#stage", Container)
        except NoMatches:
            return
        stage.remove_children()
        stage.mount(self._build_stage())
        focus_target = {
            Screen.START: "#count-input",
            Screen.QUESTION: "#answer-input",
            Screen.RESULT: "#restart",
        }[self.stage]
        self.call_after_refresh(self._focus_selector, focus_target)

    def _focus_selector(self, selector: str) -> None:
        try:
            self.query_one(selector).focus()
        except NoMatches:
            pass

    def _read_input(self, selector: str) -> str:
        try:
            return self.query_one(selector, Input).value
        except NoMatches:
            return ""

    def action_cancel_quiz(self) -> None:
        self.cancel_quiz()

    def action_restart_quiz(self) -> None:
        self.restart_quiz()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid == "start":
            self.submit_count(self._read_input("#count-input"))
        elif bid == "next":
            self.submit_answer(self._read_input("#answer-input"))
        elif bid == "cancel":
            self.cancel_quiz()
        elif bid == "restart":
            self.restart_quiz()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        iid = event.input.id or ""
        if iid == "count-input":
            self.submit_count(event.value)
        elif iid == "answer-input":
            self.submit_answer(event.value)


class StartView(Widget):
    DEFAULT_CSS = "StartView { height: auto; }"

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Enter number of questions:")
            yield Input(placeholder="10", id="count-input", type="integer")
            yield Button("Start", id="start", variant="primary")


class QuestionView(Widget):
    """Scoreboard, progress and the current problem with an answer box."""

    DEFAULT_CSS = "QuestionView { height: auto; }"

    def __init__(self, session: QuizSession, *, feedback: str = "") -> None:
        super().__init__()
        self.quiz_session = session
        self.feedback_message = feedback

    def compose(self) -> ComposeResult:
        problem = current_problem(self.quiz_session)
        with Vertical():
            yield Static(scoreboard_text(self.quiz_session), id="scoreboard")
            yield Static(progress_text(self.quiz_session), id="progress")
            yield Static(f"{problem} = ?", id="problem")
            yield Input(id="answer-input")
            with Horizontal():
                yield Button("Next", id="next", variant="primary")
                yield Button("Cancel", id="cancel")
            feedback = Static(self.feedback_message, id="feedback")
            if self.feedback_message:
                correct = self.feedback_message == "Correct!"
                feedback.add_class("correct" if correct else "wrong")
            yield feedback


class ResultView(Widget):
    DEFAULT_CSS = "ResultView { height: auto; }"

    def __init__(self, session: QuizSession) -> None:
        super().__init__()
        self.quiz_session = session

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Game Over!", id="game-over")
            yield Static(
                f"Correct: {self.quiz_session.correct_count}", id="correct"
            )
            yield Static(f"Wrong: {self.quiz_session.wrong_count}", id="wrong")
            yield Button("Restart", id="restart", variant="primary")


def scoreboard_text(session: QuizSession) -> str:
    return f"Correct: {session.correct_count}  |  Wrong: {session.wrong_count}"


def progress_text(session: QuizSession) -> str:
    return f"Question {session.current_index + 1} / {session.total_questions}"


def _feedback_text(problem: Problem, is_correct: bool) -> str:
    if is_correct:
        return "Correct!"
    return f"Wrong. {problem} = {problem.answer}"

