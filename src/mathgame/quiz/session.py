"""Quiz session state machine.

A session is an immutable :class:`QuizSession` value. Every user action is an
event fed through :func:`reduce`, which returns the next value; presentation
layers keep the current value and re-render from :func:`view`. The helper
functions ``start``, ``answer``, ``cancel`` and ``restart`` wrap the reducer
for callers that prefer plain calls over event objects.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from .problems import Problem, generate_problems

__all__ = [
    "WRONG_ANSWER_SENTINEL",
    "SessionStateError",
    "SessionStatus",
    "Screen",
    "AnswerRecord",
    "QuizSession",
    "Start",
    "Answer",
    "Cancel",
    "Restart",
    "Event",
    "reduce",
    "start",
    "current_problem",
    "answer",
    "cancel",
    "restart",
    "view",
    "parse_count",
    "parse_answer",
    "read_answer",
    "is_answer_correct",
]

# Outside the attainable sum range [2, 40], so it never matches an answer.
WRONG_ANSWER_SENTINEL = -999999


class SessionStateError(RuntimeError):
    """Raised when an event is not valid for the session's current state."""


class SessionStatus(Enum):
    AWAITING_START = "awaiting_start"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class Screen(Enum):
    START = "start"
    QUESTION = "question"
    RESULT = "result"


@dataclass(frozen=True)
class AnswerRecord:
    """Outcome of a single answered problem."""

    problem: Problem
    given: int | None
    is_correct: bool


@dataclass(frozen=True)
class QuizSession:
    """Immutable snapshot of one quiz run."""

    problems: tuple[Problem, ...] = ()
    current_index: int = 0
    correct_count: int = 0
    wrong_count: int = 0
    responses: tuple[AnswerRecord, ...] = ()
    started: bool = False
    cancelled: bool = False

    def __post_init__(self) -> None:
        if self.correct_count < 0 or self.wrong_count < 0:
            raise ValueError("Counters must be non-negative.")
        if not 0 <= self.current_index <= len(self.problems):
            raise ValueError(
                "current_index {0} outside [0, {1}].".format(
                    self.current_index, len(self.problems)
                )
            )
        answered = self.correct_count + self.wrong_count
        if answered != self.current_index or answered != len(self.responses):
            raise ValueError(
                "correct_count + wrong_count must equal current_index."
            )
        if not self.started and (self.problems or self.cancelled):
            raise ValueError("A session that has not started holds no state.")

    @property
    def total_questions(self) -> int:
        return len(self.problems)

    @property
    def answered_count(self) -> int:
        return self.current_index

    @property
    def status(self) -> SessionStatus:
        if not self.started:
            return SessionStatus.AWAITING_START
        if self.cancelled or self.current_index >= len(self.problems):
            return SessionStatus.COMPLETE
        return SessionStatus.IN_PROGRESS

    @property
    def is_complete(self) -> bool:
        return self.status is SessionStatus.COMPLETE

    @property
    def accuracy(self) -> float:
        if self.answered_count == 0:
            return 0.0
        return self.correct_count / self.answered_count

    @property
    def counts(self) -> dict[str, int]:
        return {
            "answered": self.answered_count,
            "correct": self.correct_count,
            "wrong": self.wrong_count,
            "total": self.total_questions,
        }


@dataclass(frozen=True)
class Start:
    problems: tuple[Problem, ...]


@dataclass(frozen=True)
class Answer:
    value: int
    raw_valid: bool = True


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class Restart:
    pass


Event = Union[Start, Answer, Cancel, Restart]


def reduce(session: QuizSession, event: Event) -> QuizSession:
    """Return the session that results from applying ``event``."""

    status = session.status
    if isinstance(event, Restart):
        return QuizSession()
    if isinstance(event, Start):
        if status is not SessionStatus.AWAITING_START:
            raise SessionStateError(
                "Cannot start a quiz while one is {0}; restart first.".format(
                    status.value
                )
            )
        return QuizSession(problems=tuple(event.problems), started=True)
    if isinstance(event, Answer):
        if status is not SessionStatus.IN_PROGRESS:
            raise SessionStateError(
                f"Cannot answer while the quiz is {status.value}."
            )
        problem = session.problems[session.current_index]
        correct = is_answer_correct(problem, event.value)
        record = AnswerRecord(
            problem=problem,
            given=event.value if event.raw_valid else None,
            is_correct=correct,
        )
        return replace(
            session,
            current_index=session.current_index + 1,
            correct_count=session.correct_count + int(correct),
            wrong_count=session.wrong_count + int(not correct),
            responses=session.responses + (record,),
        )
    if isinstance(event, Cancel):
        if status is SessionStatus.AWAITING_START:
            raise SessionStateError("Cannot cancel a quiz that never started.")
        if status is SessionStatus.COMPLETE:
            return session
        return replace(session, cancelled=True)
    raise TypeError(f"Unsupported event: {event!r}")


def start(
    requested_count: int | None,
    *,
    rng: random.Random | None = None,
) -> QuizSession:
    """Begin a fresh session with ``requested_count`` random problems.

    ``None``, a bool or a negative count is treated as zero, which produces a
    session that is already complete.
    """

    count = requested_count
    if isinstance(count, bool) or not isinstance(count, int):
        count = 0
    return reduce(QuizSession(), Start(generate_problems(count, rng)))


def current_problem(session: QuizSession) -> Problem | None:
    """Return the problem awaiting an answer, or ``None`` when there is none."""

    if session.status is not SessionStatus.IN_PROGRESS:
        return None
    return session.problems[session.current_index]


def answer(
    session: QuizSession, user_value: int, *, raw_valid: bool = True
) -> tuple[bool, QuizSession]:
    """Grade ``user_value`` against the current problem and advance.

    Pass ``raw_valid=False`` when ``user_value`` is the substitute for input
    that did not parse; the response history then records ``given=None``.
    """

    updated = reduce(session, Answer(user_value, raw_valid=raw_valid))
    return updated.responses[-1].is_correct, updated


def cancel(session: QuizSession) -> QuizSession:
    return reduce(session, Cancel())


def restart(session: QuizSession | None = None) -> QuizSession:
    return reduce(session or QuizSession(), Restart())


def view(session: QuizSession) -> Screen:
    """Derive which screen a presentation layer should show."""

    return _SCREENS[session.status]


_SCREENS = {
    SessionStatus.AWAITING_START: Screen.START,
    SessionStatus.IN_PROGRESS: Screen.QUESTION,
    SessionStatus.COMPLETE: Screen.RESULT,
}


def parse_count(raw: str | None) -> int:
    """Parse a requested question count; anything unusable becomes 0."""

    value = _parse_int(raw)
    if value is None or value < 0:
        return 0
    return value


def parse_answer(raw: str | None) -> int:
    """Parse an answer; non-numeric text becomes the wrong-answer sentinel."""

    return read_answer(raw)[0]


def read_answer(raw: str | None) -> tuple[int, bool]:
    """Return the parsed answer and whether ``raw`` held a number at all."""

    value = _parse_int(raw)
    if value is None:
        return WRONG_ANSWER_SENTINEL, False
    return value, True


def is_answer_correct(problem: Problem, value: int) -> bool:
    return value == problem.answer


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None
