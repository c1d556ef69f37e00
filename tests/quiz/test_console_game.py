from __future__ import annotations

import logging
import random

from rich.console import Console

from mathgame.quiz import console as game_console
from mathgame.quiz.console import GameResult, run_game
from mathgame.quiz.problems import generate_problems


def make_provider(commands: list[str]):
    iterator = iter(commands)

    def _provider() -> str:
        return next(iterator)

    return _provider


def record_console() -> Console:
    return Console(record=True, width=80, force_terminal=True)


def expected_answers(seed: int, count: int) -> list[int]:
    return [p.answer for p in generate_problems(count, random.Random(seed))]


def test_play_round_with_prompted_count() -> None:
    console = record_console()
    answers = expected_answers(5, 2)
    provider = make_provider(["2", str(answers[0]), "oops", "q"])

    result = run_game(console, provider, rng=random.Random(5))

    assert isinstance(result, GameResult)
    assert result.exit_action == "quit"
    assert result.rounds == 1
    assert result.session.correct_count == 1
    assert result.session.wrong_count == 1
    assert result.session.responses[1].given is None
    output = console.export_text()
    assert "Enter number of questions" in output
    assert "Question 1 / 2" in output
    assert "Correct!" in output
    assert "Wrong." in output
    assert "Game Over!" in output
    assert "Review" in output


def test_requested_count_skips_start_prompt() -> None:
    console = record_console()
    answers = expected_answers(11, 3)
    provider = make_provider([str(a) for a in answers] + ["quit"])

    result = run_game(
        console,
        provider,
        requested_count=3,
        rng=random.Random(11),
    )

    assert result.session.correct_count == 3
    assert result.session.wrong_count == 0
    assert "Enter number of questions" not in console.export_text()


def test_cancel_ends_round_without_counting_question() -> None:
    console = record_console()
    provider = make_provider(["0", "cancel", "q"])

    result = run_game(
        console,
        provider,
        requested_count=4,
        rng=random.Random(1),
    )

    session = result.session
    assert session.is_complete
    assert session.cancelled
    assert session.correct_count == 0
    assert session.wrong_count == 1
    assert session.current_index == 1
    assert "Quiz cancelled" in console.export_text()


def test_restart_returns_to_start_prompt() -> None:
    console = record_console()
    provider = make_provider(["c", "r", "1", "0", "x"])

    result = run_game(
        console,
        provider,
        requested_count=2,
        rng=random.Random(2),
    )

    assert result.rounds == 2
    assert result.session.total_questions == 1
    assert result.session.wrong_count == 1
    assert "Enter number of questions" in console.export_text()


def test_invalid_count_gives_empty_round() -> None:
    console = record_console()
    provider = make_provider(["many", "q"])

    result = run_game(console, provider)

    assert result.session.total_questions == 0
    assert result.session.is_complete
    output = console.export_text()
    assert "No questions requested" in output
    assert "Game Over!" in output


def test_interrupted_provider_ends_game() -> None:
    console = record_console()

    result = run_game(
        console,
        iter(()).__next__,
        requested_count=2,
        rng=random.Random(0),
    )

    assert result.exit_action == "interrupted"
    assert result.session.current_index == 0
    assert "Session interrupted" in console.export_text()


def test_review_table_can_be_hidden() -> None:
    console = record_console()
    provider = make_provider(["0", "q"])

    run_game(
        console,
        provider,
        requested_count=1,
        rng=random.Random(4),
        show_review=False,
    )

    output = console.export_text()
    assert "Game Over!" in output
    assert "Review" not in output


def test_game_logs_lifecycle_events(caplog) -> None:
    console = record_console()
    provider = make_provider(["1", "c", "q"])
    logger = logging.getLogger("mathgame.tests.console")
    logger.setLevel(logging.DEBUG)

    with caplog.at_level(logging.DEBUG, logger="mathgame.tests.console"):
        run_game(
            console,
            provider,
            requested_count=3,
            rng=random.Random(9),
            logger=logger,
        )

    messages = [record.getMessage() for record in caplog.records]
    assert "Quiz started" in messages
    assert "Answer recorded" in messages
    assert "Quiz cancelled" in messages
    assert "Game finished" in messages
    started = next(r for r in caplog.records if r.getMessage() == "Quiz started")
    assert started.question_count == 3


def test_default_logger_is_module_logger() -> None:
    assert game_console._default_logger.name == "mathgame.quiz.console"


def test_typed_number_is_recorded_even_when_it_equals_sentinel() -> None:
    console = record_console()
    provider = make_provider(["-999999", "q"])

    result = run_game(
        console, provider, requested_count=1, rng=random.Random(4)
    )

    assert result.session.wrong_count == 1
    assert result.session.responses[0].given == -999999
