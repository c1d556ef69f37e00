"""Addition problems and their random generation."""

from __future__ import annotations

import random
from dataclasses import dataclass

__all__ = [
    "OPERAND_MIN",
    "OPERAND_MAX",
    "Problem",
    "generate_problem",
    "generate_problems",
]

OPERAND_MIN = 1
OPERAND_MAX = 20


@dataclass(frozen=True)
class Problem:
    """One addition question, an ordered pair of addends."""

    operand1: int
    operand2: int

    @property
    def answer(self) -> int:
        return self.operand1 + self.operand2

    def __str__(self) -> str:
        return f"{self.operand1} + {self.operand2}"


def generate_problem(rng: random.Random) -> Problem:
    return Problem(
        rng.randint(OPERAND_MIN, OPERAND_MAX),
        rng.randint(OPERAND_MIN, OPERAND_MAX),
    )


def generate_problems(
    count: int, rng: random.Random | None = None
) -> tuple[Problem, ...]:
    """Return ``count`` problems with operands uniform on the operand range.

    A non-positive ``count`` yields an empty tuple. Pass a seeded
    :class:`random.Random` for reproducible sequences.
    """

    source = rng if rng is not None else random.Random()
    return tuple(generate_problem(source) for _ in range(max(count, 0)))
