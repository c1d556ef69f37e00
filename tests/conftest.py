from __future__ import annotations

import logging
import random
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mathgame.core.logging import release_logger  # noqa: E402
from mathgame.core.workspace import WORKSPACE_ENV  # noqa: E402


@pytest.fixture(autouse=True)
def _release_quiz_logger() -> Iterator[None]:
    yield
    release_logger(logging.getLogger("mathgame.quiz"))


@pytest.fixture
def workspace_home(tmp_path: Path, monkeypatch) -> Path:
    """Point MATHGAME_DATA_HOME at a per-test directory."""

    home = tmp_path / "mathgame-home"
    monkeypatch.setenv(WORKSPACE_ENV, str(home))
    for suffix in ("CONFIG", "QUESTION_COUNT", "SEED", "LOG_LEVEL"):
        monkeypatch.delenv(f"MATHGAME_{suffix}", raising=False)
    return home


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
