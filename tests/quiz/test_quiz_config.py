from __future__ import annotations

from pathlib import Path

import pytest

from mathgame.quiz import config as quiz_config
from mathgame.quiz.config import ConfigOverrides, MathGameConfigError


def write_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_apply_without_config_file(workspace_home) -> None:
    result = quiz_config.load_config()

    assert result.config_path is None
    assert result.layout.home == workspace_home.resolve()
    cfg = result.config
    assert cfg.question_count is None
    assert cfg.seed is None
    assert cfg.show_review is True
    assert cfg.log_level == "INFO"
    assert cfg.verbose is False


def test_workspace_config_file_is_loaded(workspace_home) -> None:
    path = write_config(
        workspace_home / "config" / quiz_config.CONFIG_FILENAME,
        "[quiz]\nquestion_count = 7\nseed = 99\nshow_review = false\n"
        "[logging]\nlevel = \"debug\"\n",
    )

    result = quiz_config.load_config()

    assert result.config_path.resolve() == path.resolve()
    assert result.config.question_count == 7
    assert result.config.seed == 99
    assert result.config.show_review is False
    assert result.config.log_level == "DEBUG"


def test_precedence_cli_over_env_over_file(workspace_home, tmp_path) -> None:
    path = write_config(
        tmp_path / "custom.toml",
        "[quiz]\nquestion_count = 3\nseed = 1\n",
    )
    env = {
        "MATHGAME_DATA_HOME": str(workspace_home),
        "MATHGAME_QUESTION_COUNT": "5",
        "MATHGAME_SEED": "2",
        "MATHGAME_LOG_LEVEL": "warning",
    }

    result = quiz_config.load_config(
        config_path=path,
        overrides=ConfigOverrides(question_count=8),
        env=env,
    )

    assert result.config.question_count == 8
    assert result.config.seed == 2
    assert result.config.log_level == "WARNING"


def test_env_config_path_is_used(workspace_home, tmp_path) -> None:
    path = write_config(tmp_path / "env.toml", "[quiz]\nquestion_count = 4\n")
    env = {
        "MATHGAME_DATA_HOME": str(workspace_home),
        quiz_config.CONFIG_ENV: str(path),
    }

    result = quiz_config.load_config(env=env)

    assert result.config_path.resolve() == path.resolve()
    assert result.config.question_count == 4


def test_missing_explicit_config_errors(workspace_home, tmp_path) -> None:
    with pytest.raises(MathGameConfigError, match="not found"):
        quiz_config.load_config(config_path=tmp_path / "missing.toml")


def test_unknown_key_is_rejected(workspace_home, tmp_path) -> None:
    path = write_config(tmp_path / "bad.toml", "[quiz]\nquestions = 3\n")

    with pytest.raises(MathGameConfigError, match="quiz.questions"):
        quiz_config.load_config(config_path=path)


def test_invalid_toml_is_reported(workspace_home, tmp_path) -> None:
    path = write_config(tmp_path / "broken.toml", "[quiz\n")

    with pytest.raises(MathGameConfigError, match="parse"):
        quiz_config.load_config(config_path=path)


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("[quiz]\nquestion_count = -1\n", "question_count"),
        ("[quiz]\nquestion_count = true\n", "question_count"),
        ("[quiz]\nseed = \"abc\"\n", "seed"),
        ("[quiz]\nshow_review = 1\n", "show_review"),
        ("[logging]\nlevel = \"LOUD\"\n", "logging.level"),
        ("[logging]\nverbose = \"yes\"\n", "verbose"),
        ("quiz = 3\n", "Expected table"),
    ],
)
def test_invalid_values_are_rejected(
    workspace_home, tmp_path, body: str, message: str
) -> None:
    path = write_config(tmp_path / "invalid.toml", body)

    with pytest.raises(MathGameConfigError, match=message):
        quiz_config.load_config(config_path=path)


def test_non_integer_env_value_is_rejected(workspace_home, monkeypatch) -> None:
    monkeypatch.setenv("MATHGAME_SEED", "soon")

    with pytest.raises(MathGameConfigError, match="MATHGAME_SEED"):
        quiz_config.load_config()


def test_template_round_trips_through_loader(workspace_home, tmp_path) -> None:
    target = quiz_config.write_template(tmp_path / "mathgame.toml")

    result = quiz_config.load_config(config_path=target)

    assert result.config.show_review is True
    assert result.config.question_count is None


def test_write_template_refuses_overwrite(tmp_path) -> None:
    target = quiz_config.write_template(tmp_path / "mathgame.toml")

    with pytest.raises(MathGameConfigError, match="already exists"):
        quiz_config.write_template(target)
    assert quiz_config.write_template(target, overwrite=True) == target


def test_default_tree_is_a_fresh_copy() -> None:
    first = quiz_config.default_tree()
    first["quiz"]["show_review"] = False

    assert quiz_config.default_tree()["quiz"]["show_review"] is True


def test_unknown_table_names_file_and_schema(workspace_home, tmp_path) -> None:
    path = write_config(tmp_path / "extra.toml", "[display]\ncolor = 1\n")

    with pytest.raises(MathGameConfigError) as excinfo:
        quiz_config.load_config(config_path=path)

    message = str(excinfo.value)
    assert "'display'" in message
    assert str(path) in message
    assert "[quiz], [logging]" in message


def test_unknown_key_lists_known_keys(workspace_home, tmp_path) -> None:
    path = write_config(tmp_path / "typo.toml", "[logging]\nlevle = 1\n")

    with pytest.raises(
        MathGameConfigError, match="expected one of level, verbose"
    ):
        quiz_config.load_config(config_path=path)


def test_write_template_creates_parent_directories(tmp_path) -> None:
    target = tmp_path / "nested" / "dir" / "mathgame.toml"

    quiz_config.write_template(target)

    assert target.read_text(encoding="utf-8") == quiz_config.config_template()
    assert target.stat().st_mode & 0o777 == 0o600
