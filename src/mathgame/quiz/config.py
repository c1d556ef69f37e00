"""Configuration loader for the quiz commands."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from mathgame.core import workspace as workspace_mod

CONFIG_FILENAME = "mathgame.toml"
CONFIG_ENV = "MATHGAME_CONFIG"
ENV_PREFIX = "MATHGAME_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class MathGameConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved options for a quiz run."""

    question_count: Optional[int]
    seed: Optional[int]
    show_review: bool
    log_level: str
    verbose: bool


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    question_count: Optional[int] = None
    seed: Optional[int] = None
    show_review: Optional[bool] = None
    log_level: Optional[str] = None
    verbose: Optional[bool] = None


@dataclass(frozen=True)
class LoadResult:
    """Result of loading configuration, including workspace context."""

    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    default_path = layout.path_for("config") / CONFIG_FILENAME
    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=default_path,
    )

    tree = default_tree()
    loaded_path: Optional[Path] = None
    if requested_path.exists():
        loaded_path = requested_path
        _apply_file(tree, _read_toml(requested_path), source=requested_path)
    elif config_path is not None or _parse_env_string(env_map, "CONFIG"):
        raise MathGameConfigError(f"Config file not found: {requested_path}")

    quiz_section = tree["quiz"]
    logging_section = tree["logging"]

    question_count = _pick_first(
        overrides.question_count,
        _parse_env_int(env_map, "QUESTION_COUNT"),
        quiz_section["question_count"],
    )
    seed = _pick_first(
        overrides.seed,
        _parse_env_int(env_map, "SEED"),
        quiz_section["seed"],
    )
    show_review = _pick_first(
        overrides.show_review, quiz_section["show_review"]
    )
    log_level = _pick_first(
        overrides.log_level,
        _parse_env_string(env_map, "LOG_LEVEL"),
        logging_section["level"],
    )
    verbose = _pick_first(overrides.verbose, logging_section["verbose"])

    config = QuizConfig(
        question_count=_require_optional_count(
            question_count, field="quiz.question_count"
        ),
        seed=_require_optional_int(seed, field="quiz.seed"),
        show_review=_require_bool(show_review, field="quiz.show_review"),
        log_level=_require_log_level(log_level),
        verbose=_require_bool(verbose, field="logging.verbose"),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def default_tree() -> MutableMapping[str, MutableMapping[str, Any]]:
    """Return a fresh copy of the default configuration tree."""

    return {
        "quiz": {
            "question_count": None,
            "seed": None,
            "show_review": True,
        },
        "logging": {
            "level": "INFO",
            "verbose": False,
        },
    }


def config_template() -> str:
    """Return the TOML template written by ``mathgame config init``."""

    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    """Write the default template to ``path`` readable by the owner only."""

    if path.exists() and not overwrite:
        raise MathGameConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config_template(), encoding="utf-8")
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path


def default_config_path(layout: workspace_mod.WorkspaceLayout) -> Path:
    return layout.path_for("config") / CONFIG_FILENAME


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise MathGameConfigError(
            f"Failed to parse config TOML {path}: {exc}"
        ) from exc


def _apply_file(
    tree: MutableMapping[str, MutableMapping[str, Any]],
    data: Mapping[str, Any],
    *,
    source: Path,
) -> None:
    """Copy the ``[quiz]`` and ``[logging]`` values of ``data`` into ``tree``.

    Only the two tables of ``mathgame.toml`` are accepted; any other table or
    key is reported with its dotted name and the offending file.
    """

    for section, values in data.items():
        if section not in tree:
            raise MathGameConfigError(
                "Unknown configuration key '{0}' in {1}; expected one of "
                "[{2}].".format(section, source, "], [".join(tree))
            )
        if not isinstance(values, Mapping):
            raise MathGameConfigError(
                "Expected table for '{0}' in {1}, found {2}.".format(
                    section, source, type(values).__name__
                )
            )
        known = tree[section]
        for key, value in values.items():
            if key not in known:
                raise MathGameConfigError(
                    "Unknown configuration key '{0}.{1}' in {2}; expected "
                    "one of {3}.".format(
                        section, key, source, ", ".join(known)
                    )
                )
            known[key] = value


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _parse_env_string(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _require_optional_count(value: Any, *, field: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MathGameConfigError(f"'{field}' must be a non-negative integer.")
    return value


def _require_optional_int(value: Any, *, field: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise MathGameConfigError(f"'{field}' must be an integer.")
    return value


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise MathGameConfigError(f"'{field}' must be a boolean.")
    return value


def _require_log_level(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MathGameConfigError("logging.level must be a non-empty string.")
    level = value.strip().upper()
    if level not in _LOG_LEVELS:
        raise MathGameConfigError(
            "logging.level must be one of {0}.".format(", ".join(_LOG_LEVELS))
        )
    return level


def _parse_env_int(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _parse_env_string(env_map, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise MathGameConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got '{raw}'."
        ) from exc


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


_CONFIG_TEMPLATE = """
# mathgame configuration

[quiz]
# Number of questions per round; leave unset to be asked at the start screen
# question_count = 10
# Fixed seed for reproducible problems
# seed = 1234
# Show the per-question review table on the result screen
show_review = true

[logging]
level = "INFO"
verbose = false
"""
