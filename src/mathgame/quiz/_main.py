import argparse
import random
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console

from ..core.logging import configure_logger
from ..core.workspace import WorkspaceError, ensure_workspace
from .app import MathGameApp
from .config import (
    ConfigOverrides,
    LoadResult,
    MathGameConfigError,
    default_config_path,
    load_config,
    write_template,
)
from .console import run_game

LOGGER_NAME = "mathgame.quiz"


def _load(
    args: argparse.Namespace, parser: argparse.ArgumentParser
) -> LoadResult:
    overrides = ConfigOverrides(
        question_count=args.count,
        seed=args.seed,
        show_review=getattr(args, "show_review", None),
        log_level=args.log_level,
        verbose=True if args.verbose else None,
    )
    try:
        return load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (MathGameConfigError, WorkspaceError) as exc:
        parser.error(str(exc))


def _rng_for(seed: Optional[int]) -> random.Random:
    return random.Random(seed)


def _cmd_play(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[Callable[[], str]] = None,
) -> int:
    loaded = _load(args, parser)
    cfg = loaded.config
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=loaded.layout.path_for("logs"),
        level=cfg.log_level,
        verbose=cfg.verbose,
    )
    logger.debug(
        "play command invoked",
        extra={"config_path": loaded.config_path, "seed": cfg.seed},
    )
    out = console or Console()
    provider = input_provider or (lambda: out.input("> "))
    result = run_game(
        out,
        provider,
        requested_count=cfg.question_count,
        rng=_rng_for(cfg.seed),
        show_review=cfg.show_review,
        logger=logger,
    )
    out.print(f"[dim]Log file: {log_path}[/]")
    return 0 if result.exit_action == "quit" else 130


def _cmd_tui(
    args: argparse.Namespace, parser: argparse.ArgumentParser
) -> int:
    loaded = _load(args, parser)
    cfg = loaded.config
    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=loaded.layout.path_for("logs"),
        level=cfg.log_level,
        verbose=False,
    )
    logger.debug("tui command invoked", extra={"seed": cfg.seed})
    app = MathGameApp(
        requested_count=cfg.question_count,
        rng=_rng_for(cfg.seed),
        logger=logger,
    )
    app.run()
    return 0


def _cmd_config_init(args: argparse.Namespace) -> int:
    try:
        if args.path is not None:
            target = args.path.expanduser()
            if not target.is_absolute():
                target = (Path.cwd() / target).resolve()
        else:
            target = default_config_path(ensure_workspace(path=args.workspace))
        written = write_template(target, overwrite=args.force)
    except (MathGameConfigError, WorkspaceError) as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1
    sys.stdout.write(f"Wrote mathgame config to {written}\n")
    return 0


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--count",
        type=int,
        help="Number of questions; skips the start prompt.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the problem generator for reproducible rounds.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML config file (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (defaults to MATHGAME_DATA_HOME).",
    )
    parser.add_argument(
        "--log-level",
        help="Set the file logging level (defaults to INFO).",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mathgame",
        description="Addition quiz played in the terminal",
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp_play = sub.add_parser("play", help="Play in the Rich console")
    _add_common_options(sp_play)
    sp_play.add_argument(
        "--no-review",
        dest="show_review",
        action="store_false",
        default=None,
        help="Hide the per-question review table on the result screen.",
    )
    sp_play.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )

    sp_tui = sub.add_parser("tui", help="Play in the Textual app")
    _add_common_options(sp_tui)
    sp_tui.set_defaults(verbose=False)

    sp_cfg = sub.add_parser("config", help="Manage the config file")
    cfg_sub = sp_cfg.add_subparsers(dest="action", required=True)
    sp_cfg_init = cfg_sub.add_parser(
        "init", help="Write the default mathgame.toml template"
    )
    sp_cfg_init.add_argument(
        "--path",
        type=Path,
        help="Destination for the config TOML.",
    )
    sp_cfg_init.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used to resolve the default config path.",
    )
    sp_cfg_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file.",
    )
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command == "play":
        return _cmd_play(args, parser)
    if args.command == "tui":
        return _cmd_tui(args, parser)
    if args.command == "config" and args.action == "init":
        return _cmd_config_init(args)
    parser.print_help()  # pragma: no cover - argparse enforces choices
    return 2
