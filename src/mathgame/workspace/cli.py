"""CLI entry point that bootstraps the mathgame workspace."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Sequence

from mathgame.core import workspace as workspace_mod
from mathgame.quiz import config as quiz_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mathgame init",
        description=(
            "Create the mathgame workspace (config and logs directories) and "
            "write the default mathgame.toml when it is missing."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to MATHGAME_DATA_HOME "
            "or ~/.mathgame-data)."
        ),
    )
    parser.add_argument(
        "--skip-config",
        action="store_true",
        help="Do not write the default config template.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _format_created(created: Mapping[str, bool], key: str) -> str:
    return "created" if created.get(key, False) else "exists"


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    config_line = None
    if not args.skip_config:
        target = quiz_config.default_config_path(layout)
        if target.exists():
            config_line = f"Config: {target} (exists)"
        else:
            try:
                quiz_config.write_template(target)
            except quiz_config.MathGameConfigError as exc:
                sys.stderr.write(str(exc) + "\n")
                return 1
            config_line = f"Config: {target} (created)"

    if args.quiet:
        return 0

    lines = [
        "Workspace ready at {0} ({1})".format(
            layout.home, _format_created(layout.created, "home")
        )
    ]
    width = max(len(name) for name in layout.directories)
    lines.append("Subdirectories:")
    for name, directory in layout.items():
        status = _format_created(layout.created, name)
        lines.append(f"  {name.ljust(width)}  {directory} ({status})")
    if config_line:
        lines.append(config_line)

    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
