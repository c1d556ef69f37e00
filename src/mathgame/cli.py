"""Unified CLI entry point for mathgame."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence


CommandHandler = Callable[[Sequence[str]], int]


@dataclass(frozen=True)
class CommandSpec:
    """Represents a mathgame subcommand."""

    name: str
    summary: str
    handler: CommandHandler
    is_tui: bool = False


def _quiz_command(action: str) -> CommandHandler:
    return lambda argv: _run_module_command(
        "mathgame.quiz._main",
        "main",
        [action, *argv],
    )


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="init",
        summary="Bootstrap the workspace and default config.",
        handler=lambda argv: _run_module_command(
            "mathgame.workspace.cli",
            "main",
            argv,
        ),
    ),
    CommandSpec(
        name="play",
        summary="Play the addition quiz in the Rich console.",
        handler=_quiz_command("play"),
    ),
    CommandSpec(
        name="tui",
        summary="Play the addition quiz in the Textual app.",
        handler=_quiz_command("tui"),
        is_tui=True,
    ),
    CommandSpec(
        name="config",
        summary="Manage the mathgame.toml configuration.",
        handler=_quiz_command("config"),
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def format_command_table() -> str:
    """Return a formatted command table for help output."""

    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        suffix = " (TUI)" if spec.is_tui else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    parts = [
        "Usage: mathgame <command> [args...]",
        "Run `mathgame list` for commands or `mathgame help <name>` for "
        "details.",
        "",
        format_command_table(),
    ]
    return "\n".join(parts)


def _print(
    text: str, *, stream: Optional[Callable[[str], object]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_version() -> int:
    try:
        version = metadata.version("mathgame")
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0

    spec = COMMANDS.get(argv[0])
    if not spec:
        _print(f"Unknown command '{argv[0]}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2

    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `mathgame {spec.name} --help` for command options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        _print(format_usage())
        return 2

    head, *tail = args

    if head in ("-h", "--help"):
        _print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        return _handle_version()
    if head == "list":
        _print(format_command_table())
        return 0
    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec:
        return spec.handler(tail)

    _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def _run_module_command(
    module_name: str, func_name: str, argv: Sequence[str]
) -> int:
    target = getattr(import_module(module_name), func_name)
    try:
        result = target(list(argv))
    except SystemExit as exc:
        return _normalize_system_exit(exc)
    return result if isinstance(result, int) else 0


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
