"""Core shared helpers for mathgame subcommands."""

from __future__ import annotations

from .logging import JsonLogFormatter, configure_logger, release_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "configure_logger",
    "release_logger",
    "JsonLogFormatter",
    "ensure_workspace",
    "WorkspaceLayout",
    "WorkspaceError",
    "WORKSPACE_ENV",
]
