"""Core shared helpers for trivia-quiz commands."""

from __future__ import annotations

from .config import (
    AppConfig,
    ConfigError,
    config_template,
    default_config,
    load_config,
    write_template,
)
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "config_template",
    "default_config",
    "load_config",
    "write_template",
    "configure_logger",
    "JsonLogFormatter",
    "ensure_workspace",
    "WorkspaceLayout",
    "WorkspaceError",
    "WORKSPACE_ENV",
]
