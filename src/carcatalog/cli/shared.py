# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (state, logging, error mapping)."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final

import typer
from rich.console import Console

from ..config import CatalogConfig, ConfigError
from ..errors import CarNotFoundError, CatalogError
from ..logging import fail as core_fail
from ..logging import get_console
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn
from ..manager import CarManager
from ..store import CarStore

EXIT_FAILURE: Final[int] = 1
EXIT_NOT_FOUND: Final[int] = 2


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences."""

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences."""

        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences."""

        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        """Log an informational message honouring emoji preferences."""

        core_info(message, use_emoji=self.use_emoji)


def build_cli_logger(*, emoji: bool, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a Rich console.
    """

    return CLILogger(console=get_console(color=not no_color, emoji=emoji), use_emoji=emoji)


@dataclass(slots=True)
class CLIState:
    """Per-invocation state shared by every command via ``ctx.obj``."""

    config: CatalogConfig
    logger: CLILogger

    def store(self) -> CarStore:
        """Return a store bound to the configured install path."""

        return CarStore(self.config.install_path, default_skin_url=self.config.default_skin_url)

    def manager(self) -> CarManager:
        """Return a manager bound to the configured install and index paths."""

        return CarManager.from_config(self.config)


def get_state(ctx: typer.Context) -> CLIState:
    """Return the :class:`CLIState` stored by the root callback.

    Raises:
        typer.Exit: With :data:`EXIT_FAILURE` when the root callback did not run.
    """

    state = ctx.find_object(CLIState)
    if state is None:
        build_cli_logger(emoji=False).fail("catalog CLI state is not initialised")
        raise typer.Exit(code=EXIT_FAILURE)
    return state


@contextmanager
def catalog_errors(logger: CLILogger) -> Iterator[None]:
    """Translate catalog failures into user-facing messages and exit codes.

    Args:
        logger: Logger used to report the failure.

    Raises:
        typer.Exit: With :data:`EXIT_NOT_FOUND` for missing cars and
        :data:`EXIT_FAILURE` for every other catalog or configuration error.
    """

    try:
        yield
    except CarNotFoundError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_NOT_FOUND) from exc
    except (CatalogError, ConfigError, OSError) as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_FAILURE) from exc


__all__ = [
    "CLILogger",
    "CLIState",
    "EXIT_FAILURE",
    "EXIT_NOT_FOUND",
    "build_cli_logger",
    "catalog_errors",
    "get_state",
]
