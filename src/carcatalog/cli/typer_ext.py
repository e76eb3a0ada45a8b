# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer helpers for consistent, sorted CLI help output."""

from __future__ import annotations

from typing import Any

import click
import typer
from typer.core import TyperGroup


class SortedTyperGroup(TyperGroup):
    """Typer group that lists its subcommands alphabetically in help output."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return subcommand names sorted alphabetically.

        Args:
            ctx: Click context describing the application invocation.

        Returns:
            list[str]: Sorted command names.
        """

        return sorted(super().list_commands(ctx))


def create_typer(*, help_text: str, name: str | None = None, **kwargs: Any) -> typer.Typer:
    """Return a Typer application that emits sorted help listings.

    Args:
        help_text: Help text shown for the application or command group.
        name: Optional command group name.
        **kwargs: Additional arguments forwarded to :class:`typer.Typer`.

    Returns:
        typer.Typer: Configured Typer application.
    """

    kwargs.setdefault("no_args_is_help", True)
    kwargs.setdefault("add_completion", False)
    return typer.Typer(name=name, help=help_text, cls=SortedTyperGroup, **kwargs)


__all__ = ["SortedTyperGroup", "create_typer"]
