# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared state."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import ConfigError, load_config
from .commands import register_commands
from .shared import EXIT_FAILURE, CLIState, build_cli_logger
from .typer_ext import create_typer

app = create_typer(help_text="Browse and maintain a car content catalog and its search index.")


@app.callback()
def configure(
    ctx: typer.Context,
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Server install directory containing content/cars.", show_default=False),
    ] = None,
    index_path: Annotated[
        Path | None,
        typer.Option("--index-path", help="Search index directory (default: <root>/search-index/cars)."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a carcatalog.toml or pyproject.toml file."),
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")] = True,
) -> None:
    """Resolve configuration shared by every command."""

    logger = build_cli_logger(emoji=emoji)
    try:
        config = load_config(config_path, overrides={"install_path": root, "index_path": index_path})
    except ConfigError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_FAILURE) from exc
    ctx.obj = CLIState(config=config, logger=logger)


register_commands(app)


def main() -> None:
    """Run the CLI application."""

    app()


__all__ = ["app", "main"]
