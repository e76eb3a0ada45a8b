# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Commands for adding and removing car tags."""

from __future__ import annotations

from typing import Annotated

import typer

from ..shared import catalog_errors, get_state
from ..typer_ext import create_typer
from .cars import NAME_ARGUMENT

TAG_ARGUMENT = Annotated[str, typer.Argument(help="Tag text.")]

tag_app = create_typer(name="tag", help_text="Add or remove car tags.")


@tag_app.command("add")
def add_tag(ctx: typer.Context, name: NAME_ARGUMENT, tag: TAG_ARGUMENT) -> None:
    """Add a tag to a car."""

    state = get_state(ctx)
    with catalog_errors(state.logger), state.manager() as manager:
        manager.add_tag(name, tag)
    state.logger.ok(f"Successfully added the tag: {tag}")


@tag_app.command("remove")
def remove_tag(ctx: typer.Context, name: NAME_ARGUMENT, tag: TAG_ARGUMENT) -> None:
    """Remove a tag from a car."""

    state = get_state(ctx)
    with catalog_errors(state.logger), state.manager() as manager:
        manager.remove_tag(name, tag)
    state.logger.ok(f"Successfully deleted the tag: {tag}")


def register(app: typer.Typer) -> None:
    """Register the tag command group on ``app``."""

    app.add_typer(tag_app, name="tag")


__all__ = ["register", "tag_app"]
