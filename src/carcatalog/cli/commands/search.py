# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Commands for querying and rebuilding the car search index."""

from __future__ import annotations

import time
from typing import Annotated

import typer

from ..shared import catalog_errors, get_state
from .cars import build_cars_table


def search_cars(
    ctx: typer.Context,
    term: Annotated[str, typer.Argument(help="Free-text query; omit to list every car.")] = "",
    page: Annotated[int, typer.Option("--page", "-p", min=0, help="Zero-based results page.")] = 0,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0.0, help="Abort the search after this many seconds."),
    ] = None,
) -> None:
    """Search the catalog and print one page of matches."""

    state = get_state(ctx)
    deadline = time.monotonic() + timeout if timeout is not None else None
    with catalog_errors(state.logger), state.manager() as manager:
        results = manager.search(term, page, deadline=deadline)
    if results.cars:
        state.logger.console.print(build_cars_table(list(results.cars.values())))
    state.logger.info(f"{results.total} match(es), page {results.page + 1} of {max(results.num_pages, 1)}")


def reindex(ctx: typer.Context) -> None:
    """Rebuild the search index from the cars on disk."""

    state = get_state(ctx)
    with catalog_errors(state.logger), state.manager() as manager:
        count = manager.index_all_cars()
    state.logger.ok(f"Indexed {count} car(s)")


def register(app: typer.Typer) -> None:
    """Register search commands on ``app``."""

    app.command("search")(search_cars)
    app.command("reindex")(reindex)


__all__ = ["register"]
