# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Commands for listing, inspecting and maintaining individual cars."""

from __future__ import annotations

from typing import Annotated

import typer
from rich import box
from rich.table import Table

from ...models import Car
from ...store import CarStore
from ..shared import catalog_errors, get_state

NAME_ARGUMENT = Annotated[str, typer.Argument(help="Directory name of the car.")]


def build_cars_table(cars: list[Car]) -> Table:
    """Return a table summarising ``cars``."""

    table = Table(box=box.SIMPLE)
    table.add_column("Car", style="bold", overflow="fold")
    table.add_column("Name", overflow="fold")
    table.add_column("Brand")
    table.add_column("Skins", justify="right")
    for car in cars:
        table.add_row(car.name, car.details.name or car.pretty_name, car.details.brand or "-", str(len(car.skins)))
    return table


def build_details_table(car: Car, store: CarStore) -> Table:
    """Return a table describing every detail of ``car``."""

    details = car.details
    table = Table(title=car.details.name or car.pretty_name, box=box.SIMPLE)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("Car", car.name)
    table.add_row("Brand", details.brand or "-")
    table.add_row("Class", details.car_class or "-")
    table.add_row("Country", details.country or "-")
    table.add_row("Year", str(details.year) if details.year else "-")
    table.add_row("Author", details.author or "-")
    table.add_row("Version", details.version or "-")
    table.add_row("Power", details.specs_full.bhp or "-")
    table.add_row("Torque", details.specs_full.torque or "-")
    table.add_row("Weight", details.specs_full.weight or "-")
    table.add_row("Top Speed", details.specs_full.topspeed or "-")
    table.add_row("Tags", ", ".join(details.tags) or "-")
    table.add_row("Download URL", details.download_url or "-")
    table.add_row("Notes", details.notes or "-")
    for skin in car.skins:
        table.add_row(f"Skin {skin}", store.skin_url(car.name, skin))
    return table


def list_cars(ctx: typer.Context) -> None:
    """List every car in the catalog."""

    state = get_state(ctx)
    with catalog_errors(state.logger):
        cars = state.store().list_cars()
    if not cars:
        state.logger.warn(f"No cars found under {state.config.install_path}")
        return
    state.logger.console.print(build_cars_table(cars))


def show_car(ctx: typer.Context, name: NAME_ARGUMENT) -> None:
    """Show the details of a single car."""

    state = get_state(ctx)
    store = state.store()
    with catalog_errors(state.logger):
        car = store.load_car(name)
    state.logger.console.print(build_details_table(car, store))


def delete_car(ctx: typer.Context, name: NAME_ARGUMENT) -> None:
    """Delete a car from disk and from the search index."""

    state = get_state(ctx)
    with catalog_errors(state.logger), state.manager() as manager:
        removed = manager.delete_car(name)
    if removed:
        state.logger.ok(f"Car {name} successfully deleted!")
    else:
        state.logger.warn(f"Car {name} was not found on disk; removed it from the search index")


def update_metadata(
    ctx: typer.Context,
    name: NAME_ARGUMENT,
    notes: Annotated[str, typer.Option("--notes", help="Free-text operator notes.")] = "",
    download_url: Annotated[str, typer.Option("--download-url", help="Where the car can be downloaded.")] = "",
) -> None:
    """Set the server-local notes and download URL of a car."""

    state = get_state(ctx)
    with catalog_errors(state.logger), state.manager() as manager:
        manager.update_car_metadata(name, notes=notes, download_url=download_url)
    state.logger.ok("Car metadata updated successfully!")


def register(app: typer.Typer) -> None:
    """Register car commands on ``app``."""

    app.command("list")(list_cars)
    app.command("show")(show_car)
    app.command("delete")(delete_car)
    app.command("metadata")(update_metadata)


__all__ = ["build_cars_table", "build_details_table", "register"]
