from __future__ import annotations

import itertools
import logging
import math
from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.table import Table

from adapters.layout.hierarchy import HierarchyLayoutEngine
from app.config import AppSettings, load_settings
from app.layout_wiring import build_layout_service, build_organization_repository
from domain.models import LayoutPositions
from domain.ports.repositories import OrganizationRepository
from domain.services.collision import find_collisions

app = typer.Typer(no_args_is_help=True)
layout_app = typer.Typer(no_args_is_help=True)
app.add_typer(layout_app, name="layout")
console = Console()

ConfigOption = typer.Option(None, "--config", help="YAML settings file.")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")


def _settings(config: Path | None, verbose: bool) -> AppSettings:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    try:
        return load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc


def _print_positions(positions: LayoutPositions) -> None:
    console.print_json(orjson.dumps(positions.to_dict()).decode("utf-8"))


@layout_app.command("show")
def show(config: Path | None = ConfigOption, verbose: bool = VerboseOption) -> None:
    service = build_layout_service(_settings(config, verbose))
    try:
        positions = service.get_layout()
    except (OSError, ValueError) as exc:
        console.print(f"[red]Failed to fetch layout:[/] {exc}")
        raise typer.Exit(code=1) from exc
    _print_positions(positions)


@layout_app.command("compute")
def compute(config: Path | None = ConfigOption, verbose: bool = VerboseOption) -> None:
    service = build_layout_service(_settings(config, verbose))
    try:
        positions = service.compute_layout()
    except (OSError, ValueError) as exc:
        console.print(f"[red]Failed to compute layout:[/] {exc}")
        raise typer.Exit(code=1) from exc
    _print_positions(positions)


@layout_app.command("invalidate")
def invalidate(config: Path | None = ConfigOption, verbose: bool = VerboseOption) -> None:
    service = build_layout_service(_settings(config, verbose))
    service.invalidate_layout_cache()
    console.print("[green]Layout cache invalidated[/]")


@layout_app.command("status")
def status(config: Path | None = ConfigOption, verbose: bool = VerboseOption) -> None:
    service = build_layout_service(_settings(config, verbose))
    console.print(service.cache_status().value)


def find_layout_violations(
    positions: LayoutPositions,
    repository: OrganizationRepository,
    engine: HierarchyLayoutEngine,
) -> list[tuple[str, str, str]]:
    violations: list[tuple[str, str, str]] = []
    spacing = engine.config.domain_spacing
    for (left, a), (right, b) in itertools.combinations(positions.domains.items(), 2):
        if math.hypot(a.x - b.x, a.y - b.y) < spacing:
            violations.append(("grid spacing", left, right))
    for domain in repository.list_domains():
        boxes = {
            team.id: engine.team_bounds(positions.teams[team.id])
            for team in repository.list_teams_of(domain.id)
            if team.id in positions.teams
        }
        for left, right in find_collisions(boxes):
            violations.append((f"team overlap in {domain.id}", left, right))
    return violations


@layout_app.command("verify")
def verify(config: Path | None = ConfigOption, verbose: bool = VerboseOption) -> None:
    settings = _settings(config, verbose)
    engine = HierarchyLayoutEngine()
    repository = build_organization_repository(settings)
    service = build_layout_service(
        settings, repository=repository, layout_config=engine.config
    )
    try:
        positions = service.compute_layout()
    except (OSError, ValueError) as exc:
        console.print(f"[red]Failed to compute layout:[/] {exc}")
        raise typer.Exit(code=1) from exc

    violations = find_layout_violations(positions, repository, engine)
    if not violations:
        console.print(
            f"[green]Layout OK:[/] {len(positions.domains)} domains, "
            f"{len(positions.teams)} teams, {len(positions.services)} services"
        )
        return

    table = Table(title="Layout violations")
    table.add_column("Check")
    table.add_column("First")
    table.add_column("Second")
    for check, left, right in violations:
        table.add_row(check, left, right)
    console.print(table)
    raise typer.Exit(code=1)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    config: Path | None = ConfigOption,
) -> None:
    import uvicorn

    from app.web_main import create_app

    uvicorn.run(create_app(_settings(config, False)), host=host, port=port)


if __name__ == "__main__":
    app()
