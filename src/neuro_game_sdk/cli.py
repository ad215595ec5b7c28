from __future__ import annotations

"""CLI entrypoint for the Neuro game SDK."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .client import NeuroClient, format_schema_failure, parse_params, schema_errors
from .client.dispatch import InvalidActionData
from .config import ClientSettings, find_action, load_actions, load_settings
from .demo import GuessNumberGame

app = typer.Typer(help="Tools for games talking to the Neuro-sama game API.")
console = Console()

DEMO_GAME = "Guess the Number"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def actions(
    manifest: Path = typer.Argument(..., help="YAML or JSON action manifest.")
) -> None:
    if not manifest.exists():
        console.print(f"[red]Manifest not found:[/red] {manifest}")
        raise typer.Exit(code=1)

    table = Table(title="Registered Actions")
    table.add_column("name")
    table.add_column("description")
    table.add_column("params")
    for action in load_actions(manifest):
        properties = (action.schema_ or {}).get("properties", {})
        table.add_row(action.name, action.description, ", ".join(properties) or "-")

    console.print(table)


@app.command()
def validate(
    manifest: Path = typer.Argument(..., help="YAML or JSON action manifest."),
    name: str = typer.Argument(..., help="Action to validate against."),
    data: str = typer.Argument("", help="JSON-encoded action parameters."),
) -> None:
    if not manifest.exists():
        console.print(f"[red]Manifest not found:[/red] {manifest}")
        raise typer.Exit(code=1)
    action = find_action(load_actions(manifest), name)
    if action is None:
        console.print(f'[red]Unknown action:[/red] "{name}"')
        raise typer.Exit(code=1)
    try:
        params = parse_params(data)
    except InvalidActionData as exc:
        console.print(f"[red]Invalid action data:[/red] {exc}")
        raise typer.Exit(code=1)

    errors = schema_errors(action.schema_, params) if action.has_schema else []
    if errors:
        console.print(format_schema_failure(name, errors), markup=False)
        raise typer.Exit(code=1)
    console.print(f"[green]ok[/green] {name} {params}")


@app.command()
def demo(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Neuro API websocket URL."),
    game: Optional[str] = typer.Option(
        None, "--game", "-g", help="Game name. Overrides the settings file."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Settings file (YAML or JSON)."
    ),
    rounds: int = typer.Option(1, "--rounds", "-r", help="Rounds to play."),
    dev: bool = typer.Option(False, "--dev", help="Log every frame."),
) -> None:
    """Play the guess-the-number demo game until the connection closes."""

    if config is not None:
        settings = load_settings(config, url=url, game=game)
    else:
        settings = ClientSettings(game=game or DEMO_GAME, **({"url": url} if url else {}))
    if dev:
        settings = settings.model_copy(update={"dev_mode": True, "log_level": "DEBUG"})
    _configure_logging(settings.log_level)

    async def _play() -> None:
        client = NeuroClient.from_settings(settings)
        GuessNumberGame(client, rounds=rounds)
        client.connect()
        await client.wait_closed()

    console.print(f"Connecting to [green]{settings.url}[/green] as {settings.game!r}")
    asyncio.run(_play())


if __name__ == "__main__":  # pragma: no cover
    app()
