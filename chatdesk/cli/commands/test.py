"""Test commands for the chatdesk CLI."""

import asyncio

import typer
from rich.console import Console

from chatdesk.cli.context import open_gateway, resolve_config_id
from chatdesk.cli.presenters.configs import ConfigPresenter

app = typer.Typer(help="Test commands")


@app.command()
def connection(
    config_id: str = typer.Option(None, "--config", help="Configuration id (defaults to the active one)"),
) -> None:
    """Test API connectivity with a minimal chat request."""
    console = Console()
    gateway = open_gateway()
    config_id = resolve_config_id(gateway.store, config_id, console)

    console.print("[bold cyan]Testing API Connectivity[/bold cyan]")
    result = asyncio.run(gateway.test_connection(config_id))
    ConfigPresenter(console).present_connection(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def models(
    config_id: str = typer.Option(None, "--config", help="Configuration id (defaults to the active one)"),
) -> None:
    """List the models the provider offers."""
    console = Console()
    gateway = open_gateway()
    config_id = resolve_config_id(gateway.store, config_id, console)

    result = asyncio.run(gateway.list_models(config_id))
    ConfigPresenter(console).present_models(result)
    if not result.success:
        raise typer.Exit(1)
