"""Configuration management commands for the chatdesk CLI."""

import json

import typer
from rich.console import Console

from chatdesk.cli.context import open_store
from chatdesk.cli.presenters.configs import ConfigPresenter
from chatdesk.core.exceptions import ConfigError, StorageError
from chatdesk.core.provider_config import DEFAULT_CONTEXT_WINDOW, ParamValue, ProviderConfig

app = typer.Typer(help="Configuration management")


def parse_assignments(values: list[str] | None, option: str) -> list[tuple[str, str]]:
    """Split repeated `NAME=VALUE` options into pairs."""
    pairs = []
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint=option)
        pairs.append((name.strip(), value))
    return pairs


def coerce_param(raw: str) -> ParamValue:
    """Read a parameter value as a JSON scalar when it is one, else as text."""
    try:
        value = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(value, (str, int, float, bool)):
        return value
    return raw


@app.command("list")
def list_configs() -> None:
    """List stored configurations."""
    console = Console()
    store = open_store()
    try:
        configs = store.get_configs()
        active_id = store.get_active_config_id()
    except (StorageError, ConfigError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    ConfigPresenter(console).present_list(configs, active_id)


@app.command()
def show(
    config_id: str = typer.Argument(..., help="Configuration id"),
    reveal: bool = typer.Option(False, "--reveal", help="Show the API key in clear text"),
) -> None:
    """Show one configuration."""
    console = Console()
    store = open_store()
    try:
        config = store.find_config(config_id)
        active_id = store.get_active_config_id()
    except (StorageError, ConfigError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    if config is None:
        console.print(f"[red]❌ Configuration '{config_id}' not found[/red]")
        raise typer.Exit(1)
    ConfigPresenter(console).present_config(config, active=config.id == active_id, reveal=reveal)


@app.command()
def add(
    provider_name: str = typer.Option(..., "--name", help="Display name of the provider"),
    base_url: str = typer.Option(..., "--url", help="Chat-completions URL"),
    api_key: str = typer.Option("", "--key", help="API key sent as a Bearer token"),
    model_name: str = typer.Option(..., "--model", help="Model name"),
    context_window: int = typer.Option(DEFAULT_CONTEXT_WINDOW, "--context-window", help="Context window in tokens"),
    params: list[str] = typer.Option(None, "--param", help="Extra body field NAME=VALUE (repeatable)"),
    headers: list[str] = typer.Option(None, "--header", help="Extra HTTP header NAME=VALUE (repeatable)"),
    ignore_ssl: bool = typer.Option(False, "--ignore-ssl", help="Skip TLS certificate verification"),
    proxy_url: str = typer.Option(None, "--proxy", help="HTTP(S) proxy URL"),
    ca_cert_path: str = typer.Option(None, "--ca-cert", help="PEM file with an extra trusted CA"),
    config_id: str = typer.Option(None, "--id", help="Replace the configuration with this id"),
    use: bool = typer.Option(False, "--use", help="Make this the active configuration"),
) -> None:
    """Add a configuration, or replace one with --id."""
    console = Console()
    record = {
        "id": config_id,
        "providerName": provider_name,
        "baseUrl": base_url,
        "apiKey": api_key,
        "modelName": model_name,
        "contextWindow": context_window,
        "customParams": {name: coerce_param(value) for name, value in parse_assignments(params, "--param")},
        "customHeaders": dict(parse_assignments(headers, "--header")),
        "ignoreSsl": ignore_ssl,
        "proxyUrl": proxy_url,
        "caCertPath": ca_cert_path,
    }
    try:
        config = ProviderConfig.from_dict(record)
        store = open_store()
        store.save_config(config)
        if use:
            store.set_active_config_id(config.id)
    except (ConfigError, StorageError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]✅ Saved configuration[/green] [cyan]{config.id}[/cyan]")
    if use:
        console.print("   Now the active configuration")


@app.command()
def remove(config_id: str = typer.Argument(..., help="Configuration id")) -> None:
    """Delete a configuration."""
    console = Console()
    try:
        removed = open_store().delete_config(config_id)
    except StorageError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    if not removed:
        console.print(f"[yellow]Configuration '{config_id}' not found[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Removed configuration[/green] [cyan]{config_id}[/cyan]")


@app.command()
def use(config_id: str = typer.Argument(..., help="Configuration id")) -> None:
    """Make a configuration the active one."""
    console = Console()
    store = open_store()
    try:
        if store.find_config(config_id) is None:
            console.print(f"[red]❌ Configuration '{config_id}' not found[/red]")
            raise typer.Exit(1)
        store.set_active_config_id(config_id)
    except (StorageError, ConfigError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    console.print(f"[green]✅ Active configuration:[/green] [cyan]{config_id}[/cyan]")


@app.command()
def active() -> None:
    """Print the active configuration id."""
    console = Console()
    try:
        active_id = open_store().get_active_config_id()
    except StorageError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    if active_id is None:
        console.print("[yellow]No active configuration[/yellow]")
        raise typer.Exit(1)
    console.print(active_id, markup=False, highlight=False)
