"""Shared plumbing for CLI commands: opening the store and picking a configuration."""

import typer
from rich.console import Console

from chatdesk.core.config import Settings, get_settings
from chatdesk.core.exceptions import StorageError
from chatdesk.core.gateway import ProviderGateway
from chatdesk.core.storage import ConfigStore, JsonFileKeyValueStore


def open_store(settings: Settings | None = None) -> ConfigStore:
    """Open the JSON configuration store under CHATDESK_HOME."""
    settings = settings or get_settings()
    return ConfigStore(JsonFileKeyValueStore(settings.store_path))


def open_gateway() -> ProviderGateway:
    settings = get_settings()
    return ProviderGateway(open_store(settings), settings)


def resolve_config_id(store: ConfigStore, config_id: str | None, console: Console) -> str:
    """Return the explicit id, or the active one; exit when there is neither."""
    if config_id:
        return config_id
    try:
        active = store.get_active_config_id()
    except StorageError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    if not active:
        console.print(
            "[red]❌ No active configuration.[/red] "
            "Pass --config ID or run [cyan]chatdesk config use ID[/cyan]."
        )
        raise typer.Exit(1)
    return active
