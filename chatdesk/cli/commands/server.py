"""Server management commands for the chatdesk CLI."""

import typer
from rich.console import Console
from rich.table import Table

from chatdesk.core.config import get_settings

app = typer.Typer(help="Server management")


@app.command()
def start(
    host: str = typer.Option(None, "--host", help="Override host"),
    port: int = typer.Option(None, "--port", help="Override port"),
) -> None:
    """Start the local HTTP bridge."""
    from chatdesk.main import main as run_server

    console = Console()
    settings = get_settings()

    server_host = host or settings.host
    server_port = port or settings.port

    table = Table(title="chatdesk Bridge Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Server URL", f"http://{server_host}:{server_port}")
    table.add_row("Config Store", str(settings.store_path))
    table.add_row("Log Level", settings.log_level)
    console.print(table)

    run_server(host=server_host, port=server_port)
