"""Presenters for configurations and gateway results in the CLI."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from chatdesk.core.gateway import ConnectionTestResult, ModelListResult, SendResult
from chatdesk.core.provider_config import ProviderConfig


class ConfigPresenter:
    """Render stored configurations and gateway results with Rich.

    Presentation only: callers decide exit codes.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def present_list(self, configs: list[ProviderConfig], active_id: str | None) -> None:
        if not configs:
            self.console.print("[yellow]No configurations stored.[/yellow]")
            self.console.print("Add one with [cyan]chatdesk config add[/cyan].")
            return

        table = Table(title="Provider Configurations")
        table.add_column("", style="green")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Provider", style="magenta")
        table.add_column("Model", style="green")
        table.add_column("Base URL")
        table.add_column("API Key", style="yellow")

        for config in configs:
            table.add_row(
                "*" if config.id == active_id else "",
                config.id,
                config.provider_name,
                config.model_name,
                config.base_url,
                config.masked_api_key,
            )
        self.console.print(table)

    def present_config(self, config: ProviderConfig, active: bool, reveal: bool = False) -> None:
        table = Table(title=f"Configuration {config.id}" + (" (active)" if active else ""))
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Provider", config.provider_name)
        table.add_row("Base URL", config.base_url)
        table.add_row("API Key", config.api_key if reveal else config.masked_api_key)
        table.add_row("Model", config.model_name)
        table.add_row("Context Window", str(config.context_window))
        table.add_row("Ignore SSL", "yes" if config.ignore_ssl else "no")
        table.add_row("Proxy", config.proxy_url or "-")
        table.add_row("CA Certificate", config.ca_cert_path or "-")
        for name, value in config.custom_params.items():
            table.add_row(f"param {name}", repr(value))
        for name, value in config.custom_headers.items():
            table.add_row(f"header {name}", value)
        self.console.print(table)

    def present_send(self, result: SendResult) -> None:
        if result.success:
            self.console.print(result.content or "", markup=False, highlight=False)
        else:
            self.present_error(result.error)

    def present_connection(self, result: ConnectionTestResult) -> None:
        if result.success:
            self.console.print(f"[green]✅ {result.message}[/green]")
        else:
            self.present_error(result.error)

    def present_models(self, result: ModelListResult) -> None:
        if not result.success:
            self.present_error(result.error)
            return
        if not result.models:
            self.console.print("[yellow]The server returned no models.[/yellow]")
            return

        table = Table(title=f"Available Models ({len(result.models)})")
        table.add_column("Model", style="cyan")
        for model in result.models:
            table.add_row(model)
        self.console.print(table)

    def present_error(self, message: str | None) -> None:
        self.console.print(
            Panel(Text(message or "Unknown error occurred"), title="❌ Error", border_style="red", expand=False),
        )
