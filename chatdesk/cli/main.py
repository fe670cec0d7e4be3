"""Main CLI entry point for chatdesk."""

import typer
from rich.console import Console

from chatdesk.cli.commands import chat, config, server, test
from chatdesk.core.logging import configure_root_logging

app = typer.Typer(
    name="chatdesk",
    help="chatdesk CLI - chat with OpenAI-compatible providers",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(chat.app, name="chat", help="Chat with a configured provider")
app.add_typer(test.app, name="test", help="Test commands")
app.add_typer(server.app, name="server", help="Server management")


@app.command()
def version() -> None:
    """Show version information."""
    from chatdesk import __version__

    console = Console()
    console.print(f"[bold cyan]chatdesk[/bold cyan] version [green]{__version__}[/green]")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """chatdesk CLI."""
    if verbose:
        configure_root_logging("DEBUG")


if __name__ == "__main__":
    app()
