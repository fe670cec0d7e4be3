"""Chat commands for the chatdesk CLI."""

import asyncio

import typer
from rich.console import Console

from chatdesk.cli.context import open_gateway, resolve_config_id
from chatdesk.cli.presenters.configs import ConfigPresenter
from chatdesk.core.gateway import StreamEvent, StreamEventType

app = typer.Typer(help="Chat with a configured provider")


@app.command()
def send(
    message: str = typer.Argument(..., help="Message to send"),
    config_id: str = typer.Option(None, "--config", help="Configuration id (defaults to the active one)"),
    stream: bool = typer.Option(True, "--stream/--no-stream", help="Print the reply as it arrives"),
) -> None:
    """Send one message and print the reply."""
    console = Console()
    presenter = ConfigPresenter(console)
    gateway = open_gateway()
    config_id = resolve_config_id(gateway.store, config_id, console)

    if not stream:
        result = asyncio.run(gateway.send(message, config_id))
        presenter.present_send(result)
        if not result.success:
            raise typer.Exit(1)
        return

    def on_event(event: StreamEvent) -> None:
        if event.type is StreamEventType.CHUNK:
            console.print(event.text, end="", markup=False, highlight=False, soft_wrap=True)
        elif event.type is StreamEventType.END:
            console.print()

    stream_result = asyncio.run(gateway.send_stream(message, config_id, on_event))
    if not stream_result.success:
        console.print()
        presenter.present_error(stream_result.error)
        raise typer.Exit(1)
