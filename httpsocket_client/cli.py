#!/usr/bin/env python3

from __future__ import annotations
import threading
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

import typer
from rich.console import Console
from rich.table import Table

from httpsocket.config import load_settings
from httpsocket.errors import HttpSocketError
from httpsocket.http_socket import HttpSocket
from httpsocket.log import configure_root_logging, get_logger
from .client import HttpSocketClient

app = typer.Typer(help="httpsocket client CLI")
console = Console()
logger = get_logger(__name__)


def _format_ms(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(timespec="milliseconds")


@app.command()
def connect(
    endpoint: str = typer.Argument(..., help="Handshake URL, e.g. http://localhost:8080/connect"),
    config: Optional[Path] = typer.Option(None, help="YAML settings file"),
    timeout: Optional[float] = typer.Option(None, help="Seconds to wait for the outcome (default: connect + read timeout)"),
    log_level: str = typer.Option("WARNING", help="DEBUG, INFO, WARNING or ERROR"),
):
    """Perform one connect handshake and print the resulting socket."""
    configure_root_logging(log_level)
    settings = load_settings(config)
    logger.debug("Resolved settings: %s", settings)
    wait_for = timeout if timeout is not None else settings.connect_timeout + settings.read_timeout

    done = threading.Event()
    outcome: Dict[str, object] = {}

    def on_connect(socket: HttpSocket) -> None:
        outcome["socket"] = socket
        done.set()

    def on_error(fault: BaseException) -> None:
        outcome["error"] = fault
        done.set()

    with HttpSocketClient(settings) as client:
        client.connect(endpoint, on_connect, on_error)
        if not done.wait(wait_for):
            console.print(f"[red]No answer from {endpoint} within {wait_for}s[/]")
            raise typer.Exit(code=1)

        if "error" in outcome:
            fault = outcome["error"]
            kind = fault.kind.value if isinstance(fault, HttpSocketError) else type(fault).__name__
            console.print(f"[red]Connect failed[/] ({kind}): {fault}")
            raise typer.Exit(code=1)

        socket = outcome["socket"]
        table = Table(title="Connected")
        table.add_column("Field")
        table.add_column("Value")
        table.add_row("id", str(socket.id))
        table.add_row("endpoint", str(socket.endpoint))
        table.add_row("protocol", socket.protocol)
        table.add_row("connect time", _format_ms(socket.connect_time))
        console.print(table)


@app.command()
def settings(
    config: Optional[Path] = typer.Option(None, help="YAML settings file"),
):
    """Print the resolved client settings."""
    resolved = load_settings(config)
    table = Table(title="Client settings")
    table.add_column("Setting")
    table.add_column("Value")
    for name, value in asdict(resolved).items():
        table.add_row(name, str(value))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
