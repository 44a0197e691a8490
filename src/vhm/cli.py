"""Root Typer application for the VHM CLI."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from vhm.commands import auth, vhost
from vhm.errors import VhmError

app = typer.Typer(
    name="vhm",
    help="Render NGINX virtual hosts into config fragments and apply them.",
    no_args_is_help=True,
)

app.add_typer(vhost.app, name="vhost", help="Render, apply and inspect vhosts.")
app.add_typer(auth.app, name="auth", help="HTTP Basic Auth users for vhosts.")

err_console = Console(stderr=True)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def main() -> None:
    try:
        app()
    except VhmError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(exc.exit_code) from exc


if __name__ == "__main__":
    main()
