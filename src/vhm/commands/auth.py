"""HTTP Basic Auth management for vhosts."""

from __future__ import annotations

import typer
from rich.console import Console

from vhm.audit import audit
from vhm.config import get_config
from vhm.services import htpasswd

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.command(name="set")
def set_user(
    vhost: str = typer.Argument(help="Vhost name"),
    username: str = typer.Argument(help="Username"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Add or update a user in ``<auth_dir>/<vhost>.htpasswd``."""
    cfg = get_config()
    path = htpasswd.htpasswd_path(cfg.auth_dir, vhost)
    with audit("auth.set", target=vhost, user=username):
        created = htpasswd.set_user(path, username, password)
    verb = "Added" if created else "Updated"
    console.print(f"[green]{verb} {username}[/green] in {path}")
    console.print(f"  Reference it with auth_basic_user_file = \"{path}\"")


@app.command(name="remove")
def remove_user(
    vhost: str = typer.Argument(help="Vhost name"),
    username: str = typer.Argument(help="Username"),
) -> None:
    """Remove a user from a vhost's htpasswd file."""
    cfg = get_config()
    path = htpasswd.htpasswd_path(cfg.auth_dir, vhost)
    with audit("auth.remove", target=vhost, user=username):
        removed = htpasswd.remove_user(path, username)
    if not removed:
        console.print(f"[yellow]{username} not found in {path}[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Removed {username}[/green] from {path}")


@app.command(name="list")
def list_users(
    vhost: str = typer.Argument(help="Vhost name"),
) -> None:
    """List users allowed on a vhost."""
    cfg = get_config()
    for user in htpasswd.list_users(htpasswd.htpasswd_path(cfg.auth_dir, vhost)):
        console.print(f"  {user}")
