"""Vhost render / apply / inspection commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from vhm.audit import audit
from vhm.config import get_config
from vhm.errors import VhostNotFoundError
from vhm.services import fragments, nginx, spec_loader, vhost_renderer

app = typer.Typer(no_args_is_help=True)
console = Console()


def _print_warnings(plan: vhost_renderer.VhostPlan) -> None:
    for warning in plan.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


@app.command()
def render(
    spec_file: Path = typer.Argument(help="Vhost declaration (.toml or .json)"),
) -> None:
    """Render a vhost declaration and print its fragments in order."""
    spec = spec_loader.load_vhost_spec(spec_file)
    plan = vhost_renderer.render_vhost(spec, cfg=get_config())
    _print_warnings(plan)

    for fragment in plan.fragments:
        state = "" if fragment.present else " [red](absent)[/red]"
        console.rule(f"[cyan]{fragment.path.name}[/cyan] {fragment.role.value}{state}")
        console.print(Syntax(fragment.content, "nginx", theme="monokai"))


@app.command()
def apply(
    spec_file: Path = typer.Argument(help="Vhost declaration (.toml or .json)"),
    no_reload: bool = typer.Option(False, "--no-reload", help="Do not reload NGINX after changes"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change without writing"),
) -> None:
    """Render a vhost, write its fragments, assemble the config and reload NGINX."""
    cfg = get_config()
    spec = spec_loader.load_vhost_spec(spec_file)

    console.print(f"[bold][1/3][/bold] Rendering vhost {spec.name}")
    plan = vhost_renderer.render_vhost(spec, cfg=cfg)
    _print_warnings(plan)

    if dry_run:
        result = fragments.plan_changes(plan, cfg.fragment_dir, cfg.sites_available_dir)
        for path in result.written:
            console.print(f"  would write: {path}")
        for path in result.removed:
            console.print(f"  would remove: {path}")
        if result.target_changed:
            console.print(f"  would update: {result.target}")
        if not result.changed:
            console.print("[green]No changes.[/green]")
        return

    with audit("vhost.apply", target=spec.name, ensure=spec.ensure.value, protocol=plan.protocol.value):
        console.print(f"[bold][2/3][/bold] Writing fragments to {cfg.fragment_dir}")
        result = fragments.apply_plan(
            plan,
            fragment_dir=cfg.fragment_dir,
            sites_dir=cfg.sites_available_dir,
            enabled_dir=cfg.sites_enabled_dir,
        )
        for path in result.written:
            console.print(f"  Wrote: {path}")
        for path in result.removed:
            console.print(f"  Removed: {path}")

        if not result.changed:
            console.print("[bold][3/3][/bold] No changes, NGINX reload not needed")
        elif no_reload:
            console.print("[bold][3/3][/bold] Skipping NGINX reload (--no-reload)")
        else:
            console.print(f"[bold][3/3][/bold] Validating and reloading {plan.notify}")
            nginx.reload(cfg)

        console.print(f"[green]Vhost {spec.name} is {spec.ensure.value}.[/green]")


@app.command()
def remove(
    name: str = typer.Argument(help="Vhost name"),
    no_reload: bool = typer.Option(False, "--no-reload", help="Do not reload NGINX after changes"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Remove a vhost's fragments and assembled config."""
    cfg = get_config()
    if not yes and not typer.confirm(f"Remove vhost {name}?"):
        raise typer.Abort()

    with audit("vhost.remove", target=name):
        result = fragments.remove_vhost(
            name,
            fragment_dir=cfg.fragment_dir,
            sites_dir=cfg.sites_available_dir,
            enabled_dir=cfg.sites_enabled_dir,
        )
        if not result.changed:
            raise VhostNotFoundError(f"No vhost found for {name}")
        for path in result.removed:
            console.print(f"  Removed: {path}")
        if not no_reload:
            nginx.reload(cfg)
        console.print(f"[green]Vhost {name} removed.[/green]")


@app.command(name="list")
def list_vhosts() -> None:
    """List assembled vhost config files."""
    cfg = get_config()
    sites_dir = cfg.sites_available_dir

    if not sites_dir.exists():
        console.print("No vhost directory found.")
        return

    table = Table(title="Vhosts")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("Fragments", justify="right")

    for conf in sorted(sites_dir.glob("*.conf")):
        enabled = (cfg.sites_enabled_dir / conf.name).exists()
        staged = len(fragments.read_manifest(cfg.fragment_dir, conf.stem))
        table.add_row(conf.stem, "yes" if enabled else "no", str(staged))

    console.print(table)


@app.command()
def show(
    name: str = typer.Argument(help="Vhost name to show config for"),
) -> None:
    """Display the assembled NGINX config for a vhost."""
    cfg = get_config()
    conf = cfg.sites_available_dir / f"{name}.conf"

    if not conf.exists():
        raise VhostNotFoundError(f"No vhost found for {name}")

    console.print(Syntax(conf.read_text(), "nginx", theme="monokai"))
