"""
Server profile CLI commands.

Provides commands for managing server profiles, including registration,
listing, activation, and removal.
"""

import sys

import typer
from rich.table import Table

from remote_search.cli.common import console
from remote_search.config import ServerConfig, get_config_manager
from remote_search.models import DEFAULT_CHARSET


def add_command(
    name: str,
    url: str,
    charset: str = typer.Option(DEFAULT_CHARSET, "--charset", help="Charset for XML bodies and form fields"),
    index_id: str | None = typer.Option(None, "--index-id", "-i", help="Default index id for this server"),
):
    # type: (...) -> None
    """
    Register a server profile.

    An existing profile with the same name is replaced. The first registered
    server becomes the active one.

    Examples:

        remote-search server add local http://localhost:8080

        remote-search server add production https://search.example.com --index-id products
    """
    try:
        server_config = ServerConfig(name=name, url=url, charset=charset, index_id=index_id)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    config_manager = get_config_manager()
    config_manager.add_server(server_config)

    console.print(f"[green]Registered server '{name}'[/green]")
    console.print(f"URL: {server_config.url}")
    if index_id:
        console.print(f"[dim]Default index: {index_id}[/dim]")

    if config_manager.get_active().name == name:
        console.print(f"[cyan]'{name}' is now the active server[/cyan]")


def list_command():
    # type: () -> None
    """
    List all server profiles.

    Example:

        remote-search server list
    """
    config_manager = get_config_manager()
    servers = config_manager.list_servers()

    if not servers:
        console.print("[yellow]No servers configured[/yellow]")
        console.print("Use 'remote-search server add' to register a server")
        return

    table = Table(title="Configured Servers")
    table.add_column("Name", style="cyan")
    table.add_column("URL", style="white")
    table.add_column("Index", style="magenta")
    table.add_column("Charset", style="white")
    table.add_column("Active", style="green")

    for name, cfg, is_active in servers:
        active_marker = "✓" if is_active else ""
        table.add_row(name, cfg.url, cfg.index_id or "(default)", cfg.charset, active_marker)

    console.print(table)


def use_command(name: str):
    # type: (...) -> None
    """
    Set the active server.

    All commands use this server unless overridden with --server.

    Example:

        remote-search server use production
    """
    config_manager = get_config_manager()

    try:
        config_manager.set_active(name)
        console.print(f"[green]Active server set to '{name}'[/green]")
    except KeyError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("Use 'remote-search server list' to see available servers")
        sys.exit(1)


def remove_command(name: str):
    # type: (...) -> None
    """
    Remove a server profile.

    Example:

        remote-search server remove staging
    """
    config_manager = get_config_manager()

    try:
        config_manager.remove_server(name)
        console.print(f"[green]Removed server '{name}' from configuration[/green]")
    except KeyError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
