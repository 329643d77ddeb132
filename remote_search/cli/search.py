"""
Search command for remote-search CLI.

Runs a raw query string against the active server and prints the JSON response.
"""

import json

import typer
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from remote_search.cli.common import console
from remote_search.exceptions import SearchClientError
from remote_search.models import RawQuery

__all__ = ["search_command"]


def search_command(
    query,  # type: str
    index_id: str | None = typer.Option(None, "--index-id", "-i", help="Target index (overrides server default)"),
    server_name: str | None = typer.Option(None, "--server", help="Server profile to use (overrides active server)"),
):
    # type: (...) -> None
    """
    Search the remote index.

    QUERY is an URL query string passed to the server as-is. Values must already
    be URL encoded where the server requires it.

    Example:
        remote-search search "q=title:report&rows=10"
        remote-search search "q=*:*" --index-id products
        remote-search search "q=*:*" --server production
    """
    from remote_search.cli.common import get_active_client

    try:
        client, _ = get_active_client(server_name)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    with client:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Searching...", total=None)
            try:
                result = client.search(RawQuery(query), index_id=index_id)
            except SearchClientError as e:
                progress.remove_task(task)
                console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)
            progress.remove_task(task)

    console.print_json(json.dumps(result))
