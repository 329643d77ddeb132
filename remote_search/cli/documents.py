"""
Document commands for remote-search CLI.

Update, upload, delete and commit documents on the active server.
"""

from pathlib import Path

import typer
from rich.markup import escape

from remote_search.cli.common import console, parse_fields
from remote_search.exceptions import SearchClientError

__all__ = ["update_command", "update_file_command", "delete_command", "commit_command"]


INDEX_ID_OPTION = typer.Option(None, "--index-id", "-i", help="Target index (overrides server default)")
SERVER_OPTION = typer.Option(None, "--server", help="Server profile to use (overrides active server)")


def _run(server_name, operation):
    # type: (str|None, callable) -> None
    """Run an operation with the selected client and print the server status message."""
    from remote_search.cli.common import get_active_client

    try:
        client, _ = get_active_client(server_name)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    with client:
        try:
            message = operation(client)
        except (SearchClientError, OSError, UnicodeDecodeError) as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)

    console.print(f"[green]{escape(str(message))}[/green]")


def update_command(
    site: str,
    id: str,
    xml_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="XML document to send"),
    keep_root: bool = typer.Option(False, "--keep-root", help="Keep root element name in field names"),
    index_id: str | None = INDEX_ID_OPTION,
    server_name: str | None = SERVER_OPTION,
):
    # type: (...) -> None
    """
    Add or replace an XML document.

    Example:
        remote-search update mysite /site/website/index.xml index.xml
    """

    def operation(client):
        xml = xml_file.read_text(encoding=client.charset)
        return client.update(site, id, xml, ignore_root_in_field_names=not keep_root, index_id=index_id)

    _run(server_name, operation)


def update_file_command(
    site: str,
    id: str,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to upload"),
    field: list[str] | None = typer.Option(None, "--field", "-f", help="Additional field as name=value (repeatable)"),
    index_id: str | None = INDEX_ID_OPTION,
    server_name: str | None = SERVER_OPTION,
):
    # type: (...) -> None
    """
    Upload a binary file document.

    Example:
        remote-search update-file mysite /static-assets/docs/report.pdf report.pdf -f tags=finance -f tags=2024
    """
    try:
        additional_fields = parse_fields(field)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    def operation(client):
        return client.update_file(site, id, path, additional_fields=additional_fields, index_id=index_id)

    _run(server_name, operation)


def delete_command(
    site: str,
    id: str,
    index_id: str | None = INDEX_ID_OPTION,
    server_name: str | None = SERVER_OPTION,
):
    # type: (...) -> None
    """
    Delete a document.

    Example:
        remote-search delete mysite /site/website/index.xml
    """

    def operation(client):
        return client.delete(site, id, index_id=index_id)

    _run(server_name, operation)


def commit_command(
    index_id: str | None = INDEX_ID_OPTION,
    server_name: str | None = SERVER_OPTION,
):
    # type: (...) -> None
    """
    Make pending writes visible to searches.

    Example:
        remote-search commit --index-id products
    """
    _run(server_name, lambda client: client.commit(index_id=index_id))
