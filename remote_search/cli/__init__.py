"""
remote-search CLI.

Command-line interface for searching and updating documents on a remote search server.
"""

import typer

import remote_search
from remote_search.cli.common import console
from remote_search.cli.documents import commit_command, delete_command, update_command, update_file_command
from remote_search.cli.search import search_command
from remote_search.cli import server

__all__ = ["app", "main"]


app = typer.Typer(
    name="remote-search",
    help="Remote search server CLI",
    no_args_is_help=True,
)

server_app = typer.Typer(help="Manage server profiles", no_args_is_help=True)
server_app.command(name="add")(server.add_command)
server_app.command(name="list")(server.list_command)
server_app.command(name="use")(server.use_command)
server_app.command(name="remove")(server.remove_command)

# Register commands
app.command(name="search")(search_command)
app.command(name="update")(update_command)
app.command(name="update-file")(update_file_command)
app.command(name="delete")(delete_command)
app.command(name="commit")(commit_command)
app.add_typer(server_app, name="server")


@app.command()
def version():
    # type: () -> None
    """Show version information."""
    console.print(f"remote-search version {remote_search.__version__}")


def main():
    # type: () -> None
    """CLI entry point."""
    app()
