"""
Shared utilities for remote-search CLI.

Common functionality used across multiple CLI commands.
"""

from typing import TYPE_CHECKING

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from remote_search.client import RestSearchClient  # noqa: F401
    from remote_search.config import ServerConfig  # noqa: F401


__all__ = ["console", "get_active_client", "parse_fields"]


# Shared console instance for all CLI commands
console = Console()


# Configure loguru to use rich's console for proper output coordination
logger.remove()
logger.add(
    RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=True,
        show_time=False,
        show_level=False,
        show_path=False,
    ),
    format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {module}:{function}:{line} - {message}",
    level="INFO",
)


def get_active_client(server_name=None):
    # type: (str|None) -> tuple[RestSearchClient, ServerConfig]
    """
    Get a search client for the active server profile.

    If server_name is provided, uses that profile instead of the active one.

    :param server_name: Optional profile name to override the active server
    :return: Tuple of (client, server profile used)
    :raises ValueError: If the profile does not exist or no server is active
    """
    from remote_search.config import get_config_manager

    config_manager = get_config_manager()
    config_manager.load()

    if server_name is not None:
        try:
            server_config = config_manager.get_server(server_name)
        except KeyError:
            raise ValueError(f"Server '{server_name}' not found in configuration")
    else:
        server_config = config_manager.get_active()
        if server_config is None:
            raise ValueError("No active server configured. Use 'remote-search server add' to configure one.")

    return server_config.create_client(), server_config


def parse_fields(fields):
    # type: (list[str]|None) -> dict[str, list[str]]|None
    """
    Collect ``name=value`` options into a multi-valued field map.

    Repeating a name appends another value:

        ["tag=a", "tag=b", "lang=en"] -> {"tag": ["a", "b"], "lang": ["en"]}

    :param fields: Raw ``name=value`` strings
    :return: Field map, or None if no fields were given
    :raises ValueError: If an entry has no ``=`` or an empty name
    """
    if not fields:
        return None

    result = {}  # type: dict[str, list[str]]
    for field in fields:
        name, sep, value = field.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Invalid field '{field}', expected name=value")
        result.setdefault(name, []).append(value)

    return result
