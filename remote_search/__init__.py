"""REST client for remote search and indexing servers."""

from platformdirs import PlatformDirs
from importlib import metadata

__package_name__ = "remote-search"
__author__ = "remote-search"
__version__ = metadata.version(__package_name__)
dirs = PlatformDirs(appname=__package_name__, appauthor=__author__)

from remote_search.exceptions import (  # noqa: E402
    SearchClientError,
    InvalidUrlError,
    ServerError,
    TransportError,
    ReservedFieldNameError,
)
from remote_search.models import ClientConfig, QueryParams, RawQuery, UpdateRequest, FileUpdateRequest  # noqa: E402
from remote_search.client import RestSearchClient  # noqa: E402
from remote_search.settings import SearchClientSettings, search_settings, get_client  # noqa: E402

__all__ = [
    "RestSearchClient",
    "ClientConfig",
    "QueryParams",
    "RawQuery",
    "UpdateRequest",
    "FileUpdateRequest",
    "SearchClientSettings",
    "search_settings",
    "get_client",
    "SearchClientError",
    "InvalidUrlError",
    "ServerError",
    "TransportError",
    "ReservedFieldNameError",
]
