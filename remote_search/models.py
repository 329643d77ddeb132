"""
Value objects exchanged with the remote search client.

## Terms and Definitions

- **INDEX-ID** - Identifier of the logical index (core) an operation targets. Empty or None selects the
    server default index.
- **SITE** - Tenant / namespace identifier scoping documents within an index.
- **ADDITIONAL FIELDS** - Extra multi-valued form fields sent along with a binary file update.
"""

import codecs
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator


__all__ = [
    "DEFAULT_CHARSET",
    "normalize_server_url",
    "validate_charset",
    "ClientConfig",
    "QueryParams",
    "RawQuery",
    "UpdateRequest",
    "FileUpdateRequest",
]


DEFAULT_CHARSET = "utf-8"


def normalize_server_url(url):
    # type: (str) -> str
    """Remove all trailing slashes from a server URL."""
    return url.rstrip("/")


def validate_charset(charset):
    # type: (str) -> str
    """
    Reject charsets Python has no codec for.

    :param charset: Charset name
    :return: Charset name unchanged
    :raises ValueError: If no codec is registered for the name
    """
    try:
        codecs.lookup(charset)
    except LookupError:
        raise ValueError(f"Unknown charset: {charset}")
    return charset


class ClientConfig(BaseModel):
    """
    Immutable connection settings of a RestSearchClient.

    :ivar server_url: Base URL of the search server, stored without trailing slashes
    :ivar charset: Charset used to encode XML bodies and multipart text fields
    :ivar timeout: Transport timeout in seconds
    :ivar default_index_id: Index used when an operation is called without one
    """

    model_config = ConfigDict(frozen=True)

    server_url: str
    charset: str = DEFAULT_CHARSET
    timeout: float = Field(60.0, gt=0)
    default_index_id: str | None = None

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slashes(cls, v):
        # type: (str) -> str
        return normalize_server_url(v)

    @field_validator("charset")
    @classmethod
    def check_charset(cls, v):
        # type: (str) -> str
        return validate_charset(v)


class QueryParams:
    """
    Ordered multi-valued query parameters.

    Implements the query contract of the client (``to_query_string``) for servers
    that accept plain URL parameters.
    """

    def __init__(self, params=None):
        # type: (dict[str, str|list[str]]|None) -> None
        self._params = {}  # type: dict[str, list[str]]
        for name, values in (params or {}).items():
            self.add_param(name, *([values] if isinstance(values, str) else values))

    @classmethod
    def from_query_string(cls, query_string):
        # type: (str) -> QueryParams
        """
        Parse an URL query string, e.g. ``q=title:report&rows=10``.

        Blank values are kept. A leading ``?`` is ignored.
        """
        query = cls()
        for name, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
            query.add_param(name, value)
        return query

    def add_param(self, name, *values):
        # type: (str, *object) -> QueryParams
        """Append values to a parameter, keeping already present values."""
        self._params.setdefault(name, []).extend(str(value) for value in values)
        return self

    def set_param(self, name, *values):
        # type: (str, *object) -> QueryParams
        """Replace all values of a parameter."""
        self._params[name] = [str(value) for value in values]
        return self

    def get_param(self, name):
        # type: (str) -> list[str]
        return list(self._params.get(name, []))

    def has_param(self, name):
        # type: (str) -> bool
        return name in self._params

    def to_query_string(self):
        # type: () -> str
        pairs = [(name, value) for name, values in self._params.items() for value in values]
        return urlencode(pairs, encoding="utf-8")

    def __repr__(self):
        # type: () -> str
        return f"QueryParams({self.to_query_string()!r})"

    def __str__(self):
        # type: () -> str
        return self.to_query_string()


class RawQuery:
    """Query string sent to the server exactly as given."""

    def __init__(self, query_string):
        # type: (str) -> None
        self.query_string = query_string

    def to_query_string(self):
        # type: () -> str
        return self.query_string

    def __repr__(self):
        # type: () -> str
        return f"RawQuery({self.query_string!r})"

    def __str__(self):
        # type: () -> str
        return self.query_string


class UpdateRequest(BaseModel):
    """XML document update addressed to a site."""

    model_config = ConfigDict(frozen=True)

    site: str
    id: str
    xml: str
    ignore_root_in_field_names: bool = True
    index_id: str | None = None


class FileUpdateRequest(BaseModel):
    """
    Binary file update addressed to a site.

    ``content`` is raw bytes, a filesystem path, or a readable binary stream.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    site: str
    id: str
    content: object
    additional_fields: dict[str, list[str]] | None = None
    index_id: str | None = None
