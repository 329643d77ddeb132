"""
Client runtime settings for remote-search.

**PURPOSE**: Configure the default search client via environment variables.

**CONFIGURATION SOURCE**: Environment variables with REMOTE_SEARCH_ prefix, or a .env
file in the working directory.

**NOT FOR**: CLI server profiles. See remote_search.config for those.

Provides configuration management using Pydantic settings with support for:
- Environment variables with REMOTE_SEARCH_ prefix
- .env file loading
- Runtime settings override
- Type validation and defaults
"""

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from remote_search.models import DEFAULT_CHARSET, ClientConfig, normalize_server_url, validate_charset

if TYPE_CHECKING:
    import httpx  # noqa: F401
    from remote_search.client import RestSearchClient  # noqa: F401


__all__ = [
    "SearchClientSettings",
    "search_settings",
    "get_client",
]


class SearchClientSettings(BaseSettings):
    """
    Application settings for remote-search.

    Settings can be configured via:
    - Environment variables (prefixed with REMOTE_SEARCH_)
    - .env file in the working directory
    - Direct instantiation with parameters
    - Runtime override using the override() method

    Attributes:
        server_url: Base URL of the search server (trailing slashes are stripped)
        charset: Charset for XML bodies and multipart text fields
        timeout: Transport timeout in seconds
        index_id: Default index for operations called without an index id
    """

    server_url: str = Field(
        "http://localhost:8080",
        description="Base URL of the search server",
    )

    charset: str = Field(
        DEFAULT_CHARSET,
        description="Charset for XML bodies and multipart text fields",
    )

    timeout: float = Field(
        60.0,
        gt=0,
        description="Transport timeout in seconds",
    )

    index_id: str | None = Field(
        None,
        description="Default index id (server default index if unset)",
    )

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slashes(cls, v):
        # type: (str) -> str
        """
        Normalize server URL by removing trailing slashes.

        :param v: Server URL
        :return: Server URL without trailing slashes
        """
        return normalize_server_url(v)

    @field_validator("charset")
    @classmethod
    def check_charset(cls, v):
        # type: (str) -> str
        """
        Reject charsets Python has no codec for.

        :param v: Charset name
        :return: Charset name unchanged
        """
        return validate_charset(v)

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    def override(self, update=None):
        # type: (dict|None) -> SearchClientSettings
        """
        Returns an updated and validated deep copy of the current settings instance.

        :param update: Dictionary of field names and values to override.
        :return: New SearchClientSettings instance with updated and validated fields.
        """
        update = update or {}

        settings = self.model_copy(deep=True)
        # Assign fields one by one so validation gets triggered
        for field, value in update.items():
            setattr(settings, field, value)
        return settings

    def to_config(self):
        # type: () -> ClientConfig
        """
        Build the immutable client configuration.

        :return: ClientConfig with server URL, charset, timeout and default index id
        """
        return ClientConfig(
            server_url=self.server_url,
            charset=self.charset,
            timeout=self.timeout,
            default_index_id=self.index_id,
        )


search_settings = SearchClientSettings()


def get_client(settings=None, transport=None):
    # type: (SearchClientSettings|None, httpx.BaseTransport|None) -> RestSearchClient
    """
    Factory function to create a search client from settings.

    :param settings: Settings to use (module level search_settings if None)
    :param transport: Optional httpx transport passed to the client
    :return: Configured RestSearchClient
    """
    from remote_search.client import RestSearchClient

    settings = settings or search_settings
    return RestSearchClient(settings.to_config(), transport=transport)
