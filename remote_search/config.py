"""
CLI server profile management for remote-search.

**PURPOSE**: Keep several named search servers in a persistent configuration and
track which one the CLI talks to by default.

**CONFIGURATION SOURCE**: Persistent JSON file in the per-user data directory.

**NOT FOR**: Library / application configuration. See remote_search.settings for that.

Features:
- Register multiple servers with their charset and default index id
- Track the active server used by default for all commands
- CRUD operations on server profiles
- JSON persistence at <user data dir>/config.json
"""

import json
from pathlib import Path
from typing import TYPE_CHECKING

import remote_search
from loguru import logger

from remote_search.models import DEFAULT_CHARSET, ClientConfig, normalize_server_url, validate_charset

if TYPE_CHECKING:
    import httpx  # noqa: F401
    from remote_search.client import RestSearchClient  # noqa: F401


__all__ = [
    "ServerConfig",
    "Config",
    "ConfigManager",
    "get_config_manager",
]


DEFAULT_SERVER_URL = "http://localhost:8080"


class ServerConfig:
    """Profile of a remote search server."""

    def __init__(self, name, url, charset=DEFAULT_CHARSET, index_id=None):
        # type: (str, str, str, str|None) -> None
        """
        Initialize server profile.

        :param name: Profile name (unique identifier)
        :param url: Base URL of the search server
        :param charset: Charset for XML bodies and multipart text fields
        :param index_id: Default index id for this server (server default if None)
        :raises ValueError: If no codec is registered for the charset
        """
        self.name = name
        self.url = normalize_server_url(url)
        self.charset = validate_charset(charset)
        self.index_id = index_id

    def to_dict(self):
        # type: () -> dict
        """
        Convert to dictionary for JSON serialization.

        :return: Dictionary with url, charset and optional index_id
        """
        result = {"url": self.url, "charset": self.charset}
        if self.index_id:
            result["index_id"] = self.index_id
        return result

    @staticmethod
    def from_dict(name, data):
        # type: (str, dict) -> ServerConfig
        """
        Create ServerConfig from dictionary.

        :param name: Profile name
        :param data: Dictionary with profile data
        :return: ServerConfig instance
        :raises ValueError: If the url is missing
        """
        url = data.get("url")
        if not url:
            raise ValueError(f"Server '{name}' has no url")
        return ServerConfig(
            name=name,
            url=url,
            charset=data.get("charset", DEFAULT_CHARSET),
            index_id=data.get("index_id"),
        )

    def create_client(self, transport=None):
        # type: (httpx.BaseTransport|None) -> RestSearchClient
        """
        Create a search client for this server.

        :param transport: Optional httpx transport passed to the client
        :return: RestSearchClient bound to this profile
        """
        from remote_search.client import RestSearchClient

        config = ClientConfig(server_url=self.url, charset=self.charset, default_index_id=self.index_id)
        return RestSearchClient(config, transport=transport)


class Config:
    """Configuration data container."""

    def __init__(self, active_server=None, servers=None):
        # type: (str|None, dict[str, ServerConfig]|None) -> None
        self.active_server = active_server
        self.servers = servers or {}

    def to_dict(self):
        # type: () -> dict
        return {
            "active_server": self.active_server,
            "servers": {name: cfg.to_dict() for name, cfg in self.servers.items()},
        }

    @staticmethod
    def from_dict(data):
        # type: (dict) -> Config
        active_server = data.get("active_server")
        servers_data = data.get("servers", {})
        servers = {name: ServerConfig.from_dict(name, cfg) for name, cfg in servers_data.items()}
        return Config(active_server=active_server, servers=servers)


class ConfigManager:
    """Manager for persistent server profiles."""

    def __init__(self, config_path=None):
        # type: (str|Path|None) -> None
        """
        Initialize configuration manager.

        :param config_path: Path to config file (defaults to <user data dir>/config.json)
        """
        if config_path is None:
            config_path = Path(remote_search.dirs.user_data_dir) / "config.json"
        self.config_path = Path(config_path)
        self._config = None  # type: Config|None

    def load(self):
        # type: () -> Config
        """
        Load configuration from file.

        If the config file doesn't exist or can not be parsed, a default config with a
        "default" server pointing at localhost is created and saved.

        :return: Config instance
        """
        if not self.config_path.exists():
            logger.info(f"No config found at {self.config_path}, creating default configuration")
            self._config = self._create_default_config()
            self.save()
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._config = Config.from_dict(data)
            return self._config
        except (OSError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            logger.info("Creating default configuration")
            self._config = self._create_default_config()
            self.save()
            return self._config

    def save(self):
        # type: () -> None
        """
        Save configuration to file.

        Creates config directory if it doesn't exist.
        """
        if self._config is None:
            raise ValueError("No config loaded")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self._config.to_dict(), f, indent=2)

        logger.debug(f"Saved config to {self.config_path}")

    def get_active(self):
        # type: () -> ServerConfig|None
        """
        Get active server profile.

        :return: Active ServerConfig or None if no active server
        """
        if self._config is None:
            self.load()

        if self._config.active_server is None:
            return None

        return self._config.servers.get(self._config.active_server)

    def get_server(self, name):
        # type: (str) -> ServerConfig
        """
        Get server profile by name.

        :raises KeyError: If no profile has this name
        """
        if self._config is None:
            self.load()

        if name not in self._config.servers:
            raise KeyError(f"Server '{name}' not found in configuration")

        return self._config.servers[name]

    def set_active(self, name):
        # type: (str) -> None
        """
        Set active server by name.

        :param name: Server name to set as active
        :raises KeyError: If server name not found in configuration
        """
        if self._config is None:
            self.load()

        if name not in self._config.servers:
            raise KeyError(f"Server '{name}' not found in configuration")

        self._config.active_server = name
        self.save()
        logger.info(f"Set active server to '{name}'")

    def add_server(self, server_config):
        # type: (ServerConfig) -> None
        """
        Add or update server profile.

        If a profile with the same name exists, it will be replaced.

        :param server_config: ServerConfig instance to add
        """
        if self._config is None:
            self.load()

        self._config.servers[server_config.name] = server_config

        # First server becomes active
        if self._config.active_server is None:
            self._config.active_server = server_config.name

        self.save()
        logger.info(f"Added server '{server_config.name}' ({server_config.url})")

    def remove_server(self, name):
        # type: (str) -> None
        """
        Remove server profile.

        If removing the active server, the first remaining server becomes active.

        :param name: Server name to remove
        :raises KeyError: If server name not found
        """
        if self._config is None:
            self.load()

        if name not in self._config.servers:
            raise KeyError(f"Server '{name}' not found in configuration")

        del self._config.servers[name]

        if self._config.active_server == name:
            if self._config.servers:
                self._config.active_server = next(iter(self._config.servers))
                logger.info(f"Active server changed to '{self._config.active_server}'")
            else:
                self._config.active_server = None
                logger.info("No servers remaining")

        self.save()
        logger.info(f"Removed server '{name}' from configuration")

    def list_servers(self):
        # type: () -> list[tuple[str, ServerConfig, bool]]
        """
        List all configured servers.

        :return: List of tuples (name, ServerConfig, is_active)
        """
        if self._config is None:
            self.load()

        return [(name, cfg, name == self._config.active_server) for name, cfg in self._config.servers.items()]

    def _create_default_config(self):
        # type: () -> Config
        default_server = ServerConfig(name="default", url=DEFAULT_SERVER_URL)
        return Config(active_server="default", servers={"default": default_server})


# Singleton instance
_config_manager = None  # type: ConfigManager|None


def get_config_manager():
    # type: () -> ConfigManager
    """
    Get singleton ConfigManager instance.

    :return: ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
