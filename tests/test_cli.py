"""Tests for the remote-search CLI."""

import json

import httpx
import pytest
from typer.testing import CliRunner

import remote_search
from remote_search.cli import app
from remote_search.cli.common import get_active_client, parse_fields
from remote_search.client import RestSearchClient
from remote_search.config import ConfigManager, ServerConfig
from remote_search.models import ClientConfig


runner = CliRunner()


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    # type: (Path, pytest.MonkeyPatch) -> ConfigManager
    """Create ConfigManager with temporary config path and mock get_config_manager."""
    manager = ConfigManager(config_path=tmp_path / "config.json")

    def mock_get_config_manager():
        # type: () -> ConfigManager
        return manager

    monkeypatch.setattr("remote_search.config.get_config_manager", mock_get_config_manager)
    monkeypatch.setattr("remote_search.cli.server.get_config_manager", mock_get_config_manager)
    return manager


@pytest.fixture
def server(config_manager, monkeypatch, make_transport):
    """Route clients created from server profiles through a mock transport."""
    responses = {"status_code": 200, "text": "OK", "json": None}

    def create_client(self, transport=None):
        # type: (ServerConfig, httpx.BaseTransport|None) -> RestSearchClient
        config = ClientConfig(server_url=self.url, charset=self.charset, default_index_id=self.index_id)
        return RestSearchClient(config, transport=make_transport(**responses))

    monkeypatch.setattr(ServerConfig, "create_client", create_client)
    return responses


def test_version():
    # type: () -> None
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert remote_search.__version__ in result.output


def test_parse_fields():
    # type: () -> None
    assert parse_fields(["tag=a", "tag=b", "lang=en", "empty="]) == {"tag": ["a", "b"], "lang": ["en"], "empty": [""]}
    assert parse_fields(None) is None
    assert parse_fields([]) is None


@pytest.mark.parametrize("field", ["novalue", "=value"])
def test_parse_fields_invalid(field):
    # type: (str) -> None
    with pytest.raises(ValueError):
        parse_fields([field])


def test_get_active_client_unknown_server(config_manager):
    # type: (ConfigManager) -> None
    with pytest.raises(ValueError, match="not found"):
        get_active_client("missing")


def test_get_active_client_no_active_server(config_manager):
    # type: (ConfigManager) -> None
    config_manager.remove_server("default")
    with pytest.raises(ValueError, match="No active server"):
        get_active_client()


def test_get_active_client_named_server(config_manager):
    # type: (ConfigManager) -> None
    config_manager.add_server(ServerConfig(name="prod", url="https://search.example.com/"))

    client, server_config = get_active_client("prod")
    with client:
        assert server_config.name == "prod"
        assert client.server_url == "https://search.example.com"


def test_search_command(server, sent_requests):
    # type: (dict, list) -> None
    server["json"] = {"response": {"numFound": 3}}

    result = runner.invoke(app, ["search", "q=title:report&rows=10", "--index-id", "products"])

    assert result.exit_code == 0, result.output
    assert '"numFound": 3' in result.output
    url = sent_requests[0].url
    assert url.path == "/api/1/search"
    assert url.params["indexId"] == "products"
    assert url.params["q"] == "title:report"
    assert url.params["rows"] == "10"


def test_search_command_uses_profile_index_id(config_manager, server, sent_requests):
    # type: (ConfigManager, dict, list) -> None
    config_manager.add_server(ServerConfig(name="prod", url="https://search.example.com", index_id="products"))
    server["json"] = {}

    result = runner.invoke(app, ["search", "q=*:*", "--server", "prod"])

    assert result.exit_code == 0, result.output
    assert sent_requests[0].url.host == "search.example.com"
    assert sent_requests[0].url.params["indexId"] == "products"


def test_search_command_sends_query_verbatim(server, sent_requests):
    # type: (dict, list) -> None
    server["json"] = {}

    result = runner.invoke(app, ["search", "q=title:report&fq=site%3Aa", "-i", "products"])

    assert result.exit_code == 0, result.output
    assert sent_requests[0].url.query == b"indexId=products&q=title:report&fq=site%3Aa"


def test_search_command_rejects_non_object_response(server):
    # type: (dict) -> None
    server["json"] = [1, 2]

    result = runner.invoke(app, ["search", "q=x"])

    assert result.exit_code == 1
    assert "Expected a JSON object" in result.output


def test_search_command_server_error(server):
    # type: (dict) -> None
    server["status_code"] = 500
    server["text"] = "bad request"

    result = runner.invoke(app, ["search", "q=x"])

    assert result.exit_code == 1
    assert "bad request" in result.output


def test_search_command_unknown_server(server):
    # type: (dict) -> None
    result = runner.invoke(app, ["search", "q=x", "--server", "missing"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_update_command(server, sent_requests, tmp_path):
    # type: (dict, list, Path) -> None
    xml_file = tmp_path / "index.xml"
    xml_file.write_text("<page><title>Home</title></page>", encoding="utf-8")

    result = runner.invoke(app, ["update", "mysite", "/site/website/index.xml", str(xml_file), "--keep-root"])

    assert result.exit_code == 0, result.output
    assert "OK" in result.output
    request = sent_requests[0]
    assert request.url.path == "/api/1/update"
    assert request.url.params["site"] == "mysite"
    assert request.url.params["id"] == "/site/website/index.xml"
    assert request.url.params["ignoreRootInFieldNames"] == "false"
    assert request.content == b"<page><title>Home</title></page>"


def test_update_file_command(server, sent_requests, tmp_path):
    # type: (dict, list, Path) -> None
    path = tmp_path / "upload.pdf"
    path.write_bytes(b"%PDF-1.4")

    result = runner.invoke(
        app, ["update-file", "mysite", "docs/report.pdf", str(path), "--field", "tags=a", "--field", "tags=b"]
    )

    assert result.exit_code == 0, result.output
    body = sent_requests[0].content
    assert sent_requests[0].url.path == "/api/1/update-file"
    assert b'filename="report.pdf"' in body
    assert b'name="tags"\r\nContent-Type: text/plain; charset=utf-8\r\n\r\na\r\n' in body
    assert b'name="tags"\r\nContent-Type: text/plain; charset=utf-8\r\n\r\nb\r\n' in body


def test_update_file_command_reserved_field(server, sent_requests, tmp_path):
    # type: (dict, list, Path) -> None
    path = tmp_path / "upload.pdf"
    path.write_bytes(b"%PDF-1.4")

    result = runner.invoke(app, ["update-file", "mysite", "report.pdf", str(path), "--field", "site=other"])

    assert result.exit_code == 1
    assert sent_requests == []


def test_update_file_command_invalid_field(server, sent_requests, tmp_path):
    # type: (dict, list, Path) -> None
    path = tmp_path / "upload.pdf"
    path.write_bytes(b"%PDF-1.4")

    result = runner.invoke(app, ["update-file", "mysite", "report.pdf", str(path), "--field", "novalue"])

    assert result.exit_code == 1
    assert "name=value" in result.output
    assert sent_requests == []


def test_delete_command(server, sent_requests):
    # type: (dict, list) -> None
    result = runner.invoke(app, ["delete", "mysite", "doc.xml", "-i", "products"])

    assert result.exit_code == 0, result.output
    assert sent_requests[0].url.path == "/api/1/delete"
    assert sent_requests[0].url.params["indexId"] == "products"


def test_commit_command(server, sent_requests):
    # type: (dict, list) -> None
    server["text"] = "committed"

    result = runner.invoke(app, ["commit"])

    assert result.exit_code == 0, result.output
    assert "committed" in result.output
    assert str(sent_requests[0].url) == "http://localhost:8080/api/1/commit"


def test_commit_command_uses_profile_index_id(config_manager, server, sent_requests):
    # type: (ConfigManager, dict, list) -> None
    config_manager.add_server(ServerConfig(name="prod", url="https://search.example.com", index_id="products"))

    result = runner.invoke(app, ["commit", "--server", "prod"])

    assert result.exit_code == 0, result.output
    assert str(sent_requests[0].url) == "https://search.example.com/api/1/commit?indexId=products"


def test_server_add_rejects_unknown_charset(config_manager):
    # type: (ConfigManager) -> None
    result = runner.invoke(app, ["server", "add", "prod", "https://search.example.com", "--charset", "bogus"])

    assert result.exit_code == 1
    assert "Unknown charset: bogus" in result.output
    with pytest.raises(KeyError):
        config_manager.get_server("prod")


def test_server_add_list_use_remove(config_manager):
    # type: (ConfigManager) -> None
    result = runner.invoke(app, ["server", "add", "prod", "https://search.example.com/", "--index-id", "products"])
    assert result.exit_code == 0, result.output
    assert config_manager.get_server("prod").url == "https://search.example.com"
    assert config_manager.get_server("prod").index_id == "products"

    result = runner.invoke(app, ["server", "list"])
    assert result.exit_code == 0, result.output
    assert "prod" in result.output
    assert "default" in result.output

    result = runner.invoke(app, ["server", "use", "prod"])
    assert result.exit_code == 0, result.output
    assert config_manager.get_active().name == "prod"

    result = runner.invoke(app, ["server", "remove", "prod"])
    assert result.exit_code == 0, result.output
    assert config_manager.get_active().name == "default"


def test_server_use_unknown(config_manager):
    # type: (ConfigManager) -> None
    result = runner.invoke(app, ["server", "use", "missing"])
    assert result.exit_code == 1


def test_server_remove_unknown(config_manager):
    # type: (ConfigManager) -> None
    result = runner.invoke(app, ["server", "remove", "missing"])
    assert result.exit_code == 1


def test_server_list_empty(config_manager):
    # type: (ConfigManager) -> None
    config_manager.remove_server("default")

    result = runner.invoke(app, ["server", "list"])

    assert result.exit_code == 0
    assert "No servers configured" in result.output
