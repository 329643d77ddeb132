"""Test fixtures for remote search client testing."""

import httpx
import pytest

from remote_search.client import RestSearchClient
from remote_search.models import ClientConfig


SERVER_URL = "http://search.example.com"


@pytest.fixture
def sent_requests():
    # type: () -> list[httpx.Request]
    """Collect requests seen by the mock transport."""
    return []


@pytest.fixture
def make_transport(sent_requests):
    """
    Build a MockTransport answering every request with the same response.

    Pass ``error`` to raise an exception instead of answering.
    """

    def factory(status_code=200, text="OK", json=None, error=None):
        # type: (int, str, object, Exception|None) -> httpx.MockTransport
        def handler(request):
            # type: (httpx.Request) -> httpx.Response
            request.read()
            sent_requests.append(request)
            if error is not None:
                raise error
            if json is not None:
                return httpx.Response(status_code, json=json)
            return httpx.Response(status_code, text=text)

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def make_client(make_transport):
    """Build a RestSearchClient backed by a mock transport."""
    clients = []

    def factory(server_url=SERVER_URL + "/", charset="utf-8", default_index_id=None, **response):
        # type: (str, str, str|None, ...) -> RestSearchClient
        config = ClientConfig(server_url=server_url, charset=charset, default_index_id=default_index_id)
        client = RestSearchClient(config, transport=make_transport(**response))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    # type: (...) -> RestSearchClient
    """Client answering every request with 200 OK."""
    return make_client()
