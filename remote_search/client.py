"""
REST search client implementation.

Provides a synchronous HTTP client for remote search servers, implementing the
SearchServiceProtocol interface. Every operation is a single blocking request;
failures are translated into SearchClientError subclasses and never retried.
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import httpx
from loguru import logger

from remote_search.content import filename_from_id, open_content
from remote_search.exceptions import (
    InvalidUrlError,
    ReservedFieldNameError,
    SearchClientError,
    ServerError,
    TransportError,
)

if TYPE_CHECKING:
    from remote_search.content import ContentSource  # noqa: F401
    from remote_search.models import ClientConfig, FileUpdateRequest, UpdateRequest  # noqa: F401
    from remote_search.protocols.search import Query  # noqa: F401


__all__ = [
    "RestSearchClient",
    "API_ROOT",
    "RESERVED_FIELD_NAMES",
]


API_ROOT = "/api/1"

URL_SEARCH = "/search"
URL_UPDATE = "/update"
URL_DELETE = "/delete"
URL_COMMIT = "/commit"
URL_UPDATE_FILE = "/update-file"

PARAM_INDEX_ID = "indexId"
PARAM_SITE = "site"
PARAM_ID = "id"
PARAM_IGNORE_ROOT_IN_FIELD_NAMES = "ignoreRootInFieldNames"
PARAM_FILE = "file"
PARAM_DOCUMENT = "document"

RESERVED_FIELD_NAMES = (PARAM_INDEX_ID, PARAM_SITE, PARAM_ID, PARAM_FILE, PARAM_DOCUMENT)


class RestSearchClient:
    """
    Remote search client implementing SearchServiceProtocol.

    Talks to a search server over its REST API rooted at ``<server_url>/api/1``.
    The client holds no mutable state besides the shared httpx transport, so one
    instance can serve concurrent callers.
    """

    def __init__(self, config, transport=None):
        # type: (ClientConfig, httpx.BaseTransport|None) -> None
        """
        Initialize REST search client.

        :param config: Immutable connection settings
        :param transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.config = config
        self._client = httpx.Client(timeout=config.timeout, transport=transport)

    @property
    def server_url(self):
        # type: () -> str
        return self.config.server_url

    @property
    def charset(self):
        # type: () -> str
        return self.config.charset

    def search(self, query, index_id=None):
        # type: (Query, str|None) -> dict
        """
        Run a query against an index.

        The rendered query string is appended verbatim after the optional indexId parameter.

        :param query: Query rendered with ``to_query_string()``
        :param index_id: Target index (configured default, else server default, if None or empty)
        :return: Parsed JSON response
        :raises ServerError: On non-2xx responses
        :raises TransportError: On network failures, undecodable JSON or a non-object response
        """
        index_id = self._resolve_index_id(index_id)
        url = self._build_url(URL_SEARCH, index_id)
        url = self._add_query_string(url, query.to_query_string())

        description = f"Search for query {query}"
        with self._translate_errors("search", description, url, index_id):
            response = self._send("GET", url)
            self._check_response(response, "search", description, index_id)
            result = response.json()
            if not isinstance(result, dict):
                raise ValueError(f"Expected a JSON object, got {type(result).__name__}")
            return result

    def update(self, site, id, xml, ignore_root_in_field_names=True, index_id=None):
        # type: (str, str, str, bool, str|None) -> str
        """
        Add or replace an XML document.

        :param site: Site the document belongs to
        :param id: Document id
        :param xml: Raw XML payload, encoded with the configured charset
        :param ignore_root_in_field_names: Strip the root element name from field names
        :param index_id: Target index (configured default, else server default, if None or empty)
        :return: Server status message
        """
        index_id = self._resolve_index_id(index_id)
        url = self._build_url(URL_UPDATE, index_id)
        url = self._add_param(url, PARAM_SITE, site)
        url = self._add_param(url, PARAM_ID, id)
        url = self._add_param(url, PARAM_IGNORE_ROOT_IN_FIELD_NAMES, ignore_root_in_field_names)

        description = f"Update for XML '{id}'"
        with self._translate_errors("update", description, url, index_id):
            response = self._send(
                "POST",
                url,
                content=xml.encode(self.charset),
                headers={"Content-Type": f"text/xml; charset={self.charset}"},
            )
            self._check_response(response, "update", description, index_id)
            return response.text

    def update_request(self, request):
        # type: (UpdateRequest) -> str
        """Send an UpdateRequest. See ``update``."""
        return self.update(
            request.site,
            request.id,
            request.xml,
            ignore_root_in_field_names=request.ignore_root_in_field_names,
            index_id=request.index_id,
        )

    def delete(self, site, id, index_id=None):
        # type: (str, str, str|None) -> str
        """
        Delete a document.

        :param site: Site the document belongs to
        :param id: Document id
        :param index_id: Target index (configured default, else server default, if None or empty)
        :return: Server status message
        """
        index_id = self._resolve_index_id(index_id)
        url = self._build_url(URL_DELETE, index_id)
        url = self._add_param(url, PARAM_SITE, site)
        url = self._add_param(url, PARAM_ID, id)

        description = f"Delete for XML '{id}'"
        with self._translate_errors("delete", description, url, index_id):
            response = self._send("POST", url)
            self._check_response(response, "delete", description, index_id)
            return response.text

    def commit(self, index_id=None):
        # type: (str|None) -> str
        """
        Make pending writes visible to searches.

        :param index_id: Target index (configured default, else server default, if None or empty)
        :return: Server status message
        """
        index_id = self._resolve_index_id(index_id)
        url = self._build_url(URL_COMMIT, index_id)

        with self._translate_errors("commit", "Commit", url, index_id):
            response = self._send("POST", url)
            self._check_response(response, "commit", "Commit", index_id)
            return response.text

    def update_file(self, site, id, content, additional_fields=None, index_id=None):
        # type: (str, str, ContentSource, dict[str, list[str]]|None, str|None) -> str
        """
        Add or replace a binary file document via multipart form upload.

        The file part is named after the basename of ``id``. Each additional field is
        sent as its own form field, once per value. Text fields are typed
        ``text/plain`` with the configured charset.

        :param site: Site the document belongs to
        :param id: Document id
        :param content: Bytes, path or readable binary stream
        :param additional_fields: Extra multi-valued form fields (must not use reserved names)
        :param index_id: Target index (configured default, else server default, if None or empty)
        :return: Server status message
        :raises ReservedFieldNameError: If an additional field uses a reserved name
        """
        index_id = self._resolve_index_id(index_id)
        parts = self._build_form(site, id, additional_fields, index_id)
        url = self._build_url(URL_UPDATE_FILE)
        filename = filename_from_id(id)

        description = f"Update for file '{id}'"
        with self._translate_errors("update-file", description, url, index_id):
            with open_content(content) as stream:
                response = self._send("POST", url, files=parts + [(PARAM_FILE, (filename, stream))])
            self._check_response(response, "update-file", description, index_id)
            return response.text

    def update_file_request(self, request):
        # type: (FileUpdateRequest) -> str
        """Send a FileUpdateRequest. See ``update_file``."""
        return self.update_file(
            request.site,
            request.id,
            request.content,
            additional_fields=request.additional_fields,
            index_id=request.index_id,
        )

    def close(self):
        # type: () -> None
        """
        Close HTTP client and cleanup resources.

        Idempotent - safe to call multiple times.
        """
        if not self._client.is_closed:
            self._client.close()
            logger.debug(f"Closed search client for {self.server_url}")

    def __enter__(self):
        # type: () -> RestSearchClient
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _send(self, method, url, **kwargs):
        # type: (str, str, **object) -> httpx.Response
        logger.debug(f"{method} {url}")
        return self._client.request(method, httpx.URL(url), **kwargs)

    def _build_url(self, endpoint, index_id=None):
        # type: (str, str|None) -> str
        url = self.server_url + API_ROOT + endpoint
        if index_id:
            url = self._add_param(url, PARAM_INDEX_ID, index_id)
        return url

    def _add_param(self, url, name, value):
        # type: (str, str, object) -> str
        if isinstance(value, bool):
            value = "true" if value else "false"
        return self._add_query_string(url, urlencode({name: value}, encoding="utf-8"))

    def _add_query_string(self, url, query_string):
        # type: (str, str) -> str
        query_string = query_string.lstrip("?&")
        if not query_string:
            return url
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{query_string}"

    def _build_form(self, site, id, additional_fields, index_id):
        # type: (str, str, dict[str, list[str]]|None, str|None) -> list[tuple[str, tuple[None, bytes, str]]]
        """
        Build the text parts of the multipart form, one part per value.

        :raises ReservedFieldNameError: If an additional field uses a reserved name
        """
        parts = []  # type: list[tuple[str, tuple[None, bytes, str]]]
        if index_id:
            parts.append(self._text_part(PARAM_INDEX_ID, index_id))
        parts.append(self._text_part(PARAM_SITE, site))
        parts.append(self._text_part(PARAM_ID, id))

        for name, values in (additional_fields or {}).items():
            if name in RESERVED_FIELD_NAMES:
                raise ReservedFieldNameError(
                    f"An additional field shouldn't have the following names: {', '.join(RESERVED_FIELD_NAMES)}",
                    index_id=index_id,
                    operation="update-file",
                )
            if isinstance(values, str):
                values = [values]
            parts.extend(self._text_part(name, value) for value in values)

        return parts

    def _text_part(self, name, value):
        # type: (str, object) -> tuple[str, tuple[None, bytes, str]]
        # No filename, so httpx sends a plain form field carrying our Content-Type
        return name, (None, str(value).encode(self.charset), f"text/plain; charset={self.charset}")

    def _resolve_index_id(self, index_id):
        # type: (str|None) -> str|None
        return index_id or self.config.default_index_id

    @staticmethod
    def _check_response(response, operation, description, index_id):
        # type: (httpx.Response, str, str, str|None) -> None
        """
        Convert non-2xx responses to ServerError.

        :raises ServerError: If the response status is not 2xx
        """
        if response.is_success:
            return
        raise ServerError(
            f"{description} failed: [{response.reason_phrase}] {response.text}",
            status_code=response.status_code,
            body=response.text,
            index_id=index_id,
            operation=operation,
        )

    @contextmanager
    def _translate_errors(self, operation, description, url, index_id):
        # type: (str, str, str, str|None) -> None
        """Translate failures raised inside the block into SearchClientError subclasses."""
        try:
            yield
        except SearchClientError as e:
            logger.debug(f"{operation} failed: {e}")
            raise
        except httpx.InvalidURL as e:
            raise InvalidUrlError(f"Invalid URI: {url}", index_id=index_id, operation=operation, cause=e) from e
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.debug(f"{operation} failed: {e}")
            raise TransportError(
                f"{description} failed: {e}", index_id=index_id, operation=operation, cause=e
            ) from e
