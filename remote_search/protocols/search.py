"""
Search Service Protocol Definition

Defines the protocol interface of a search service client. Callers depend on this
protocol instead of the concrete HTTP implementation, so fakes can stand in during tests.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from remote_search.content import ContentSource  # noqa: F401


@runtime_checkable
class Query(Protocol):
    """Any object that can render itself as a URL query string."""

    def to_query_string(self):
        # type: () -> str
        """
        Render the query as an URL query string (without leading ``?``).

        The result is appended verbatim to the search URL, so it must already be URL encoded.
        """
        ...


@runtime_checkable
class SearchServiceProtocol(Protocol):
    """
    Protocol for search service clients.

    All methods are synchronous and blocking. ``index_id`` selects the target index;
    None or an empty string selects the server default index.

    All implementations share the exception contract of ``remote_search.exceptions``:
    - ServerError: The server answered with a non-2xx status
    - TransportError: Network, I/O or decoding failure
    - ReservedFieldNameError: Additional field collides with a reserved parameter
    - InvalidUrlError: Request URL could not be built
    """

    def search(self, query, index_id=None):
        # type: (Query, str|None) -> dict
        """
        Run a query against an index.

        :param query: Query rendered with ``to_query_string()``
        :param index_id: Target index (server default if None)
        :return: Parsed JSON response
        """
        ...

    def update(self, site, id, xml, ignore_root_in_field_names=True, index_id=None):
        # type: (str, str, str, bool, str|None) -> str
        """
        Add or replace an XML document.

        :param site: Site the document belongs to
        :param id: Document id
        :param xml: Raw XML payload
        :param ignore_root_in_field_names: Strip the root element name from field names
        :param index_id: Target index (server default if None)
        :return: Server status message
        """
        ...

    def delete(self, site, id, index_id=None):
        # type: (str, str, str|None) -> str
        """
        Delete a document.

        :param site: Site the document belongs to
        :param id: Document id
        :param index_id: Target index (server default if None)
        :return: Server status message
        """
        ...

    def commit(self, index_id=None):
        # type: (str|None) -> str
        """
        Make pending writes visible to searches.

        :param index_id: Target index (server default if None)
        :return: Server status message
        """
        ...

    def update_file(self, site, id, content, additional_fields=None, index_id=None):
        # type: (str, str, ContentSource, dict[str, list[str]]|None, str|None) -> str
        """
        Add or replace a binary file document.

        :param site: Site the document belongs to
        :param id: Document id (its basename becomes the uploaded filename)
        :param content: Bytes, path or readable binary stream
        :param additional_fields: Extra multi-valued form fields
        :param index_id: Target index (server default if None)
        :return: Server status message
        """
        ...

    def close(self):
        # type: () -> None
        """Release transport resources. Idempotent."""
        ...
