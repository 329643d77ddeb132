"""
Exceptions raised by the remote search client.

Every failure of a client operation surfaces as a subclass of SearchClientError,
carrying the targeted index id, the operation that failed and the underlying cause.
"""

__all__ = [
    "SearchClientError",
    "InvalidUrlError",
    "ServerError",
    "TransportError",
    "ReservedFieldNameError",
]


class SearchClientError(Exception):
    """
    Base error for all remote search client failures.

    :ivar index_id: Index the failed operation targeted (None for the server default)
    :ivar operation: Name of the client operation (search, update, delete, commit, update-file)
    :ivar cause: Underlying exception, if any
    """

    def __init__(self, message, index_id=None, operation=None, cause=None):
        # type: (str, str|None, str|None, BaseException|None) -> None
        super().__init__(message)
        self.index_id = index_id
        self.operation = operation
        self.cause = cause

    def __str__(self):
        # type: () -> str
        message = super().__str__()
        if self.index_id:
            return f"[{self.index_id}] {message}"
        return message


class InvalidUrlError(SearchClientError):
    """Request URL could not be constructed or parsed."""


class ServerError(SearchClientError):
    """Remote server answered with a non-2xx status."""

    def __init__(self, message, status_code, body, index_id=None, operation=None):
        # type: (str, int, str, str|None, str|None) -> None
        super().__init__(message, index_id=index_id, operation=operation)
        self.status_code = status_code
        self.body = body


class TransportError(SearchClientError):
    """Network, I/O or decoding failure while talking to the server."""


class ReservedFieldNameError(SearchClientError):
    """An additional form field collides with a reserved request parameter."""
