"""
Error taxonomy for a single request/response exchange.

    HTTPError               request-level failure, answered with a status code
    ├── MalformedRequest    request line or header line cannot be tokenized
    └── UnsupportedMethod   anything but GET

    TransmissionError       socket or file I/O failure mid-response; the
                            connection is closed, no response is guaranteed

A missing file is NOT an error: it is a normal outcome answered with the
not-found document.
"""

from typing import Optional


class HTTPError(Exception):
    """
    Raised when a request cannot be served and must be answered with an
    error status instead.

    Carries the HTTP status to send back, like the parser errors of most
    servers. Every subclass here maps to 400.
    """

    status_code = 400  # Bad Request

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class MalformedRequest(HTTPError):
    """The request line or a header line could not be tokenized."""


class UnsupportedMethod(HTTPError):
    """The request used a method other than GET."""

    def __init__(self, method: str):
        super().__init__(f"Unsupported method: {method}")
        self.method = method


class TransmissionError(OSError):
    """
    Writing the response failed.

    Covers socket write errors, short writes, and file open/read errors on a
    file that passed the existence check. Propagates to whoever owns the
    connection so it can be logged and the connection closed.
    """
