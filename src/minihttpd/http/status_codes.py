"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server emits exactly four status codes:

    ┌──────┬───────────────────┬─────────────────────────────────────────┐
    │ CODE │ REASON PHRASE     │ WHEN                                    │
    ├──────┼───────────────────┼─────────────────────────────────────────┤
    │ 200  │ OK                │ File found (or "/" served directly)     │
    │ 301  │ Moved Permanently │ "/" with the redirect root policy       │
    │ 400  │ Bad Request       │ Malformed request or non-GET method     │
    │ 404  │ Not Found         │ File missing, unreadable or out of root │
    └──────┴───────────────────┴─────────────────────────────────────────┘

The set is closed. Asking for the phrase of any other code is a
programming error and raises immediately instead of inventing a phrase.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200                    # File served
    MOVED_PERMANENTLY = 301     # Root redirected to the default document
    BAD_REQUEST = 400           # Malformed or unsupported request
    NOT_FOUND = 404             # Not-found document served instead

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
}


def reason_phrase(code: int) -> str:
    """
    Map a status code to its reason phrase.

    Raises:
        ValueError: If the code is not one the server emits.
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        raise ValueError(f"Unsupported status code: {code}") from None
