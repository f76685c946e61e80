"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the raw bytes of one request into an immutable IncomingRequest.

=============================================================================
WIRE FORMAT
=============================================================================

    GET /index.html HTTP/1.1\r\n        ← request line (exactly 3 tokens)
    Host: localhost\r\n                  ← header lines "Field: Value"
    User-Agent: curl/8.0\r\n
    \r\n                                 ← blank line ends the header block

Both CRLF and bare LF line endings are accepted. A request with a request
line and no headers at all is valid, and the blank line may be missing if
the buffer simply ends.

=============================================================================
NO SHARED-BUFFER TOKENIZING
=============================================================================

Every token is an independent string sliced out of the decoded text. The
caller's buffer is never modified, and fields can be inspected in any order.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..errors import MalformedRequest


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingRequest:
    """
    A parsed HTTP request.

    Attributes:
        method:   Request method token ("GET", "POST", ...), as sent.
        path:     Request path, always starting with "/".
        version:  Protocol version token ("HTTP/1.1").
        headers:  (field, value) pairs in the order received. Field names
                  keep their original case and may repeat.

    Frozen: once parsed, nothing downstream can change it.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Tuple[Tuple[str, str], ...] = ()

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value of a header (case-insensitive lookup).

        Example:
            request.get_header("host")  # works for "Host: ..." too
        """
        wanted = name.lower()
        for field_name, value in self.headers:
            if field_name.lower() == wanted:
                return value
        return default

    def get_all(self, name: str) -> list[str]:
        """Get every value of a repeated header, in order."""
        wanted = name.lower()
        return [value for field_name, value in self.headers if field_name.lower() == wanted]


class RequestParser:
    """
    Parses raw request bytes into IncomingRequest objects.

    =========================================================================
    PARSER STEPS
    =========================================================================

        Raw bytes
            │
            ▼
        1. Decode (UTF-8, undecodable bytes replaced)
            │
            ▼
        2. First line → request line, trailing \\r trimmed
            │  split on single spaces → METHOD PATH VERSION
            │  not exactly 3 non-empty tokens → MalformedRequest
            ▼
        3. Following lines up to the first blank one → headers
            │  split on the FIRST colon → (field, value)
            │  no colon → MalformedRequest (strict) or skipped (lenient)
            ▼
        IncomingRequest

    =========================================================================
    STRICT VS LENIENT HEADERS
    =========================================================================

    A header line without a colon ("garbage\\r\\n") can either fail the
    whole request with 400 (strict_headers=True, the default) or be logged
    and dropped while parsing continues (strict_headers=False).

    =========================================================================
    """

    def __init__(self, strict_headers: bool = True):
        """
        Args:
            strict_headers: Reject the request on an untokenizable header
                            line instead of skipping it.
        """
        self.strict_headers = strict_headers

    def parse(self, data: Union[bytes, str]) -> IncomingRequest:
        """
        Parse one complete request buffer.

        Args:
            data: The request as read from the connection.

        Returns:
            Parsed IncomingRequest.

        Raises:
            MalformedRequest: If the request line or a header line is invalid.
        """
        if isinstance(data, bytes):
            text = data.decode("utf-8", errors="replace")
        else:
            text = data

        lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]

        method, path, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        return IncomingRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
        )

    def _parse_request_line(self, line: str) -> Tuple[str, str, str]:
        """
        Split "METHOD SP PATH SP VERSION" into its three tokens.

        Delimiters are single spaces, so "GET  / HTTP/1.1" (two spaces)
        produces an empty token and is rejected.
        """
        if not line:
            raise MalformedRequest("Empty request line")

        tokens = line.split(" ")
        if len(tokens) != 3 or not all(tokens):
            raise MalformedRequest(f"Invalid request line: {line!r}")

        method, path, version = tokens
        if not path.startswith("/"):
            raise MalformedRequest(f"Invalid request path: {path!r}")

        return method, path, version

    def _parse_headers(self, lines: list[str]) -> Tuple[Tuple[str, str], ...]:
        """
        Parse header lines up to the first blank line.

        Order and duplicates are kept as received:

            "Accept: text/html"
            "Accept: image/gif"   →  (("Accept", "text/html"),
                                      ("Accept", "image/gif"))
        """
        headers = []

        for line in lines:
            if not line:
                break  # End of header block; anything after is body

            field_name, sep, value = line.partition(":")
            field_name = field_name.strip()

            if not sep or not field_name:
                if self.strict_headers:
                    raise MalformedRequest(f"Invalid header line: {line!r}")
                logger.debug(f"Skipping invalid header line: {line!r}")
                continue

            headers.append((field_name, value.strip()))

        return tuple(headers)


def parse_request(data: Union[bytes, str], strict_headers: bool = True) -> IncomingRequest:
    """
    Convenience function to parse a request in one call.

    Use RequestParser directly to parse many requests with the same settings.
    """
    return RequestParser(strict_headers=strict_headers).parse(data)
