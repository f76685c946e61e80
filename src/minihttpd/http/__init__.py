"""
HTTP protocol layer: parsing requests, content kinds, status codes and
response headers.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       raw bytes → IncomingRequest                        │
    │ mime_types.py    file name → MimeKind → Content-Type                │
    │ status_codes.py  200 / 301 / 400 / 404 and their reason phrases     │
    │ response.py      ResolvedResource → status line + header block      │
    └─────────────────────────────────────────────────────────────────────┘
"""

from .request import IncomingRequest, RequestParser, parse_request
from .response import ResponseHeaderBuilder, DEFAULT_VERSION, status_line, write_fully
from .status_codes import HTTPStatus, reason_phrase
from .mime_types import MimeKind, kind_for_name, get_content_type, is_binary

__all__ = [
    # Request parsing
    "IncomingRequest",
    "RequestParser",
    "parse_request",

    # Response headers
    "ResponseHeaderBuilder",
    "DEFAULT_VERSION",
    "status_line",
    "write_fully",

    # Status codes
    "HTTPStatus",
    "reason_phrase",

    # Content kinds
    "MimeKind",
    "kind_for_name",
    "get_content_type",
    "is_binary",
]
