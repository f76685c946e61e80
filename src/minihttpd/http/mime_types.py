"""
=============================================================================
MIME KINDS AND CONTENT TYPES
=============================================================================

Maps request file names to one of a small, closed set of content kinds, and
each kind to the Content-Type string sent in the response headers.

=============================================================================
WHY A CLOSED SET?
=============================================================================

The server only knows how to present a handful of file types. Everything
else is sent as plain text:

    ┌────────────────────────────────────────────────────────────────────┐
    │  EXTENSION    KIND       CONTENT-TYPE         TRANSFER MODE        │
    ├────────────────────────────────────────────────────────────────────┤
    │  .html        HTML       text/html            text (line by line)  │
    │  .gif         GIF        image/gif            binary (chunks)      │
    │  .jpeg        JPEG       image/jpeg           binary (chunks)      │
    │  .mp3         MP3        audio/mpeg           binary (chunks)      │
    │  .pdf         PDF        application/pdf      binary (chunks)      │
    │  (anything)   UNKNOWN    text/plain           text (line by line)  │
    └────────────────────────────────────────────────────────────────────┘

The kind drives three decisions downstream:

    1. Which Content-Type header to emit
    2. Whether Accept-Ranges / Content-Disposition are emitted
    3. Whether the body is streamed as text lines or binary chunks

Extension matching is CASE-SENSITIVE: "photo.GIF" is UNKNOWN.

=============================================================================
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class MimeKind(Enum):
    """The recognized content categories."""

    HTML = "html"
    GIF = "gif"
    JPEG = "jpeg"
    MP3 = "mp3"
    PDF = "pdf"
    UNKNOWN = "unknown"


# =============================================================================
# REGISTRIES
# =============================================================================
#
# Built once at import time and exposed through read-only proxies.
# Nothing in the server mutates them after startup.
#
# =============================================================================

CONTENT_TYPES: Mapping[MimeKind, str] = MappingProxyType({
    MimeKind.HTML: "text/html",
    MimeKind.GIF: "image/gif",
    MimeKind.JPEG: "image/jpeg",
    MimeKind.MP3: "audio/mpeg",
    MimeKind.PDF: "application/pdf",
    MimeKind.UNKNOWN: "text/plain",
})

# Extension (without the dot) → kind
EXTENSIONS: Mapping[str, MimeKind] = MappingProxyType({
    kind.value: kind for kind in MimeKind if kind is not MimeKind.UNKNOWN
})

# Kinds streamed in fixed-size binary chunks
BINARY_KINDS = frozenset({MimeKind.GIF, MimeKind.JPEG, MimeKind.MP3, MimeKind.PDF})

# Kinds a browser should render inline with a filename hint
INLINE_DISPOSITION_KINDS = frozenset({MimeKind.PDF, MimeKind.MP3})


# =============================================================================
# PUBLIC FUNCTIONS
# =============================================================================

def split_extension(name: str) -> tuple[str, str]:
    """
    Split a file name on its LAST dot.

    Returns:
        (base, extension) - extension is "" when the name has no usable
        extension: no dot at all, a leading dot, or a trailing dot.

    Examples:
        >>> split_extension("song.mp3")
        ('song', 'mp3')

        >>> split_extension("archive.tar.gz")
        ('archive.tar', 'gz')

        >>> split_extension(".profile")
        ('.profile', '')

        >>> split_extension("README")
        ('README', '')
    """
    if "." not in name or name.startswith(".") or name.endswith("."):
        return name, ""

    base, _, extension = name.rpartition(".")
    return base, extension


def kind_for_name(name: str) -> MimeKind:
    """
    Determine the MimeKind of a requested file name.

    Examples:
        >>> kind_for_name("index.html")
        <MimeKind.HTML: 'html'>

        >>> kind_for_name("notes.xyz")
        <MimeKind.UNKNOWN: 'unknown'>

        >>> kind_for_name("INDEX.HTML")
        <MimeKind.UNKNOWN: 'unknown'>
    """
    _, extension = split_extension(name)
    return EXTENSIONS.get(extension, MimeKind.UNKNOWN)


def get_content_type(kind: MimeKind) -> str:
    """Get the Content-Type header value for a kind."""
    return CONTENT_TYPES[kind]


def is_binary(kind: MimeKind) -> bool:
    """
    Check whether a kind is transferred in binary mode.

    HTML and UNKNOWN are sent as text, everything else as raw chunks.
    """
    return kind in BINARY_KINDS
