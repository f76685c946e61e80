"""
=============================================================================
RESPONSE HEADERS
=============================================================================

Renders the status line and header block that precede the body.

=============================================================================
HEADER BLOCK BY KIND
=============================================================================

    HTML / GIF / JPEG:              PDF / MP3:
    ──────────────────              ──────────
    HTTP/1.1 200 OK\\n               HTTP/1.1 200 OK\\n
    Content-Type: image/gif\\n       Content-Type: application/pdf\\n
    Accept-Ranges: bytes\\n          Accept-Ranges: bytes\\n
    \\n                              Content-Disposition: inline; filename="a.pdf"\\n
                                    \\n
    UNKNOWN:
    ────────
    HTTP/1.1 200 OK\\n
    Content-Type: text/plain\\n
    \\n

A 301 additionally carries "Location: /<default document>" right after
the status line.

Lines end with a bare LF. The request's own version string is echoed in
the status line.

=============================================================================
"""

from typing import List, TYPE_CHECKING

from ..errors import TransmissionError
from .mime_types import MimeKind, INLINE_DISPOSITION_KINDS, get_content_type
from .status_codes import HTTPStatus, reason_phrase

if TYPE_CHECKING:
    from ..handlers.static import ResolvedResource


LINE_END = "\n"

# Used when the request line never parsed far enough to yield a version
DEFAULT_VERSION = "HTTP/1.1"


def status_line(version: str, code: int) -> str:
    """
    Build "<version> <code> <reason>".

    Raises:
        ValueError: For codes outside the supported set.
    """
    return f"{version} {int(code)} {reason_phrase(code)}"


class ResponseHeaderBuilder:
    """
    Builds and writes the header block for a ResolvedResource.

    Usage:
        builder = ResponseHeaderBuilder()
        builder.lines("HTTP/1.1", resource)
        # ['HTTP/1.1 200 OK', 'Content-Type: text/html',
        #  'Accept-Ranges: bytes', '']

        sent = builder.write(conn, "HTTP/1.1", resource)
    """

    def lines(self, version: str, resource: "ResolvedResource") -> List[str]:
        """
        Produce the header lines in send order, ending with the blank line.
        """
        lines = [status_line(version, resource.status)]

        if resource.status == HTTPStatus.MOVED_PERMANENTLY:
            lines.append(f"Location: {resource.location}")

        lines.append(f"Content-Type: {get_content_type(resource.mime_kind)}")

        if resource.mime_kind is not MimeKind.UNKNOWN:
            lines.append("Accept-Ranges: bytes")

            if resource.mime_kind in INLINE_DISPOSITION_KINDS:
                filename = resource.file_path.name if resource.file_path else ""
                lines.append(f'Content-Disposition: inline; filename="{filename}"')

        lines.append("")  # Blank line ends the header block
        return lines

    def build(self, version: str, resource: "ResolvedResource") -> bytes:
        """Render the whole header block as bytes."""
        return "".join(line + LINE_END for line in self.lines(version, resource)).encode("utf-8")

    def write(self, channel, version: str, resource: "ResolvedResource") -> int:
        """
        Write the header block to a channel one line at a time.

        Args:
            channel: Anything with write(bytes) -> int (a Connection,
                     a file opened "wb", io.BytesIO...).

        Returns:
            Total bytes written.

        Raises:
            TransmissionError: On a write error or a short write.
        """
        sent = 0
        for line in self.lines(version, resource):
            sent += write_fully(channel, (line + LINE_END).encode("utf-8"))
        return sent


def write_fully(channel, data: bytes) -> int:
    """
    Write data to a channel and insist that all of it went out.

    Returns:
        len(data)

    Raises:
        TransmissionError: If the channel raised or accepted fewer bytes.
    """
    try:
        written = channel.write(data)
    except TransmissionError:
        raise
    except OSError as e:
        raise TransmissionError(f"Write failed: {e}") from e

    if written is None or written < len(data):
        raise TransmissionError(f"Short write: {written} of {len(data)} bytes")
    return written
