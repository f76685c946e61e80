"""
=============================================================================
BODY TRANSMISSION
=============================================================================

Streams a resolved file to the connection and reports how many bytes
actually went out.

=============================================================================
TWO TRANSFER MODES
=============================================================================

    TEXT MODE (HTML, UNKNOWN)            BINARY MODE (GIF, JPEG, MP3, PDF)
    ─────────────────────────            ─────────────────────────────────
    open for text reading                open for binary reading
    for each line:                       size = fstat(file).st_size
        write the whole line             while read_total < size:
        before reading the next              read chunk_size bytes
                                             write the whole chunk

Text mode keeps the file byte-exact: newline translation is off and
undecodable bytes round-trip through surrogateescape.

Either way the file is opened in a `with` block, so it is closed on
success and on the first failure alike.

=============================================================================
"""

import logging
import os
from pathlib import Path
from typing import Union, TYPE_CHECKING

from ..errors import TransmissionError
from ..http.response import write_fully

if TYPE_CHECKING:
    from .static import ResolvedResource


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096

# Text files are decoded and re-encoded with the same codec
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


class BodyTransmitter:
    """
    Sends file bodies over a channel.

    A channel is anything with write(bytes) -> int: a Connection, a file
    opened "wb", io.BytesIO in tests.

    Usage:
        transmitter = BodyTransmitter(chunk_size=4096)
        sent = transmitter.transmit(conn, "/var/www/cat.gif", binary=True)
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
        self.chunk_size = chunk_size

    def transmit_resource(self, channel, resource: "ResolvedResource") -> int:
        """
        Send the body of a resolved resource.

        Returns 0 without touching the channel when the resource has no body.
        """
        if resource.file_path is None:
            return 0
        return self.transmit(channel, resource.file_path, binary=resource.is_binary)

    def transmit(self, channel, file_path: Union[str, Path], binary: bool) -> int:
        """
        Send a whole file.

        Args:
            channel: Destination with write(bytes) -> int.
            file_path: File to send.
            binary: Chunked binary mode if True, line-by-line text mode if False.

        Returns:
            Bytes written to the channel.

        Raises:
            TransmissionError: If the file cannot be opened or read, or a
                               write fails or comes up short.
        """
        if binary:
            sent = self._send_binary(channel, file_path)
        else:
            sent = self._send_text(channel, file_path)

        logger.debug(f"Sent {sent} bytes from {file_path}")
        return sent

    def _send_text(self, channel, file_path: Union[str, Path]) -> int:
        sent = 0
        try:
            with open(file_path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS, newline="") as f:
                for line in f:
                    sent += write_fully(channel, line.encode(TEXT_ENCODING, TEXT_ERRORS))
        except TransmissionError:
            raise
        except OSError as e:
            raise TransmissionError(f"Cannot read {file_path}: {e}") from e
        return sent

    def _send_binary(self, channel, file_path: Union[str, Path]) -> int:
        sent = 0
        read_total = 0
        try:
            with open(file_path, "rb") as f:
                size = os.fstat(f.fileno()).st_size

                while read_total < size:
                    chunk = f.read(min(self.chunk_size, size - read_total))
                    if not chunk:
                        raise TransmissionError(
                            f"{file_path} ended after {read_total} of {size} bytes"
                        )
                    read_total += len(chunk)
                    sent += write_fully(channel, chunk)
        except TransmissionError:
            raise
        except OSError as e:
            raise TransmissionError(f"Cannot read {file_path}: {e}") from e
        return sent
