"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket as a readable/writable byte channel.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    One Connection, One Request                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   accept() ──► Connection ──► read_request()   one recv() call      │
    │                    │                                                │
    │                    ├──────► write(data)        sendall(), repeated  │
    │                    │                           for every header     │
    │                    │                           line and body chunk  │
    │                    │                                                │
    │                    └──────► close()            FIN, drain, close    │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

There is no keep-alive: after one response the connection is closed.

The whole request is expected in a single read. Requests larger than
buffer_size are truncated to the first buffer_size bytes.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..errors import TransmissionError


logger = logging.getLogger(__name__)

# Bounds on how long and how much close() reads from the client
DRAIN_TIMEOUT = 0.5
DRAIN_MAX_BYTES = 64 * 1024


def _short_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class Connection:
    """
    One accepted client.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        buffer_size: Size of the single request read.
        timeout: Socket timeout in seconds, None for fully blocking I/O.
        id: Short identifier used in log lines.
        bytes_sent: Total bytes written so far.
    """

    socket: socket.socket
    address: Tuple[str, int]
    buffer_size: int = 8192
    timeout: Optional[float] = None

    id: str = field(default_factory=_short_id)
    bytes_sent: int = 0
    closed: bool = False

    def __post_init__(self):
        # Accepted sockets inherit the listener's poll timeout
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with a single recv() call.

        Returns:
            The request bytes, or None if the peer closed without sending
            anything.

        Raises:
            TransmissionError: If the socket read fails.
        """
        try:
            data = self.socket.recv(self.buffer_size)
        except OSError as e:
            raise TransmissionError(f"Read failed: {e}") from e

        if not data:
            logger.debug(f"[{self.id}] Peer closed before sending a request")
            return None
        return data

    def write(self, data: bytes) -> int:
        """
        Send bytes to the client.

        sendall() either sends everything or raises, so a successful call
        always returns len(data).

        Raises:
            TransmissionError: If the peer went away or the socket failed.
        """
        try:
            self.socket.sendall(data)
        except OSError as e:
            raise TransmissionError(f"Send failed: {e}") from e

        self.bytes_sent += len(data)
        return len(data)

    def close(self):
        """
        Half-close, drain, then release the socket. Idempotent.

        Sending FIN first and draining briefly keeps the kernel from
        answering unread request bytes with a RST that would discard the
        response still in flight.
        """
        if self.closed:
            return
        self.closed = True

        try:
            self.socket.shutdown(socket.SHUT_WR)
            self._drain()
        except OSError as e:
            logger.debug(f"[{self.id}] Close handshake cut short: {e}")
        finally:
            self.socket.close()

        logger.debug(f"[{self.id}] Closed after sending {self.bytes_sent} bytes")

    def _drain(self):
        """Discard client leftovers until EOF, the deadline or the byte cap."""
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0
        while drained < DRAIN_MAX_BYTES:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            self.socket.settimeout(remaining)
            chunk = self.socket.recv(4096)
            if not chunk:
                return
            drained += len(chunk)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
