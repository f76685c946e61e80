"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Creates the listening socket and hands each accepted connection to a
callback, one at a time.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Sequential Accept Loop                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   socket() → bind() → listen(backlog)                               │
    │        │                                                            │
    │        ▼                                                            │
    │   ┌──────────────────────────┐                                      │
    │   │ until stopped:           │                                      │
    │   │   accept()  (1s poll)    │                                      │
    │   │   handler(conn)          │ ← runs to completion before the      │
    │   └──────────────────────────┘   next connection is accepted        │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

No threads, no overlap between connections. A stalled client stalls the
whole server.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

ConnectionHandler = Callable[[Connection], None]

# accept() timeout; bounds how long shutdown() waits to be noticed
ACCEPT_POLL_SECONDS = 1.0

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SocketServer:
    """
    Listening socket plus a sequential accept loop.

    Usage:
        def handle_connection(conn: Connection):
            with conn:
                ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._listener: Optional[socket.socket] = None
        self._ready = threading.Event()
        self._stopping = threading.Event()
        self._saved_handlers: dict = {}

    @property
    def server_address(self) -> Tuple[str, int]:
        """
        The bound (host, port).

        While listening this reports the real port, which matters when the
        configured port is 0.
        """
        if self._listener is not None:
            return self._listener.getsockname()[:2]
        return (self.config.host, self.config.port)

    # ─── Lifecycle ──────────────────────────────────────────────────────────

    def start(self, handler: ConnectionHandler):
        """
        Bind, listen and serve connections until shutdown() is called.

        Args:
            handler: Called with each accepted Connection. It owns the
                     connection and must close it.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._listener = self._bind()
        self._stopping.clear()
        self._install_signal_handlers()

        host, port = self.server_address
        logger.info(f"Listening on {host}:{port} (backlog {self.config.backlog})")
        self._ready.set()

        try:
            while not self._stopping.is_set():
                conn = self._accept()
                if conn is not None:
                    handler(conn)
        finally:
            self._close_listener()

    def shutdown(self):
        """Stop accepting. Safe to call from signal handlers and other threads."""
        if not self._stopping.is_set():
            logger.info("Shutting down socket server...")
        self._stopping.set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._ready.wait(timeout)

    # ─── Socket plumbing ────────────────────────────────────────────────────

    def _bind(self) -> socket.socket:
        """
        Create, bind and listen.

        SO_REUSEADDR lets a restarted server bind while the old socket is
        still in TIME_WAIT.
        """
        address = (self.config.host, self.config.port)
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.settimeout(ACCEPT_POLL_SECONDS)

        try:
            listener.bind(address)
            listener.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Cannot listen on {address[0]}:{address[1]}: {e}")
            listener.close()
            raise

        return listener

    def _accept(self) -> Optional[Connection]:
        """Wait one poll tick for a client. None on timeout or when stopping."""
        try:
            client_socket, client_address = self._listener.accept()
        except socket.timeout:
            return None
        except OSError as e:
            if not self._stopping.is_set():
                logger.error(f"Accept failed: {e}")
            self._stopping.set()
            return None

        logger.debug(f"Accepted {client_address[0]}:{client_address[1]}")
        return Connection(
            socket=client_socket,
            address=client_address,
            buffer_size=self.config.buffer_size,
            timeout=self.config.timeout,
        )

    def _close_listener(self):
        self._restore_signal_handlers()
        self._ready.clear()
        if self._listener is not None:
            self._listener.close()
            self._listener = None
        logger.info("Socket server stopped")

    # ─── Signals ────────────────────────────────────────────────────────────

    def _install_signal_handlers(self):
        """
        Route SIGINT and SIGTERM to shutdown().

        Handlers can only be installed from the main thread; a server
        running in a background thread is stopped with shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in SHUTDOWN_SIGNALS:
            self._saved_handlers[signum] = signal.signal(signum, self._on_signal)

    def _on_signal(self, signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}")
        self.shutdown()

    def _restore_signal_handlers(self):
        for signum, previous in self._saved_handlers.items():
            signal.signal(signum, previous)
        self._saved_handlers.clear()
