"""
=============================================================================
FILE SERVER
=============================================================================

Ties the pieces together. For every accepted connection:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   Connection.read_request()          raw bytes (one read)           │
    │        │                                                            │
    │        ▼                                                            │
    │   RequestParser.parse()              IncomingRequest                │
    │        │   MalformedRequest ─────┐                                  │
    │        ▼                         │                                  │
    │   ResourceResolver.resolve()     │   ResolvedResource               │
    │        │   UnsupportedMethod ────┤                                  │
    │        │                         ▼                                  │
    │        │                  resolver.bad_request()   (400)            │
    │        ▼                         │                                  │
    │   ResponseHeaderBuilder.write() ◄┘   status line + headers          │
    │        │                                                            │
    │        ▼                                                            │
    │   BodyTransmitter.transmit_resource()  file bytes                   │
    │        │                                                            │
    │        ▼                                                            │
    │   Connection.close()                                                │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

A bad request costs one 400 response. A TransmissionError costs one
connection. Neither stops the server.

=============================================================================
"""

import logging
import time
from typing import Optional, Union

from .access_log import RequestLog, log_request, setup_logging
from .config import ServerConfig
from .core import SocketServer, Connection
from .errors import HTTPError, TransmissionError
from .handlers import ResourceResolver, RootPolicy, BodyTransmitter
from .http import RequestParser, ResponseHeaderBuilder, DEFAULT_VERSION


logger = logging.getLogger(__name__)


class FileServer:
    """
    Single-connection-at-a-time HTTP file server.

    Usage:
        server = FileServer(ServerConfig(port=8080, root_dir="./public"))
        server.run()   # Blocks until Ctrl+C / SIGTERM

    Or drive the pipeline without sockets:
        with open("response.bin", "wb") as out:
            server.handle_request(b"GET /index.html HTTP/1.1\\r\\n\\r\\n", out)
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults serve the current directory.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(strict_headers=self.config.strict_headers)
        self._resolver = ResourceResolver(
            root_dir=self.config.root_dir,
            default_document=self.config.default_document,
            not_found_document=self.config.not_found_document,
            root_policy=RootPolicy(self.config.root_policy),
            bad_request_document=self.config.bad_request_document,
        )
        self._headers = ResponseHeaderBuilder()
        self._transmitter = BodyTransmitter(chunk_size=self.config.chunk_size)

    @property
    def socket_server(self) -> SocketServer:
        return self._socket_server

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, configure_logging: bool = True):
        """
        Start serving (blocking).

        Args:
            configure_logging: Call setup_logging() with the configured level.
                               Pass False when the host application owns
                               logging configuration.
        """
        if configure_logging:
            setup_logging(self.config.log_level)

        logger.info(
            f"Serving {self._resolver.root_dir} on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Ask the accept loop to stop after the current connection."""
        self._socket_server.shutdown()

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection, then close it.

        Failures are logged here, as the owner of the connection, and end
        only this connection.
        """
        with conn:
            try:
                raw = conn.read_request()
                if raw is None:
                    return
                self.handle_request(raw, conn, client_ip=conn.client_ip, connection_id=conn.id)
            except TransmissionError as e:
                logger.error(f"[{conn.id}] Transmission failed for {conn.client_ip}: {e}")
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")

    def handle_request(
        self,
        raw: Union[bytes, str],
        channel,
        client_ip: str = "-",
        connection_id: str = "-",
    ) -> RequestLog:
        """
        Run the full pipeline for one request buffer.

        Args:
            raw: The request bytes.
            channel: Destination with write(bytes) -> int.
            client_ip: For the access log.
            connection_id: For the access log.

        Returns:
            The access log entry for the exchange (also emitted).

        Raises:
            TransmissionError: If writing headers or body fails.
        """
        start_time = time.time()
        method, path, version = "-", "-", DEFAULT_VERSION

        try:
            request = self._parser.parse(raw)
            method, path, version = request.method, request.path, request.version
            resource = self._resolver.resolve(request)
        except HTTPError as e:
            logger.warning(f"[{connection_id}] Bad request from {client_ip}: {e}")
            resource = self._resolver.bad_request()

        header_bytes = self._headers.write(channel, version, resource)
        body_bytes = self._transmitter.transmit_resource(channel, resource)

        entry = RequestLog(
            connection_id=connection_id,
            client_ip=client_ip,
            method=method,
            path=path,
            version=version,
            status_code=int(resource.status),
            header_bytes=header_bytes,
            body_bytes=body_bytes,
            duration_ms=(time.time() - start_time) * 1000,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )
        log_request(entry, self.config.log_format)
        return entry
