"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the server needs to know, in one dataclass.

    NETWORK         host, port, backlog, buffer_size, timeout
    DOCUMENTS       root_dir, default_document, not_found_document,
                    bad_request_document, root_policy
    PROTOCOL        strict_headers, chunk_size
    LOGGING         log_level, log_format

Three ways to build one:

    ServerConfig(port=8080, root_dir="./public")    # in code
    ServerConfig.from_env()                          # MINIHTTPD_* variables
    python -m minihttpd --port 8080 --root ./public  # command line

Whatever the source, validate() runs before any socket is created.

=============================================================================
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


ROOT_POLICIES = ("serve", "redirect")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")

MAX_PORT = 65535
FIRST_UNPRIVILEGED_PORT = 1024


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    Development:
        ServerConfig(port=8080, root_dir="./public", log_level="DEBUG")

    Behind a process supervisor:
        ServerConfig(host="0.0.0.0", port=80, allow_privileged_ports=True)
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """The IP address to bind to. "0.0.0.0" listens on all interfaces."""

    port: int = 8080
    """
    The port number to listen on.
    0 asks the OS for a free ephemeral port (handy in tests).
    1-1023 are refused unless allow_privileged_ports is set.
    """

    backlog: int = 5
    """Maximum number of connections queued while one is being served."""

    buffer_size: int = 8192
    """Size of the single read that must hold the whole request."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = fully blocking: a stalled client stalls the server.
    """

    allow_privileged_ports: bool = False
    """Permit ports in the well-known range (1-1023)."""

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENTS
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "."
    """Directory that request paths are resolved against."""

    default_document: str = "index.html"
    """Served for "/". Relative to root_dir unless absolute."""

    not_found_document: str = "404.html"
    """Served with 404 when the requested file is missing."""

    bad_request_document: Optional[str] = None
    """Optional HTML body for 400 responses. None = empty body."""

    root_policy: str = "serve"
    """
    How "/" is answered:
    - "serve"    - 200 with the default document
    - "redirect" - 301 with Location: /<default document>
    """

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL
    # ─────────────────────────────────────────────────────────────────────

    strict_headers: bool = True
    """
    A header line without a colon:
    - True  - rejects the request with 400
    - False - is skipped, parsing continues
    """

    chunk_size: int = 4096
    """Chunk size for binary file bodies."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (one readable line) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        MINIHTTPD_HOST                Bind address (default: 127.0.0.1)
        MINIHTTPD_PORT                Port (default: 8080)
        MINIHTTPD_ROOT                Document root (default: .)
        MINIHTTPD_DEFAULT_DOCUMENT    Default document (default: index.html)
        MINIHTTPD_NOT_FOUND_DOCUMENT  Not-found document (default: 404.html)
        MINIHTTPD_ROOT_POLICY         serve | redirect (default: serve)
        MINIHTTPD_LOG_LEVEL           Logging level (default: INFO)

        Example:
            MINIHTTPD_PORT=3000 MINIHTTPD_ROOT=./public python -m minihttpd
        """
        return cls(
            host=os.getenv("MINIHTTPD_HOST", "127.0.0.1"),
            port=int(os.getenv("MINIHTTPD_PORT", "8080")),
            root_dir=os.getenv("MINIHTTPD_ROOT", "."),
            default_document=os.getenv("MINIHTTPD_DEFAULT_DOCUMENT", "index.html"),
            not_found_document=os.getenv("MINIHTTPD_NOT_FOUND_DOCUMENT", "404.html"),
            root_policy=os.getenv("MINIHTTPD_ROOT_POLICY", "serve"),
            log_level=os.getenv("MINIHTTPD_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails immediately rather than on
        the first request.

        Raises:
            ValueError: Describing the first invalid value found.
        """
        if not 0 <= self.port <= MAX_PORT:
            raise ValueError(f"{self.port} is not a valid port. Must be 0-{MAX_PORT}.")

        if 0 < self.port < FIRST_UNPRIVILEGED_PORT and not self.allow_privileged_ports:
            raise ValueError(
                f"{self.port} is in the well-known port range (1-1023). "
                "Pass allow_privileged_ports to use it."
            )

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.root_policy not in ROOT_POLICIES:
            raise ValueError(
                f"Unknown root policy: {self.root_policy!r}. Use one of {ROOT_POLICIES}."
            )

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level!r}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {self.log_format!r}")

        if not Path(self.root_dir).is_dir():
            raise ValueError(f"Document root is not a directory: {self.root_dir}")
