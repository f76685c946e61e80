"""
=============================================================================
MINIHTTPD - A Minimal HTTP File Server
=============================================================================

Serves files from a directory over HTTP, one connection at a time.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   raw request ──► RequestParser ──► ResourceResolver                │
    │                                          │                          │
    │                                          ▼                          │
    │   connection ◄── BodyTransmitter ◄── ResponseHeaderBuilder          │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Quick start:

    from minihttpd import FileServer, ServerConfig

    FileServer(ServerConfig(port=8080, root_dir="./public")).run()

Or from a shell:

    python -m minihttpd --port 8080 --root ./public

=============================================================================
"""

__version__ = "1.0.0"

from .server import FileServer
from .config import ServerConfig

__all__ = ["FileServer", "ServerConfig", "__version__"]
