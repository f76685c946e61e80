"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttpd import FileServer, ServerConfig
from minihttpd.handlers import ResourceResolver


INDEX_HTML = "<html><body>index</body></html>\n"
NOT_FOUND_HTML = "<html><body>not found</body></html>\n"
BAD_REQUEST_HTML = "<html><body>bad request</body></html>\n"


class ShortWriteChannel:
    """Channel that accepts at most `limit` bytes per write call."""

    def __init__(self, limit: int):
        self.limit = limit
        self.data = bytearray()

    def write(self, data: bytes) -> int:
        accepted = data[:self.limit]
        self.data += accepted
        return len(accepted)


class FailingChannel:
    """Channel whose writes fail after `ok_writes` successful calls."""

    def __init__(self, ok_writes: int = 0):
        self.ok_writes = ok_writes
        self.data = bytearray()

    def write(self, data: bytes) -> int:
        if self.ok_writes <= 0:
            raise BrokenPipeError("peer closed")
        self.ok_writes -= 1
        self.data += data
        return len(data)


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def doc_root(tmp_path: Path) -> Path:
    """A document root with the default and not-found documents."""
    (tmp_path / "index.html").write_text(INDEX_HTML)
    (tmp_path / "404.html").write_text(NOT_FOUND_HTML)
    (tmp_path / "400.html").write_text(BAD_REQUEST_HTML)
    return tmp_path


@pytest.fixture
def resolver(doc_root: Path) -> ResourceResolver:
    """Resolver with the default serve policy."""
    return ResourceResolver(
        root_dir=doc_root,
        default_document="index.html",
        not_found_document="404.html",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class RunningServer:
    """FileServer running in a background thread."""

    def __init__(self, server: FileServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.socket_server.server_address[1]

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.socket_server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes and read the response until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def running_server(doc_root: Path, free_port: int) -> Generator[RunningServer, None, None]:
    """A live server on an ephemeral port serving doc_root."""
    server = FileServer(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        root_dir=str(doc_root),
        timeout=5.0,
        log_level="WARNING",
    ))

    running = RunningServer(server)
    running.start()

    yield running

    running.stop()
