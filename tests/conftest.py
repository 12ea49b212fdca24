"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig


BUFFER_SIZE = 512


def pad(data: bytes, size: int = BUFFER_SIZE) -> bytes:
    """NUL-pad raw request bytes the way a connection read buffer does."""
    return data + b"\x00" * (size - len(data))


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample GET request as it sits in a read buffer."""
    return pad(
        b"GET /user-agent HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: curl/8.0\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample POST request with a single-line body."""
    return pad(
        b"POST /files/test.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello"
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # not a test class

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def connect(self) -> socket.socket:
        """Open a client socket to the running server."""
        sock = socket.create_connection(("127.0.0.1", self.port), timeout=5.0)
        return sock

    def request(self, raw: bytes) -> bytes:
        """Send one raw request on a fresh connection and return the response."""
        with self.connect() as sock:
            sock.sendall(raw)
            return recv_response(sock)


def recv_response(sock: socket.socket) -> bytes:
    """
    Read one response: head up to the blank line, then Content-Length bytes.

    Returns b"" if the server closed the connection without answering.
    """
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = sock.recv(4096)
        if not chunk:
            return data
        data += chunk

    head, _, body = data.partition(b"\r\n\r\n")
    length = 0
    for line in head.split(b"\r\n"):
        if line.lower().startswith(b"content-length:"):
            length = int(line.split(b":", 1)[1].strip())

    while len(body) < length:
        chunk = sock.recv(4096)
        if not chunk:
            break
        body += chunk

    return head + b"\r\n\r\n" + body


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """Empty directory used as the server's --directory."""
    directory = tmp_path / "files"
    directory.mkdir()
    return directory


@pytest.fixture
def test_server(files_dir: Path) -> Generator[TestServer, None, None]:
    """A live server on an OS-assigned port, serving files_dir."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=0,
        directory=str(files_dir),
        log_level="WARNING",
    ))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()
