"""
pytest configuration and fixtures.
"""

import socket
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplehttpd import HTTPServer, ServerConfig
from simplehttpd.core import Connection
from simplehttpd.handlers import RequestHandler


class RecordingHandler(RequestHandler):
    """Test application that records every call and answers with a short body."""

    def __init__(self):
        self.calls = []

    def handle_get(self, context):
        self.calls.append(("GET", context.target, None, dict(context.headers)))
        context.write_success()
        context.write(f"hello from {context.target}")

    def handle_post(self, context, body):
        data = body.read()
        self.calls.append(("POST", context.target, data, dict(context.headers)))
        context.write_success("text/plain")
        context.write(b"echo: " + data)


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes, half-close, and return everything until the server closes."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(data)
        s.shutdown(socket.SHUT_WR)
        return recv_all(s)


def recv_all(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP/1.0 GET request."""
    return (
        b"GET /hello HTTP/1.0\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP/1.0 POST request with a form body."""
    body = b"foo=bar"
    head = (
        "POST /form HTTP/1.0\r\n"
        "Content-Type: application/x-www-form-urlencoded\r\n"
        f"Content-Length: {len(body)}\r\n"
        "\r\n"
    )
    return head.encode() + body


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def socket_pair() -> Generator[tuple[socket.socket, socket.socket], None, None]:
    """A connected (server side, client side) socket pair."""
    server_side, client_side = socket.socketpair()
    client_side.settimeout(5.0)
    yield server_side, client_side
    server_side.close()
    client_side.close()


@pytest.fixture
def make_connection(socket_pair):
    """Build a Connection over the server side of `socket_pair`."""
    server_side, _ = socket_pair

    def factory(**kwargs) -> Connection:
        kwargs.setdefault("timeout", 5.0)
        return Connection(socket=server_side, address=("127.0.0.1", 50000), **kwargs)

    return factory


@pytest.fixture
def client(socket_pair) -> socket.socket:
    """The client side of `socket_pair`."""
    return socket_pair[1]


@pytest.fixture
def recording_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def test_server(recording_handler) -> Generator[HTTPServer, None, None]:
    """A server on an OS-assigned port, running in a background thread."""
    server = HTTPServer(recording_handler, ServerConfig(
        host="127.0.0.1",
        port=0,
        poll_interval=0.1,
        read_timeout=5.0,
        log_level="WARNING",
    ))
    server.start()

    yield server

    server.shutdown(timeout=5.0)


@pytest.fixture
def send(test_server):
    """Send raw request bytes to `test_server` and return the raw response."""
    port = test_server.server_address[1]
    return lambda data: send_raw(port, data)


@pytest.fixture
def read_all():
    """Read a socket until the peer closes it."""
    return recv_all


@pytest.fixture
def send_to():
    """Send raw request bytes to any local port and return the raw response."""
    return send_raw
