"""
Unit tests for the demo application.
"""

import io
import logging

import pytest

from simplehttpd.handlers import DemoHandler
from simplehttpd.http import HTTPRequest, RequestContext, ResponseWriter


class Exchange:
    """A RequestContext writing into memory."""

    def __init__(self, method: str, target: str):
        self.sink = io.BytesIO()
        self.writer = ResponseWriter(self.sink)
        request = HTTPRequest(method, target, "HTTP/1.0", client_address=("127.0.0.1", 40000))
        self.context = RequestContext(request, self.writer)

    @property
    def head(self) -> bytes:
        return self.sink.getvalue().split(b"\r\n\r\n", 1)[0]

    @property
    def body(self) -> bytes:
        return self.sink.getvalue().split(b"\r\n\r\n", 1)[1]


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "Test.mp3"
    path.write_bytes(b"ID3\x03\x00" + bytes(range(256)) * 4)
    return path


class TestPage:

    def test_get_page(self):
        exchange = Exchange("GET", "/anything")
        DemoHandler().handle_get(exchange.context)

        assert exchange.head.startswith(b"HTTP/1.0 200 OK\r\nContent-Type: text/html")
        body = exchange.body.decode()
        assert body.startswith("<html><body><h1>test server</h1>\n")
        assert "Current Time: " in body
        assert "url : /anything\n" in body
        assert "<form method=post action=/form>" in body
        assert "<input type=text name=foo value=foovalue>" in body
        assert "<input type=submit name=bar value=barvalue>" in body
        assert body.endswith("</form>\n")

    def test_target_is_escaped(self):
        exchange = Exchange("GET", "/<script>")
        DemoHandler().handle_get(exchange.context)
        assert b"url : /&lt;script&gt;" in exchange.body

    def test_post_echoes_body(self):
        exchange = Exchange("POST", "/form")
        DemoHandler().handle_post(exchange.context, io.BytesIO(b"foo=foovalue&bar=barvalue"))

        body = exchange.body.decode()
        assert body.startswith("<html><body><h1>test server</h1>\n")
        assert "<a href=/test>return</a><p>" in body
        assert "postbody: <pre>foo=foovalue&amp;bar=barvalue</pre>" in body

    def test_post_empty_body(self):
        exchange = Exchange("POST", "/form")
        DemoHandler().handle_post(exchange.context, io.BytesIO(b""))
        assert b"postbody: <pre></pre>" in exchange.body


class TestAudio:

    def test_serves_audio_file(self, audio_file):
        exchange = Exchange("GET", "/Test.mp3")
        DemoHandler(audio_file=str(audio_file)).handle_get(exchange.context)

        assert exchange.head == (
            b"HTTP/1.0 200 OK\r\n"
            b"Content-Type: audio/mpeg\r\n"
            b"Connection: close"
        )
        assert exchange.body == audio_file.read_bytes()

    def test_other_targets_get_page(self, audio_file):
        exchange = Exchange("GET", "/test")
        DemoHandler(audio_file=str(audio_file)).handle_get(exchange.context)
        assert b"test server" in exchange.body

    def test_custom_audio_target(self, audio_file):
        exchange = Exchange("GET", "/song")
        DemoHandler(audio_file=str(audio_file), audio_target="/song").handle_get(exchange.context)
        assert exchange.body == audio_file.read_bytes()

    def test_missing_file_is_not_found(self, tmp_path, caplog):
        exchange = Exchange("GET", "/Test.mp3")
        with caplog.at_level(logging.WARNING, logger="simplehttpd.handlers.demo"):
            DemoHandler(audio_file=str(tmp_path / "missing.mp3")).handle_get(exchange.context)

        assert exchange.sink.getvalue() == b"HTTP/1.0 404 Not Found\r\nConnection: close\r\n\r\n"
        assert "Audio file not found" in caplog.text

    def test_missing_file_only_affects_audio_target(self, tmp_path):
        exchange = Exchange("GET", "/test")
        DemoHandler(audio_file=str(tmp_path / "missing.mp3")).handle_get(exchange.context)
        assert b"test server" in exchange.body

    def test_no_audio_configured(self):
        exchange = Exchange("GET", "/Test.mp3")
        DemoHandler().handle_get(exchange.context)
        assert b"test server" in exchange.body
