"""
Unit tests for HTTP request parsing.
"""

from unittest.mock import Mock

import pytest

from simplehttpd.http.request import (
    HTTPRequest,
    HTTPParseError,
    MalformedRequestError,
    MalformedHeaderError,
    PayloadTooLargeError,
    ClientDisconnectedError,
    parse_request_line,
    parse_header_line,
    parse_content_length,
    read_headers,
    read_body,
)


def line_source(*lines):
    """Return a read_line callable that yields `lines` in order."""
    return iter(lines).__next__


class TestRequestLine:
    """Tests for parse_request_line."""

    def test_parse_simple_get(self):
        assert parse_request_line("GET /hello HTTP/1.0") == ("GET", "/hello", "HTTP/1.0")

    def test_method_is_uppercased(self):
        method, target, version = parse_request_line("post /form HTTP/1.0")
        assert method == "POST"
        assert target == "/form"

    def test_target_is_kept_raw(self):
        _, target, _ = parse_request_line("GET /search?q=a%20b&x=1 HTTP/1.0")
        assert target == "/search?q=a%20b&x=1"

    def test_version_is_not_validated(self):
        assert parse_request_line("GET / whatever")[2] == "whatever"

    @pytest.mark.parametrize("line", [
        "",
        "BADREQUEST",
        "GET /",
        "GET / HTTP/1.0 extra",
        "GET  / HTTP/1.0",
        "GET / HTTP/1.0 ",
    ])
    def test_wrong_token_count_is_rejected(self, line):
        with pytest.raises(MalformedRequestError):
            parse_request_line(line)

    def test_malformed_request_is_a_parse_error(self):
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request_line("GET")
        assert exc_info.value.status_code == 400


class TestHeaderLine:
    """Tests for parse_header_line."""

    def test_simple_header(self):
        assert parse_header_line("Content-Type: text/html") == ("Content-Type", "text/html")

    def test_split_at_first_colon(self):
        assert parse_header_line("Host: localhost:8080") == ("Host", "localhost:8080")

    def test_only_leading_spaces_are_stripped(self):
        assert parse_header_line("X-Pad:   value  ") == ("X-Pad", "value  ")

    def test_tabs_are_kept(self):
        assert parse_header_line("X-Tab:\tvalue") == ("X-Tab", "\tvalue")

    def test_empty_value(self):
        assert parse_header_line("X-Empty:") == ("X-Empty", "")

    def test_name_case_is_preserved(self):
        assert parse_header_line("content-LENGTH: 5")[0] == "content-LENGTH"

    def test_missing_colon_is_rejected(self):
        with pytest.raises(MalformedHeaderError):
            parse_header_line("NoColonHere")


class TestReadHeaders:
    """Tests for read_headers."""

    def test_reads_until_empty_line(self):
        read_line = line_source("Host: example", "Accept: */*", "", "not reached")
        headers = read_headers(read_line)
        assert headers == {"Host": "example", "Accept": "*/*"}

    def test_no_headers(self):
        assert read_headers(line_source("")) == {}

    def test_last_value_wins(self):
        headers = read_headers(line_source("X: 1", "X: 2", ""))
        assert headers == {"X": "2"}

    def test_names_are_case_sensitive(self):
        headers = read_headers(line_source("X-Key: a", "x-key: b", ""))
        assert headers == {"X-Key": "a", "x-key": "b"}

    def test_bad_line_fails(self):
        with pytest.raises(MalformedHeaderError):
            read_headers(line_source("Host: ok", "garbage", ""))


class TestContentLength:
    """Tests for parse_content_length and read_body."""

    @pytest.mark.parametrize("value, expected", [
        ("0", 0),
        ("5", 5),
        ("5  ", 5),
        ("10485760", 10485760),
    ])
    def test_valid_values(self, value, expected):
        assert parse_content_length(value) == expected

    @pytest.mark.parametrize("value", ["", "-1", "+5", "5.0", "abc", "0x10"])
    def test_invalid_values(self, value):
        with pytest.raises(MalformedHeaderError):
            parse_content_length(value)

    def test_body_read_exactly(self):
        read_exact = Mock(return_value=b"hello")
        body = read_body(read_exact, {"Content-Length": "5"})
        assert body == b"hello"
        read_exact.assert_called_once_with(5)

    def test_no_content_length_means_empty_body(self):
        read_exact = Mock()
        assert read_body(read_exact, {}) == b""
        read_exact.assert_not_called()

    def test_lowercase_header_is_not_content_length(self):
        read_exact = Mock()
        assert read_body(read_exact, {"content-length": "5"}) == b""
        read_exact.assert_not_called()

    def test_too_large_fails_before_reading(self):
        read_exact = Mock()
        with pytest.raises(PayloadTooLargeError) as exc_info:
            read_body(read_exact, {"Content-Length": "20000000"})
        assert exc_info.value.status_code == 413
        read_exact.assert_not_called()

    def test_limit_is_inclusive(self):
        read_exact = Mock(return_value=b"abcd")
        assert read_body(read_exact, {"Content-Length": "4"}, max_body_size=4) == b"abcd"

    def test_disconnect_propagates(self):
        read_exact = Mock(side_effect=ClientDisconnectedError("gone"))
        with pytest.raises(ClientDisconnectedError):
            read_body(read_exact, {"Content-Length": "10"})


class TestHTTPRequest:
    """Tests for the HTTPRequest dataclass."""

    def test_defaults(self):
        request = HTTPRequest("GET", "/", "HTTP/1.0")
        assert request.headers == {}
        assert request.body is None
        assert request.client_address == ("", 0)
