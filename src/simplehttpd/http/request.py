"""
=============================================================================
HTTP/1.0 REQUEST PARSING
=============================================================================

Turns the lines and bytes produced by a Connection into an HTTPRequest.

=============================================================================
HTTP/1.0 REQUEST FORMAT
=============================================================================

    POST /form HTTP/1.0\r\n           ← Request line: METHOD SP TARGET SP VERSION
    Content-Type: text/plain\r\n      ← Header: Name ":" value
    Content-Length: 7\r\n             ← Declares body size in bytes
    \r\n                              ← Empty line ends the headers
    foo=bar                           ← Body (POST only), exactly 7 bytes

What we deliberately do NOT do:

    - no query string or path decomposition (target stays raw)
    - no header name normalization (names are stored as received)
    - no multi-value headers (the last occurrence wins)
    - no continuation lines, no chunked bodies

=============================================================================
ERRORS
=============================================================================

Every parse failure raises a subclass of HTTPParseError. The status code
it carries describes the failure; whether that status is sent to the
client is decided by the connection handler (see ServerConfig.detailed_errors).

=============================================================================
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional


CONTENT_LENGTH = "Content-Length"

DEFAULT_MAX_BODY_SIZE = 10 * 1024 * 1024  # 10 MiB

_DIGITS = re.compile(r"[0-9]+")


class HTTPParseError(Exception):
    """
    Raised when an HTTP request cannot be parsed.

    Carries the HTTP status code that describes the failure:

        400 Bad Request                      - malformed request line or header
        413 Payload Too Large                - declared body above the limit
        431 Request Header Fields Too Large  - a line above the line limit
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class MalformedRequestError(HTTPParseError):
    """The request line is not exactly METHOD SP TARGET SP VERSION."""


class MalformedHeaderError(HTTPParseError):
    """A header line has no ':' or a header value cannot be interpreted."""


class LineTooLongError(HTTPParseError):
    def __init__(self, message: str):
        super().__init__(message, status_code=431)


class PayloadTooLargeError(HTTPParseError):
    def __init__(self, message: str):
        super().__init__(message, status_code=413)


class ClientDisconnectedError(ConnectionError):
    """The peer closed the stream before the expected data arrived."""


@dataclass
class HTTPRequest:
    """
    A parsed HTTP/1.0 request.

    Attributes:
        method:         Uppercased method token ("GET", "POST", ...)
        target:         Raw request target, exactly as sent
        version:        Protocol version token ("HTTP/1.0")
        headers:        Header name → value, names as received
        body:           POST body (b"" without Content-Length), None otherwise
        client_address: Peer address of the connection
    """

    method: str
    target: str
    version: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    client_address: tuple = ("", 0)


# =============================================================================
# LINE PARSERS
# =============================================================================

def parse_request_line(line: str) -> tuple[str, str, str]:
    """
    Split a request line into (method, target, version).

    The line is split on single spaces and must yield exactly three tokens.
    "GET  / HTTP/1.0" (two spaces) therefore yields four tokens and fails,
    just like "GET /" or "GET / HTTP/1.0 extra".

    Raises:
        MalformedRequestError: If the token count is not three.
    """
    tokens = line.split(" ")
    if len(tokens) != 3:
        raise MalformedRequestError(f"Invalid HTTP request line: {line!r}")

    method, target, version = tokens
    return method.upper(), target, version


def parse_header_line(line: str) -> tuple[str, str]:
    """
    Split a header line into (name, value).

    The split happens at the FIRST colon, so "Host: localhost:8080" keeps
    its port. Only leading spaces are removed from the value; tabs and
    trailing whitespace are kept verbatim.

    Raises:
        MalformedHeaderError: If the line contains no colon.
    """
    name, colon, value = line.partition(":")
    if not colon:
        raise MalformedHeaderError(f"Invalid HTTP header line: {line!r}")
    return name, value.lstrip(" ")


def parse_content_length(value: str) -> int:
    """
    Parse a Content-Length value as a non-negative decimal integer.

    Surrounding whitespace is tolerated; signs, decimal points and other
    characters are not.
    """
    value = value.strip()
    if not _DIGITS.fullmatch(value):
        raise MalformedHeaderError(f"Invalid Content-Length: {value!r}")
    return int(value)


# =============================================================================
# STREAM READERS
# =============================================================================

def read_headers(read_line: Callable[[], str]) -> Dict[str, str]:
    """
    Read header lines until the empty separator line.

    Args:
        read_line: Returns the next line without its line terminator.

    Returns:
        Header name → value, last occurrence winning.
    """
    headers: Dict[str, str] = {}
    while True:
        line = read_line()
        if line == "":
            return headers
        name, value = parse_header_line(line)
        headers[name] = value


def read_body(
    read_exact: Callable[[int], bytes],
    headers: Dict[str, str],
    max_body_size: int = DEFAULT_MAX_BODY_SIZE,
) -> bytes:
    """
    Read a POST body bounded by its Content-Length header.

    Without a Content-Length header the body is empty and nothing is read:
    HTTP/1.0 clients could otherwise make us wait for a close that never
    comes.

    Raises:
        MalformedHeaderError: Content-Length is not a non-negative integer.
        PayloadTooLargeError: Content-Length exceeds max_body_size. Raised
                              before any body byte is read.
        ClientDisconnectedError: The stream ended before the full body.
    """
    if CONTENT_LENGTH not in headers:
        return b""

    length = parse_content_length(headers[CONTENT_LENGTH])
    if length > max_body_size:
        raise PayloadTooLargeError(
            f"POST Content-Length({length}) exceeds limit of {max_body_size} bytes"
        )

    return read_exact(length)
