"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

    request.py       Request line / header / body parsing and parse errors
    response.py      ResponseWriter: status line, headers, raw body
    context.py       RequestContext handed to application handlers
    status_codes.py  HTTPStatus enum with reason phrases
    mime_types.py    File extension → Content-Type

=============================================================================
"""

from .request import (
    HTTPRequest,
    HTTPParseError,
    MalformedRequestError,
    MalformedHeaderError,
    LineTooLongError,
    PayloadTooLargeError,
    ClientDisconnectedError,
    parse_request_line,
    parse_header_line,
    parse_content_length,
    read_headers,
    read_body,
)
from .response import ResponseWriter, ResponseStateError
from .context import RequestContext
from .status_codes import HTTPStatus
from .mime_types import get_mime_type

__all__ = [
    # Request parsing
    "HTTPRequest",
    "parse_request_line",
    "parse_header_line",
    "parse_content_length",
    "read_headers",
    "read_body",

    # Errors
    "HTTPParseError",
    "MalformedRequestError",
    "MalformedHeaderError",
    "LineTooLongError",
    "PayloadTooLargeError",
    "ClientDisconnectedError",
    "ResponseStateError",

    # Response writing
    "ResponseWriter",
    "RequestContext",

    # Status codes
    "HTTPStatus",

    # MIME types
    "get_mime_type",
]
