"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on a status line:

    HTTP/1.0 200 OK
             ─── ──
              │   └── Reason phrase (informational, clients may ignore it)
              └────── Status code

200 is the only success the server sends. 404 is the generic failure
response, used both for "not found" and for requests that could not be
parsed. The remaining codes are only sent when the server is configured
for detailed errors or for rejecting unsupported methods.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """HTTP status codes used by the server."""

    # 2xx Success
    OK = 200

    # 4xx Client Errors
    BAD_REQUEST = 400
    NOT_FOUND = 404
    PAYLOAD_TOO_LARGE = 413
    REQUEST_HEADER_FIELDS_TOO_LARGE = 431

    # 5xx Server Errors
    NOT_IMPLEMENTED = 501

    @property
    def phrase(self) -> str:
        """Get the reason phrase for this status code."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @classmethod
    def from_code(cls, code: int, default: "HTTPStatus") -> "HTTPStatus":
        """Map an integer code to a member, falling back to `default`."""
        try:
            return cls(code)
        except ValueError:
            return default


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.REQUEST_HEADER_FIELDS_TOO_LARGE: "Request Header Fields Too Large",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
}
