"""
=============================================================================
HTTP/1.0 RESPONSE WRITING
=============================================================================

Responses are not built in memory and serialized at the end. The
application writes them straight onto the connection, in order:

    HTTP/1.0 200 OK\r\n               ← write_success() / write_failure()
    Content-Type: text/html\r\n
    Connection: close\r\n
    \r\n                              ← end of headers
    <html>...                         ← write(), write_line(), write_file()

There is no Content-Length: the end of the body is the end of the
connection ("Connection: close"), which is valid HTTP/1.0 framing.

=============================================================================
THE ONE-STATUS-LINE RULE
=============================================================================

A connection carries exactly one response, so exactly one status line may
be written, and it must come before any body byte. ResponseWriter checks
both and raises ResponseStateError when a handler breaks the rule.

=============================================================================
"""

import shutil
from typing import BinaryIO, Dict, Optional, Union

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.0"
DEFAULT_CONTENT_TYPE = "text/html"
CRLF = "\r\n"
HEAD_ENCODING = "iso-8859-1"


class ResponseStateError(RuntimeError):
    """The response was written out of order."""


class ResponseWriter:
    """
    Writes one HTTP/1.0 response onto a connection.

    Args:
        connection: Anything with write(bytes), normally a
                    core.connection.Connection.
    """

    def __init__(self, connection):
        self._connection = connection
        self._status: Optional[HTTPStatus] = None
        self._bytes_written = 0

    @property
    def status(self) -> Optional[HTTPStatus]:
        """The status that was written, or None if nothing was written yet."""
        return self._status

    @property
    def status_written(self) -> bool:
        return self._status is not None

    @property
    def bytes_written(self) -> int:
        """Number of body bytes written (status line and headers excluded)."""
        return self._bytes_written

    # =========================================================================
    # STATUS LINE + HEADERS
    # =========================================================================

    def write_success(
        self,
        content_type: str = DEFAULT_CONTENT_TYPE,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Write a 200 OK status line and headers.

        Args:
            content_type: Value of the Content-Type header.
            headers: Extra headers, written after Content-Type.
        """
        head = {"Content-Type": content_type}
        if headers:
            head.update(headers)
        self._write_head(HTTPStatus.OK, head)

    def write_failure(self, status: HTTPStatus = HTTPStatus.NOT_FOUND) -> None:
        """
        Write a failure status line and headers, with no body.

        The default 404 is the server's generic failure response: it is
        used for unknown resources and for requests that could not be
        processed alike.
        """
        self._write_head(status, {})

    def _write_head(self, status: HTTPStatus, headers: Dict[str, str]) -> None:
        if self._status is not None:
            raise ResponseStateError(
                f"Status line already written ({int(self._status)}), "
                f"refusing to write {int(status)}"
            )

        lines = [f"{HTTP_VERSION} {int(status)} {status.phrase}"]
        for name, value in headers.items():
            lines.append(f"{name}: {value}")
        lines.append("Connection: close")
        lines.append("")  # Empty line separates headers from body

        # An unencodable header leaves the writer untouched, so a failure
        # response can still follow.
        head = CRLF.join(lines).encode(HEAD_ENCODING) + CRLF.encode()
        self._connection.write(head)
        self._status = status

    # =========================================================================
    # BODY
    # =========================================================================

    def write(self, data: Union[str, bytes]) -> None:
        """Write body content. Strings are encoded as UTF-8."""
        if self._status is None:
            raise ResponseStateError("Body written before the status line")
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._connection.write(data)
        self._bytes_written += len(data)

    def write_line(self, text: str = "") -> None:
        """Write `text` followed by a newline."""
        self.write(text + "\n")

    def write_file(self, fileobj: BinaryIO) -> None:
        """Copy a binary file object into the body."""
        shutil.copyfileobj(fileobj, self)
