"""
Request context handed to application handlers.

Bundles the parsed request (read side) with the response writer (write
side) so a handler needs exactly one argument to see what was asked and
to answer it.
"""

from typing import BinaryIO, Dict, Optional, Union

from .request import HTTPRequest
from .response import ResponseWriter, DEFAULT_CONTENT_TYPE
from .status_codes import HTTPStatus


class RequestContext:
    """
    One request/response exchange, valid for the duration of a handler call.

    Usage inside a handler:

        def handle_get(self, context):
            if context.target != "/":
                context.write_failure()
                return
            context.write_success()
            context.write_line("<h1>hello</h1>")
    """

    def __init__(self, request: HTTPRequest, writer: ResponseWriter):
        self.request = request
        self.writer = writer

    # Request view

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def target(self) -> str:
        """The raw request target, e.g. "/form?x=1"."""
        return self.request.target

    @property
    def headers(self) -> Dict[str, str]:
        return self.request.headers

    @property
    def client_address(self) -> tuple:
        return self.request.client_address

    # Response contract

    def write_success(
        self,
        content_type: str = DEFAULT_CONTENT_TYPE,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.writer.write_success(content_type, headers)

    def write_failure(self, status: HTTPStatus = HTTPStatus.NOT_FOUND) -> None:
        self.writer.write_failure(status)

    def write(self, data: Union[str, bytes]) -> None:
        self.writer.write(data)

    def write_line(self, text: str = "") -> None:
        self.writer.write_line(text)

    def write_file(self, fileobj: BinaryIO) -> None:
        self.writer.write_file(fileobj)
