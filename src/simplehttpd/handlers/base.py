"""
=============================================================================
APPLICATION HANDLER CONTRACT
=============================================================================

The protocol engine knows nothing about pages, forms or files. It parses
a request and then calls exactly one of two methods on the application:

    GET  → handler.handle_get(context)
    POST → handler.handle_post(context, body)

The application answers through the context (write_success / write_failure
/ write ...). Anything it raises is caught by the connection handler,
logged, and turned into the generic failure response.

Two ways to provide an application:

    # Subclass
    class MyApp(RequestHandler):
        def handle_get(self, context): ...
        def handle_post(self, context, body): ...

    # Or inject a pair of plain functions
    app = CallbackHandler(on_get=show_page, on_post=save_form)

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Callable, Optional

from ..http.context import RequestContext


class RequestHandler(ABC):
    """Base class for applications served by HTTPServer."""

    @abstractmethod
    def handle_get(self, context: RequestContext) -> None:
        """Answer a GET request."""

    @abstractmethod
    def handle_post(self, context: RequestContext, body: BinaryIO) -> None:
        """
        Answer a POST request.

        Args:
            context: Request view and response writer.
            body: The complete request body, already read from the socket,
                  as a binary file object positioned at the start.
        """


GetCallback = Callable[[RequestContext], None]
PostCallback = Callable[[RequestContext, BinaryIO], None]


class CallbackHandler(RequestHandler):
    """
    RequestHandler built from a pair of callables.

    A missing callback answers with the generic failure response.
    """

    def __init__(
        self,
        on_get: Optional[GetCallback] = None,
        on_post: Optional[PostCallback] = None,
    ):
        self._on_get = on_get
        self._on_post = on_post

    def handle_get(self, context: RequestContext) -> None:
        if self._on_get is None:
            context.write_failure()
            return
        self._on_get(context)

    def handle_post(self, context: RequestContext, body: BinaryIO) -> None:
        if self._on_post is None:
            context.write_failure()
            return
        self._on_post(context, body)
