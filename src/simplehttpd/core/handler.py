"""
=============================================================================
CONNECTION HANDLER - THE PROTOCOL STATE MACHINE
=============================================================================

One ConnectionHandler owns one accepted connection from the first byte to
close(). It runs on the connection's own thread.

=============================================================================
STATES
=============================================================================

    ┌───────────────────┐
    │ READ_REQUEST_LINE │  "GET /hello HTTP/1.0"  → method, target, version
    └─────────┬─────────┘
              ▼
    ┌───────────────────┐
    │ READ_HEADERS      │  "Name: value" lines until the empty line
    └─────────┬─────────┘
              ▼
    ┌───────────────────┐      GET   → handler.handle_get(context)
    │ DISPATCH          │──►   POST  → READ_BODY → handler.handle_post(...)
    └─────────┬─────────┘      other → nothing (or 501, if configured)
              ▼
    ┌───────────────────┐
    │ RESPOND           │  flush, close (always)
    └───────────────────┘

    Any exception on the way → FAILED: log it, write the failure response
    (if no status line went out yet), then RESPOND.

States only move forward. Each connection is handled exactly once: there
is no keep-alive, no retry, and nothing is shared with other connections.

=============================================================================
"""

import io
import logging
import time
from enum import Enum
from typing import Optional

from ..access_log import RequestLog, log_request, now_timestamp
from ..config import ServerConfig
from ..handlers.base import RequestHandler
from ..http.context import RequestContext
from ..http.request import (
    HTTPRequest,
    HTTPParseError,
    ClientDisconnectedError,
    parse_request_line,
    read_headers,
    read_body,
)
from ..http.response import ResponseWriter
from ..http.status_codes import HTTPStatus
from .connection import Connection, ConnectionState


logger = logging.getLogger(__name__)


class HandlerState(Enum):
    NEW = "new"
    READ_REQUEST_LINE = "read_request_line"
    READ_HEADERS = "read_headers"
    DISPATCH = "dispatch"
    READ_BODY = "read_body"
    RESPOND = "respond"
    FAILED = "failed"
    DONE = "done"


class ConnectionHandler:
    """
    Processes a single connection.

    Usage (this is what the listener thread runs):

        ConnectionHandler(conn, app, config).handle()
    """

    def __init__(
        self,
        connection: Connection,
        handler: RequestHandler,
        config: Optional[ServerConfig] = None,
    ):
        self.connection = connection
        self.handler = handler
        self.config = config or ServerConfig()

        self.state = HandlerState.NEW
        self.request: Optional[HTTPRequest] = None
        self.writer = ResponseWriter(connection)
        self.error: Optional[BaseException] = None

    def handle(self) -> None:
        """
        Run the state machine to completion.

        Never raises: every failure ends in a (best effort) failure
        response, a log record and a closed connection.
        """
        started = time.time()
        try:
            try:
                self._process()
            except Exception as e:
                self._fail(e)
            finally:
                self.state = HandlerState.RESPOND
                self.connection.close()
        finally:
            self.state = HandlerState.DONE
            self._log_access(started)

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def _process(self) -> None:
        conn = self.connection

        self.state = HandlerState.READ_REQUEST_LINE
        request_line = conn.read_line()
        method, target, version = parse_request_line(request_line)
        logger.debug(f"[{conn.id}] starting: {request_line}")

        self.state = HandlerState.READ_HEADERS
        headers = read_headers(conn.read_line)
        logger.debug(f"[{conn.id}] got {len(headers)} headers")

        self.request = HTTPRequest(
            method=method,
            target=target,
            version=version,
            headers=headers,
            client_address=conn.address,
        )

        self.state = HandlerState.DISPATCH
        if method == "GET":
            self._handle_get()
        elif method == "POST":
            self._handle_post()
        else:
            self._handle_unsupported()

    def _handle_get(self) -> None:
        self.connection.state = ConnectionState.PROCESSING
        self.handler.handle_get(RequestContext(self.request, self.writer))

    def _handle_post(self) -> None:
        self.state = HandlerState.READ_BODY
        body = read_body(
            self.connection.read_exact,
            self.request.headers,
            self.config.max_body_size,
        )
        self.request.body = body
        logger.debug(f"[{self.connection.id}] read {len(body)} body bytes")

        self.state = HandlerState.DISPATCH
        self.connection.state = ConnectionState.PROCESSING
        self.handler.handle_post(
            RequestContext(self.request, self.writer),
            io.BytesIO(body),
        )

    def _handle_unsupported(self) -> None:
        """
        Methods other than GET and POST.

        By default no handler runs and nothing is written: the client just
        sees the connection close. With reject_unsupported_methods the
        client gets 501 Not Implemented instead.
        """
        method = self.request.method
        if self.config.reject_unsupported_methods:
            logger.info(f"[{self.connection.id}] Rejecting unsupported method {method}")
            self.writer.write_failure(HTTPStatus.NOT_IMPLEMENTED)
        else:
            logger.info(f"[{self.connection.id}] Ignoring unsupported method {method}")

    # =========================================================================
    # FAILURE
    # =========================================================================

    def _fail(self, error: Exception) -> None:
        failed_in = self.state
        self.state = HandlerState.FAILED
        self.error = error
        conn_id = self.connection.id

        if isinstance(error, (HTTPParseError, ClientDisconnectedError)):
            logger.warning(f"[{conn_id}] {failed_in.value}: {type(error).__name__}: {error}")
        else:
            logger.exception(f"[{conn_id}] Error in {failed_in.value}: {error}")

        if self.writer.status_written:
            # One status line per connection; the partial response stands.
            logger.error(f"[{conn_id}] Response already started, cannot send failure status")
            return

        try:
            self.writer.write_failure(self._failure_status(error))
        except OSError as e:
            logger.debug(f"[{conn_id}] Could not send failure response: {e}")

    def _failure_status(self, error: Exception) -> HTTPStatus:
        if self.config.detailed_errors and isinstance(error, HTTPParseError):
            return HTTPStatus.from_code(error.status_code, HTTPStatus.BAD_REQUEST)
        return HTTPStatus.NOT_FOUND

    # =========================================================================
    # ACCESS LOG
    # =========================================================================

    def _log_access(self, started: float) -> None:
        request = self.request
        status = self.writer.status
        log_request(
            RequestLog(
                connection_id=self.connection.id,
                client_ip=self.connection.client_ip,
                method=request.method if request else "-",
                target=request.target if request else "-",
                version=request.version if request else "-",
                status=int(status) if status is not None else 0,
                bytes_sent=self.writer.bytes_written,
                duration_ms=(time.time() - started) * 1000,
                timestamp=now_timestamp(),
            ),
            self.config.log_format,
        )
