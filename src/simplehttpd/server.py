"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ServerConfig ──► HTTPServer ──► SocketServer (accept loop)
                         │                │
                         │                └──► thread per connection
                         │                        │
                         └── RequestHandler ◄─────┘ ConnectionHandler
                             (your application)

=============================================================================
RUNNING
=============================================================================

    # Blocking: the calling thread runs the accept loop
    server = HTTPServer(MyApp(), ServerConfig(port=8080))
    server.serve_forever()

    # Background: returns once the port is bound
    server.start()
    ...
    server.shutdown()

start() runs the accept loop on a NON-daemon thread, so the interpreter
keeps serving after the starting code (e.g. a CLI entry point) returns.

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionHandler
from .handlers.base import RequestHandler


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Single-process HTTP/1.0 server.

    Args:
        handler: The application answering GET and POST requests.
        config: Server configuration. Uses defaults if not provided.
    """

    def __init__(self, handler: RequestHandler, config: Optional[ServerConfig] = None):
        self.handler = handler
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    @property
    def server_address(self) -> Tuple[str, int]:
        return self._socket_server.server_address

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def serve_forever(self) -> None:
        """
        Run the accept loop on the calling thread.

        Raises:
            BindError: If the port cannot be bound.
        """
        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        self._socket_server.start(self._handle_connection)

    def start(self, timeout: Optional[float] = 5.0) -> threading.Thread:
        """
        Start the accept loop on a background thread.

        Returns once the listening socket is bound, so bind failures are
        reported to the caller rather than lost on the background thread.

        Raises:
            BindError: If the port cannot be bound.
            RuntimeError: If the server is already started or did not come
                          up within `timeout` seconds.
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Server already started")

        self._error = None
        self._thread = threading.Thread(
            target=self._run_in_background,
            name="simplehttpd-listener",
        )
        self._thread.start()

        # Either the socket comes up (ready) or the thread dies trying.
        ready = self._socket_server.ready
        while not ready.wait(0.05):
            if not self._thread.is_alive():
                break
            if timeout is not None:
                timeout -= 0.05
                if timeout <= 0:
                    raise RuntimeError("Server did not start in time")

        if self._error is not None:
            raise self._error
        return self._thread

    def _run_in_background(self) -> None:
        try:
            self.serve_forever()
        except Exception as e:
            self._error = e

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """
        Stop accepting connections.

        Connections already being handled finish on their own threads.
        If the server runs in the background, waits up to `timeout`
        seconds for the listener thread to exit.
        """
        self._socket_server.shutdown()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    # =========================================================================
    # CONNECTION HANDLING (runs on the connection's thread)
    # =========================================================================

    def _handle_connection(self, conn: Connection) -> None:
        ConnectionHandler(conn, self.handler, self.config).handle()
