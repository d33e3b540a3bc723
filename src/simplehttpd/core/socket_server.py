"""
=============================================================================
TCP LISTENER
=============================================================================

Owns the listening socket and the accept loop. Every accepted connection
is wrapped in a Connection and handed to a NEW THREAD:

    ┌──────────────────────────┐
    │   Listening socket       │  bind() → listen() → accept() loop
    └────────────┬─────────────┘
                 │ accept()
        ┌────────┼────────┬─────────────┐
        ▼        ▼        ▼             ▼
    conn-1a2b  conn-3c4d  conn-5e6f   ...      one thread per connection

=============================================================================
ONE THREAD PER CONNECTION, NO LIMIT
=============================================================================

There is no pool, no queue and no cap on concurrent connections: an
accepted connection gets its thread immediately. This keeps the model
trivially simple (each thread owns its socket, nothing is shared) at the
cost of unbounded thread growth under load. A bounded worker pool would
be a separate extension; it is intentionally not done here.

=============================================================================
SHUTDOWN
=============================================================================

The accept loop normally never ends. For embedding and tests, shutdown()
clears the running flag; accept() wakes up every poll_interval seconds to
notice it:

    while running:
        try:
            accept()          # blocks for at most poll_interval
        except timeout:
            continue          # check running flag, loop again

=============================================================================
"""

import socket
import logging
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

MAX_PORT = 65535


class BindError(Exception):
    """The listening socket could not be bound to the configured address."""

    def __init__(self, host: str, port: int, reason: str):
        super().__init__(f"Failed to bind to {host}:{port}: {reason}")
        self.host = host
        self.port = port
        self.reason = reason


class SocketServer:
    """
    Low-level TCP listener.

    Usage:
        def handle_connection(conn: Connection):
            ...  # runs on the connection's own thread

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        # Created in start()
        self._socket: Optional[socket.socket] = None
        self._bound_address: Optional[Tuple[str, int]] = None

        self._running = False

        # Set once the socket is listening; lets a thread that started us
        # in the background wait for bind success or failure.
        self.ready = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def server_address(self) -> Tuple[str, int]:
        """The bound (host, port); the configured one before start()."""
        return self._bound_address or (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: restart without waiting for TIME_WAIT to expire.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # accept() timeout so the loop can notice shutdown().
        sock.settimeout(self.config.poll_interval)
        return sock

    def bind(self) -> None:
        """
        Create, bind and listen.

        Raises:
            BindError: Port in use, not permitted, or out of range.
        """
        host, port = self.config.host, self.config.port
        if not 0 <= port <= MAX_PORT:
            logger.error(f"Failed to bind to {host}:{port}: port out of range")
            raise BindError(host, port, f"port must be 0-{MAX_PORT}")

        sock = self._create_socket()
        try:
            sock.bind((host, port))
            sock.listen(self.config.backlog)
        except (OSError, OverflowError) as e:
            sock.close()
            logger.error(f"Failed to bind to {host}:{port}: {e}")
            raise BindError(host, port, str(e)) from e

        self._socket = sock
        self._bound_address = sock.getsockname()[:2]

    def start(self, connection_handler: Callable[[Connection], None]) -> None:
        """
        Bind, listen and run the accept loop.

        BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called on a new thread for every accepted
                                connection. It owns the connection and must
                                close it.
        """
        self.bind()

        self._running = True
        self.ready.set()

        host, port = self.server_address
        logger.info(f"Server listening on {host}:{port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]) -> None:
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.read_timeout,
                max_line_length=self.config.max_line_length,
            )
            logger.debug(f"[{conn.id}] Accepted connection from {conn.client_ip}")

            # Connection threads never keep the process alive on their own.
            thread = threading.Thread(
                target=connection_handler,
                args=(conn,),
                name=f"conn-{conn.id}",
                daemon=True,
            )
            thread.start()

    def shutdown(self) -> None:
        """Stop the accept loop. Safe to call more than once, from any thread."""
        if self._running:
            logger.info("Shutting down listener...")
        self._running = False

    def _cleanup(self) -> None:
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
        logger.info("Listener stopped")

