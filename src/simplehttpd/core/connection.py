"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

This module wraps one accepted client socket with the small API the
protocol state machine needs: read a line, read an exact number of bytes,
write bytes, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

TCP does NOT preserve message boundaries. A client that sends

    GET /hello HTTP/1.0\r\n
    \r\n

might be received as one recv() or as several:

    recv() → "GET /he"
    recv() → "llo HTTP/1.0\r\n\r\n"

So we never look at recv() chunks directly. Instead the socket is wrapped
in a buffered binary reader (socket.makefile("rb")) and we ask it for
"everything up to the next newline" or "the next N bytes". The reader
blocks the calling thread until enough data arrived, which is exactly the
model we want for thread-per-connection: no polling, no busy waiting.

=============================================================================
LINE READING RULES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  \n          terminates the line (not part of the returned text)    │
    │  \r          dropped wherever it appears, never terminates a line   │
    │  EOF         terminal: ClientDisconnectedError, never retried       │
    │  too long    LineTooLongError (protects memory)                     │
    └─────────────────────────────────────────────────────────────────────┘

Header bytes are decoded as ISO-8859-1: every byte maps to exactly one
character, so decoding can never fail and never loses information.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, BinaryIO
import uuid

from ..http.request import ClientDisconnectedError, LineTooLongError


logger = logging.getLogger(__name__)

HEADER_ENCODING = "iso-8859-1"


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    A connection only ever moves forward through these states and is
    handled exactly once (no keep-alive).
    """
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Reading request line, headers or body
    PROCESSING = "processing"  # Application callback is running
    WRITING = "writing"        # Response bytes are being written
    CLOSING = "closing"        # Close sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents one accepted client connection.

    Attributes:
        socket: The client socket.
        address: Client's address as returned by accept().
        id: Short connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Maximum bytes requested from the socket per body read.
        timeout: Per-read socket timeout in seconds (None = block forever).
        max_line_length: Longest request/header line accepted, in bytes.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 4096
    timeout: Optional[float] = None
    max_line_length: int = 65536

    _rfile: Optional[BinaryIO] = field(default=None, repr=False)
    _wfile: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # Blocking mode; an optional timeout turns a stalled read into
        # socket.timeout instead of holding the thread forever.
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

        # Separate buffered views for input and output. The reader must be
        # shared by line reads and body reads so bytes buffered while
        # looking for a newline are not lost.
        self._rfile = self.socket.makefile("rb")
        self._wfile = self.socket.makefile("wb")

    @property
    def client_ip(self) -> str:
        """Get the client IP address (or the raw address for non-IP sockets)."""
        if isinstance(self.address, tuple) and self.address:
            return str(self.address[0])
        return str(self.address or "-")

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> str:
        """
        Read one line from the client.

        Returns:
            The line without its terminating newline and with every
            carriage return removed.

        Raises:
            ClientDisconnectedError: If the stream ends before a newline.
            LineTooLongError: If the line exceeds max_line_length bytes.
        """
        self.state = ConnectionState.READING

        # Ask for one byte more than allowed so "exactly at the limit" and
        # "over the limit" can be told apart.
        raw = self._rfile.readline(self.max_line_length + 1)

        if not raw.endswith(b"\n"):
            if len(raw) > self.max_line_length:
                raise LineTooLongError(
                    f"Line exceeds {self.max_line_length} bytes"
                )
            raise ClientDisconnectedError(
                "Connection closed before end of line "
                f"({len(raw)} bytes pending)"
            )

        return raw[:-1].replace(b"\r", b"").decode(HEADER_ENCODING)

    def read_exact(self, length: int) -> bytes:
        """
        Read exactly `length` bytes from the client.

        Reads in chunks of at most buffer_size bytes and accumulates them
        until the requested count is reached.

        Raises:
            ClientDisconnectedError: If the stream ends first.
        """
        self.state = ConnectionState.READING

        data = bytearray()
        remaining = length

        while remaining > 0:
            logger.debug(f"[{self.id}] Reading body, {remaining} bytes to go")
            chunk = self._rfile.read1(min(self.buffer_size, remaining))
            if not chunk:
                raise ClientDisconnectedError(
                    f"Client disconnected after {len(data)} of {length} body bytes"
                )
            data += chunk
            remaining -= len(chunk)

        return bytes(data)

    # =========================================================================
    # WRITING
    # =========================================================================

    def write(self, data: bytes) -> None:
        """Queue bytes for the client. Buffered output is sent by close()."""
        self.state = ConnectionState.WRITING
        self._wfile.write(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Flush pending output and close the connection.

        Safe to call more than once; only the first call does anything.

        Close sequence:
            1. flush buffered response bytes
            2. shutdown(SHUT_WR) → client sees end of response (FIN)
            3. drain unread request bytes so the kernel does not answer
               them with a RST that could discard our response
            4. close the file objects and the socket
        """
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return

        self.state = ConnectionState.CLOSING

        try:
            self._wfile.flush()
        except OSError as e:
            logger.debug(f"[{self.id}] Flush on close failed: {e}")

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Timeout or reset, closing anyway

        for stream in (self._rfile, self._wfile):
            try:
                stream.close()
            except OSError:
                pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
