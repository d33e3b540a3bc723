"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the HTTP server.

Configuration comes from code (ServerConfig(...)) or from the command
line (python -m simplehttpd 8080 --log-level DEBUG). Nothing is read from
the environment or from files.

The defaults reproduce the classic behavior of the server: listen on all
interfaces at port 8080, accept POST bodies up to 10 MiB, block forever
on slow clients, close silently on unsupported methods and answer every
failure with a plain 404.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional

from .http.request import DEFAULT_MAX_BODY_SIZE


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, poll_interval

    CONNECTION SETTINGS
    - buffer_size, max_line_length, max_body_size, read_timeout

    PROTOCOL BEHAVIOR
    - reject_unsupported_methods, detailed_errors

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces
    - "127.0.0.1" - Localhost only
    """

    port: int = 8080
    """The port number to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """Maximum number of accepted-but-not-yet-handled connections queued by the OS."""

    poll_interval: float = 1.0
    """
    How often (seconds) the accept loop wakes up to check for shutdown.
    Only affects how fast shutdown() takes effect.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONNECTION SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    buffer_size: int = 4096
    """Maximum bytes requested from the socket per body read."""

    max_line_length: int = 65536
    """Longest request line or header line accepted, in bytes."""

    max_body_size: int = DEFAULT_MAX_BODY_SIZE
    """Largest Content-Length accepted for a POST body (10 MiB)."""

    read_timeout: Optional[float] = None
    """
    Per-read socket timeout in seconds.
    None = block forever (a silent client holds its thread indefinitely).
    """

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL BEHAVIOR
    # ─────────────────────────────────────────────────────────────────────

    reject_unsupported_methods: bool = False
    """
    False: methods other than GET/POST get no response, the connection
           is simply closed.
    True:  they get "501 Not Implemented".
    """

    detailed_errors: bool = False
    """
    False: every failure is answered with "404 Not Found".
    True:  parse failures are answered with their own status
           (400, 413, 431).
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (Apache style) or 'json'."""

    def validate(self) -> None:
        """
        Validate configuration values.

        Called when the server is constructed, so a bad value fails at
        startup instead of on the first request. The port range is checked
        when the socket is bound and reported as BindError.
        """
        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_line_length < 1:
            raise ValueError("max_line_length must be >= 1")

        if self.max_body_size < 0:
            raise ValueError("max_body_size must be >= 0")

        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ValueError("read_timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {self.log_format}")
