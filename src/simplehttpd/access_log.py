"""
=============================================================================
LOGGING SETUP AND ACCESS LOG
=============================================================================

Two kinds of log output:

    simplehttpd.*         Diagnostic logs, one logger per module
                          (connection lifecycle, parse failures, errors)

    simplehttpd.access    One line per finished connection

The access logger is namespaced so it can be routed separately:

    logging.getLogger("simplehttpd.access").addHandler(file_handler)

Text format follows the Apache common log layout, which log analysis
tools already understand:

    127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /hello HTTP/1.0" 200 42 1.37ms

JSON format emits the same fields as one JSON object per line.

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass, asdict


logger = logging.getLogger("simplehttpd.access")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger and the package logger level."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    logging.getLogger("simplehttpd").setLevel(numeric_level)


@dataclass
class RequestLog:
    """
    Access log entry for one connection.

    status is 0 when no response was written (unsupported method with
    the default configuration, or a client that vanished mid-response).
    method and target are "-" when the request line never parsed.
    """

    connection_id: str
    client_ip: str
    method: str
    target: str
    version: str
    status: int
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        status = self.status or "-"
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.target} {self.version}" {status} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms'
        )


def log_request(entry: RequestLog, log_format: str = "text") -> None:
    """Emit one access log record. Error statuses are logged at WARNING."""
    level = logging.WARNING if entry.status >= 400 else logging.INFO
    if not logger.isEnabledFor(level):
        return

    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())


def now_timestamp() -> str:
    """Current local time in access log format."""
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")
