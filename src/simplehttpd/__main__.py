"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

    # Port 8080 on all interfaces, demo application
    python -m simplehttpd

    # Custom port
    python -m simplehttpd 3000

    # Serve an audio file at /Test.mp3
    python -m simplehttpd 8080 --audio-file ./Test.mp3

=============================================================================
LIFETIME
=============================================================================

main() starts the listener on a background (non-daemon) thread and returns
as soon as the port is bound. The process keeps serving because Python
waits for non-daemon threads before exiting. SIGINT / SIGTERM stop the
listener, which lets the process exit.

If the port cannot be bound, main() reports it and returns 1.

=============================================================================
"""

import argparse
import logging
import signal
import sys
from typing import Optional, Sequence

from . import __version__
from .access_log import setup_logging
from .config import ServerConfig, LOG_LEVELS, LOG_FORMATS
from .core import BindError
from .handlers import DemoHandler
from .server import HTTPServer


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = ServerConfig()

    parser = argparse.ArgumentParser(
        prog="simplehttpd",
        description="Minimal HTTP/1.0 server with a demo form application",
    )

    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )
    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )
    parser.add_argument(
        "--read-timeout",
        type=float,
        default=defaults.read_timeout,
        help="Per-read timeout in seconds for client sockets (default: none)",
    )
    parser.add_argument(
        "--reject-unsupported",
        action="store_true",
        help="Answer methods other than GET/POST with 501 instead of closing silently",
    )
    parser.add_argument(
        "--detailed-errors",
        action="store_true",
        help="Answer parse failures with 400/413/431 instead of 404",
    )
    parser.add_argument(
        "--audio-file",
        default=None,
        help="Audio file served by the demo application at /Test.mp3",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help=f"Logging level (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"simplehttpd {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        host=args.host,
        port=args.port,
        read_timeout=args.read_timeout,
        reject_unsupported_methods=args.reject_unsupported,
        detailed_errors=args.detailed_errors,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def _install_signal_handlers(server: HTTPServer) -> None:
    def shutdown_handler(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
        server.shutdown()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)

    server = HTTPServer(DemoHandler(audio_file=args.audio_file), config)
    try:
        server.start()
    except BindError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _install_signal_handlers(server)
    host, port = server.server_address
    print(f"simplehttpd {__version__} serving on http://{host}:{port}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
