"""
=============================================================================
SIMPLEHTTPD - Minimal HTTP/1.0 Server on Raw Sockets
=============================================================================

A single-process HTTP/1.0 server: one thread per connection, a request
line and headers parsed straight from the byte stream, a POST body read
up to its Content-Length, and a pluggable application answering GET and
POST.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    simplehttpd/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m simplehttpd [port])
    ├── server.py            # HTTPServer: config + listener + application
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # Logging setup and per-connection access log
    ├── core/
    │   ├── socket_server.py # Listener: bind, accept loop, thread per connection
    │   ├── connection.py    # Buffered reads/writes over one client socket
    │   └── handler.py       # The per-connection protocol state machine
    ├── http/
    │   ├── request.py       # Request line / header / body parsing
    │   ├── response.py      # ResponseWriter
    │   ├── context.py       # RequestContext passed to handlers
    │   ├── status_codes.py  # HTTPStatus enum
    │   └── mime_types.py    # Content-Type from file extension
    └── handlers/
        ├── base.py          # RequestHandler contract, CallbackHandler
        └── demo.py          # Demo form/echo/audio application

=============================================================================
QUICK START
=============================================================================

    from simplehttpd import HTTPServer, ServerConfig
    from simplehttpd.handlers import RequestHandler

    class Hello(RequestHandler):
        def handle_get(self, context):
            context.write_success()
            context.write_line(f"<h1>{context.target}</h1>")

        def handle_post(self, context, body):
            context.write_success("text/plain")
            context.write(body.read())

    HTTPServer(Hello(), ServerConfig(port=8080)).serve_forever()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig
from .core import BindError
from .handlers import RequestHandler, CallbackHandler

__all__ = [
    "HTTPServer",
    "ServerConfig",
    "BindError",
    "RequestHandler",
    "CallbackHandler",
    "__version__",
]
