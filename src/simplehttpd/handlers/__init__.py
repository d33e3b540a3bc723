"""
=============================================================================
APPLICATION HANDLERS
=============================================================================

    base.py   RequestHandler contract and CallbackHandler adapter
    demo.py   DemoHandler: form page, POST echo, single audio file

=============================================================================
USAGE
=============================================================================

    from simplehttpd import HTTPServer
    from simplehttpd.handlers import CallbackHandler

    def hello(context):
        context.write_success("text/plain")
        context.write("hello\n")

    HTTPServer(CallbackHandler(on_get=hello)).serve_forever()

=============================================================================
"""

from .base import RequestHandler, CallbackHandler
from .demo import DemoHandler

__all__ = [
    "RequestHandler",
    "CallbackHandler",
    "DemoHandler",
]
