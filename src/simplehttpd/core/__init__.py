"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          SOCKET SERVER                              │
    │  • Binds the port, runs the accept loop                             │
    │  • Spawns one thread per accepted connection                        │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                        CONNECTION HANDLER                           │
    │  • Request line → headers → (POST) body → application → close       │
    │  • Turns every failure into a failure response                      │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                            CONNECTION                               │
    │  • Buffered line / exact-length reads over the client socket        │
    │  • Buffered writes, flush-and-close sequence                        │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .handler import ConnectionHandler, HandlerState
from .socket_server import SocketServer, BindError

__all__ = [
    "SocketServer",
    "BindError",
    "Connection",
    "ConnectionState",
    "ConnectionHandler",
    "HandlerState",
]
