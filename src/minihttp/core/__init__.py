"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The byte-moving half of the server. Nothing in here knows what HTTP is.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates the listening TCP socket (127.0.0.1:4221 by default)     │
    │  • Runs the accept() loop on the calling thread                     │
    │  • Wraps each client socket in a Connection and hands it off        │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ one Connection per client
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Owns the client socket and one fixed-size read buffer            │
    │  • read_request() / send_response() / close()                        │
    │  • Used by exactly one thread, never shared                         │
    └─────────────────────────────────────────────────────────────────────┘

HTTPServer (server.py) sits on top and starts one thread per Connection.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
]
