"""
=============================================================================
MINIHTTP - A Minimal HTTP/1.1 Server on Raw Sockets
=============================================================================

A small HTTP/1.1 server that reads requests straight off TCP sockets and
answers a fixed set of routes:

    GET  /                 → 200, empty body
    GET  /echo/{text}      → 200, body = {text}
    GET  /user-agent       → 200, body = User-Agent header (404 if absent)
    GET  /files/{name}     → 200 with file bytes (404 if absent)
    POST /files/{name}     → writes the body to the file, 201
    anything else          → 404

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer: connection loop + route table
    ├── config.py            # ServerConfig dataclass, ConfigError
    ├── storage.py           # Whole-file read/write for /files
    ├── core/                # Byte-level networking
    │   ├── socket_server.py # Listening socket + accept loop
    │   └── connection.py    # Client socket + reusable read buffer
    ├── http/                # HTTP protocol
    │   ├── request.py       # Line-oriented request parser
    │   ├── response.py      # Response model and serialization
    │   ├── router.py        # First-segment router
    │   └── status_codes.py  # HTTPStatus, ContentType
    └── handlers/
        ├── basic.py         # home, echo, user-agent
        └── files.py         # /files GET and POST

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(directory="/tmp/d"))
    server.run()

or from a shell:

    python -m minihttp --directory /tmp/d

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig, ConfigError

__all__ = ["HTTPServer", "ServerConfig", "ConfigError", "__version__"]
