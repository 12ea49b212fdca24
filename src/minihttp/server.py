"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    SocketServer.accept()                       (listener thread)
        │
        └──► _handle_connection(conn)
                 │
                 └──► Thread(target=_process_connection)   (one per client)
                          │
                          └──► loop:
                                 conn.read_request()      bytes or None
                                 RequestParser.parse()    HTTPRequest
                                 Router.dispatch()        HTTPResponse
                                 conn.send_response()     bytes out

=============================================================================
CONCURRENCY
=============================================================================

Every accepted connection gets its own daemon thread and there is NO cap
on how many run at once. That keeps the model simple: requests on one
connection are handled strictly in order, and nothing is shared between
threads except the frozen ServerConfig and the stateless handlers.

A flood of idle connections will create a flood of threads. Set
ServerConfig.timeout to at least reclaim idle ones.

=============================================================================
ERROR POLICY
=============================================================================

    ParseError / RoutingError  → WARNING, connection closed, NO response
    OSError (handler, socket)  → ERROR,   connection closed
    socket.timeout             → DEBUG,   connection closed
    anything else              → logged with traceback, connection closed

A malformed request is answered by closing the connection, not with
"400 Bad Request": the server only ever sends 200, 201 and 404. Clients
see end-of-stream without a status line.

=============================================================================
"""

import logging
import socket
import threading
import time
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import FileHandler, home, echo, user_agent
from .http import (
    HTTPRequest,
    HTTPResponse,
    ParseError,
    RequestParser,
    Router,
    RoutingError,
)
from .storage import FileStorage


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("minihttp.access")


def build_router(config: ServerConfig, storage: Optional[FileStorage] = None) -> Router:
    """
    Create the router with the fixed route table.

        ""           → home
        echo         → echo
        user-agent   → user_agent
        files        → FileHandler(config.directory)
        (other)      → 404
    """
    router = Router()
    router.add("", home)
    router.add("echo", echo)
    router.add("user-agent", user_agent)
    router.add("files", FileHandler(directory=config.directory, storage=storage))
    return router


class HTTPServer:
    """
    Minimal HTTP/1.1 server.

    Usage:
        server = HTTPServer(ServerConfig(directory="/tmp/d"))
        server.run()  # Blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None, storage: Optional[FileStorage] = None):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().
            storage: File collaborator for /files. Defaults to FileStorage().

        Raises:
            ConfigError: The configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._router = build_router(self.config, storage)

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self):
        """Bound (host, port) while running, configured address otherwise."""
        return self._socket_server.bound_address or self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: The listening address cannot be bound.
        """
        self._setup_logging()
        logger.info(
            f"Starting HTTP server on {self.config.host}:{self.config.port} "
            f"(directory: {self.config.directory or 'current working directory'})"
        )
        logger.info("One thread per connection, no connection limit")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. Open connections finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Start a worker thread for a freshly accepted connection."""
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Serve requests on one connection until it ends (worker thread).

        Ends on: peer close, failed send, any error (see module docstring).
        """
        logger.debug(f"[{conn.id}] Connection from {conn.client_ip}")

        with conn:
            try:
                self._serve(conn)
            except (ParseError, RoutingError) as e:
                logger.warning(f"[{conn.id}] Dropping malformed request from {conn.client_ip}: {e}")
            except socket.timeout:
                logger.debug(f"[{conn.id}] Timed out waiting for a request")
            except OSError as e:
                logger.error(f"[{conn.id}] I/O error: {e}")
            except Exception:
                logger.exception(f"[{conn.id}] Unexpected error")

    def _serve(self, conn: Connection):
        while True:
            raw_request = conn.read_request()
            if raw_request is None:
                break

            started = time.perf_counter()
            request = self._parser.parse(raw_request, conn.address)

            conn.mark_processing()
            response = self._router.dispatch(request)

            if not conn.send_response(response.to_bytes()):
                break

            self._log_access(request, response, started)

    def _log_access(self, request: HTTPRequest, response: HTTPResponse, started: float):
        duration_ms = (time.perf_counter() - started) * 1000
        access_logger.info(
            f'{request.client_address[0]} "{request.method} {request.path}" '
            f"{int(response.status)} {response.content_length} {duration_ms:.2f}ms"
        )
