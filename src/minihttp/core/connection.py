"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the lifetime of that client.

=============================================================================
ONE READ = ONE REQUEST
=============================================================================

TCP is a byte stream, so a general HTTP server has to buffer until it sees
"\r\n\r\n" and then read Content-Length more bytes. This server does not.
It assumes every recv() delivers exactly one complete request, which holds
for small requests from ordinary clients:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       read_request() Flow                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   buffer = bytearray(buffer_size)      ← allocated ONCE per conn    │
    │                                                                      │
    │   loop:                                                              │
    │     zero-fill buffer                   ← no stale bytes from the    │
    │                                          previous request           │
    │     n = recv_into(buffer)                                            │
    │     n == 0 → peer closed → None                                      │
    │     return bytes(buffer)               ← request + NUL padding       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The NUL padding is intentional: the parser strips it from the trailing
edge of the body.

=============================================================================
OWNERSHIP
=============================================================================

A Connection is used by exactly one thread. The buffer is never shared, so
nothing here needs a lock.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Tracked for logging and so close() can be called more than once.
    """
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Waiting for the next request
    PROCESSING = "processing"  # Request parsed, handler running
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A client connection with a fixed-size, reusable read buffer.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current ConnectionState.
        requests_handled: Requests read so far on this connection.
        buffer_size: Size of the read buffer in bytes.
        timeout: Socket timeout in seconds, None for no timeout.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    requests_handled: int = 0

    buffer_size: int = 512
    timeout: Optional[float] = None

    _buffer: bytearray = field(default_factory=bytearray, init=False, repr=False)

    def __post_init__(self):
        self._buffer = bytearray(self.buffer_size)
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read the next request into the connection buffer.

        Returns:
            The whole buffer (request bytes followed by NUL padding), or
            None if the peer closed the connection.

        Raises:
            socket.timeout: No data within the configured timeout.
            OSError: Any other socket failure.
        """
        self.state = ConnectionState.READING

        # Clear what the previous request left behind.
        self._buffer[:] = bytes(self.buffer_size)

        try:
            received = self.socket.recv_into(self._buffer)
        except (ConnectionResetError, ConnectionAbortedError):
            logger.debug(f"[{self.id}] Connection reset by peer")
            return None

        if received == 0:
            return None

        self.requests_handled += 1
        logger.debug(f"[{self.id}] Read {received} bytes")
        return bytes(self._buffer)

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a partially filled kernel buffer does not
        truncate the response.

        Returns:
            True if everything was sent, False if the connection is gone.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def mark_processing(self):
        self.state = ConnectionState.PROCESSING

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR)  → sends FIN, client sees end of stream
        2. drain briefly      → don't leave unread data in kernel buffers
        3. close()            → release the file descriptor

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Includes socket.timeout

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(
            f"[{self.id}] Connection closed after {self.requests_handled} requests "
            f"({self.age:.2f}s)"
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
