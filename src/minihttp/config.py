"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

One immutable ServerConfig is built at startup and handed down explicitly:

    CLI args ─┐
    env vars ─┼──► ServerConfig ──► HTTPServer ──► SocketServer
    defaults ─┘        (frozen)          │
                                         └──────► FileHandler(directory)

There is no module-level config object. Every connection thread reads the
same instance, and since it is frozen nobody can change it underneath them.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments     python -m minihttp --directory /tmp/d
    2. Environment variables      MINIHTTP_DIRECTORY=/tmp/d python -m minihttp
    3. Defaults in the dataclass  127.0.0.1:4221, current directory

=============================================================================
FAIL-FAST
=============================================================================

validate() runs in HTTPServer.__init__, before the socket is bound. A bad
value raises ConfigError and the process exits without accepting anything.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Invalid server configuration. Always fatal at startup."""


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the HTTP server.

    NETWORK
    - host, port, backlog, buffer_size, timeout

    FILES
    - directory

    LOGGING
    - log_level
    """

    host: str = "127.0.0.1"
    """Address to bind. Loopback only by default."""

    port: int = 4221
    """Port to listen on. 0 lets the OS pick one (tests use this)."""

    directory: Optional[str] = None
    """
    Base directory for /files/{name}.
    None = resolve names against the current working directory.
    """

    buffer_size: int = 512
    """
    Size of each connection's read buffer in bytes.
    One recv() fills it at most once per request, so this is also the
    largest request the server can parse.
    """

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    timeout: Optional[float] = None
    """
    Idle timeout for client sockets in seconds.
    None = wait for the peer indefinitely.
    """

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        MINIHTTP_HOST        Bind address (default: 127.0.0.1)
        MINIHTTP_PORT        Port (default: 4221)
        MINIHTTP_DIRECTORY   Base directory for /files (default: unset)
        MINIHTTP_LOG_LEVEL   Logging level (default: INFO)

        Raises:
            ConfigError: MINIHTTP_PORT is not an integer.
        """
        port = os.getenv("MINIHTTP_PORT", str(cls.port))
        try:
            port_number = int(port)
        except ValueError:
            raise ConfigError(f"MINIHTTP_PORT must be an integer, got {port!r}") from None

        return cls(
            host=os.getenv("MINIHTTP_HOST", cls.host),
            port=port_number,
            directory=os.getenv("MINIHTTP_DIRECTORY") or None,
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", cls.log_level),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: Describes the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ConfigError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.buffer_size <= 0:
            raise ConfigError("buffer_size must be > 0")

        if self.backlog <= 0:
            raise ConfigError("backlog must be > 0")

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")

        if self.directory is not None and not os.path.isdir(self.directory):
            raise ConfigError(f"Directory does not exist: {self.directory}")
