"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

    # Serve on 127.0.0.1:4221, /files relative to the current directory
    python -m minihttp

    # Serve /files from /tmp/d
    python -m minihttp --directory /tmp/d

    # Same thing through the environment
    MINIHTTP_DIRECTORY=/tmp/d python -m minihttp

The installed console script `minihttp` runs the same main().

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig, ConfigError, LOG_LEVELS
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server with echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                        # 127.0.0.1:4221
  python -m minihttp --directory /tmp/d     # serve /files from /tmp/d
  python -m minihttp --port 8080            # custom port
        """
    )

    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help="Base directory for /files/{name} (default: current directory)"
    )

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        type=str.upper,
        default=defaults.log_level.upper(),
        help="Logging level (default: %(default)s)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Parse arguments, build the configuration and run the server.

    Returns:
        Process exit status (2 for configuration errors).
    """
    try:
        defaults = ServerConfig.from_env()
        args = build_parser(defaults).parse_args(argv)

        config = ServerConfig(
            host=args.host,
            port=args.port,
            directory=args.directory,
            log_level=args.log_level,
        )
        server = HTTPServer(config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
