"""
=============================================================================
URL ROUTER
=============================================================================

Routing here is a lookup on the FIRST path segment, nothing more:

    "/echo/abc".split("/")  →  ["", "echo", "abc"]
                                     ───┬──
                                        └── dispatch key

    ┌──────────────┬──────────────┬────────────────────────────────┐
    │ Key          │ Handler      │ Notes                          │
    ├──────────────┼──────────────┼────────────────────────────────┤
    │ "" (root)    │ home         │ "/" splits into ["", ""]       │
    │ echo         │ echo         │                                │
    │ user-agent   │ user_agent   │ reads the User-Agent header    │
    │ files        │ FileHandler  │ branches on GET / POST         │
    │ (other)      │ fallback     │ 404                            │
    └──────────────┴──────────────┴────────────────────────────────┘

A path without any "/" ("*", "echo") has no segment at all; that is a
RoutingError, not a 404.

The table is filled by HTTPServer at startup:

    router = Router()
    router.add("", home)

    @router.route("echo")
    def echo(request):
        ...

=============================================================================
"""

from typing import Callable, Dict, Optional
import logging

from .request import HTTPRequest
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)

# A handler takes the parsed request and returns the response to send.
Handler = Callable[[HTTPRequest], HTTPResponse]


class RoutingError(Exception):
    """Raised when a request path has no usable first segment."""

    def __init__(self, path: str):
        super().__init__(f"InvalidRequest: no path segment in {path!r}")
        self.path = path


def _not_found_handler(request: HTTPRequest) -> HTTPResponse:
    return not_found()


class Router:
    """
    First-segment dispatcher.

    Dispatch depends only on the path; the handlers themselves decide
    whether headers or the method matter.
    """

    def __init__(self, fallback: Optional[Handler] = None):
        """
        Args:
            fallback: Handler for unknown segments. Defaults to a plain 404.
        """
        self._handlers: Dict[str, Handler] = {}
        self._fallback: Handler = fallback or _not_found_handler

    def add(self, segment: str, handler: Handler) -> "Router":
        """
        Register a handler for a first path segment.

        Registering the same segment twice replaces the earlier handler.

        Returns:
            Self for method chaining.
        """
        self._handlers[segment] = handler
        return self

    def route(self, segment: str) -> Callable[[Handler], Handler]:
        """Decorator form of add()."""
        def decorator(handler: Handler) -> Handler:
            self.add(segment, handler)
            return handler
        return decorator

    @property
    def segments(self) -> list[str]:
        """Registered segments, in registration order."""
        return list(self._handlers)

    @staticmethod
    def dispatch_key(path: str) -> str:
        """
        Extract the first path segment.

            "/"             → ""
            "/echo/abc"     → "echo"
            "/files/a/b"    → "files"

        Raises:
            RoutingError: The path contains no "/".
        """
        tokens = path.split("/")
        if len(tokens) < 2:
            raise RoutingError(path)
        return tokens[1]

    def resolve(self, path: str) -> Handler:
        """Find the handler for a path (fallback if the segment is unknown)."""
        key = self.dispatch_key(path)
        handler = self._handlers.get(key)
        if handler is None:
            logger.debug(f"No route for segment {key!r}, using fallback")
            return self._fallback
        return handler

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and run its handler.

        Raises:
            RoutingError: See dispatch_key().
            OSError: Propagated from handlers that write files.
        """
        handler = self.resolve(request.path)
        logger.debug(f"{request.method} {request.path} → {getattr(handler, '__name__', type(handler).__name__)}")
        return handler(request)
