"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything that understands HTTP text lives in this package. Nothing here
touches a socket; the core package moves bytes, this package gives them
meaning.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST PARSER (request.py)                                         │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   b"GET /echo/abc HTTP/1.1\r\nHost: ...\r\n\r\n\0\0\0..."   │
    │ Output:  HTTPRequest(method=Method.GET, path="/echo/abc", ...)      │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ ROUTER (router.py)                                                  │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   HTTPRequest with path "/echo/abc"                          │
    │ Output:  echo handler's HTTPResponse                                │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py) + STATUS CODES (status_codes.py)             │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Input:   ok("abc")                                                  │
    │ Output:  b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n          │
    │            Content-Length: 3\r\n\r\nabc"                            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import (
    HTTPRequest,
    Method,
    ParseError,
    ParseErrorKind,
    RequestBuilder,
    RequestParser,
    parse_request,
)
from .response import HTTPResponse, ok, created, not_found
from .router import Router, RoutingError, Handler
from .status_codes import HTTPStatus, ContentType

__all__ = [
    # Request parsing
    "HTTPRequest",
    "Method",
    "ParseError",
    "ParseErrorKind",
    "RequestBuilder",
    "RequestParser",
    "parse_request",

    # Responses
    "HTTPResponse",
    "ok",           # 200 OK
    "created",      # 201 Created
    "not_found",    # 404 Not Found

    # Routing
    "Router",
    "RoutingError",
    "Handler",

    # Closed sets
    "HTTPStatus",
    "ContentType",
]
