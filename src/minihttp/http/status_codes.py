"""
=============================================================================
HTTP STATUS CODES AND CONTENT TYPES
=============================================================================

The server speaks a deliberately small subset of HTTP/1.1. Both the set of
status codes and the set of content types are CLOSED: a handler can only
ever answer with one of the members below.

    ┌────────┬───────────────┬──────────────────────────────────────────┐
    │  Code  │ Reason phrase │ Used by                                  │
    ├────────┼───────────────┼──────────────────────────────────────────┤
    │  200   │ OK            │ home, echo, user-agent, GET /files       │
    │  201   │ Created       │ POST /files                              │
    │  404   │ Not Found     │ unknown paths, missing headers / files   │
    └────────┴───────────────┴──────────────────────────────────────────┘

    ┌──────────────────────────┬──────────────────────────────────────┐
    │ Content type             │ Used by                              │
    ├──────────────────────────┼──────────────────────────────────────┤
    │ text/plain               │ everything except file transfers     │
    │ application/octet-stream │ GET /files and POST /files           │
    └──────────────────────────┴──────────────────────────────────────┘

=============================================================================
EXHAUSTIVE WIRE MAPPING
=============================================================================

Every member must have a wire representation. For ContentType the enum
value IS the wire text. For HTTPStatus the reason phrase lives in a table,
and the table is checked against the enum when this module is imported:

    HTTPStatus.CREATED added, phrase forgotten
        └──► import fails with RuntimeError

That way a new status can never reach the serializer without text.

=============================================================================
"""

from enum import Enum, IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes the server can send.

    Extends IntEnum, so members compare equal to their numeric code:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.status_line_text
        '404 Not Found'
    """

    OK = 200            # Request served
    CREATED = 201       # File written by POST /files
    NOT_FOUND = 404     # Unknown route, missing header or unreadable file

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]

    @property
    def status_line_text(self) -> str:
        """Code and phrase as they appear after the protocol: '200 OK'."""
        return f"{self.value} {self.phrase}"


class ContentType(str, Enum):
    """Content types the server can send. The value is the header text."""

    TEXT_PLAIN = "text/plain"
    OCTET_STREAM = "application/octet-stream"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# REASON PHRASES (RFC 7231 Section 6.1)
# =============================================================================

_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NOT_FOUND: "Not Found",
}

_missing = set(HTTPStatus) - set(_STATUS_PHRASES)
if _missing:
    raise RuntimeError(f"HTTPStatus members without a reason phrase: {sorted(_missing)}")
del _missing
