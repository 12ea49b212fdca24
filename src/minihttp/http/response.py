"""
=============================================================================
HTTP RESPONSE
=============================================================================

Every response this server sends has the same four-line head:

    HTTP/1.1 200 OK\r\n                 ← protocol + status line text
    Content-Type: text/plain\r\n        ← one of the ContentType members
    Content-Length: 3\r\n               ← always len(body) in BYTES
    \r\n                                ← end of head
    abc                                 ← body, nothing appended

No Date, Server or Connection headers are emitted.

=============================================================================
CONTENT-LENGTH IS DERIVED
=============================================================================

Content-Length counts bytes, not characters:

    body "abc"    → 3 bytes → Content-Length: 3
    body "héllo"  → 6 bytes → Content-Length: 6   (é is 2 bytes in UTF-8)

HTTPResponse therefore has no content_length field at all. A str body is
encoded once at construction and content_length is read off the bytes
whenever it is asked for, so it can never drift from the body.

=============================================================================
"""

from dataclasses import dataclass
from typing import Union

from .status_codes import ContentType, HTTPStatus


PROTOCOL = "HTTP/1.1"


@dataclass
class HTTPResponse:
    """
    A response produced by exactly one handler.

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes

    Prefer the ok() / created() / not_found() helpers over building one
    by hand.
    """

    status: HTTPStatus = HTTPStatus.OK
    content_type: ContentType = ContentType.TEXT_PLAIN
    body: Union[str, bytes] = b""

    def __post_init__(self):
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def protocol(self) -> str:
        return PROTOCOL

    @property
    def content_length(self) -> int:
        """Byte length of the body."""
        return len(self.body)

    @property
    def status_line(self) -> str:
        """
        First line of the response, without CRLF.

        Example: "HTTP/1.1 201 Created"
        """
        return f"{self.protocol} {self.status.status_line_text}"

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

        Returns:
            Head and body, exactly as described in the module docstring.
        """
        head = (
            f"{self.status_line}\r\n"
            f"Content-Type: {self.content_type.value}\r\n"
            f"Content-Length: {self.content_length}\r\n"
            f"\r\n"
        )
        return head.encode("utf-8") + self.body


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(
    body: Union[str, bytes] = b"",
    content_type: ContentType = ContentType.TEXT_PLAIN
) -> HTTPResponse:
    """
    Create a 200 OK response.

    Examples:
        ok()                                    # empty text/plain
        ok("abc")                               # echo
        ok(data, ContentType.OCTET_STREAM)      # file download
    """
    return HTTPResponse(status=HTTPStatus.OK, content_type=content_type, body=body)


def created(content_type: ContentType = ContentType.OCTET_STREAM) -> HTTPResponse:
    """Create a 201 Created response with an empty body."""
    return HTTPResponse(status=HTTPStatus.CREATED, content_type=content_type)


def not_found() -> HTTPResponse:
    """Create a 404 Not Found response (text/plain, empty body)."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)
