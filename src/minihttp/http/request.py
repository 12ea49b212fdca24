"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one socket read into a structured HTTPRequest.

=============================================================================
WHAT THE PARSER RECEIVES
=============================================================================

Each connection owns ONE fixed-size read buffer. A single recv() fills the
front of it and the rest stays zeroed, so the parser always sees a request
followed by NUL padding:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  POST /files/a.txt HTTP/1.1\r\n                                     │
    │  Content-Length: 5\r\n                                              │
    │  \r\n                                                               │
    │  hello\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0\0 ...    │
    └─────────────────────────────────────────────────────────────────────┘
                                   └── padding up to buffer_size bytes

=============================================================================
LINE-ORIENTED STATE MACHINE
=============================================================================

The buffer is split into lines and every non-empty line is classified:

    ┌─────────┐  request line   ┌─────────┐  first non-header  ┌────────┐
    │  START  │ ──────────────► │ HEADERS │ ─────────────────► │  BODY  │
    └─────────┘                 └─────────┘     line           └────────┘
                                  │     ▲                         │
                                  └─────┘                         ▼
                                 "Name: value"                  done

    START    First non-empty line: METHOD SP PATH SP PROTOCOL
    HEADERS  Lines containing ": " are headers
    BODY     The first other non-empty line is the WHOLE body; stop.

Blank lines are skipped everywhere, which is why the usual blank line
between headers and body does not matter here.

=============================================================================
KNOWN LIMITATIONS (kept on purpose)
=============================================================================

1. HEADER VALUES ARE ONE TOKEN
   "User-Agent: Mozilla/5.0 (X11; Linux)" → value "Mozilla/5.0"

2. BODIES ARE ONE LINE
   There is no Content-Length framing. "a\r\nb" → body "a"

3. A BODY THAT LOOKS LIKE A HEADER IS A HEADER
   "key: value" as a body ends up in headers, body stays empty

4. ONE READ, ONE REQUEST
   A request larger than the read buffer is cut at the buffer edge.

tests/unit/test_request.py pins each of these down.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
import logging


logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL = "HTTP/1.1"
HEADER_SEPARATOR = ": "
PADDING = "\x00"


class ParseErrorKind(Enum):
    """Classification of a failed parse."""

    METHOD_NOT_SUPPORTED = "MethodNotSupported"
    METHOD_WAS_NOT_READ_CORRECTLY = "MethodWasNotReadCorrectly"
    CAN_NOT_PARSE_HEADER = "CanNotParseHeader"
    NO_URL = "NoUrl"
    INVALID_REQUEST = "InvalidRequest"


class ParseError(Exception):
    """
    Raised when a request buffer cannot be turned into an HTTPRequest.

    Carries a ParseErrorKind so callers can tell failures apart without
    matching on message text:

        try:
            parser.parse(data)
        except ParseError as e:
            if e.kind is ParseErrorKind.METHOD_NOT_SUPPORTED:
                ...
    """

    def __init__(self, kind: ParseErrorKind, detail: str = ""):
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)
        self.kind = kind
        self.detail = detail


class Method(str, Enum):
    """
    Supported HTTP methods. The value is the wire token.

    Anything outside this set is rejected with METHOD_NOT_SUPPORTED.
    """

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "Method":
        """Map a request-line token to a Method (case-sensitive)."""
        try:
            return cls(token)
        except ValueError:
            raise ParseError(ParseErrorKind.METHOD_NOT_SUPPORTED, token) from None


_METHOD_TOKENS = frozenset(method.value for method in Method)


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Built once per read by RequestParser, handed to the router, and
    dropped as soon as the handler returns.

        method:         One of the four supported Methods
        path:           Request target exactly as sent ("/echo/abc")
        protocol:       Protocol token from the request line
        headers:        Header name → value, names kept as received.
                        A repeated name keeps the last value.
        body:           Single-line body with NUL padding stripped
        client_address: (ip, port) of the peer, for logging
    """

    method: Method
    path: str
    protocol: str = DEFAULT_PROTOCOL
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    client_address: tuple[str, int] = ("", 0)

    def get_header(self, name: str) -> Optional[str]:
        """
        Exact, case-sensitive header lookup.

        "User-Agent" and "user-agent" are different keys here, matching
        how the user-agent route has always behaved.
        """
        return self.headers.get(name)

    def to_bytes(self) -> bytes:
        """
        Render the request back into wire form.

            METHOD SP PATH SP PROTOCOL CRLF
            Name: value CRLF            (one per header)
            CRLF
            body

        parse_request(request.to_bytes()) gives back the same request only
        while header values are single tokens and the body has no line
        break and no ": ".
        """
        lines = [f"{self.method} {self.path} {self.protocol}"]
        for name, value in self.headers.items():
            lines.append(f"{name}{HEADER_SEPARATOR}{value}")
        lines.append("")
        head = "\r\n".join(lines) + "\r\n"
        return (head + self.body).encode("utf-8")


class RequestBuilder:
    """
    Mutable accumulator the parser fills line by line.

    Nothing leaves the builder until build() has checked that a path was
    set, so a half-parsed request can never reach a handler.
    """

    def __init__(self):
        self._method: Optional[Method] = None
        self._path: Optional[str] = None
        self._protocol: str = DEFAULT_PROTOCOL
        self._headers: Dict[str, str] = {}
        self._body: str = ""
        self._client_address: tuple[str, int] = ("", 0)

    def method(self, method: Method) -> "RequestBuilder":
        self._method = method
        return self

    def path(self, path: str) -> "RequestBuilder":
        self._path = path
        return self

    def protocol(self, protocol: str) -> "RequestBuilder":
        self._protocol = protocol
        return self

    def header(self, name: str, value: str) -> "RequestBuilder":
        self._headers[name] = value  # last write wins
        return self

    def body(self, body: str) -> "RequestBuilder":
        self._body = body
        return self

    def client_address(self, address: tuple[str, int]) -> "RequestBuilder":
        self._client_address = address
        return self

    def build(self) -> HTTPRequest:
        """
        Finalize the request.

        Raises:
            ParseError(NO_URL): No request line was ever seen.
        """
        if self._path is None or self._method is None:
            raise ParseError(ParseErrorKind.NO_URL)

        return HTTPRequest(
            method=self._method,
            path=self._path,
            protocol=self._protocol,
            headers=dict(self._headers),
            body=self._body,
            client_address=self._client_address,
        )


class ParserState(Enum):
    """Where the parser is inside the request."""

    START = "start"
    HEADERS = "headers"
    BODY = "body"


class RequestParser:
    """
    Parses a request buffer into an HTTPRequest.

    ==========================================================================
    PARSER FLOW
    ==========================================================================

        bytes ──decode──► text ──split("\\n")──► lines
                                                   │
                    ┌──────────────────────────────┘
                    ▼
        for each line (trailing "\\r" and NUL padding removed):
            empty                → skip
            state START          → _parse_request_line, state = HEADERS
            contains ": "        → _parse_header
            another request line → ParseError(INVALID_REQUEST)
            anything else        → body, stop
                    │
                    ▼
        RequestBuilder.build()  → HTTPRequest  (or ParseError(NO_URL))

    ==========================================================================
    """

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse one request buffer.

        Args:
            data: Raw bytes from the connection, usually NUL-padded.
            client_address: Peer (ip, port), copied onto the request.

        Returns:
            The parsed HTTPRequest.

        Raises:
            ParseError: The buffer does not hold a usable request.
        """
        text = data.decode("utf-8", errors="replace")
        builder = RequestBuilder().client_address(client_address)
        state = ParserState.START

        for raw_line in text.split("\n"):
            line = self._clean_line(raw_line)
            if not line:
                continue

            if state is ParserState.START:
                method, path, protocol = self._parse_request_line(line)
                builder.method(method).path(path).protocol(protocol)
                state = ParserState.HEADERS
            elif HEADER_SEPARATOR in line:
                name, value = self._parse_header(line)
                builder.header(name, value)
            elif self._looks_like_request_line(line):
                # A second request line inside the header block.
                raise ParseError(ParseErrorKind.INVALID_REQUEST, line)
            else:
                state = ParserState.BODY
                builder.body(line)
                break

        request = builder.build()
        logger.debug(
            f"Parsed {request.method} {request.path} "
            f"({len(request.headers)} headers, {len(request.body)} body chars)"
        )
        return request

    @staticmethod
    def _clean_line(line: str) -> str:
        """Drop the CR of a CRLF ending and any NUL padding after it."""
        line = line.rstrip(PADDING)
        if line.endswith("\r"):
            line = line[:-1]
        return line

    @staticmethod
    def _looks_like_request_line(line: str) -> bool:
        tokens = line.split(maxsplit=1)
        return len(tokens) == 2 and tokens[0] in _METHOD_TOKENS

    def _parse_request_line(self, line: str) -> tuple[Method, str, str]:
        """
        Parse "METHOD PATH PROTOCOL".

            "GET /echo/abc HTTP/1.1"
             ─┬─ ────┬──── ───┬────
              │      │        │
           Method   Path   Protocol (optional, defaults to HTTP/1.1)

        Raises:
            ParseError: METHOD_WAS_NOT_READ_CORRECTLY, METHOD_NOT_SUPPORTED
                        or NO_URL.
        """
        tokens = line.split()
        if not tokens:
            raise ParseError(ParseErrorKind.METHOD_WAS_NOT_READ_CORRECTLY)

        method = Method.from_token(tokens[0])

        if len(tokens) < 2:
            raise ParseError(ParseErrorKind.NO_URL, line)
        path = tokens[1]

        protocol = tokens[2] if len(tokens) > 2 else DEFAULT_PROTOCOL
        return method, path, protocol

    def _parse_header(self, line: str) -> tuple[str, str]:
        """
        Parse "Name: value" into (name, value).

        Only the first token after the name is kept:

            "User-Agent: curl/8.0"          → ("User-Agent", "curl/8.0")
            "User-Agent: Mozilla/5.0 (X11)" → ("User-Agent", "Mozilla/5.0")

        Raises:
            ParseError(CAN_NOT_PARSE_HEADER): The line has no usable name.
        """
        tokens = line.split()
        name = tokens[0].rstrip(":") if tokens else ""
        if not name:
            raise ParseError(ParseErrorKind.CAN_NOT_PARSE_HEADER, line)

        value = tokens[1] if len(tokens) > 1 else ""
        return name, value


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0)
) -> HTTPRequest:
    """Parse one request buffer with a throwaway RequestParser."""
    return RequestParser().parse(data, client_address)
