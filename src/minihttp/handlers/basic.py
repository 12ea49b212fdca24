"""
Handlers for the routes that need nothing but the request itself.

    GET /                → 200, empty body
    GET /echo/{text}     → 200, body = {text}
    GET /user-agent      → 200, body = User-Agent value (404 if absent)

All three ignore the method.
"""

import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok, not_found


logger = logging.getLogger(__name__)

ECHO_PREFIX = "/echo/"
USER_AGENT_HEADER = "User-Agent"


def home(request: HTTPRequest) -> HTTPResponse:
    return ok()


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    Return everything after "/echo/" verbatim.

    The text is not URL-decoded: "/echo/a%20b" answers "a%20b".
    """
    text = request.path[len(ECHO_PREFIX):]
    logger.debug(f"Echoing {len(text)} characters")
    return ok(text)


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """Reflect the User-Agent header (exact, case-sensitive key)."""
    value = request.get_header(USER_AGENT_HEADER)
    if value is None:
        return not_found()
    return ok(value)
