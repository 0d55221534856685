# =============================================================================
# app/middleware/request_logging.py - Request/Response Logging Middleware
# =============================================================================
# Writes three DEBUG entries per HTTP exchange:
#
#   Before request [GET /test?page=1
#   Accept: application/json
#   client=127.0.0.1
#   ]
#   After request [GET /test?page=1 ... payload=<request body> ]
#   After response [200 OK ... payload=<response body> ]
#
# Request and response bodies are captured through the wrappers in
# lib/content_caching.py. The response is buffered while the app runs and
# flushed to the client after the post-log, even when the app raises.
#
# Usage:
#   app.add_middleware(RequestResponseLoggingMiddleware, config=RequestLoggingConfig())
# =============================================================================

import logging

from starlette.requests import HTTPConnection
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp, Receive, Scope, Send

from core.models import RequestLoggingConfig
from lib.content_caching import (
    ContentCachingRequest,
    ContentCachingResponse,
    wrap_request,
    wrap_response,
)
from lib.media_types import is_visible
from lib.utils import canonical_header_name, path_matches, reason_phrase

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"
DEFAULT_CHARSET = "utf-8"

# Key under which an app may store its session id in the Starlette session
SESSION_ID_KEY = "session_id"


def is_async_dispatch(scope: Scope) -> bool:
    """
    Websocket and lifespan scopes are long-lived async dispatches whose
    bodies never materialize as a single request/response pair.
    """
    return scope["type"] != "http"


class RequestResponseLoggingMiddleware:
    """
    ASGI middleware that logs every HTTP request and response at DEBUG level.

    Logging is skipped when the logger is not enabled for DEBUG, when the
    path matches one of ``config.exclude_paths``, and for non-HTTP scopes.
    Bodies are captured only when ``config.include_payload`` is set. The
    request body is always rendered; the response body only for text-like
    content types (see lib.media_types).
    """

    def __init__(self, app: ASGIApp, config: RequestLoggingConfig | None = None) -> None:
        self.app = app
        self.config = config or RequestLoggingConfig()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if is_async_dispatch(scope):
            await self.app(scope, receive, send)
            return

        should_log = self.should_log(scope)
        request = receive
        response = send

        if should_log:
            if self.config.include_payload:
                request = wrap_request(scope, receive, self.config.max_payload_length)
            response = wrap_response(send)
            self.before_request(
                self.create_message(
                    scope,
                    request,
                    self.config.before_message_prefix,
                    self.config.before_message_suffix,
                )
            )

        try:
            await self.app(scope, request, response)
        finally:
            if should_log:
                self.after_request(
                    self.create_message(
                        scope,
                        request,
                        self.config.after_message_prefix,
                        self.config.after_message_suffix,
                    )
                )
                self.log_response(
                    response,
                    self.config.response_message_prefix,
                    self.config.response_message_suffix,
                )
                await response.copy_body_to_response()

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def should_log(self, scope: Scope) -> bool:
        if not logger.isEnabledFor(logging.DEBUG):
            return False
        return not path_matches(scope["path"], self.config.exclude_paths)

    def before_request(self, message: str) -> None:
        logger.debug(message)

    def after_request(self, message: str) -> None:
        logger.debug(message)

    # -------------------------------------------------------------------------
    # Message Assembly
    # -------------------------------------------------------------------------

    def create_message(self, scope: Scope, request: Receive, prefix: str, suffix: str) -> str:
        """
        Build the request log message.

        Order is fixed: request line, headers, client info, payload.
        """
        connection = HTTPConnection(scope)
        msg = [f"{prefix}{scope['method']} {connection.url.path}"]

        if self.config.include_query_string:
            query_string = scope.get("query_string", b"").decode("latin-1")
            if query_string:
                msg.append(f"?{query_string}")
        msg.append(LINE_SEPARATOR)

        if self.config.include_headers:
            msg.extend(_header_lines(scope.get("headers", [])))

        if self.config.include_client_info:
            client = connection.client.host if connection.client else None
            if client:
                msg.append(f"client={client}")
            session_id = _session_id(scope)
            if session_id is not None:
                msg.append(f";session={session_id}")
            user = _remote_user(scope)
            if user is not None:
                msg.append(f";user={user}")
            msg.append(LINE_SEPARATOR)

        if self.config.include_payload:
            payload = self.get_message_payload(request)
            if payload is not None:
                msg.append(f"payload={LINE_SEPARATOR}{payload}{LINE_SEPARATOR}")

        msg.append(suffix)
        return "".join(msg)

    def get_message_payload(self, request: Receive) -> str | None:
        if not isinstance(request, ContentCachingRequest):
            return None
        return self._render(request.get_content_as_bytes(), request.character_encoding)

    def log_response(self, response: ContentCachingResponse, prefix: str, suffix: str) -> None:
        """
        Log status, headers and (visible) body of the buffered response.

        A response that was never started is reported as 500: the server
        answers with an error when the app fails before responding.
        """
        status = response.status_code or HTTP_500_INTERNAL_SERVER_ERROR
        msg = [f"{prefix}{status} {reason_phrase(status)}", LINE_SEPARATOR]

        if self.config.include_headers:
            msg.extend(_header_lines(response.headers.raw))

        if self.config.include_payload and is_visible(response.content_type):
            payload = self._render(response.get_content_as_bytes(), response.character_encoding)
            if payload is not None:
                msg.append(f"payload={LINE_SEPARATOR}{payload}{LINE_SEPARATOR}")

        msg.append(suffix)
        logger.debug("".join(msg))

    def _render(self, content: bytes, charset: str | None) -> str | None:
        if not content:
            return None
        length = min(len(content), self.config.max_payload_length)
        if length == 0:
            return None
        try:
            return content[:length].decode(charset or DEFAULT_CHARSET, errors="replace")
        except (LookupError, UnicodeError):
            # Unknown charset: leave the payload out, keep the rest of the message
            return None


# =============================================================================
# Helpers
# =============================================================================

def _header_lines(raw_headers) -> list[str]:
    """One "Name: value" line per header value, grouped by first appearance."""
    grouped: dict[str, list[str]] = {}
    for name, value in raw_headers:
        grouped.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))

    lines = []
    for name, values in grouped.items():
        for value in values:
            lines.append(f"{canonical_header_name(name)}: {value}{LINE_SEPARATOR}")
    return lines


def _session_id(scope: Scope) -> str | None:
    # Present only when SessionMiddleware is installed and a session was started
    session = scope.get("session")
    if not session:
        return None
    session_id = session.get(SESSION_ID_KEY)
    return str(session_id) if session_id is not None else None


def _remote_user(scope: Scope) -> str | None:
    # Present only when AuthenticationMiddleware is installed
    user = scope.get("user")
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "display_name", None) or None
