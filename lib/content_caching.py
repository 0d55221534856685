# =============================================================================
# lib/content_caching.py - Body-Caching ASGI Wrappers
# =============================================================================
# Decorators over the ASGI receive/send callables that record body bytes
# so they can be inspected after the downstream app has run.
#
# - ContentCachingRequest: passes every request chunk through unchanged and
#   keeps a copy of at most `content_cache_limit` bytes.
# - ContentCachingResponse: holds back the response start message and all
#   body chunks until copy_body_to_response() replays them.
#
# Usage:
#   request = wrap_request(scope, receive, content_cache_limit=10_000)
#   response = wrap_response(send)
#   try:
#       await app(scope, request, response)
#   finally:
#       await response.copy_body_to_response()
# =============================================================================

import logging

from starlette.datastructures import Headers
from starlette.types import Message, Receive, Scope, Send

from lib.media_types import InvalidMediaTypeError, MediaType

logger = logging.getLogger(__name__)


def _charset_of(content_type: str | None) -> str | None:
    if not content_type:
        return None
    try:
        return MediaType.parse(content_type).charset
    except InvalidMediaTypeError:
        return None


# =============================================================================
# Request Wrapper
# =============================================================================

class ContentCachingRequest:
    """
    Wraps an ASGI ``receive`` callable and caches the request body as it is read.

    The cache only fills while the downstream app consumes the body, so
    before the app runs get_content_as_bytes() is empty.

    Attributes:
        content_cache_limit: Maximum number of bytes kept (None = unbounded)
        cache_limit_exceeded: True once bytes were dropped from the cache
    """

    def __init__(self, scope: Scope, receive: Receive, content_cache_limit: int | None = None):
        self.scope = scope
        self.receive = receive
        self.content_cache_limit = content_cache_limit
        self.cache_limit_exceeded = False
        self._cached = bytearray()
        self._headers = Headers(scope=scope)

    async def __call__(self) -> Message:
        message = await self.receive()
        if message["type"] == "http.request":
            self._cache(message.get("body", b""))
        return message

    def _cache(self, chunk: bytes) -> None:
        if not chunk:
            return
        if self.content_cache_limit is None:
            self._cached += chunk
            return

        room = self.content_cache_limit - len(self._cached)
        if len(chunk) > room:
            self.cache_limit_exceeded = True
            chunk = chunk[:max(room, 0)]
        self._cached += chunk

    @property
    def content_type(self) -> str | None:
        return self._headers.get("content-type")

    @property
    def character_encoding(self) -> str | None:
        return _charset_of(self.content_type)

    def get_content_as_bytes(self) -> bytes:
        """Return the body bytes read so far (bounded by the cache limit)."""
        return bytes(self._cached)


# =============================================================================
# Response Wrapper
# =============================================================================

class ContentCachingResponse:
    """
    Wraps an ASGI ``send`` callable and buffers the whole response.

    Nothing reaches the client until copy_body_to_response() is called,
    which sends the captured start message and the full body exactly once.
    Other message types (trailers, pathsend) are held back as well and
    follow the body in the order they arrived.
    """

    def __init__(self, send: Send):
        self.send = send
        self.committed = False
        self._start_message: Message | None = None
        self._content = bytearray()
        self._body_received = False
        self._pending: list[Message] = []

    async def __call__(self, message: Message) -> None:
        message_type = message["type"]
        if message_type == "http.response.start":
            self._start_message = message
        elif message_type == "http.response.body":
            self._body_received = True
            self._content += message.get("body", b"")
        else:
            self._pending.append(message)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def started(self) -> bool:
        """Whether the downstream app sent a response start message."""
        return self._start_message is not None

    @property
    def status_code(self) -> int | None:
        if self._start_message is None:
            return None
        return self._start_message["status"]

    @property
    def headers(self) -> Headers:
        if self._start_message is None:
            return Headers()
        return Headers(raw=list(self._start_message.get("headers", [])))

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def character_encoding(self) -> str | None:
        return _charset_of(self.content_type)

    def get_content_as_bytes(self) -> bytes:
        """Return the buffered response body."""
        return bytes(self._content)

    # -------------------------------------------------------------------------
    # Flush
    # -------------------------------------------------------------------------

    async def copy_body_to_response(self) -> None:
        """
        Send the buffered response to the real ``send`` callable.

        Only the first call has an effect. If the app never started a
        response there is nothing to send. A response made only of
        non-body messages (e.g. http.response.pathsend) gets no body message.
        """
        if self.committed or self._start_message is None:
            return

        self.committed = True
        body = bytes(self._content)
        self._content.clear()
        logger.debug(f"Flushing buffered response ({len(body)} bytes)")

        await self.send(self._start_message)
        if self._body_received or not self._pending:
            await self.send({"type": "http.response.body", "body": body, "more_body": False})

        pending, self._pending = self._pending, []
        for message in pending:
            await self.send(message)


# =============================================================================
# Wrapping Helpers
# =============================================================================

def wrap_request(
    scope: Scope,
    receive: Receive,
    content_cache_limit: int | None = None,
) -> ContentCachingRequest:
    """Wrap ``receive`` unless it already caches content."""
    if isinstance(receive, ContentCachingRequest):
        return receive
    return ContentCachingRequest(scope, receive, content_cache_limit)


def wrap_response(send: Send) -> ContentCachingResponse:
    """Wrap ``send`` unless it already buffers content."""
    if isinstance(send, ContentCachingResponse):
        return send
    return ContentCachingResponse(send)
