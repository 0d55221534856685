# =============================================================================
# tests/test_request_logging.py - Request/Response Logging Middleware Tests
# =============================================================================
# Tests for app/middleware/request_logging.py:
#   - Message layout (request line, headers, client info, payload, markers)
#   - Payload capture, truncation and content-type visibility
#   - Skipping: excluded paths, logger not at DEBUG, non-HTTP scopes
#   - Guaranteed post-log and response flush when the app raises
#
# Run with: pytest tests/test_request_logging.py -v
# =============================================================================

import asyncio
import logging

import pytest
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient
from starlette.authentication import SimpleUser

from app.middleware.request_logging import RequestResponseLoggingMiddleware
from core.models import RequestLoggingConfig
from lib.content_caching import ContentCachingRequest, ContentCachingResponse
from tests.conftest import REQUEST_LOGGER


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------

def _build_inner_app() -> FastAPI:
    inner = FastAPI()

    @inner.get("/items")
    async def get_item():
        return {"id": 1, "name": "book"}

    @inner.post("/echo")
    async def echo(request: Request):
        body = await request.body()
        return Response(content=body, media_type=request.headers.get("content-type"))

    @inner.post("/submit")
    async def submit(request: Request):
        await request.body()
        return {"ok": True}

    @inner.get("/image")
    async def image():
        return Response(content=b"\x89PNG\r\n\x1a\n", media_type="image/png")

    @inner.get("/raw")
    async def raw():
        return Response(content=b"no declared type")

    return inner


@pytest.fixture
def make_client():
    """Factory for a TestClient around the logging middleware."""

    def _make_client(**config) -> TestClient:
        middleware = RequestResponseLoggingMiddleware(
            _build_inner_app(), RequestLoggingConfig(**config)
        )
        return TestClient(middleware)

    return _make_client


# =============================================================================
# Message Layout Tests
# =============================================================================

class TestMessageLayout:
    """Tests for the before/after/response message contents."""

    def test_three_messages_per_exchange(self, make_client, request_log):
        response = make_client().get("/items")

        assert response.status_code == 200
        messages = request_log()
        assert len(messages) == 3
        assert messages[0].startswith("Before request [GET /items\n")
        assert messages[1].startswith("After request [GET /items\n")
        assert messages[2].startswith("After response [200 OK\n")
        assert all(m.endswith("]") for m in messages)

    def test_headers_and_query_string(self, make_client, request_log):
        make_client().get("/items?page=2&size=5", headers={"X-Test": "a"})

        before = request_log()[0]
        assert before.startswith("Before request [GET /items?page=2&size=5\n")
        assert "\nX-Test: a\n" in before
        assert "\nHost: testserver\n" in before

    def test_multi_value_headers(self, make_client, request_log):
        make_client().get("/items", headers=[("X-Multi", "1"), ("X-Multi", "2")])

        before = request_log()[0]
        assert "X-Multi: 1\nX-Multi: 2\n" in before

    def test_client_info(self, make_client, request_log):
        make_client().get("/items")

        assert "\nclient=testclient\n" in request_log()[0]

    def test_everything_disabled(self, make_client, request_log):
        client = make_client(
            include_client_info=False,
            include_query_string=False,
            include_headers=False,
            include_payload=False,
        )

        client.get("/items?page=2", headers={"X-Test": "a"})

        messages = request_log()
        assert messages[0] == "Before request [GET /items\n]"
        assert messages[1] == "After request [GET /items\n]"
        assert messages[2] == "After response [200 OK\n]"

    def test_custom_markers(self, make_client, request_log):
        client = make_client(
            before_message_prefix="REQ<",
            before_message_suffix=">",
            after_message_prefix="DONE<",
            after_message_suffix=">",
            response_message_prefix="RESP<",
            response_message_suffix=">",
        )

        client.get("/items")

        before, after, resp = request_log()
        assert before.startswith("REQ<GET /items") and before.endswith(">")
        assert after.startswith("DONE<GET /items") and after.endswith(">")
        assert resp.startswith("RESP<200 OK") and resp.endswith(">")

    def test_response_headers_logged(self, make_client, request_log):
        make_client().get("/items")

        assert "\nContent-Type: application/json\n" in request_log()[2]


# =============================================================================
# Payload Tests
# =============================================================================

class TestPayload:
    """Tests for body capture and rendering."""

    def test_request_payload_in_after_message_only(self, make_client, request_log):
        response = make_client().post(
            "/echo", content=b'{"name":"book"}', headers={"Content-Type": "application/json"}
        )

        assert response.json() == {"name": "book"}
        before, after, resp = request_log()
        assert "payload=" not in before
        assert 'payload=\n{"name":"book"}\n]' in after
        assert 'payload=\n{"name":"book"}\n]' in resp

    def test_include_payload_false(self, make_client, request_log):
        response = make_client(include_payload=False).post(
            "/echo", content=b"hello", headers={"Content-Type": "text/plain"}
        )

        assert response.content == b"hello"
        assert all("payload=" not in m for m in request_log())

    def test_payload_truncated_to_max_length(self, make_client, request_log):
        body = b"abcdefghijklmnopqrstuvwxyz"

        response = make_client(max_payload_length=10).post(
            "/echo", content=body, headers={"Content-Type": "text/plain"}
        )

        # The client still receives the full body
        assert response.content == body
        _, after, resp = request_log()
        assert "payload=\nabcdefghij\n]" in after
        assert "payload=\nabcdefghij\n]" in resp

    def test_non_visible_response_type(self, make_client, request_log):
        response = make_client().get("/image")

        assert response.content == b"\x89PNG\r\n\x1a\n"
        assert "payload=" not in request_log()[2]

    def test_missing_response_content_type(self, make_client, request_log):
        response = make_client().get("/raw")

        assert response.status_code == 200
        assert response.content == b"no declared type"
        assert "payload=" not in request_log()[2]

    def test_request_without_content_type(self, make_client, request_log):
        response = make_client().post("/submit", content=b"hello-body")

        assert response.json() == {"ok": True}
        _, after, resp = request_log()
        assert "payload=\nhello-body\n" in after
        assert 'payload=\n{"ok":true}\n' in resp

    def test_request_payload_ignores_request_type(self, make_client, request_log):
        make_client().post(
            "/submit", content=b"raw-bytes", headers={"Content-Type": "application/octet-stream"}
        )

        assert "payload=\nraw-bytes\n" in request_log()[1]

    def test_unknown_charset_is_swallowed(self, make_client, request_log):
        response = make_client().post(
            "/echo", content=b"hello", headers={"Content-Type": "text/plain; charset=x-no-such-charset"}
        )

        assert response.status_code == 200
        assert response.content == b"hello"
        _, after, resp = request_log()
        assert "payload=" not in after
        assert after.endswith("]")
        assert "payload=" not in resp

    def test_declared_charset_used(self, make_client, request_log):
        make_client().post(
            "/echo", content="café".encode("latin-1"), headers={"Content-Type": "text/plain; charset=ISO-8859-1"}
        )

        assert "payload=\ncafé\n" in request_log()[1]


# =============================================================================
# Skip Tests
# =============================================================================

class TestSkipping:
    """Tests for the decision gate."""

    def test_excluded_path(self, make_client, request_log):
        client = make_client(exclude_paths=("/ima*",))

        response = client.get("/image")
        assert response.status_code == 200
        assert request_log() == []

        client.get("/items")
        assert len(request_log()) == 3

    def test_logger_not_at_debug(self, caplog, make_scope, make_receive, sent_messages):
        caplog.set_level(logging.INFO, logger=REQUEST_LOGGER)
        seen = {}

        async def app(scope, receive, send):
            seen["receive"], seen["send"] = receive, send

        _, send = sent_messages
        receive = make_receive(b"")
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig())

        asyncio.run(middleware(make_scope(), receive, send))

        assert seen["receive"] is receive
        assert seen["send"] is send
        assert [r for r in caplog.records if r.name == REQUEST_LOGGER] == []

    def test_websocket_scope_passes_through(self, request_log, make_scope, sent_messages):
        seen = {}

        async def app(scope, receive, send):
            seen["receive"], seen["send"] = receive, send

        async def receive():
            return {"type": "websocket.connect"}

        _, send = sent_messages
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig())

        asyncio.run(middleware(make_scope(type="websocket"), receive, send))

        assert seen["receive"] is receive
        assert seen["send"] is send
        assert request_log() == []

    def test_wrappers_installed_when_logging(self, request_log, make_scope, make_receive, sent_messages):
        seen = {}

        async def app(scope, receive, send):
            seen["receive"], seen["send"] = receive, send

        _, send = sent_messages
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig())

        asyncio.run(middleware(make_scope(), make_receive(b""), send))

        assert isinstance(seen["receive"], ContentCachingRequest)
        assert isinstance(seen["send"], ContentCachingResponse)

    def test_no_request_wrapper_without_payload(self, request_log, make_scope, make_receive, sent_messages):
        seen = {}

        async def app(scope, receive, send):
            seen["receive"] = receive

        _, send = sent_messages
        receive = make_receive(b"")
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig(include_payload=False))

        asyncio.run(middleware(make_scope(), receive, send))

        assert seen["receive"] is receive


# =============================================================================
# Client Info Tests
# =============================================================================

class TestClientInfo:
    """Tests for the client/session/user line."""

    def test_session_and_user(self, request_log, make_scope, make_receive, sent_messages):
        async def app(scope, receive, send):
            await send({"type": "http.response.start", "status": 204, "headers": []})
            await send({"type": "http.response.body", "body": b""})

        _, send = sent_messages
        scope = make_scope(session={"session_id": "abc123"}, user=SimpleUser("alice"))
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig())

        asyncio.run(middleware(scope, make_receive(b""), send))

        before, _, resp = request_log()
        assert "\nclient=127.0.0.1;session=abc123;user=alice\n" in before
        assert resp.startswith("After response [204 No Content\n")

    def test_empty_session_not_logged(self, request_log, make_scope, make_receive, sent_messages):
        async def app(scope, receive, send):
            await send({"type": "http.response.start", "status": 200, "headers": []})
            await send({"type": "http.response.body", "body": b""})

        _, send = sent_messages
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig())

        asyncio.run(middleware(make_scope(session={}), make_receive(b""), send))

        assert "\nclient=127.0.0.1\n" in request_log()[0]


# =============================================================================
# Failure Tests
# =============================================================================

class TestFailures:
    """Tests for post-processing when the downstream app raises."""

    def test_partial_response_flushed_and_logged(self, request_log, make_scope, make_receive, sent_messages):
        async def app(scope, receive, send):
            await send({
                "type": "http.response.start",
                "status": 200,
                "headers": [(b"content-type", b"text/plain")],
            })
            await send({"type": "http.response.body", "body": b"partial", "more_body": True})
            raise RuntimeError("boom")

        sent, send = sent_messages
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig())

        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(middleware(make_scope("/fail"), make_receive(b""), send))

        assert sent[0]["type"] == "http.response.start"
        assert sent[1] == {"type": "http.response.body", "body": b"partial", "more_body": False}

        messages = request_log()
        assert len(messages) == 3
        assert messages[1].startswith("After request [GET /fail")
        assert messages[2].startswith("After response [200 OK\n")
        assert "payload=\npartial\n" in messages[2]

    def test_failure_before_response(self, request_log, make_scope, make_receive, sent_messages):
        async def app(scope, receive, send):
            raise ValueError("no response")

        sent, send = sent_messages
        middleware = RequestResponseLoggingMiddleware(app, RequestLoggingConfig())

        with pytest.raises(ValueError):
            asyncio.run(middleware(make_scope("/fail"), make_receive(b""), send))

        assert sent == []
        messages = request_log()
        assert len(messages) == 3
        assert messages[2].startswith("After response [500 Internal Server Error\n")
