# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""HTTP-level tests for CorsMiddleware via CorsPolicy.handle()."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from flycors.cors.config import CorsConfig
from flycors.cors.policy import CorsPolicy
from flycors.web.adapters.starlette.cors_middleware import CorsMiddleware

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class RecordingApp:
    """Terminal ASGI app that records calls and answers every method."""

    def __init__(self, headers: dict[str, str] | None = None) -> None:
        self.calls: list[str] = []
        self._headers = headers or {}

    async def __call__(self, scope, receive, send):
        self.calls.append(scope["method"])
        response = PlainTextResponse("downstream", headers=self._headers)
        await response(scope, receive, send)


def _client(config: CorsConfig, downstream: RecordingApp | None = None) -> tuple[TestClient, RecordingApp]:
    downstream = downstream or RecordingApp()
    app = CorsPolicy(config).handle(downstream)
    return TestClient(app), downstream


def _cors_headers(resp) -> dict[str, str]:
    return {k: v for k, v in resp.headers.items() if k.lower().startswith("access-control-")}


def _vary(resp) -> set[str]:
    return {v.strip() for v in resp.headers.get("vary", "").split(",") if v.strip()}


PREFLIGHT = {"Origin": "http://a.com", "Access-Control-Request-Method": "PUT"}


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestHandle:
    def test_handle_returns_cors_middleware(self):
        policy = CorsPolicy()
        wrapped = policy.handle(RecordingApp())
        assert isinstance(wrapped, CorsMiddleware)
        assert wrapped.policy is policy

    def test_middleware_builds_policy_from_config(self):
        middleware = CorsMiddleware(RecordingApp(), config=CorsConfig(max_age=10))
        assert middleware.policy.config.max_age == 10


class TestNoOrigin:
    @pytest.mark.parametrize("method", ["GET", "POST", "OPTIONS"])
    def test_no_cors_headers_without_origin(self, method):
        client, downstream = _client(CorsConfig(allowed_origins=["http://a.com"], allow_credentials=True))
        resp = client.request(method, "/", headers={"Access-Control-Request-Method": "GET"})

        assert resp.status_code == 200
        assert resp.text == "downstream"
        assert _cors_headers(resp) == {}
        assert _vary(resp) == {"Origin"}
        assert downstream.calls == [method]

    def test_no_vary_without_origin_for_any_origin_policy(self):
        client, downstream = _client(CorsConfig(allowed_origins=["*"]))
        resp = client.get("/")

        assert _cors_headers(resp) == {}
        assert "vary" not in resp.headers
        assert downstream.calls == ["GET"]

    def test_cached_response_without_origin_varies_like_cross_origin_one(self):
        client, _ = _client(CorsConfig(allowed_origins=["http://a.com"]))
        same_origin = client.get("/")
        cross_origin = client.get("/", headers={"Origin": "http://a.com"})

        assert _vary(same_origin) == _vary(cross_origin) == {"Origin"}


class TestActualRequests:
    def test_exact_origin_echoed(self):
        client, downstream = _client(CorsConfig(allowed_origins=["http://a.com", "http://b.com"]))
        resp = client.get("/", headers={"Origin": "http://b.com"})

        assert resp.text == "downstream"
        assert resp.headers["access-control-allow-origin"] == "http://b.com"
        assert "Origin" in _vary(resp)
        assert downstream.calls == ["GET"]

    def test_star_origin_without_credentials(self):
        client, _ = _client(CorsConfig(allowed_origins=["*"]))
        resp = client.get("/", headers={"Origin": "http://x.com"})

        assert resp.headers["access-control-allow-origin"] == "*"
        assert "vary" not in resp.headers

    def test_star_origin_with_credentials_echoes_origin(self):
        client, _ = _client(CorsConfig(allowed_origins=["*"], allow_credentials=True))
        resp = client.get("/", headers={"Origin": "http://x.com"})

        assert resp.headers["access-control-allow-origin"] == "http://x.com"
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert "Origin" in _vary(resp)

    def test_denied_origin_still_delegates(self):
        client, downstream = _client(CorsConfig(allowed_origins=["http://a.com"]))
        resp = client.post("/", headers={"Origin": "http://evil.com"})

        assert resp.status_code == 200
        assert resp.text == "downstream"
        assert _cors_headers(resp) == {}
        assert _vary(resp) == {"Origin"}
        assert downstream.calls == ["POST"]

    def test_expose_headers(self):
        client, _ = _client(CorsConfig(exposed_headers=["x-trace-id"]))
        resp = client.get("/", headers={"Origin": "http://x.com"})
        assert resp.headers["access-control-expose-headers"] == "X-Trace-Id"

    def test_downstream_vary_is_merged(self):
        downstream = RecordingApp(headers={"Vary": "Accept-Encoding, origin"})
        client, _ = _client(CorsConfig(allowed_origins=["http://a.com"]), downstream)
        resp = client.get("/", headers={"Origin": "http://a.com"})

        assert resp.headers["vary"] == "Accept-Encoding, origin"

    def test_downstream_cors_header_overwritten(self):
        downstream = RecordingApp(headers={"Access-Control-Allow-Origin": "*"})
        client, _ = _client(CorsConfig(allowed_origins=["http://a.com"]), downstream)
        resp = client.get("/", headers={"Origin": "http://a.com"})

        assert resp.headers.get_list("access-control-allow-origin") == ["http://a.com"]

    def test_identical_requests_yield_identical_headers(self):
        client, _ = _client(
            CorsConfig(
                allowed_origins=["http://*.example.com"],
                exposed_headers=["X-Trace"],
                allow_credentials=True,
            )
        )
        first = client.get("/", headers={"Origin": "http://app.example.com"})
        second = client.get("/", headers={"Origin": "http://app.example.com"})

        assert _cors_headers(first) == _cors_headers(second)
        assert first.headers["vary"] == second.headers["vary"]


class TestWildcardOrigins:
    @pytest.mark.parametrize(
        ("origin", "allowed"),
        [
            ("http://a.example.com", True),
            ("http://a.b.example.com", True),
            ("http://example.com", False),
            ("http://example.com.evil.com", False),
        ],
    )
    def test_wildcard_subdomain_pattern(self, origin, allowed):
        client, _ = _client(CorsConfig(allowed_origins=["http://*.example.com"]))
        resp = client.get("/", headers={"Origin": origin})

        if allowed:
            assert resp.headers["access-control-allow-origin"] == origin
        else:
            assert "access-control-allow-origin" not in resp.headers


class TestPreflight:
    def test_allowed_preflight_short_circuits(self):
        client, downstream = _client(CorsConfig(allowed_methods=["GET", "PUT"], max_age=600))
        resp = client.options("/", headers={**PREFLIGHT, "Access-Control-Request-Headers": "origin"})

        assert resp.status_code == 204
        assert resp.content == b""
        assert "PUT" in resp.headers["access-control-allow-methods"]
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-allow-headers"] == "Origin"
        assert resp.headers["access-control-max-age"] == "600"
        assert downstream.calls == []

    def test_max_age_absent_when_not_configured(self):
        client, _ = _client(CorsConfig(allowed_methods=["PUT"]))
        resp = client.options("/", headers=PREFLIGHT)

        assert resp.status_code == 204
        assert "access-control-max-age" not in resp.headers

    def test_rejected_method_has_no_allow_headers(self):
        client, downstream = _client(CorsConfig())
        resp = client.options("/", headers=PREFLIGHT)

        assert resp.status_code == 204
        assert _cors_headers(resp) == {}
        assert downstream.calls == []

    def test_rejected_header_has_no_allow_headers(self):
        client, downstream = _client(CorsConfig(allowed_methods=["PUT"], allowed_headers=["X-Allowed"]))
        resp = client.options("/", headers={**PREFLIGHT, "Access-Control-Request-Headers": "X-Forbidden"})

        assert resp.status_code == 204
        assert _cors_headers(resp) == {}
        assert downstream.calls == []

    def test_custom_success_status(self):
        client, _ = _client(CorsConfig(allowed_methods=["PUT"], options_success_status=200))
        resp = client.options("/", headers=PREFLIGHT)
        assert resp.status_code == 200
        assert resp.content == b""

    def test_passthrough_forwards_with_headers(self):
        client, downstream = _client(CorsConfig(allowed_methods=["PUT"], options_passthrough=True))
        resp = client.options("/", headers=PREFLIGHT)

        assert resp.status_code == 200
        assert resp.text == "downstream"
        assert resp.headers["access-control-allow-methods"] == "PUT"
        assert downstream.calls == ["OPTIONS"]

    def test_passthrough_forwards_rejected_preflight_without_headers(self):
        client, downstream = _client(CorsConfig(options_passthrough=True))
        resp = client.options("/", headers=PREFLIGHT)

        assert resp.text == "downstream"
        assert _cors_headers(resp) == {}
        assert downstream.calls == ["OPTIONS"]

    def test_preflight_vary(self):
        client, _ = _client(CorsConfig(allowed_origins=["http://a.com"], allowed_methods=["PUT"]))
        resp = client.options("/", headers=PREFLIGHT)

        assert _vary(resp) == {"Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers"}


class TestNonHttpScopes:
    def test_websocket_passes_through(self):
        from starlette.routing import WebSocketRoute

        async def ws_endpoint(websocket):
            await websocket.accept()
            await websocket.send_text("hi")
            await websocket.close()

        inner = Starlette(routes=[WebSocketRoute("/ws", ws_endpoint)])
        client = TestClient(CorsPolicy(CorsConfig(allowed_origins=["http://a.com"])).handle(inner))

        with client.websocket_connect("/ws", headers={"Origin": "http://evil.com"}) as ws:
            assert ws.receive_text() == "hi"


class TestWithStarletteRouting:
    def test_wraps_starlette_app(self):
        async def hello(request):
            return PlainTextResponse("hello")

        inner = Starlette(routes=[Route("/hello", hello)])
        client = TestClient(CorsPolicy(CorsConfig(allowed_origins=["http://a.com"])).handle(inner))
        resp = client.get("/hello", headers={"Origin": "http://a.com"})

        assert resp.text == "hello"
        assert resp.headers["access-control-allow-origin"] == "http://a.com"
