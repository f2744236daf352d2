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
"""CorsMiddleware — pure ASGI middleware applying a :class:`CorsPolicy`."""

from __future__ import annotations

from collections.abc import Iterable

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flycors.cors.config import CorsConfig
from flycors.cors.policy import VARY, CorsDecision, CorsPolicy, RequestKind


class CorsMiddleware:
    """Pure ASGI middleware that answers preflights and annotates responses.

    Non-HTTP scopes pass through untouched. Accepts either a built
    :class:`CorsPolicy` or a :class:`CorsConfig` to build one from.
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: CorsPolicy | None = None,
        config: CorsConfig | None = None,
    ) -> None:
        self.app = app
        self.policy = policy or CorsPolicy(config)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        decision = self.policy.evaluate(scope["method"], Headers(scope=scope))
        if decision.kind is RequestKind.NOT_CORS and not decision.vary:
            await self.app(scope, receive, send)
            return

        if decision.terminate:
            response = preflight_response(decision)
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                apply_decision(MutableHeaders(scope=message), decision)
            await send(message)

        await self.app(scope, receive, send_with_cors)


def preflight_response(decision: CorsDecision) -> Response:
    """Empty-bodied response that terminates a preflight."""
    response = Response(status_code=decision.status or 204)
    apply_decision(response.headers, decision)
    return response


def apply_decision(headers: MutableHeaders, decision: CorsDecision) -> None:
    """Write the decision's headers, overwriting same-named ones, and merge ``Vary``."""
    for name, value in decision.headers:
        headers[name] = value
    merge_vary(headers, decision.vary)


def merge_vary(headers: MutableHeaders, names: Iterable[str]) -> None:
    values = [v.strip() for v in headers.get(VARY, "").split(",") if v.strip()]
    seen = {v.lower() for v in values}
    for name in names:
        if name.lower() not in seen:
            values.append(name)
            seen.add(name.lower())
    if values:
        headers[VARY] = ", ".join(values)
