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
"""CORS filter — applies a :class:`CorsPolicy` inside the web filter chain."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from starlette.requests import Request
from starlette.responses import Response

from flycors.container.ordering import HIGHEST_PRECEDENCE, order
from flycors.cors.config import CorsConfig
from flycors.cors.policy import CorsPolicy, RequestKind
from flycors.web.adapters.starlette.cors_middleware import apply_decision, preflight_response
from flycors.web.filters import OncePerRequestFilter
from flycors.web.ports.filter import CallNext


@order(HIGHEST_PRECEDENCE + 50)
class CorsFilter(OncePerRequestFilter):
    """Answers preflights and adds CORS headers for matching paths."""

    def __init__(
        self,
        policy: CorsPolicy | CorsConfig | None = None,
        url_patterns: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
    ) -> None:
        self._policy = policy if isinstance(policy, CorsPolicy) else CorsPolicy(policy)
        self.url_patterns = list(url_patterns)
        self.exclude_patterns = list(exclude_patterns)

    @property
    def policy(self) -> CorsPolicy:
        return self._policy

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        decision = self._policy.evaluate(request.method, request.headers)
        if decision.kind is RequestKind.NOT_CORS and not decision.vary:
            return cast(Response, await call_next(request))

        if decision.terminate:
            return preflight_response(decision)

        response = cast(Response, await call_next(request))
        apply_decision(response.headers, decision)
        return response
