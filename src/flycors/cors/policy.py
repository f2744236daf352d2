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
"""CorsPolicy — the CORS decision engine.

The policy is built once from a :class:`CorsConfig` and is immutable
afterwards. :meth:`CorsPolicy.evaluate` is a pure function of the request
method and headers; it never raises. A denied request is expressed by a
decision that carries no ``Access-Control-*`` headers, leaving the browser
to enforce the block.

Framework-agnostic: headers are read through the ``Mapping`` protocol so
Starlette ``Headers`` and plain dicts both work.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from flycors.cors.config import DEFAULT_ALLOWED_METHODS, MAX_AGE_LIMIT, CorsConfig
from flycors.cors.matching import (
    WILDCARD,
    AnyOrigin,
    OriginMatcher,
    canonical_header_key,
    compile_origins,
    parse_header_list,
)
from flycors.kernel.exceptions import CorsConfigError

if TYPE_CHECKING:
    from starlette.types import ASGIApp

logger = structlog.get_logger("flycors.cors")

ORIGIN = "Origin"
VARY = "Vary"
REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"
ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
MAX_AGE = "Access-Control-Max-Age"


class RequestKind(enum.Enum):
    NOT_CORS = "not_cors"
    ACTUAL = "actual"
    PREFLIGHT = "preflight"


@dataclass(frozen=True)
class CorsDecision:
    """Outcome of evaluating one request against a policy.

    Attributes:
        kind: How the request was classified.
        allowed: Whether allow headers were granted.
        headers: Response headers to set, in emission order.
        vary: Header names to merge into the response ``Vary`` header.
        terminate: Answer the request directly without calling the next handler.
        status: Status code of the direct answer when ``terminate`` is set.
    """

    kind: RequestKind
    allowed: bool = False
    headers: tuple[tuple[str, str], ...] = ()
    vary: tuple[str, ...] = ()
    terminate: bool = False
    status: int | None = None


_NOT_CORS = CorsDecision(kind=RequestKind.NOT_CORS)


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def _dedupe(values: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


class CorsPolicy:
    """Compiled, immutable CORS policy.

    Raises:
        CorsConfigError: If ``max_age`` is outside 0..2**32-1, ``options_success_status``
            is not an HTTP status code, or an origin pattern has more than
            one wildcard.
    """

    __slots__ = (
        "_config",
        "_matchers",
        "_origin_dependent",
        "_allowed_methods",
        "_allowed_headers",
        "_allow_all_headers",
        "_exposed_headers",
        "_preflight_vary",
        "_actual_vary",
        "_not_cors",
    )

    def __init__(self, config: CorsConfig | None = None) -> None:
        config = config or CorsConfig()
        _validate(config)
        self._config = config

        origins = list(config.allowed_origins) or [WILDCARD]
        self._matchers: tuple[OriginMatcher, ...] = compile_origins(origins)
        only_any = len(self._matchers) == 1 and isinstance(self._matchers[0], AnyOrigin)
        self._origin_dependent = config.allow_credentials or not only_any

        methods = [m.strip().upper() for m in config.allowed_methods if m.strip()]
        self._allowed_methods = _dedupe(methods or list(DEFAULT_ALLOWED_METHODS))

        headers = [h.strip() for h in config.allowed_headers if h.strip()]
        self._allow_all_headers = WILDCARD in headers
        self._allowed_headers = frozenset(
            canonical_header_key(h) for h in [*headers, ORIGIN] if h != WILDCARD
        )
        self._exposed_headers = _dedupe(
            [canonical_header_key(h) for h in config.exposed_headers if h.strip()]
        )

        origin_vary = (ORIGIN,) if self._origin_dependent else ()
        self._preflight_vary = (*origin_vary, REQUEST_METHOD, REQUEST_HEADERS)
        self._actual_vary = origin_vary
        self._not_cors = CorsDecision(kind=RequestKind.NOT_CORS, vary=origin_vary) if origin_vary else _NOT_CORS

        logger.debug(
            "cors_policy_created",
            allowed_origins=origins,
            allowed_methods=list(self._allowed_methods),
            allow_all_headers=self._allow_all_headers,
            allow_credentials=config.allow_credentials,
            options_passthrough=config.options_passthrough,
        )

    @classmethod
    def new(cls, config: CorsConfig | None = None) -> CorsPolicy:
        """Build a policy, failing fast on an invalid configuration."""
        return cls(config)

    @property
    def config(self) -> CorsConfig:
        return self._config

    def handle(self, app: ASGIApp) -> ASGIApp:
        """Wrap *app* with a pure ASGI middleware enforcing this policy."""
        from flycors.web.adapters.starlette.cors_middleware import CorsMiddleware

        return CorsMiddleware(app, policy=self)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, method: str, headers: Mapping[str, str]) -> CorsDecision:
        """Decide which CORS headers a request gets and whether to answer it directly."""
        origin = _get_header(headers, ORIGIN)
        if not origin:
            return self._not_cors

        matcher = self._match(origin)
        requested_method = _get_header(headers, REQUEST_METHOD)
        if method.upper() == "OPTIONS" and requested_method:
            return self._preflight(
                origin, matcher, requested_method, _get_header(headers, REQUEST_HEADERS)
            )
        return self._actual(origin, matcher, method)

    def _match(self, origin: str) -> OriginMatcher | None:
        candidate = origin.strip().lower()
        for matcher in self._matchers:
            if matcher.matches(candidate):
                return matcher
        return None

    def _preflight(
        self,
        origin: str,
        matcher: OriginMatcher | None,
        requested_method: str,
        requested_headers_value: str | None,
    ) -> CorsDecision:
        cfg = self._config
        requested_headers = parse_header_list(requested_headers_value)
        terminate = not cfg.options_passthrough
        status = cfg.options_success_status if terminate else None

        reason = None
        if matcher is None:
            reason = "origin_not_allowed"
        elif not self._is_method_allowed(requested_method):
            reason = "method_not_allowed"
        elif not self._are_headers_allowed(requested_headers):
            reason = "headers_not_allowed"

        if reason is not None:
            logger.debug(
                "cors_preflight_rejected",
                origin=origin,
                method=requested_method,
                headers=requested_headers,
                reason=reason,
            )
            return CorsDecision(
                kind=RequestKind.PREFLIGHT,
                vary=self._preflight_vary,
                terminate=terminate,
                status=status,
            )

        out: list[tuple[str, str]] = [
            (ALLOW_ORIGIN, self._allow_origin_value(origin, matcher)),
            (ALLOW_METHODS, requested_method.strip().upper()),
        ]
        if self._allow_all_headers and not cfg.allow_credentials:
            out.append((ALLOW_HEADERS, WILDCARD))
        elif requested_headers:
            out.append((ALLOW_HEADERS, ", ".join(requested_headers)))
        if cfg.allow_credentials:
            out.append((ALLOW_CREDENTIALS, "true"))
        if cfg.max_age is not None:
            out.append((MAX_AGE, str(cfg.max_age)))

        return CorsDecision(
            kind=RequestKind.PREFLIGHT,
            allowed=True,
            headers=tuple(out),
            vary=self._preflight_vary,
            terminate=terminate,
            status=status,
        )

    def _actual(self, origin: str, matcher: OriginMatcher | None, method: str) -> CorsDecision:
        if matcher is None:
            logger.debug(
                "cors_origin_not_allowed",
                origin=origin,
                method=method,
                reason="origin_not_allowed",
            )
            return CorsDecision(kind=RequestKind.ACTUAL, vary=self._actual_vary)

        out: list[tuple[str, str]] = [(ALLOW_ORIGIN, self._allow_origin_value(origin, matcher))]
        if self._config.allow_credentials:
            out.append((ALLOW_CREDENTIALS, "true"))
        if self._exposed_headers:
            out.append((EXPOSE_HEADERS, ", ".join(self._exposed_headers)))

        return CorsDecision(
            kind=RequestKind.ACTUAL,
            allowed=True,
            headers=tuple(out),
            vary=self._actual_vary,
        )

    def _allow_origin_value(self, origin: str, matcher: OriginMatcher | None) -> str:
        # With credentials the browser rejects a literal "*".
        if isinstance(matcher, AnyOrigin) and not self._config.allow_credentials:
            return WILDCARD
        return origin

    def _is_method_allowed(self, method: str) -> bool:
        normalized = method.strip().upper()
        if normalized == "OPTIONS":
            return True
        return normalized in self._allowed_methods

    def _are_headers_allowed(self, requested: list[str]) -> bool:
        if self._allow_all_headers:
            return True
        return all(h in self._allowed_headers for h in requested)


def _validate(config: CorsConfig) -> None:
    if config.max_age is not None and not 0 <= config.max_age <= MAX_AGE_LIMIT:
        raise CorsConfigError(
            f"max_age must be between 0 and {MAX_AGE_LIMIT}, got {config.max_age}",
            context={"max_age": config.max_age},
        )
    status = config.options_success_status
    if isinstance(status, bool) or not isinstance(status, int) or not 100 <= status <= 599:
        raise CorsConfigError(
            f"options_success_status must be an HTTP status code (100-599), got {status!r}",
            context={"options_success_status": status},
        )
