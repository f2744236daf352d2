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
"""Starlette application factory with flycors middleware wiring."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from flycors.core.config import Config
from flycors.cors.config import CorsConfig
from flycors.logging.structlog_adapter import StructlogAdapter
from flycors.middleware.pipeline import MiddlewareSpec, middleware_specs, resolve
from flycors.middleware.registry import MiddlewareRegistry
from flycors.web.adapters.starlette.cors_filter import CorsFilter
from flycors.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from flycors.web.ports.filter import WebFilter


def create_app(
    routes: Sequence[BaseRoute] | None = None,
    *,
    config: Config | None = None,
    middleware: Sequence[MiddlewareSpec | Mapping[str, Any]] | None = None,
    filters: Sequence[WebFilter] | None = None,
    cors: CorsConfig | None = None,
    registry: MiddlewareRegistry | None = None,
    debug: bool = False,
    lifespan: Any | None = None,
) -> Starlette:
    """Create a Starlette application wrapped in the configured middlewares.

    Named middlewares come from *middleware* when given, otherwise from the
    ``flycors.http.middleware`` list of *config*. They are resolved here, at
    startup, and sit outside the WebFilter chain (first entry outermost).

    When *config* is given, logging is configured from its ``flycors.logging``
    section first. When *cors* is given a :class:`CorsFilter` is added to the
    filter chain.
    """
    if config is not None:
        StructlogAdapter().configure(config)

    if middleware is not None:
        specs: Sequence[MiddlewareSpec | Mapping[str, Any]] = middleware
    elif config is not None:
        specs = middleware_specs(config)
    else:
        specs = []

    stack = [Middleware(factory) for factory in resolve(specs, registry)]

    chain_filters: list[WebFilter] = list(filters or [])
    if cors is not None:
        chain_filters.append(CorsFilter(cors))
    if chain_filters:
        stack.append(Middleware(WebFilterChainMiddleware, filters=chain_filters))

    return Starlette(
        debug=debug,
        routes=list(routes or []),
        middleware=stack,
        lifespan=lifespan,
    )
