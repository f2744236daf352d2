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
"""Middleware registry — maps stable middleware names to loaders."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog
from starlette.types import ASGIApp

from flycors.kernel.exceptions import DuplicateMiddlewareException, MiddlewareNotFoundException

logger = structlog.get_logger("flycors.middleware")

# Wraps the next ASGI app and returns the wrapping app.
MiddlewareFactory = Callable[[ASGIApp], ASGIApp]

# Turns raw (already parsed, not yet validated) config into a MiddlewareFactory.
Loader = Callable[[Mapping[str, Any]], MiddlewareFactory]


class MiddlewareRegistry:
    """Collects named middleware loaders.

    Names are resolved once, when a pipeline is built, never per request.
    """

    def __init__(self) -> None:
        self._loaders: dict[str, Loader] = {}

    def register(self, name: str, loader: Loader) -> None:
        if name in self._loaders:
            raise DuplicateMiddlewareException(
                f"Middleware '{name}' is already registered",
                code="MIDDLEWARE_DUPLICATE",
                context={"name": name},
            )
        self._loaders[name] = loader
        logger.debug("middleware_registered", name=name)

    def register_factory(self, factory: Callable[[], tuple[str, Loader]]) -> None:
        """Register a ``() -> (name, loader)`` pair such as :func:`cors_v0`."""
        name, loader = factory()
        self.register(name, loader)

    def get(self, name: str) -> Loader:
        try:
            return self._loaders[name]
        except KeyError:
            raise MiddlewareNotFoundException(
                f"No middleware registered under '{name}'",
                code="MIDDLEWARE_NOT_FOUND",
                context={"name": name, "available": sorted(self._loaders)},
            ) from None

    def load(self, name: str, raw_config: Mapping[str, Any] | None = None) -> MiddlewareFactory:
        """Resolve *name* and build its middleware from *raw_config*."""
        return self.get(name)(raw_config or {})

    def names(self) -> list[str]:
        return sorted(self._loaders)

    def __contains__(self, name: object) -> bool:
        return name in self._loaders


def default_registry() -> MiddlewareRegistry:
    """Return a new registry holding the built-in middlewares."""
    from flycors.cors.loader import cors_v0

    registry = MiddlewareRegistry()
    registry.register_factory(cors_v0)
    return registry
