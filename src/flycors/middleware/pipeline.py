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
"""Middleware pipeline — chains named middlewares around an ASGI app.

A pipeline is declared as a list of ``{"uses": <name>, "with": {...}}``
entries, for example in YAML::

    flycors:
      http:
        middleware:
          - uses: flycors.transport.http.cors/v0
            with:
              allowedOrigins: ["https://*.example.com"]
              allowCredentials: true

The first entry is the outermost wrapper.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from starlette.types import ASGIApp

from flycors.core.config import Config
from flycors.kernel.exceptions import ConfigurationException
from flycors.middleware.registry import MiddlewareFactory, MiddlewareRegistry, default_registry

MIDDLEWARE_CONFIG_KEY = "flycors.http.middleware"


@dataclass(frozen=True)
class MiddlewareSpec:
    """One named middleware plus its raw configuration."""

    uses: str
    with_: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> MiddlewareSpec:
        uses = raw.get("uses")
        if not isinstance(uses, str) or not uses:
            raise ConfigurationException(
                "Middleware entry is missing a 'uses' name",
                code="MIDDLEWARE_INVALID",
                context={"entry": dict(raw)},
            )
        options = raw.get("with") or {}
        if not isinstance(options, Mapping):
            raise ConfigurationException(
                f"Middleware '{uses}' has a non-mapping 'with' section",
                code="MIDDLEWARE_INVALID",
                context={"name": uses},
            )
        return cls(uses=uses, with_=dict(options))


def resolve(
    specs: Sequence[MiddlewareSpec | Mapping[str, Any]],
    registry: MiddlewareRegistry | None = None,
) -> list[MiddlewareFactory]:
    """Resolve every spec to a middleware factory, validating all configs up front."""
    registry = registry or default_registry()
    factories: list[MiddlewareFactory] = []
    for spec in specs:
        if not isinstance(spec, MiddlewareSpec):
            spec = MiddlewareSpec.from_mapping(spec)
        factories.append(registry.load(spec.uses, spec.with_))
    return factories


def build_pipeline(
    app: ASGIApp,
    specs: Sequence[MiddlewareSpec | Mapping[str, Any]],
    registry: MiddlewareRegistry | None = None,
) -> ASGIApp:
    """Wrap *app* with the middlewares named in *specs*."""
    wrapped = app
    for factory in reversed(resolve(specs, registry)):
        wrapped = factory(wrapped)
    return wrapped


def pipeline_from_config(
    app: ASGIApp,
    config: Config,
    registry: MiddlewareRegistry | None = None,
) -> ASGIApp:
    """Build the pipeline declared under ``flycors.http.middleware``."""
    return build_pipeline(app, middleware_specs(config), registry)


def middleware_specs(config: Config) -> list[MiddlewareSpec]:
    entries = config.get(MIDDLEWARE_CONFIG_KEY, [])
    if not isinstance(entries, list):
        raise ConfigurationException(
            f"'{MIDDLEWARE_CONFIG_KEY}' must be a list of middleware entries",
            code="MIDDLEWARE_INVALID",
        )
    return [MiddlewareSpec.from_mapping(entry) for entry in entries]
