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
"""Named ``cors/v0`` middleware loader.

Turns a raw configuration mapping (as read from YAML/TOML/JSON) into a
handler-wrapping function. Keys use the camelCase wire names
(``allowedOrigins``, ``maxAge`` ...); snake_case names are accepted too.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from flycors.cors.config import (
    DEFAULT_ALLOWED_METHODS,
    DEFAULT_OPTIONS_SUCCESS_STATUS,
    MAX_AGE_LIMIT,
    CorsConfig,
)
from flycors.cors.policy import CorsPolicy
from flycors.kernel.exceptions import CorsConfigError

if TYPE_CHECKING:
    from flycors.middleware.registry import Loader, MiddlewareFactory

CORS_V0 = "flycors.transport.http.cors/v0"


class CorsV0Settings(BaseModel):
    """Schema of the raw ``cors/v0`` configuration."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    allowed_origins: list[str] = Field(default_factory=lambda: ["*"], alias="allowedOrigins")
    allowed_methods: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_METHODS), alias="allowedMethods"
    )
    allowed_headers: list[str] = Field(default_factory=list, alias="allowedHeaders")
    exposed_headers: list[str] = Field(default_factory=list, alias="exposedHeaders")
    max_age: int | None = Field(default=None, ge=0, le=MAX_AGE_LIMIT, alias="maxAge")
    allow_credentials: bool = Field(default=False, alias="allowCredentials")
    options_passthrough: bool = Field(default=False, alias="optionsPassthrough")
    options_success_status: int = Field(
        default=DEFAULT_OPTIONS_SUCCESS_STATUS, ge=100, le=599, alias="optionsSuccessStatus"
    )

    def to_config(self) -> CorsConfig:
        return CorsConfig(
            allowed_origins=list(self.allowed_origins),
            allowed_methods=list(self.allowed_methods),
            allowed_headers=list(self.allowed_headers),
            exposed_headers=list(self.exposed_headers),
            max_age=self.max_age,
            allow_credentials=self.allow_credentials,
            options_passthrough=self.options_passthrough,
            options_success_status=self.options_success_status,
        )


def parse_cors_config(raw: Mapping[str, Any] | None) -> CorsConfig:
    """Validate a raw mapping into a :class:`CorsConfig`.

    Raises:
        CorsConfigError: If the mapping does not match the schema.
    """
    try:
        settings = CorsV0Settings.model_validate(dict(raw or {}))
    except ValidationError as exc:
        raise CorsConfigError(
            f"Invalid {CORS_V0} configuration:\n{exc}",
            context={"errors": exc.errors(include_url=False)},
        ) from exc
    return settings.to_config()


def cors_v0_loader(raw: Mapping[str, Any] | None) -> MiddlewareFactory:
    """Build the policy from *raw* config and return its ``handle`` wrapper."""
    policy = CorsPolicy(parse_cors_config(raw))
    return policy.handle


def cors_v0() -> tuple[str, Loader]:
    """Registration pair for the middleware registry."""
    return CORS_V0, cors_v0_loader
