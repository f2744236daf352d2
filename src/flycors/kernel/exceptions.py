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
"""Unified exception hierarchy for flycors.

All exceptions inherit from FlyCorsException so callers can catch one type
at startup. None of these are raised while a request is being handled: a
denied CORS request is expressed by missing response headers, not an error.

Categories:
- ConfigurationException: invalid middleware or policy configuration
- RegistryException: named-middleware lookup and registration failures
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyCorsException(Exception):
    """Base exception for all flycors errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_CONFIG").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(FlyCorsException):
    """Configuration could not be loaded or failed validation."""


class CorsConfigError(ConfigurationException):
    """A CORS policy configuration is invalid.

    Raised when the policy is constructed, never per request.
    """

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CORS_CONFIG", context=context)


# =============================================================================
# Registry Exceptions
# =============================================================================


class RegistryException(FlyCorsException):
    """Named-middleware registry errors."""


class MiddlewareNotFoundException(RegistryException):
    """No loader is registered under the requested middleware name."""


class DuplicateMiddlewareException(RegistryException):
    """A loader is already registered under the given middleware name."""
