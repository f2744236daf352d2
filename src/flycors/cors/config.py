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
"""CORS policy configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_ALLOWED_METHODS: tuple[str, ...] = ("HEAD", "GET", "POST")
DEFAULT_OPTIONS_SUCCESS_STATUS = 204
MAX_AGE_LIMIT = 2**32 - 1


@dataclass(frozen=True)
class CorsConfig:
    """Configuration for Cross-Origin Resource Sharing.

    Attributes:
        allowed_origins: Origins a cross-domain request can be executed from.
            ``"*"`` allows every origin. A pattern may contain one ``*`` that
            stands for zero or more characters (``http://*.example.com``).
            An empty list is treated as ``["*"]``.
        allowed_methods: Methods the client may use cross-origin. An empty
            list falls back to the simple methods (HEAD, GET and POST).
        allowed_headers: Non-simple request headers the client may send.
            ``"*"`` allows all of them. ``Origin`` is always allowed.
        exposed_headers: Response headers the calling script may read.
        max_age: Seconds a preflight result may be cached. ``None`` omits
            ``Access-Control-Max-Age`` entirely; ``0`` is sent as ``0``.
        allow_credentials: Whether requests may carry cookies, HTTP auth or
            client certificates. When set, ``*`` is never sent back; the
            request origin is echoed instead.
        options_passthrough: Forward preflight requests to the next handler
            after annotating them. Turn this on if the application handles
            OPTIONS itself.
        options_success_status: Status returned for terminated preflights.
    """

    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    allowed_methods: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_METHODS))
    allowed_headers: list[str] = field(default_factory=list)
    exposed_headers: list[str] = field(default_factory=list)
    max_age: int | None = None
    allow_credentials: bool = False
    options_passthrough: bool = False
    options_success_status: int = DEFAULT_OPTIONS_SUCCESS_STATUS
