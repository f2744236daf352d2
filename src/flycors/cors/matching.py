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
"""Origin matchers and header-name helpers.

Origin patterns are compiled once into small immutable matchers. Matching is
done on the full ``scheme://host[:port]`` string, lower-cased on both sides.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from flycors.kernel.exceptions import CorsConfigError

WILDCARD = "*"


@runtime_checkable
class OriginMatcher(Protocol):
    """Predicate over a lower-cased origin string."""

    def matches(self, origin: str) -> bool: ...


@dataclass(frozen=True)
class AnyOrigin:
    """Matches every origin (the ``"*"`` pattern)."""

    def matches(self, origin: str) -> bool:
        return True


@dataclass(frozen=True)
class ExactOrigin:
    value: str

    def matches(self, origin: str) -> bool:
        return origin == self.value


@dataclass(frozen=True)
class WildcardOrigin:
    """A pattern with a single ``*`` split into prefix and suffix."""

    prefix: str
    suffix: str

    def matches(self, origin: str) -> bool:
        return (
            len(origin) >= len(self.prefix) + len(self.suffix)
            and origin.startswith(self.prefix)
            and origin.endswith(self.suffix)
        )


def compile_origin(pattern: str) -> OriginMatcher:
    """Compile one allowed-origin pattern.

    Raises:
        CorsConfigError: If the pattern holds more than one wildcard.
    """
    normalized = pattern.strip().lower()
    if normalized == WILDCARD:
        return AnyOrigin()

    wildcards = normalized.count(WILDCARD)
    if wildcards > 1:
        raise CorsConfigError(
            f"Origin pattern '{pattern}' contains {wildcards} wildcards; only one is allowed",
            context={"pattern": pattern},
        )
    if wildcards == 1:
        prefix, suffix = normalized.split(WILDCARD, 1)
        return WildcardOrigin(prefix=prefix, suffix=suffix)
    return ExactOrigin(value=normalized)


def compile_origins(patterns: Iterable[str]) -> tuple[OriginMatcher, ...]:
    return tuple(compile_origin(p) for p in patterns)


def canonical_header_key(name: str) -> str:
    """Canonical MIME form of a header name: ``x-custom-header`` -> ``X-Custom-Header``."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.strip().split("-"))


def parse_header_list(value: str | None) -> list[str]:
    """Split a comma-separated header list into canonical names, skipping blanks."""
    if not value:
        return []
    return [canonical_header_key(item) for item in value.split(",") if item.strip()]
