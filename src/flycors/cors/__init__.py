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
"""flycors CORS — policy engine, origin matching and the ``cors/v0`` loader."""

from flycors.cors.config import CorsConfig
from flycors.cors.loader import CORS_V0, CorsV0Settings, cors_v0, cors_v0_loader, parse_cors_config
from flycors.cors.matching import (
    AnyOrigin,
    ExactOrigin,
    OriginMatcher,
    WildcardOrigin,
    canonical_header_key,
    compile_origin,
)
from flycors.cors.policy import CorsDecision, CorsPolicy, RequestKind

__all__ = [
    "CORS_V0",
    "AnyOrigin",
    "CorsConfig",
    "CorsDecision",
    "CorsPolicy",
    "CorsV0Settings",
    "ExactOrigin",
    "OriginMatcher",
    "RequestKind",
    "WildcardOrigin",
    "canonical_header_key",
    "compile_origin",
    "cors_v0",
    "cors_v0_loader",
    "parse_cors_config",
]
