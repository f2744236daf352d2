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
"""flycors — CORS policy engine for ASGI applications.

Build a policy and wrap an app::

    from flycors import CorsConfig, CorsPolicy

    policy = CorsPolicy(CorsConfig(allowed_origins=["https://*.example.com"]))
    app = policy.handle(app)

Or declare it by name through the middleware registry (``cors/v0``).
"""

from flycors.cors import CORS_V0, CorsConfig, CorsDecision, CorsPolicy, RequestKind, cors_v0
from flycors.kernel.exceptions import CorsConfigError, FlyCorsException
from flycors.middleware import MiddlewareRegistry, build_pipeline, default_registry

__version__ = "0.1.0"

__all__ = [
    "CORS_V0",
    "CorsConfig",
    "CorsConfigError",
    "CorsDecision",
    "CorsPolicy",
    "FlyCorsException",
    "MiddlewareRegistry",
    "RequestKind",
    "__version__",
    "build_pipeline",
    "cors_v0",
    "default_registry",
]
