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
"""flycors Middleware — named-middleware registry and pipeline."""

from flycors.middleware.pipeline import (
    MIDDLEWARE_CONFIG_KEY,
    MiddlewareSpec,
    build_pipeline,
    middleware_specs,
    pipeline_from_config,
    resolve,
)
from flycors.middleware.registry import (
    Loader,
    MiddlewareFactory,
    MiddlewareRegistry,
    default_registry,
)

__all__ = [
    "MIDDLEWARE_CONFIG_KEY",
    "Loader",
    "MiddlewareFactory",
    "MiddlewareRegistry",
    "MiddlewareSpec",
    "build_pipeline",
    "default_registry",
    "middleware_specs",
    "pipeline_from_config",
    "resolve",
]
