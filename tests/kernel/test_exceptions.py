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
"""Tests for the flycors exception hierarchy."""

import pytest

from flycors.kernel.exceptions import (
    ConfigurationException,
    CorsConfigError,
    DuplicateMiddlewareException,
    FlyCorsException,
    MiddlewareNotFoundException,
    RegistryException,
)


class TestFlyCorsException:
    def test_basic_creation(self):
        exc = FlyCorsException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = FlyCorsException("bad", code="X_001", context={"key": "value"})
        assert exc.code == "X_001"
        assert exc.context["key"] == "value"

    def test_context_not_shared_between_instances(self):
        exc = FlyCorsException("a")
        exc.context["key"] = "value"
        assert FlyCorsException("b").context == {}


class TestCorsConfigError:
    def test_has_fixed_code(self):
        exc = CorsConfigError("bad pattern", context={"pattern": "*.*"})
        assert exc.code == "CORS_CONFIG"
        assert exc.context == {"pattern": "*.*"}

    def test_catchable_as_configuration_exception(self):
        with pytest.raises(ConfigurationException):
            raise CorsConfigError("bad")


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        ("child", "parent"),
        [
            (ConfigurationException, FlyCorsException),
            (CorsConfigError, ConfigurationException),
            (RegistryException, FlyCorsException),
            (MiddlewareNotFoundException, RegistryException),
            (DuplicateMiddlewareException, RegistryException),
        ],
    )
    def test_subclassing(self, child, parent):
        assert issubclass(child, parent)
