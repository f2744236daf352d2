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
"""StructlogAdapter — default LoggingPort implementation using structlog.

Structlog-backed logging, configured from the ``flycors.logging`` section.

Example::

    flycors:
      logging:
        format: json          # or "console"
        level:
          root: WARNING
          flycors.cors: DEBUG
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any

import structlog

from flycors.core.config import Config, config_properties
from flycors.kernel.exceptions import ConfigurationException

_RENDERERS: dict[str, Any] = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
}


@config_properties(prefix="flycors.logging")
@dataclass
class LoggingProperties:
    """``level.root`` is the root level; other ``level`` keys are logger names."""

    format: str = "console"
    level: dict[str, Any] = field(default_factory=dict)

    def root_level(self) -> str:
        return str(self.level.get("root", "INFO")).upper()

    def logger_levels(self) -> dict[str, str]:
        return {name: str(value).upper() for name, value in self.level.items() if name != "root"}


def _to_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


class StructlogAdapter:
    """:class:`LoggingPort` backed by structlog on top of stdlib logging.

    Events are filtered by the stdlib level of their logger before rendering.
    Loggers are not cached, so module-level ``structlog.get_logger`` proxies
    follow every later call to :meth:`configure`.
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Apply format and levels from *config*.

        ``FLYCORS_LOGGING_FORMAT`` and ``FLYCORS_LOGGING_LEVEL_ROOT`` override
        the file values.

        Raises:
            ConfigurationException: If the format is neither ``console`` nor ``json``.
        """
        props = config.bind(LoggingProperties)
        fmt = str(config.get("flycors.logging.format", props.format)).lower()
        if fmt not in _RENDERERS:
            raise ConfigurationException(
                f"Unknown log format '{fmt}', expected one of {sorted(_RENDERERS)}",
                code="LOGGING_FORMAT",
                context={"format": fmt},
            )

        self._format = fmt
        self._root_level = str(config.get("flycors.logging.level.root", props.root_level())).upper()
        self._module_levels = props.logger_levels()

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                _RENDERERS[fmt](),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=_to_level(self._root_level),
            force=True,
        )
        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the stdlib level of logger *name*; unknown levels fall back to INFO."""
        logging.getLogger(name).setLevel(_to_level(level))
