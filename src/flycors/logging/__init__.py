"""flycors Logging — logging port and structlog adapter."""

from flycors.logging.port import LoggingPort
from flycors.logging.structlog_adapter import LoggingProperties, StructlogAdapter

__all__ = ["LoggingPort", "LoggingProperties", "StructlogAdapter"]
