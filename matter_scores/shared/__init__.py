"""
Shared module - Cross-cutting concerns / Shared Layer

This module provides constants, enums and the logging bootstrap used across
every layer of the scoring service.

Following Clean Architecture principles:
- Shared module contains only *cross-cutting concerns*
- It must not depend on Infrastructure or Frameworks
"""

from .consts import (
    ROOT_ENDPOINT_ID,
    SYSTEM_DEVICE_TYPE_LIMIT,
    EnumEnvironment,
    EnumLogLevel,
)
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "EnumEnvironment",
    "EnumLogLevel",
    "ROOT_ENDPOINT_ID",
    "SYSTEM_DEVICE_TYPE_LIMIT",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
