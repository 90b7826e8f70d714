"""
Domain Errors

Exception types raised by the scoring service. The scoring engine itself never
raises for missing specifications or empty input; these errors cover the
storage and configuration edges around it.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ScoreCacheError(DomainError):
    """Raised when the score cache cannot be written or read."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class RegistryLoadError(DomainError):
    """Raised when specification or capability seed data cannot be loaded."""

    def __init__(self, source: str, details: Optional[Dict[str, Any]] = None):
        message = f"Failed to load registry data from {source}"
        super().__init__(message, details)
