"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .capabilities_controller import router as capabilities_router
from .scores_controller import router as scores_router

__all__ = ["capabilities_router", "scores_router"]
