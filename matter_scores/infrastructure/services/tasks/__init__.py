"""Celery task implementations for infrastructure services."""

from .base import CallbackTask, logger
from .score_cache import (
    build_score_cache_components,
    rebuild_score_cache,
    update_device_score,
)

__all__ = [
    "CallbackTask",
    "build_score_cache_components",
    "logger",
    "rebuild_score_cache",
    "update_device_score",
]
