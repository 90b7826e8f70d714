"""Infrastructure services package."""

from . import tasks
from .celery_config import celery_app
from .score_task_dispatcher import CeleryScoreTaskDispatcher

__all__ = ["celery_app", "tasks", "CeleryScoreTaskDispatcher"]
