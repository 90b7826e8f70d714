"""
Infrastructure Services - Celery Configuration

This module contains the Celery configuration for the background score cache
refreshes and rebuilds.
"""

import os
from typing import Optional

from celery import Celery

SCORE_CACHE_QUEUE = "score_cache"


def create_celery_app(
    broker_url: Optional[str] = None,
    backend_url: Optional[str] = None,
) -> Celery:
    """
    Create and configure Celery application.

    Args:
        broker_url: Message broker URL (uses env var if not provided)
        backend_url: Result backend URL (uses env var if not provided)

    Returns:
        Configured Celery application
    """
    # Use provided URLs or fall back to environment variables with defaults
    effective_broker = broker_url or os.getenv(
        "CELERY_BROKER_URL", "redis://redis:6379/0"
    )
    effective_backend = backend_url or os.getenv(
        "CELERY_RESULT_BACKEND", "redis://redis:6379/1"
    )

    app = Celery(
        "matter_scores_worker",
        broker=effective_broker,
        backend=effective_backend,
        include=["matter_scores.infrastructure.services.tasks.score_cache"],
    )

    app.conf.update(
        # Task configuration
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        result_expires=3600,  # 1 hour
        task_routes={
            "update_device_score": {"queue": SCORE_CACHE_QUEUE},
            "rebuild_score_cache": {"queue": SCORE_CACHE_QUEUE},
        },
        # Worker configuration
        worker_prefetch_multiplier=1,
        task_acks_late=True,
        worker_max_tasks_per_child=100,
        task_default_retry_delay=60,  # 1 minute
        task_max_retries=3,
    )

    return app


celery_app = create_celery_app()
