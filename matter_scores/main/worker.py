#!/usr/bin/env python3
"""
Worker Entry Point - Main Layer

This module serves as the entry point for the Celery worker that refreshes
and rebuilds the score cache. Both API and Worker are application entry
points that belong to the Main layer.
"""

import os

from matter_scores.main.config import get_settings
from matter_scores.shared import (
    configure_logging,
    get_logger,
    update_logging_from_settings,
)

# Configure logging with basic settings first
configure_logging()

settings = get_settings()

update_logging_from_settings(settings)

logger = get_logger(__name__)


def create_worker():
    """
    Configure and return the Celery worker.

    Similar to create_app() in app.py, this function configures
    the worker with proper settings and environment.
    """
    settings = get_settings()

    # Tasks read the broker and database settings from the environment
    os.environ.setdefault("CELERY_BROKER_URL", settings.celery.broker_url)
    os.environ.setdefault("CELERY_RESULT_BACKEND", settings.celery.result_backend_url)

    from matter_scores.infrastructure.services.celery_config import create_celery_app

    worker_app = create_celery_app(
        broker_url=settings.celery.broker_url,
        backend_url=settings.celery.result_backend_url,
    )

    logger.info(
        "worker.configured",
        broker_url=settings.celery.broker_url,
        backend_url=settings.celery.result_backend_url,
        app_name=worker_app.main,
    )

    return worker_app


def main():
    """Main entry point for Celery worker."""

    from matter_scores.infrastructure.services.celery_config import SCORE_CACHE_QUEUE

    logger.info("worker.starting", queue=SCORE_CACHE_QUEUE)

    worker_app = create_worker()

    worker_app.worker_main(
        [
            "worker",
            "--loglevel=info",
            f"--queues={SCORE_CACHE_QUEUE}",
            "--concurrency=4",
            "--max-tasks-per-child=100",
        ]
    )


if __name__ == "__main__":
    main()
