"""Celery-backed implementation of the score task dispatcher port."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from matter_scores.domain.ports.score_task_dispatcher import IScoreTaskDispatcher
from matter_scores.infrastructure.services.celery_config import (
    SCORE_CACHE_QUEUE,
    celery_app,
)
from matter_scores.shared import get_logger

logger = get_logger(__name__)


class CeleryScoreTaskDispatcher(IScoreTaskDispatcher):
    """Dispatch score cache tasks through Celery."""

    def __init__(self, queue_name: str = SCORE_CACHE_QUEUE) -> None:
        self._queue_name = queue_name

    async def _send(self, task_name: str, kwargs: Dict[str, Any]) -> str:
        def _send_task() -> Optional[str]:
            logger.info(
                "score_dispatcher.dispatch",
                task=task_name,
                queue=self._queue_name,
                **kwargs,
            )
            result = celery_app.send_task(
                task_name, kwargs=kwargs, queue=self._queue_name
            )
            return result.id

        task_id = await asyncio.to_thread(_send_task)
        return task_id or ""

    async def dispatch_rebuild(self, device_id: Optional[int] = None) -> str:
        return await self._send("rebuild_score_cache", {"device_id": device_id})
