"""Base Celery task for the score cache workers."""

import structlog
from celery import Task

logger = structlog.get_logger(__name__)


def _device_context(args, kwargs):
    device_id = kwargs.get("device_id") if kwargs else None
    if device_id is None and args:
        device_id = args[0]
    return {"device_id": device_id}


class CallbackTask(Task):
    """Logs the outcome of every score cache task with its device context."""

    def on_success(self, retval, task_id, args, kwargs):
        logger.info(
            "score_cache.task.succeeded",
            task=self.name,
            task_id=task_id,
            result=retval,
            **_device_context(args, kwargs),
        )

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(
            "score_cache.task.failed",
            task=self.name,
            task_id=task_id,
            error=str(exc),
            traceback=einfo.traceback,
            exc_info=exc,
            **_device_context(args, kwargs),
        )
