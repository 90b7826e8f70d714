"""Domain port for queueing score cache work on background workers."""

from __future__ import annotations

from typing import Optional, Protocol


class IScoreTaskDispatcher(Protocol):
    """Defines how cache rebuilds are handed to workers."""

    async def dispatch_rebuild(self, device_id: Optional[int] = None) -> str:
        """Queue a rebuild of one device or of the whole cache.

        Returns:
            Identifier of the dispatched task (if available).
        """
        ...
