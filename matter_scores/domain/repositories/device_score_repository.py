"""
Domain Repository Interface - Device Score Cache

This module defines the repository interface for the derived per-device score
cache.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from matter_scores.domain.entities.score import DeviceScore, RankedDeviceScore


class IDeviceScoreRepository(ABC):
    """Interface for the device score cache."""

    @abstractmethod
    async def upsert(self, device_id: int, score: DeviceScore) -> None:
        """Create or replace the cached score of a device."""
        pass

    @abstractmethod
    async def delete(self, device_id: int) -> bool:
        """Remove the cached score of a device."""
        pass

    @abstractmethod
    async def find_by_device_ids(
        self, device_ids: Sequence[int]
    ) -> Dict[int, DeviceScore]:
        """Get cached scores keyed by device id; unknown ids are omitted."""
        pass

    @abstractmethod
    async def find_ranked_by_device_type(
        self, device_type_id: int, limit: int = 50, offset: int = 0
    ) -> List[RankedDeviceScore]:
        """Get devices scored for a device type, best overall score first."""
        pass
