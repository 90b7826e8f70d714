"""
Domain Repository Interface - Device Observations

Read access to the telemetry recorded per device and hardware/software
version.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from matter_scores.domain.entities.observation import DeviceVersion


class IDeviceObservationRepository(ABC):
    """Interface for reading device telemetry observations."""

    @abstractmethod
    async def list_device_ids(
        self, after_id: Optional[int] = None, limit: int = 100
    ) -> List[int]:
        """Get known device ids in ascending order, starting after ``after_id``."""
        pass

    @abstractmethod
    async def get_versions(self, device_id: int) -> List[DeviceVersion]:
        """Get every recorded version of a device with its endpoints, newest first."""
        pass
