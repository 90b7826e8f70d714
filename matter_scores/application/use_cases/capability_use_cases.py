"""Capability analysis of stored devices."""

from dependency_injector.wiring import Provide, inject

from matter_scores.domain.entities.capability import CapabilityResult
from matter_scores.domain.repositories.device_observation_repository import (
    IDeviceObservationRepository,
)
from matter_scores.domain.services.capability_detector import CapabilityDetector
from matter_scores.shared import get_logger

logger = get_logger(__name__)


class AnalyzeDeviceCapabilitiesUseCase:
    @inject
    def __init__(
        self,
        observation_repository: IDeviceObservationRepository = Provide[
            "device_observation_repository"
        ],
        detector: CapabilityDetector = Provide["capability_detector"],
    ):
        self.observation_repository = observation_repository
        self.detector = detector

    async def execute(self, device_id: int) -> CapabilityResult:
        """Detect the capabilities of the latest reported version of a device.

        A device without stored versions gets an empty analysis.
        """
        versions = await self.observation_repository.get_versions(device_id)
        endpoints = versions[0].endpoints if versions else []
        result = self.detector.analyze(endpoints)
        logger.debug(
            "capabilities.device_analyzed",
            device_id=device_id,
            category=result.device_category,
            supported=result.summary.supported,
            total=result.summary.total,
        )
        return result
