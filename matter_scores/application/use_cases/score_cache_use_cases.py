"""
Score Cache Use Cases - Application Layer

This module defines the use cases that keep the persisted score cache in sync
with device telemetry and serve reads from it. Scores are derived data: every
entry can be recomputed from the stored observations at any time, so a
refresh is an idempotent upsert and a rebuild simply refreshes every device.
"""

from typing import Dict, List, Optional, Sequence

from dependency_injector.wiring import Provide, inject

from matter_scores.domain.entities.observation import EndpointObservation
from matter_scores.domain.entities.score import DeviceScore, RankedDeviceScore
from matter_scores.domain.repositories.device_observation_repository import (
    IDeviceObservationRepository,
)
from matter_scores.domain.repositories.device_score_repository import (
    IDeviceScoreRepository,
)
from matter_scores.domain.services.device_aggregator import DeviceAggregator
from matter_scores.domain.services.version_evaluator import VersionHistoryEvaluator
from matter_scores.shared import get_logger

logger = get_logger(__name__)


class UpdateDeviceScoreCacheUseCase:
    """Recompute and persist the cached score of one device."""

    @inject
    def __init__(
        self,
        observation_repository: IDeviceObservationRepository = Provide[
            "device_observation_repository"
        ],
        score_repository: IDeviceScoreRepository = Provide["device_score_repository"],
        aggregator: DeviceAggregator = Provide["device_aggregator"],
        version_evaluator: VersionHistoryEvaluator = Provide["version_evaluator"],
    ):
        self.observation_repository = observation_repository
        self.score_repository = score_repository
        self.aggregator = aggregator
        self.version_evaluator = version_evaluator

    async def execute(
        self,
        device_id: int,
        endpoints: Optional[Sequence[EndpointObservation]] = None,
    ) -> Optional[DeviceScore]:
        """
        Refresh the cache entry of a device.

        Args:
            device_id: Device to refresh
            endpoints: Endpoint set to score instead of the latest stored
                version (used right after ingestion)

        Returns:
            The stored score, or None when the device has no endpoints and its
            entry was removed
        """
        versions = await self.observation_repository.get_versions(device_id)
        if endpoints is None:
            endpoints = versions[0].endpoints if versions else []

        if not endpoints:
            removed = await self.score_repository.delete(device_id)
            logger.info(
                "score_cache.entry_removed", device_id=device_id, existed=removed
            )
            return None

        score = self.aggregator.aggregate(endpoints)
        score.best_version = self.version_evaluator.find_best_version(versions)

        await self.score_repository.upsert(device_id, score)
        logger.info(
            "score_cache.entry_updated",
            device_id=device_id,
            overall_score=score.overall_score,
            star_rating=score.star_rating,
            is_compliant=score.is_compliant,
            device_types=list(score.scores_by_type),
        )
        return score


class RebuildScoreCacheUseCase:
    """Refresh one device or walk every known device in bounded batches."""

    @inject
    def __init__(
        self,
        observation_repository: IDeviceObservationRepository = Provide[
            "device_observation_repository"
        ],
        update_use_case: UpdateDeviceScoreCacheUseCase = Provide[
            "update_device_score_use_case"
        ],
        batch_size: int = Provide["rebuild_batch_size"],
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.observation_repository = observation_repository
        self.update_use_case = update_use_case
        self.batch_size = batch_size

    async def execute(self, device_id: Optional[int] = None) -> int:
        """
        Rebuild the score cache.

        Devices are paged by id so memory stays bounded by the batch size;
        every device row is written on its own, so an interrupted run leaves
        valid entries behind and can simply be started again. A device whose
        stored telemetry cannot be scored is logged and skipped; storage
        failures abort the run.

        Returns:
            Number of devices refreshed
        """
        if device_id is not None:
            await self.update_use_case.execute(device_id)
            return 1

        logger.info("score_cache.rebuild.started", batch_size=self.batch_size)
        processed = 0
        failed = 0
        after_id: Optional[int] = None

        while True:
            batch = await self.observation_repository.list_device_ids(
                after_id=after_id, limit=self.batch_size
            )
            if not batch:
                break

            for batch_device_id in batch:
                try:
                    await self.update_use_case.execute(batch_device_id)
                except (ValueError, TypeError, KeyError) as exc:
                    failed += 1
                    logger.warning(
                        "score_cache.rebuild.device_skipped",
                        device_id=batch_device_id,
                        error=str(exc),
                    )
                    continue
                processed += 1
            after_id = batch[-1]

            logger.info(
                "score_cache.rebuild.batch_processed",
                batch=len(batch),
                processed=processed,
                failed=failed,
                last_device_id=after_id,
            )
            if len(batch) < self.batch_size:
                break

        logger.info("score_cache.rebuild.completed", processed=processed, failed=failed)
        return processed


class GetCachedScoresUseCase:
    """Bulk lookup of cached scores."""

    @inject
    def __init__(
        self,
        score_repository: IDeviceScoreRepository = Provide["device_score_repository"],
    ):
        self.score_repository = score_repository

    async def execute(self, device_ids: Sequence[int]) -> Dict[int, DeviceScore]:
        """Return the cached scores of the given devices.

        Devices without an entry are left out. A failing store yields an
        empty mapping so callers can render without scores.
        """
        if not device_ids:
            return {}
        try:
            return await self.score_repository.find_by_device_ids(list(device_ids))
        except Exception as exc:
            logger.error(
                "score_cache.lookup_failed",
                device_count=len(device_ids),
                error=str(exc),
                exc_info=exc,
            )
            return {}


class GetDevicesRankedByScoreUseCase:
    """Devices implementing a device type, best cached score first."""

    @inject
    def __init__(
        self,
        score_repository: IDeviceScoreRepository = Provide["device_score_repository"],
    ):
        self.score_repository = score_repository

    async def execute(
        self, device_type_id: int, limit: int = 50, offset: int = 0
    ) -> List[RankedDeviceScore]:
        ranked = await self.score_repository.find_ranked_by_device_type(
            device_type_id, limit=limit, offset=offset
        )
        logger.debug(
            "score_cache.ranked_lookup",
            device_type_id=device_type_id,
            limit=limit,
            offset=offset,
            returned=len(ranked),
        )
        return ranked
