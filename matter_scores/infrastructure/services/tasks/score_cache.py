"""Celery tasks that refresh and rebuild the device score cache."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from matter_scores.infrastructure.services.celery_config import celery_app
from matter_scores.infrastructure.services.tasks.base import CallbackTask, logger
from matter_scores.infrastructure.settings import InfrastructureSettings, get_settings


def build_score_cache_components(
    settings: InfrastructureSettings,
) -> Tuple[Any, Any]:
    """Wire the update use case for a worker process.

    Returns:
        The update use case and the database it writes to (the caller owns
        closing it).
    """
    from matter_scores.application.use_cases.score_cache_use_cases import (
        UpdateDeviceScoreCacheUseCase,
    )
    from matter_scores.domain.services import (
        DeviceAggregator,
        ScoringEngine,
        SpecificationRegistry,
        VersionHistoryEvaluator,
    )
    from matter_scores.infrastructure.database.mongo_database import MongoDatabase
    from matter_scores.infrastructure.registry import YamlSpecificationLoader
    from matter_scores.infrastructure.repositories import (
        DeviceObservationRepository,
        DeviceScoreRepository,
    )

    registry = SpecificationRegistry.from_loader(
        YamlSpecificationLoader(
            device_types_path=settings.scoring.device_types_path,
            clusters_path=settings.scoring.clusters_path,
        )
    )
    aggregator = DeviceAggregator(ScoringEngine(registry))

    database = MongoDatabase(
        mongo_uri=settings.database.mongo_uri,
        db_name=settings.database.database_name,
    )
    update_use_case = UpdateDeviceScoreCacheUseCase(
        observation_repository=DeviceObservationRepository(database),
        score_repository=DeviceScoreRepository(database),
        aggregator=aggregator,
        version_evaluator=VersionHistoryEvaluator(aggregator),
    )
    return update_use_case, database


@celery_app.task(bind=True, base=CallbackTask, name="update_device_score")
def update_device_score(
    self,
    device_id: int,
    endpoints: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Recompute the cached score of one device.

    ``endpoints`` carries a freshly ingested endpoint set as plain dicts; when
    omitted the latest stored version is scored.
    """
    from matter_scores.domain.entities.observation import parse_endpoints

    update_use_case, database = build_score_cache_components(get_settings())
    try:
        observations = parse_endpoints(endpoints) if endpoints is not None else None
        score = asyncio.run(update_use_case.execute(int(device_id), observations))
    finally:
        database.close()

    if score is None:
        return {"device_id": device_id, "status": "removed"}
    return {
        "device_id": device_id,
        "status": "updated",
        "overall_score": score.overall_score,
        "star_rating": score.star_rating,
    }


@celery_app.task(bind=True, base=CallbackTask, name="rebuild_score_cache")
def rebuild_score_cache(self, device_id: Optional[int] = None) -> Dict[str, Any]:
    """Rebuild the cache for one device or for every known device."""
    from matter_scores.application.use_cases.score_cache_use_cases import (
        RebuildScoreCacheUseCase,
    )
    from matter_scores.infrastructure.repositories import DeviceObservationRepository

    settings = get_settings()
    update_use_case, database = build_score_cache_components(settings)
    try:
        rebuild = RebuildScoreCacheUseCase(
            observation_repository=DeviceObservationRepository(database),
            update_use_case=update_use_case,
            batch_size=settings.scoring.rebuild_batch_size,
        )
        processed = asyncio.run(rebuild.execute(device_id))
    finally:
        database.close()

    logger.info(
        "celery.score_cache.rebuilt",
        task_id=self.request.id,
        device_id=device_id,
        processed=processed,
    )
    return {"device_id": device_id, "processed": processed}
