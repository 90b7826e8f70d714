"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from matter_scores.application.use_cases.capability_use_cases import (
    AnalyzeDeviceCapabilitiesUseCase,
)
from matter_scores.application.use_cases.score_cache_use_cases import (
    GetCachedScoresUseCase,
    GetDevicesRankedByScoreUseCase,
    RebuildScoreCacheUseCase,
    UpdateDeviceScoreCacheUseCase,
)
from matter_scores.domain.services import (
    CapabilityDetector,
    DeviceAggregator,
    ScoringEngine,
    SpecificationRegistry,
    VersionHistoryEvaluator,
)
from matter_scores.infrastructure.database import MongoDatabase
from matter_scores.infrastructure.registry import (
    YamlCapabilityCatalogLoader,
    YamlSpecificationLoader,
)
from matter_scores.infrastructure.repositories import (
    DeviceObservationRepository,
    DeviceScoreRepository,
)
from matter_scores.infrastructure.services.score_task_dispatcher import (
    CeleryScoreTaskDispatcher,
)
from matter_scores.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()

    # Registry and engine (built once, read-only afterwards)
    specification_loader = providers.Singleton(
        YamlSpecificationLoader,
        device_types_path=config.scoring.device_types_path,
        clusters_path=config.scoring.clusters_path,
    )

    capability_catalog_loader = providers.Singleton(
        YamlCapabilityCatalogLoader,
        path=config.scoring.capabilities_path,
    )

    specification_registry = providers.Singleton(
        SpecificationRegistry.from_loader,
        loader=specification_loader,
    )

    capability_catalog = providers.Singleton(
        lambda loader: loader.load(),
        capability_catalog_loader,
    )

    scoring_engine = providers.Singleton(
        ScoringEngine,
        registry=specification_registry,
    )

    device_aggregator = providers.Singleton(
        DeviceAggregator,
        engine=scoring_engine,
    )

    version_evaluator = providers.Singleton(
        VersionHistoryEvaluator,
        aggregator=device_aggregator,
    )

    capability_detector = providers.Singleton(
        CapabilityDetector,
        registry=specification_registry,
        catalog=capability_catalog,
    )

    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
    )

    device_score_repository = providers.Singleton(
        DeviceScoreRepository,
        mongo_database=mongo_database,
    )

    device_observation_repository = providers.Singleton(
        DeviceObservationRepository,
        mongo_database=mongo_database,
    )

    score_task_dispatcher = providers.Singleton(CeleryScoreTaskDispatcher)

    rebuild_batch_size = providers.Callable(int, config.scoring.rebuild_batch_size)

    # Application (use cases)
    update_device_score_use_case = providers.Factory(
        UpdateDeviceScoreCacheUseCase,
        observation_repository=device_observation_repository,
        score_repository=device_score_repository,
        aggregator=device_aggregator,
        version_evaluator=version_evaluator,
    )

    rebuild_score_cache_use_case = providers.Factory(
        RebuildScoreCacheUseCase,
        observation_repository=device_observation_repository,
        update_use_case=update_device_score_use_case,
        batch_size=rebuild_batch_size,
    )

    get_cached_scores_use_case = providers.Factory(
        GetCachedScoresUseCase,
        score_repository=device_score_repository,
    )

    get_devices_ranked_use_case = providers.Factory(
        GetDevicesRankedByScoreUseCase,
        score_repository=device_score_repository,
    )

    analyze_capabilities_use_case = providers.Factory(
        AnalyzeDeviceCapabilitiesUseCase,
        observation_repository=device_observation_repository,
        detector=capability_detector,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for external resources.

    Loads the specification registry and capability catalog eagerly so bad
    seed data fails the startup instead of the first request, then makes
    sure the MongoDB indexes exist.
    """
    container = get_container()

    mongo_database = container.mongo_database()

    try:
        registry = container.specification_registry()
        catalog = container.capability_catalog()
        logger.info(
            "container.registry.loaded",
            device_types=len(registry.device_types),
            clusters=len(registry.clusters),
            capabilities=len(catalog.capabilities),
        )

        logger.info("container.mongo.ensure_connection")
        await mongo_database.create_indexes()

        logger.info("container.resources.initialized")
        yield container

    finally:
        logger.info("container.mongo.close")
        mongo_database.close()
        logger.info("container.resources.shutdown")
