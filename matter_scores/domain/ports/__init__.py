"""Domain ports package."""

from .capability_catalog_loader import ICapabilityCatalogLoader
from .score_task_dispatcher import IScoreTaskDispatcher
from .specification_loader import ISpecificationLoader

__all__ = ["ICapabilityCatalogLoader", "IScoreTaskDispatcher", "ISpecificationLoader"]
