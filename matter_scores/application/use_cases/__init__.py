"""
Use Cases Package - Application Layer

This package contains use cases that implement the business logic
of the application. Use cases orchestrate the flow of data between the
scoring engine and the repositories.
"""

from .capability_use_cases import AnalyzeDeviceCapabilitiesUseCase
from .score_cache_use_cases import (
    GetCachedScoresUseCase,
    GetDevicesRankedByScoreUseCase,
    RebuildScoreCacheUseCase,
    UpdateDeviceScoreCacheUseCase,
)

__all__ = [
    "AnalyzeDeviceCapabilitiesUseCase",
    "GetCachedScoresUseCase",
    "GetDevicesRankedByScoreUseCase",
    "RebuildScoreCacheUseCase",
    "UpdateDeviceScoreCacheUseCase",
]
