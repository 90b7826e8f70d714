"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .capability_dto import (
    CapabilityDetailsDTO,
    CapabilityInfoDTO,
    CapabilityItemDTO,
    CapabilityResultDTO,
    CapabilitySummaryDTO,
    CategoryBreakdownDTO,
)
from .score_dto import (
    CachedScoresResponseDTO,
    DeviceScoreDTO,
    DeviceTypeScoreDTO,
    RankedDeviceDTO,
    RankedDevicesResponseDTO,
    RebuildRequestDTO,
    RebuildResponseDTO,
    ScoreBreakdownDTO,
)

__all__ = [
    "CapabilityDetailsDTO",
    "CapabilityInfoDTO",
    "CapabilityItemDTO",
    "CapabilityResultDTO",
    "CapabilitySummaryDTO",
    "CategoryBreakdownDTO",
    "CachedScoresResponseDTO",
    "DeviceScoreDTO",
    "DeviceTypeScoreDTO",
    "RankedDeviceDTO",
    "RankedDevicesResponseDTO",
    "RebuildRequestDTO",
    "RebuildResponseDTO",
    "ScoreBreakdownDTO",
]
