"""
Domain Entities Package

This package contains the specification, observation, score and capability
entities of the scoring domain.
"""

from .capability import (
    CapabilityCatalog,
    CapabilityDefinition,
    CapabilityDetails,
    CapabilityInfo,
    CapabilityItem,
    CapabilityResult,
    CapabilitySummary,
    CapabilityTrigger,
    CategoryBreakdown,
    ClusterRole,
)
from .errors import DomainError, RegistryLoadError, ScoreCacheError
from .observation import (
    ClusterDetail,
    DeviceVersion,
    EndpointObservation,
    normalize_device_type_id,
)
from .registry import (
    ClusterAttribute,
    ClusterCommand,
    ClusterFeature,
    ClusterSpec,
    CommandDirection,
    DeviceTypeSpec,
    ScoringWeights,
)
from .score import DeviceScore, DeviceTypeScore, GapResult, RankedDeviceScore

__all__ = [
    "CapabilityCatalog",
    "CapabilityDefinition",
    "CapabilityDetails",
    "CapabilityInfo",
    "CapabilityItem",
    "CapabilityResult",
    "CapabilitySummary",
    "CapabilityTrigger",
    "CategoryBreakdown",
    "ClusterRole",
    "ClusterAttribute",
    "ClusterCommand",
    "ClusterDetail",
    "ClusterFeature",
    "ClusterSpec",
    "CommandDirection",
    "DeviceScore",
    "DeviceTypeScore",
    "DeviceTypeSpec",
    "DeviceVersion",
    "EndpointObservation",
    "GapResult",
    "RankedDeviceScore",
    "ScoringWeights",
    "normalize_device_type_id",
    "DomainError",
    "RegistryLoadError",
    "ScoreCacheError",
]
