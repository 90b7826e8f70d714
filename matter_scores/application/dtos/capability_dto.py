"""DTOs for device capability analysis responses."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from matter_scores.domain.entities.capability import (
    CapabilityDetails,
    CapabilityInfo,
    CapabilityItem,
    CapabilityResult,
    CategoryBreakdown,
)


class CapabilityItemDTO(BaseModel):
    """A command or attribute behind a capability."""

    id: int
    technical: str
    friendly: str
    implemented: Optional[bool] = Field(
        default=None, description="None when the device did not report its lists"
    )
    optional: bool = False

    @classmethod
    def from_domain(cls, item: CapabilityItem) -> "CapabilityItemDTO":
        return cls(**item.to_dict())


class CapabilityDetailsDTO(BaseModel):
    cluster_id: int
    cluster_name: str
    spec_version: Optional[str] = None
    actions: List[CapabilityItemDTO] = Field(default_factory=list)
    statuses: List[CapabilityItemDTO] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, details: CapabilityDetails) -> "CapabilityDetailsDTO":
        return cls(
            cluster_id=details.cluster_id,
            cluster_name=details.cluster_name,
            spec_version=details.spec_version,
            actions=[CapabilityItemDTO.from_domain(item) for item in details.actions],
            statuses=[
                CapabilityItemDTO.from_domain(item) for item in details.statuses
            ],
            features=list(details.features),
        )


class CapabilityInfoDTO(BaseModel):
    key: str
    label: str
    category: str
    emoji: str = ""
    icon: str = ""
    description: str = ""
    spec_version: Optional[str] = None
    details: Optional[CapabilityDetailsDTO] = None

    @classmethod
    def from_domain(cls, info: CapabilityInfo) -> "CapabilityInfoDTO":
        return cls(
            key=info.key,
            label=info.label,
            category=info.category,
            emoji=info.emoji,
            icon=info.icon,
            description=info.description,
            spec_version=info.spec_version,
            details=(
                CapabilityDetailsDTO.from_domain(info.details) if info.details else None
            ),
        )


def _infos(infos: Dict[str, CapabilityInfo]) -> Dict[str, CapabilityInfoDTO]:
    return {key: CapabilityInfoDTO.from_domain(info) for key, info in infos.items()}


class CategoryBreakdownDTO(BaseModel):
    label: str
    supported: Dict[str, CapabilityInfoDTO] = Field(default_factory=dict)
    unsupported: Dict[str, CapabilityInfoDTO] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, breakdown: CategoryBreakdown) -> "CategoryBreakdownDTO":
        return cls(
            label=breakdown.label,
            supported=_infos(breakdown.supported),
            unsupported=_infos(breakdown.unsupported),
        )


class CapabilitySummaryDTO(BaseModel):
    total: int = 0
    supported: int = 0
    percentage: int = Field(default=0, ge=0, le=100)


class CapabilityResultDTO(BaseModel):
    """DTO representing the capabilities of one device."""

    device_id: Optional[int] = None
    device_category: Optional[str] = None
    supported: Dict[str, CapabilityInfoDTO] = Field(default_factory=dict)
    unsupported: Dict[str, CapabilityInfoDTO] = Field(default_factory=dict)
    by_category: Dict[str, CategoryBreakdownDTO] = Field(default_factory=dict)
    summary: CapabilitySummaryDTO = Field(default_factory=CapabilitySummaryDTO)
    standouts: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls, result: CapabilityResult, device_id: Optional[int] = None
    ) -> "CapabilityResultDTO":
        return cls(
            device_id=device_id,
            device_category=result.device_category,
            supported=_infos(result.supported),
            unsupported=_infos(result.unsupported),
            by_category={
                key: CategoryBreakdownDTO.from_domain(breakdown)
                for key, breakdown in result.by_category.items()
            },
            summary=CapabilitySummaryDTO(
                total=result.summary.total,
                supported=result.summary.supported,
                percentage=result.summary.percentage,
            ),
            standouts=list(result.standouts),
            missing=list(result.missing),
        )
