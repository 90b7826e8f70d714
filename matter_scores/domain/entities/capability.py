"""Domain entities for user-facing device capabilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ClusterRole(str, Enum):
    SERVER = "server"
    CLIENT = "client"


@dataclass(frozen=True)
class CapabilityTrigger:
    """A cluster whose presence (and optionally feature bits) enables a capability."""

    cluster_id: int
    role: ClusterRole = ClusterRole.SERVER
    features: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CapabilityDefinition:
    key: str
    label: str
    category: str = "other"
    emoji: str = ""
    icon: str = ""
    description: str = ""
    triggers: Tuple[CapabilityTrigger, ...] = ()
    # Friendly labels keyed by command id / attribute id.
    actions: Tuple[Tuple[int, str], ...] = ()
    statuses: Tuple[Tuple[int, str], ...] = ()


@dataclass(frozen=True)
class CapabilityCatalog:
    """Ordered catalog of capabilities and the categories they belong to."""

    categories: Tuple[Tuple[str, str], ...] = ()
    capabilities: Tuple[CapabilityDefinition, ...] = ()
    relevant_by_category: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()

    def relevant_capabilities(self, category: Optional[str]) -> Tuple[str, ...]:
        if category is None:
            return ()
        for category_key, keys in self.relevant_by_category:
            if category_key == category:
                return keys
        return ()


@dataclass
class CapabilityItem:
    """A command ("action") or attribute ("status") shown in capability details."""

    id: int
    technical: str
    friendly: str
    implemented: Optional[bool]
    optional: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "technical": self.technical,
            "friendly": self.friendly,
            "implemented": self.implemented,
            "optional": self.optional,
        }


@dataclass
class CapabilityDetails:
    cluster_id: int
    cluster_name: str
    spec_version: Optional[str] = None
    actions: List[CapabilityItem] = field(default_factory=list)
    statuses: List[CapabilityItem] = field(default_factory=list)
    features: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "cluster_name": self.cluster_name,
            "spec_version": self.spec_version,
            "actions": [item.to_dict() for item in self.actions],
            "statuses": [item.to_dict() for item in self.statuses],
            "features": list(self.features),
        }


@dataclass
class CapabilityInfo:
    key: str
    label: str
    category: str
    emoji: str = ""
    icon: str = ""
    description: str = ""
    spec_version: Optional[str] = None
    details: Optional[CapabilityDetails] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "category": self.category,
            "emoji": self.emoji,
            "icon": self.icon,
            "description": self.description,
            "spec_version": self.spec_version,
            "details": self.details.to_dict() if self.details else None,
        }


@dataclass
class CategoryBreakdown:
    label: str
    supported: Dict[str, CapabilityInfo] = field(default_factory=dict)
    unsupported: Dict[str, CapabilityInfo] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.supported and not self.unsupported


@dataclass
class CapabilitySummary:
    total: int = 0
    supported: int = 0
    percentage: int = 0


@dataclass
class CapabilityResult:
    supported: Dict[str, CapabilityInfo] = field(default_factory=dict)
    unsupported: Dict[str, CapabilityInfo] = field(default_factory=dict)
    by_category: Dict[str, CategoryBreakdown] = field(default_factory=dict)
    summary: CapabilitySummary = field(default_factory=CapabilitySummary)
    standouts: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    device_category: Optional[str] = None
