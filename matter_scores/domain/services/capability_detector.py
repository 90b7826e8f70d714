"""
Domain Service - Capability Detector

Maps the clusters a device exposes to user-facing capabilities such as
"Dimming" or "Energy monitoring". Detection works on plain cluster lists and
gets more precise when the telemetry carries per-cluster details (feature
bitmap, accepted commands, attribute list). When those details are missing a
capability is judged on cluster presence alone.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

import structlog

from matter_scores.domain.entities.capability import (
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
from matter_scores.domain.entities.observation import ClusterDetail, EndpointObservation
from matter_scores.domain.services.specification_registry import SpecificationRegistry

logger = structlog.get_logger(__name__)

# Device type id -> coarse device category used to narrow relevant capabilities.
CATEGORY_BY_DEVICE_TYPE: Mapping[int, str] = {
    256: "lighting",
    257: "lighting",
    268: "lighting",
    269: "lighting",
    271: "lighting",
    272: "lighting",
    266: "plugs",
    267: "plugs",
    259: "switches",
    260: "switches",
    261: "switches",
    15: "switches",
    262: "sensors",
    263: "sensors",
    770: "sensors",
    775: "sensors",
    21: "sensors",
    1026: "sensors",
    769: "climate",
    43: "climate",
    114: "climate",
    10: "locks",
    11: "locks",
    514: "window_coverings",
    40: "media",
    35: "media",
    34: "media",
    36: "media",
    17: "safety",
}

# Capabilities worth highlighting when present, most notable first.
STANDOUT_PRIORITY = (
    "energy_monitoring",
    "binding",
    "full_color",
    "occupancy_response",
    "air_quality_sensing",
    "scheduling",
)

NOTABLE_MISSING: Mapping[str, Sequence[str]] = {
    "lighting": ("full_color", "dimming", "energy_monitoring"),
    "plugs": ("energy_monitoring", "dimming"),
    "climate": ("humidity_sensing", "scheduling"),
    "locks": ("pin_codes", "user_management"),
}
DEFAULT_NOTABLE_MISSING = ("binding", "energy_monitoring")

MAX_HIGHLIGHTS = 3

# Attribute ids from 0xFFF8 up are global (cluster revision, feature map, ...).
GLOBAL_ATTRIBUTE_START = 0xFFF8

_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_ACRONYM_WORD = re.compile(r"([A-Z]+)([A-Z][a-z])")


def humanize_technical_name(name: str) -> str:
    """``OffWithEffect`` -> ``Off with effect``."""
    spaced = _LOWER_UPPER.sub(r"\1 \2", name)
    spaced = _ACRONYM_WORD.sub(r"\1 \2", spaced)
    lowered = spaced.lower()
    return lowered[:1].upper() + lowered[1:]


@dataclass
class ObservedClusters:
    """Clusters of all endpoints of a device, unioned per role."""

    server: Set[int] = field(default_factory=set)
    client: Set[int] = field(default_factory=set)
    server_details: Dict[int, ClusterDetail] = field(default_factory=dict)
    client_details: Dict[int, ClusterDetail] = field(default_factory=dict)

    @classmethod
    def collect(cls, endpoints: Iterable[EndpointObservation]) -> "ObservedClusters":
        observed = cls()
        for endpoint in endpoints:
            observed.server.update(endpoint.server_clusters)
            observed.client.update(endpoint.client_clusters)
            # A cluster repeated on several endpoints keeps the last detail seen.
            for detail in endpoint.server_cluster_details or []:
                observed.server_details[detail.cluster_id] = detail
            for detail in endpoint.client_cluster_details or []:
                observed.client_details[detail.cluster_id] = detail
        return observed

    def has(self, trigger: CapabilityTrigger) -> bool:
        if trigger.role == ClusterRole.CLIENT:
            return trigger.cluster_id in self.client
        return trigger.cluster_id in self.server

    def detail(self, trigger: CapabilityTrigger) -> Optional[ClusterDetail]:
        if trigger.role == ClusterRole.CLIENT:
            return self.client_details.get(trigger.cluster_id)
        return self.server_details.get(trigger.cluster_id)


class CapabilityDetector:
    def __init__(self, registry: SpecificationRegistry, catalog: CapabilityCatalog):
        self._registry = registry
        self._catalog = catalog

    @property
    def catalog(self) -> CapabilityCatalog:
        return self._catalog

    def analyze(self, endpoints: Sequence[EndpointObservation]) -> CapabilityResult:
        observed = ObservedClusters.collect(endpoints)
        device_category = infer_device_category(endpoints)
        relevant = set(self._catalog.relevant_capabilities(device_category))

        result = CapabilityResult(device_category=device_category)
        by_category: Dict[str, CategoryBreakdown] = {
            key: CategoryBreakdown(label=label)
            for key, label in self._catalog.categories
        }

        for definition in self._catalog.capabilities:
            if relevant and definition.key not in relevant:
                continue

            info = CapabilityInfo(
                key=definition.key,
                label=definition.label,
                category=definition.category,
                emoji=definition.emoji,
                icon=definition.icon,
                description=definition.description,
                spec_version=self._primary_spec_version(definition),
            )
            bucket = by_category.get(definition.category)

            if self.is_supported(definition, observed):
                info.details = self.build_details(definition, observed)
                result.supported[definition.key] = info
                if bucket is not None:
                    bucket.supported[definition.key] = info
            else:
                result.unsupported[definition.key] = info
                if bucket is not None:
                    bucket.unsupported[definition.key] = info

        result.by_category = {
            key: bucket for key, bucket in by_category.items() if not bucket.is_empty
        }

        total = len(result.supported) + len(result.unsupported)
        supported_count = len(result.supported)
        result.summary = CapabilitySummary(
            total=total,
            supported=supported_count,
            percentage=_percentage(supported_count, total),
        )
        result.standouts = identify_standouts(result.supported)
        result.missing = identify_missing(result.unsupported, device_category)

        logger.debug(
            "capabilities.analyzed",
            category=device_category,
            supported=supported_count,
            total=total,
        )
        return result

    def is_supported(
        self, definition: CapabilityDefinition, observed: ObservedClusters
    ) -> bool:
        """Any trigger satisfied is enough; so is any one of its feature bits."""
        for trigger in definition.triggers:
            if not observed.has(trigger):
                continue
            if not trigger.features:
                return True

            detail = observed.detail(trigger)
            if detail is None or detail.feature_map is None:
                # No feature data to check against; presence decides.
                return True

            for code in trigger.features:
                if self._registry.has_feature(
                    trigger.cluster_id, code, detail.feature_map
                ):
                    return True
        return False

    def build_details(
        self, definition: CapabilityDefinition, observed: ObservedClusters
    ) -> Optional[CapabilityDetails]:
        """Describe the first present trigger cluster of a supported capability.

        Returns ``None`` when there is nothing worth showing.
        """
        for trigger in definition.triggers:
            if not observed.has(trigger):
                continue

            cluster_id = trigger.cluster_id
            detail = observed.detail(trigger)
            actions = self._actions(cluster_id, definition, detail)
            statuses = self._statuses(cluster_id, definition, detail)
            features = self._enabled_features(cluster_id, detail)

            if not actions and not statuses and not features:
                return None

            return CapabilityDetails(
                cluster_id=cluster_id,
                cluster_name=self._registry.get_cluster_name(cluster_id),
                spec_version=self._registry.get_cluster_spec_version(cluster_id),
                actions=actions,
                statuses=statuses,
                features=features,
            )
        return None

    def _primary_spec_version(self, definition: CapabilityDefinition) -> Optional[str]:
        if not definition.triggers:
            return None
        primary = definition.triggers[0]
        return self._registry.get_cluster_spec_version(primary.cluster_id)

    def _actions(
        self,
        cluster_id: int,
        definition: CapabilityDefinition,
        detail: Optional[ClusterDetail],
    ) -> List[CapabilityItem]:
        friendly = dict(definition.actions)
        accepted = detail.accepted_commands if detail else []
        implemented = set(accepted)
        spec_commands = self._registry.get_cluster_commands(cluster_id)

        if spec_commands:
            return [
                CapabilityItem(
                    id=command.id,
                    technical=command.name,
                    friendly=friendly.get(command.id)
                    or humanize_technical_name(command.name),
                    implemented=(command.id in implemented) if accepted else None,
                    optional=command.optional,
                )
                for command in spec_commands
            ]

        if accepted:
            items = []
            for command_id in accepted:
                technical = self._command_name(cluster_id, command_id)
                items.append(
                    CapabilityItem(
                        id=command_id,
                        technical=technical,
                        friendly=friendly.get(command_id)
                        or humanize_technical_name(technical),
                        implemented=True,
                        optional=False,
                    )
                )
            return items

        return [
            CapabilityItem(
                id=command_id,
                technical=self._command_name(cluster_id, command_id),
                friendly=label,
                implemented=None,
                optional=False,
            )
            for command_id, label in definition.actions
        ]

    def _statuses(
        self,
        cluster_id: int,
        definition: CapabilityDefinition,
        detail: Optional[ClusterDetail],
    ) -> List[CapabilityItem]:
        friendly = dict(definition.statuses)
        reported = detail.attributes if detail else []
        implemented = set(reported)
        spec_attributes = self._registry.get_cluster_attributes(cluster_id)

        if spec_attributes:
            return [
                CapabilityItem(
                    id=attribute.id,
                    technical=attribute.name,
                    friendly=friendly.get(attribute.id)
                    or humanize_technical_name(attribute.name),
                    implemented=(attribute.id in implemented) if reported else None,
                    optional=attribute.optional,
                )
                for attribute in spec_attributes
            ]

        if reported:
            items = []
            for attribute_id in reported:
                if attribute_id >= GLOBAL_ATTRIBUTE_START:
                    continue
                technical = self._attribute_name(cluster_id, attribute_id)
                items.append(
                    CapabilityItem(
                        id=attribute_id,
                        technical=technical,
                        friendly=friendly.get(attribute_id)
                        or humanize_technical_name(technical),
                        implemented=True,
                        optional=False,
                    )
                )
            return items

        return [
            CapabilityItem(
                id=attribute_id,
                technical=self._attribute_name(cluster_id, attribute_id),
                friendly=label,
                implemented=None,
                optional=False,
            )
            for attribute_id, label in definition.statuses
        ]

    def _enabled_features(
        self, cluster_id: int, detail: Optional[ClusterDetail]
    ) -> List[str]:
        if detail is None or not detail.feature_map:
            return []
        return [
            name
            for _, name, enabled in self._registry.decode_feature_map(
                cluster_id, detail.feature_map
            )
            if enabled
        ]

    def _command_name(self, cluster_id: int, command_id: int) -> str:
        name = self._registry.get_command_name(cluster_id, command_id)
        return name or f"Command {command_id}"

    def _attribute_name(self, cluster_id: int, attribute_id: int) -> str:
        name = self._registry.get_attribute_name(cluster_id, attribute_id)
        return name or f"Attribute {attribute_id}"


def infer_device_category(endpoints: Iterable[EndpointObservation]) -> Optional[str]:
    """Category of the first application endpoint with a known device type."""
    for endpoint in endpoints:
        if endpoint.is_root:
            continue
        for device_type_id in endpoint.device_types:
            category = CATEGORY_BY_DEVICE_TYPE.get(device_type_id)
            if category is not None:
                return category
    return None


def identify_standouts(supported: Mapping[str, CapabilityInfo]) -> List[str]:
    labels = [supported[key].label for key in STANDOUT_PRIORITY if key in supported]
    return labels[:MAX_HIGHLIGHTS]


def identify_missing(
    unsupported: Mapping[str, CapabilityInfo], category: Optional[str]
) -> List[str]:
    candidates = NOTABLE_MISSING.get(category or "", DEFAULT_NOTABLE_MISSING)
    labels = [unsupported[key].label for key in candidates if key in unsupported]
    return labels[:MAX_HIGHLIGHTS]


def _percentage(part: int, total: int) -> int:
    if total == 0:
        return 0
    # Halves round up.
    return int(part * 100 / total + 0.5)
