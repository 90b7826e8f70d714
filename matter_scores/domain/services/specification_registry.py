"""
Domain Service - Specification Registry

Read-only lookup of device-type and cluster specifications. A registry is
built once from whatever the specification loader returns and passed
explicitly to the scoring and capability services.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from matter_scores.domain.entities.registry import (
    ClusterAttribute,
    ClusterCommand,
    ClusterSpec,
    CommandDirection,
    DeviceTypeSpec,
    ScoringWeights,
    format_hex_id,
)
from matter_scores.domain.ports.specification_loader import ISpecificationLoader

DecodedFeature = Tuple[str, str, bool]


class SpecificationRegistry:
    """Immutable index of device types and clusters keyed by numeric id."""

    def __init__(
        self,
        device_types: Iterable[DeviceTypeSpec] = (),
        clusters: Iterable[ClusterSpec] = (),
    ):
        self._device_types: Mapping[int, DeviceTypeSpec] = MappingProxyType(
            {spec.id: spec for spec in device_types}
        )
        self._clusters: Mapping[int, ClusterSpec] = MappingProxyType(
            {spec.id: spec for spec in clusters}
        )

    @classmethod
    def from_loader(cls, loader: ISpecificationLoader) -> "SpecificationRegistry":
        device_types, clusters = loader.load()
        return cls(device_types, clusters)

    @property
    def device_types(self) -> Mapping[int, DeviceTypeSpec]:
        return self._device_types

    @property
    def clusters(self) -> Mapping[int, ClusterSpec]:
        return self._clusters

    # Device types

    def get_device_type(self, device_type_id: int) -> Optional[DeviceTypeSpec]:
        return self._device_types.get(device_type_id)

    def get_device_type_name(self, device_type_id: int) -> str:
        spec = self._device_types.get(device_type_id)
        return spec.name if spec else f"Device Type {device_type_id}"

    def get_device_type_spec_version(self, device_type_id: int) -> Optional[str]:
        spec = self._device_types.get(device_type_id)
        return spec.spec_version if spec else None

    def get_scoring_weights(self, device_type_id: int) -> ScoringWeights:
        """Default weights merged with the device type's partial override."""
        spec = self._device_types.get(device_type_id)
        return spec.weights() if spec else ScoringWeights()

    def device_types_by_category(self, category: str) -> List[DeviceTypeSpec]:
        return [s for s in self._device_types.values() if s.category == category]

    def device_types_by_display_category(
        self, display_category: str
    ) -> List[DeviceTypeSpec]:
        return [
            s
            for s in self._device_types.values()
            if s.display_category == display_category
        ]

    def device_types_by_spec_version(self, spec_version: str) -> List[DeviceTypeSpec]:
        return [
            s for s in self._device_types.values() if s.spec_version == spec_version
        ]

    def all_categories(self) -> List[str]:
        return sorted({s.category for s in self._device_types.values() if s.category})

    def all_display_categories(self) -> List[str]:
        return sorted(
            {
                s.display_category
                for s in self._device_types.values()
                if s.display_category
            }
        )

    def all_spec_versions(self) -> List[str]:
        versions = {
            s.spec_version for s in self._device_types.values() if s.spec_version
        }
        return sorted(versions, key=_version_key)

    def all_device_type_names(self) -> Dict[int, str]:
        return {type_id: spec.name for type_id, spec in self._device_types.items()}

    # Clusters

    def get_cluster(self, cluster_id: int) -> Optional[ClusterSpec]:
        return self._clusters.get(cluster_id)

    def get_cluster_name(self, cluster_id: int) -> str:
        spec = self._clusters.get(cluster_id)
        return spec.name if spec else f"Cluster {format_hex_id(cluster_id)}"

    def get_cluster_spec_version(self, cluster_id: int) -> Optional[str]:
        spec = self._clusters.get(cluster_id)
        return spec.spec_version if spec else None

    def all_cluster_names(self) -> Dict[int, str]:
        return {cluster_id: spec.name for cluster_id, spec in self._clusters.items()}

    def get_cluster_commands(self, cluster_id: int) -> List[ClusterCommand]:
        """Commands a client sends to the server (the ones a device accepts)."""
        spec = self._clusters.get(cluster_id)
        if spec is None:
            return []
        return [
            command
            for command in spec.commands
            if command.direction == CommandDirection.CLIENT_TO_SERVER
        ]

    def get_cluster_attributes(self, cluster_id: int) -> List[ClusterAttribute]:
        spec = self._clusters.get(cluster_id)
        return list(spec.attributes) if spec else []

    def get_command_name(self, cluster_id: int, command_id: int) -> Optional[str]:
        spec = self._clusters.get(cluster_id)
        if spec is None:
            return None
        for command in spec.commands:
            if command.id == command_id:
                return command.name
        return None

    def get_attribute_name(self, cluster_id: int, attribute_id: int) -> Optional[str]:
        spec = self._clusters.get(cluster_id)
        if spec is None:
            return None
        for attribute in spec.attributes:
            if attribute.id == attribute_id:
                return attribute.name
        return None

    # Feature bits

    def has_feature(self, cluster_id: int, code: str, feature_map: int) -> bool:
        """Whether the named feature bit is set; unknown codes are never set."""
        spec = self._clusters.get(cluster_id)
        if spec is None:
            return False
        feature = spec.feature(code)
        if feature is None:
            return False
        return bool(feature_map & feature.mask)

    def decode_feature_map(
        self, cluster_id: int, feature_map: int
    ) -> List[DecodedFeature]:
        spec = self._clusters.get(cluster_id)
        if spec is None:
            return []
        return [
            (feature.code, feature.name, bool(feature_map & feature.mask))
            for feature in sorted(spec.features, key=lambda f: f.bit)
        ]


def _version_key(version: str) -> Tuple:
    parts = []
    for part in version.split("."):
        parts.append((0, int(part), "") if part.isdigit() else (1, 0, part))
    return tuple(parts)
