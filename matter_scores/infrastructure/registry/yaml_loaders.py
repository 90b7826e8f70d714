"""YAML loading of specification seed data and the capability catalog."""

import importlib.resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import structlog
import yaml

from matter_scores.domain.entities.capability import (
    CapabilityCatalog,
    CapabilityDefinition,
    CapabilityTrigger,
    ClusterRole,
)
from matter_scores.domain.entities.errors import RegistryLoadError
from matter_scores.domain.entities.registry import (
    ClusterAttribute,
    ClusterCommand,
    ClusterFeature,
    ClusterSpec,
    CommandDirection,
    DeviceTypeSpec,
)

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]

DEVICE_TYPES_FILE = "device_types.yaml"
CLUSTERS_FILE = "clusters.yaml"
CAPABILITIES_FILE = "capabilities.yaml"


def _read_yaml(path: Optional[PathLike], bundled_name: str) -> Dict[str, Any]:
    """Parse a YAML document from ``path`` or from the bundled seed file."""
    source = str(path) if path else f"bundled:{bundled_name}"
    try:
        if path:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            resource = (
                importlib.resources.files("matter_scores.infrastructure.registry")
                / "data"
                / bundled_name
            )
            data = yaml.safe_load(resource.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.error("registry.load_failed", source=source, error=str(e))
        raise RegistryLoadError(source, details={"error": str(e)}) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RegistryLoadError(
            source, details={"error": "top level must be a mapping"}
        )
    return data


def _ids(values: Any) -> Tuple[int, ...]:
    return tuple(int(value) for value in values or [])


def _parse_device_type(data: Mapping[str, Any]) -> DeviceTypeSpec:
    return DeviceTypeSpec(
        id=int(data["id"]),
        name=str(data["name"]),
        hex_id=str(data.get("hex_id") or ""),
        category=data.get("category"),
        display_category=data.get("display_category"),
        icon=data.get("icon"),
        description=data.get("description"),
        spec_version=_version(data.get("spec_version")),
        mandatory_server=_ids(data.get("mandatory_server")),
        optional_server=_ids(data.get("optional_server")),
        mandatory_client=_ids(data.get("mandatory_client")),
        optional_client=_ids(data.get("optional_client")),
        scoring_weights=data.get("scoring_weights") or None,
    )


def _parse_cluster(data: Mapping[str, Any]) -> ClusterSpec:
    attributes = tuple(
        ClusterAttribute(
            id=int(attr["id"]),
            name=str(attr["name"]),
            optional=bool(attr.get("optional", False)),
        )
        for attr in data.get("attributes") or []
    )
    commands = tuple(
        ClusterCommand(
            id=int(cmd["id"]),
            name=str(cmd["name"]),
            optional=bool(cmd.get("optional", False)),
            direction=CommandDirection(
                cmd.get("direction", CommandDirection.CLIENT_TO_SERVER.value)
            ),
        )
        for cmd in data.get("commands") or []
    )
    features = tuple(
        ClusterFeature(
            bit=int(feature["bit"]),
            code=str(feature["code"]),
            name=str(feature["name"]),
        )
        for feature in data.get("features") or []
    )
    return ClusterSpec(
        id=int(data["id"]),
        name=str(data["name"]),
        hex_id=str(data.get("hex_id") or ""),
        description=data.get("description"),
        category=data.get("category"),
        spec_version=_version(data.get("spec_version")),
        is_global=bool(data.get("is_global", False)),
        attributes=attributes,
        commands=commands,
        features=features,
    )


def _version(value: Any) -> Optional[str]:
    # YAML reads an unquoted 1.0 as a float.
    return None if value is None else str(value)


class YamlSpecificationLoader:
    """Loads device-type and cluster specifications from YAML files."""

    def __init__(
        self,
        device_types_path: Optional[PathLike] = None,
        clusters_path: Optional[PathLike] = None,
    ):
        self.device_types_path = device_types_path
        self.clusters_path = clusters_path

    def load(self) -> Tuple[List[DeviceTypeSpec], List[ClusterSpec]]:
        device_data = _read_yaml(self.device_types_path, DEVICE_TYPES_FILE)
        cluster_data = _read_yaml(self.clusters_path, CLUSTERS_FILE)

        try:
            device_types = [
                _parse_device_type(entry)
                for entry in device_data.get("device_types") or []
            ]
            clusters = [
                _parse_cluster(entry) for entry in cluster_data.get("clusters") or []
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise RegistryLoadError(
                "specification seed data", details={"error": repr(e)}
            ) from e

        logger.info(
            "registry.loaded",
            device_types=len(device_types),
            clusters=len(clusters),
        )
        return device_types, clusters


def _parse_capability(key: str, data: Mapping[str, Any]) -> CapabilityDefinition:
    triggers = tuple(
        CapabilityTrigger(
            cluster_id=int(cluster["id"]),
            role=ClusterRole(cluster.get("role", ClusterRole.SERVER.value)),
            features=tuple(str(code) for code in cluster.get("features") or []),
        )
        for cluster in data.get("clusters") or []
        if cluster.get("id") is not None
    )
    actions = tuple(
        (int(action["cmd"]), str(action.get("friendly") or ""))
        for action in data.get("actions") or []
        if action.get("cmd") is not None
    )
    statuses = tuple(
        (int(status["attr"]), str(status.get("friendly") or ""))
        for status in data.get("statuses") or []
        if status.get("attr") is not None
    )
    return CapabilityDefinition(
        key=key,
        label=str(data["label"]),
        category=str(data.get("category") or "other"),
        emoji=str(data.get("emoji") or ""),
        icon=str(data.get("icon") or ""),
        description=str(data.get("description") or ""),
        triggers=triggers,
        actions=actions,
        statuses=statuses,
    )


class YamlCapabilityCatalogLoader:
    """Loads the capability catalog, keeping the file's ordering."""

    def __init__(self, path: Optional[PathLike] = None):
        self.path = path

    def load(self) -> CapabilityCatalog:
        data = _read_yaml(self.path, CAPABILITIES_FILE)

        try:
            categories = tuple(
                (str(key), str(label))
                for key, label in (data.get("categories") or {}).items()
            )
            capabilities = tuple(
                _parse_capability(str(key), entry)
                for key, entry in (data.get("capabilities") or {}).items()
            )
            relevant = tuple(
                (str(category), tuple(str(key) for key in keys or []))
                for category, keys in (
                    data.get("device_type_relevant_capabilities") or {}
                ).items()
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RegistryLoadError(
                "capability catalog", details={"error": repr(e)}
            ) from e

        logger.info(
            "capabilities.catalog_loaded",
            categories=len(categories),
            capabilities=len(capabilities),
        )
        return CapabilityCatalog(
            categories=categories,
            capabilities=capabilities,
            relevant_by_category=relevant,
        )
