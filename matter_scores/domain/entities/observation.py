"""Domain entities for device telemetry observations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from matter_scores.shared.consts import ROOT_ENDPOINT_ID, SYSTEM_DEVICE_TYPE_LIMIT

logger = structlog.get_logger(__name__)


def parse_int(value: Any) -> Optional[int]:
    """
    Read an integer reported by a device.

    Accepts ints and decimal or ``0x`` prefixed hex strings. Anything else
    (booleans, floats with a fraction, free text) yields ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip().lower()
        try:
            if text.startswith("0x"):
                return int(text, 16)
            return int(text)
        except ValueError:
            return None
    return None


def normalize_device_type_id(entry: Any) -> Optional[int]:
    """
    Extract a device-type id from a telemetry entry.

    Telemetry reports device types either as bare ids or as records carrying
    an ``id`` field (optionally with a ``revision``). Anything else yields
    ``None`` so the caller can skip it.
    """
    if isinstance(entry, Mapping):
        entry = entry.get("id")
    if isinstance(entry, bool):
        return None
    if isinstance(entry, int):
        return entry
    if isinstance(entry, str) and entry.strip().isdigit():
        return int(entry.strip())
    return None


def is_system_device_type(device_type_id: int) -> bool:
    return device_type_id < SYSTEM_DEVICE_TYPE_LIMIT


def _int_list(values: Any) -> List[int]:
    if values is None:
        return []
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        logger.warning("observation.id_list.malformed", entry=repr(values))
        return []
    result: List[int] = []
    for value in values:
        parsed = parse_int(value)
        if parsed is not None:
            result.append(parsed)
    return result


@dataclass(slots=True)
class ClusterDetail:
    """Rich per-cluster telemetry (schema v3): feature bits and id lists."""

    cluster_id: int
    feature_map: Optional[int] = None
    accepted_commands: List[int] = field(default_factory=list)
    generated_commands: List[int] = field(default_factory=list)
    attributes: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["ClusterDetail"]:
        """
        Parse a detail record, or None when its cluster id is unusable.

        An unreadable ``feature_map`` is treated as not reported, so feature
        checks on this cluster fall back to cluster presence.
        """
        cluster_id = parse_int(data.get("id"))
        if cluster_id is None:
            return None
        return cls(
            cluster_id=cluster_id,
            feature_map=parse_int(data.get("feature_map")),
            accepted_commands=_int_list(data.get("accepted_command_list")),
            generated_commands=_int_list(data.get("generated_command_list")),
            attributes=_int_list(data.get("attribute_list")),
        )

    def to_dict(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "id": self.cluster_id,
            "accepted_command_list": list(self.accepted_commands),
            "generated_command_list": list(self.generated_commands),
            "attribute_list": list(self.attributes),
        }
        if self.feature_map is not None:
            document["feature_map"] = self.feature_map
        return document


@dataclass(slots=True)
class EndpointObservation:
    """One endpoint of a device as reported for a hardware/software version."""

    endpoint_id: int
    device_types: List[int] = field(default_factory=list)
    server_clusters: List[int] = field(default_factory=list)
    client_clusters: List[int] = field(default_factory=list)
    server_cluster_details: Optional[List[ClusterDetail]] = None
    client_cluster_details: Optional[List[ClusterDetail]] = None

    @property
    def is_root(self) -> bool:
        return self.endpoint_id == ROOT_ENDPOINT_ID

    def scoreable_device_types(self) -> List[int]:
        return [dt for dt in self.device_types if not is_system_device_type(dt)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EndpointObservation":
        """
        Build an observation from a stored or submitted endpoint record.

        Malformed device-type, cluster and detail entries are dropped one by
        one; the rest of the endpoint is kept. A missing endpoint id means the
        root endpoint.

        Raises:
            ValueError: If the endpoint id is present but not an integer
        """
        raw_endpoint_id = data.get("endpoint_id")
        endpoint_id = 0 if raw_endpoint_id is None else parse_int(raw_endpoint_id)
        if endpoint_id is None:
            raise ValueError(f"endpoint_id must be an integer, got {raw_endpoint_id!r}")

        raw_device_types = data.get("device_types")
        if raw_device_types is None:
            raw_device_types = []
        elif isinstance(raw_device_types, (str, bytes, Mapping)) or not isinstance(
            raw_device_types, Iterable
        ):
            raw_device_types = [raw_device_types]

        device_types: List[int] = []
        for entry in raw_device_types:
            device_type_id = normalize_device_type_id(entry)
            if device_type_id is None:
                logger.warning(
                    "observation.device_type.malformed",
                    endpoint_id=data.get("endpoint_id"),
                    entry=repr(entry),
                )
                continue
            device_types.append(device_type_id)

        return cls(
            endpoint_id=endpoint_id,
            device_types=device_types,
            server_clusters=_int_list(data.get("server_clusters")),
            client_clusters=_int_list(data.get("client_clusters")),
            server_cluster_details=_details(data.get("server_cluster_details")),
            client_cluster_details=_details(data.get("client_cluster_details")),
        )

    def to_dict(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "endpoint_id": self.endpoint_id,
            "device_types": list(self.device_types),
            "server_clusters": list(self.server_clusters),
            "client_clusters": list(self.client_clusters),
        }
        if self.server_cluster_details is not None:
            document["server_cluster_details"] = [
                detail.to_dict() for detail in self.server_cluster_details
            ]
        if self.client_cluster_details is not None:
            document["client_cluster_details"] = [
                detail.to_dict() for detail in self.client_cluster_details
            ]
        return document


def _details(raw: Any) -> Optional[List[ClusterDetail]]:
    if raw is None:
        return None
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        logger.warning("observation.cluster_details.malformed", entry=repr(raw))
        return []
    details: List[ClusterDetail] = []
    for item in raw:
        detail = ClusterDetail.from_dict(item) if isinstance(item, Mapping) else None
        if detail is None:
            logger.warning("observation.cluster_detail.malformed", entry=repr(item))
            continue
        details.append(detail)
    return details


def parse_endpoints(items: Iterable[Any]) -> List[EndpointObservation]:
    """
    Parse stored or submitted endpoint records, skipping unusable ones.

    A record that is not a mapping or whose endpoint id is not an integer is
    logged and left out; the other endpoints of the device are still scored.
    """
    endpoints: List[EndpointObservation] = []
    for item in items:
        if not isinstance(item, Mapping):
            logger.warning("observation.endpoint.malformed", entry=repr(item))
            continue
        try:
            endpoints.append(EndpointObservation.from_dict(item))
        except ValueError as exc:
            logger.warning(
                "observation.endpoint.malformed",
                endpoint_id=repr(item.get("endpoint_id")),
                error=str(exc),
            )
    return endpoints


@dataclass(slots=True)
class DeviceVersion:
    """A hardware/software revision of a device and its endpoint layout."""

    hardware_version: Optional[str] = None
    software_version: Optional[str] = None
    last_seen: Optional[datetime] = None
    endpoints: List[EndpointObservation] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"hw={self.hardware_version or '-'} sw={self.software_version or '-'}"
