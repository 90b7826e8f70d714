"""
Domain Entities - Specification Registry

Device-type and cluster specifications as published by the Connectivity
Standards Alliance. These records are loaded once per process and treated as
immutable for the lifetime of a scoring run.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


def format_hex_id(value: int) -> str:
    """Render a specification id the way the Matter spec prints it."""
    return f"0x{value:04X}"


# Accepted spellings for a partial weight override. The camelCase keys are the
# ones stored by the upstream registry sync.
_WEIGHT_ALIASES: Dict[str, str] = {
    "mandatoryServerWeight": "mandatory_server",
    "mandatoryClientWeight": "mandatory_client",
    "optionalServerWeight": "optional_server",
    "optionalClientWeight": "optional_client",
    "keyClientClusters": "key_client_clusters",
    "keyClientBonus": "key_client_bonus",
    "mandatory_server_weight": "mandatory_server",
    "mandatory_client_weight": "mandatory_client",
    "optional_server_weight": "optional_server",
    "optional_client_weight": "optional_client",
}


@dataclass(frozen=True)
class ScoringWeights:
    """Relative weight of each scoring axis plus the key-client bonus."""

    mandatory_server: float = 0.40
    mandatory_client: float = 0.20
    optional_server: float = 0.25
    optional_client: float = 0.15
    key_client_clusters: Tuple[int, ...] = ()
    key_client_bonus: float = 0.0

    @property
    def total_weight(self) -> float:
        return (
            self.mandatory_server
            + self.mandatory_client
            + self.optional_server
            + self.optional_client
        )

    @classmethod
    def from_partial(cls, override: Optional[Mapping[str, Any]]) -> "ScoringWeights":
        """
        Merge a partial override onto the defaults, field by field.

        Unknown keys are ignored; keys missing from the override keep their
        default value.
        """
        if not override:
            return cls()

        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in override.items():
            name = _WEIGHT_ALIASES.get(key, key)
            if name not in known or value is None:
                continue
            if name == "key_client_clusters":
                values[name] = tuple(int(cluster_id) for cluster_id in value)
            else:
                values[name] = float(value)
        return cls(**values)


@dataclass(frozen=True)
class DeviceTypeSpec:
    """Requirements a device type places on the endpoint implementing it."""

    id: int
    name: str
    hex_id: str = ""
    category: Optional[str] = None
    display_category: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    spec_version: Optional[str] = None
    mandatory_server: Tuple[int, ...] = ()
    optional_server: Tuple[int, ...] = ()
    mandatory_client: Tuple[int, ...] = ()
    optional_client: Tuple[int, ...] = ()
    scoring_weights: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        if not self.hex_id:
            object.__setattr__(self, "hex_id", format_hex_id(self.id))

    def weights(self) -> ScoringWeights:
        return ScoringWeights.from_partial(self.scoring_weights)


class CommandDirection(str, Enum):
    """Which side of a cluster sends the command."""

    CLIENT_TO_SERVER = "client_to_server"  # initiator -> target
    SERVER_TO_CLIENT = "server_to_client"  # target -> initiator


@dataclass(frozen=True)
class ClusterAttribute:
    id: int
    name: str
    optional: bool = False


@dataclass(frozen=True)
class ClusterCommand:
    id: int
    name: str
    optional: bool = False
    direction: CommandDirection = CommandDirection.CLIENT_TO_SERVER


@dataclass(frozen=True)
class ClusterFeature:
    """A single bit of a cluster's FeatureMap attribute."""

    bit: int
    code: str
    name: str

    @property
    def mask(self) -> int:
        return 1 << self.bit


@dataclass(frozen=True)
class ClusterSpec:
    """A cluster definition with its attribute, command and feature catalog."""

    id: int
    name: str
    hex_id: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    spec_version: Optional[str] = None
    is_global: bool = False
    attributes: Tuple[ClusterAttribute, ...] = field(default_factory=tuple)
    commands: Tuple[ClusterCommand, ...] = field(default_factory=tuple)
    features: Tuple[ClusterFeature, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.hex_id:
            object.__setattr__(self, "hex_id", format_hex_id(self.id))

    def feature(self, code: str) -> Optional[ClusterFeature]:
        for feature in self.features:
            if feature.code == code:
                return feature
        return None
