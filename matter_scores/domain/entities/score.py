"""
Domain Entities - Scores

Results of the compliance analysis: the per-device-type gap analysis, the
weighted score of one device type and the aggregated score of a device. Score
records serialize to flat dictionaries so they can be embedded in the cache
documents and rebuilt without loss.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from matter_scores.domain.entities.registry import DeviceTypeSpec

BREAKDOWN_KEYS = (
    "mandatory_server_score",
    "mandatory_client_score",
    "optional_server_score",
    "optional_client_score",
)


@dataclass
class GapResult:
    """Clusters a device type requires versus what the endpoints expose."""

    device_type_id: int
    device_type: Optional[DeviceTypeSpec] = None
    missing_mandatory_server: List[int] = field(default_factory=list)
    missing_mandatory_client: List[int] = field(default_factory=list)
    implemented_optional_server: List[int] = field(default_factory=list)
    implemented_optional_client: List[int] = field(default_factory=list)
    extra_server: List[int] = field(default_factory=list)
    extra_client: List[int] = field(default_factory=list)
    total_mandatory_server: int = 0
    total_mandatory_client: int = 0
    total_optional_server: int = 0
    total_optional_client: int = 0

    @property
    def is_compliant(self) -> bool:
        return not self.missing_mandatory_server and not self.missing_mandatory_client

    @property
    def mandatory_score(self) -> float:
        """Share of all mandatory clusters (both roles) that are present."""
        total = self.total_mandatory_server + self.total_mandatory_client
        if total == 0:
            return 100.0
        missing = len(self.missing_mandatory_server) + len(
            self.missing_mandatory_client
        )
        return (total - missing) / total * 100

    @property
    def optional_score(self) -> float:
        """Share of all optional clusters (both roles) that are present."""
        total = self.total_optional_server + self.total_optional_client
        if total == 0:
            return 0.0
        implemented = len(self.implemented_optional_server) + len(
            self.implemented_optional_client
        )
        return implemented / total * 100


@dataclass
class DeviceTypeScore:
    """Score of a device against a single device-type specification."""

    device_type_id: int
    device_type_name: str
    score: float
    star_rating: int
    is_compliant: bool
    client_bonus: float = 0.0
    mandatory_score: float = 0.0
    optional_score: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_type_id": self.device_type_id,
            "device_type_name": self.device_type_name,
            "score": self.score,
            "star_rating": self.star_rating,
            "is_compliant": self.is_compliant,
            "client_bonus": self.client_bonus,
            "mandatory_score": self.mandatory_score,
            "optional_score": self.optional_score,
            "breakdown": {key: self.breakdown.get(key, 0.0) for key in BREAKDOWN_KEYS},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeviceTypeScore":
        breakdown = data.get("breakdown") or {}
        return cls(
            device_type_id=int(data["device_type_id"]),
            device_type_name=str(data["device_type_name"]),
            score=float(data["score"]),
            star_rating=int(data["star_rating"]),
            is_compliant=bool(data["is_compliant"]),
            client_bonus=float(data.get("client_bonus") or 0.0),
            mandatory_score=float(data.get("mandatory_score") or 0.0),
            optional_score=float(data.get("optional_score") or 0.0),
            breakdown={key: float(breakdown.get(key, 0.0)) for key in BREAKDOWN_KEYS},
        )


@dataclass
class DeviceScore:
    """Aggregated score of a device over every device type it implements."""

    overall_score: float = 0.0
    star_rating: int = 1
    is_compliant: bool = True
    scores_by_type: Dict[int, DeviceTypeScore] = field(default_factory=dict)
    best_version: Optional[str] = None

    @classmethod
    def empty(cls) -> "DeviceScore":
        """Score of a device with nothing scoreable; not a failure."""
        return cls()

    def best_type_score(self) -> Optional[DeviceTypeScore]:
        best: Optional[DeviceTypeScore] = None
        for type_score in self.scores_by_type.values():
            if best is None or type_score.score > best.score:
                best = type_score
        return best

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "star_rating": self.star_rating,
            "is_compliant": self.is_compliant,
            "scores_by_type": {
                str(type_id): type_score.to_dict()
                for type_id, type_score in self.scores_by_type.items()
            },
            "best_version": self.best_version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeviceScore":
        scores_by_type = {
            int(type_id): DeviceTypeScore.from_dict(type_data)
            for type_id, type_data in (data.get("scores_by_type") or {}).items()
        }
        return cls(
            overall_score=float(data.get("overall_score") or 0.0),
            star_rating=int(data.get("star_rating") or 1),
            is_compliant=bool(data.get("is_compliant", True)),
            scores_by_type=scores_by_type,
            best_version=data.get("best_version"),
        )


@dataclass
class RankedDeviceScore:
    """A cached device score positioned in a per-device-type ranking."""

    device_id: int
    rank: int
    score: DeviceScore
