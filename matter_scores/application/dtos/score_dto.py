"""
Application DTOs - Scores

This module contains Data Transfer Objects (DTOs) for cached device scores,
per-device-type rankings and cache rebuild requests.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from matter_scores.domain.entities.score import (
    DeviceScore,
    DeviceTypeScore,
    RankedDeviceScore,
)


class ScoreBreakdownDTO(BaseModel):
    """The four component sub-scores, each 0-100."""

    mandatory_server_score: float = 0.0
    mandatory_client_score: float = 0.0
    optional_server_score: float = 0.0
    optional_client_score: float = 0.0


class DeviceTypeScoreDTO(BaseModel):
    """Score of a device against one device type."""

    device_type_id: int
    device_type_name: str
    score: float = Field(ge=0, le=100)
    star_rating: int = Field(ge=1, le=5)
    is_compliant: bool
    client_bonus: float = 0.0
    mandatory_score: float = 0.0
    optional_score: float = 0.0
    breakdown: ScoreBreakdownDTO = Field(default_factory=ScoreBreakdownDTO)

    @classmethod
    def from_domain(cls, score: DeviceTypeScore) -> "DeviceTypeScoreDTO":
        data = score.to_dict()
        return cls(
            device_type_id=data["device_type_id"],
            device_type_name=data["device_type_name"],
            score=data["score"],
            star_rating=data["star_rating"],
            is_compliant=data["is_compliant"],
            client_bonus=data["client_bonus"],
            mandatory_score=data["mandatory_score"],
            optional_score=data["optional_score"],
            breakdown=ScoreBreakdownDTO(**data["breakdown"]),
        )


class DeviceScoreDTO(BaseModel):
    """Cached aggregate score of a device."""

    overall_score: float = Field(ge=0, le=100)
    star_rating: int = Field(ge=1, le=5)
    is_compliant: bool
    scores_by_type: Dict[int, DeviceTypeScoreDTO] = Field(default_factory=dict)
    best_version: Optional[str] = Field(
        default=None,
        description="Software version scoring noticeably better than the latest",
    )

    @classmethod
    def from_domain(cls, score: DeviceScore) -> "DeviceScoreDTO":
        return cls(
            overall_score=score.overall_score,
            star_rating=score.star_rating,
            is_compliant=score.is_compliant,
            scores_by_type={
                type_id: DeviceTypeScoreDTO.from_domain(type_score)
                for type_id, type_score in score.scores_by_type.items()
            },
            best_version=score.best_version,
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "overall_score": 85.0,
                "star_rating": 4,
                "is_compliant": True,
                "scores_by_type": {
                    "256": {
                        "device_type_id": 256,
                        "device_type_name": "On/Off Light",
                        "score": 85.0,
                        "star_rating": 4,
                        "is_compliant": True,
                        "client_bonus": 0.0,
                        "mandatory_score": 100.0,
                        "optional_score": 50.0,
                        "breakdown": {
                            "mandatory_server_score": 100.0,
                            "mandatory_client_score": 100.0,
                            "optional_server_score": 100.0,
                            "optional_client_score": 0.0,
                        },
                    }
                },
                "best_version": None,
            }
        }
    }


class CachedScoresResponseDTO(BaseModel):
    """Bulk lookup result; devices without a cached score are omitted."""

    scores: Dict[int, DeviceScoreDTO] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, scores: Dict[int, DeviceScore]) -> "CachedScoresResponseDTO":
        return cls(
            scores={
                device_id: DeviceScoreDTO.from_domain(score)
                for device_id, score in scores.items()
            }
        )


class RankedDeviceDTO(BaseModel):
    """A device's position in a device-type ranking."""

    rank: int = Field(ge=1)
    device_id: int
    overall_score: float
    star_rating: int
    is_compliant: bool
    device_type_score: Optional[DeviceTypeScoreDTO] = None

    @classmethod
    def from_domain(
        cls, ranked: RankedDeviceScore, device_type_id: int
    ) -> "RankedDeviceDTO":
        type_score = ranked.score.scores_by_type.get(device_type_id)
        return cls(
            rank=ranked.rank,
            device_id=ranked.device_id,
            overall_score=ranked.score.overall_score,
            star_rating=ranked.score.star_rating,
            is_compliant=ranked.score.is_compliant,
            device_type_score=(
                DeviceTypeScoreDTO.from_domain(type_score) if type_score else None
            ),
        )


class RankedDevicesResponseDTO(BaseModel):
    device_type_id: int
    device_type_name: str
    limit: int
    offset: int
    devices: List[RankedDeviceDTO] = Field(default_factory=list)


class RebuildRequestDTO(BaseModel):
    """DTO for a score cache rebuild request."""

    device_id: Optional[int] = Field(
        default=None, description="Rebuild a single device instead of all devices"
    )
    background: bool = Field(
        default=False, description="Queue the rebuild on a worker instead of waiting"
    )


class RebuildResponseDTO(BaseModel):
    processed: Optional[int] = Field(
        default=None, description="Number of devices processed (synchronous runs)"
    )
    task_id: Optional[str] = Field(
        default=None, description="Worker task identifier (background runs)"
    )
