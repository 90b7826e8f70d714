"""Infrastructure-level configuration helpers for background workers."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _DatabaseSettings(BaseSettings):
    mongo_uri: str = Field(
        default="mongodb://localhost:27017/matter_scores",
        validation_alias=AliasChoices("DB_MONGO_URI", "MONGO_URI"),
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="matter_scores",
        validation_alias=AliasChoices("DB_DATABASE_NAME", "DATABASE_NAME"),
        description="MongoDB database name",
    )

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")


class _ScoringSettings(BaseSettings):
    rebuild_batch_size: int = Field(
        default=100,
        gt=0,
        validation_alias=AliasChoices(
            "SCORING_REBUILD_BATCH_SIZE", "REBUILD_BATCH_SIZE"
        ),
        description="Devices processed per batch during a full cache rebuild",
    )
    device_types_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SCORING_DEVICE_TYPES_PATH"),
        description="Device-type specification YAML (bundled seed when unset)",
    )
    clusters_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SCORING_CLUSTERS_PATH"),
        description="Cluster specification YAML (bundled seed when unset)",
    )
    capabilities_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SCORING_CAPABILITIES_PATH"),
        description="Capability catalog YAML (bundled seed when unset)",
    )

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")


class InfrastructureSettings(BaseSettings):
    database: _DatabaseSettings = Field(default_factory=_DatabaseSettings)
    scoring: _ScoringSettings = Field(default_factory=_ScoringSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


_settings: InfrastructureSettings | None = None


def get_settings() -> InfrastructureSettings:
    """Lazy-load infrastructure settings for Celery workers."""
    global _settings
    if _settings is None:
        _settings = InfrastructureSettings()
    return _settings
