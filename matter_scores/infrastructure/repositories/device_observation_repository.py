"""
MongoDB Device Observation Repository - Infrastructure Layer

Reads the telemetry written by the ingestion service: known devices, the
hardware/software versions seen for each device and the endpoint layout
reported for each version.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from pymongo.errors import PyMongoError

from matter_scores.domain.entities.observation import (
    DeviceVersion,
    EndpointObservation,
    parse_endpoints,
)
from matter_scores.domain.repositories.device_observation_repository import (
    IDeviceObservationRepository,
)
from matter_scores.infrastructure.database import MongoDatabase
from matter_scores.infrastructure.database.mongo_database import (
    DEVICES_COLLECTION,
    ENDPOINTS_COLLECTION,
    VERSIONS_COLLECTION,
)

logger = structlog.get_logger(__name__)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


class DeviceObservationRepository(IDeviceObservationRepository):
    """MongoDB implementation of the device observation read model."""

    def __init__(self, mongo_database: MongoDatabase):
        self.db = mongo_database

    def _to_version(
        self, document: Dict[str, Any], endpoints: List[EndpointObservation]
    ) -> DeviceVersion:
        return DeviceVersion(
            hardware_version=document.get("hardware_version"),
            software_version=document.get("software_version"),
            last_seen=_parse_datetime(document.get("last_seen")),
            endpoints=endpoints,
        )

    async def list_device_ids(
        self, after_id: Optional[int] = None, limit: int = 100
    ) -> List[int]:
        query: Dict[str, Any] = {}
        if after_id is not None:
            query["device_id"] = {"$gt": after_id}
        try:
            documents = await self.db.find_many(
                DEVICES_COLLECTION,
                query,
                sort=[("device_id", 1)],
                limit=limit,
            )
        except PyMongoError as e:
            logger.error(
                "observations.list_devices_failed", after_id=after_id, error=str(e)
            )
            raise
        return [int(doc["device_id"]) for doc in documents]

    async def get_versions(self, device_id: int) -> List[DeviceVersion]:
        try:
            version_documents = await self.db.find_many(
                VERSIONS_COLLECTION,
                {"device_id": device_id},
                sort=[("last_seen", -1)],
                limit=0,
            )
            versions: List[DeviceVersion] = []
            for document in version_documents:
                endpoint_documents = await self.db.find_many(
                    ENDPOINTS_COLLECTION,
                    {
                        "device_id": device_id,
                        "hardware_version": document.get("hardware_version"),
                        "software_version": document.get("software_version"),
                    },
                    sort=[("endpoint_id", 1)],
                    limit=0,
                )
                endpoints = parse_endpoints(endpoint_documents)
                versions.append(self._to_version(document, endpoints))
        except PyMongoError as e:
            logger.error(
                "observations.get_versions_failed", device_id=device_id, error=str(e)
            )
            raise
        return versions
