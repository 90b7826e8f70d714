"""
MongoDB Device Score Repository - Infrastructure Layer

This module implements the IDeviceScoreRepository interface using MongoDB
as the underlying data store. Each device owns exactly one document in the
``device_scores`` collection.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

import structlog
from pymongo.errors import PyMongoError

from matter_scores.domain.entities.errors import ScoreCacheError
from matter_scores.domain.entities.score import DeviceScore, RankedDeviceScore
from matter_scores.domain.repositories.device_score_repository import (
    IDeviceScoreRepository,
)
from matter_scores.infrastructure.database import MongoDatabase
from matter_scores.infrastructure.database.mongo_database import SCORES_COLLECTION

logger = structlog.get_logger(__name__)


class DeviceScoreRepository(IDeviceScoreRepository):
    """MongoDB implementation of the device score cache."""

    COLLECTION_NAME = SCORES_COLLECTION

    def __init__(self, mongo_database: MongoDatabase):
        """
        Initialize the MongoDB device score repository.

        Args:
            mongo_database: MongoDB database client
        """
        self.db = mongo_database

    def _to_document(self, device_id: int, score: DeviceScore) -> Dict[str, Any]:
        """Convert a DeviceScore to a MongoDB document."""
        document = score.to_dict()
        document["device_id"] = device_id
        document["computed_at"] = datetime.now(timezone.utc).isoformat()
        return document

    def _to_entity(self, document: Dict[str, Any]) -> DeviceScore:
        """Convert a MongoDB document to a DeviceScore."""
        return DeviceScore.from_dict(document)

    async def upsert(self, device_id: int, score: DeviceScore) -> None:
        try:
            await self.db.upsert_one(
                self.COLLECTION_NAME,
                {"device_id": device_id},
                self._to_document(device_id, score),
            )
        except PyMongoError as e:
            logger.error(
                "score_cache.upsert_failed", device_id=device_id, error=str(e)
            )
            raise ScoreCacheError(
                f"Failed to store score for device {device_id}",
                details={"device_id": device_id},
            ) from e

    async def delete(self, device_id: int) -> bool:
        try:
            deleted = await self.db.delete_one(
                self.COLLECTION_NAME, {"device_id": device_id}
            )
        except PyMongoError as e:
            logger.error(
                "score_cache.delete_failed", device_id=device_id, error=str(e)
            )
            raise ScoreCacheError(
                f"Failed to delete score for device {device_id}",
                details={"device_id": device_id},
            ) from e

        if deleted:
            logger.info("score_cache.entry_deleted", device_id=device_id)
        return deleted

    async def find_by_device_ids(
        self, device_ids: Sequence[int]
    ) -> Dict[int, DeviceScore]:
        if not device_ids:
            return {}

        try:
            documents = await self.db.find_many(
                self.COLLECTION_NAME,
                {"device_id": {"$in": list(device_ids)}},
                limit=0,
            )
        except PyMongoError as e:
            raise ScoreCacheError(
                "Failed to read cached scores",
                details={"device_ids": list(device_ids)},
            ) from e

        return {int(doc["device_id"]): self._to_entity(doc) for doc in documents}

    async def find_ranked_by_device_type(
        self, device_type_id: int, limit: int = 50, offset: int = 0
    ) -> List[RankedDeviceScore]:
        """
        Rank cached devices that were scored for a device type.

        Devices with equal overall scores share a rank, and the next distinct
        score skips ahead (1, 2, 2, 4).
        """
        query = {f"scores_by_type.{device_type_id}": {"$exists": True}}
        try:
            documents = await self.db.find_many(
                self.COLLECTION_NAME,
                query,
                sort=[("overall_score", -1), ("device_id", 1)],
                skip=offset,
                limit=limit,
            )
            ranked: List[RankedDeviceScore] = []
            previous_score = None
            rank = 0
            for position, document in enumerate(documents):
                score = self._to_entity(document)
                if position == 0:
                    rank = 1 + await self.db.count_documents(
                        self.COLLECTION_NAME,
                        {**query, "overall_score": {"$gt": score.overall_score}},
                    )
                elif score.overall_score != previous_score:
                    rank = offset + position + 1
                previous_score = score.overall_score
                ranked.append(
                    RankedDeviceScore(
                        device_id=int(document["device_id"]),
                        rank=rank,
                        score=score,
                    )
                )
            return ranked
        except PyMongoError as e:
            raise ScoreCacheError(
                "Failed to rank cached scores",
                details={"device_type_id": device_type_id},
            ) from e
