"""
MongoDB Database - Infrastructure Layer

Thin async facade over pymongo shared by the score cache and the telemetry
readers. Collections:

- ``device_scores``: one cached ``DeviceScore`` document per device
- ``devices``: known devices, keyed by ``device_id``
- ``device_versions``: hardware/software versions seen per device
- ``device_endpoints``: endpoint observations per device version
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pymongo.errors
import structlog
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = structlog.get_logger(__name__)

SCORES_COLLECTION = "device_scores"
DEVICES_COLLECTION = "devices"
VERSIONS_COLLECTION = "device_versions"
ENDPOINTS_COLLECTION = "device_endpoints"

SortSpec = Sequence[Tuple[str, int]]


class MongoDatabase:
    """MongoDB access for the scoring service."""

    def __init__(self, mongo_uri: str, db_name: str):
        """
        Open a client for ``db_name``.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Database holding the device and score collections
        """
        self.client: MongoClient = MongoClient(mongo_uri)
        self.db: Database = self.client[db_name]

    def get_collection(self, collection_name: str) -> Collection:
        return self.db[collection_name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Return the first document matching ``query``, or None."""
        return self.db[collection_name].find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """
        Find the documents matching ``query``.

        Args:
            collection_name: Name of the collection
            query: MongoDB filter
            sort: ``(field, direction)`` pairs applied in order; direction is
                ``pymongo.ASCENDING`` or ``pymongo.DESCENDING``
            skip: Number of matching documents to skip
            limit: Maximum number of documents to return; 0 means no limit

        Returns:
            The matching documents, fully materialized
        """
        cursor = self.db[collection_name].find(query)

        if sort:
            cursor = cursor.sort(list(sort))

        cursor = cursor.skip(skip).limit(limit)

        return list(cursor)

    async def count_documents(
        self, collection_name: str, query: Dict[str, Any]
    ) -> int:
        return self.db[collection_name].count_documents(query)

    async def insert_one(
        self, collection_name: str, document: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Insert ``document`` and return it (pymongo adds ``_id`` in place).

        Raises:
            Exception: If the insert is not acknowledged
        """
        result = self.db[collection_name].insert_one(document)
        if not result.acknowledged:
            raise Exception(f"Failed to insert document in {collection_name}")
        return document

    async def upsert_one(
        self, collection_name: str, query: Dict[str, Any], document: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Replace the document matching ``query`` or insert it when absent.

        A single replace keeps the stored document whole: readers see either
        the previous version or the new one.

        Raises:
            Exception: If the write is not acknowledged
        """
        result = self.db[collection_name].replace_one(query, document, upsert=True)
        if not result.acknowledged:
            raise Exception(f"Failed to upsert document in {collection_name}")
        return document

    async def delete_one(self, collection_name: str, query: Dict[str, Any]) -> bool:
        """
        Delete the first document matching ``query``.

        Returns:
            True if a document was deleted, False if none matched

        Raises:
            Exception: If the delete is not acknowledged
        """
        result = self.db[collection_name].delete_one(query)
        if not result.acknowledged:
            raise Exception(f"Failed to delete document in {collection_name}")
        return result.deleted_count > 0

    def close(self) -> None:
        self.client.close()

    async def create_indexes(self) -> None:
        """
        Ensure the score cache indexes exist.

        ``create_index`` is a no-op when an index with the same keys and options
        is already there, so this is safe on every start. The telemetry
        collections belong to the ingestion pipeline and are left untouched.
        A failure is logged so a read-only replica does not block startup.
        """
        scores = self.db[SCORES_COLLECTION]
        try:
            scores.create_index("device_id", name="device_id_idx", unique=True)
            scores.create_index(
                [("overall_score", pymongo.DESCENDING), ("device_id", 1)],
                name="overall_score_idx",
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning(
                "mongo.indexes.create_failed",
                collection=SCORES_COLLECTION,
                error=str(e),
            )
