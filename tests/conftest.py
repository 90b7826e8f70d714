from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pytest
from pymongo.errors import PyMongoError

from matter_scores.domain.entities.capability import (
    CapabilityCatalog,
    CapabilityDefinition,
    CapabilityTrigger,
    ClusterRole,
)
from matter_scores.domain.entities.observation import ClusterDetail, EndpointObservation
from matter_scores.domain.entities.registry import (
    ClusterAttribute,
    ClusterCommand,
    ClusterFeature,
    ClusterSpec,
    CommandDirection,
    DeviceTypeSpec,
)
from matter_scores.domain.services.device_aggregator import DeviceAggregator
from matter_scores.domain.services.scoring_engine import ScoringEngine
from matter_scores.domain.services.specification_registry import SpecificationRegistry

_MISSING = object()


def _lookup(document: Dict[str, Any], path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _matches_condition(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
        for operator, operand in condition.items():
            if operator == "$in":
                if value is _MISSING or value not in operand:
                    return False
            elif operator == "$gt":
                if value is _MISSING or not value > operand:
                    return False
            elif operator == "$exists":
                if (value is not _MISSING) != bool(operand):
                    return False
            else:  # pragma: no cover - unsupported in tests
                raise NotImplementedError(operator)
        return True
    if value is _MISSING:
        return condition is None
    return value == condition


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)
        self._skip = 0
        self._limit = 0

    def sort(self, keys: List[Tuple[str, int]]) -> "FakeCursor":
        for key, direction in reversed(keys):
            self._documents.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def skip(self, amount: int) -> "FakeCursor":
        self._skip = amount
        return self

    def limit(self, amount: int) -> "FakeCursor":
        self._limit = amount
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        docs = self._documents[self._skip :]
        if self._limit:
            docs = docs[: self._limit]
        return iter(docs)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.last_query: Dict[str, Any] | None = None
        self.dropped_indexes: List[str] = []
        self.created_indexes: List[tuple[Any, ...]] = []

    def _matching(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [
            doc
            for doc in self.documents
            if all(
                _matches_condition(_lookup(doc, key), condition)
                for key, condition in query.items()
            )
        ]

    def find_one(self, query: Dict[str, Any]) -> Dict[str, Any] | None:
        self.last_query = query
        matches = self._matching(query)
        return matches[0] if matches else None

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        self.last_query = query
        return FakeCursor(self._matching(query))

    def count_documents(self, query: Dict[str, Any]) -> int:
        return len(self._matching(query))

    def insert_one(self, document: Dict[str, Any]) -> Any:
        self.documents.append(document)
        return SimpleNamespace(acknowledged=True, inserted_id=len(self.documents))

    def replace_one(
        self, query: Dict[str, Any], document: Dict[str, Any], upsert: bool = False
    ) -> Any:
        for index, existing in enumerate(self.documents):
            if existing in self._matching(query):
                self.documents[index] = document
                return SimpleNamespace(matched_count=1, acknowledged=True)
        if upsert:
            self.documents.append(document)
        return SimpleNamespace(matched_count=0, acknowledged=True)

    def delete_one(self, query: Dict[str, Any]) -> Any:
        matches = self._matching(query)
        if matches:
            self.documents.remove(matches[0])
            return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)

    def drop_index(self, index_name: str) -> None:
        self.dropped_indexes.append(index_name)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys


class FakeMongoDatabase:
    """In-memory stand-in for MongoDatabase.

    Set ``fail_with`` to make every operation raise that exception.
    """

    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.fail_with: Optional[Exception] = None
        self.closed = False

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def find_one(self, collection_name: str, query: Dict[str, Any]) -> Any:
        self._check()
        return self.get_collection(collection_name).find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort: Sequence[Tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        self._check()
        cursor = self.get_collection(collection_name).find(query)
        if sort:
            cursor.sort(list(sort))
        cursor.skip(skip)
        cursor.limit(limit)
        return list(cursor)

    async def count_documents(
        self, collection_name: str, query: Dict[str, Any]
    ) -> int:
        self._check()
        return self.get_collection(collection_name).count_documents(query)

    async def insert_one(self, collection_name: str, document: Dict[str, Any]) -> Any:
        self._check()
        self.get_collection(collection_name).insert_one(document)
        return document

    async def upsert_one(
        self, collection_name: str, query: Dict[str, Any], document: Dict[str, Any]
    ) -> Any:
        self._check()
        self.get_collection(collection_name).replace_one(query, document, upsert=True)
        return document

    async def delete_one(self, collection_name: str, query: Dict[str, Any]) -> bool:
        self._check()
        result = self.get_collection(collection_name).delete_one(query)
        return result.deleted_count > 0

    async def create_indexes(self) -> None:  # pragma: no cover - stub for tests
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def failing_mongo_database() -> FakeMongoDatabase:
    database = FakeMongoDatabase()
    database.fail_with = PyMongoError("connection refused")
    return database


@pytest.fixture()
def dummy_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Registry and catalog fixtures
# ---------------------------------------------------------------------------

ON_OFF_LIGHT = DeviceTypeSpec(
    id=256,
    name="On/Off Light",
    category="lighting",
    display_category="Lighting",
    spec_version="1.0",
    mandatory_server=(3, 4, 6, 98),
)

DIMMABLE_LIGHT = DeviceTypeSpec(
    id=257,
    name="Dimmable Light",
    category="lighting",
    display_category="Lighting",
    spec_version="1.0",
    mandatory_server=(3, 4, 6, 8, 98),
    optional_client=(1030,),
)

THERMOSTAT = DeviceTypeSpec(
    id=769,
    name="Thermostat",
    category="hvac",
    display_category="Climate",
    spec_version="1.0",
    mandatory_server=(3, 513),
    optional_server=(4, 98),
    optional_client=(514, 1026),
    scoring_weights={"keyClientClusters": [514, 1026], "keyClientBonus": 0.1},
)

ROOT_NODE = DeviceTypeSpec(
    id=22,
    name="Root Node",
    category="utility",
    display_category="System",
    spec_version="1.0",
    mandatory_server=(29, 31, 40),
)

ON_OFF_CLUSTER = ClusterSpec(
    id=6,
    name="On/Off",
    spec_version="1.3",
    attributes=(
        ClusterAttribute(id=0, name="OnOff"),
        ClusterAttribute(id=16385, name="OnTime", optional=True),
    ),
    commands=(
        ClusterCommand(id=0, name="Off"),
        ClusterCommand(id=1, name="On"),
        ClusterCommand(id=2, name="Toggle"),
        ClusterCommand(id=64, name="OffWithEffect", optional=True),
    ),
    features=(ClusterFeature(bit=0, code="LT", name="Lighting"),),
)

THERMOSTAT_CLUSTER = ClusterSpec(
    id=513,
    name="Thermostat",
    spec_version="1.4",
    features=(
        ClusterFeature(bit=0, code="HEAT", name="Heating"),
        ClusterFeature(bit=1, code="COOL", name="Cooling"),
        ClusterFeature(bit=3, code="SCH", name="Scheduling"),
    ),
)

ELECTRICAL_ENERGY_CLUSTER = ClusterSpec(
    id=145,
    name="Electrical Energy Measurement",
    spec_version="1.3",
    commands=(
        ClusterCommand(
            id=0,
            name="CumulativeEnergyMeasured",
            direction=CommandDirection.SERVER_TO_CLIENT,
        ),
    ),
)


@pytest.fixture()
def registry() -> SpecificationRegistry:
    return SpecificationRegistry(
        device_types=[ON_OFF_LIGHT, DIMMABLE_LIGHT, THERMOSTAT, ROOT_NODE],
        clusters=[ON_OFF_CLUSTER, THERMOSTAT_CLUSTER, ELECTRICAL_ENERGY_CLUSTER],
    )


@pytest.fixture()
def scoring_engine(registry: SpecificationRegistry) -> ScoringEngine:
    return ScoringEngine(registry)


@pytest.fixture()
def aggregator(scoring_engine: ScoringEngine) -> DeviceAggregator:
    return DeviceAggregator(scoring_engine)


@pytest.fixture()
def capability_catalog() -> CapabilityCatalog:
    return CapabilityCatalog(
        categories=(
            ("power", "Power & Energy"),
            ("lighting", "Lighting"),
            ("climate", "Climate"),
            ("security", "Security & Access"),
        ),
        capabilities=(
            CapabilityDefinition(
                key="on_off",
                label="On/off control",
                category="power",
                triggers=(CapabilityTrigger(cluster_id=6),),
                actions=((0, "Turn off"), (1, "Turn on")),
                statuses=((0, "Power state"),),
            ),
            CapabilityDefinition(
                key="dimming",
                label="Dimming",
                category="lighting",
                triggers=(CapabilityTrigger(cluster_id=8),),
                actions=((0, "Set brightness"),),
            ),
            CapabilityDefinition(
                key="energy_monitoring",
                label="Energy monitoring",
                category="power",
                triggers=(
                    CapabilityTrigger(cluster_id=144),
                    CapabilityTrigger(cluster_id=145),
                ),
            ),
            CapabilityDefinition(
                key="scheduling",
                label="Built-in scheduling",
                category="climate",
                triggers=(CapabilityTrigger(cluster_id=513, features=("SCH",)),),
            ),
            CapabilityDefinition(
                key="occupancy_response",
                label="Responds to motion sensors",
                category="lighting",
                triggers=(
                    CapabilityTrigger(cluster_id=1030, role=ClusterRole.CLIENT),
                ),
            ),
        ),
        relevant_by_category=(
            ("lighting", ("on_off", "dimming", "energy_monitoring")),
        ),
    )


def make_endpoint(
    endpoint_id: int,
    device_types: Sequence[Any] = (),
    server: Sequence[int] = (),
    client: Sequence[int] = (),
    server_details: Optional[Sequence[ClusterDetail]] = None,
    client_details: Optional[Sequence[ClusterDetail]] = None,
) -> EndpointObservation:
    return EndpointObservation(
        endpoint_id=endpoint_id,
        device_types=list(device_types),
        server_clusters=list(server),
        client_clusters=list(client),
        server_cluster_details=(
            list(server_details) if server_details is not None else None
        ),
        client_cluster_details=(
            list(client_details) if client_details is not None else None
        ),
    )


@pytest.fixture()
def root_endpoint() -> EndpointObservation:
    return make_endpoint(0, device_types=[22], server=[29, 31, 40])
