from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pytest
from dependency_injector import providers
from fastapi import HTTPException
from fastapi.testclient import TestClient

from matter_scores.application.dtos.score_dto import RebuildRequestDTO
from matter_scores.application.use_cases.score_cache_use_cases import (
    GetCachedScoresUseCase,
    GetDevicesRankedByScoreUseCase,
    RebuildScoreCacheUseCase,
)
from matter_scores.domain.entities.score import DeviceScore, RankedDeviceScore
from matter_scores.domain.services.device_aggregator import DeviceAggregator
from matter_scores.domain.services.specification_registry import SpecificationRegistry
from matter_scores.presentation.controllers.scores_controller import (
    get_cached_scores,
    get_ranked_devices,
    rebuild_scores,
)
from tests.conftest import make_endpoint


class _StubCachedScores(GetCachedScoresUseCase):
    def __init__(self, scores: Dict[int, DeviceScore]):
        self.scores = scores
        self.requested: List[int] = []

    async def execute(self, device_ids: Sequence[int]) -> Dict[int, DeviceScore]:
        self.requested = list(device_ids)
        return {k: v for k, v in self.scores.items() if k in device_ids}


class _StubRanked(GetDevicesRankedByScoreUseCase):
    def __init__(self, rows: List[RankedDeviceScore]):
        self.rows = rows

    async def execute(
        self, device_type_id: int, limit: int = 50, offset: int = 0
    ) -> List[RankedDeviceScore]:
        return self.rows


class _StubRebuild(RebuildScoreCacheUseCase):
    def __init__(self, processed: int = 0, error: Optional[Exception] = None):
        self.processed = processed
        self.error = error
        self.device_ids: List[Optional[int]] = []

    async def execute(self, device_id: Optional[int] = None) -> int:
        if self.error:
            raise self.error
        self.device_ids.append(device_id)
        return self.processed


class _StubDispatcher:
    def __init__(self) -> None:
        self.rebuilds: List[Optional[int]] = []

    async def dispatch_rebuild(self, device_id: Optional[int] = None) -> str:
        self.rebuilds.append(device_id)
        return "task-123"


@pytest.fixture()
def light_score(aggregator: DeviceAggregator) -> DeviceScore:
    return aggregator.aggregate(
        [make_endpoint(1, device_types=[256], server=[3, 4, 6, 98])]
    )


@pytest.mark.asyncio
async def test_get_cached_scores_returns_found_devices(
    light_score: DeviceScore,
) -> None:
    use_case = _StubCachedScores({1: light_score})

    response = await get_cached_scores(
        device_ids=[1, 2], get_cached_scores_use_case=use_case
    )

    assert use_case.requested == [1, 2]
    assert list(response.scores) == [1]
    assert response.scores[1].overall_score == 60.0


@pytest.mark.asyncio
async def test_get_cached_scores_limits_request_size() -> None:
    with pytest.raises(HTTPException) as exc:
        await get_cached_scores(
            device_ids=list(range(501)),
            get_cached_scores_use_case=_StubCachedScores({}),
        )
    assert exc.value.status_code == 422


@pytest.mark.asyncio
async def test_get_ranked_devices(
    light_score: DeviceScore, registry: SpecificationRegistry
) -> None:
    rows = [
        RankedDeviceScore(device_id=3, rank=1, score=light_score),
        RankedDeviceScore(device_id=8, rank=1, score=light_score),
    ]

    response = await get_ranked_devices(
        device_type_id=256,
        limit=10,
        offset=0,
        ranked_use_case=_StubRanked(rows),
        registry=registry,
    )

    assert response.device_type_name == "On/Off Light"
    assert [(d.rank, d.device_id) for d in response.devices] == [(1, 3), (1, 8)]
    assert response.devices[0].device_type_score.score == 60.0


@pytest.mark.asyncio
async def test_get_ranked_devices_handles_errors(
    registry: SpecificationRegistry,
) -> None:
    class _Fail(GetDevicesRankedByScoreUseCase):
        def __init__(self) -> None:
            pass

        async def execute(
            self, device_type_id: int, limit: int = 50, offset: int = 0
        ) -> List[RankedDeviceScore]:
            raise RuntimeError("failure")

    with pytest.raises(HTTPException) as exc:
        await get_ranked_devices(
            device_type_id=256,
            limit=10,
            offset=0,
            ranked_use_case=_Fail(),
            registry=registry,
        )
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_rebuild_runs_inline() -> None:
    rebuild = _StubRebuild(processed=4)
    dispatcher = _StubDispatcher()

    response = await rebuild_scores(
        request=RebuildRequestDTO(),
        rebuild_use_case=rebuild,
        dispatcher=dispatcher,
    )

    assert response.processed == 4
    assert response.task_id is None
    assert rebuild.device_ids == [None]
    assert dispatcher.rebuilds == []


@pytest.mark.asyncio
async def test_rebuild_in_background_dispatches_task() -> None:
    rebuild = _StubRebuild()
    dispatcher = _StubDispatcher()

    response = await rebuild_scores(
        request=RebuildRequestDTO(device_id=7, background=True),
        rebuild_use_case=rebuild,
        dispatcher=dispatcher,
    )

    assert response.task_id == "task-123"
    assert response.processed is None
    assert dispatcher.rebuilds == [7]
    assert rebuild.device_ids == []


@pytest.mark.asyncio
async def test_rebuild_handles_errors() -> None:
    with pytest.raises(HTTPException) as exc:
        await rebuild_scores(
            request=RebuildRequestDTO(),
            rebuild_use_case=_StubRebuild(error=RuntimeError("db down")),
            dispatcher=_StubDispatcher(),
        )
    assert exc.value.status_code == 500
    assert "db down" in exc.value.detail


def test_scores_routes_through_app(light_score: DeviceScore) -> None:
    from matter_scores.main.app import create_app
    from matter_scores.main.container import get_container

    app = create_app()
    container = get_container()
    container.get_cached_scores_use_case.override(
        providers.Object(_StubCachedScores({1: light_score}))
    )
    container.rebuild_score_cache_use_case.override(
        providers.Object(_StubRebuild(processed=2))
    )
    container.score_task_dispatcher.override(providers.Object(_StubDispatcher()))

    client = TestClient(app)

    lookup = client.get("/scores", params=[("device_ids", 1), ("device_ids", 5)])
    assert lookup.status_code == 200
    assert lookup.json()["scores"]["1"]["star_rating"] == 3

    missing_ids = client.get("/scores")
    assert missing_ids.status_code == 422

    rebuilt = client.post("/scores/rebuild", json={"device_id": 1})
    assert rebuilt.status_code == 200
    assert rebuilt.json() == {"processed": 2, "task_id": None}
