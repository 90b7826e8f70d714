from __future__ import annotations

from matter_scores.domain.entities.observation import EndpointObservation
from matter_scores.domain.services.device_aggregator import (
    DeviceAggregator,
    pool_clusters_by_device_type,
)
from tests.conftest import make_endpoint


def test_empty_device_gets_empty_compliant_score(aggregator: DeviceAggregator) -> None:
    score = aggregator.aggregate([])

    assert score.overall_score == 0.0
    assert score.star_rating == 1
    assert score.is_compliant is True
    assert score.scores_by_type == {}


def test_root_endpoint_and_system_types_are_not_scored(
    aggregator: DeviceAggregator, root_endpoint: EndpointObservation
) -> None:
    power_source = make_endpoint(1, device_types=[17], server=[47])

    score = aggregator.aggregate([root_endpoint, power_source])

    assert score.scores_by_type == {}
    assert score.star_rating == 1


def test_clusters_of_endpoints_sharing_a_device_type_are_pooled(
    aggregator: DeviceAggregator, root_endpoint: EndpointObservation
) -> None:
    first = make_endpoint(1, device_types=[256], server=[3, 4])
    second = make_endpoint(2, device_types=[256], server=[6, 98])

    score = aggregator.aggregate([root_endpoint, first, second])

    assert list(score.scores_by_type) == [256]
    type_score = score.scores_by_type[256]
    assert type_score.is_compliant is True
    assert type_score.breakdown["mandatory_server_score"] == 100.0
    assert score.overall_score == 60.0


def test_pooling_keeps_first_occurrence_order() -> None:
    pools = pool_clusters_by_device_type(
        [
            make_endpoint(1, device_types=[769, 256], server=[6, 3], client=[1026]),
            make_endpoint(2, device_types=[256, 17], server=[3, 98]),
        ]
    )

    assert list(pools) == [769, 256]
    assert pools[256].server == [6, 3, 98]
    assert pools[256].client == [1026]
    assert pools[769].server == [6, 3]


def test_overall_score_is_best_device_type(aggregator: DeviceAggregator) -> None:
    light = make_endpoint(1, device_types=[256], server=[3, 4, 6, 98])
    thermostat = make_endpoint(
        2, device_types=[769], server=[3, 513, 4, 98], client=[514, 1026]
    )

    score = aggregator.aggregate([light, thermostat])

    assert set(score.scores_by_type) == {256, 769}
    assert score.scores_by_type[256].score == 60.0
    assert score.scores_by_type[769].score == 100.0
    assert score.overall_score == 100.0
    assert score.star_rating == 5
    assert score.best_type_score().device_type_id == 769


def test_any_non_compliant_type_caps_device_rating(
    aggregator: DeviceAggregator,
) -> None:
    broken_light = make_endpoint(1, device_types=[256], server=[3, 4])
    thermostat = make_endpoint(
        2, device_types=[769], server=[3, 513, 4, 98], client=[514, 1026]
    )

    score = aggregator.aggregate([broken_light, thermostat])

    assert score.overall_score == 100.0
    assert score.is_compliant is False
    assert score.star_rating == 2


def test_device_types_reported_as_records_are_accepted(
    aggregator: DeviceAggregator,
) -> None:
    endpoint = EndpointObservation.from_dict(
        {
            "endpoint_id": 1,
            "device_types": [{"id": 256, "revision": 3}, "bogus", None, True],
            "server_clusters": [3, 4, 6, 98],
        }
    )

    assert endpoint.device_types == [256]
    score = aggregator.aggregate([endpoint])
    assert list(score.scores_by_type) == [256]
    assert score.is_compliant is True


def test_device_score_round_trips_through_dict(aggregator: DeviceAggregator) -> None:
    score = aggregator.aggregate(
        [make_endpoint(1, device_types=[769], server=[3, 513], client=[1026])]
    )
    score.best_version = "1.2.0"

    document = score.to_dict()
    restored = type(score).from_dict(document)

    assert list(document["scores_by_type"]) == ["769"]
    assert restored == score
