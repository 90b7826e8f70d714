from __future__ import annotations

import pytest

from matter_scores.domain.entities.capability import CapabilityCatalog
from matter_scores.domain.entities.observation import (
    ClusterDetail,
    EndpointObservation,
    parse_endpoints,
    parse_int,
)
from matter_scores.domain.services.capability_detector import CapabilityDetector
from matter_scores.domain.services.specification_registry import SpecificationRegistry


@pytest.mark.parametrize(
    "value, expected",
    [
        (9, 9),
        ("9", 9),
        ("0x9", 9),
        (" 0X1F ", 31),
        (8.0, 8),
        (8.5, None),
        (True, None),
        ("SCH", None),
        (None, None),
        ([1], None),
    ],
)
def test_parse_int(value, expected) -> None:
    assert parse_int(value) == expected


def test_hex_feature_map_is_read() -> None:
    detail = ClusterDetail.from_dict({"id": 513, "feature_map": "0x9"})

    assert detail.feature_map == 9


def test_unreadable_feature_map_counts_as_not_reported() -> None:
    detail = ClusterDetail.from_dict(
        {"id": 513, "feature_map": "heat+cool", "attribute_list": [0, "x", "0x12"]}
    )

    assert detail.feature_map is None
    assert detail.attributes == [0, 18]


def test_detail_without_usable_cluster_id_is_dropped() -> None:
    assert ClusterDetail.from_dict({"id": "thermostat"}) is None
    assert ClusterDetail.from_dict({"feature_map": 1}) is None


def test_endpoint_keeps_good_entries_around_bad_ones() -> None:
    endpoint = EndpointObservation.from_dict(
        {
            "endpoint_id": "1",
            "device_types": 769,
            "server_clusters": 6,
            "client_clusters": [1026, "bogus"],
            "server_cluster_details": [
                {"id": 513, "feature_map": "0x9"},
                {"id": "nope"},
                "not-a-record",
            ],
            "client_cluster_details": {"id": 1026},
        }
    )

    assert endpoint.endpoint_id == 1
    assert endpoint.device_types == [769]
    assert endpoint.server_clusters == []
    assert endpoint.client_clusters == [1026]
    assert [d.cluster_id for d in endpoint.server_cluster_details] == [513]
    assert endpoint.client_cluster_details == []


def test_missing_endpoint_id_is_root() -> None:
    assert EndpointObservation.from_dict({"device_types": [22]}).is_root


def test_non_integer_endpoint_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        EndpointObservation.from_dict({"endpoint_id": "one"})


def test_parse_endpoints_skips_unusable_records() -> None:
    endpoints = parse_endpoints(
        [
            {"endpoint_id": 1, "device_types": [256], "server_clusters": [6]},
            {"endpoint_id": "one", "server_clusters": [6]},
            [1],
            None,
            {"endpoint_id": 2, "device_types": [257], "server_clusters": [8]},
        ]
    )

    assert [endpoint.endpoint_id for endpoint in endpoints] == [1, 2]


def test_unreadable_feature_map_falls_back_to_presence(
    registry: SpecificationRegistry, capability_catalog: CapabilityCatalog
) -> None:
    endpoints = parse_endpoints(
        [
            {
                "endpoint_id": 1,
                "device_types": [769],
                "server_clusters": [3, 513],
                "server_cluster_details": [{"id": 513, "feature_map": "n/a"}],
            }
        ]
    )

    result = CapabilityDetector(registry, capability_catalog).analyze(endpoints)

    assert "scheduling" in result.supported
