"""Cluster gap analysis of a device type against observed clusters."""

from typing import AbstractSet, Iterable, List, Sequence

from matter_scores.domain.entities.score import GapResult
from matter_scores.domain.services.specification_registry import SpecificationRegistry


def _missing(required: Sequence[int], observed: AbstractSet[int]) -> List[int]:
    return [cluster_id for cluster_id in required if cluster_id not in observed]


def _present(optional: Sequence[int], observed: AbstractSet[int]) -> List[int]:
    return [cluster_id for cluster_id in optional if cluster_id in observed]


def _extra(observed: Iterable[int], *known: Sequence[int]) -> List[int]:
    named = set().union(*known)
    extra: List[int] = []
    for cluster_id in observed:
        if cluster_id not in named and cluster_id not in extra:
            extra.append(cluster_id)
    return extra


def analyze_cluster_gaps(
    registry: SpecificationRegistry,
    device_type_id: int,
    server_clusters: Iterable[int],
    client_clusters: Iterable[int],
) -> GapResult:
    """Compare a device type's cluster requirements with what was observed.

    An unknown device type demands nothing, so the result is compliant with
    all requirement lists empty.
    """

    server_list = list(server_clusters)
    client_list = list(client_clusters)
    server = set(server_list)
    client = set(client_list)

    spec = registry.get_device_type(device_type_id)
    if spec is None:
        return GapResult(
            device_type_id=device_type_id,
            extra_server=_extra(server_list),
            extra_client=_extra(client_list),
        )

    return GapResult(
        device_type_id=device_type_id,
        device_type=spec,
        missing_mandatory_server=_missing(spec.mandatory_server, server),
        missing_mandatory_client=_missing(spec.mandatory_client, client),
        implemented_optional_server=_present(spec.optional_server, server),
        implemented_optional_client=_present(spec.optional_client, client),
        extra_server=_extra(server_list, spec.mandatory_server, spec.optional_server),
        extra_client=_extra(client_list, spec.mandatory_client, spec.optional_client),
        total_mandatory_server=len(spec.mandatory_server),
        total_mandatory_client=len(spec.mandatory_client),
        total_optional_server=len(spec.optional_server),
        total_optional_client=len(spec.optional_client),
    )
