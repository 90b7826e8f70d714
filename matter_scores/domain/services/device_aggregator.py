"""Folds every endpoint of a device into one device-level score."""

from typing import Dict, Iterable, List, Optional

import structlog

from matter_scores.domain.entities.observation import EndpointObservation
from matter_scores.domain.entities.score import DeviceScore, DeviceTypeScore
from matter_scores.domain.services.scoring_engine import (
    ScoringEngine,
    round_score,
    score_to_stars,
)

logger = structlog.get_logger(__name__)


class _ClusterPool:
    __slots__ = ("server", "client")

    def __init__(self) -> None:
        self.server: List[int] = []
        self.client: List[int] = []

    def add(self, endpoint: EndpointObservation) -> None:
        for cluster_id in endpoint.server_clusters:
            if cluster_id not in self.server:
                self.server.append(cluster_id)
        for cluster_id in endpoint.client_clusters:
            if cluster_id not in self.client:
                self.client.append(cluster_id)


def pool_clusters_by_device_type(
    endpoints: Iterable[EndpointObservation],
) -> Dict[int, _ClusterPool]:
    """Group clusters of application endpoints by the device types they claim.

    Keys keep first-occurrence order. The root endpoint and system device
    types never contribute.
    """
    pools: Dict[int, _ClusterPool] = {}
    for endpoint in endpoints:
        if endpoint.is_root:
            continue
        for device_type_id in endpoint.scoreable_device_types():
            pool = pools.get(device_type_id)
            if pool is None:
                pool = pools[device_type_id] = _ClusterPool()
            pool.add(endpoint)
    return pools


class DeviceAggregator:
    def __init__(self, engine: ScoringEngine):
        self._engine = engine

    def aggregate(self, endpoints: Iterable[EndpointObservation]) -> DeviceScore:
        """Score each claimed device type once and keep the best as overall.

        A device with nothing scoreable gets the empty, compliant score.
        """
        pools = pool_clusters_by_device_type(endpoints)
        if not pools:
            return DeviceScore.empty()

        scores_by_type: Dict[int, DeviceTypeScore] = {}
        best_raw: Optional[float] = None
        overall_compliant = True

        for device_type_id, pool in pools.items():
            type_score, raw = self._engine.evaluate(
                device_type_id, pool.server, pool.client
            )
            scores_by_type[device_type_id] = type_score
            overall_compliant = overall_compliant and type_score.is_compliant
            # Strict comparison keeps the earliest type on ties.
            if best_raw is None or raw > best_raw:
                best_raw = raw

        logger.debug(
            "aggregator.device_scored",
            device_types=list(scores_by_type),
            best_score=best_raw,
            is_compliant=overall_compliant,
        )

        return DeviceScore(
            overall_score=round_score(best_raw),
            star_rating=score_to_stars(best_raw, overall_compliant),
            is_compliant=overall_compliant,
            scores_by_type=scores_by_type,
        )
