"""
Domain Service - Scoring Engine

Turns a gap analysis into a weighted 0-100 score and a 1-5 star rating.

Each of the four axes (mandatory/optional x server/client) yields a
percentage. The composite is the weighted sum of those percentages divided by
the sum of the configured weights, so partial weight sets still normalize.
Device types may name "key" client clusters whose presence adds a bonus on top
of the composite; the final score never exceeds 100.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

from matter_scores.domain.entities.registry import ScoringWeights
from matter_scores.domain.entities.score import DeviceTypeScore, GapResult
from matter_scores.domain.services.gap_analyzer import analyze_cluster_gaps
from matter_scores.domain.services.specification_registry import SpecificationRegistry

MAX_SCORE = 100.0
NON_COMPLIANT_STAR_CAP = 2

# (minimum score, stars), checked top to bottom.
STAR_THRESHOLDS = ((90.0, 5), (75.0, 4), (60.0, 3), (40.0, 2))


def round_score(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def score_to_stars(score: float, is_compliant: bool) -> int:
    stars = 1
    for minimum, rating in STAR_THRESHOLDS:
        if score >= minimum:
            stars = rating
            break
    if not is_compliant:
        return min(stars, NON_COMPLIANT_STAR_CAP)
    return stars


def _mandatory_axis(total: int, missing: int) -> float:
    if total == 0:
        return 100.0
    return (total - missing) / total * 100


def _optional_axis(total: int, implemented: int) -> float:
    if total == 0:
        return 0.0
    return implemented / total * 100


def key_client_bonus(weights: ScoringWeights, client_clusters: Iterable[int]) -> float:
    if not weights.key_client_clusters:
        return 0.0
    observed = set(client_clusters)
    key_clusters = weights.key_client_clusters
    matched = sum(1 for cluster_id in key_clusters if cluster_id in observed)
    ratio = matched / len(key_clusters)
    return ratio * weights.key_client_bonus * 100


class ScoringEngine:
    """Scores a set of observed clusters against one device type."""

    def __init__(self, registry: SpecificationRegistry):
        self._registry = registry

    @property
    def registry(self) -> SpecificationRegistry:
        return self._registry

    def evaluate(
        self,
        device_type_id: int,
        server_clusters: Iterable[int],
        client_clusters: Iterable[int],
    ) -> Tuple[DeviceTypeScore, float]:
        """Score a device type and also return the unrounded final score.

        The unrounded value is what star thresholds compare against; callers
        aggregating several device types need it to rate the device as a whole.
        """
        server = list(server_clusters)
        client = list(client_clusters)
        gap = analyze_cluster_gaps(self._registry, device_type_id, server, client)
        weights = self._registry.get_scoring_weights(device_type_id)
        return self.score_gap(gap, weights, client)

    def score_device_type(
        self,
        device_type_id: int,
        server_clusters: Iterable[int],
        client_clusters: Iterable[int],
    ) -> DeviceTypeScore:
        type_score, _ = self.evaluate(device_type_id, server_clusters, client_clusters)
        return type_score

    def score_gap(
        self,
        gap: GapResult,
        weights: ScoringWeights,
        client_clusters: Iterable[int],
    ) -> Tuple[DeviceTypeScore, float]:
        mandatory_server = _mandatory_axis(
            gap.total_mandatory_server, len(gap.missing_mandatory_server)
        )
        mandatory_client = _mandatory_axis(
            gap.total_mandatory_client, len(gap.missing_mandatory_client)
        )
        optional_server = _optional_axis(
            gap.total_optional_server, len(gap.implemented_optional_server)
        )
        optional_client = _optional_axis(
            gap.total_optional_client, len(gap.implemented_optional_client)
        )

        total_weight = weights.total_weight
        if total_weight == 0:
            composite = 0.0
        else:
            composite = (
                mandatory_server * weights.mandatory_server
                + mandatory_client * weights.mandatory_client
                + optional_server * weights.optional_server
                + optional_client * weights.optional_client
            ) / total_weight

        bonus = key_client_bonus(weights, client_clusters)
        final = min(MAX_SCORE, composite + bonus)
        is_compliant = gap.is_compliant

        name = (
            gap.device_type.name
            if gap.device_type is not None
            else self._registry.get_device_type_name(gap.device_type_id)
        )

        type_score = DeviceTypeScore(
            device_type_id=gap.device_type_id,
            device_type_name=name,
            score=round_score(final),
            star_rating=score_to_stars(final, is_compliant),
            is_compliant=is_compliant,
            client_bonus=round_score(bonus),
            mandatory_score=round_score(gap.mandatory_score),
            optional_score=round_score(gap.optional_score),
            breakdown={
                "mandatory_server_score": round_score(mandatory_server),
                "mandatory_client_score": round_score(mandatory_client),
                "optional_server_score": round_score(optional_server),
                "optional_client_score": round_score(optional_client),
            },
        )
        return type_score, final
