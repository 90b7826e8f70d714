"""Detects whether an older (or different) version of a device scores better."""

from typing import Optional, Sequence

import structlog

from matter_scores.domain.entities.observation import DeviceVersion
from matter_scores.domain.services.device_aggregator import DeviceAggregator

logger = structlog.get_logger(__name__)

# A different version must beat the latest by more than this many points.
RECOMMENDATION_MARGIN = 5.0


class VersionHistoryEvaluator:
    def __init__(self, aggregator: DeviceAggregator):
        self._aggregator = aggregator

    def find_best_version(self, versions: Sequence[DeviceVersion]) -> Optional[str]:
        """Return the software version worth recommending, if any.

        ``versions`` are ordered newest first.
        """
        if len(versions) <= 1:
            return None

        latest_score = 0.0
        best_score = 0.0
        best_version: Optional[DeviceVersion] = None

        for index, version in enumerate(versions):
            score = self._aggregator.aggregate(version.endpoints).overall_score
            if index == 0:
                latest_score = score
            if score > best_score:
                best_score = score
                best_version = version

        if best_version is None or best_score <= latest_score + RECOMMENDATION_MARGIN:
            return None

        logger.info(
            "version_evaluator.better_version_found",
            version=best_version.label,
            best_score=best_score,
            latest_score=latest_score,
        )
        return best_version.software_version
