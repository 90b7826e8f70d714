"""Domain services: the pure scoring and capability engine."""

from .capability_detector import CapabilityDetector, humanize_technical_name
from .device_aggregator import DeviceAggregator
from .gap_analyzer import analyze_cluster_gaps
from .scoring_engine import ScoringEngine, round_score, score_to_stars
from .specification_registry import SpecificationRegistry
from .version_evaluator import VersionHistoryEvaluator

__all__ = [
    "CapabilityDetector",
    "DeviceAggregator",
    "ScoringEngine",
    "SpecificationRegistry",
    "VersionHistoryEvaluator",
    "analyze_cluster_gaps",
    "humanize_technical_name",
    "round_score",
    "score_to_stars",
]
