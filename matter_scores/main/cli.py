"""
Operations CLI - Main Layer

``matter-scores rebuild`` refreshes the score cache from stored telemetry and
``matter-scores score`` scores an endpoint dump without touching the database.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from matter_scores.domain.entities.observation import EndpointObservation
from matter_scores.main.config import get_settings
from matter_scores.shared import (
    configure_logging,
    get_logger,
    update_logging_from_settings,
)

logger = get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Matter device scores: rebuild the cache or score an endpoint file."""
    parser = argparse.ArgumentParser(
        prog="matter-scores",
        description="Compliance scores and capabilities of Matter devices.",
    )
    subparsers = parser.add_subparsers(dest="command")

    rebuild = subparsers.add_parser(
        "rebuild", help="Recompute cached scores from stored telemetry."
    )
    rebuild.add_argument(
        "--device",
        dest="device_id",
        type=int,
        default=None,
        help="Rebuild a single device instead of every device.",
    )

    score = subparsers.add_parser(
        "score", help="Score an endpoint JSON file and print the result."
    )
    score.add_argument("file", help="JSON list of endpoints (or {'endpoints': [...]}).")
    score.add_argument(
        "--no-capabilities",
        dest="capabilities",
        action="store_false",
        default=True,
        help="Skip the capability analysis.",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging()
    update_logging_from_settings(get_settings())

    if args.command == "rebuild":
        return _cmd_rebuild(args)
    return _cmd_score(args)


def _cmd_rebuild(args: argparse.Namespace) -> int:
    from matter_scores.main.container import init_container

    container = init_container(get_settings())
    rebuild_use_case = container.rebuild_score_cache_use_case()
    try:
        processed = asyncio.run(rebuild_use_case.execute(args.device_id))
    finally:
        container.mongo_database().close()

    logger.info("cli.rebuild.completed", device_id=args.device_id, processed=processed)
    print(f"Processed {processed} device(s)")
    return 0


def _load_endpoints(path: Path) -> List[EndpointObservation]:
    with open(path, "r", encoding="utf-8") as f:
        payload: Any = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("endpoints") or []
    if not isinstance(payload, list):
        raise ValueError("expected a list of endpoints")
    endpoints: List[EndpointObservation] = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ValueError(f"endpoint #{position} is not an object")
        endpoints.append(EndpointObservation.from_dict(item))
    return endpoints


def _cmd_score(args: argparse.Namespace) -> int:
    from matter_scores.domain.services import (
        CapabilityDetector,
        DeviceAggregator,
        ScoringEngine,
        SpecificationRegistry,
    )
    from matter_scores.infrastructure.registry import (
        YamlCapabilityCatalogLoader,
        YamlSpecificationLoader,
    )

    path = Path(args.file)
    if not path.is_file():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 2

    try:
        endpoints = _load_endpoints(path)
    except (OSError, ValueError) as exc:
        print(f"Error: Cannot read endpoints from {args.file}: {exc}", file=sys.stderr)
        return 2

    scoring = get_settings().scoring
    registry = SpecificationRegistry.from_loader(
        YamlSpecificationLoader(
            device_types_path=scoring.device_types_path,
            clusters_path=scoring.clusters_path,
        )
    )
    device_score = DeviceAggregator(ScoringEngine(registry)).aggregate(endpoints)
    output: Dict[str, Any] = {"score": device_score.to_dict()}

    if args.capabilities:
        catalog = YamlCapabilityCatalogLoader(scoring.capabilities_path).load()
        result = CapabilityDetector(registry, catalog).analyze(endpoints)
        output["capabilities"] = {
            "device_category": result.device_category,
            "supported": list(result.supported),
            "summary": {
                "total": result.summary.total,
                "supported": result.summary.supported,
                "percentage": result.summary.percentage,
            },
            "standouts": result.standouts,
            "missing": result.missing,
        }

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
