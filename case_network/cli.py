"""CLI utility for running case network analyses over a JSON record bundle."""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import ValidationError

from case_network.config_loader import Settings, get_settings
from case_network.errors import CaseNetworkError
from case_network.graph.models import AnalysisMode
from case_network.service import NetworkAnalysisService, NetworkInput
from case_network.utils.logging_config import configure_logging

# CLI mode -> analysis overlay
GRAPH_MODES = {
    "build": AnalysisMode.NONE,
    "centrality": AnalysisMode.CENTRALITY,
    "communities": AnalysisMode.COMMUNITIES,
    "path": AnalysisMode.PATHFINDING,
    "timeline": AnalysisMode.TIMELINE,
}
MODES = [*GRAPH_MODES, "clusters", "snapshot"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="case-network",
        description="Build and analyze an investigative case network",
    )
    parser.add_argument(
        "mode",
        choices=MODES,
        help="Analysis to run",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="JSON record bundle (default: stdin)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to config.yaml (default: CASE_NETWORK_CONFIG or config/config.yaml)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for community detection (default: from config)",
    )
    parser.add_argument(
        "--source",
        type=str,
        help="Path start node id (path mode)",
    )
    parser.add_argument(
        "--target",
        type=str,
        help="Path end node id (path mode)",
    )
    parser.add_argument(
        "--start",
        type=str,
        help="Inclusive start date, YYYY-MM-DD (timeline mode)",
    )
    parser.add_argument(
        "--end",
        type=str,
        help="Inclusive end date, YYYY-MM-DD (timeline mode)",
    )
    parser.add_argument(
        "--case-filter",
        action="store_true",
        help="Drop curated baseline records, keeping only extracted ones",
    )
    parser.add_argument(
        "--case-id",
        type=str,
        help="Case the view is scoped to (snapshot mode)",
    )
    parser.add_argument(
        "--relationships-total",
        type=int,
        default=0,
        help="Relationship count held elsewhere (snapshot mode, default: 0)",
    )
    parser.add_argument(
        "--top",
        type=int,
        help="Only report the N most central nodes (centrality mode)",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output file path (default: stdout)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def load_input(source: str) -> NetworkInput:
    """Read a record bundle from a file path, or stdin for "-"."""
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with Path(source).open("r", encoding="utf-8") as f:
            data = json.load(f)
    return NetworkInput.from_dict(data)


def run(args: argparse.Namespace, service: NetworkAnalysisService) -> dict:
    """Execute one CLI mode and return a JSON-serializable result."""
    network_input = load_input(args.input)
    if args.case_filter:
        network_input.case_filter_active = True

    if args.mode == "clusters":
        combined = service.combine(network_input)
        clusters = service.clusters(combined.entities, combined.connections)
        return {"mode": "clusters", "clusters": [c.to_dict() for c in clusters]}

    if args.mode == "snapshot":
        snapshot = service.snapshot(
            network_input,
            relationships_total=args.relationships_total,
            case_id=args.case_id,
        )
        return {
            "mode": "snapshot",
            "snapshot": snapshot.to_dict(),
            "labels": snapshot.stats_labels(),
        }

    return service.analyze(
        network_input,
        mode=GRAPH_MODES[args.mode],
        source_id=args.source,
        target_id=args.target,
        start_date=args.start,
        end_date=args.end,
        seed=args.seed,
        top=args.top,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the case-network CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mode == "path" and not (args.source and args.target):
        parser.error("path mode requires --source and --target")

    try:
        settings = Settings.from_yaml(args.config) if args.config else get_settings()
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValidationError, yaml.YAMLError) as e:
        print(f"Error: Invalid config: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        settings.logging.level = "DEBUG"
    configure_logging(settings.logging)

    service = NetworkAnalysisService(settings=settings)
    try:
        result = run(args, service)
    except FileNotFoundError as e:
        print(f"Error: Input does not exist: {e.filename}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON input: {e}", file=sys.stderr)
        return 1
    except CaseNetworkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = json.dumps(result, indent=2)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote {args.mode} result to {output_path}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
