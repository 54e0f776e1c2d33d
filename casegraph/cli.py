"""Casegraph CLI: run case-graph analyses from the command line.

Usage:
    casegraph analyze case.json hierarchy --leaders 2 --layout
    casegraph analyze case.json shortest-path --source n1 --target n9
    casegraph analyze - degree-centrality --top 5     # snapshot on stdin
    casegraph summary case.json
    casegraph demo louvain-communities

A snapshot file is a JSON object with ``nodes`` and ``edges`` lists, as
exported by the canvas.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from casegraph.config.settings import settings
from casegraph.data.demo_network import get_demo_snapshot
from casegraph.graph.builder import GraphBuilder
from casegraph.graph.engine import ALGORITHMS, AnalysisEngine, CasegraphError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="casegraph",
        description="Casegraph: link-graph analytics for investigations",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command")

    # analyze
    ana = subparsers.add_parser("analyze", help="Run one analysis on a snapshot")
    ana.add_argument("snapshot", help="Snapshot JSON file, or - for stdin")
    _add_analysis_arguments(ana)

    # demo
    demo = subparsers.add_parser("demo", help="Run an analysis on the demo case")
    _add_analysis_arguments(demo, optional_algorithm=True)

    # summary
    summ = subparsers.add_parser("summary", help="Show graph statistics")
    summ.add_argument("snapshot", help="Snapshot JSON file, or - for stdin")

    args = parser.parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else getattr(logging, settings.LOG_LEVEL)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Dispatch
    try:
        if args.command == "analyze":
            _cmd_analyze(args, _load_snapshot(args.snapshot))
        elif args.command == "demo":
            _cmd_analyze(args, get_demo_snapshot())
        elif args.command == "summary":
            _cmd_summary(_load_snapshot(args.snapshot))
    except (CasegraphError, OSError, ValueError) as exc:
        logger.error("Error: %s", exc)
        if args.verbose:
            raise
        sys.exit(1)


def _add_analysis_arguments(
    parser: argparse.ArgumentParser,
    optional_algorithm: bool = False,
) -> None:
    if optional_algorithm:
        parser.add_argument(
            "algorithm", nargs="?", default="hierarchy", choices=ALGORITHMS,
            help="Analysis to run (default: hierarchy)",
        )
    else:
        parser.add_argument("algorithm", choices=ALGORITHMS, help="Analysis to run")
    parser.add_argument("--source", help="Path source node id")
    parser.add_argument("--target", help="Path target node id")
    parser.add_argument("--leaders", type=int, help="Leader count for hierarchy (1-10)")
    parser.add_argument("--top", type=int, help="Keep only the top N centrality scores")
    parser.add_argument(
        "--layout", action="store_true", help="Include hierarchy canvas positions",
    )


def _load_snapshot(source: str) -> dict[str, Any]:
    """Read ``{"nodes": [...], "edges": [...]}`` from a file or stdin."""
    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")

    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("snapshot must be a JSON object with 'nodes' and 'edges'")
    return {
        "nodes": data.get("nodes") or [],
        "edges": data.get("edges") or [],
    }


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_analyze(args: argparse.Namespace, snapshot: dict[str, Any]) -> None:
    """Run the requested analysis and print it as JSON."""
    engine = AnalysisEngine(top_n=args.top)
    outcome = engine.run(
        args.algorithm,
        snapshot["nodes"],
        snapshot["edges"],
        source_id=args.source,
        target_id=args.target,
        leader_count=args.leaders,
        with_layout=args.layout,
    )
    print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))


def _cmd_summary(snapshot: dict[str, Any]) -> None:
    """Print graph statistics and build diagnostics."""
    graph = GraphBuilder().build(snapshot["nodes"], snapshot["edges"])
    print(json.dumps(graph.summary(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
