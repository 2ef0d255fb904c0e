"""
graphflow command line
======================
Validate or evaluate a serialised graph JSON file, or list the node types the
built-in registry provides. Results are printed as JSON on stdout.

Usage
-----
    python -m graphflow validate <graph.json>
    python -m graphflow evaluate <graph.json>
    python -m graphflow evaluate --sample complex
    python -m graphflow nodes [--category math]

Exit status is 0 on success, 1 when validation or evaluation fails, and 2 when
the input file cannot be read or is not a graph.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from graphflow.core.Evaluator import GraphEvaluator
from graphflow.core.GraphPrimitives import Graph
from graphflow.examples.SampleGraphs import GRAPHS
from graphflow.noderegistry.NodeRegistry import create_default_registry
from graphflow.server.config import configure_logging
from graphflow.server.serializers.graph_serializer import (
    serialize_evaluation,
    serialize_registry,
    serialize_validation,
)

logger = logging.getLogger("graphflow")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


class GraphInputError(Exception):
    pass


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="graphflow",
        description="Validate and evaluate dataflow graphs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        help="Root logging level (default: WARNING).",
    )
    sub = p.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("validate", "Statically check a graph without running it."),
        ("evaluate", "Run a graph and print every node output."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        source = cmd.add_mutually_exclusive_group(required=True)
        source.add_argument(
            "graph_json",
            metavar="graph.json",
            nargs="?",
            help="Path to the graph JSON file.",
        )
        source.add_argument(
            "--sample",
            choices=sorted(GRAPHS.keys()),
            help="Use one of the bundled sample graphs instead of a file.",
        )

    nodes = sub.add_parser("nodes", help="List registered node definitions.")
    nodes.add_argument("--category", default=None, help="Only list nodes in this category.")
    return p


def load_graph(path: Optional[str], sample: Optional[str]) -> Graph:
    if sample is not None:
        return Graph.from_dict(GRAPHS[sample])

    json_path = Path(path)
    if not json_path.exists():
        raise GraphInputError(f"File not found: {json_path}")
    try:
        data = json.loads(json_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise GraphInputError(f"Invalid JSON in {json_path}: {exc}") from exc
    try:
        return Graph.from_dict(data)
    except ValidationError as exc:
        raise GraphInputError(f"Not a graph document: {exc}") from exc


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level.upper())
    registry = create_default_registry()

    if args.command == "nodes":
        _emit({"nodes": serialize_registry(registry, args.category)})
        return EXIT_OK

    try:
        graph = load_graph(args.graph_json, args.sample)
    except GraphInputError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    evaluator = GraphEvaluator(graph, registry)
    if args.command == "validate":
        result = evaluator.validate()
        _emit(serialize_validation(result))
    else:
        result = asyncio.run(evaluator.evaluate())
        _emit(serialize_evaluation(result))

    return EXIT_OK if result.success else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
