from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from typing import Any

from trainroutes.compiled_graph import CompiledGraph
from trainroutes.errors import GraphError
from trainroutes.loader import load_graph
from trainroutes.settings import settings


def _add_bounds(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("start")
    parser.add_argument("--target", default=None)
    parser.add_argument("--min-depth", type=int, default=None)
    parser.add_argument("--max-depth", type=int, default=None)
    parser.add_argument("--max-distance", type=float, default=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query routes on a graph file (tokens like AB5, BC4).")
    parser.add_argument("--graph", default=settings.graph_path or None)
    sub = parser.add_subparsers(dest="command", required=True)

    traverse = sub.add_parser("traverse", help="Distance of an explicit route.")
    traverse.add_argument("nodes", nargs="+")

    _add_bounds(sub.add_parser("paths", help="List routes within depth/distance bounds."))
    _add_bounds(sub.add_parser("count", help="Count routes within depth/distance bounds."))

    for name, text in (("shortest", "Shortest route."), ("length", "Length of the shortest route.")):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("start")
        cmd.add_argument("target")
    return parser


def _expand_nodes(raw: Sequence[str]) -> list[str]:
    # Accept "A B C", "A-B-C" and "ABC" spellings of the same route.
    nodes: list[str] = []
    for item in raw:
        parts = [p.upper() for p in item.replace(",", "-").split("-") if p]
        if len(parts) == 1:
            nodes.extend(parts[0])
        else:
            nodes.extend(parts)
    return nodes


def run_query(args: argparse.Namespace, graph: CompiledGraph | None = None) -> dict[str, Any]:
    if graph is None:
        if not args.graph:
            raise GraphError(reason_code="graph_file_unavailable", message="No graph file given (--graph or GRAPH_PATH).")
        graph = load_graph(args.graph).compile()

    if args.command == "traverse":
        nodes = _expand_nodes(args.nodes)
        traversed = graph.traverse(nodes)
        if traversed is None:
            return {"command": "traverse", "route": nodes, "found": False}
        return {
            "command": "traverse",
            "route": list(traversed.node_ids),
            "found": True,
            "distances": list(traversed.distances),
            "total_distance": traversed.total_distance,
        }

    if args.command in {"paths", "count"}:
        bounds = {
            "target": args.target.upper() if args.target else None,
            "min_depth": args.min_depth,
            "max_depth": args.max_depth,
            "max_distance": args.max_distance,
        }
        start = args.start.upper()
        if args.command == "count":
            return {"command": "count", "start": start, **bounds, "count": graph.count_paths(start, **bounds)}
        routes = graph.generate_paths(start, **bounds)
        return {
            "command": "paths",
            "start": start,
            **bounds,
            "count": len(routes),
            "routes": [str(route) for route in routes],
        }

    start, target = args.start.upper(), args.target.upper()
    found, stats = graph.shortest_path_with_stats(start, target)
    payload: dict[str, Any] = {"command": args.command, "start": start, "target": target, "found": found is not None}
    if found is not None:
        route, distance = found
        payload["distance"] = distance
        if args.command == "shortest":
            payload["route"] = str(route)
            payload["stats"] = stats
    return payload


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    try:
        payload = run_query(args)
    except GraphError as exc:
        print(json.dumps({"reason_code": exc.reason_code, "message": exc.message}), file=sys.stderr)
        return 2
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
