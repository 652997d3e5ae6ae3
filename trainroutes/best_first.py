from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from math import inf
from typing import TYPE_CHECKING, Any

from .logging_utils import log_event
from .min_heap import PriorityQueue

if TYPE_CHECKING:
    from .compiled_graph import CompiledGraph


@dataclass(frozen=True)
class SearchResult:
    nodes: tuple[str, ...]
    cost: float


# (node_id, target_id) -> estimated remaining distance. Must be consistent:
# h(u) <= d(u, v) + h(v) for every edge, and h(target) == 0. Closed nodes are
# never reopened, so an admissible but inconsistent estimate can miss the optimum.
Heuristic = Callable[[str, str], float]


def _zero_heuristic(_node_id: str, _target_id: str) -> float:
    return 0.0


def _reconstruct(came_from: list[int], start: int, target: int) -> list[int]:
    # Walk back at least one step so that a cycle through start is rebuilt
    # instead of stopping immediately at target == start.
    path = [target]
    current = target
    while True:
        current = came_from[current]
        path.append(current)
        if current == start:
            break
    path.reverse()
    return path


def best_first_search_with_stats(
    graph: CompiledGraph,
    start_id: str,
    target_id: str,
    *,
    heuristic: Heuristic | None = None,
) -> tuple[SearchResult | None, dict[str, Any]]:
    """Minimum-distance route from ``start_id`` to ``target_id``.

    With the default zero heuristic this is uniform-cost (Dijkstra) search.
    A supplied heuristic must be consistent (see ``Heuristic``) for the result
    to be a shortest route.
    When ``start_id == target_id`` the trivial zero-edge route is not accepted:
    the start node is reopened after its first expansion so the result is the
    shortest cycle through it. Search state is allocated per call.
    """
    start = graph.require_node(start_id)
    target = graph.require_node(target_id)
    h_fn = heuristic or _zero_heuristic

    n = len(graph)
    g = [inf] * n
    f = [inf] * n
    is_open = [False] * n
    closed = [False] * n
    came_from = [-1] * n

    g[start.index] = 0.0
    f[start.index] = g[start.index] + h_fn(start.id, target.id)
    is_open[start.index] = True
    frontier: PriorityQueue[int] = PriorityQueue()
    frontier.push(start.index, f[start.index])

    expanded = 0
    pushed = 1
    stale_skipped = 0
    start_reopened = False
    found = False

    while not frontier.is_empty():
        current = frontier.pop()
        if current is None:
            break
        if closed[current]:
            # An older entry for a node that was improved and already settled.
            stale_skipped += 1
            continue

        closed[current] = True
        is_open[current] = False

        if current == target.index:
            if current == start.index and not start_reopened:
                closed[current] = False
                start_reopened = True
            else:
                found = True
                break

        expanded += 1
        compiled = graph.node_at(current)
        for neighbor_id, distance in compiled.links.items():
            neighbor = graph.index_of(neighbor_id)
            if closed[neighbor]:
                continue
            tentative_g = g[current] + distance
            if is_open[neighbor] and tentative_g >= g[neighbor]:
                continue
            came_from[neighbor] = current
            g[neighbor] = tentative_g
            f[neighbor] = tentative_g + h_fn(neighbor_id, target.id)
            # Improved open nodes get a fresh entry; the old one is skipped on pop.
            frontier.push(neighbor, f[neighbor])
            is_open[neighbor] = True
            pushed += 1

    stats: dict[str, Any] = {
        "expanded": expanded,
        "pushed": pushed,
        "stale_skipped": stale_skipped,
        "termination_reason": "target_reached" if found else "frontier_exhausted",
    }
    log_event("shortest_path_search", start=start.id, target=target.id, found=found, **stats)

    if not found:
        return None, stats
    indices = _reconstruct(came_from, start.index, target.index)
    return (
        SearchResult(nodes=tuple(graph.node_at(i).id for i in indices), cost=g[target.index]),
        stats,
    )


def best_first_search(
    graph: CompiledGraph,
    start_id: str,
    target_id: str,
    *,
    heuristic: Heuristic | None = None,
) -> SearchResult | None:
    result, _stats = best_first_search_with_stats(graph, start_id, target_id, heuristic=heuristic)
    return result
