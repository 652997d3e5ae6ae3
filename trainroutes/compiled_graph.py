from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .best_first import Heuristic, best_first_search_with_stats
from .errors import GraphError
from .expansion_tree import ExpansionTree
from .graph import Edge, Node
from .logging_utils import log_event
from .routes import NodeRef, Route, TraversedRoute, as_node, node_id


@dataclass(frozen=True)
class CompiledNode:
    id: str
    index: int
    # target id -> edge distance, outgoing only
    links: Mapping[str, float]


class CompiledGraph:
    """Immutable adjacency snapshot answering route queries.

    Build one with :meth:`compile` (or ``Graph.compile()``). Queries never
    mutate the snapshot; per-search state lives in the individual call.
    """

    def __init__(self, nodes: Mapping[str, CompiledNode]) -> None:
        self._nodes: Mapping[str, CompiledNode] = MappingProxyType(dict(nodes))
        self._by_index: tuple[CompiledNode, ...] = tuple(
            sorted(self._nodes.values(), key=lambda node: node.index)
        )
        self._edge_count = sum(len(node.links) for node in self._by_index)

    @classmethod
    def compile(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> "CompiledGraph":
        links_mut: dict[str, dict[str, float]] = {}
        for node in nodes:
            links_mut.setdefault(node.id, {})
        edges_seen = 0
        for edge in edges:
            edges_seen += 1
            to_id = edge.to_node.id
            links_mut.setdefault(to_id, {})
            # Last-inserted distance wins for repeated (from, to) pairs.
            links_mut.setdefault(edge.from_node.id, {})[to_id] = float(edge.distance)

        compiled = {
            node_id_: CompiledNode(id=node_id_, index=index, links=MappingProxyType(links))
            for index, (node_id_, links) in enumerate(links_mut.items())
        }
        graph = cls(compiled)
        log_event(
            "graph_compiled",
            node_count=len(graph),
            edge_count=graph.edge_count,
            edges_seen=edges_seen,
        )
        return graph

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, Node):
            return ref.id in self._nodes
        if isinstance(ref, str):
            return ref in self._nodes
        return False

    @property
    def edge_count(self) -> int:
        return self._edge_count

    @property
    def node_ids(self) -> tuple[str, ...]:
        return tuple(node.id for node in self._by_index)

    def get_compiled_node(self, node_id_: str) -> CompiledNode | None:
        return self._nodes.get(node_id_)

    def node_at(self, index: int) -> CompiledNode:
        return self._by_index[index]

    def index_of(self, node_id_: str) -> int:
        return self._nodes[node_id_].index

    def require_node(self, ref: NodeRef) -> CompiledNode:
        key = node_id(ref)
        compiled = self._nodes.get(key)
        if compiled is None:
            raise GraphError(
                reason_code="unknown_node",
                message=f"Node with id {key} is not present in the graph.",
                details={"node": key},
            )
        return compiled

    def neighbors(self, ref: NodeRef) -> Mapping[str, float]:
        return self.require_node(ref).links

    def traverse(self, route: Route | Sequence[NodeRef]) -> TraversedRoute | None:
        """Validate an explicit route and score it.

        Returns None when a node is unknown or two consecutive nodes are not
        joined by an edge. An empty route is also None; a single node is a
        valid route of zero steps.
        """
        refs = route.nodes if isinstance(route, Route) else tuple(route)
        if not refs:
            return None

        nodes: list[Node] = []
        distances: list[float] = []
        previous: CompiledNode | None = None
        for ref in refs:
            node = as_node(ref)
            compiled = self._nodes.get(node.id)
            if compiled is None:
                return None
            if previous is not None:
                distance = previous.links.get(compiled.id)
                if distance is None:
                    return None
                distances.append(distance)
            nodes.append(node)
            previous = compiled

        return TraversedRoute.build(nodes, distances)

    def _expand(
        self,
        start: NodeRef,
        *,
        max_depth: int | None,
        max_distance: float | None,
        max_nodes: int | None,
    ) -> ExpansionTree:
        tree = ExpansionTree(self, node_id(start))
        tree.expand(max_depth=max_depth, max_distance=max_distance, max_nodes=max_nodes)
        return tree

    def generate_paths(
        self,
        start: NodeRef,
        target: NodeRef | None = None,
        min_depth: int | None = None,
        max_depth: int | None = None,
        max_distance: float | None = None,
        *,
        max_nodes: int | None = None,
    ) -> list[Route]:
        """Every route from ``start`` within the bounds, in breadth-first order.

        ``min_depth`` and ``max_depth`` are inclusive edge counts, ``max_distance``
        is exclusive. At least one of ``max_depth``/``max_distance`` is required.
        Zero-edge routes are never reported.
        """
        tree = self._expand(start, max_depth=max_depth, max_distance=max_distance, max_nodes=max_nodes)
        return tree.generate_paths(
            min_depth=min_depth,
            target=None if target is None else node_id(target),
        )

    def count_paths(
        self,
        start: NodeRef,
        target: NodeRef | None = None,
        min_depth: int | None = None,
        max_depth: int | None = None,
        max_distance: float | None = None,
        *,
        max_nodes: int | None = None,
    ) -> int:
        tree = self._expand(start, max_depth=max_depth, max_distance=max_distance, max_nodes=max_nodes)
        return tree.count_paths(
            min_depth=min_depth,
            target=None if target is None else node_id(target),
        )

    def shortest_path_with_stats(
        self,
        start: NodeRef,
        target: NodeRef,
        *,
        heuristic: Heuristic | None = None,
    ) -> tuple[tuple[Route, float] | None, dict[str, Any]]:
        """Shortest route plus search stats. ``heuristic`` must be consistent."""
        result, stats = best_first_search_with_stats(
            self,
            node_id(start),
            node_id(target),
            heuristic=heuristic,
        )
        if result is None:
            return None, stats
        return (Route.from_ids(result.nodes), result.cost), stats

    def find_shortest_path(self, start: NodeRef, target: NodeRef) -> Route | None:
        """Shortest route between two nodes; ``start == target`` finds the shortest cycle."""
        found, _stats = self.shortest_path_with_stats(start, target)
        return None if found is None else found[0]

    def find_length_of_shortest_path(self, start: NodeRef, target: NodeRef) -> float | None:
        found, _stats = self.shortest_path_with_stats(start, target)
        return None if found is None else found[1]
