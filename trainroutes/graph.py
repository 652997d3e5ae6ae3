from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import GraphError

if TYPE_CHECKING:
    from .compiled_graph import CompiledGraph


@dataclass(frozen=True)
class Node:
    """Identity-only graph node. Two nodes are equal when their ids are."""

    id: str

    def __post_init__(self) -> None:
        if not isinstance(self.id, str):
            raise GraphError(
                reason_code="invalid_node_id",
                message=f"Node id must be a string, got {type(self.id).__name__}.",
            )

    def __str__(self) -> str:
        return f"[{self.id}]"


@dataclass(frozen=True)
class Edge:
    """Directed edge. Equality and hashing use the endpoints only.

    Re-adding an edge with the same endpoints and a different distance
    therefore refers to the same edge, which lets non-strict graphs replace it.
    """

    from_node: Node
    to_node: Node
    distance: float = field(compare=False)

    def __post_init__(self) -> None:
        distance = float(self.distance)
        if not math.isfinite(distance) or distance < 0.0:
            raise GraphError(
                reason_code="negative_distance",
                message=f"Edge distance must be a finite non-negative number, got {self.distance!r}.",
                details={"from": self.from_node.id, "to": self.to_node.id},
            )
        object.__setattr__(self, "distance", distance)

    def __str__(self) -> str:
        return f"{self.from_node}-> ({self.distance})->{self.to_node}"


class Graph:
    """Mutable node/edge collection that compiles into a :class:`CompiledGraph`.

    ``strict_nodes`` requires nodes to be added before any edge touching them
    and rejects adding a node twice; otherwise nodes are inferred from edges and
    repeats are ignored. ``strict_edges`` rejects a second edge between the same
    endpoints; otherwise the later edge silently replaces the earlier one.
    """

    def __init__(self, *, strict_nodes: bool = False, strict_edges: bool = False) -> None:
        self.strict_nodes = bool(strict_nodes)
        self.strict_edges = bool(strict_edges)
        self._nodes: dict[str, Node] = {}
        self._edges: dict[tuple[str, str], Edge] = {}

    def add_node(self, node: Node) -> None:
        if node.id in self._nodes:
            if self.strict_nodes:
                raise GraphError(
                    reason_code="duplicate_node",
                    message=(
                        f"The graph already contains node with id {node.id}. "
                        "Perhaps you want non-strict nodes?"
                    ),
                    details={"node": node.id},
                )
            return
        self._nodes[node.id] = node

    def add_edge(self, edge: Edge) -> None:
        if self.strict_nodes:
            for endpoint in (edge.from_node, edge.to_node):
                if endpoint.id not in self._nodes:
                    raise GraphError(
                        reason_code="node_not_in_graph",
                        message=f"The node {endpoint} of edge {edge} is not present in the graph.",
                        details={"node": endpoint.id},
                    )

        key = (edge.from_node.id, edge.to_node.id)
        if self.strict_edges and key in self._edges:
            raise GraphError(
                reason_code="duplicate_edge",
                message=(
                    f"The edge from node {edge.from_node} to node {edge.to_node} "
                    "is already part of the graph."
                ),
                details={"from": key[0], "to": key[1]},
            )

        self._nodes.setdefault(edge.from_node.id, edge.from_node)
        self._nodes.setdefault(edge.to_node.id, edge.to_node)
        # Replace, keeping the original insertion position.
        self._edges[key] = edge

    def add_edges(self, edges: Iterable[Edge]) -> None:
        for edge in edges:
            self.add_edge(edge)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes.values())

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges.values())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Node):
            return item.id in self._nodes
        if isinstance(item, Edge):
            return (item.from_node.id, item.to_node.id) in self._edges
        return False

    def compile(self) -> CompiledGraph:
        """Snapshot this graph. Later changes here do not affect the result."""
        from .compiled_graph import CompiledGraph

        return CompiledGraph.compile(self.nodes, self.edges)
