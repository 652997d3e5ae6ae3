from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .graph import Node

NodeRef = Node | str


def as_node(ref: NodeRef) -> Node:
    return ref if isinstance(ref, Node) else Node(ref)


def node_id(ref: NodeRef) -> str:
    return as_node(ref).id


@dataclass(frozen=True)
class Route:
    """Ordered sequence of nodes. Nodes may repeat, so cycles are allowed."""

    nodes: tuple[Node, ...]

    @classmethod
    def of(cls, *refs: NodeRef) -> "Route":
        return cls(tuple(as_node(ref) for ref in refs))

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> "Route":
        return cls(tuple(Node(i) for i in ids))

    @property
    def node_ids(self) -> tuple[str, ...]:
        return tuple(node.id for node in self.nodes)

    @property
    def depth(self) -> int:
        return max(0, len(self.nodes) - 1)

    def __len__(self) -> int:
        return len(self.nodes)

    def __str__(self) -> str:
        return "-".join(self.node_ids)


@dataclass(frozen=True)
class TraversedRoute(Route):
    distances: tuple[float, ...] = ()
    total_distance: float = 0.0

    @classmethod
    def build(cls, nodes: Sequence[Node], distances: Sequence[float]) -> "TraversedRoute":
        return cls(nodes=tuple(nodes), distances=tuple(distances), total_distance=float(sum(distances)))
