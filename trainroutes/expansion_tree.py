from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import GraphError
from .logging_utils import log_event
from .routes import Route
from .settings import settings

if TYPE_CHECKING:
    from .compiled_graph import CompiledGraph


@dataclass
class TreeNode:
    node_id: str
    parent: int | None
    depth: int
    distance: float
    # neighbor id -> arena index of the child
    children: dict[str, int] = field(default_factory=dict)


class ExpansionTree:
    """Bounded breadth-first tree of the states reachable from a start node.

    Tree nodes live in an arena (``self.nodes``) and refer to their parent by
    index. The arena is filled in breadth-first order, which is also the order
    routes are reported in. The tree only grows while :meth:`expand` runs.
    """

    def __init__(self, graph: CompiledGraph, start_id: str) -> None:
        self.graph = graph
        self.start_id = start_id
        self.nodes: list[TreeNode] = []
        self.expanded = False

    def __len__(self) -> int:
        return len(self.nodes)

    def expand(
        self,
        *,
        max_depth: int | None = None,
        max_distance: float | None = None,
        max_nodes: int | None = None,
    ) -> None:
        if max_depth is None and max_distance is None:
            raise GraphError(
                reason_code="unbounded_expansion",
                message="Both max_depth and max_distance may not be None.",
            )
        if self.expanded:
            raise GraphError(
                reason_code="tree_already_expanded",
                message=f"Expansion tree from {self.start_id} is already expanded; build a new tree for new bounds.",
            )
        self.graph.require_node(self.start_id)
        # Depth-bounded expansions always terminate; only a distance-only bound
        # can loop forever on zero-distance cycles.
        budget: int | None = None
        if max_depth is None:
            budget = int(max_nodes if max_nodes is not None else settings.expansion_max_nodes)

        self.nodes.append(TreeNode(node_id=self.start_id, parent=None, depth=0, distance=0.0))
        queue: deque[int] = deque([0])

        while queue:
            current_idx = queue.popleft()
            current = self.nodes[current_idx]
            compiled = self.graph.require_node(current.node_id)

            for target_id, edge_distance in compiled.links.items():
                child_depth = current.depth + 1
                child_distance = current.distance + edge_distance

                # Siblings share a depth, so one overflow ends this parent.
                if max_depth is not None and child_depth > max_depth:
                    break
                if max_distance is not None and child_distance >= max_distance:
                    continue

                if budget is not None and len(self.nodes) >= budget:
                    raise GraphError(
                        reason_code="expansion_budget_exceeded",
                        message=f"Expansion tree exceeded {budget} nodes.",
                        details={
                            "start": self.start_id,
                            "max_depth": max_depth,
                            "max_distance": max_distance,
                        },
                    )

                child_idx = len(self.nodes)
                self.nodes.append(
                    TreeNode(
                        node_id=target_id,
                        parent=current_idx,
                        depth=child_depth,
                        distance=child_distance,
                    )
                )
                current.children[target_id] = child_idx
                queue.append(child_idx)

        self.expanded = True
        log_event(
            "expansion_tree_built",
            start=self.start_id,
            max_depth=max_depth,
            max_distance=max_distance,
            tree_nodes=len(self.nodes),
        )

    def _matching(self, *, min_depth: int | None, target: str | None) -> Iterator[int]:
        for idx, element in enumerate(self.nodes):
            if element.depth == 0 or (min_depth is not None and element.depth < min_depth):
                continue
            if target is not None and element.node_id != target:
                continue
            yield idx

    def route_to(self, idx: int) -> Route:
        ids: list[str] = []
        current: int | None = idx
        while current is not None:
            element = self.nodes[current]
            ids.append(element.node_id)
            current = element.parent
        ids.reverse()
        return Route.from_ids(ids)

    def generate_paths(self, *, min_depth: int | None = None, target: str | None = None) -> list[Route]:
        return [self.route_to(idx) for idx in self._matching(min_depth=min_depth, target=target)]

    def count_paths(self, *, min_depth: int | None = None, target: str | None = None) -> int:
        return sum(1 for _ in self._matching(min_depth=min_depth, target=target))
