from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "unknown_node",
        "unbounded_expansion",
        "expansion_budget_exceeded",
        "tree_already_expanded",
        "negative_distance",
        "invalid_node_id",
        "duplicate_node",
        "duplicate_edge",
        "node_not_in_graph",
        "invalid_input",
        "graph_file_unavailable",
        "graph_error",
    }
)


@dataclass(eq=False)
class GraphError(ValueError):
    """Contract violation raised synchronously by graph construction or queries."""

    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class InvalidInputError(GraphError):
    """A graph file could not be read or contains a malformed token."""

    source: str = ""
    line_number: int | None = None
    token: str | None = None


def normalize_reason_code(reason_code: str, *, default: str = "graph_error") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
