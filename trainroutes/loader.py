from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from .errors import GraphError, InvalidInputError
from .graph import Edge, Graph, Node
from .logging_utils import log_event
from .settings import settings

_TOKEN_SPLIT_RE = re.compile(r"[, ]")
_DISTANCE_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")


def _bad_token(source: str, line_number: int, token: str, reason: str) -> InvalidInputError:
    return InvalidInputError(
        reason_code="invalid_input",
        message=f"Bad term in file {source} line {line_number}: {token} ({reason})",
        source=source,
        line_number=line_number,
        token=token,
    )


def parse_edge_token(token: str, *, source: str = "<input>", line_number: int = 0) -> Edge:
    """Parse ``AB5``-style tokens: from id, to id, then a decimal distance."""
    term = token.upper()
    if len(term) < 3:
        raise _bad_token(source, line_number, term, "shorter than three characters")
    distance_text = term[2:]
    if not _DISTANCE_RE.match(distance_text):
        raise _bad_token(source, line_number, term, f"numeric part can not be parsed: {distance_text}")
    return Edge(Node(term[0]), Node(term[1]), float(distance_text))


def parse_graph_lines(
    lines: Iterable[str],
    *,
    source: str = "<input>",
    strict_edges: bool | None = None,
) -> Graph:
    # The text format has no node declarations, so nodes are always inferred.
    graph = Graph(
        strict_nodes=False,
        strict_edges=settings.graph_strict_edges if strict_edges is None else strict_edges,
    )
    line_count = 0
    for line_number, line in enumerate(lines, start=1):
        line_count = line_number
        for token in _TOKEN_SPLIT_RE.split(line.strip()):
            # Empty pieces come from ", " separators; "Graph:" style labels are skipped.
            if not token or token.endswith(":"):
                continue
            edge = parse_edge_token(token, source=source, line_number=line_number)
            try:
                graph.add_edge(edge)
            except GraphError as exc:
                raise InvalidInputError(
                    reason_code="invalid_input",
                    message=f"Bad term in file {source} line {line_number}: {token.upper()} ({exc.message})",
                    details={"cause": exc.reason_code, **(exc.details or {})},
                    source=source,
                    line_number=line_number,
                    token=token.upper(),
                ) from exc

    log_event(
        "graph_loaded",
        source=source,
        line_count=line_count,
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
    )
    return graph


def load_graph(
    path: str | Path,
    *,
    strict_edges: bool | None = None,
) -> Graph:
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidInputError(
            reason_code="graph_file_unavailable",
            message=f"Graph file {file_path} could not be read: {exc}",
            source=str(file_path),
        ) from exc
    return parse_graph_lines(
        text.splitlines(),
        source=str(file_path),
        strict_edges=strict_edges,
    )
