from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .routes import Route, TraversedRoute


class TraverseRequest(BaseModel):
    route: list[str] = Field(..., min_length=1)


class TraverseResponse(BaseModel):
    found: bool
    route: list[str] | None = None
    distances: list[float] = Field(default_factory=list)
    total_distance: float | None = None

    @classmethod
    def from_result(cls, traversed: TraversedRoute | None) -> "TraverseResponse":
        if traversed is None:
            return cls(found=False)
        return cls(
            found=True,
            route=list(traversed.node_ids),
            distances=list(traversed.distances),
            total_distance=traversed.total_distance,
        )


class PathsRequest(BaseModel):
    """Bounds for route enumeration. The engine rejects requests with neither max bound."""

    start: str
    target: str | None = None
    min_depth: int | None = Field(default=None, ge=0)
    max_depth: int | None = Field(default=None, ge=0)
    max_distance: float | None = Field(default=None, ge=0.0, allow_inf_nan=False)


class PathsResponse(BaseModel):
    count: int
    routes: list[list[str]]


class CountResponse(BaseModel):
    count: int


class ShortestPathRequest(BaseModel):
    start: str
    target: str


class ShortestPathResponse(BaseModel):
    found: bool
    route: list[str] | None = None
    distance: float | None = None
    stats: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(
        cls,
        found: tuple[Route, float] | None,
        stats: dict[str, Any],
    ) -> "ShortestPathResponse":
        if found is None:
            return cls(found=False, stats=stats)
        route, distance = found
        return cls(found=True, route=list(route.node_ids), distance=distance, stats=stats)


class GraphSummary(BaseModel):
    node_count: int
    edge_count: int
    nodes: list[str]
    adjacency: dict[str, dict[str, float]]
