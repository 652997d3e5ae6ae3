from __future__ import annotations

import time
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .compiled_graph import CompiledGraph
from .errors import GraphError, normalize_reason_code
from .loader import load_graph
from .logging_utils import log_event
from .models import (
    CountResponse,
    GraphSummary,
    PathsRequest,
    PathsResponse,
    ShortestPathRequest,
    ShortestPathResponse,
    TraverseRequest,
    TraverseResponse,
)
from .settings import settings


@lru_cache(maxsize=4)
def load_compiled_graph(path: str) -> CompiledGraph:
    return load_graph(path).compile()


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.graph = None
    if settings.graph_path:
        try:
            app.state.graph = load_compiled_graph(settings.graph_path)
        except GraphError as exc:
            # Keep serving /health; graph endpoints answer 503 until fixed.
            log_event("graph_load_failed", path=settings.graph_path, reason_code=exc.reason_code, error=str(exc))
    yield


app = FastAPI(title="Train Route Query Service", version="0.1.0", lifespan=lifespan)


@app.exception_handler(GraphError)
async def graph_error_handler(_request: Request, exc: GraphError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "reason_code": normalize_reason_code(exc.reason_code),
            "message": exc.message,
            "details": exc.details or {},
        },
    )


def compiled_graph(request: Request) -> CompiledGraph:
    graph: CompiledGraph | None = getattr(request.app.state, "graph", None)
    if graph is None:
        raise HTTPException(status_code=503, detail="route graph not loaded")
    return graph


GraphDep = Annotated[CompiledGraph, Depends(compiled_graph)]


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/graph", response_model=GraphSummary)
async def graph_summary(graph: GraphDep) -> GraphSummary:
    return GraphSummary(
        node_count=len(graph),
        edge_count=graph.edge_count,
        nodes=list(graph.node_ids),
        adjacency={node_id: dict(graph.neighbors(node_id)) for node_id in graph.node_ids},
    )


@app.post("/traverse", response_model=TraverseResponse)
async def traverse(req: TraverseRequest, graph: GraphDep) -> TraverseResponse:
    traversed = graph.traverse(req.route)
    log_event("traverse_request", route="-".join(req.route), found=traversed is not None)
    return TraverseResponse.from_result(traversed)


@app.post("/paths", response_model=PathsResponse)
async def generate_paths(req: PathsRequest, graph: GraphDep) -> PathsResponse:
    t0 = time.perf_counter()
    routes = graph.generate_paths(
        req.start,
        target=req.target,
        min_depth=req.min_depth,
        max_depth=req.max_depth,
        max_distance=req.max_distance,
    )
    log_event(
        "paths_request",
        start=req.start,
        target=req.target,
        count=len(routes),
        duration_ms=round((time.perf_counter() - t0) * 1000.0, 2),
    )
    return PathsResponse(count=len(routes), routes=[list(route.node_ids) for route in routes])


@app.post("/paths/count", response_model=CountResponse)
async def count_paths(req: PathsRequest, graph: GraphDep) -> CountResponse:
    count = graph.count_paths(
        req.start,
        target=req.target,
        min_depth=req.min_depth,
        max_depth=req.max_depth,
        max_distance=req.max_distance,
    )
    log_event("paths_count_request", start=req.start, target=req.target, count=count)
    return CountResponse(count=count)


@app.post("/shortest-path", response_model=ShortestPathResponse)
async def shortest_path(req: ShortestPathRequest, graph: GraphDep) -> ShortestPathResponse:
    found, stats = graph.shortest_path_with_stats(req.start, req.target)
    return ShortestPathResponse.from_result(found, stats)
