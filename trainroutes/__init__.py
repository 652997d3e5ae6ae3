from .compiled_graph import CompiledGraph, CompiledNode
from .errors import GraphError, InvalidInputError
from .graph import Edge, Graph, Node
from .loader import load_graph, parse_graph_lines
from .min_heap import MinHeap, PriorityQueue
from .routes import Route, TraversedRoute

__all__ = [
    "CompiledGraph",
    "CompiledNode",
    "Edge",
    "Graph",
    "GraphError",
    "InvalidInputError",
    "MinHeap",
    "Node",
    "PriorityQueue",
    "Route",
    "TraversedRoute",
    "load_graph",
    "parse_graph_lines",
]
