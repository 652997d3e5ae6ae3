from __future__ import annotations

import pytest

from trainroutes.compiled_graph import CompiledGraph
from trainroutes.errors import GraphError
from trainroutes.expansion_tree import ExpansionTree
from trainroutes.loader import parse_graph_lines


def _graph() -> CompiledGraph:
    return parse_graph_lines(["Graph: AB5, BC4, CD8, DC8, DE6, AD5, CE2, EB3, AE7"]).compile()


def _ids(routes) -> list[str]:
    return [str(route) for route in routes]


def test_cycles_back_to_start_within_three_stops() -> None:
    compiled = _graph()
    routes = compiled.generate_paths("C", target="C", max_depth=3)

    assert sorted(_ids(routes)) == ["C-D-C", "C-E-B-C"]
    assert compiled.count_paths("C", "C", None, 3, None) == 2


def test_exactly_four_stops_from_a_to_c() -> None:
    compiled = _graph()
    routes = compiled.generate_paths("A", target="C", min_depth=4, max_depth=4)

    assert sorted(_ids(routes)) == ["A-B-C-D-C", "A-D-C-D-C", "A-D-E-B-C"]
    assert compiled.count_paths("A", target="C", min_depth=4, max_depth=4) == 3


def test_cycles_from_c_shorter_than_thirty() -> None:
    compiled = _graph()
    routes = compiled.generate_paths("C", target="C", max_distance=30.0)

    assert sorted(_ids(routes)) == sorted(
        [
            "C-D-C",
            "C-E-B-C",
            "C-E-B-C-D-C",
            "C-D-C-E-B-C",
            "C-D-E-B-C",
            "C-E-B-C-E-B-C",
            "C-E-B-C-E-B-C-E-B-C",
        ]
    )
    for route in routes:
        assert compiled.traverse(route).total_distance < 30.0


def test_max_distance_is_exclusive() -> None:
    compiled = _graph()
    # C-E-B-C is exactly 9.
    assert "C-E-B-C" not in _ids(compiled.generate_paths("C", target="C", max_distance=9.0))
    assert "C-E-B-C" in _ids(compiled.generate_paths("C", target="C", max_distance=9.000001))


def test_routes_are_reported_in_breadth_first_order() -> None:
    routes = _graph().generate_paths("A", max_depth=2)
    depths = [route.depth for route in routes]

    assert depths == sorted(depths)
    assert _ids(routes)[:3] == ["A-B", "A-D", "A-E"]


def test_zero_edge_routes_are_never_reported() -> None:
    compiled = _graph()
    assert compiled.generate_paths("A", target="A", max_depth=0) == []
    assert compiled.count_paths("A", max_depth=0) == 0
    assert compiled.generate_paths("A", target="A", min_depth=0, max_depth=1) == []


def test_neither_bound_is_contract_error() -> None:
    compiled = _graph()
    for call in (compiled.generate_paths, compiled.count_paths):
        with pytest.raises(GraphError) as excinfo:
            call("A", target="C", min_depth=1)
        assert excinfo.value.reason_code == "unbounded_expansion"


def test_unknown_start_is_contract_error_and_unknown_target_matches_nothing() -> None:
    compiled = _graph()
    with pytest.raises(GraphError) as excinfo:
        compiled.generate_paths("Z", max_depth=2)
    assert excinfo.value.reason_code == "unknown_node"
    assert compiled.count_paths("A", target="Z", max_depth=3) == 0


def test_both_bounds_apply_together() -> None:
    compiled = _graph()
    routes = compiled.generate_paths("A", max_depth=3, max_distance=12.0)

    assert routes
    for route in routes:
        assert 1 <= route.depth <= 3
        assert compiled.traverse(route).total_distance < 12.0


def test_children_are_keyed_by_neighbor_not_distance() -> None:
    # A has two neighbors at the same distance; both must survive.
    compiled = parse_graph_lines(["AB5 AD5"]).compile()
    tree = ExpansionTree(compiled, "A")
    tree.expand(max_depth=1)

    root = tree.nodes[0]
    assert set(root.children) == {"B", "D"}
    assert len(tree) == 3
    assert tree.nodes[root.children["D"]].parent == 0


def test_tree_records_depth_and_cumulative_distance() -> None:
    tree = ExpansionTree(_graph(), "A")
    tree.expand(max_depth=2)

    for element in tree.nodes[1:]:
        parent = tree.nodes[element.parent]
        assert element.depth == parent.depth + 1
        assert element.distance > parent.distance


def test_expansion_budget_stops_runaway_zero_distance_cycles() -> None:
    compiled = parse_graph_lines(["AB0 BA0"]).compile()
    with pytest.raises(GraphError) as excinfo:
        compiled.count_paths("A", max_distance=1.0, max_nodes=500)
    assert excinfo.value.reason_code == "expansion_budget_exceeded"
    assert excinfo.value.details["start"] == "A"


def test_depth_bounded_expansion_is_not_capped_by_node_budget() -> None:
    compiled = parse_graph_lines(["AB1 BA1 AA1 BB1"]).compile()

    # 2 + 4 + ... + 2**6 routes, far more tree nodes than the budget allows.
    assert compiled.count_paths("A", max_depth=6, max_nodes=10) == 126
    assert compiled.count_paths("A", max_depth=6, max_distance=100.0, max_nodes=10) == 126


def test_expanding_twice_is_rejected() -> None:
    tree = ExpansionTree(_graph(), "A")
    tree.expand(max_depth=1)

    with pytest.raises(GraphError) as excinfo:
        tree.expand(max_depth=3)
    assert excinfo.value.reason_code == "tree_already_expanded"
    assert tree.count_paths() == 3
