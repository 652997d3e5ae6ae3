from __future__ import annotations

import json
from pathlib import Path

import pytest

from scripts.query_routes import build_parser, main, run_query
from trainroutes.loader import parse_graph_lines


def _graph_file(tmp_path: Path) -> Path:
    path = tmp_path / "graph.txt"
    path.write_text("Graph: AB5, BC4, CD8, DC8, DE6, AD5, CE2, EB3, AE7\n", encoding="utf-8")
    return path


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@pytest.mark.parametrize("spelling", [["A", "E", "B", "C", "D"], ["A-E-B-C-D"], ["AEBCD"]])
def test_traverse_accepts_route_spellings(tmp_path: Path, spelling: list[str]) -> None:
    args = build_parser().parse_args(["--graph", str(_graph_file(tmp_path)), "traverse", *spelling])
    record = run_query(args)

    assert record["found"] is True
    assert record["route"] == ["A", "E", "B", "C", "D"]
    assert record["total_distance"] == 22.0


def test_traverse_absent_route_is_not_an_error(tmp_path: Path) -> None:
    args = build_parser().parse_args(["--graph", str(_graph_file(tmp_path)), "traverse", "A-E-D"])
    assert run_query(args) == {"command": "traverse", "route": ["A", "E", "D"], "found": False}


def test_count_and_paths_agree() -> None:
    graph = parse_graph_lines(["AB5, BC4, CD8, DC8, DE6, AD5, CE2, EB3, AE7"]).compile()
    count = run_query(build_parser().parse_args(["count", "C", "--target", "C", "--max-distance", "30"]), graph)
    paths = run_query(build_parser().parse_args(["paths", "C", "--target", "C", "--max-distance", "30"]), graph)

    assert count["count"] == 7
    assert paths["count"] == 7
    assert len(paths["routes"]) == 7


def test_shortest_and_length_commands() -> None:
    graph = parse_graph_lines(["AB5, BC4, CD8, DC8, DE6, AD5, CE2, EB3, AE7"]).compile()
    shortest = run_query(build_parser().parse_args(["shortest", "b", "b"]), graph)
    length = run_query(build_parser().parse_args(["length", "A", "C"]), graph)

    assert shortest["route"] == "B-C-E-B"
    assert shortest["distance"] == 9.0
    assert shortest["stats"]["termination_reason"] == "target_reached"
    assert length == {"command": "length", "start": "A", "target": "C", "found": True, "distance": 9.0}


def test_main_prints_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--graph", str(_graph_file(tmp_path)), "length", "C", "C"])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["distance"] == 9.0


def test_main_reports_contract_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--graph", str(_graph_file(tmp_path)), "count", "A", "--target", "C"])

    assert code == 2
    assert json.loads(capsys.readouterr().err.strip().splitlines()[-1])["reason_code"] == "unbounded_expansion"


def test_main_reports_bad_graph_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.txt"
    path.write_text("AB5 Q\n", encoding="utf-8")

    assert main(["--graph", str(path), "traverse", "A", "B"]) == 2
    assert json.loads(capsys.readouterr().err.strip().splitlines()[-1])["reason_code"] == "invalid_input"
