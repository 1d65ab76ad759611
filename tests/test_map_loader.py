"""Tests for map description normalisation."""

import json
import logging

import pytest

from robo_maze.maze_gen.grid import CellRole, InvalidInput
from robo_maze.maze_gen.map_loader import MapConfigError, load_map, parse_map, to_record


class TestRecordForm:
    def test_classroom_map(self, map1):
        assert (map1.width, map1.height) == (6, 6)
        assert map1.start == (0, 0)
        assert map1.goal == (5, 5)
        assert map1.grid.traps == {(2, 1), (3, 3)}
        assert map1.name == "map-1"

    def test_obstacles(self):
        spec = parse_map({
            "width": 3, "height": 2,
            "start": {"x": 0, "y": 0}, "goal": {"x": 2, "y": 1},
            "obstacles": [{"x": 1, "y": 0}],
        })
        assert spec.grid.role_at((1, 0)) == CellRole.OBSTACLE

    def test_points_as_pairs(self):
        spec = parse_map({"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0]})
        assert spec.goal == (1, 0)

    def test_out_of_bounds_trap_is_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            spec = parse_map({
                "width": 3, "height": 3,
                "start": {"x": 0, "y": 0}, "goal": {"x": 2, "y": 2},
                "traps": [{"x": 1, "y": 1}, {"x": 7, "y": 1}],
            })
        assert spec.grid.traps == {(1, 1)}
        assert "outside" in caplog.text

    @pytest.mark.parametrize("data", [
        {"width": 0, "height": 3, "start": {"x": 0, "y": 0}, "goal": {"x": 0, "y": 0}},
        {"width": 3, "height": 3, "start": {"x": 3, "y": 0}, "goal": {"x": 1, "y": 1}},
        {"width": 3, "height": 3, "start": {"x": 0, "y": 0}, "goal": {"x": 0, "y": 0}},
        {"width": 3, "height": 3, "start": {"x": 0, "y": 0}, "goal": {"x": 2, "y": 2},
         "traps": [{"x": 2, "y": 2}]},
        {"width": 3, "height": 3, "start": {"x": 0, "y": 0}, "goal": {"x": 2, "y": 2},
         "obstacles": [{"x": 0, "y": 0}]},
        {"width": 3, "height": 3, "start": {"y": 0}, "goal": {"x": 2, "y": 2}},
        {"width": "wide", "height": 3},
    ])
    def test_invalid_records(self, data):
        with pytest.raises(MapConfigError):
            parse_map(data)


class TestLayoutForm:
    def test_classroom_map(self, map3):
        assert (map3.width, map3.height) == (10, 10)
        assert map3.start == (0, 0)
        assert map3.goal == (9, 9)
        assert map3.grid.obstacles == {(4, 1), (3, 4), (8, 5)}
        assert len(map3.grid.traps) == 10
        assert map3.legend["e"].type == "end"
        assert map3.legend["e"].role == CellRole.GOAL
        assert map3.legend["o"].color == "#92400E"

    def test_default_legend_for_string_rows(self):
        spec = parse_map({"layout": ["S.#", "T.G"]})
        assert spec.grid.to_rows() == ["S.#", "T.G"]

    def test_custom_cells(self):
        spec = parse_map({
            "layout": [["s", "b", "w", "e"]],
            "cell": {
                "s": {"type": "start"},
                "e": {"type": "goal"},
                "b": {"type": "custom", "description": "bush"},
                "w": {"type": "custom", "blocking": True},
            },
        })
        assert spec.grid.role_at((1, 0)) == CellRole.NORMAL
        assert spec.grid.role_at((2, 0)) == CellRole.OBSTACLE

    def test_type_shorthand(self):
        spec = parse_map({"layout": ["sx", "ne"], "cell": {"s": "start", "e": "end", "x": "wall", "n": "normal"}})
        assert spec.grid.obstacles == {(1, 0)}

    @pytest.mark.parametrize("data,match", [
        ({"layout": ["S.", "G"]}, "different lengths"),
        ({"layout": ["S?G"]}, "unknown cell tag"),
        ({"layout": ["sg"], "cell": {"s": {"type": "start"}, "g": {"type": "lava"}}}, "unknown type"),
        ({"layout": ["..G"]}, "start"),
        ({"layout": []}, "empty"),
    ])
    def test_invalid_layouts(self, data, match):
        with pytest.raises(MapConfigError, match=match):
            parse_map(data)


class TestLoading:
    def test_map_config_error_is_invalid_input(self):
        assert issubclass(MapConfigError, InvalidInput)

    def test_not_a_mapping(self):
        with pytest.raises(MapConfigError):
            parse_map(["S.G"])

    def test_neither_form(self):
        with pytest.raises(MapConfigError):
            parse_map({"name": "x"})

    def test_json_file(self, tmp_path):
        p = tmp_path / "small.json"
        p.write_text(json.dumps({"layout": ["S.G"]}), encoding="utf-8")
        spec = load_map(p)
        assert spec.name == "small"
        assert spec.goal == (2, 0)

    def test_wrapped_map_config(self, tmp_path):
        p = tmp_path / "wrapped.yaml"
        p.write_text("mapConfig:\n  layout: ['S.G']\n", encoding="utf-8")
        assert load_map(p).start == (0, 0)

    def test_record_round_trip(self, map3):
        record = to_record(map3)
        again = parse_map(record)
        assert again.grid == map3.grid
        assert again.name == map3.name
