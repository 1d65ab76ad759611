"""Tests for session replay and scoring."""

import pytest

from robo_maze.eval_core.metrics import Metrics
from robo_maze.eval_core.pathfinder import find_path
from robo_maze.eval_core.validator import Validator
from robo_maze.maze_gen.grid import Direction
from robo_maze.maze_gen.map_loader import parse_map

R, L, D, U = Direction.RIGHT, Direction.LEFT, Direction.DOWN, Direction.UP


class TestValidator:
    def test_planned_route(self, map2):
        v = Validator(map2)
        res = v.validate(find_path(map2.grid, map2.start, map2.goal).path)
        assert res["ok"]
        assert res["optimal"]
        assert res["outcome"] == "reached-goal"
        assert res["steps"] == 10
        assert res["blocked"] == 0
        assert res["overlap"] == pytest.approx(1.0)
        assert res["trail"][0] == (1, 1)
        assert res["trail"][-1] == (6, 6)
        assert "error" not in res

    def test_empty_path(self, map2):
        res = Validator(map2).validate([])
        assert not res["ok"]
        assert res["error"] == "empty_path"

    def test_trap(self, map2):
        # (1,1) -> (2,1) -> (3,1) -> (3,2) is a trap
        res = Validator(map2).validate([R, R, D, D, D])
        assert not res["ok"]
        assert res["error"] == "triggered_trap"
        assert res["outcome"] == "triggered-trap"
        assert res["steps"] == 3
        assert res["unused"] == 2

    def test_stopped_short(self, map2):
        res = Validator(map2).validate([D])
        assert res["error"] == "stopped_short"
        assert res["outcome"] == "moved"

    def test_blocked_steps_cost_optimality(self, map1):
        path = [U, L] + find_path(map1.grid, map1.start, map1.goal).path
        res = Validator(map1).validate(path)
        assert res["ok"]
        assert not res["optimal"]
        assert res["blocked"] == 2
        # blocked steps do not repeat cells in the trail
        assert res["trail"][0] == map1.start
        assert res["trail"][1] != map1.start
        assert len(res["trail"]) == 11

    def test_unreachable_goal_never_optimal(self):
        spec = parse_map({"layout": ["STG"]})
        res = Validator(spec).validate([R, R])
        assert res["outcome"] == "triggered-trap"
        assert Validator(spec).shortest_path == []


class TestMetrics:
    def test_perfect_run(self, map2):
        res = Validator(map2).validate(find_path(map2.grid, map2.start, map2.goal).path)
        scores = Metrics(size=8).score(res, adherent=True)
        assert scores["total"] == pytest.approx(100.0)

    def test_failed_run(self, map2):
        res = Validator(map2).validate([R, R, D])
        scores = Metrics(size=8).score(res, adherent=False)
        assert scores["S"] == 0
        assert scores["Q"] == 0
        assert scores["A"] == 0
        assert scores["total"] < 30

    def test_efficiency(self):
        scores = Metrics(size=12).score({"ok": True, "optimal": False, "overlap": 0.5, "steps": 4, "blocked": 1})
        assert scores["E"] == pytest.approx(0.75)
        assert scores["Q"] == 0

    def test_empty_result(self):
        scores = Metrics(size=5).score({"ok": False, "steps": 0})
        assert scores["E"] == 0
        assert scores["total"] == pytest.approx(5.0)


def test_result_keys_are_stable(map2):
    v = Validator(map2)
    keys = set(v.validate([]))
    assert keys == set(v.validate([R, R, D]))
    assert v.validate([])["unused"] == 0
