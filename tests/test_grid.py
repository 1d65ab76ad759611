"""Tests for the grid data model."""

import numpy as np
import pytest

from robo_maze.maze_gen.grid import (
    CellRole,
    Direction,
    Grid,
    InvalidInput,
    Position,
    path_to_arrows,
)


class TestDirection:
    def test_unit_displacements(self):
        assert Direction.UP.delta == (0, -1)
        assert Direction.DOWN.delta == (0, 1)
        assert Direction.LEFT.delta == (-1, 0)
        assert Direction.RIGHT.delta == (1, 0)

    def test_from_token_accepts_arrows_and_letters(self):
        assert Direction.from_token("↑") is Direction.UP
        assert Direction.from_token("→") is Direction.RIGHT
        assert Direction.from_token("d") is Direction.DOWN
        assert Direction.from_token("L") is Direction.LEFT

    def test_from_token_rejects_other_characters(self):
        with pytest.raises(ValueError):
            Direction.from_token("x")

    def test_path_to_arrows(self):
        assert path_to_arrows([Direction.RIGHT, Direction.DOWN, Direction.LEFT, Direction.UP]) == "→↓←↑"


class TestPosition:
    def test_moved_returns_new_position(self):
        pos = Position(2, 2)
        moved = pos.moved(Direction.UP)
        assert moved.coord == (2, 1)
        assert pos.coord == (2, 2)


class TestGrid:
    def test_from_rows(self):
        grid = Grid.from_rows([
            "S.#",
            ".TG",
        ])
        assert grid.width == 3
        assert grid.height == 2
        assert grid.start == (0, 0)
        assert grid.goals == {(2, 1)}
        assert grid.traps == {(1, 1)}
        assert grid.obstacles == {(2, 0)}
        assert grid.role_at((2, 0)) == CellRole.OBSTACLE
        assert grid.is_obstacle((2, 0))
        assert not grid.is_obstacle((1, 1))

    def test_in_bounds(self):
        grid = Grid.from_rows(["S.G"])
        assert grid.in_bounds((0, 0))
        assert grid.in_bounds((2, 0))
        assert not grid.in_bounds((3, 0))
        assert not grid.in_bounds((0, 1))
        assert not grid.in_bounds((-1, 0))

    def test_cells_are_read_only(self):
        grid = Grid.from_rows(["S.G"])
        with pytest.raises(ValueError):
            grid.cells[0, 1] = CellRole.OBSTACLE

    def test_source_array_changes_do_not_leak_in(self):
        roles = np.array([[CellRole.START, CellRole.NORMAL, CellRole.GOAL]], dtype=np.int8)
        grid = Grid(roles)
        roles[0, 1] = CellRole.OBSTACLE
        assert grid.role_at((1, 0)) == CellRole.NORMAL

    def test_to_rows(self):
        rows = ["S.#", ".TG"]
        assert Grid.from_rows(rows).to_rows() == rows

    def test_equality(self):
        assert Grid.from_rows(["S.G"]) == Grid.from_rows(["S.G"])
        assert Grid.from_rows(["S.G"]) != Grid.from_rows(["S#G"])

    def test_several_goals_allowed(self):
        grid = Grid.from_rows(["G.S.G"])
        assert grid.goals == {(0, 0), (4, 0)}

    @pytest.mark.parametrize("rows", [
        [],
        [""],
        ["..G"],
        ["S.S", "..G"],
        ["S.."],
    ])
    def test_invalid_grids(self, rows):
        with pytest.raises(InvalidInput):
            Grid.from_rows(rows)

    def test_ragged_rows(self):
        with pytest.raises(InvalidInput):
            Grid.from_rows(["S..", ".G"])

    def test_ragged_matrix(self):
        with pytest.raises(InvalidInput):
            Grid([[CellRole.START, CellRole.GOAL], [CellRole.NORMAL]])

    def test_unknown_symbol(self):
        with pytest.raises(InvalidInput, match="unknown layout symbol"):
            Grid.from_rows(["S?G"])

    def test_unknown_role_code(self):
        with pytest.raises(InvalidInput):
            Grid([[1, 2, 9]])
