"""
Shortest trap-free routes over a map grid.

Breadth-first search over the four-connected grid. Obstacles and traps are
both impassable for planning, so a returned route never steps on a hazard
even though the executor would let a robot walk onto a trap.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List

from robo_maze.maze_gen.grid import CellRole, Coord, Direction, Grid, InvalidInput, Path

# Fixed neighbour order; ties between equal-length routes resolve the same way every run
EXPLORATION_ORDER = (Direction.RIGHT, Direction.LEFT, Direction.DOWN, Direction.UP)

_BLOCKING = (CellRole.OBSTACLE, CellRole.TRAP)


class PathStopReason(Enum):
    SUCCESS = "success"
    ALREADY_AT_TARGET = "already_at_target"
    NO_PATH_EXISTS = "no_path_exists"


@dataclass
class PathResult:
    """Outcome of a planning call. ``NO_PATH_EXISTS`` is the not-found case."""
    path: Path
    reason: PathStopReason
    message: str = ""

    @property
    def success(self) -> bool:
        return self.reason != PathStopReason.NO_PATH_EXISTS

    @property
    def not_found(self) -> bool:
        return self.reason == PathStopReason.NO_PATH_EXISTS

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        return iter(self.path)

    def __len__(self) -> int:
        return len(self.path)

    def __repr__(self) -> str:
        if self.success:
            return f"PathResult(path=[{len(self.path)} steps], reason={self.reason.value})"
        return f"PathResult(path=[], reason={self.reason.value}, message='{self.message}')"


def _check_endpoint(grid: Grid, coord: Coord, label: str) -> Coord:
    coord = (int(coord[0]), int(coord[1]))
    if not grid.in_bounds(coord):
        raise InvalidInput(f"{label} {coord} is outside the {grid.width}x{grid.height} grid")
    if grid.is_obstacle(coord):
        raise InvalidInput(f"{label} {coord} is on an obstacle")
    return coord


def _passable(grid: Grid, coord: Coord) -> bool:
    return grid.in_bounds(coord) and grid.role_at(coord) not in _BLOCKING


def find_path(grid: Grid, start: Coord, goal: Coord) -> PathResult:
    """
    Find a shortest move sequence from start to goal.

    Args:
        grid: Map to plan over
        start: Starting cell (x, y)
        goal: Target cell (x, y)

    Returns:
        PathResult; an empty path with ALREADY_AT_TARGET when start == goal,
        NO_PATH_EXISTS when every route is cut off by obstacles or traps.

    Raises:
        InvalidInput: start or goal out of bounds or on an obstacle
    """
    if grid.width == 0 or grid.height == 0:
        raise InvalidInput("grid has zero area")
    start = _check_endpoint(grid, start, "start")
    goal = _check_endpoint(grid, goal, "goal")
    if start == goal:
        return PathResult(path=[], reason=PathStopReason.ALREADY_AT_TARGET)

    queue = deque([(start, [])])
    visited = {start}
    while queue:
        (x, y), path = queue.popleft()
        for d in EXPLORATION_ORDER:
            dx, dy = d.delta
            nxt = (x + dx, y + dy)
            if nxt in visited or not _passable(grid, nxt):
                continue
            if nxt == goal:
                return PathResult(path=path + [d], reason=PathStopReason.SUCCESS)
            visited.add(nxt)
            queue.append((nxt, path + [d]))

    return PathResult(
        path=[],
        reason=PathStopReason.NO_PATH_EXISTS,
        message=f"no trap-free route from {start} to {goal}",
    )


def trail(start: Coord, path: Path) -> List[Coord]:
    """Cells visited by following ``path`` from ``start``, start included."""
    cells = [tuple(start)]
    x, y = start
    for d in path:
        dx, dy = d.delta
        x, y = x + dx, y + dy
        cells.append((x, y))
    return cells


def shortest_distance(grid: Grid, start: Coord, goal: Coord) -> int:
    """Move count of the shortest route, or -1 when none exists."""
    result = find_path(grid, start, goal)
    return len(result.path) if result else -1
