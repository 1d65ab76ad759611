"""
Step-by-step movement over a map grid.

Each command is checked against the grid bounds and obstacles before the
robot moves; trap and goal cells are detected after the move, because
stepping onto them is itself the event. Blocked commands are no-ops and
a run carries on with the next command, so a partly wrong command
sequence from an external source still gets as far as it can.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from robo_maze.maze_gen.grid import CellRole, Coord, Direction, Grid, Position


class MovementOutcome(Enum):
    MOVED = "moved"
    BLOCKED_BY_BOUNDS = "blocked-by-bounds"
    BLOCKED_BY_OBSTACLE = "blocked-by-obstacle"
    REACHED_GOAL = "reached-goal"
    TRIGGERED_TRAP = "triggered-trap"

    @property
    def is_terminal(self) -> bool:
        return self in (MovementOutcome.REACHED_GOAL, MovementOutcome.TRIGGERED_TRAP)

    @property
    def is_blocked(self) -> bool:
        return self in (MovementOutcome.BLOCKED_BY_BOUNDS, MovementOutcome.BLOCKED_BY_OBSTACLE)


@dataclass(frozen=True)
class StepRecord:
    index: int
    direction: Direction
    position: Coord
    outcome: MovementOutcome


def step(grid: Grid, position: Position, direction: Direction) -> Tuple[Position, MovementOutcome]:
    """Classify one move. Returns a new Position; the one passed in is left alone."""
    target = position.moved(direction)
    if not grid.in_bounds(target.coord):
        return position.copy(), MovementOutcome.BLOCKED_BY_BOUNDS
    role = grid.role_at(target.coord)
    if role == CellRole.OBSTACLE:
        return position.copy(), MovementOutcome.BLOCKED_BY_OBSTACLE
    if role == CellRole.TRAP:
        return target, MovementOutcome.TRIGGERED_TRAP
    if role == CellRole.GOAL:
        return target, MovementOutcome.REACHED_GOAL
    return target, MovementOutcome.MOVED


def run(grid: Grid, position: Position, path: Iterable[Direction]) -> List[StepRecord]:
    """
    Apply ``path`` to ``position`` in place, one command at a time.

    Stops right after a terminal outcome; later commands are never applied.

    Returns:
        One StepRecord per executed command
    """
    records: List[StepRecord] = []
    for i, direction in enumerate(path):
        new_pos, outcome = step(grid, position, direction)
        position.x, position.y = new_pos.x, new_pos.y
        records.append(StepRecord(index=i, direction=direction, position=new_pos.coord, outcome=outcome))
        if outcome.is_terminal:
            break
    return records


@dataclass
class MovementExecutor:
    """A navigation session: one grid, one robot position, a log of steps.

    The position object belongs to the caller and is updated in place.
    ``reset`` puts the robot back on the cell it started from so the same
    commands can be replayed.
    """
    grid: Grid
    position: Position
    history: List[StepRecord] = field(default_factory=list)
    origin: Optional[Coord] = None

    def __post_init__(self):
        if self.origin is None:
            self.origin = self.position.coord

    @classmethod
    def at_start(cls, grid: Grid) -> 'MovementExecutor':
        x, y = grid.start
        return cls(grid=grid, position=Position(x, y))

    @property
    def finished(self) -> bool:
        return bool(self.history) and self.history[-1].outcome.is_terminal

    @property
    def last_outcome(self) -> Optional[MovementOutcome]:
        return self.history[-1].outcome if self.history else None

    def step(self, direction: Direction) -> MovementOutcome:
        # no further moves after a goal or trap until reset
        if self.finished:
            return self.history[-1].outcome
        new_pos, outcome = step(self.grid, self.position, direction)
        self.position.x, self.position.y = new_pos.x, new_pos.y
        self.history.append(StepRecord(len(self.history), direction, new_pos.coord, outcome))
        return outcome

    def run(self, path: Iterable[Direction]) -> List[StepRecord]:
        if self.finished:
            return []
        offset = len(self.history)
        records = [
            StepRecord(offset + r.index, r.direction, r.position, r.outcome)
            for r in run(self.grid, self.position, path)
        ]
        self.history.extend(records)
        return records

    def reset(self) -> None:
        self.position.x, self.position.y = self.origin
        self.history.clear()
