from typing import Any, Dict, List

from robo_maze.maze_gen.grid import Coord, Path, Position
from robo_maze.maze_gen.map_loader import MapSpec
from .executor import MovementOutcome, run
from .pathfinder import find_path, trail


class Validator:
    """Replays a command sequence from the start cell and judges the run."""

    def __init__(self, map_spec: MapSpec):
        self.map = map_spec
        self.grid = map_spec.grid
        self.start = map_spec.start
        self.goal = map_spec.goal
        self.reference = find_path(self.grid, self.start, self.goal)
        self.shortest_path: List[Coord] = trail(self.start, self.reference.path) if self.reference else []

    def validate(self, path: Path) -> Dict[str, Any]:
        if not path:
            return {'ok': False, 'error': 'empty_path', 'outcome': None, 'steps': 0, 'unused': 0, 'blocked': 0,
                    'trail': [self.start], 'optimal': False, 'overlap': 0.0}
        pos = Position(*self.start)
        records = run(self.grid, pos, path)
        cells = [self.start] + [r.position for r in records]
        final = records[-1].outcome
        blocked = sum(1 for r in records if r.outcome.is_blocked)
        res: Dict[str, Any] = {
            'ok': final == MovementOutcome.REACHED_GOAL,
            'outcome': final.value,
            'steps': len(records),
            'unused': len(path) - len(records),
            'blocked': blocked,
            'trail': _dedupe(cells),
            'overlap': self._overlap(cells),
        }
        # optimal: reached the goal with no more commands than the planner needed
        res['optimal'] = bool(res['ok'] and self.reference and len(records) == len(self.reference.path))
        if final == MovementOutcome.TRIGGERED_TRAP:
            res['error'] = 'triggered_trap'
        elif not res['ok']:
            res['error'] = 'stopped_short'
        return res

    def _overlap(self, cells: List[Coord]) -> float:
        if not self.shortest_path:
            return 0.0
        sp = set(self.shortest_path)
        visited = set(cells)
        union = len(sp | visited)
        return len(sp & visited)/union if union else 0.0


def _dedupe(cells: List[Coord]) -> List[Coord]:
    # blocked steps repeat the previous cell
    out: List[Coord] = []
    for c in cells:
        if not out or out[-1] != c:
            out.append(c)
    return out
