from dataclasses import dataclass
from typing import List, Optional
import logging
import numpy as np

from .grid import CellRole, Coord, Grid
from .map_loader import MapSpec
from .traps import TrapInjector
from robo_maze.eval_core.pathfinder import find_path

logger = logging.getLogger(__name__)


@dataclass
class MapConfig:
    width: int
    height: int
    trap_ratio: float = 0.15
    obstacle_ratio: float = 0.1
    seed: Optional[int] = None
    start_goal: str = 'corner'  # 'corner' or 'random'


class MapGenerator:
    """Seeded practice maps that always keep one trap-free route open."""

    def __init__(self, cfg: MapConfig):
        if cfg.width <= 0 or cfg.height <= 0 or cfg.width * cfg.height < 2:
            raise ValueError(f'map {cfg.width}x{cfg.height} is too small for a start and a goal')
        self.cfg = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.traps = TrapInjector(self.rng)

    def _pick_endpoints(self) -> tuple[Coord, Coord]:
        w, h = self.cfg.width, self.cfg.height
        if self.cfg.start_goal == 'random':
            start = (int(self.rng.integers(0, w)), int(self.rng.integers(0, h)))
            # ensure goal different
            while True:
                goal = (int(self.rng.integers(0, w)), int(self.rng.integers(0, h)))
                if goal != start:
                    return start, goal
        return (0, 0), (w-1, h-1)

    def _place_obstacles(self, roles: np.ndarray, keep_clear: List[Coord]) -> None:
        h, w = roles.shape
        free = [(x, y) for y in range(h) for x in range(w)
                if roles[y, x] == CellRole.NORMAL and (x, y) not in keep_clear]
        k = int(len(free) * self.cfg.obstacle_ratio)
        if k <= 0:
            return
        self.rng.shuffle(free)
        for x, y in free[:k]:
            roles[y, x] = CellRole.OBSTACLE

    def _carve_corridor(self, roles: np.ndarray, start: Coord, goal: Coord) -> None:
        # zig-zag from start to goal, clearing anything in the way
        cx, cy = start
        while (cx, cy) != goal:
            if cx != goal[0] and (cy == goal[1] or self.rng.random() < 0.5):
                cx += int(np.sign(goal[0]-cx))
            else:
                cy += int(np.sign(goal[1]-cy))
            if roles[cy, cx] in (CellRole.TRAP, CellRole.OBSTACLE):
                roles[cy, cx] = CellRole.NORMAL

    def generate(self, name: Optional[str] = None) -> MapSpec:
        w, h = self.cfg.width, self.cfg.height
        start, goal = self._pick_endpoints()
        roles = np.full((h, w), CellRole.NORMAL, dtype=np.int8)
        roles[start[1], start[0]] = CellRole.START
        roles[goal[1], goal[0]] = CellRole.GOAL
        self._place_obstacles(roles, [start, goal])
        self.traps.inject(roles, ratio=self.cfg.trap_ratio, keep_clear=[start, goal])
        grid = Grid(roles.copy())
        if not find_path(grid, start, goal):
            logger.debug(f"seed={self.cfg.seed}: random placement blocked every route, carving a corridor")
            self._carve_corridor(roles, start, goal)
            grid = Grid(roles.copy())
        return MapSpec(grid=grid, name=name or f'generated_{w}x{h}_{self.cfg.seed}', goal=goal)
