from typing import Iterable, List, Set
import numpy as np

from .grid import CellRole, Coord


class TrapInjector:
    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def inject(self, roles: np.ndarray, ratio: float, keep_clear: Iterable[Coord] = ()) -> List[Coord]:
        """Turn a share of the normal cells into traps, in place.

        ``keep_clear`` cells and their 4-neighbours are never trapped so the
        robot always has a first step and a last step.
        """
        h, w = roles.shape
        protected: Set[Coord] = set()
        for x, y in keep_clear:
            protected.add((x, y))
            protected.update(self._neighbors(x, y, w, h))
        free_cells = [(x, y) for y in range(h) for x in range(w)
                      if roles[y, x] == CellRole.NORMAL and (x, y) not in protected]
        if not free_cells or ratio <= 0:
            return []
        k = max(1, int(len(free_cells) * ratio))
        self.rng.shuffle(free_cells)
        placed = []
        for x, y in free_cells[:k]:
            roles[y, x] = CellRole.TRAP
            placed.append((x, y))
        return placed

    def _neighbors(self, x: int, y: int, w: int, h: int):
        for dx, dy in [(1,0),(-1,0),(0,1),(0,-1)]:
            nx, ny = x+dx, y+dy
            if 0 <= nx < w and 0 <= ny < h:
                yield (nx, ny)
