from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple
import numpy as np

Coord = Tuple[int, int]


class InvalidInput(ValueError):
    """Map-authoring mistake: bad grid shape, start/goal out of bounds or blocked."""


class CellRole(IntEnum):
    NORMAL = 0
    START = 1
    GOAL = 2
    TRAP = 3
    OBSTACLE = 4


class Direction(Enum):
    UP = 'U'
    DOWN = 'D'
    LEFT = 'L'
    RIGHT = 'R'

    @property
    def delta(self) -> Coord:
        return _DELTAS[self]

    @property
    def arrow(self) -> str:
        return _ARROWS[self]

    @classmethod
    def from_token(cls, token: str) -> 'Direction':
        if token in _BY_ARROW:
            return _BY_ARROW[token]
        return cls(token.upper())


_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}
_ARROWS = {
    Direction.UP: '↑',
    Direction.DOWN: '↓',
    Direction.LEFT: '←',
    Direction.RIGHT: '→',
}
_BY_ARROW = {v: k for k, v in _ARROWS.items()}

Path = List[Direction]


def path_to_arrows(path: Iterable[Direction]) -> str:
    return ''.join(d.arrow for d in path)


@dataclass
class Position:
    x: int
    y: int

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    def moved(self, direction: Direction) -> 'Position':
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)

    def copy(self) -> 'Position':
        return Position(self.x, self.y)


# Single-character legend for string layouts
DEFAULT_SYMBOLS: Dict[str, CellRole] = {
    'S': CellRole.START,
    'G': CellRole.GOAL,
    'T': CellRole.TRAP,
    '#': CellRole.OBSTACLE,
    '.': CellRole.NORMAL,
    ' ': CellRole.NORMAL,
}


class Grid:
    """Read-only rectangular map of cell roles, indexed ``(x, y)`` from the top-left.

    Roles are stored as an ``int8`` array of shape ``(height, width)`` so row
    ``y`` holds the cells ``(0, y) .. (width-1, y)``. The array is
    write-protected; a grid never changes after construction.
    """

    def __init__(self, roles):
        try:
            cells = np.array(roles, dtype=np.int8)
        except (TypeError, ValueError):
            raise InvalidInput('grid must be a rectangular matrix of cell roles') from None
        if cells.ndim != 2 or cells.size == 0:
            raise InvalidInput('grid must be a non-empty rectangle')
        valid = set(int(r) for r in CellRole)
        unknown = set(int(v) for v in np.unique(cells)) - valid
        if unknown:
            raise InvalidInput(f'unknown cell role codes: {sorted(unknown)}')
        starts = np.argwhere(cells == CellRole.START)
        if len(starts) != 1:
            raise InvalidInput(f'grid needs exactly one start cell, found {len(starts)}')
        if not np.any(cells == CellRole.GOAL):
            raise InvalidInput('grid needs at least one goal cell')
        cells.flags.writeable = False
        self._cells = cells
        r, c = starts[0]
        self._start: Coord = (int(c), int(r))
        self._goals: FrozenSet[Coord] = self._coords_of(CellRole.GOAL)

    @classmethod
    def from_rows(cls, rows: Iterable[str], symbols: Optional[Mapping[str, CellRole]] = None) -> 'Grid':
        symbols = DEFAULT_SYMBOLS if symbols is None else symbols
        rows = list(rows)
        if rows and len(set(len(r) for r in rows)) != 1:
            raise InvalidInput('layout rows have different lengths')
        try:
            return cls([[symbols[ch] for ch in row] for row in rows])
        except KeyError as e:
            raise InvalidInput(f'unknown layout symbol {e.args[0]!r}') from None

    def to_rows(self) -> List[str]:
        inverse = {CellRole.START: 'S', CellRole.GOAL: 'G', CellRole.TRAP: 'T',
                   CellRole.OBSTACLE: '#', CellRole.NORMAL: '.'}
        return [''.join(inverse[CellRole(int(v))] for v in row) for row in self._cells]

    @property
    def width(self) -> int:
        return int(self._cells.shape[1])

    @property
    def height(self) -> int:
        return int(self._cells.shape[0])

    @property
    def cells(self) -> np.ndarray:
        return self._cells

    @property
    def start(self) -> Coord:
        return self._start

    @property
    def goals(self) -> FrozenSet[Coord]:
        return self._goals

    @property
    def traps(self) -> FrozenSet[Coord]:
        return self._coords_of(CellRole.TRAP)

    @property
    def obstacles(self) -> FrozenSet[Coord]:
        return self._coords_of(CellRole.OBSTACLE)

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def role_at(self, coord: Coord) -> CellRole:
        x, y = coord
        return CellRole(int(self._cells[y, x]))

    def is_obstacle(self, coord: Coord) -> bool:
        return self.role_at(coord) == CellRole.OBSTACLE

    def _coords_of(self, role: CellRole) -> FrozenSet[Coord]:
        return frozenset((int(c), int(r)) for r, c in np.argwhere(self._cells == role))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    def __hash__(self) -> int:
        return hash(self._cells.tobytes())

    def __repr__(self) -> str:
        return f'Grid({self.width}x{self.height}, start={self.start}, goals={sorted(self.goals)})'
