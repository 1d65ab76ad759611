"""Normalise classroom map descriptions into a Grid.

Two authoring forms are accepted:

* layout form -- ``layout`` rows of cell tags plus a ``cell`` legend mapping
  each tag to ``{type: start|goal|end|trap|obstacle|object|wall|normal|custom}``
* record form -- ``width``, ``height``, ``start``, ``goal``, ``traps`` (and
  optionally ``obstacles``) with ``{x, y}`` points
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .grid import CellRole, Coord, DEFAULT_SYMBOLS, Grid, InvalidInput

logger = logging.getLogger(__name__)


class MapConfigError(InvalidInput):
    """The map description cannot be turned into a valid grid."""


TYPE_ALIASES: Dict[str, CellRole] = {
    'start': CellRole.START,
    'goal': CellRole.GOAL,
    'end': CellRole.GOAL,
    'trap': CellRole.TRAP,
    'obstacle': CellRole.OBSTACLE,
    'object': CellRole.OBSTACLE,
    'wall': CellRole.OBSTACLE,
    'normal': CellRole.NORMAL,
}


@dataclass
class CellStyle:
    tag: str
    role: CellRole
    type: str
    color: Optional[str] = None
    description: Optional[str] = None


@dataclass
class MapSpec:
    grid: Grid
    name: str = 'map'
    legend: Dict[str, CellStyle] = field(default_factory=dict)
    goal: Optional[Coord] = None

    def __post_init__(self):
        if self.goal is None:
            self.goal = min(self.grid.goals, key=lambda c: (c[1], c[0]))

    @property
    def start(self) -> Coord:
        return self.grid.start

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


def _point(obj: Any, what: str) -> Coord:
    try:
        if isinstance(obj, dict):
            return (int(obj['x']), int(obj['y']))
        x, y = obj
        return (int(x), int(y))
    except (KeyError, TypeError, ValueError):
        raise MapConfigError(f'{what} must be an {{x, y}} point, got {obj!r}') from None


def _resolve_role(tag: str, entry: Any) -> CellStyle:
    if isinstance(entry, str):
        entry = {'type': entry}
    if not isinstance(entry, dict) or 'type' not in entry:
        raise MapConfigError(f'cell {tag!r} needs a type')
    kind = str(entry['type']).lower()
    if kind == 'custom':
        # custom cells are walkable unless flagged
        role = CellRole.OBSTACLE if entry.get('blocking') else CellRole.NORMAL
    elif kind in TYPE_ALIASES:
        role = TYPE_ALIASES[kind]
    else:
        raise MapConfigError(f'cell {tag!r} has unknown type {kind!r}')
    return CellStyle(tag=tag, role=role, type=kind, color=entry.get('color'), description=entry.get('description'))


def _from_layout(data: Dict, name: str) -> MapSpec:
    layout = data['layout']
    if not layout:
        raise MapConfigError('layout is empty')
    rows: List[List[str]] = [list(row) for row in layout]
    if len(set(len(r) for r in rows)) != 1:
        raise MapConfigError('layout rows have different lengths')
    if 'cell' in data:
        legend = {str(tag): _resolve_role(str(tag), entry) for tag, entry in data['cell'].items()}
    else:
        legend = {tag: CellStyle(tag=tag, role=role, type=role.name.lower()) for tag, role in DEFAULT_SYMBOLS.items()}
    roles = []
    for y, row in enumerate(rows):
        out = []
        for x, tag in enumerate(row):
            if tag not in legend:
                raise MapConfigError(f'unknown cell tag {tag!r} at ({x}, {y})')
            out.append(legend[tag].role)
        roles.append(out)
    try:
        grid = Grid(roles)
    except InvalidInput as e:
        raise MapConfigError(str(e)) from None
    return MapSpec(grid=grid, name=name, legend=legend)


def _from_record(data: Dict, name: str) -> MapSpec:
    try:
        w, h = int(data['width']), int(data['height'])
    except (KeyError, TypeError, ValueError):
        raise MapConfigError('record form needs integer width and height') from None
    if w <= 0 or h <= 0:
        raise MapConfigError(f'map has zero area ({w}x{h})')
    start = _point(data.get('start'), 'start')
    goal = _point(data.get('goal'), 'goal')
    for label, (x, y) in (('start', start), ('goal', goal)):
        if not (0 <= x < w and 0 <= y < h):
            raise MapConfigError(f'{label} ({x}, {y}) is outside the {w}x{h} map')
    if start == goal:
        raise MapConfigError('start and goal share a cell')
    roles = [[CellRole.NORMAL] * w for _ in range(h)]
    roles[start[1]][start[0]] = CellRole.START
    roles[goal[1]][goal[0]] = CellRole.GOAL
    for key, role in (('obstacles', CellRole.OBSTACLE), ('traps', CellRole.TRAP)):
        for item in data.get(key) or []:
            x, y = _point(item, key[:-1])
            if not (0 <= x < w and 0 <= y < h):
                logger.warning(f"{name}: ignoring {key[:-1]} at ({x}, {y}) outside the {w}x{h} map")
                continue
            if (x, y) in (start, goal):
                raise MapConfigError(f'{key[:-1]} at ({x}, {y}) overlaps start or goal')
            roles[y][x] = role
    return MapSpec(grid=Grid(roles), name=name, goal=goal)


def parse_map(data: Dict, name: str = 'map') -> MapSpec:
    """Build a MapSpec from either authoring form."""
    if not isinstance(data, dict):
        raise MapConfigError('map description must be a mapping')
    name = str(data.get('name') or name)
    if 'layout' in data:
        return _from_layout(data, name)
    if 'width' in data and 'height' in data:
        return _from_record(data, name)
    raise MapConfigError('map description needs either a layout or width/height')


def load_map(path: str | Path) -> MapSpec:
    p = Path(path)
    text = p.read_text(encoding='utf-8')
    try:
        if p.suffix.lower() == '.json':
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MapConfigError(f"{p}: not a readable map file: {e}") from e
    # a file may wrap the description in a top-level mapConfig key
    if isinstance(data, dict) and 'mapConfig' in data:
        data = data['mapConfig']
    spec = parse_map(data, name=p.stem)
    logger.debug(f"Loaded map {spec.name} ({spec.width}x{spec.height}) from {p}")
    return spec


def to_record(spec: MapSpec) -> Dict:
    """Record form of a map, suitable for JSON or YAML."""
    def pts(coords):
        return [{'x': x, 'y': y} for x, y in sorted(coords, key=lambda c: (c[1], c[0]))]
    sx, sy = spec.start
    gx, gy = spec.goal
    return {
        'name': spec.name,
        'width': spec.width,
        'height': spec.height,
        'start': {'x': sx, 'y': sy},
        'goal': {'x': gx, 'y': gy},
        'traps': pts(spec.grid.traps),
        'obstacles': pts(spec.grid.obstacles),
    }
