"""
Prompt text for the route oracle.

The robot is told the coordinate system, the cell symbols and the map, but
trap and goal cells are drawn as ordinary floor: the student's route
instructions are the only thing that should steer it around hazards.
"""

from typing import Dict, List

from robo_maze.maze_gen.grid import CellRole, Direction, path_to_arrows
from robo_maze.maze_gen.map_loader import CellStyle, MapSpec

HIDDEN_ROLES = (CellRole.TRAP, CellRole.GOAL)

_ROLE_TEXT = {
    CellRole.START: 'your starting cell',
    CellRole.GOAL: 'the treasure; reaching it ends the run successfully',
    CellRole.TRAP: 'a trap; stepping on it ends the run as a failure',
    CellRole.OBSTACLE: 'an object you cannot walk through; moves into it are ignored',
    CellRole.NORMAL: 'open floor',
}


def _legend(map_spec: MapSpec) -> Dict[str, CellStyle]:
    if map_spec.legend:
        return map_spec.legend
    symbols = {CellRole.START: 'S', CellRole.GOAL: 'G', CellRole.TRAP: 'T', CellRole.OBSTACLE: '#', CellRole.NORMAL: '.'}
    return {sym: CellStyle(tag=sym, role=role, type=role.name.lower()) for role, sym in symbols.items()}


def _role_section() -> str:
    return (
        "## Your role\n\n"
        "You are a robot on a grid map. Turn the user's route instructions into movement commands.\n"
        "You begin on the 'start' cell.\n"
    )


def _coordinate_section() -> str:
    lines = [
        "## Coordinates and directions\n",
        "- Origin: top-left cell (0,0)",
        "- X grows from left to right",
        "- Y grows from top to bottom",
        "",
    ]
    for d in (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT):
        dx, dy = d.delta
        axis = 'X' if dx else 'Y'
        lines.append(f"- {d.name} [{d.arrow}]: {axis} {'+1' if (dx or dy) > 0 else '-1'}")
    return "\n".join(lines) + "\n"


def _symbol_section(map_spec: MapSpec) -> str:
    lines = ["## Map symbols\n"]
    for tag, style in _legend(map_spec).items():
        if style.role in HIDDEN_ROLES:
            visibility = '(you cannot see where these cells are)'
        else:
            visibility = '(visible)'
        line = f"- '{tag}' is a {style.type} cell: {_ROLE_TEXT[style.role]} {visibility}"
        if style.description:
            line += f" ({style.description})"
        lines.append(line)
    return "\n".join(lines) + "\n"


def masked_layout(map_spec: MapSpec) -> List[List[str]]:
    """The layout the robot is shown: trap and goal cells drawn as normal floor."""
    legend = _legend(map_spec)
    by_role: Dict[CellRole, str] = {}
    for tag, style in legend.items():
        by_role.setdefault(style.role, tag)
    floor = by_role.get(CellRole.NORMAL, '?')
    rows = []
    for y in range(map_spec.height):
        row = []
        for x in range(map_spec.width):
            role = map_spec.grid.role_at((x, y))
            row.append(floor if role in HIDDEN_ROLES else by_role.get(role, '?'))
        rows.append(row)
    return rows


def _layout_section(map_spec: MapSpec) -> str:
    rows = masked_layout(map_spec)
    body = "\n".join(f"Y={y}: [{','.join(row)}]" for y, row in enumerate(rows))
    return (
        "## Map layout\n\n"
        f"The map is {map_spec.width} cells wide and {map_spec.height} cells tall.\n\n"
        f"{body}\n"
    )


def _output_section() -> str:
    example = path_to_arrows([Direction.DOWN] * 4 + [Direction.RIGHT] * 3 + [Direction.UP])
    return (
        "## Output format\n\n"
        "Use only these four characters, one per move:\n"
        + "".join(f"- {d.arrow} : {d.name.lower()}\n" for d in Direction)
        + "\nRules:\n"
        "- Reply with the movement string only\n"
        "- No explanations, numbers, words or spaces\n\n"
        f"Correct example:\n```\n{example}\n```\n\n"
        "Wrong examples:\n"
        "- \"move down four times then...\" (explanation)\n"
        "- \"↓4→3\" (numbers)\n"
        "- \"↓ ↓ ↓\" (spaces)\n"
    )


def generate_system_prompt(map_spec: MapSpec) -> str:
    sections = [
        "# System prompt\n",
        _role_section(),
        _coordinate_section(),
        _symbol_section(map_spec),
        _layout_section(map_spec),
        _output_section(),
    ]
    return "\n".join(s for s in sections if s)


def build_route_prompt(instructions: str) -> str:
    return (
        "Follow these route instructions from the start cell:\n\n"
        f"{instructions.strip()}\n\n"
        "Reply with the movement string only."
    )
