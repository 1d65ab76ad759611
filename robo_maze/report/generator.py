from typing import Dict, List, Tuple
import base64
import html
import io
import json
from pathlib import Path
import logging
from PIL import Image, ImageColor, ImageDraw

from robo_maze.maze_gen.grid import CellRole
from robo_maze.maze_gen.map_loader import MapSpec

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).parent / 'html_template.html'

COLORS = {
    CellRole.NORMAL: (212, 165, 116),
    CellRole.START: (107, 122, 219),
    CellRole.GOAL: (245, 158, 11),
    CellRole.TRAP: (220, 38, 38),
    CellRole.OBSTACLE: (146, 64, 14),
}


def _legend_rgb(value: str, default: Tuple[int, int, int]) -> Tuple[int, int, int]:
    try:
        return ImageColor.getrgb(str(value))[:3]
    except ValueError:
        logger.warning(f"Unrecognised legend color {value!r}, using the default")
        return default


def _render(template: str, context: Dict[str, str]) -> str:
    out = template
    for k, v in context.items():
        out = out.replace(f"%%{k}%%", v)
    return out


def render_map_image(map_spec: MapSpec, trail: List[Tuple[int, int]] | None = None, cell_px: int = 32) -> Image.Image:
    w, h = map_spec.width, map_spec.height
    img = Image.new('RGB', (w*cell_px, h*cell_px), (255, 255, 255))
    draw = ImageDraw.Draw(img)
    # colors from the map legend win over the defaults
    palette = dict(COLORS)
    for style in map_spec.legend.values():
        if style.color and style.type != 'custom':
            palette[style.role] = _legend_rgb(style.color, palette[style.role])
    for y in range(h):
        for x in range(w):
            x0, y0 = x*cell_px, y*cell_px
            draw.rectangle([x0, y0, x0+cell_px-1, y0+cell_px-1], fill=palette[map_spec.grid.role_at((x, y))], outline=(90, 90, 90))
    if trail and len(trail) > 1:
        half = cell_px // 2
        pts = [(x*cell_px + half, y*cell_px + half) for x, y in trail]
        draw.line(pts, fill=(255, 255, 255), width=max(2, cell_px // 8))
        ex, ey = pts[-1]
        r = max(3, cell_px // 5)
        draw.ellipse([ex-r, ey-r, ex+r, ey+r], fill=(30, 30, 30))
    return img


def _image_src(img: Image.Image) -> str:
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    b64 = base64.b64encode(buf.getvalue()).decode('utf-8')
    return f"data:image/png;base64,{b64}"


def generate_report(output_path: str, map_spec: MapSpec, trail: List[Tuple[int, int]], scores: Dict, failure_snapshot: str, commands: str = ''):
    template = TEMPLATE_PATH.read_text(encoding='utf-8')
    ctx = {
        'TITLE': html.escape(map_spec.name),
        'TOTAL': str(scores['total']),
        'S': str(scores['S']),
        'Q': str(scores['Q']),
        'O': str(scores.get('O', 0)),
        'E': str(scores.get('E', 0)),
        'A': str(scores['A']),
        'COMMANDS': html.escape(commands),
        'TRAIL': json.dumps([list(c) for c in trail]),
        'FAIL': html.escape(failure_snapshot),
        'IMG_SRC': _image_src(render_map_image(map_spec, trail)),
    }
    rendered = _render(template, ctx)
    Path(output_path).write_text(rendered, encoding='utf-8')
    return output_path
