import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Optional

from tqdm import tqdm

from robo_maze.common.config_loader import apply_env_keys, load_config, setup_logging_from_cfg
from robo_maze.common.model_gateway import make_adapter_from_cfg
from robo_maze.common.pdf_export import export_summary_pdf
from robo_maze.eval_core.metrics import Metrics
from robo_maze.eval_core.parser import CommandParser, ARROWS
from robo_maze.eval_core.validator import Validator
from robo_maze.maze_gen.generator import MapConfig, MapGenerator
from robo_maze.maze_gen.grid import path_to_arrows
from robo_maze.maze_gen.map_loader import MapConfigError, MapSpec, load_map, to_record
from robo_maze.model_gateways.base import ModelAdapter, OracleError
from robo_maze.prompts import build_route_prompt, generate_system_prompt
from robo_maze.report.generator import generate_report, render_map_image

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = "Walk from the start to the treasure by the shortest safe route."
RETRY_PROMPT = f"Answer again using only the characters {ARROWS}, with no explanation."
_FAILED_SCORES = {'total': 0, 'S': 0, 'Q': 0, 'O': 0, 'E': 0, 'A': 0}


def evaluate_map(map_spec: MapSpec, adapter: ModelAdapter, instructions: str = DEFAULT_INSTRUCTIONS, outdir: Optional[Path] = None) -> Dict:
    """Ask the oracle for a route, replay it on the map and score the run."""
    system = generate_system_prompt(map_spec)
    text = adapter.generate(build_route_prompt(instructions), system=system)
    parsed = CommandParser().parse_with_fallback(text, adapter=adapter, prompt=RETRY_PROMPT)
    validator = Validator(map_spec)
    result = validator.validate(parsed.path)
    scores = Metrics(size=max(map_spec.width, map_spec.height)).score(result, adherent=parsed.adherent)
    logger.info(f"{map_spec.name}: {adapter.name()} -> {result.get('outcome')} ({len(parsed.path)} commands, mode={parsed.mode})")
    item = {
        'map': map_spec.name,
        'model': adapter.name(),
        'commands': path_to_arrows(parsed.path),
        'mode': parsed.mode,
        'outcome': result.get('outcome'),
        'error': result.get('error', ''),
        'steps': result.get('steps', 0),
        'blocked': result.get('blocked', 0),
        'scores': scores,
    }
    if outdir is not None:
        failure = '' if result.get('ok') else f"Failure: {result.get('error')} Raw: {parsed.raw[:200]}"
        rpath = outdir / f"report_{map_spec.name}.html"
        generate_report(str(rpath), map_spec, result['trail'], scores, failure, commands=item['commands'])
        item['report'] = str(rpath)
    return item


def parse_size(value) -> tuple[int, int]:
    """'WxH' map size, e.g. '8x8' or '12X6'."""
    parts = str(value).strip().lower().split('x')
    try:
        w, h = (int(p) for p in parts)
    except ValueError:
        raise MapConfigError(f"map size must look like WxH (e.g. 8x8), got {value!r}") from None
    if w <= 0 or h <= 0:
        raise MapConfigError(f"map size must be positive, got {value!r}")
    return w, h


def generate_maps_to_dir(cfg: Dict, outdir: Path, count: int = 5) -> list[Path]:
    outdir.mkdir(parents=True, exist_ok=True)
    gen_cfg = cfg.get('generator', {})
    w, h = parse_size(gen_cfg.get('size') or '8x8')
    base_seed = int(gen_cfg.get('seed') or 0)
    written = []
    for i in tqdm(range(count), desc='Generate'):
        gen = MapGenerator(MapConfig(
            width=w, height=h, seed=base_seed + i,
            trap_ratio=float(gen_cfg.get('trap_ratio', 0.15)),
            obstacle_ratio=float(gen_cfg.get('obstacle_ratio', 0.1)),
            start_goal=gen_cfg.get('start_goal') or 'corner',
        ))
        spec = gen.generate(name=f'map_{w}x{h}_{i}')
        path = outdir / f'{spec.name}.json'
        path.write_text(json.dumps(to_record(spec), ensure_ascii=False, indent=2), encoding='utf-8')
        written.append(path)
    return written


def run_bench(cfg: Dict, outdir: Path, maps_dir: Optional[Path] = None) -> Dict:
    outdir.mkdir(parents=True, exist_ok=True)
    bench_cfg = cfg.get('bench', {})
    if maps_dir is None:
        maps_dir = outdir / 'maps'
        generate_maps_to_dir(cfg, maps_dir, count=int(bench_cfg.get('n') or 5))
    items = sorted(list(maps_dir.glob('*.json')) + list(maps_dir.glob('*.yaml')))
    instructions = bench_cfg.get('instructions') or DEFAULT_INSTRUCTIONS
    workers = int(bench_cfg.get('workers') or max(1, min(len(items) or 1, os.cpu_count() or 4)))

    def _task(mp: Path) -> Dict:
        spec = load_map(mp)
        adapter = make_adapter_from_cfg(cfg, map_spec=spec)
        return evaluate_map(spec, adapter, instructions, outdir)

    results = []
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = {ex.submit(_task, mp): mp for mp in items}
        for fut in tqdm(as_completed(futures), total=len(futures), desc='Bench'):
            mp = futures[fut]
            try:
                results.append(fut.result())
            except (OracleError, ValueError, OSError) as e:
                logger.error(f"{mp.name}: {e}")
                results.append({'map': mp.stem, 'outcome': None, 'scores': dict(_FAILED_SCORES), 'error': str(e)})

    results.sort(key=lambda r: r['map'])
    avg = round(sum(r['scores']['total'] for r in results)/len(results), 2) if results else 0
    success = round(sum(1 for r in results if r.get('outcome') == 'reached-goal')/len(results), 3) if results else 0
    summary = {'model': cfg.get('model', 'mock'), 'avg_total': avg, 'success_rate': success, 'items': results}
    (outdir / 'summary.json').write_text(json.dumps(summary, ensure_ascii=False, indent=2), encoding='utf-8')
    image_paths = []
    if items:
        sample = outdir / 'sample_map.png'
        render_map_image(load_map(items[0])).save(sample)
        image_paths.append(str(sample))
    export_summary_pdf(str(outdir / 'summary.pdf'), 'RoboMaze Summary', summary, image_paths=image_paths)
    return summary


def main():
    cfg = load_config()
    apply_env_keys(cfg)
    setup_logging_from_cfg(cfg)
    outdir = Path(cfg.get('output_dir') or 'outputs')
    preg = cfg.get('pre_generated_dir')
    logger.info(f"Running RoboMaze bench with model {cfg.get('model', 'mock')}")
    summary = run_bench(cfg, outdir, Path(preg) if preg else None)
    print(f"Done. avg_total={summary['avg_total']} success_rate={summary['success_rate']}. Summaries saved to {outdir}")


if __name__ == '__main__':
    main()
