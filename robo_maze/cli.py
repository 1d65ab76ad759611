import argparse
import json
import logging
import sys
from pathlib import Path

from robo_maze.bench import evaluate_map, generate_maps_to_dir, parse_size, run_bench
from robo_maze.common.config_loader import apply_env_keys, load_config, setup_logging_from_cfg
from robo_maze.common.model_gateway import make_adapter_from_cfg
from robo_maze.eval_core.executor import MovementExecutor, MovementOutcome
from robo_maze.eval_core.pathfinder import find_path
from robo_maze.maze_gen.grid import InvalidInput, path_to_arrows
from robo_maze.maze_gen.map_loader import load_map
from robo_maze.model_gateways.base import OracleError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_REACHED = 1
EXIT_BAD_MAP = 2
EXIT_ORACLE = 3


def _size_arg(value: str) -> str:
    try:
        w, h = parse_size(value)
    except InvalidInput as e:
        raise argparse.ArgumentTypeError(str(e)) from None
    return f"{w}x{h}"


def cmd_solve(args, cfg) -> int:
    spec = load_map(args.map)
    result = find_path(spec.grid, spec.start, spec.goal)
    if result.not_found:
        print(f"{spec.name}: no route to the goal ({result.message})")
        return EXIT_NOT_REACHED
    print(f"{spec.name}: {len(result.path)} moves {path_to_arrows(result.path)}")
    session = MovementExecutor.at_start(spec.grid)
    for rec in session.run(result.path):
        print(f"  {rec.index + 1:3d} {rec.direction.arrow} -> {rec.position} {rec.outcome.value}")
    return EXIT_OK if session.last_outcome in (MovementOutcome.REACHED_GOAL, None) else EXIT_NOT_REACHED


def cmd_ai(args, cfg) -> int:
    spec = load_map(args.map)
    instructions = Path(args.route).read_text(encoding='utf-8') if args.route else args.instructions
    if args.model:
        cfg['model'] = args.model
    adapter = make_adapter_from_cfg(cfg, map_spec=spec)
    outdir = Path(args.outdir) if args.outdir else None
    if outdir:
        outdir.mkdir(parents=True, exist_ok=True)
    item = evaluate_map(spec, adapter, instructions, outdir)
    print(json.dumps(item, ensure_ascii=False, indent=2))
    if not item['commands']:
        print("The oracle returned no usable movement commands.", file=sys.stderr)
        return EXIT_ORACLE
    return EXIT_OK if item['outcome'] == MovementOutcome.REACHED_GOAL.value else EXIT_NOT_REACHED


def cmd_generate(args, cfg) -> int:
    gen_cfg = dict(cfg.get('generator', {}))
    gen_cfg.update({k: v for k, v in (('size', args.size), ('seed', args.seed), ('start_goal', args.start_goal),
                                      ('trap_ratio', args.trap_ratio), ('obstacle_ratio', args.obstacle_ratio)) if v is not None})
    cfg['generator'] = gen_cfg
    written = generate_maps_to_dir(cfg, Path(args.outdir), count=args.n)
    print(f"Wrote {len(written)} maps to {args.outdir}")
    return EXIT_OK


def cmd_bench(args, cfg) -> int:
    if args.model:
        cfg['model'] = args.model
    summary = run_bench(cfg, Path(args.outdir or cfg.get('output_dir') or 'outputs'), Path(args.maps) if args.maps else None)
    print(json.dumps({k: summary[k] for k in ('model', 'avg_total', 'success_rate')}, ensure_ascii=False))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='robo-maze', description='Grid robot navigation: planner and oracle-guided runs')
    ap.add_argument('--config-dir', default=None, help='directory holding config.yaml / local.yaml')
    ap.add_argument('--log-level', default=None)
    sub = ap.add_subparsers(dest='command', required=True)

    p = sub.add_parser('solve', help='plan a trap-free route and execute it')
    p.add_argument('map')
    p.set_defaults(func=cmd_solve)

    p = sub.add_parser('ai', help='ask the oracle to turn route instructions into moves')
    p.add_argument('map')
    p.add_argument('--route', help='file with the route instructions')
    p.add_argument('--instructions', default='Walk to the treasure, avoiding traps.')
    p.add_argument('--model', default=None)
    p.add_argument('--outdir', default=None, help='write an HTML report here')
    p.set_defaults(func=cmd_ai)

    p = sub.add_parser('generate', help='write random practice maps')
    p.add_argument('--n', type=int, default=5)
    p.add_argument('--size', type=_size_arg, default=None, help='WxH, e.g. 8x8')
    p.add_argument('--seed', type=int, default=None)
    p.add_argument('--start_goal', choices=['corner', 'random'], default=None)
    p.add_argument('--trap_ratio', type=float, default=None)
    p.add_argument('--obstacle_ratio', type=float, default=None)
    p.add_argument('--outdir', default='maps/generated')
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser('bench', help='evaluate a model over a directory of maps')
    p.add_argument('--maps', default=None)
    p.add_argument('--model', default=None)
    p.add_argument('--outdir', default=None)
    p.set_defaults(func=cmd_bench)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config_dir)
    if args.log_level:
        cfg['LOG_LEVEL'] = args.log_level
    apply_env_keys(cfg)
    setup_logging_from_cfg(cfg)
    try:
        return args.func(args, cfg)
    except InvalidInput as e:
        logger.error(f"Map configuration error: {e}")
        return EXIT_BAD_MAP
    except OracleError as e:
        logger.error(f"Oracle failure: {e}")
        return EXIT_ORACLE
    except FileNotFoundError as e:
        logger.error(str(e))
        return EXIT_BAD_MAP


if __name__ == '__main__':
    sys.exit(main())
