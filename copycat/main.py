# Folder: copycat/
# File: main.py
import sys
import logging
import argparse
from typing import List, Optional

from copycat.config import ConfigError, load_config, setup_logging
from copycat.copycat import Copycat, RunState

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Copycat letter-string analogy solver (initial : modified :: target : ?)')
    parser.add_argument('initial', type=str, help='Initial string, e.g. abc')
    parser.add_argument('modified', type=str, help='Modified string, e.g. abd')
    parser.add_argument('target', type=str, help='Target string, e.g. xyz')
    parser.add_argument('--seed', type=str, default=None, help='Random seed (integer or any text)')
    parser.add_argument('--batch', type=int, nargs='?', const=0, default=None, metavar='N',
                        help='Solve N times (default: run.batch_size) and print answer frequencies')
    parser.add_argument('--config', type=str, default='config.yaml', help='YAML configuration file')
    parser.add_argument('--max-ticks', type=int, default=None, help='Give up after this many codelets')
    parser.add_argument('--log-level', type=str, default=None, help='Logging level (DEBUG, INFO, ...)')
    return parser


def _parse_seed(seed: Optional[str]):
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return seed


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    setup_logging(args.log_level or config['logging']['level'])
    if args.max_ticks is not None:
        config['run']['max_ticks'] = args.max_ticks

    engine = Copycat(seed=_parse_seed(args.seed), config=config)

    if args.batch is not None:
        num_runs = args.batch or config['run']['batch_size']
        results = engine.batch_run(args.initial, args.modified, args.target, num_runs)
        if not results:
            return 1
        print(f"{'answer':<12} {'count':>6} {'avg temp':>9} {'avg time':>9}  rule")
        for (answer, rule), stats in sorted(results.items(), key=lambda kv: -kv[1]['count']):
            print(f"{str(answer):<12} {stats['count']:>6} {stats['avg_temp']:>9.1f} "
                  f"{stats['avg_time']:>9.1f}  {rule}")
        return 0

    if not engine.set_strings(args.initial, args.modified, args.target):
        return 1
    answer = engine.run()
    snapshot = engine.snapshot()
    if engine.state is not RunState.DONE:
        print(f"No answer after {snapshot['tick']} codelets.")
        return 1
    print(f"{args.initial} : {args.modified} :: {args.target} : {answer}")
    print(f"Rule: {snapshot['rule']}")
    print(f"Codelets run: {snapshot['tick']}, final temperature: {engine.temperature.last_unclamped_value:.1f}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
