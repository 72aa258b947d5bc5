# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# cli.py
# -----------------------------------------------------------------------------
# Purpose:
#   Command line entry point: run one day and print the event log followed
#   by the [average_wait served left] summary.
#
# Usage:
#   counter-sim --config config/baseline.yaml
#   echo "1 2 1 2 20 1.0 1.0 0.5 0.3 0.2" | counter-sim --stdin
# -----------------------------------------------------------------------------

from __future__ import annotations
import argparse, logging, sys
from typing import List, Optional

from .config import cfg_from_tokens, load_cfg
from .errors import SimulationError
from .simulation import run_one_day


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="counter-sim",
        description="Simulate one day at a service counter with human servers and self-checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  counter-sim --config config/baseline.yaml --seed 7
  echo "1 1 1 3 1.0 1.0" | counter-sim --stdin
        """,
    )
    src = parser.add_mutually_exclusive_group()
    src.add_argument("--config", type=str, default=None,
                     help="YAML config file (default: config/baseline.yaml)")
    src.add_argument("--stdin", action="store_true",
                     help="read 'seed human [self] qmax n lambda mu [rho p_rest [p_greedy]]' from stdin")
    parser.add_argument("--seed", type=int, default=None, help="override sim.seed")
    parser.add_argument("--log-level", type=str, default=None,
                        help="logging level (default: logging.level from config)")
    parser.add_argument("--summary-only", action="store_true", help="print only the summary line")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = cfg_from_tokens(sys.stdin.read().split()) if args.stdin else load_cfg(args.config)
        if args.seed is not None:
            cfg["sim"]["seed"] = args.seed
        level = args.log_level or cfg.get("logging", {}).get("level", "WARNING")
        logging.basicConfig(level=getattr(logging, str(level).upper(), logging.WARNING),
                            format="%(levelname)s %(name)s: %(message)s")
        result = run_one_day(cfg)
    except SimulationError as err:
        print(f"simulation aborted: {err}", file=sys.stderr)
        return 1
    except OSError as err:
        print(f"cannot read config: {err}", file=sys.stderr)
        return 1

    if args.summary_only:
        print(result.summary_line())
    else:
        print(result.report())
    return 0


if __name__ == "__main__":
    sys.exit(main())
