"""
experiments/optimize_staffing.py

Coordinate-descent style search that sweeps staffing/capacity decisions on a
small integer grid to find the cheapest configuration that keeps the mean
average wait under `experiments.wait_target` and the balk rate under
`experiments.max_balk_rate`. Instead of an exhaustive Cartesian grid, this
walks one decision dimension at a time while holding the others fixed.

Usage:
  python -m experiments.optimize_staffing
"""

from __future__ import annotations
import argparse
from typing import Dict, List, Optional, Tuple

from counter_sim.config import apply_overrides, load_cfg
from counter_sim.errors import ConfigurationError
from experiments.run_experiments import mean_ci, run_replications, series

# Integer ranges for each decision variable under servers.*
CHOICES = {
    "human": (0, 4),
    "self_checkout": (0, 4),
    "qmax": (0, 5),
}
# Relative cost of one unit of each decision variable.
UNIT_COST = {
    "human": 3.0,
    "self_checkout": 1.0,
    "qmax": 0.1,
}
COORDINATE_PASSES = 2
# Monte Carlo controls: number of replications per candidate and the seed to start from.
SEARCH_ITERATIONS = 5
SEARCH_START_SEED = 1


def staffing_cost(servers: Dict[str, int]) -> float:
    return sum(UNIT_COST[k] * servers.get(k, 0) for k in UNIT_COST)


def evaluate(cfg: Dict, servers: Dict[str, int], replications: int, seed: int,
             confidence: float) -> Optional[Dict]:
    """Simulate one candidate; None when the candidate cannot run at all."""
    cand = apply_overrides(cfg, {"servers": servers})
    try:
        results = run_replications(cand, replications, seed)
    except ConfigurationError:
        return None
    wait = mean_ci(series(results, lambda r: r["average_wait"]), confidence)
    balk = mean_ci(series(results, lambda r: r["balk_rate"]), confidence)
    return {
        "servers": dict(servers),
        "cost": staffing_cost(servers),
        "wait": wait,
        "balk": balk,
    }


def feasible(ev: Optional[Dict], wait_target: float, max_balk: float) -> bool:
    return ev is not None and ev["wait"][0] <= wait_target and ev["balk"][0] <= max_balk


def better(a: Dict, b: Optional[Dict]) -> bool:
    """Prefer lower cost, then lower wait."""
    if b is None:
        return True
    return (a["cost"], a["wait"][0]) < (b["cost"], b["wait"][0])


def coordinate_search(cfg: Dict, replications: int = SEARCH_ITERATIONS,
                      seed: int = SEARCH_START_SEED) -> Tuple[Optional[Dict], List[Dict]]:
    exp_cfg = cfg.get("experiments", {})
    wait_target = float(exp_cfg.get("wait_target", 0.5))
    max_balk = float(exp_cfg.get("max_balk_rate", 1.0))
    confidence = float(exp_cfg.get("confidence_level", 0.95))

    current = {k: int(cfg["servers"].get(k, 0)) for k in CHOICES}
    history: List[Dict] = []
    cache: Dict[Tuple[int, ...], Optional[Dict]] = {}

    def _eval(servers: Dict[str, int]) -> Optional[Dict]:
        key = tuple(servers[k] for k in CHOICES)
        if key not in cache:
            cache[key] = evaluate(cfg, servers, replications, seed, confidence)
            if cache[key] is not None:
                history.append(cache[key])
        return cache[key]

    best = _eval(current)
    if not feasible(best, wait_target, max_balk):
        best = None
    for _ in range(COORDINATE_PASSES):
        for dim, (lo, hi) in CHOICES.items():
            for val in range(lo, hi + 1):
                cand = dict(current)
                cand[dim] = val
                ev = _eval(cand)
                if feasible(ev, wait_target, max_balk) and better(ev, best):
                    best = ev
            if best is not None:
                current = dict(best["servers"])
    return best, history


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Search the cheapest staffing meeting the wait target")
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--replications", type=int, default=SEARCH_ITERATIONS)
    parser.add_argument("--seed", type=int, default=SEARCH_START_SEED)
    args = parser.parse_args(argv)

    cfg = load_cfg(args.config)
    best, history = coordinate_search(cfg, args.replications, args.seed)
    print(f"Evaluated {len(history)} configurations")
    for ev in sorted(history, key=lambda e: (e["cost"], e["wait"][0])):
        s = ev["servers"]
        print(f"  human={s['human']} self={s['self_checkout']} qmax={s['qmax']} "
              f"cost={ev['cost']:.1f} wait={ev['wait'][0]:.3f}±{ev['wait'][1]:.3f} "
              f"balk={ev['balk'][0]*100:.1f}%")
    if best is None:
        print("No configuration met the wait target")
    else:
        print(f"Best: {best['servers']} (cost {best['cost']:.1f}, wait {best['wait'][0]:.3f})")


if __name__ == "__main__":
    main()
