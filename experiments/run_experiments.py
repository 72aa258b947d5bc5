"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario overrides,
runs multiple daily replications, and reports KPIs with confidence intervals.
Optionally compares pairs of scenarios with common random numbers (same seed
per replication) and a Bonferroni-adjusted interval on the paired difference.

Usage:
  python -m experiments.run_experiments
  python -m experiments.run_experiments --config config/baseline.yaml --replications 20
"""

from __future__ import annotations
import argparse, copy, logging, math
from statistics import mean, stdev
from typing import Callable, Dict, List, Optional, Tuple

from scipy.stats import t

from counter_sim.config import apply_overrides, load_cfg
from counter_sim.simulation import run_one_day
from experiments.scenarios import SCENARIOS

logger = logging.getLogger(__name__)


def t_critical(confidence_level: float, df: int, comparisons: float = 1.0) -> float:
    """Two-sided t critical value; alpha is split over `comparisons` (Bonferroni)."""
    level = min(max(confidence_level, 0.0), 0.999999)
    alpha = (1.0 - level) / max(comparisons, 1.0)
    return float(t.ppf(1 - alpha / 2.0, max(1, df)))


def mean_ci(values: List[float], confidence_level: float) -> Tuple[float, float]:
    """Return (mean, half-width) using a t-distribution critical value."""
    if not values:
        return 0.0, 0.0
    mu = mean(values)
    n = len(values)
    if n < 2:
        return mu, 0.0
    half = t_critical(confidence_level, n - 1) * (stdev(values) / math.sqrt(n))
    return mu, half


def sample_stddev(values: List[float]) -> float:
    """Return sample standard deviation or 0 if insufficient data."""
    if len(values) < 2:
        return 0.0
    return stdev(values)


def series(results: List[Dict], extractor: Callable[[Dict], float]) -> List[float]:
    """Collect a numeric series from each replication summary."""
    return [float(extractor(res)) for res in results]


def avg_nested(results: List[Dict], key: str) -> Dict[int, float]:
    """Average nested dictionaries (e.g., server_utilization) across replications."""
    if not results:
        return {}
    totals: Dict[int, float] = {}
    for res in results:
        for subk, val in res.get(key, {}).items():
            totals[subk] = totals.get(subk, 0.0) + float(val)
    return {subk: totals[subk] / len(results) for subk in sorted(totals)}


def run_replications(cfg: Dict, replications: int, base_seed: int) -> List[Dict]:
    """Run `replications` days with seeds base_seed, base_seed+1, ... and return summaries."""
    results = []
    for rep in range(replications):
        run_cfg = copy.deepcopy(cfg)
        run_cfg.setdefault("sim", {})["seed"] = base_seed + rep
        results.append(run_one_day(run_cfg).summary)
    return results


def run_crn(cfg: Dict, sc_a: Dict, sc_b: Dict, replications: int, base_seed: int,
            confidence: float, C: float, metric: str = "average_wait") -> Dict:
    """
    Run a common-random-number comparison between two scenarios, using the same
    seed per replication, and report paired differences and the CI of the mean.
    """
    cfg_a = apply_overrides(cfg, sc_a["overrides"])
    cfg_b = apply_overrides(cfg, sc_b["overrides"])
    res_a = run_replications(cfg_a, replications, base_seed)
    res_b = run_replications(cfg_b, replications, base_seed)
    rows = [(base_seed + i, a[metric], b[metric]) for i, (a, b) in enumerate(zip(res_a, res_b))]
    diffs = [b - a for (_, a, b) in rows]
    mean_diff = mean(diffs)
    sd_diff = sample_stddev(diffs)
    half = 0.0
    if len(diffs) > 1:
        half = t_critical(confidence, len(diffs) - 1, C) * (sd_diff / math.sqrt(len(diffs)))

    print(f"CRN paired {metric} comparison ({sc_b['name']} - {sc_a['name']}):")
    print("  Replication | Seed | Scenario1 | Scenario2 | Difference")
    for idx, (seed, v1, v2) in enumerate(rows, start=1):
        print(f"    {idx:2d}        | {seed:4d} | {v1:9.3f} | {v2:9.3f} | {v2 - v1:+.3f}")
    print(f"  Mean difference: {mean_diff:+.3f}")
    print(f"  Std dev of differences: {sd_diff:.3f}")
    print(f"  {confidence*100:.1f}% CI of mean diff: {mean_diff - half:+.3f} to {mean_diff + half:+.3f}")
    return {"mean_diff": mean_diff, "half_width": half, "sd_diff": sd_diff, "rows": rows}


def report_scenario(name: str, results: List[Dict], confidence: float, seeds: Tuple[int, int]):
    level_pct = confidence * 100.0
    wait = mean_ci(series(results, lambda r: r["average_wait"]), confidence)
    served = mean_ci(series(results, lambda r: r["served"]), confidence)
    left = mean_ci(series(results, lambda r: r["left"]), confidence)
    balk = mean_ci(series(results, lambda r: r["balk_rate"] * 100.0), confidence)
    rests = mean_ci(series(results, lambda r: sum(r["rests"].values())), confidence)
    wait_sd = sample_stddev(series(results, lambda r: r["average_wait"]))
    utilizations = {k: round(v * 100.0, 1) for k, v in avg_nested(results, "server_utilization").items()}

    print(f"Scenario: {name} (replications={len(results)}, {level_pct:.1f}% CI, seeds {seeds[0]}-{seeds[1]})")
    print("  Average wait by seed:")
    for offset, res in enumerate(results):
        print(f"    seed {seeds[0] + offset}: {res['average_wait']:.3f}  [{res['served']} served, {res['left']} left]")
    print(f"  Average wait std dev: {wait_sd:.3f}")
    print(f"  Average wait: {wait[0]:.3f} ± {wait[1]:.3f}")
    print(f"  Served/day: {served[0]:.2f} ± {served[1]:.2f}")
    print(f"  Left/day: {left[0]:.2f} ± {left[1]:.2f}")
    print(f"  Balk rate: {balk[0]:.1f}% ± {balk[1]:.1f}%")
    print(f"  Rests/day: {rests[0]:.2f} ± {rests[1]:.2f}")
    print(f"  Server utilization (mean % busy): {utilizations}")
    print("-")


def main(argv: Optional[List[str]] = None):
    """Entry point: drive all scenarios, replications, and report KPIs."""
    parser = argparse.ArgumentParser(description="Run scenario replications")
    parser.add_argument("--config", type=str, default=None, help="YAML config (default: config/baseline.yaml)")
    parser.add_argument("--replications", type=int, default=None, help="override experiments.replications")
    args = parser.parse_args(argv)

    cfg = load_cfg(args.config)
    logging.basicConfig(level=cfg.get("logging", {}).get("level", "WARNING"))
    exp_cfg = cfg.get("experiments", {})
    replications = max(1, int(args.replications or exp_cfg.get("replications", 1)))
    confidence = float(exp_cfg.get("confidence_level", 0.95))
    default_seed = cfg.get("sim", {}).get("seed", 0)

    for sc in SCENARIOS:
        sc_cfg = apply_overrides(cfg, sc["overrides"])
        scenario_seed = sc_cfg.get("sim", {}).get("seed", default_seed)
        results = run_replications(sc_cfg, replications, scenario_seed)
        report_scenario(sc["name"], results, confidence, (scenario_seed, scenario_seed + replications - 1))

    crn_pairs = exp_cfg.get("crn_compare")
    if crn_pairs:
        sc_index = {s["name"]: s for s in SCENARIOS}
        # Bonferroni: C = K(K-1)/2 comparisons for K alternative designs
        K = len(crn_pairs)
        C = max(1.0, K * (K - 1) / 2)
        for pair in crn_pairs:
            if len(pair) != 2:
                logger.warning("skipping CRN entry (needs 2 names): %s", pair)
                continue
            sc_a, sc_b = sc_index.get(pair[0]), sc_index.get(pair[1])
            if sc_a and sc_b:
                print(f"\nCRN & Bonferroni Comparison: {sc_a['name']} vs {sc_b['name']} "
                      f"(replications={replications}, seeds shared)")
                run_crn(cfg, sc_a, sc_b, replications, default_seed, confidence, C)
            else:
                logger.warning("CRN pair not found: %s", pair)


if __name__ == "__main__":
    main()
