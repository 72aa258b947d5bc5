import io
import unittest
from contextlib import redirect_stdout

from counter_sim.config import apply_overrides
from experiments.optimize_staffing import coordinate_search, staffing_cost
from experiments.run_experiments import (avg_nested, mean_ci, run_crn, run_replications,
                                         sample_stddev, series)
from experiments.scenarios import SCENARIOS

from tests.support import make_cfg


class TestStatistics(unittest.TestCase):

    def test_mean_ci(self):
        mu, half = mean_ci([1.0, 2.0, 3.0], 0.95)
        self.assertEqual(mu, 2.0)
        self.assertAlmostEqual(half, 2.484, places=3)

    def test_degenerate_samples(self):
        self.assertEqual(mean_ci([], 0.95), (0.0, 0.0))
        self.assertEqual(mean_ci([4.0], 0.95), (4.0, 0.0))
        self.assertEqual(sample_stddev([4.0]), 0.0)

    def test_avg_nested(self):
        rows = [{"u": {1: 0.5, 2: 1.0}}, {"u": {1: 0.25}}]
        self.assertEqual(avg_nested(rows, "u"), {1: 0.375, 2: 0.5})
        self.assertEqual(series(rows, lambda r: len(r["u"])), [2.0, 1.0])


class TestReplications(unittest.TestCase):

    def setUp(self):
        self.cfg = make_cfg(human=1, self_checkout=1, qmax=2, n=40, arrival=1.2, p_greedy=0.5)

    def test_seeds_advance_per_replication(self):
        results = run_replications(self.cfg, 3, 5)
        again = run_replications(self.cfg, 3, 5)
        self.assertEqual(len(results), 3)
        self.assertEqual(results, again)
        for r in results:
            self.assertEqual(r["entered"], r["served"] + r["left"])
        self.assertEqual(run_replications(self.cfg, 1, 6)[0], results[1])
        # the caller's config is left alone
        self.assertEqual(self.cfg["sim"]["seed"], 1)

    def test_crn_pairs_share_seeds(self):
        same = {"name": "a", "overrides": {}}
        out = io.StringIO()
        with redirect_stdout(out):
            res = run_crn(self.cfg, same, dict(same, name="b"), 3, 1, 0.95, 1.0)
        self.assertEqual(res["mean_diff"], 0.0)
        self.assertEqual([seed for seed, _, _ in res["rows"]], [1, 2, 3])
        self.assertIn("CRN paired average_wait comparison (b - a)", out.getvalue())

    def test_scenarios_apply_cleanly(self):
        base = make_cfg(human=2, self_checkout=2, qmax=2)
        for sc in SCENARIOS:
            with self.subTest(scenario=sc["name"]):
                cfg = apply_overrides(base, sc["overrides"])
                self.assertEqual(set(cfg), set(base))


class TestStaffingSearch(unittest.TestCase):

    def test_cheapest_feasible_neighbour(self):
        cfg = apply_overrides(make_cfg(human=1, qmax=1, n=20), {
            "experiments": {"wait_target": 1e9, "max_balk_rate": 1.0},
        })
        best, history = coordinate_search(cfg, replications=2, seed=1)
        self.assertEqual(best["servers"], {"human": 1, "self_checkout": 0, "qmax": 0})
        self.assertEqual(best["cost"], staffing_cost(best["servers"]))
        for ev in history:
            s = ev["servers"]
            self.assertGreaterEqual(s["human"] + s["self_checkout"], 1)

    def test_unreachable_target(self):
        cfg = apply_overrides(make_cfg(human=1, qmax=1, n=20), {
            "experiments": {"wait_target": -1.0},
        })
        best, history = coordinate_search(cfg, replications=1, seed=1)
        self.assertIsNone(best)
        self.assertTrue(history)


if __name__ == "__main__":
    unittest.main()
