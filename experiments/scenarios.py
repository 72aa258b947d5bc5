"""
experiments/scenarios.py

Holds scenario definitions (decision variables) to sweep during experiments.
Each scenario is a set of overrides merged onto config/baseline.yaml: staffing
levels, self-check counts, queue capacity and customer behaviour.
"""

from __future__ import annotations

BASELINE = {
    "name": "baseline",
    "overrides": {},  # override config keys here per scenario
}

EXTRA_SELF_CHECKOUT = {
    "name": "extra_self_checkout",
    "overrides": {
        "servers": {"self_checkout": 3},
    },
}

LONGER_QUEUES = {
    "name": "longer_queues",
    "overrides": {
        "servers": {"qmax": 4},
    },
}

NO_SELF_CHECKOUT = {
    "name": "no_self_checkout",
    "overrides": {
        "servers": {"human": 3, "self_checkout": 0},
    },
}

TIRED_STAFF = {
    "name": "tired_staff",
    "overrides": {
        "behaviour": {"p_rest": 0.4},
        "rates": {"rest": 0.25},
    },
}

ALL_GREEDY = {
    "name": "all_greedy",
    "overrides": {
        "behaviour": {"p_greedy": 1.0},
    },
}

HIGH_LOAD = {
    "name": "high_load",
    "overrides": {
        "rates": {"arrival": 2.0},
        "sim": {"n_customers": 400},
    },
}

SCENARIOS = [
    BASELINE,
    EXTRA_SELF_CHECKOUT,
    LONGER_QUEUES,
    NO_SELF_CHECKOUT,
    TIRED_STAFF,
    ALL_GREEDY,
    HIGH_LOAD,
]
