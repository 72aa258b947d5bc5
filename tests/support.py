"""Shared fixtures: a variate source with fixed draws and a config builder."""

from collections import Counter

from counter_sim.config import DEFAULTS, apply_overrides


class FixedVariates:
    """VariateSource returning the same value for every draw of a kind."""

    def __init__(self, gap=1.0, service=1.0, rest_trigger=1.0, rest=1.0, customer_type=1.0):
        self.gap = gap
        self.service = service
        self.trigger = rest_trigger
        self.rest = rest
        self.ctype = customer_type
        self.calls = Counter()

    def inter_arrival_time(self):
        self.calls["gap"] += 1
        return self.gap

    def service_time(self):
        self.calls["service"] += 1
        return self.service

    def rest_trigger(self):
        self.calls["rest_trigger"] += 1
        return self.trigger

    def rest_period(self):
        self.calls["rest"] += 1
        return self.rest

    def customer_type(self):
        self.calls["customer_type"] += 1
        return self.ctype


def make_cfg(human=1, self_checkout=0, qmax=1, n=3, p_rest=0.0, p_greedy=0.0,
             seed=1, arrival=1.0, service=1.0, rest=1.0):
    return apply_overrides(DEFAULTS, {
        "sim": {"seed": seed, "n_customers": n},
        "servers": {"human": human, "self_checkout": self_checkout, "qmax": qmax},
        "rates": {"arrival": arrival, "service": service, "rest": rest},
        "behaviour": {"p_rest": p_rest, "p_greedy": p_greedy},
    })
