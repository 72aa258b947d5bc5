# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Generate the day's arrivals: the first customer enters at t=0 and each
#   later one an inter-arrival gap after the previous. Greediness is drawn
#   per customer at generation time.
#
# Usage:
#   schedule_arrivals(clock, router, cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import List

from .entities import Customer


def arrival_times(rng, n: int) -> List[float]:
    times: List[float] = []
    now = 0.0
    for _ in range(n):
        times.append(now)
        now += rng.inter_arrival_time()
    return times


def schedule_arrivals(clock, router, cfg):
    n = int(cfg["sim"]["n_customers"])
    for ts in arrival_times(router.rng, n):
        greedy = router.rng.customer_type() < router.p_greedy
        clock.schedule(Customer.enter(router.next_id(), ts, greedy=greedy))
