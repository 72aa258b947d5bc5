# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# variates.py
# -----------------------------------------------------------------------------
# Purpose:
#   Seeded random variates consumed by the engine: inter-arrival gaps,
#   service durations, rest decisions, rest durations and customer type.
#
# Design notes:
#   - Each quantity has its own random.Random stream (seed, seed+1, ...), so
#     the number of service draws never shifts the arrival sequence and a
#     change in p_rest leaves arrivals and service times untouched.
#   - Exponential draws use inverse transform on U in (0, 1].
#
# Usage:
#   rng = RandomGenerator(seed, lambda_, mu, rho)
#   gap = rng.inter_arrival_time()
# -----------------------------------------------------------------------------

from __future__ import annotations
import math, random
from typing import Protocol


class VariateSource(Protocol):
    def inter_arrival_time(self) -> float: ...
    def service_time(self) -> float: ...
    def rest_trigger(self) -> float: ...
    def rest_period(self) -> float: ...
    def customer_type(self) -> float: ...


def sample_exponential(rate: float, rng: random.Random) -> float:
    # mean = 1/rate; 1 - U keeps the log argument away from zero
    return -math.log(1.0 - rng.random()) / rate


class RandomGenerator:
    """Default VariateSource backed by five independent streams."""

    def __init__(self, seed: int, lambda_: float, mu: float, rho: float = 1.0):
        self.lambda_ = lambda_
        self.mu = mu
        self.rho = rho
        self._arrival = random.Random(seed)
        self._service = random.Random(seed + 1)
        self._rest = random.Random(seed + 2)
        self._rest_period = random.Random(seed + 3)
        self._customer_type = random.Random(seed + 4)

    def inter_arrival_time(self) -> float:
        return sample_exponential(self.lambda_, self._arrival)

    def service_time(self) -> float:
        return sample_exponential(self.mu, self._service)

    def rest_trigger(self) -> float:
        return self._rest.random()

    def rest_period(self) -> float:
        return sample_exponential(self.rho, self._rest_period)

    def customer_type(self) -> float:
        return self._customer_type.random()
