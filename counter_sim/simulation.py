# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# simulation.py
# -----------------------------------------------------------------------------
# Purpose:
#   Simulate a single replication ("one day"): validate parameters, build
#   servers and the manager, schedule arrivals, run the event loop, and
#   return the log and metrics.
#
# Usage:
#   from counter_sim.simulation import run_one_day
#   result = run_one_day(cfg)
#   print(result.report())
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .arrivals import schedule_arrivals
from .config import validate_cfg
from .metrics import Metrics, Stats
from .network import Manager
from .queues import EventClock, Server
from .stations import make_servers
from .variates import RandomGenerator, VariateSource

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    log: List[str]
    stats: Stats
    summary: Dict
    servers: List[Server]

    def summary_line(self) -> str:
        return f"[{self.stats.average_wait:.3f} {self.stats.served} {self.stats.left}]"

    def report(self) -> str:
        return "\n".join(self.log + [self.summary_line()])


def make_variates(cfg: Dict) -> RandomGenerator:
    rates = cfg["rates"]
    return RandomGenerator(
        int(cfg["sim"].get("seed", 0)),
        float(rates["arrival"]),
        float(rates["service"]),
        float(rates.get("rest", 1.0)),
    )


def run_one_day(cfg: Dict, variates: Optional[VariateSource] = None) -> SimulationResult:
    validate_cfg(cfg)
    servers, _ = make_servers(cfg)
    M = Metrics(cfg)
    router = Manager(cfg, servers, variates or make_variates(cfg), M)
    clock = EventClock()

    schedule_arrivals(clock, router, cfg)
    logger.info("run start: seed=%s customers=%d servers=%d",
                cfg["sim"].get("seed"), len(clock), len(servers))
    clock.run(router)
    logger.info("run end: t=%.3f %s", clock.t, M.summary_line())

    return SimulationResult(M.log, M.stats, M.summary(), list(router.servers))
