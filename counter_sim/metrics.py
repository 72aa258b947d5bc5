# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Collect the event log and the run statistics: entered, served, left,
#   waited, cumulative wait, plus per-server busy/rest time and the longest
#   queue seen at each server.
#
# Design notes:
#   - One Metrics per run; nothing is class-level, so back-to-back runs in
#     one process start from zero.
#   - note_* methods are called by the Manager alongside each transition.
#   - summary() returns a JSON-serializable dict for the experiment harness.
#
# Usage:
#   M = Metrics(cfg); ...; M.summary_line()
# -----------------------------------------------------------------------------

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List

from .entities import Customer, CustomerStatus


@dataclass
class Stats:
    entered: int = 0
    served: int = 0
    left: int = 0
    waited: int = 0            # customers who ever queued
    total_wait: float = 0.0

    @property
    def average_wait(self) -> float:
        if self.served == 0:
            return 0.0
        return self.total_wait / self.served


def format_time(x: float) -> str:
    return f"{x:.3f}"


def format_entry(c: Customer, server_label: str = "") -> str:
    """One log line, e.g. '1.000 2 waits to be served by server 1'."""
    head = f"{format_time(c.present_time)} {c.cid} {c.status.value}"
    if c.status is CustomerStatus.SERVED:
        return f"{head} by {server_label}"
    if c.status is CustomerStatus.DONE:
        return f"{head} serving by {server_label}"
    if c.status is CustomerStatus.WAITS:
        return f"{head} to be served by {server_label}"
    return head


class Metrics:
    def __init__(self, cfg: dict):
        self.cfg = cfg
        self.stats = Stats()
        self.log: List[str] = []
        self.busy_time = defaultdict(float)      # server_id -> summed service time
        self.rest_time = defaultdict(float)      # server_id -> summed rest time
        self.rests = defaultdict(int)
        self.max_queue = defaultdict(int)        # server_id -> longest queue observed
        self.end_time = 0.0

    # --- transition hooks --------------------------------------------------------
    def note_event(self, c: Customer, server_label: str = ""):
        self.log.append(format_entry(c, server_label))
        self.end_time = max(self.end_time, c.present_time)

    def note_arrival(self, c: Customer):
        self.stats.entered += 1

    def note_queued(self, c: Customer, server_id: int, queue_len: int):
        self.stats.waited += 1
        self.max_queue[server_id] = max(self.max_queue[server_id], queue_len)

    def note_leave(self, c: Customer):
        self.stats.left += 1

    def note_wait(self, c: Customer):
        """c has just moved from waits to served."""
        self.stats.total_wait += c.wait_duration()

    def note_service(self, server_id: int, start: float, end: float):
        self.busy_time[server_id] += end - start

    def note_done(self, c: Customer):
        self.stats.served += 1

    def note_rest(self, server_id: int, start: float, end: float):
        self.rests[server_id] += 1
        self.rest_time[server_id] += end - start

    # --- reporting -----------------------------------------------------------------
    def summary_line(self) -> str:
        s = self.stats
        return f"[{format_time(s.average_wait)} {s.served} {s.left}]"

    def utilization(self) -> Dict[int, float]:
        if self.end_time <= 0:
            return {sid: 0.0 for sid in self.busy_time}
        return {sid: busy / self.end_time for sid, busy in sorted(self.busy_time.items())}

    def summary(self) -> Dict:
        s = self.stats
        return {
            "entered": s.entered,
            "served": s.served,
            "left": s.left,
            "waited": s.waited,
            "total_wait": s.total_wait,
            "average_wait": s.average_wait,
            "balk_rate": (s.left / s.entered) if s.entered else 0.0,
            "end_time": self.end_time,
            "server_utilization": self.utilization(),
            "rests": dict(self.rests),
            "rest_time": dict(self.rest_time),
            "max_queue": dict(self.max_queue),
        }
