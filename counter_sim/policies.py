# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# policies.py
# -----------------------------------------------------------------------------
# Purpose:
#   Server selection. Pure functions over the server list and the query time.
#
# Design notes:
#   - query_servers: first idle server in list order; otherwise the first
#     queueable server plus the queueable server with the shortest line
#     (ties go to the earlier server).
#   - best_self_server_query: re-targets a waiting self-check customer to an
#     idle unit, or to the unit that frees up first.
#
# Usage:
#   from counter_sim.policies import query_servers, best_self_server_query
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import NamedTuple, Optional, Sequence

from .errors import ConfigurationError
from .queues import Server


class ServerQuery(NamedTuple):
    idle: Optional[int] = None
    queueable: Optional[int] = None
    shortest: Optional[int] = None

    def pick_queue(self, greedy: bool) -> Optional[int]:
        return self.shortest if greedy else self.queueable


def query_servers(servers: Sequence[Server], now: float) -> ServerQuery:
    for s in servers:
        if s.is_idle(now):
            return ServerQuery(idle=s.server_id)

    first = shortest = None
    for s in servers:
        if not s.can_queue(now):
            continue
        if first is None:
            first = shortest = s
        elif s.queue_size() < shortest.queue_size():
            shortest = s
    if first is None:
        return ServerQuery()
    return ServerQuery(queueable=first.server_id, shortest=shortest.server_id)


def best_self_server_query(servers: Sequence[Server], n_human: int, now: float) -> Server:
    units = servers[n_human:]
    if not units:
        raise ConfigurationError("customer routed to self-check but none are configured", time=now)
    for s in units:
        if s.is_idle(now):
            return s
    best = units[0]
    for s in units[1:]:
        if s.next_available_time - now < best.next_available_time - now:
            best = s
    return best
