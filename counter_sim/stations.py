# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# stations.py
# -----------------------------------------------------------------------------
# Purpose:
#   Build the server list for one run: human servers first, then self-check
#   units sharing one queue. server_id is always index + 1.
#
# Design notes:
#   - The ordering is relied upon elsewhere: is_human_id() and the self-check
#     re-query both use the position relative to the number of humans.
#
# Usage:
#   from counter_sim.stations import make_servers
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from .queues import Server, SharedQueue


def make_servers(cfg: Dict) -> Tuple[List[Server], Optional[SharedQueue]]:
    """
    Create all servers from the 'servers' section of the config.

    Returns
    -------
    (servers, shared)
        shared is the SharedQueue common to the self-check units, or None
        when no self-check units are configured.
    """
    counts = cfg["servers"]
    n_human = int(counts.get("human", 1))
    n_self = int(counts.get("self_checkout", 0))
    qmax = int(counts.get("qmax", 1))

    servers: List[Server] = [Server.human(i + 1, qmax) for i in range(n_human)]
    shared = None
    if n_self > 0:
        shared = SharedQueue(qmax)
        servers.extend(Server.self_check(n_human + i + 1, shared) for i in range(n_self))
    return servers, shared


def is_human_id(server_id: int, n_human: int) -> bool:
    return 1 <= server_id <= n_human
