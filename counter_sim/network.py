# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# network.py
# -----------------------------------------------------------------------------
# Purpose:
#   The Manager: given the customer popped from the EventClock, decide its
#   next state by consulting the servers, write back the replacement
#   servers, and record log lines and statistics.
#
# Design notes:
#   - step() is called once per pop. Expired rests are cleared first, so no
#     decision ever sees a rest that should already be over.
#   - A waiting customer keeps waiting while its server rests, is busy at
#     this time, or has someone else at the head of its line. Waiting
#     self-check customers are first re-targeted to the best unit.
#   - Any SimulationError aborts the run with the customer id and time.
#
# Usage:
#   router = Manager(cfg, servers, variates, metrics)
#   clock.run(router)
# -----------------------------------------------------------------------------

from __future__ import annotations
import itertools, logging
from typing import List, Optional

from .entities import Customer, CustomerStatus, NO_SERVER
from .errors import PreconditionViolation, SimulationError
from .metrics import Metrics
from .policies import best_self_server_query, query_servers
from .queues import Server
from .stations import is_human_id
from .variates import VariateSource

logger = logging.getLogger(__name__)


class Manager:
    def __init__(self, cfg: dict, servers: List[Server], variates: VariateSource, metrics: Metrics):
        self.cfg = cfg
        self.servers = servers
        self.rng = variates
        self.M = metrics
        self.n_human = int(cfg["servers"].get("human", 1))
        behaviour = cfg.get("behaviour", {})
        self.p_rest = float(behaviour.get("p_rest", 0.0))
        self.p_greedy = float(behaviour.get("p_greedy", 0.0))
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)

    def server(self, server_id: int) -> Server:
        return self.servers[server_id - 1]

    def _replace(self, s: Server):
        logger.debug("  %s idle=%s resting=%s next=%.3f queue=%d", s.label(), s.idle,
                     s.resting, s.next_available_time, s.queue_size())
        self.servers[s.server_id - 1] = s

    def label(self, c: Customer) -> str:
        if c.server_id == NO_SERVER:
            return ""
        return self.server(c.server_id).label()

    # Called by EventClock.run for every popped customer
    def step(self, c: Customer) -> Optional[Customer]:
        now = c.present_time
        logger.debug("pop %d %s t=%.3f", c.cid, c.status.value, now)
        try:
            self._terminate_rests(now)
            if c.first_wait:
                self.M.note_event(c, self.label(c))
            if not c.is_terminal:
                return self.change_customer_state(c)
            if c.status is CustomerStatus.DONE:
                self._replace(self._server_handles_done(self.server(c.server_id), now))
            return None
        except SimulationError as err:
            raise err.at(c.cid, now)

    def change_customer_state(self, c: Customer) -> Customer:
        if c.status is CustomerStatus.ARRIVES:
            return self.handle_arrival(c)
        if c.status is CustomerStatus.SERVED:
            return self.handle_served(c)
        return self.handle_waiting(c)

    # --- arrives -> served | waits | leaves --------------------------------------------
    def handle_arrival(self, c: Customer) -> Customer:
        now = c.present_time
        self.M.note_arrival(c)
        q = query_servers(self.servers, now)
        if q.idle is not None:
            s = self.server(q.idle)
            self._replace(s.serve_upon_arrival())
            return c.arrives_to_served(s.server_id)
        target = q.pick_queue(c.greedy)
        if target is not None:
            s = self.server(target)
            waiting = c.arrives_to_waits(s.next_available_time, s.server_id)
            s = s.add_to_wait_queue(waiting, now)
            self._replace(s)
            self.M.note_queued(waiting, s.server_id, s.queue_size())
            return waiting
        self.M.note_leave(c)
        return c.arrives_to_leaves()

    # --- served -> done ----------------------------------------------------------------
    def handle_served(self, c: Customer) -> Customer:
        completion = c.present_time + self.rng.service_time()
        s = self.server(c.server_id).actually_serve_customer(completion, c.cid)
        self._replace(s)
        self.M.note_service(s.server_id, c.present_time, completion)
        done = c.served_to_done(completion)
        self.M.note_done(done)
        return done

    # --- waits -> waits | served ---------------------------------------------------------
    def handle_waiting(self, c: Customer) -> Customer:
        now = c.present_time
        if not is_human_id(c.server_id, self.n_human):
            best = best_self_server_query(self.servers, self.n_human, now)
            c = c.reassign(best.server_id)
        s = self.server(c.server_id)
        head = s.head()
        at_head = head is not None and head.cid == c.cid
        if s.resting or not s.is_idle(now) or not at_head:
            if s.next_available_time <= now:
                # nothing scheduled can unblock this customer at a later time
                raise PreconditionViolation(
                    f"waiting customer cannot progress at {s.label()} "
                    f"(head={head.cid if head else None})")
            return c.waits_to_waits(s.next_available_time)
        served = c.waits_to_served(now)
        self.M.note_wait(served)
        return served

    # --- done: free the server, maybe rest --------------------------------------------------
    def _server_handles_done(self, s: Server, exit_time: float) -> Server:
        s = s.done_serving()
        if s.is_human and self._server_needs_rest():
            rest_until = exit_time + self.rng.rest_period()
            self.M.note_rest(s.server_id, exit_time, rest_until)
            s = s.start_resting(rest_until)
        return s

    def _server_needs_rest(self) -> bool:
        return self.rng.rest_trigger() < self.p_rest

    def _terminate_rests(self, now: float):
        for i in range(self.n_human):
            self.servers[i] = self.servers[i].stop_resting(now)
