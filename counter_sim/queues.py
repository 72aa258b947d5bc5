# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Discrete-event primitives: the EventClock (min-heap of customers keyed on
#   present time then id), the Server value (human or self-check) and the
#   SharedQueue used by all self-check units.
#
# Design notes:
#   - Servers are frozen; each operation returns a replacement that the
#     engine writes back into its server list at index server_id - 1.
#   - Human servers own a private tuple queue. Self-check servers hold a
#     handle to one SharedQueue, so a queue change made through any unit is
#     seen by all of them.
#   - Precondition failures raise PreconditionViolation; the engine attaches
#     the customer id and time before it propagates.
#
# Usage:
#   from counter_sim.queues import EventClock, Server, ServerKind, SharedQueue
# -----------------------------------------------------------------------------

from __future__ import annotations
import heapq, logging
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Deque, List, Optional, Set, Tuple

from .entities import Customer
from .errors import PreconditionViolation

logger = logging.getLogger(__name__)


class EventClock:
    """Future event list holding one live Customer value per id.

    Attributes
    ----------
    t : float
        Present time of the last popped customer.
    FEL : list
        Min-heap of (present_time, id, customer).
    """
    def __init__(self):
        self.t: float = 0.0
        self.FEL: List[Tuple[float, int, Customer]] = []
        self._live: Set[int] = set()

    def schedule(self, customer: Customer):
        if customer.cid in self._live:
            raise PreconditionViolation("customer already scheduled",
                                        customer_id=customer.cid, time=customer.present_time)
        self._live.add(customer.cid)
        heapq.heappush(self.FEL, (customer.present_time, customer.cid, customer))
        logger.debug("scheduled %s %s at %.3f", customer.cid, customer.status.value, customer.present_time)

    def pop(self) -> Customer:
        _, _, customer = heapq.heappop(self.FEL)
        self._live.discard(customer.cid)
        self.t = customer.present_time
        return customer

    def __len__(self) -> int:
        return len(self.FEL)

    def run(self, router):
        """Pop customers until none are left, handing each to the router."""
        while self.FEL:
            customer = self.pop()
            nxt = router.step(customer)
            if nxt is not None:
                self.schedule(nxt)


class SharedQueue:
    """FIFO line common to every self-check unit; capacity is qmax."""

    def __init__(self, qmax: int):
        self.qmax = qmax
        self._line: Deque[Customer] = deque()

    def __len__(self) -> int:
        return len(self._line)

    def append(self, customer: Customer):
        if len(self._line) >= self.qmax:
            raise PreconditionViolation(f"shared queue full ({self.qmax})")
        self._line.append(customer)

    def peek(self) -> Optional[Customer]:
        return self._line[0] if self._line else None

    def popleft(self) -> Customer:
        return self._line.popleft()

    def snapshot(self) -> Tuple[Customer, ...]:
        return tuple(self._line)


class ServerKind(str, Enum):
    HUMAN = "server"
    SELF = "self-check"


@dataclass(frozen=True)
class Server:
    """One counter: a human server, or a self-check unit when kind is SELF.

    Parameters
    ----------
    server_id : int
        1-based position in the server list.
    qmax : int
        Capacity of the private queue (human) or of the shared queue (self).
    idle : bool
        Idle flag; set by done_serving and start_resting, cleared by serving.
    resting : bool
        Human only. Dominates idle: a resting server is never is_idle().
    next_available_time : float
        End of the current service or rest.
    """
    server_id: int
    qmax: int
    kind: ServerKind = ServerKind.HUMAN
    idle: bool = True
    resting: bool = False
    next_available_time: float = 0.0
    waiting_queue: Tuple[Customer, ...] = ()
    shared: Optional[SharedQueue] = None

    @classmethod
    def human(cls, server_id: int, qmax: int) -> "Server":
        return cls(server_id, qmax)

    @classmethod
    def self_check(cls, server_id: int, shared: SharedQueue) -> "Server":
        return cls(server_id, shared.qmax, kind=ServerKind.SELF, shared=shared)

    @property
    def is_human(self) -> bool:
        return self.kind is ServerKind.HUMAN

    def label(self) -> str:
        return f"{self.kind.value} {self.server_id}"

    # --- queue views -----------------------------------------------------------
    @property
    def queue(self) -> Tuple[Customer, ...]:
        if self.is_human:
            return self.waiting_queue
        return self.shared.snapshot()

    def queue_size(self) -> int:
        return len(self.waiting_queue) if self.is_human else len(self.shared)

    def head(self) -> Optional[Customer]:
        if self.is_human:
            return self.waiting_queue[0] if self.waiting_queue else None
        return self.shared.peek()

    # --- predicates ------------------------------------------------------------
    def is_idle(self, now: float) -> bool:
        if self.is_human and self.resting:
            return False
        return self.idle and now >= self.next_available_time

    def can_queue(self, now: float) -> bool:
        if self.is_human:
            return now < self.next_available_time and self.queue_size() < self.qmax
        return self.queue_size() < self.qmax

    # --- transitions -----------------------------------------------------------
    def serve_upon_arrival(self) -> "Server":
        if not self.idle or (self.is_human and self.resting):
            raise PreconditionViolation(f"{self.label()} is not idle")
        if self.queue_size():
            raise PreconditionViolation(f"{self.label()} has customers queued")
        return replace(self, idle=False)

    def add_to_wait_queue(self, customer: Customer, now: float) -> "Server":
        if self.is_idle(now):
            raise PreconditionViolation(f"{self.label()} is idle, nobody should queue")
        if self.queue_size() >= self.qmax:
            raise PreconditionViolation(f"{self.label()} queue full ({self.qmax})")
        if self.is_human:
            return replace(self, waiting_queue=self.waiting_queue + (customer,))
        self.shared.append(customer)
        return replace(self)

    def actually_serve_customer(self, completion_time: float, cid: int) -> "Server":
        """Start service ending at completion_time; dequeue cid if it was the head."""
        if self.is_human and self.resting:
            raise PreconditionViolation(f"{self.label()} is resting")
        head = self.head()
        if head is None or head.cid != cid:
            return replace(self, idle=False, next_available_time=completion_time)
        if self.is_human:
            return replace(self, idle=False, next_available_time=completion_time,
                           waiting_queue=self.waiting_queue[1:])
        self.shared.popleft()
        return replace(self, idle=False, next_available_time=completion_time)

    def done_serving(self) -> "Server":
        return replace(self, idle=True)

    def start_resting(self, rest_until: float) -> "Server":
        if not self.is_human:
            raise PreconditionViolation(f"{self.label()} cannot rest")
        return replace(self, idle=True, resting=True, next_available_time=rest_until)

    def stop_resting(self, now: float) -> "Server":
        if self.resting and now >= self.next_available_time:
            return replace(self, resting=False)
        return self
