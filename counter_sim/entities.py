# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Customer value and its state machine:
#     arrives -> served | waits | leaves
#     waits   -> waits | served
#     served  -> done
#   done and leaves are terminal.
#
# Design notes:
#   - Customers are frozen; every transition returns a new value with the same
#     id and entry_time. The engine swaps the value in the event clock.
#   - Counters (served, left, waits, total wait) are not kept here; the
#     engine notes them on its Metrics next to each transition.
#
# Usage:
#   from counter_sim.entities import Customer, CustomerStatus
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .errors import PreconditionViolation

NO_SERVER = 0


class CustomerStatus(str, Enum):
    ARRIVES = "arrives"
    WAITS = "waits"
    SERVED = "served"
    DONE = "done"
    LEAVES = "leaves"


TERMINAL = (CustomerStatus.DONE, CustomerStatus.LEAVES)


@dataclass(frozen=True, eq=False)
class Customer:
    cid: int
    entry_time: float
    present_time: float
    next_time: float
    status: CustomerStatus = CustomerStatus.ARRIVES
    server_id: int = NO_SERVER
    greedy: bool = False
    first_wait: bool = True          # False once a repeat wait has been logged

    @classmethod
    def enter(cls, cid: int, arrival_time: float, greedy: bool = False) -> "Customer":
        return cls(cid, arrival_time, arrival_time, arrival_time, greedy=greedy)

    # --- ordering / identity -------------------------------------------------
    def sort_key(self) -> Tuple[float, int]:
        """Event clock priority: present time, then id."""
        return (self.present_time, self.cid)

    def __lt__(self, other: "Customer") -> bool:
        return self.sort_key() < other.sort_key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Customer):
            return NotImplemented
        return self.cid == other.cid

    def __hash__(self) -> int:
        return hash(self.cid)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL

    def _require(self, *allowed: CustomerStatus):
        if self.status not in allowed:
            wanted = "/".join(s.value for s in allowed)
            raise PreconditionViolation(
                f"customer is {self.status.value}, expected {wanted}",
                customer_id=self.cid, time=self.present_time,
            )

    # --- from arrives ----------------------------------------------------------
    def arrives_to_served(self, server_id: int) -> "Customer":
        self._require(CustomerStatus.ARRIVES)
        return replace(self, next_time=self.present_time, status=CustomerStatus.SERVED,
                       server_id=server_id, first_wait=True)

    def arrives_to_waits(self, next_available_time: float, server_id: int) -> "Customer":
        self._require(CustomerStatus.ARRIVES)
        return replace(self, next_time=next_available_time, status=CustomerStatus.WAITS,
                       server_id=server_id, first_wait=True)

    def arrives_to_leaves(self) -> "Customer":
        self._require(CustomerStatus.ARRIVES)
        return replace(self, next_time=self.present_time, status=CustomerStatus.LEAVES,
                       server_id=NO_SERVER, first_wait=True)

    # --- from waits ------------------------------------------------------------
    def waits_to_waits(self, next_available_time: float) -> "Customer":
        """Still blocked; already logged, so the repeat is silent."""
        self._require(CustomerStatus.WAITS)
        return replace(self, present_time=next_available_time, next_time=next_available_time,
                       first_wait=False)

    def waits_to_served(self, start_time: float) -> "Customer":
        self._require(CustomerStatus.WAITS)
        return replace(self, present_time=start_time, next_time=start_time,
                       status=CustomerStatus.SERVED, first_wait=True)

    def reassign(self, server_id: int) -> "Customer":
        """Move a waiting self-service customer to another self-check unit."""
        self._require(CustomerStatus.WAITS)
        return replace(self, server_id=server_id)

    # --- to done ---------------------------------------------------------------
    def served_to_done(self, completion_time: float) -> "Customer":
        self._require(CustomerStatus.SERVED)
        return replace(self, present_time=completion_time, next_time=completion_time,
                       status=CustomerStatus.DONE, first_wait=True)

    def wait_duration(self) -> float:
        return self.present_time - self.entry_time
