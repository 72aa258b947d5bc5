# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# errors.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exception types raised by the engine. Every failure is fatal for the run:
#   nothing is retried and no customer is skipped.
#
# Usage:
#   from counter_sim.errors import PreconditionViolation, ConfigurationError
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Optional


class SimulationError(Exception):
    """Base class; optionally carries the offending customer id and sim time."""

    def __init__(self, message: str, customer_id: Optional[int] = None, time: Optional[float] = None):
        self.reason = message
        self.customer_id = customer_id
        self.time = time
        super().__init__(self._render())

    def _render(self) -> str:
        parts = [self.reason]
        if self.customer_id is not None:
            parts.append(f"customer {self.customer_id}")
        if self.time is not None:
            parts.append(f"t={self.time:.3f}")
        return " | ".join(parts)

    def at(self, customer_id: int, time: float) -> "SimulationError":
        """Fill in customer/time context if the raiser did not know them."""
        if self.customer_id is None:
            self.customer_id = customer_id
        if self.time is None:
            self.time = time
        self.args = (self._render(),)
        return self


class PreconditionViolation(SimulationError):
    """A transition was requested from a state that does not allow it."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid parameters, rejected before (or instead of) running."""
