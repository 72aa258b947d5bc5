# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# config.py
# -----------------------------------------------------------------------------
# Purpose:
#   Load, merge and validate run parameters. Parameters come from a YAML file
#   (config/baseline.yaml by default) or from the whitespace-separated token
#   format read on stdin:
#     seed human self_checkout qmax n_customers lambda mu rho p_rest p_greedy
#
# Design notes:
#   - Shorter token lists from older input formats are accepted: 6 tokens
#     (no self-check, rest or greedy), 8 (adds rho p_rest) and 9 (adds the
#     self-check count after human).
#   - validate_cfg runs before anything is built; bad parameters never start
#     a run.
#
# Usage:
#   cfg = load_cfg(); validate_cfg(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
import copy, os
from typing import Dict, Optional, Sequence

import yaml

from .errors import ConfigurationError

ROOT = os.path.dirname(os.path.dirname(__file__))
DEFAULT_CONFIG = os.path.join(ROOT, "config", "baseline.yaml")

DEFAULTS: Dict = {
    "sim": {"seed": 1, "n_customers": 10},
    "servers": {"human": 1, "self_checkout": 0, "qmax": 1},
    "rates": {"arrival": 1.0, "service": 1.0, "rest": 1.0},
    "behaviour": {"p_rest": 0.0, "p_greedy": 0.0},
    "logging": {"level": "WARNING"},
}


def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply overrides (recursive merge) on top of the base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides)
    return new


def load_cfg(path: Optional[str] = None) -> Dict:
    with open(path or DEFAULT_CONFIG, "r") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"config root must be a mapping: {path or DEFAULT_CONFIG}")
    return apply_overrides(DEFAULTS, raw)


def cfg_from_tokens(tokens: Sequence[str]) -> Dict:
    """Build a config from the stdin token format."""
    n = len(tokens)
    if n not in (6, 8, 9, 10):
        raise ConfigurationError(f"expected 6, 8, 9 or 10 parameters, got {n}")
    try:
        if n == 6:
            seed, human, qmax, n_cust, lam, mu = tokens
            n_self, rho, p_rest, p_greedy = 0, 1.0, 0.0, 0.0
        elif n == 8:
            seed, human, qmax, n_cust, lam, mu, rho, p_rest = tokens
            n_self, p_greedy = 0, 0.0
        elif n == 9:
            seed, human, n_self, qmax, n_cust, lam, mu, rho, p_rest = tokens
            p_greedy = 0.0
        else:
            seed, human, n_self, qmax, n_cust, lam, mu, rho, p_rest, p_greedy = tokens
        overrides = {
            "sim": {"seed": int(seed), "n_customers": int(n_cust)},
            "servers": {"human": int(human), "self_checkout": int(n_self), "qmax": int(qmax)},
            "rates": {"arrival": float(lam), "service": float(mu), "rest": float(rho)},
            "behaviour": {"p_rest": float(p_rest), "p_greedy": float(p_greedy)},
        }
    except ValueError as exc:
        raise ConfigurationError(f"malformed parameter: {exc}") from exc
    return apply_overrides(DEFAULTS, overrides)


# --- validation helpers ----------------------------------------------------------------

def require_positive(name: str, value) -> None:
    if value is None or value <= 0:
        raise ConfigurationError(f"{name} must be > 0")


def require_probability(name: str, value) -> None:
    if value is None or not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be within [0, 1]")


def require_int_at_least(name: str, value, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigurationError(f"{name} must be an integer >= {minimum}")


def validate_cfg(cfg: Dict) -> Dict:
    """Reject parameter sets that cannot run; returns cfg unchanged."""
    sim, servers = cfg.get("sim", {}), cfg.get("servers", {})
    rates, behaviour = cfg.get("rates", {}), cfg.get("behaviour", {})
    require_int_at_least("sim.seed", sim.get("seed"), 0)
    require_int_at_least("sim.n_customers", sim.get("n_customers"), 0)
    require_int_at_least("servers.human", servers.get("human"), 0)
    require_int_at_least("servers.self_checkout", servers.get("self_checkout", 0), 0)
    require_int_at_least("servers.qmax", servers.get("qmax"), 0)
    if servers.get("human", 0) + servers.get("self_checkout", 0) < 1:
        raise ConfigurationError("at least one server or self-check unit is required")
    require_positive("rates.arrival", rates.get("arrival"))
    require_positive("rates.service", rates.get("service"))
    require_probability("behaviour.p_rest", behaviour.get("p_rest", 0.0))
    require_probability("behaviour.p_greedy", behaviour.get("p_greedy", 0.0))
    if behaviour.get("p_rest", 0.0) > 0:
        require_positive("rates.rest", rates.get("rest"))
    return cfg
