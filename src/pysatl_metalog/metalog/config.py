"""
Numeric Settings
================

Tunable constants of the metalog engine collected in one immutable object.
Every public operation accepts an optional ``config``; :data:`DEFAULT_CONFIG`
is used otherwise.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class MetalogConfig:
    """
    Numeric settings of the metalog engine.

    Parameters
    ----------
    default_order : int, default 5
        Number of terms used when the caller does not give one.
    min_order, max_order : int, default 2 and 32
        Inclusive range of allowed orders.
    min_points : int, default 3
        Minimal number of distinct usable fit points.
    k3_feasibility_limit : float, default 1.66711
        Largest admissible ``|a3| / a2`` for three-term metalogs.
    feasibility_grid_size : int, default 1000
        Number of probabilities sampled by the density check for orders above 4.
    feasibility_grid_range : tuple[float, float], default (1e-4, 1 - 1e-4)
        Probability range covered by that grid.
    edge_tolerance : float, default 1e-14
        Probabilities this close to 0 or 1 evaluate to the support endpoint.
    inversion_grid_size : int, default 100
        Size of the bracketing table used by the CDF inverter.
    inversion_logit_span : float, default 29.0
        The bracketing table is uniform in logit space on ``[-span, span]``.
    root_xtol : float, default 1e-14
        Absolute probability tolerance of the root finder.
    max_iterations : int, default 200
        Iteration cap of the root finder.
    quad_limit : int, default 200
        Subinterval limit of the numerical integration of moments.
    """

    default_order: int = 5
    min_order: int = 2
    max_order: int = 32
    min_points: int = 3
    k3_feasibility_limit: float = 1.66711
    feasibility_grid_size: int = 1000
    feasibility_grid_range: tuple[float, float] = (1e-4, 1.0 - 1e-4)
    edge_tolerance: float = 1e-14
    inversion_grid_size: int = 100
    inversion_logit_span: float = 29.0
    root_xtol: float = 1e-14
    max_iterations: int = 200
    quad_limit: int = 200

    def __post_init__(self) -> None:
        if not 2 <= self.min_order <= self.max_order:
            raise ValueError("Order range must satisfy 2 <= min_order <= max_order.")
        if not self.min_order <= self.default_order <= self.max_order:
            raise ValueError("default_order must lie within [min_order, max_order].")
        lo, hi = self.feasibility_grid_range
        if not 0.0 < lo < hi < 1.0:
            raise ValueError("feasibility_grid_range must be an increasing pair inside (0, 1).")
        if self.feasibility_grid_size < 2 or self.inversion_grid_size < 2:
            raise ValueError("Grid sizes must be at least 2.")
        if not 0.0 < self.edge_tolerance < 1e-3:
            raise ValueError("edge_tolerance must be a small positive number.")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be positive.")

    def evolve(self, **changes: Any) -> MetalogConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_CONFIG = MetalogConfig()
"""Settings used when an operation receives no explicit configuration."""
