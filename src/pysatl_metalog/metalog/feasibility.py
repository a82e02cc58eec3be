"""
Feasibility of Metalog Coefficients
===================================

A coefficient vector is feasible when the quantile function it defines is
non-decreasing on ``(0, 1)``, i.e. the density is non-negative everywhere.
Boundary transforms are monotone, so feasibility depends on the coefficients
alone.

- ``k = 2``: ``a2 > 0``.
- ``k = 3``: ``a2 > 0`` and ``|a3| / a2 <= 1.66711``.
- ``k = 4``: closed form in ``b = a3 / a2`` and ``c = a4 / a2``. Multiplying
  the quantile density by ``p (1 - p)`` gives
  ``a2 * (1 + b * h(p) + c * p (1 - p))`` with ``h = (p - 0.5) + p (1 - p) logit(p)``.
  The envelope of these constraints over ``p`` is the curve
  ``c = -4 + |b| ln((2 + |b|) / (2 - |b|))`` for ``|b| < 2``.
- ``k > 4``: no closed form. The unbounded density is sampled on a fixed grid
  of probabilities and the vector is accepted when no sampled value is
  negative. This test is necessary but **not sufficient**: a density that
  dips below zero between grid points or outside the grid range goes
  unnoticed.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from math import log
from typing import TYPE_CHECKING

import numpy as np

from pysatl_metalog.metalog.basis import design_matrix_derivative
from pysatl_metalog.metalog.config import DEFAULT_CONFIG

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_metalog.metalog.config import MetalogConfig
    from pysatl_metalog.types import FloatArray


def is_feasible(coefficients: npt.ArrayLike, config: MetalogConfig | None = None) -> bool:
    """
    Decide whether the coefficients define a valid distribution.

    Parameters
    ----------
    coefficients : array_like
        Metalog coefficients ``a1..ak``, ``k >= 2``.
    config : MetalogConfig, optional
        Numeric settings; :data:`DEFAULT_CONFIG` if omitted.

    Returns
    -------
    bool
        ``True`` if the density is non-negative (on the sampled grid for ``k > 4``).
        From three terms on, any non-finite coefficient makes the model infeasible.
    """
    cfg = DEFAULT_CONFIG if config is None else config
    a = np.asarray(coefficients, dtype=np.float64).reshape(-1)
    k = a.size
    if k < 2:
        raise ValueError(f"At least two coefficients are required, got {k}.")
    if k == 2:
        # location does not affect the density
        return bool(a[1] > 0)
    if not np.all(np.isfinite(a)):
        return False
    if k == 3:
        return bool(a[1] > 0 and abs(a[2]) / a[1] <= cfg.k3_feasibility_limit)
    if k == 4:
        return _four_term_feasible(float(a[1]), float(a[2]), float(a[3]))
    return _sampled_feasible(a, cfg)


def four_term_boundary(b: float) -> float:
    """
    Smallest feasible ``a4 / a2`` for a given ``a3 / a2`` (``inf`` if none).
    """
    b = abs(b)
    if b >= 2.0:
        return float("inf")
    if b == 0.0:
        return -4.0
    return -4.0 + b * log((2.0 + b) / (2.0 - b))


def _four_term_feasible(a2: float, a3: float, a4: float) -> bool:
    if a2 < 0.0:
        return False
    if a2 == 0.0:
        # a1 + a4 (p - 0.5): uniform when a4 > 0, the logit term would dominate otherwise
        return a3 == 0.0 and a4 > 0.0
    b = a3 / a2
    if abs(b) >= 2.0:
        return False
    return a4 / a2 >= four_term_boundary(b)


@lru_cache(maxsize=8)
def _feasibility_grid(size: int, lo: float, hi: float) -> FloatArray:
    # cubic spacing around 0.5 puts more points in the middle than in the tails
    t = np.linspace(-1.0, 1.0, size)
    half_width = min(0.5 - lo, hi - 0.5)
    grid = 0.5 + half_width * t**3
    grid[0], grid[-1] = lo, hi
    grid.setflags(write=False)
    return grid


def _sampled_feasible(a: FloatArray, cfg: MetalogConfig) -> bool:
    lo, hi = cfg.feasibility_grid_range
    grid = _feasibility_grid(cfg.feasibility_grid_size, lo, hi)
    quantile_density = design_matrix_derivative(grid, a.size) @ a
    with np.errstate(divide="ignore"):
        density = 1.0 / quantile_density
    return bool(np.all(density >= 0.0))
