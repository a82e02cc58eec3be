"""
Numerical inversion of the metalog quantile function.

The CDF has no closed form. For each target value the inverter

1. evaluates the quantile on a fixed table of probabilities spaced uniformly
   in logit space (dense near 0 and 1),
2. locates the table interval containing the target with a binary search on
   the value column,
3. solves ``Q(p) - x = 0`` inside that interval with Brent's method.

Each target is solved on its own; a table that is not monotone, a bracket
without a sign change or an exhausted iteration budget raise
:class:`InfeasibleModelError`. Targets beyond the quantile at the edge of the
evaluable range (``2 * edge_tolerance`` from 0 or 1) map to 0 or 1.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from math import isnan
from typing import TYPE_CHECKING

import numpy as np
from scipy import optimize as _sp_optimize
from scipy.special import expit

from pysatl_metalog.errors import InfeasibleModelError, OutOfSupportError
from pysatl_metalog.metalog.config import DEFAULT_CONFIG
from pysatl_metalog.metalog.evaluation import unbounded_quantile

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_metalog.metalog.config import MetalogConfig
    from pysatl_metalog.metalog.transforms import BoundaryTransform
    from pysatl_metalog.types import FloatArray


@lru_cache(maxsize=8)
def _probability_table(size: int, span: float) -> FloatArray:
    half = expit(np.linspace(-span, 0.0, size // 2, endpoint=False))
    # mirrored so that the upper tail keeps the resolution of the lower one
    table = np.concatenate([half, [0.5], 1.0 - half[::-1]])
    table.setflags(write=False)
    return table


class QuantileInverter:
    """
    CDF evaluator bound to one set of coefficients.

    Parameters
    ----------
    coefficients : array_like
        Metalog coefficients.
    transform : BoundaryTransform
        Boundary strategy of the model.
    config : MetalogConfig, optional
        Numeric settings.
    """

    __slots__ = (
        "_a",
        "_transform",
        "_cfg",
        "_p_table",
        "_x_table",
        "_p_min",
        "_p_max",
        "_monotone",
    )

    def __init__(
        self,
        coefficients: npt.ArrayLike,
        transform: BoundaryTransform,
        config: MetalogConfig | None = None,
    ) -> None:
        self._a = np.asarray(coefficients, dtype=np.float64)
        self._transform = transform
        self._cfg = DEFAULT_CONFIG if config is None else config

        self._p_table = _probability_table(
            self._cfg.inversion_grid_size, self._cfg.inversion_logit_span
        )
        self._x_table = self._quantile(self._p_table)
        x_table = self._x_table
        with np.errstate(invalid="ignore"):
            steps = np.diff(x_table)
        # overflowed tails of the log transforms repeat the same infinity
        saturated = np.isnan(steps) & (x_table[1:] == x_table[:-1])
        self._monotone = bool(np.all((steps >= 0.0) | saturated))
        # just inside the range where the evaluator would return the support endpoint
        tol = self._cfg.edge_tolerance
        self._p_min = 2.0 * tol
        self._p_max = 1.0 - 2.0 * tol

    def _quantile(self, p: FloatArray) -> FloatArray:
        return self._transform.from_unbounded(unbounded_quantile(self._a, p))

    def _quantile_scalar(self, p: float) -> float:
        return float(self._quantile(np.array([p]))[0])

    def __call__(self, x: npt.ArrayLike) -> FloatArray:
        """
        Evaluate the CDF at ``x``.

        Raises
        ------
        OutOfSupportError
            If a value lies outside the closed support.
        InfeasibleModelError
            If no root can be bracketed or the root finder does not converge.
        """
        x_arr = np.asarray(x, dtype=np.float64)
        flat = x_arr.reshape(-1)
        out = np.array([self.cdf_scalar(float(v)) for v in flat], dtype=np.float64)
        return out.reshape(x_arr.shape)

    def cdf_scalar(self, x: float) -> float:
        """CDF at a single value; NaN stays NaN."""
        if isnan(x):
            return float("nan")

        lower, upper = self._transform.lower, self._transform.upper
        if x == lower:
            return 0.0
        if x == upper:
            return 1.0
        if not lower < x < upper:
            raise OutOfSupportError(x, lower, upper)
        if not self._monotone:
            raise InfeasibleModelError(
                f"cannot invert value {x!r}: the quantile function is not monotone "
                "on the bracketing table",
                value=x,
            )

        idx = int(np.searchsorted(self._x_table, x, side="left"))
        if idx == 0:
            # below the table: the probability is at most p_table[0]
            if self._quantile_scalar(self._p_min) >= x:
                return 0.0
            return self._solve(x, self._p_min, float(self._p_table[0]))
        if idx >= self._x_table.size:
            if self._quantile_scalar(self._p_max) <= x:
                return 1.0
            return self._solve(x, float(self._p_table[-1]), self._p_max)
        return self._solve(x, float(self._p_table[idx - 1]), float(self._p_table[idx]))

    def _solve(self, x: float, p_lo: float, p_hi: float) -> float:
        f_lo = self._quantile_scalar(p_lo) - x
        f_hi = self._quantile_scalar(p_hi) - x
        # an overflowed endpoint is moved inwards until the quantile is finite
        for _ in range(self._cfg.max_iterations):
            if np.isposinf(f_hi) and f_lo < 0.0:
                p_mid = 0.5 * (p_lo + p_hi)
                f_mid = self._quantile_scalar(p_mid) - x
                if f_mid > 0.0:
                    p_hi, f_hi = p_mid, f_mid
                else:
                    p_lo, f_lo = p_mid, f_mid
            elif np.isneginf(f_lo) and f_hi > 0.0:
                p_mid = 0.5 * (p_lo + p_hi)
                f_mid = self._quantile_scalar(p_mid) - x
                if f_mid < 0.0:
                    p_lo, f_lo = p_mid, f_mid
                else:
                    p_hi, f_hi = p_mid, f_mid
            else:
                break
        if f_lo == 0.0:
            return p_lo
        if f_hi == 0.0:
            return p_hi
        if not (np.isfinite(f_lo) and np.isfinite(f_hi)) or f_lo * f_hi > 0.0:
            raise InfeasibleModelError(
                f"cannot bracket the probability of value {x!r} in [{p_lo}, {p_hi}]; "
                "the quantile function is not monotone or the value is beyond "
                "the numerically reachable range",
                value=x,
            )

        try:
            root, result = _sp_optimize.brentq(
                lambda q: self._quantile_scalar(q) - x,
                p_lo,
                p_hi,
                xtol=self._cfg.root_xtol,
                maxiter=self._cfg.max_iterations,
                full_output=True,
                disp=False,
            )
        except (ValueError, RuntimeError) as exc:
            raise InfeasibleModelError(
                f"root finding failed for value {x!r}: {exc}", value=x
            ) from exc
        if not result.converged:
            raise InfeasibleModelError(
                f"root finding for value {x!r} did not converge in "
                f"{self._cfg.max_iterations} iterations ({result.flag})",
                value=x,
            )
        return float(root)


def cdf(
    coefficients: npt.ArrayLike,
    transform: BoundaryTransform,
    x: npt.ArrayLike,
    config: MetalogConfig | None = None,
) -> FloatArray:
    """Cumulative distribution function of a metalog at ``x``."""
    return QuantileInverter(coefficients, transform, config)(x)
