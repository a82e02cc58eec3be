"""
Least-squares estimation of metalog coefficients.

The estimator returns an :class:`EstimationResult` instead of warning by
itself; callers decide how to surface its notes.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from pysatl_metalog.errors import InsufficientDataError
from pysatl_metalog.metalog.basis import design_matrix, valid_probabilities
from pysatl_metalog.metalog.config import DEFAULT_CONFIG

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_metalog.metalog.config import MetalogConfig
    from pysatl_metalog.types import FloatArray


@dataclass(frozen=True, slots=True)
class EstimationResult:
    """
    Outcome of a least-squares fit.

    Parameters
    ----------
    coefficients : FloatArray
        Fitted coefficients ``a1..ak`` (read-only).
    rank : int
        Numerical rank of the normal-equation matrix.
    n_points : int
        Number of points used in the fit.
    notes : tuple[str, ...]
        Diagnostics for recoverable conditions.
    """

    coefficients: FloatArray
    rank: int
    n_points: int
    notes: tuple[str, ...] = field(default=())

    @property
    def order(self) -> int:
        return int(self.coefficients.size)

    @property
    def is_singular(self) -> bool:
        """Whether the system was rank deficient (best-effort solution)."""
        return self.rank < self.order


def usable_points(
    values: npt.ArrayLike, probabilities: npt.ArrayLike
) -> tuple[FloatArray, FloatArray]:
    """
    Drop points with a missing value or a probability outside ``(0, 1)``.

    Raises
    ------
    ValueError
        If the inputs are not 1D vectors of equal length.
    """
    x = np.asarray(values, dtype=np.float64)
    p = np.asarray(probabilities, dtype=np.float64)
    if x.ndim != 1 or p.ndim != 1 or x.shape != p.shape:
        raise ValueError(
            f"values and probabilities must be 1D vectors of equal length, "
            f"got shapes {x.shape} and {p.shape}"
        )
    keep = ~np.isnan(x) & valid_probabilities(p)
    return x[keep], p[keep]


def estimate_coefficients(
    values: npt.ArrayLike,
    probabilities: npt.ArrayLike,
    order: int,
    config: MetalogConfig | None = None,
) -> EstimationResult:
    """
    Fit metalog coefficients to ``(value, probability)`` pairs.

    Solves the normal equations ``(M^T M) a = M^T x`` with a rank-aware
    least-squares solver, so a singular system still yields the minimum-norm
    solution.

    Parameters
    ----------
    values : array_like
        Quantile values, already mapped onto the real line.
    probabilities : array_like
        Cumulative probabilities of ``values``.
    order : int
        Number of terms.
    config : MetalogConfig, optional
        Numeric settings.

    Returns
    -------
    EstimationResult
        Coefficients with rank diagnostics.

    Raises
    ------
    InsufficientDataError
        If fewer than ``config.min_points`` distinct usable points remain.
    """
    cfg = DEFAULT_CONFIG if config is None else config
    x_all = np.asarray(values, dtype=np.float64)
    x, p = usable_points(x_all, probabilities)

    distinct = np.unique(np.column_stack([x, p]), axis=0).shape[0] if x.size else 0
    if distinct < cfg.min_points:
        raise InsufficientDataError(distinct, int(x_all.size), cfg.min_points)

    M = design_matrix(p, order)
    gram = M.T @ M
    moment = M.T @ x
    coefficients, _, rank, _ = np.linalg.lstsq(gram, moment, rcond=None)
    coefficients = np.asarray(coefficients, dtype=np.float64)
    coefficients.setflags(write=False)

    notes: list[str] = []
    rank = int(rank)
    if rank < order:
        notes.append(
            f"singular system: normal equations have rank {rank} < {order}; "
            "returning the minimum-norm least-squares solution"
        )
    return EstimationResult(
        coefficients=coefficients, rank=rank, n_points=int(x.size), notes=tuple(notes)
    )
