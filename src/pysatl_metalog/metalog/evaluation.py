"""
Quantile and density evaluation.

Both functions work on vectors and keep rows aligned with the input:
missing probabilities stay missing and probabilities outside ``(0, 1)`` give
NaN for their row. Within ``edge_tolerance`` of 0 or 1 the quantile is the
support endpoint on that side and the density is 0.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import warnings
from typing import TYPE_CHECKING

import numpy as np

from pysatl_metalog.errors import OutOfDomainProbabilityWarning
from pysatl_metalog.metalog.basis import (
    design_matrix,
    design_matrix_derivative,
    valid_probabilities,
)
from pysatl_metalog.metalog.config import DEFAULT_CONFIG

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_metalog.metalog.config import MetalogConfig
    from pysatl_metalog.metalog.transforms import BoundaryTransform
    from pysatl_metalog.types import BoolArray, FloatArray


def _split_probabilities(
    p: FloatArray, cfg: MetalogConfig, stacklevel: int
) -> tuple[BoolArray, BoolArray, BoolArray]:
    """Masks of (interior, near-0, near-1) rows; warns about out-of-domain rows."""
    valid = valid_probabilities(p)
    out_of_domain = ~valid & ~np.isnan(p)
    if np.any(out_of_domain):
        warnings.warn(
            f"{int(out_of_domain.sum())} probability value(s) outside (0, 1) "
            "produced missing results",
            OutOfDomainProbabilityWarning,
            stacklevel=stacklevel,
        )
    tol = cfg.edge_tolerance
    with np.errstate(invalid="ignore"):
        near_lower = valid & (p <= tol)
        near_upper = valid & (p >= 1.0 - tol)
    interior = valid & ~near_lower & ~near_upper
    return interior, near_lower, near_upper


def unbounded_quantile(coefficients: FloatArray, p: FloatArray) -> FloatArray:
    """``M(p)``, the quantile of the metalog before any boundary transform."""
    return design_matrix(p, coefficients.size) @ coefficients


def unbounded_density(coefficients: FloatArray, p: FloatArray) -> FloatArray:
    """Reciprocal of the quantile density ``dM/dp``."""
    with np.errstate(divide="ignore"):
        return 1.0 / (design_matrix_derivative(p, coefficients.size) @ coefficients)


def quantile(
    coefficients: npt.ArrayLike,
    transform: BoundaryTransform,
    p: npt.ArrayLike,
    config: MetalogConfig | None = None,
    *,
    stacklevel: int = 2,
) -> FloatArray:
    """
    Quantile function of a metalog.

    Parameters
    ----------
    coefficients : array_like
        Metalog coefficients.
    transform : BoundaryTransform
        Boundary strategy of the model.
    p : array_like
        Probabilities; the result has the same shape.
    config : MetalogConfig, optional
        Numeric settings.

    Returns
    -------
    FloatArray
        Quantiles, NaN where ``p`` is missing or outside ``(0, 1)``.
    """
    cfg = DEFAULT_CONFIG if config is None else config
    a = np.asarray(coefficients, dtype=np.float64)
    p_arr = np.asarray(p, dtype=np.float64)
    flat = p_arr.reshape(-1)

    interior, near_lower, near_upper = _split_probabilities(flat, cfg, stacklevel + 1)
    out = np.full(flat.shape, np.nan)
    if np.any(interior):
        out[interior] = transform.from_unbounded(unbounded_quantile(a, flat[interior]))
    out[near_lower] = transform.lower
    out[near_upper] = transform.upper
    return out.reshape(p_arr.shape)


def density(
    coefficients: npt.ArrayLike,
    transform: BoundaryTransform,
    p: npt.ArrayLike,
    config: MetalogConfig | None = None,
    *,
    stacklevel: int = 2,
) -> FloatArray:
    """
    Density of a metalog expressed in probability (density quantile function).

    The value at ``p`` is the probability density at ``quantile(p)``.
    """
    cfg = DEFAULT_CONFIG if config is None else config
    a = np.asarray(coefficients, dtype=np.float64)
    p_arr = np.asarray(p, dtype=np.float64)
    flat = p_arr.reshape(-1)

    interior, near_lower, near_upper = _split_probabilities(flat, cfg, stacklevel + 1)
    out = np.full(flat.shape, np.nan)
    if np.any(interior):
        inner = flat[interior]
        base = unbounded_density(a, inner)
        factor = transform.density_factor(unbounded_quantile(a, inner))
        with np.errstate(invalid="ignore", over="ignore"):
            values = base * factor
        # an overflowing factor only occurs deep in a bounded tail where the density vanishes
        out[interior] = np.where(np.isinf(factor) & np.isfinite(base), 0.0, values)
    out[near_lower | near_upper] = 0.0
    return out.reshape(p_arr.shape)
