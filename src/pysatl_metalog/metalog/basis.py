"""
Metalog Basis
=============

Design matrix of the metalog quantile function and its derivative.

With ``v = p - 0.5`` and ``L = logit(p)`` the basis columns are::

    1, L, v*L, v, v**2, v**2*L, v**3, v**3*L, ...

i.e. column ``n >= 5`` is ``v**((n-1)/2)`` for odd ``n`` and
``v**(n/2-1) * L`` for even ``n``. Rows for probabilities outside ``(0, 1)``
are NaN; they are kept so that output rows align with input rows.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_metalog.types import BoolArray, FloatArray


def valid_probabilities(p: FloatArray) -> BoolArray:
    """Mask of entries strictly inside ``(0, 1)``; NaN entries are invalid."""
    with np.errstate(invalid="ignore"):
        return (p > 0.0) & (p < 1.0)


def logit(p: npt.ArrayLike) -> FloatArray:
    """
    Log-odds ``ln(p / (1 - p))``.

    The complementary probability is taken through ``log1p`` so that the
    upper tail keeps its precision. Entries outside ``(0, 1)`` give NaN.
    """
    p = np.asarray(p, dtype=np.float64)
    out = np.full(p.shape, np.nan)
    ok = valid_probabilities(p)
    out[ok] = np.log(p[ok]) - np.log1p(-p[ok])
    return out


def design_matrix(p: npt.ArrayLike, order: int) -> FloatArray:
    """
    Evaluate the first ``order`` metalog basis functions.

    Parameters
    ----------
    p : array_like
        Probabilities, any 1D shape; scalars are treated as length-1 vectors.
    order : int
        Number of terms ``k >= 2``.

    Returns
    -------
    FloatArray
        Matrix of shape ``(len(p), order)``.
    """
    if order < 2:
        raise ValueError(f"order must be at least 2, got {order}")
    p = np.atleast_1d(np.asarray(p, dtype=np.float64)).reshape(-1)
    L = logit(p)
    v = np.where(valid_probabilities(p), p - 0.5, np.nan)

    columns = [np.where(np.isnan(L), np.nan, 1.0), L]
    if order > 2:
        columns.append(v * L)
    if order > 3:
        columns.append(v)
    for n in range(5, order + 1):
        if n % 2:
            columns.append(v ** ((n - 1) // 2))
        else:
            columns.append(v ** (n // 2 - 1) * L)
    return np.column_stack(columns)


def design_matrix_derivative(p: npt.ArrayLike, order: int) -> FloatArray:
    """
    Derivatives ``d/dp`` of the basis columns of :func:`design_matrix`.

    Uses ``dL/dp = 1 / (p (1 - p))``. The product with the coefficient vector
    is the quantile density; its reciprocal is the metalog density.
    """
    if order < 2:
        raise ValueError(f"order must be at least 2, got {order}")
    p = np.atleast_1d(np.asarray(p, dtype=np.float64)).reshape(-1)
    L = logit(p)
    ok = valid_probabilities(p)
    v = np.where(ok, p - 0.5, np.nan)
    dL = np.where(ok, 1.0 / np.where(ok, p * (1.0 - p), 1.0), np.nan)

    columns = [np.where(ok, 0.0, np.nan), dL]
    if order > 2:
        columns.append(L + v * dL)
    if order > 3:
        columns.append(np.where(ok, 1.0, np.nan))
    for n in range(5, order + 1):
        if n % 2:
            m = (n - 1) // 2
            columns.append(m * v ** (m - 1))
        else:
            m = n // 2 - 1
            columns.append(m * v ** (m - 1) * L + v**m * dL)
    return np.column_stack(columns)
