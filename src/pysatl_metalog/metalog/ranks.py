"""
Empirical probabilities (plotting positions) for raw observations.

Each observation receives a probability from its rank ``i`` among the ``n``
non-missing values. Ties share their average rank.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np
from scipy.stats import rankdata

if TYPE_CHECKING:
    from collections.abc import Callable

    import numpy.typing as npt

    from pysatl_metalog.types import FloatArray


class RankMethod(StrEnum):
    """Plotting-position formulas; lookup by value is case-insensitive."""

    VW = "VW"
    BLOM = "Blom"
    TUKEY = "Tukey"
    HAZEN = "Hazen"

    @classmethod
    def _missing_(cls, value: object) -> RankMethod | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


_POSITIONS: dict[RankMethod, Callable[[FloatArray, int], FloatArray]] = {
    RankMethod.VW: lambda i, n: i / (n + 1.0),
    RankMethod.BLOM: lambda i, n: (i - 0.375) / (n + 0.25),
    RankMethod.TUKEY: lambda i, n: (i - 1.0 / 3.0) / (n + 1.0 / 3.0),
    RankMethod.HAZEN: lambda i, n: (i - 0.5) / n,
}


def empirical_probabilities(
    values: npt.ArrayLike, method: RankMethod | str = RankMethod.VW
) -> FloatArray:
    """
    Assign rank-based probabilities to observations.

    Parameters
    ----------
    values : array_like
        Raw observations. NaN entries are kept and receive NaN.
    method : RankMethod or str, default "VW"
        ``"VW"`` (Van der Waerden) ``i/(n+1)``, ``"Blom"`` ``(i-3/8)/(n+1/4)``,
        ``"Tukey"`` ``(i-1/3)/(n+1/3)`` or ``"Hazen"`` ``(i-1/2)/n``.

    Returns
    -------
    FloatArray
        Probabilities in ``(0, 1)``, aligned with ``values``.

    Raises
    ------
    ValueError
        If the method is unknown.
    """
    try:
        rank_method = RankMethod(method)
    except ValueError:
        known = ", ".join(m.value for m in RankMethod)
        raise ValueError(f"Unknown rank method {method!r}; expected one of: {known}") from None

    x = np.asarray(values, dtype=np.float64).reshape(-1)
    out = np.full(x.shape, np.nan)
    present = ~np.isnan(x)
    n = int(present.sum())
    if n == 0:
        return out

    ranks = rankdata(x[present], method="average")
    out[present] = _POSITIONS[rank_method](ranks, n)
    return out
