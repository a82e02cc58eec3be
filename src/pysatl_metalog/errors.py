"""
Errors and Warning Categories
=============================

Fatal conditions raise a :class:`MetalogError` subclass. Each subclass also
derives from the builtin exception a caller would expect (``ValueError`` for
bad arguments, ``RuntimeError`` for numerical failure), so existing
``except ValueError`` handlers keep working.

Recoverable conditions are reported through :mod:`warnings` with a
:class:`MetalogWarning` subclass and never interrupt the computation.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import Any


class MetalogError(Exception):
    """Base class for all fatal metalog errors."""


class InvalidOrderError(MetalogError, ValueError):
    """
    The number of metalog terms is not an integer in the allowed range.

    Parameters
    ----------
    order : Any
        Offending order value.
    min_order, max_order : int
        Inclusive allowed range.
    """

    def __init__(self, order: Any, min_order: int, max_order: int) -> None:
        self.order = order
        self.min_order = min_order
        self.max_order = max_order
        super().__init__(
            f"order must be an integer in [{min_order}, {max_order}], got {order!r}"
        )


class InvalidBoundsError(MetalogError, ValueError):
    """
    The support bounds are inconsistent.

    Parameters
    ----------
    lower, upper : float | None
        Offending bounds.
    reason : str
        Short explanation.
    """

    def __init__(self, lower: float | None, upper: float | None, reason: str) -> None:
        self.lower = lower
        self.upper = upper
        super().__init__(f"invalid bounds (lower={lower!r}, upper={upper!r}): {reason}")


class InsufficientDataError(MetalogError, ValueError):
    """
    Too few usable points to fit a metalog.

    Parameters
    ----------
    n_usable : int
        Number of distinct points left after filtering.
    n_total : int
        Number of points supplied.
    required : int
        Minimal number of distinct usable points.
    """

    def __init__(self, n_usable: int, n_total: int, required: int = 3) -> None:
        self.n_usable = n_usable
        self.n_total = n_total
        self.required = required
        super().__init__(
            f"insufficient data: {n_usable} distinct usable point(s) out of {n_total}, "
            f"at least {required} required"
        )


class InfeasibleModelError(MetalogError, RuntimeError):
    """
    The coefficients do not define a valid distribution for the requested operation.

    Parameters
    ----------
    message : str
        Description of the failure.
    value : float | None
        Target value being processed, if any.
    """

    def __init__(self, message: str, value: float | None = None) -> None:
        self.value = value
        super().__init__(message)


class OutOfSupportError(MetalogError, ValueError):
    """
    A value lies outside the support of the distribution.

    Parameters
    ----------
    value : float
        Offending value.
    lower, upper : float
        Support endpoints (possibly infinite).
    """

    def __init__(self, value: float, lower: float, upper: float) -> None:
        self.value = value
        self.lower = lower
        self.upper = upper
        super().__init__(f"value {value!r} is outside the support [{lower}, {upper}]")


class MetalogWarning(UserWarning):
    """Base category for recoverable metalog conditions."""


class SingularSystemWarning(MetalogWarning):
    """The least-squares system is rank deficient; a best-effort fit was returned."""


class ExcludedPointsWarning(MetalogWarning):
    """Some input points were dropped before fitting."""


class OutOfDomainProbabilityWarning(MetalogWarning):
    """Some probabilities were outside (0, 1) and produced missing results."""


__all__ = [
    "MetalogError",
    "InvalidOrderError",
    "InvalidBoundsError",
    "InsufficientDataError",
    "InfeasibleModelError",
    "OutOfSupportError",
    "MetalogWarning",
    "SingularSystemWarning",
    "ExcludedPointsWarning",
    "OutOfDomainProbabilityWarning",
]
