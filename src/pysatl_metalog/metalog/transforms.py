"""
Boundary Transforms
===================

A metalog is always fitted on the real line. Bounded supports are handled by
transforming data onto the real line before fitting and mapping the unbounded
quantile ``M(p)`` back afterwards:

================  =======================  ============================  ==========================
boundary          fit on ``z``             quantile                      density factor
================  =======================  ============================  ==========================
unbounded         ``x``                    ``M``                         ``1``
semi-lower        ``ln(x - bL)``           ``bL + exp(M)``               ``exp(-M)``
semi-upper        ``-ln(bU - x)``          ``bU - exp(-M)``              ``exp(M)``
bounded           ``ln((x-bL)/(bU-x))``    ``(bL + bU e^M)/(1 + e^M)``   ``(1+e^M)^2/((bU-bL) e^M)``
================  =======================  ============================  ==========================

The transform is resolved once per model with :func:`resolve_transform`.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from math import inf
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np
from scipy.special import expit

from pysatl_metalog.distributions.support import ContinuousSupport
from pysatl_metalog.types import BoundaryType

if TYPE_CHECKING:
    from pysatl_metalog.types import BoolArray, FloatArray


@runtime_checkable
class BoundaryTransform(Protocol):
    """
    Strategy mapping between the support of a metalog and the real line.

    Attributes
    ----------
    boundary_type : BoundaryType
        Support shape served by the transform.
    lower, upper : float
        Support endpoints reached as ``p -> 0`` and ``p -> 1`` (possibly infinite).
    """

    @property
    def boundary_type(self) -> BoundaryType: ...
    @property
    def lower(self) -> float: ...
    @property
    def upper(self) -> float: ...

    def in_domain(self, x: FloatArray) -> BoolArray:
        """Mask of values that can be transformed (strictly inside the support)."""
        ...

    def to_unbounded(self, x: FloatArray) -> FloatArray:
        """Map values from the support onto the real line."""
        ...

    def from_unbounded(self, m: FloatArray) -> FloatArray:
        """Map unbounded quantiles ``M(p)`` back into the support."""
        ...

    def density_factor(self, m: FloatArray) -> FloatArray:
        """Factor turning the unbounded density at ``M(p)`` into the bounded one."""
        ...


@dataclass(frozen=True, slots=True)
class IdentityTransform:
    boundary_type = BoundaryType.UNBOUNDED
    lower = -inf
    upper = inf

    def in_domain(self, x: FloatArray) -> BoolArray:
        return np.isfinite(x)

    def to_unbounded(self, x: FloatArray) -> FloatArray:
        return np.asarray(x, dtype=np.float64)

    def from_unbounded(self, m: FloatArray) -> FloatArray:
        return np.asarray(m, dtype=np.float64)

    def density_factor(self, m: FloatArray) -> FloatArray:
        return np.ones_like(m, dtype=np.float64)


@dataclass(frozen=True, slots=True)
class LowerLogTransform:
    """Support ``(lower, inf)``; fits on ``ln(x - lower)``."""

    lower: float
    boundary_type = BoundaryType.SEMI_LOWER
    upper = inf

    def in_domain(self, x: FloatArray) -> BoolArray:
        return np.isfinite(x) & (x > self.lower)

    def to_unbounded(self, x: FloatArray) -> FloatArray:
        return np.log(x - self.lower)

    def from_unbounded(self, m: FloatArray) -> FloatArray:
        with np.errstate(over="ignore"):
            return self.lower + np.exp(m)

    def density_factor(self, m: FloatArray) -> FloatArray:
        with np.errstate(over="ignore"):
            return np.exp(-m)


@dataclass(frozen=True, slots=True)
class UpperLogTransform:
    """Support ``(-inf, upper)``; fits on ``-ln(upper - x)``."""

    upper: float
    boundary_type = BoundaryType.SEMI_UPPER
    lower = -inf

    def in_domain(self, x: FloatArray) -> BoolArray:
        return np.isfinite(x) & (x < self.upper)

    def to_unbounded(self, x: FloatArray) -> FloatArray:
        return -np.log(self.upper - x)

    def from_unbounded(self, m: FloatArray) -> FloatArray:
        with np.errstate(over="ignore"):
            return self.upper - np.exp(-m)

    def density_factor(self, m: FloatArray) -> FloatArray:
        with np.errstate(over="ignore"):
            return np.exp(m)


@dataclass(frozen=True, slots=True)
class LogitTransform:
    """Support ``(lower, upper)``; fits on ``ln((x - lower) / (upper - x))``."""

    lower: float
    upper: float
    boundary_type = BoundaryType.BOUNDED

    def in_domain(self, x: FloatArray) -> BoolArray:
        return np.isfinite(x) & (x > self.lower) & (x < self.upper)

    def to_unbounded(self, x: FloatArray) -> FloatArray:
        return np.log(x - self.lower) - np.log(self.upper - x)

    def from_unbounded(self, m: FloatArray) -> FloatArray:
        # (bL + bU e^M) / (1 + e^M) without overflow
        return self.lower + (self.upper - self.lower) * expit(m)

    def density_factor(self, m: FloatArray) -> FloatArray:
        # (1 + e^M)^2 / e^M == 2 (1 + cosh M)
        with np.errstate(over="ignore"):
            return 2.0 * (1.0 + np.cosh(m)) / (self.upper - self.lower)


def resolve_transform(lower: float | None, upper: float | None) -> BoundaryTransform:
    """
    Pick the boundary transform for the given bounds.

    Parameters
    ----------
    lower, upper : float or None
        Support bounds; ``None`` or an infinite value means unbounded on that side.

    Raises
    ------
    ValueError
        If the bounds describe an empty or degenerate support.
    """
    support = ContinuousSupport.from_bounds(lower, upper)
    boundary_type = support.boundary_type
    if boundary_type is BoundaryType.UNBOUNDED:
        return IdentityTransform()
    if boundary_type is BoundaryType.SEMI_LOWER:
        return LowerLogTransform(lower=support.left)
    if boundary_type is BoundaryType.SEMI_UPPER:
        return UpperLogTransform(upper=support.right)
    return LogitTransform(lower=support.left, upper=support.right)
