"""
Core Type Definitions
=====================

Fundamental types and data structures used throughout PySATL Metalog.
"""

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, StrEnum, auto
from math import inf, isnan
from typing import Any, cast, overload

import numpy as np
from numpy.typing import NDArray


class Kind(StrEnum):
    """
    Enumeration of distribution kinds.

    Attributes
    ----------
    DISCRETE : str
        Discrete probability distribution.
    CONTINUOUS : str
        Continuous probability distribution.
    """

    DISCRETE = "discrete"
    CONTINUOUS = "continuous"


class DistributionType:
    """
    Base class for distribution type descriptors.
    """

    __slots__ = ()

    @property
    def features(self) -> Mapping[str, Any]:
        """
        Public dataclass fields of the descriptor.

        Returns
        -------
        Mapping[str, Any]
            Dictionary of feature names to values.
        """
        data: dict[str, Any] = {}

        fields = getattr(self, "__dataclass_fields__", None)
        if fields is not None:
            for name in fields:
                data[name] = getattr(self, name)

        return data


@dataclass(frozen=True, slots=True)
class EuclideanDistributionType(DistributionType):
    """
    Distribution type for Euclidean space distributions.

    Parameters
    ----------
    kind : Kind
        Distribution kind (discrete or continuous).
    dimension : int
        Spatial dimension (e.g., 1 for univariate).
    """

    kind: Kind
    dimension: int


UnivariateContinuous = EuclideanDistributionType(kind=Kind.CONTINUOUS, dimension=1)
"""Type for univariate continuous distributions."""

NumPyNumber = np.floating[Any] | np.integer[Any]
"""Type alias for NumPy numeric types."""

Number = NumPyNumber | int | float
"""Type alias for all numeric types."""

NumericArray = NDArray[NumPyNumber]
"""Type alias for numeric arrays."""

FloatArray = NDArray[np.float64]
"""Type alias for float64 arrays."""

BoolArray = NDArray[np.bool_]
"""Type alias for boolean arrays."""


class ContinuousSupportShape1D(Enum):
    """
    Enumeration of 1D continuous support shapes.

    Attributes
    ----------
    REAL_LINE
        Entire real line (-∞, ∞).
    RAY_LEFT
        Ray extending to the left, (-∞, b].
    RAY_RIGHT
        Ray extending to the right, [a, ∞).
    BOUNDED_INTERVAL
        Bounded interval [a, b], (a, b], [a, b), or (a, b).
    EMPTY
        Empty support.
    SINGLE_POINT
        Single point {a}.
    """

    REAL_LINE = auto()
    RAY_LEFT = auto()
    RAY_RIGHT = auto()
    BOUNDED_INTERVAL = auto()
    EMPTY = auto()
    SINGLE_POINT = auto()


class BoundaryType(StrEnum):
    """
    Support shape of a metalog distribution.

    Attributes
    ----------
    UNBOUNDED : str
        Support is the whole real line.
    SEMI_LOWER : str
        Support is bounded below, ``(lower, ∞)``.
    SEMI_UPPER : str
        Support is bounded above, ``(-∞, upper)``.
    BOUNDED : str
        Support is bounded on both sides, ``(lower, upper)``.
    """

    UNBOUNDED = "unbounded"
    SEMI_LOWER = "semi-lower"
    SEMI_UPPER = "semi-upper"
    BOUNDED = "bounded"

    @classmethod
    def from_shape(cls, shape: ContinuousSupportShape1D) -> "BoundaryType":
        """
        Map a continuous support shape onto a boundary type.

        Raises
        ------
        ValueError
            If the shape is empty or degenerate.
        """
        try:
            return _BOUNDARY_BY_SHAPE[shape]
        except KeyError:
            raise ValueError(f"Support shape {shape.name} has no metalog boundary type.") from None


_BOUNDARY_BY_SHAPE = {
    ContinuousSupportShape1D.REAL_LINE: BoundaryType.UNBOUNDED,
    ContinuousSupportShape1D.RAY_RIGHT: BoundaryType.SEMI_LOWER,
    ContinuousSupportShape1D.RAY_LEFT: BoundaryType.SEMI_UPPER,
    ContinuousSupportShape1D.BOUNDED_INTERVAL: BoundaryType.BOUNDED,
}


@dataclass(frozen=True, slots=True)
class Interval1D:
    """
    1D interval with configurable closure.

    Parameters
    ----------
    left : float, default=-inf
        Left endpoint of the interval.
    right : float, default=inf
        Right endpoint of the interval.
    left_closed : bool, default=True
        Whether left endpoint is included (ignored if left = -inf).
    right_closed : bool, default=True
        Whether right endpoint is included (ignored if right = inf).
    """

    left: float = -inf
    right: float = inf
    left_closed: bool = True
    right_closed: bool = True

    def __post_init__(self) -> None:
        """Adjust closure for infinite endpoints."""
        if self.left == -inf and self.left_closed:
            object.__setattr__(self, "left_closed", False)
        if self.right == inf and self.right_closed:
            object.__setattr__(self, "right_closed", False)

    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...

    def contains(self, x: Number | NumericArray) -> bool | BoolArray:
        """
        Check if point(s) are contained in the interval.

        Parameters
        ----------
        x : Number or NumericArray
            Point(s) to check.

        Returns
        -------
        bool or BoolArray
            True for points within the interval, False otherwise.
        """
        arr = np.asarray(x)

        left_ok = (arr > self.left) | (self.left_closed & (arr >= self.left))
        right_ok = (arr < self.right) | (self.right_closed & (arr <= self.right))
        result = left_ok & right_ok

        if np.ndim(arr) == 0:
            return bool(result)

        return cast(BoolArray, result)

    def __contains__(self, x: object) -> bool:
        """Check if a single point is in the interval."""
        return bool(self.contains(cast(Number, x)))

    @property
    def is_empty(self) -> bool:
        """Check if the interval is empty."""
        if isnan(self.left) or isnan(self.right) or self.left > self.right:
            return True

        return bool(self.left == self.right and not (self.left_closed and self.right_closed))

    @property
    def shape(self) -> ContinuousSupportShape1D:
        """
        Get the topological shape of the interval.

        Returns
        -------
        ContinuousSupportShape1D
            Classification of the interval's shape.
        """
        if self.is_empty:
            return ContinuousSupportShape1D.EMPTY

        if self.left == self.right and self.left_closed and self.right_closed:
            return ContinuousSupportShape1D.SINGLE_POINT

        if self.left == -inf and self.right == inf:
            return ContinuousSupportShape1D.REAL_LINE
        if self.left == -inf and self.right < inf:
            return ContinuousSupportShape1D.RAY_LEFT
        if self.left > -inf and self.right == inf:
            return ContinuousSupportShape1D.RAY_RIGHT
        return ContinuousSupportShape1D.BOUNDED_INTERVAL


type GenericCharacteristicName = str
"""Type alias for characteristic names (e.g., 'pdf', 'cdf')."""


class CharacteristicName(StrEnum):
    """
    Enumeration of characteristics a metalog distribution provides.

    Attributes
    ----------
    PDF : str
        Probability density at a value.
    CDF : str
        Cumulative distribution function.
    PPF : str
        Percent point (quantile) function.
    DQF : str
        Density quantile function, the density expressed in probability.
    """

    PDF = "pdf"
    CDF = "cdf"
    PPF = "ppf"
    DQF = "dqf"


__all__ = [
    "Kind",
    "EuclideanDistributionType",
    "UnivariateContinuous",
    "GenericCharacteristicName",
    "DistributionType",
    "Interval1D",
    "ContinuousSupportShape1D",
    "BoundaryType",
    "BoolArray",
    "FloatArray",
    "NumPyNumber",
    "Number",
    "NumericArray",
    "CharacteristicName",
]
