from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf
from typing import Protocol, overload, runtime_checkable

from pysatl_metalog.types import BoolArray, BoundaryType, Interval1D, Number, NumericArray


@runtime_checkable
class Support(Protocol):
    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...


class ContinuousSupport(Interval1D, Support):
    @classmethod
    def from_bounds(cls, lower: float | None, upper: float | None) -> ContinuousSupport:
        """
        Closed support built from optional bounds; ``None`` means unbounded.
        """
        return cls(
            left=-inf if lower is None else float(lower),
            right=inf if upper is None else float(upper),
        )

    @property
    def boundary_type(self) -> BoundaryType:
        return BoundaryType.from_shape(self.shape)


__all__ = [
    "Support",
    "ContinuousSupport",
]
