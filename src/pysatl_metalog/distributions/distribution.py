"""
Distribution Interface
======================

This module defines the public :class:`Distribution` protocol used throughout
the package. Concrete distributions provide analytical computations, a support
and strategies; the protocol supplies characteristic resolution, sampling and
log-likelihood on top of them.

Notes
-----
- The univariate sampling strategy draws from the distribution's ``ppf``.
- Log-likelihood sums ``log(pdf)`` over a univariate sample and is ``-inf``
  as soon as one observation falls outside the support.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from pysatl_metalog.types import CharacteristicName

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    import numpy.typing as npt

    from pysatl_metalog.distributions.computation import AnalyticalComputation
    from pysatl_metalog.distributions.sampling import Sample
    from pysatl_metalog.distributions.strategies import (
        ComputationStrategy,
        Method,
        SamplingStrategy,
    )
    from pysatl_metalog.distributions.support import Support
    from pysatl_metalog.types import (
        DistributionType,
        GenericCharacteristicName,
    )


@runtime_checkable
class Distribution(Protocol):
    """Public distribution interface used by strategies."""

    @property
    def distribution_type(self) -> DistributionType: ...

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]: ...

    @property
    def sampling_strategy(self) -> SamplingStrategy: ...
    @property
    def computation_strategy(self) -> ComputationStrategy[Any, Any]: ...

    @property
    def support(self) -> Support | None: ...

    def query_method(
        self, characteristic_name: GenericCharacteristicName, **options: Any
    ) -> Method[Any, Any]:
        return self.computation_strategy.query_method(characteristic_name, self, **options)

    def calculate_characteristic(
        self, characteristic_name: GenericCharacteristicName, value: Any, **options: Any
    ) -> Any:
        return self.query_method(characteristic_name)(value, **options)

    def sample(self, n: int, **options: Any) -> Sample:
        return self.sampling_strategy.sample(n, distr=self, **options)

    def log_likelihood(self, sample: Sample | npt.ArrayLike) -> float:
        """
        Log-likelihood of a univariate sample.

        Parameters
        ----------
        sample : Sample or array_like
            Observations; a :class:`Sample` of shape ``(n, 1)`` or a flat vector.

        Returns
        -------
        float
            ``sum(log(pdf(x)))``, or ``-inf`` if any observation is outside the support.
        """
        data = sample.array if hasattr(sample, "array") else sample
        x = np.asarray(data, dtype=np.float64).reshape(-1)
        if x.size == 0:
            return 0.0

        support = self.support
        if support is not None and not bool(np.all(support.contains(x))):
            return float("-inf")

        pdf = self.query_method(CharacteristicName.PDF)
        dens = np.asarray(pdf(x), dtype=np.float64)
        with np.errstate(divide="ignore"):
            return float(np.sum(np.log(dens)))
