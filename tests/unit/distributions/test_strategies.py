from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import pytest

from pysatl_metalog.distributions.strategies import (
    DefaultComputationStrategy,
    DefaultSamplingUnivariateStrategy,
)
from tests.unit.distributions.test_basic import DistributionTestBase


class TestDefaultComputationStrategy(DistributionTestBase):
    def test_resolves_provided_characteristic(self) -> None:
        distr = self.make_uniform_ppf_distribution()
        method = DefaultComputationStrategy().query_method(self.PPF, distr)
        assert method(0.75) == 0.75

    def test_missing_characteristic_lists_available(self) -> None:
        distr = self.make_uniform_ppf_distribution()
        with pytest.raises(RuntimeError, match="available: ppf"):
            DefaultComputationStrategy().query_method(self.CDF, distr)


class TestDefaultSamplingUnivariateStrategy(DistributionTestBase):
    def test_requires_ppf(self) -> None:
        distr = self.make_uniform_pdf_distribution()
        with pytest.raises(RuntimeError):
            DefaultSamplingUnivariateStrategy().sample(10, distr)

    def test_sample_is_column(self) -> None:
        distr = self.make_uniform_ppf_distribution()
        sample = DefaultSamplingUnivariateStrategy().sample(5, distr, seed=0)
        assert sample.shape == (5, 1)
