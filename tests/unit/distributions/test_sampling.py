from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest

from pysatl_metalog.distributions.sampling import ArraySample
from tests.unit.distributions.test_basic import DistributionTestBase


class TestArraySample:
    def test_rejects_non_2d(self) -> None:
        with pytest.raises(ValueError):
            ArraySample(np.zeros(3))

    def test_from_values_is_column(self) -> None:
        sample = ArraySample.from_values([1.0, 2.0, 3.0])
        assert sample.shape == (3, 1)
        assert len(sample) == 3
        assert sample.dimension == 1
        assert [row.tolist() for row in sample] == [[1.0], [2.0], [3.0]]


class TestSampling(DistributionTestBase):
    def test_sample_uniform_ppf_only_shape_bounds_and_mean(self) -> None:
        distr = self.make_uniform_ppf_distribution()

        n = 1000
        sample = distr.sample(n)

        assert sample.shape == (n, 1)
        arr = sample.array
        assert np.isfinite(arr).all()
        assert ((arr >= 0.0) & (arr <= 1.0)).all()
        assert float(arr.mean()) == pytest.approx(0.5, abs=0.1)

    def test_seed_makes_sampling_reproducible(self) -> None:
        distr = self.make_uniform_ppf_distribution()
        first = distr.sample(50, seed=7).array
        second = distr.sample(50, seed=7).array
        np.testing.assert_array_equal(first, second)

    def test_zero_size_sample(self) -> None:
        distr = self.make_uniform_ppf_distribution()
        assert distr.sample(0).shape == (0, 1)

    def test_negative_size_raises(self) -> None:
        distr = self.make_uniform_ppf_distribution()
        with pytest.raises(ValueError):
            distr.sample(-1)
