from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import warnings

import numpy as np
import pytest

from pysatl_metalog.errors import OutOfDomainProbabilityWarning
from pysatl_metalog.metalog.evaluation import density, quantile
from pysatl_metalog.metalog.transforms import (
    IdentityTransform,
    LogitTransform,
    LowerLogTransform,
)

LITERAL = np.array([30.0, 10.5, 9.6, -20.5, -21.7])


class TestQuantile:
    def test_center_is_first_coefficient(self) -> None:
        assert quantile(LITERAL, IdentityTransform(), [0.5]).tolist() == [30.0]

    def test_shape_is_preserved(self) -> None:
        p = np.array([[0.1, 0.5], [0.7, 0.9]])
        out = quantile(LITERAL, IdentityTransform(), p)
        assert out.shape == (2, 2)
        assert (np.diff(out.reshape(-1)[[0, 1, 2, 3]]) > 0).all()

    def test_out_of_domain_probabilities_warn(self) -> None:
        with pytest.warns(OutOfDomainProbabilityWarning, match="2 probability value"):
            out = quantile(LITERAL, IdentityTransform(), [0.5, 0.0, 1.5, np.nan])
        assert out[0] == 30.0
        assert np.isnan(out[1:]).all()

    def test_missing_probability_is_silent(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            out = quantile(LITERAL, IdentityTransform(), [np.nan])
        assert np.isnan(out).all()

    def test_edges_map_to_support_endpoints(self) -> None:
        p = [1e-15, 1 - 1e-15]
        assert quantile(LITERAL, IdentityTransform(), p).tolist() == [-np.inf, np.inf]
        assert quantile([0.0, 1.0], LowerLogTransform(lower=2.0), p).tolist() == [2.0, np.inf]
        bounded = LogitTransform(lower=0.0, upper=10.0)
        assert quantile([0.0, 1.0], bounded, p).tolist() == [0.0, 10.0]

    def test_bounded_uniform(self) -> None:
        transform = LogitTransform(lower=0.0, upper=10.0)
        p = np.array([0.1, 0.3, 0.85])
        np.testing.assert_allclose(quantile([0.0, 1.0, 0.0, 0.0], transform, p), 10 * p)


class TestDensity:
    def test_center_value(self) -> None:
        # 1 / (a2 * dL + a4) with dL = 4 at the median, so 1/21.5 rather than 1/10.5
        out = density(LITERAL, IdentityTransform(), [0.5])
        assert out[0] == pytest.approx(1 / 21.5)

    def test_edges_are_zero(self) -> None:
        out = density(LITERAL, IdentityTransform(), [1e-15, 1 - 1e-15])
        assert out.tolist() == [0.0, 0.0]

    def test_bounded_uniform_is_flat(self) -> None:
        transform = LogitTransform(lower=0.0, upper=10.0)
        out = density([0.0, 1.0, 0.0, 0.0], transform, [0.01, 0.5, 0.99])
        np.testing.assert_allclose(out, 0.1)

    def test_semi_bounded_log_logistic(self) -> None:
        # Q(p) = p / (1 - p), so the density at Q(p) is (1 - p)^2
        p = np.array([0.2, 0.5, 0.9])
        out = density([0.0, 1.0], LowerLogTransform(lower=0.0), p)
        np.testing.assert_allclose(out, (1 - p) ** 2)

    def test_out_of_domain_probabilities_warn(self) -> None:
        with pytest.warns(OutOfDomainProbabilityWarning):
            out = density(LITERAL, IdentityTransform(), [-0.1])
        assert np.isnan(out).all()
