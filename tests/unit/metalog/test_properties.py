from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest
from scipy import stats
from scipy.special import expit

from pysatl_metalog.metalog.model import Metalog


class TestRoundTrip:
    @pytest.mark.parametrize("p", np.linspace(1.2e-4, 1 - 1.2e-4, 9))
    def test_cdf_inverts_quantile(self, literal_metalog: Metalog, p: float) -> None:
        x = literal_metalog.quantile(p)
        assert literal_metalog.cdf(x) == pytest.approx(p, abs=1e-6)

    def test_bounded_fit(self, fit_points) -> None:
        x, p = fit_points
        model = Metalog.from_quantiles(x, p, order=2, bounds=(0.0, 100.0))
        probs = np.array([0.05, 0.5, 0.95])
        np.testing.assert_allclose(model.cdf(model.quantile(probs)), probs, atol=1e-6)


class TestBoundaryLimits:
    def test_bounded(self, uniform_metalog: Metalog) -> None:
        assert uniform_metalog.quantile([1e-15, 1 - 1e-15]).tolist() == [0.0, 10.0]
        assert 0.0 < uniform_metalog.quantile(1e-9) < 1e-6
        assert 10.0 - 1e-6 < uniform_metalog.quantile(1 - 1e-9) < 10.0
        assert uniform_metalog.density(1e-15) == 0.0

    def test_semi_lower(self, log_logistic_metalog: Metalog) -> None:
        assert log_logistic_metalog.quantile([1e-15, 1 - 1e-15]).tolist() == [0.0, np.inf]
        assert log_logistic_metalog.quantile(1 - 1e-12) > 1e11

    def test_semi_upper(self) -> None:
        model = Metalog.from_coefficients([0.0, 1.0], bounds=(None, 0.0))
        assert model.quantile([1e-15, 1 - 1e-15]).tolist() == [-np.inf, 0.0]
        assert model.cdf(-1.0) == pytest.approx(0.5, abs=1e-10)


class TestSampling:
    def test_sample_median_matches_quantile(self, literal_metalog: Metalog) -> None:
        draws = literal_metalog.rand(100_000, seed=2024)
        assert float(np.median(draws)) == pytest.approx(literal_metalog.quantile(0.5), abs=0.2)


class TestMoments:
    def test_literal_mean(self, literal_metalog: Metalog) -> None:
        # a1 + a3 / 2 + a5 / 12
        assert literal_metalog.mean() == pytest.approx(30 + 9.6 / 2 - 21.7 / 12, abs=1e-5)

    def test_uniform_moments(self, uniform_metalog: Metalog) -> None:
        assert uniform_metalog.mean() == pytest.approx(5.0, abs=1e-8)
        assert uniform_metalog.var() == pytest.approx(100 / 12, rel=1e-6)

    def test_variance_matches_sample(self, literal_metalog: Metalog) -> None:
        draws = literal_metalog.rand(200_000, seed=11)
        assert literal_metalog.var() == pytest.approx(float(np.var(draws)), rel=0.05)


GRID = np.linspace(1e-4, 1 - 1e-4, 2001)
FIT_P = np.linspace(0.01, 0.99, 99)


def _normal_fit() -> Metalog:
    return Metalog.from_quantiles(stats.norm.ppf(FIT_P, 5.0, 2.0), FIT_P, order=5)


def _lognormal_fit() -> Metalog:
    x = stats.lognorm.ppf(FIT_P, 0.6, scale=3.0)
    return Metalog.from_quantiles(x, FIT_P, order=5, bounds=(0.0, None))


def _logit_normal_fit() -> Metalog:
    x = 2.0 + 6.0 * expit(stats.norm.ppf(FIT_P, 0.3, 0.8))
    return Metalog.from_quantiles(x, FIT_P, order=5, bounds=(2.0, 8.0))


def _normal_sample_fit() -> Metalog:
    data = np.random.default_rng(5).normal(0.0, 1.0, 2000)
    return Metalog.from_data(data, order=6)


def _lognormal_sample_fit() -> Metalog:
    data = np.random.default_rng(9).lognormal(0.0, 0.5, 2000)
    return Metalog.from_data(data, order=6, bounds=(0.0, None))


FITTED_MODELS = {
    "unbounded-5": _normal_fit,
    "semi-lower-5": _lognormal_fit,
    "bounded-5": _logit_normal_fit,
    "unbounded-data-6": _normal_sample_fit,
    "semi-lower-data-6": _lognormal_sample_fit,
}


class TestShape:
    @pytest.mark.parametrize("build", FITTED_MODELS.values(), ids=FITTED_MODELS.keys())
    def test_quantile_is_non_decreasing(self, build) -> None:
        model = build()
        assert model.is_feasible
        assert np.all(np.diff(model.quantile(GRID)) >= 0.0)

    @pytest.mark.parametrize("build", FITTED_MODELS.values(), ids=FITTED_MODELS.keys())
    def test_density_is_non_negative(self, build) -> None:
        model = build()
        assert model.is_feasible
        assert np.all(model.density(GRID) >= 0.0)

    def test_literal_model(self, literal_metalog: Metalog) -> None:
        assert np.all(np.diff(literal_metalog.quantile(GRID)) >= 0.0)
        assert np.all(literal_metalog.density(GRID) >= 0.0)

    @pytest.mark.parametrize("build", [_lognormal_sample_fit, _logit_normal_fit])
    def test_round_trip_of_bounded_fits(self, build) -> None:
        model = build()
        p = np.linspace(1e-3, 1 - 1e-3, 41)
        np.testing.assert_allclose(model.cdf(model.quantile(p)), p, atol=1e-9)
