from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest

from pysatl_metalog.errors import InsufficientDataError
from pysatl_metalog.metalog.basis import design_matrix
from pysatl_metalog.metalog.config import MetalogConfig
from pysatl_metalog.metalog.estimation import estimate_coefficients, usable_points

LITERAL = np.array([30.0, 10.5, 9.6, -20.5, -21.7])


class TestUsablePoints:
    def test_drops_missing_values_and_invalid_probabilities(self) -> None:
        x, p = usable_points([1.0, np.nan, 3.0, 4.0, 5.0], [0.1, 0.2, 0.0, 1.5, 0.9])
        assert x.tolist() == [1.0, 5.0]
        assert p.tolist() == [0.1, 0.9]

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(ValueError):
            usable_points([1.0, 2.0], [0.5])


class TestEstimateCoefficients:
    def test_recovers_exact_coefficients(self) -> None:
        p = np.linspace(0.05, 0.95, 12)
        x = design_matrix(p, 5) @ LITERAL
        result = estimate_coefficients(x, p, 5)
        np.testing.assert_allclose(result.coefficients, LITERAL, rtol=1e-6, atol=1e-6)
        assert result.rank == 5
        assert result.order == 5
        assert result.n_points == 12
        assert not result.is_singular
        assert result.notes == ()

    def test_coefficients_are_read_only(self) -> None:
        p = np.linspace(0.1, 0.9, 5)
        result = estimate_coefficients(np.linspace(1.0, 5.0, 5), p, 3)
        with pytest.raises(ValueError):
            result.coefficients[0] = 0.0

    def test_literal_points_median(self) -> None:
        x = [14.0, 18.0, 22.8, 24.6, 26.1, 31.0, 38.0, 41.0]
        p = [0.1, 0.25, 0.4, 0.5, 0.6, 0.75, 0.9, 0.95]
        result = estimate_coefficients(x, p, 5)
        # Q(0.5) is the first coefficient: 24.313 from least squares, not the raw 24.6
        assert result.coefficients[0] == pytest.approx(24.6, abs=0.5)

    def test_singular_system_gives_best_effort_solution(self) -> None:
        result = estimate_coefficients([1.0, 2.0, 3.0], [0.5, 0.5, 0.5], 5)
        assert result.is_singular
        assert result.rank == 1
        np.testing.assert_allclose(result.coefficients, [2.0, 0.0, 0.0, 0.0, 0.0], atol=1e-12)
        assert len(result.notes) == 1
        assert result.notes[0].startswith("singular system")

    def test_too_few_points(self) -> None:
        with pytest.raises(InsufficientDataError, match="insufficient data") as exc_info:
            estimate_coefficients([1.0, 2.0, np.nan], [0.2, 0.8, 0.5], 2)
        assert exc_info.value.n_usable == 2
        assert exc_info.value.n_total == 3

    def test_duplicates_are_counted_once(self) -> None:
        with pytest.raises(InsufficientDataError) as exc_info:
            estimate_coefficients([1.0] * 4, [0.5] * 4, 2)
        assert exc_info.value.n_usable == 1

    def test_minimum_is_configurable(self) -> None:
        with pytest.raises(InsufficientDataError):
            estimate_coefficients(
                [1.0, 2.0, 3.0], [0.25, 0.5, 0.75], 2, MetalogConfig(min_points=4)
            )
