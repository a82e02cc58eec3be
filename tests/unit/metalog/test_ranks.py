from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest

from pysatl_metalog.metalog.ranks import RankMethod, empirical_probabilities


class TestEmpiricalProbabilities:
    def test_vw_is_default(self) -> None:
        np.testing.assert_allclose(empirical_probabilities([3.0, 1.0, 2.0]), [0.75, 0.25, 0.5])

    @pytest.mark.parametrize(
        "method, expected",
        [
            ("VW", [1 / 3, 2 / 3]),
            ("Blom", [0.625 / 2.25, 1.625 / 2.25]),
            ("Tukey", [(2 / 3) / (7 / 3), (5 / 3) / (7 / 3)]),
            ("Hazen", [0.25, 0.75]),
        ],
    )
    def test_plotting_positions(self, method: str, expected: list[float]) -> None:
        np.testing.assert_allclose(empirical_probabilities([5.0, 7.0], method), expected)

    def test_ties_share_average_rank(self) -> None:
        np.testing.assert_allclose(
            empirical_probabilities([1.0, 2.0, 2.0, 3.0]), [0.2, 0.5, 0.5, 0.8]
        )

    def test_missing_values_stay_missing(self) -> None:
        p = empirical_probabilities([1.0, np.nan, 2.0])
        assert np.isnan(p[1])
        np.testing.assert_allclose(p[[0, 2]], [1 / 3, 2 / 3])

    def test_all_missing(self) -> None:
        assert np.isnan(empirical_probabilities([np.nan, np.nan])).all()

    @pytest.mark.parametrize("name", ["blom", "HAZEN", "vw", RankMethod.TUKEY])
    def test_method_lookup_is_case_insensitive(self, name: str) -> None:
        p = empirical_probabilities([1.0, 2.0, 3.0], name)
        assert ((p > 0) & (p < 1)).all()

    def test_unknown_method_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown rank method"):
            empirical_probabilities([1.0, 2.0], "Weibull")
