from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest

from pysatl_metalog import Metalog

pytest.importorskip("scipy")

LITERAL_COEFFICIENTS = [30.0, 10.5, 9.6, -20.5, -21.7]

FIT_VALUES = [14.0, 18.0, 22.8, 24.6, 26.1, 31.0, 38.0, 41.0]
FIT_PROBABILITIES = [0.1, 0.25, 0.4, 0.5, 0.6, 0.75, 0.9, 0.95]


@pytest.fixture
def literal_metalog() -> Metalog:
    return Metalog.from_coefficients(LITERAL_COEFFICIENTS)


@pytest.fixture
def fit_points() -> tuple[np.ndarray, np.ndarray]:
    return np.array(FIT_VALUES), np.array(FIT_PROBABILITIES)


@pytest.fixture
def uniform_metalog() -> Metalog:
    # M(p) = logit(p) on (0, 10) is the uniform distribution: Q(p) = 10 p
    return Metalog.from_coefficients([0.0, 1.0, 0.0, 0.0], bounds=(0.0, 10.0))


@pytest.fixture
def log_logistic_metalog() -> Metalog:
    # exp(logit(p)) = p / (1 - p), so F(x) = x / (1 + x)
    return Metalog.from_coefficients([0.0, 1.0], bounds=(0.0, None))
