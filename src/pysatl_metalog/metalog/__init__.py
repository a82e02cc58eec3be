"""
Metalog subpackage

The metalog engine: basis functions, coefficient estimation, feasibility,
boundary transforms, evaluation, CDF inversion and the :class:`Metalog`
distribution handle.
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .basis import design_matrix, design_matrix_derivative, logit
from .config import DEFAULT_CONFIG, MetalogConfig
from .estimation import EstimationResult, estimate_coefficients
from .feasibility import four_term_boundary, is_feasible
from .inversion import QuantileInverter, cdf
from .model import FitPoint, Metalog
from .ranks import RankMethod, empirical_probabilities
from .transforms import (
    BoundaryTransform,
    IdentityTransform,
    LogitTransform,
    LowerLogTransform,
    UpperLogTransform,
    resolve_transform,
)

__all__ = [
    # model
    "Metalog",
    "FitPoint",
    # settings
    "MetalogConfig",
    "DEFAULT_CONFIG",
    # engine
    "design_matrix",
    "design_matrix_derivative",
    "logit",
    "EstimationResult",
    "estimate_coefficients",
    "is_feasible",
    "four_term_boundary",
    "QuantileInverter",
    "cdf",
    "RankMethod",
    "empirical_probabilities",
    # boundary transforms
    "BoundaryTransform",
    "IdentityTransform",
    "LowerLogTransform",
    "UpperLogTransform",
    "LogitTransform",
    "resolve_transform",
]
