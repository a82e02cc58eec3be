"""
PySATL Metalog
==============

Metalog distributions: fitting from data or quantile assessments, bounded
and unbounded supports, feasibility checks, quantile, density and CDF
evaluation and random sampling, on top of the PySATL distribution protocol.
"""

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from importlib.metadata import version

from .distributions import *
from .distributions import __all__ as _distr_all
from .errors import *
from .errors import __all__ as _errors_all
from .metalog import *
from .metalog import __all__ as _metalog_all
from .types import *
from .types import __all__ as _types_all

__version__ = version("pysatl-metalog")
__all__ = [
    "__version__",
    *_distr_all,
    *_errors_all,
    *_metalog_all,
    *_types_all,
]

del _distr_all
del _errors_all
del _metalog_all
del _types_all
