"""
Metalog Distribution
====================

:class:`Metalog` is the immutable handle of a fitted (or explicitly given)
metalog distribution. It is created with one of three constructors:

- :meth:`Metalog.from_data`: raw observations, probabilities from ranks;
- :meth:`Metalog.from_quantiles`: elicited ``(value, probability)`` pairs;
- :meth:`Metalog.from_coefficients`: an explicit coefficient vector.

All evaluation methods read the model and never modify it. Recoverable
conditions met while building the model (excluded points, singular system)
are issued as :class:`~pysatl_metalog.errors.MetalogWarning` and kept in
:attr:`Metalog.notes`.

Examples
--------
>>> m = Metalog.from_coefficients([30, 10.5, 9.6, -20.5, -21.7])
>>> float(m.quantile(0.5))
30.0
"""

from __future__ import annotations

__author__ = "PySATL project"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import warnings
from dataclasses import dataclass, field
from math import inf, isnan
from numbers import Integral
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import integrate as _sp_integrate

from pysatl_metalog.distributions.computation import AnalyticalComputation
from pysatl_metalog.distributions.distribution import Distribution
from pysatl_metalog.distributions.strategies import (
    DefaultComputationStrategy,
    DefaultSamplingUnivariateStrategy,
)
from pysatl_metalog.distributions.support import ContinuousSupport
from pysatl_metalog.errors import (
    ExcludedPointsWarning,
    InfeasibleModelError,
    InvalidBoundsError,
    InvalidOrderError,
    SingularSystemWarning,
)
from pysatl_metalog.metalog import evaluation
from pysatl_metalog.metalog.config import DEFAULT_CONFIG, MetalogConfig
from pysatl_metalog.metalog.estimation import estimate_coefficients
from pysatl_metalog.metalog.feasibility import is_feasible as _check_feasible
from pysatl_metalog.metalog.inversion import QuantileInverter
from pysatl_metalog.metalog.ranks import RankMethod, empirical_probabilities
from pysatl_metalog.metalog.transforms import resolve_transform
from pysatl_metalog.types import CharacteristicName, UnivariateContinuous

if TYPE_CHECKING:
    from collections.abc import Mapping

    import numpy.typing as npt

    from pysatl_metalog.distributions.strategies import ComputationStrategy, SamplingStrategy
    from pysatl_metalog.metalog.transforms import BoundaryTransform
    from pysatl_metalog.types import (
        BoundaryType,
        EuclideanDistributionType,
        FloatArray,
        GenericCharacteristicName,
    )

    type Bounds = tuple[float | None, float | None]

_COMPUTATION_STRATEGY: DefaultComputationStrategy[Any, Any] = DefaultComputationStrategy()
_SAMPLING_STRATEGY = DefaultSamplingUnivariateStrategy()


@dataclass(frozen=True, slots=True)
class FitPoint:
    """
    A point of the quantile function used in a fit.

    Parameters
    ----------
    value : float
        Quantile value on the original scale.
    probability : float
        Cumulative probability, strictly inside ``(0, 1)``.
    """

    value: float
    probability: float

    def __post_init__(self) -> None:
        if not 0.0 < self.probability < 1.0:
            raise ValueError(f"probability must lie in (0, 1), got {self.probability!r}")


def _check_order(order: Any, cfg: MetalogConfig) -> int:
    if isinstance(order, bool) or not isinstance(order, Integral):
        raise InvalidOrderError(order, cfg.min_order, cfg.max_order)
    if not cfg.min_order <= int(order) <= cfg.max_order:
        raise InvalidOrderError(order, cfg.min_order, cfg.max_order)
    return int(order)


def _check_bounds(lower: float | None, upper: float | None) -> tuple[float | None, float | None]:
    """Normalize bounds: ``None`` and infinities on their own side mean absent."""
    lo = None if lower is None else float(lower)
    hi = None if upper is None else float(upper)
    if (lo is not None and isnan(lo)) or (hi is not None and isnan(hi)):
        raise InvalidBoundsError(lower, upper, "bounds must not be NaN")
    if lo == inf:
        raise InvalidBoundsError(lower, upper, "lower bound cannot be +inf")
    if hi == -inf:
        raise InvalidBoundsError(lower, upper, "upper bound cannot be -inf")
    lo = None if lo == -inf else lo
    hi = None if hi == inf else hi
    if lo is not None and hi is not None and lo >= hi:
        raise InvalidBoundsError(lower, upper, "lower bound must be smaller than upper bound")
    return lo, hi


def _unpack_bounds(bounds: Bounds | None) -> tuple[float | None, float | None]:
    if bounds is None:
        return None, None
    lower, upper = bounds
    return lower, upper


@dataclass(frozen=True, slots=True, eq=False)
class Metalog(Distribution):
    """
    Metalog distribution.

    Parameters
    ----------
    coefficients : array_like
        Coefficients ``a1..ak``; the order ``k`` is their number.
    lower, upper : float or None
        Optional support bounds. The boundary type follows from which are given.
    source_data : tuple[FitPoint, ...] or None
        Points the coefficients were fitted to, if any.
    notes : tuple[str, ...]
        Diagnostics collected while building the model.
    config : MetalogConfig
        Numeric settings.

    Attributes
    ----------
    order : int
        Number of terms.
    boundary_type : BoundaryType
        Support shape derived from the bounds.
    is_feasible : bool
        Whether the coefficients define a valid distribution. For more than
        four terms this comes from a sampled density check, which is
        necessary but not sufficient.

    Raises
    ------
    InvalidOrderError
        If the number of coefficients is outside the allowed range.
    InvalidBoundsError
        If the bounds are inconsistent.
    ValueError
        If a coefficient is not finite.
    """

    coefficients: FloatArray
    lower: float | None = None
    upper: float | None = None
    source_data: tuple[FitPoint, ...] | None = field(default=None, repr=False)
    notes: tuple[str, ...] = ()
    config: MetalogConfig = field(default=DEFAULT_CONFIG, repr=False)

    order: int = field(init=False)
    boundary_type: BoundaryType = field(init=False)
    is_feasible: bool = field(init=False)
    _transform: BoundaryTransform = field(init=False, repr=False)
    _support: ContinuousSupport = field(init=False, repr=False)
    _analytical: dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]] = field(
        init=False, repr=False
    )

    def __post_init__(self) -> None:
        a = np.array(self.coefficients, dtype=np.float64).reshape(-1)
        order = _check_order(a.size, self.config)
        if not np.all(np.isfinite(a)):
            raise ValueError(f"coefficients must be finite, got {a.tolist()}")
        a.setflags(write=False)
        lower, upper = _check_bounds(self.lower, self.upper)
        transform = resolve_transform(lower, upper)

        object.__setattr__(self, "coefficients", a)
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)
        object.__setattr__(self, "order", order)
        object.__setattr__(self, "boundary_type", transform.boundary_type)
        object.__setattr__(self, "is_feasible", _check_feasible(a, self.config))
        object.__setattr__(self, "_transform", transform)
        object.__setattr__(self, "_support", ContinuousSupport.from_bounds(lower, upper))
        object.__setattr__(
            self,
            "_analytical",
            {
                CharacteristicName.PPF: AnalyticalComputation(
                    target=CharacteristicName.PPF, func=self.quantile
                ),
                CharacteristicName.DQF: AnalyticalComputation(
                    target=CharacteristicName.DQF, func=self.density
                ),
                CharacteristicName.CDF: AnalyticalComputation(
                    target=CharacteristicName.CDF, func=self.cdf
                ),
                CharacteristicName.PDF: AnalyticalComputation(
                    target=CharacteristicName.PDF, func=self.pdf
                ),
            },
        )

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def from_coefficients(
        cls,
        coefficients: npt.ArrayLike,
        bounds: Bounds | None = (None, None),
        *,
        config: MetalogConfig | None = None,
    ) -> Metalog:
        """
        Build a metalog from an explicit coefficient vector.

        The order is the number of coefficients; feasibility is computed
        immediately.
        """
        lower, upper = _unpack_bounds(bounds)
        return cls(
            coefficients=np.asarray(coefficients, dtype=np.float64),
            lower=lower,
            upper=upper,
            config=DEFAULT_CONFIG if config is None else config,
        )

    @classmethod
    def from_quantiles(
        cls,
        values: npt.ArrayLike,
        probabilities: npt.ArrayLike,
        order: int | None = None,
        bounds: Bounds | None = (None, None),
        *,
        config: MetalogConfig | None = None,
    ) -> Metalog:
        """
        Fit a metalog to ``(value, probability)`` pairs.

        Parameters
        ----------
        values : array_like
            Quantile values.
        probabilities : array_like
            Their cumulative probabilities.
        order : int, optional
            Number of terms; ``config.default_order`` (5) if omitted.
        bounds : tuple of (float or None), default (None, None)
            ``(lower, upper)`` support bounds.
        config : MetalogConfig, optional
            Numeric settings.

        Raises
        ------
        InvalidOrderError, InvalidBoundsError, InsufficientDataError
        """
        cfg = DEFAULT_CONFIG if config is None else config
        x = np.asarray(values, dtype=np.float64).reshape(-1)
        p = np.asarray(probabilities, dtype=np.float64).reshape(-1)
        if x.shape != p.shape:
            raise ValueError(
                f"values and probabilities must have the same length, got {x.size} and {p.size}"
            )
        return cls._fit(x, p, order, bounds, cfg, notes=[])

    @classmethod
    def from_data(
        cls,
        values: npt.ArrayLike,
        order: int | None = None,
        bounds: Bounds | None = (None, None),
        rank_method: RankMethod | str = RankMethod.VW,
        *,
        config: MetalogConfig | None = None,
    ) -> Metalog:
        """
        Fit a metalog to raw observations.

        Every non-missing observation gets an empirical probability from its
        rank (see :func:`~pysatl_metalog.metalog.ranks.empirical_probabilities`)
        before boundary filtering and estimation.

        Parameters
        ----------
        values : array_like
            Observations.
        order : int, optional
            Number of terms; ``config.default_order`` (5) if omitted.
        bounds : tuple of (float or None), default (None, None)
            ``(lower, upper)`` support bounds.
        rank_method : {"VW", "Blom", "Tukey", "Hazen"}, default "VW"
            Plotting-position formula.
        config : MetalogConfig, optional
            Numeric settings.
        """
        cfg = DEFAULT_CONFIG if config is None else config
        x = np.asarray(values, dtype=np.float64).reshape(-1)
        p = empirical_probabilities(x, rank_method)
        return cls._fit(x, p, order, bounds, cfg, notes=[])

    @classmethod
    def _fit(
        cls,
        x: FloatArray,
        p: FloatArray,
        order: int | None,
        bounds: Bounds | None,
        cfg: MetalogConfig,
        notes: list[str],
    ) -> Metalog:
        k = _check_order(cfg.default_order if order is None else order, cfg)
        lower, upper = _check_bounds(*_unpack_bounds(bounds))
        transform = resolve_transform(lower, upper)

        with np.errstate(invalid="ignore"):
            present = ~np.isnan(x) & (p > 0.0) & (p < 1.0)
        n_missing = int(x.size - present.sum())
        if n_missing:
            _note(
                notes,
                f"excluded {n_missing} out of {x.size} point(s) with a missing value "
                "or a probability outside (0, 1)",
                ExcludedPointsWarning,
            )

        keep = present & transform.in_domain(x)
        n_out = int(present.sum() - keep.sum())
        if n_out:
            _note(
                notes,
                f"excluded {n_out} out of {x.size} out-of-bound point(s) "
                f"for a {transform.boundary_type} support",
                ExcludedPointsWarning,
            )

        z = np.full(x.shape, np.nan)
        with np.errstate(divide="ignore", invalid="ignore"):
            z[keep] = transform.to_unbounded(x[keep])
        result = estimate_coefficients(z, p, k, cfg)
        for message in result.notes:
            _note(notes, message, SingularSystemWarning)

        return cls(
            coefficients=result.coefficients,
            lower=lower,
            upper=upper,
            source_data=tuple(
                FitPoint(float(v), float(q)) for v, q in zip(x[keep], p[keep], strict=True)
            ),
            notes=tuple(notes),
            config=cfg,
        )

    # ------------------------------------------------------------------ #
    # Distribution protocol
    # ------------------------------------------------------------------ #

    @property
    def distribution_type(self) -> EuclideanDistributionType:
        """Univariate continuous."""
        return UnivariateContinuous

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        """``ppf``, ``dqf``, ``cdf`` and ``pdf`` bound to this model."""
        return self._analytical

    @property
    def sampling_strategy(self) -> SamplingStrategy:
        return _SAMPLING_STRATEGY

    @property
    def computation_strategy(self) -> ComputationStrategy[Any, Any]:
        return _COMPUTATION_STRATEGY

    @property
    def support(self) -> ContinuousSupport:
        """Closed support interval; infinite ends are open."""
        return self._support

    @property
    def bounds(self) -> tuple[float | None, float | None]:
        return self.lower, self.upper

    @property
    def transform(self) -> BoundaryTransform:
        """Boundary transform resolved at construction."""
        return self._transform

    # ------------------------------------------------------------------ #
    # Evaluation
    # ------------------------------------------------------------------ #

    def _require_feasible(self) -> None:
        if not _check_feasible(self.coefficients, self.config):
            raise InfeasibleModelError(
                f"infeasible model: coefficients {self.coefficients.tolist()} do not define "
                "a non-decreasing quantile function"
            )

    def quantile(self, p: npt.ArrayLike, strict: bool = False) -> Any:
        """
        Quantile function.

        Parameters
        ----------
        p : float or array_like
            Probabilities. Missing entries stay missing; entries outside
            ``(0, 1)`` give NaN and an
            :class:`~pysatl_metalog.errors.OutOfDomainProbabilityWarning`.
        strict : bool, default False
            Re-check feasibility first and raise if it fails.

        Returns
        -------
        float or FloatArray
            Same shape as ``p``.

        Raises
        ------
        InfeasibleModelError
            In strict mode, when the model is infeasible.
        """
        if strict:
            self._require_feasible()
        out = evaluation.quantile(self.coefficients, self._transform, p, self.config, stacklevel=3)
        return _match_input(out, p)

    def density(self, p: npt.ArrayLike, strict: bool = False) -> Any:
        """
        Probability density at ``quantile(p)``, as a function of ``p``.

        Same conventions as :meth:`quantile`.
        """
        if strict:
            self._require_feasible()
        out = evaluation.density(self.coefficients, self._transform, p, self.config, stacklevel=3)
        return _match_input(out, p)

    def cdf(self, x: npt.ArrayLike) -> Any:
        """
        Cumulative distribution function, by numerical inversion of the quantile.

        Raises
        ------
        OutOfSupportError
            If a value lies outside the support.
        InfeasibleModelError
            If the quantile function cannot be inverted at some value.
        """
        out = QuantileInverter(self.coefficients, self._transform, self.config)(x)
        return _match_input(out, x)

    def pdf(self, x: npt.ArrayLike) -> Any:
        """
        Probability density at values ``x``; zero outside the open support.
        """
        x_arr = np.asarray(x, dtype=np.float64)
        flat = x_arr.reshape(-1)
        out = np.where(np.isnan(flat), np.nan, 0.0)
        inside = (flat > self._transform.lower) & (flat < self._transform.upper)
        if np.any(inside):
            inverter = QuantileInverter(self.coefficients, self._transform, self.config)
            probabilities = inverter(flat[inside])
            out[inside] = evaluation.density(
                self.coefficients, self._transform, probabilities, self.config, stacklevel=3
            )
        return _match_input(out.reshape(x_arr.shape), x)

    def rand(self, n: int, seed: Any = None) -> FloatArray:
        """
        Draw ``n`` values by inverse transform sampling.

        Parameters
        ----------
        n : int
            Number of draws.
        seed : int, Generator or None
            Passed to :func:`numpy.random.default_rng`.
        """
        return self.sample(n, seed=seed).array[:, 0]

    def median(self) -> float:
        return float(self.quantile(0.5))

    def _integrate(self, func: Any) -> float:
        tol = self.config.edge_tolerance
        value, _ = _sp_integrate.quad(func, tol, 1.0 - tol, limit=self.config.quad_limit)
        return float(value)

    def mean(self) -> float:
        """Expectation ``∫ Q(p) dp`` by numerical integration."""
        return self._integrate(lambda q: float(self.quantile(q)))

    def var(self) -> float:
        """Variance ``∫ (Q(p) - mean)^2 dp`` by numerical integration."""
        mu = self.mean()
        return self._integrate(lambda q: (float(self.quantile(q)) - mu) ** 2)

    # ------------------------------------------------------------------ #
    # Diagnostics
    # ------------------------------------------------------------------ #

    def summary(self) -> str:
        """Human-readable description of the model."""

        def _fmt(bound: float | None) -> str:
            return "none" if bound is None else f"{bound:g}"

        if self.order > 4:
            feasibility_kind = "sampled density check, necessary but not sufficient"
        else:
            feasibility_kind = "closed form"
        lines = [
            f"Metalog distribution: {self.order} terms, {self.boundary_type} support",
            f"  bounds        lower={_fmt(self.lower)}, upper={_fmt(self.upper)}",
            f"  feasible      {'yes' if self.is_feasible else 'no'} ({feasibility_kind})",
            f"  median        {self.median():.6g}",
            "  coefficients",
        ]
        lines.extend(f"    a{i} = {value: .10g}" for i, value in enumerate(self.coefficients, 1))
        if self.source_data is None:
            lines.append("  fit points    none (explicit coefficients)")
        else:
            lines.append(f"  fit points    {len(self.source_data)}")
        if self.notes:
            lines.append("  notes")
            lines.extend(f"    - {note}" for note in self.notes)
        return "\n".join(lines)


def _note(notes: list[str], message: str, category: type[Warning]) -> None:
    notes.append(message)
    # _note -> _fit -> from_* -> caller
    warnings.warn(message, category, stacklevel=4)


def _match_input(out: FloatArray, like: Any) -> Any:
    if np.ndim(like) == 0:
        return float(out.reshape(-1)[0])
    return out
