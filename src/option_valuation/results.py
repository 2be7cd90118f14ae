"""Valuation result and deferred Greeks.

Implied volatility and every Greek are zero-argument callables captured when
the result is built. They run on each access (no memoization) and never
raise: a failing computation is logged at DEBUG and reads as `0.0`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

Deferred = Callable[[], float]
DeferredPair = Callable[[], tuple[float, float]]


def _zero() -> float:
    return 0.0


def _zero_pair() -> tuple[float, float]:
    return 0.0, 0.0


def _safe(name: str, func: Callable[[], float]) -> float:
    try:
        return float(func())
    except Exception as exc:
        logger.debug("Deferred %s failed, reporting 0: %s", name, exc)
        return 0.0


class Greeks:
    """Sensitivities computed on demand.

    Units: theta per calendar year, vega per 1.0 volatility, rho per 1.0
    rate. `delta` and `gamma` share one computation (`delta_gamma`).
    """

    def __init__(
        self,
        delta_gamma: DeferredPair = _zero_pair,
        vega: Deferred = _zero,
        theta: Deferred = _zero,
        rho: Deferred = _zero,
        elasticity: Deferred = _zero,
    ) -> None:
        self._delta_gamma = delta_gamma
        self._vega = vega
        self._theta = theta
        self._rho = rho
        self._elasticity = elasticity

    def delta_gamma(self) -> tuple[float, float]:
        try:
            delta, gamma = self._delta_gamma()
        except Exception as exc:
            logger.debug("Deferred delta/gamma failed, reporting 0: %s", exc)
            return 0.0, 0.0
        return float(delta), float(gamma)

    @property
    def delta(self) -> float:
        return self.delta_gamma()[0]

    @property
    def gamma(self) -> float:
        return self.delta_gamma()[1]

    @property
    def vega(self) -> float:
        return _safe("vega", self._vega)

    @property
    def theta(self) -> float:
        return _safe("theta", self._theta)

    @property
    def theta_per_day(self) -> float:
        return self.theta / 365.0

    @property
    def rho(self) -> float:
        return _safe("rho", self._rho)

    @property
    def elasticity(self) -> float:
        return _safe("elasticity", self._elasticity)

    @property
    def lambda_(self) -> float:
        """Alias of `elasticity`."""
        return self.elasticity

    def to_dict(self) -> dict[str, float]:
        """Evaluate every Greek once (delta/gamma jointly)."""
        delta, gamma = self.delta_gamma()
        return {
            "delta": delta,
            "gamma": gamma,
            "vega": self.vega,
            "theta": self.theta,
            "rho": self.rho,
            "elasticity": self.elasticity,
        }


class OptionPriceModelResult:
    """Theoretical price with deferred implied volatility and Greeks."""

    def __init__(
        self,
        price: float,
        implied_volatility: Deferred = _zero,
        greeks: Callable[[], Greeks] = Greeks,
    ) -> None:
        self.price = float(price)
        self._implied_volatility = implied_volatility
        self._greeks = greeks

    @classmethod
    def zero(cls) -> OptionPriceModelResult:
        """Degraded result: price, implied volatility and all Greeks are 0."""
        return cls(0.0)

    def implied_volatility(self) -> float:
        return _safe("implied volatility", self._implied_volatility)

    def greeks(self) -> Greeks:
        try:
            return self._greeks()
        except Exception as exc:
            logger.debug("Deferred greeks failed, reporting zeros: %s", exc)
            return Greeks()

    def __repr__(self) -> str:
        return f"OptionPriceModelResult(price={self.price!r})"
