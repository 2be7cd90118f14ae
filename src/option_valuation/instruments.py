"""Payoff, exercise, and the vanilla option instrument priced by an engine."""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

import numpy as np
from scipy.optimize import brentq

from option_valuation.engines.base import EngineResults, PricingEngine
from option_valuation.market.calendar import EvaluationClock
from option_valuation.market.process import BlackScholesMertonProcess
from option_valuation.market.quotes import SimpleQuote
from option_valuation.types import OptionRight, OptionStyle

GREEK_NAMES = ("delta", "gamma", "vega", "theta", "rho", "elasticity")


@dataclass(frozen=True)
class PlainVanillaPayoff:
    """Call/put payoff on a fixed strike."""

    right: OptionRight
    strike: float

    def __call__(self, spot: np.ndarray | float) -> np.ndarray:
        spot = np.asarray(spot, dtype=float)
        if self.right == OptionRight.CALL:
            return np.maximum(spot - self.strike, 0.0)
        return np.maximum(self.strike - spot, 0.0)


@dataclass(frozen=True)
class Exercise:
    """Exercise window; European exercise only uses `latest_date`."""

    style: OptionStyle
    latest_date: dt.date
    earliest_date: dt.date | None = None

    @property
    def is_american(self) -> bool:
        return self.style == OptionStyle.AMERICAN


def european_exercise(maturity_date: dt.date) -> Exercise:
    return Exercise(style=OptionStyle.EUROPEAN, latest_date=maturity_date)


def american_exercise(earliest_date: dt.date, latest_date: dt.date) -> Exercise:
    if latest_date < earliest_date:
        raise ValueError("american exercise window ends before it starts")
    return Exercise(
        style=OptionStyle.AMERICAN,
        latest_date=latest_date,
        earliest_date=earliest_date,
    )


@dataclass(frozen=True)
class PricingArguments:
    """Everything an engine needs besides its process."""

    payoff: PlainVanillaPayoff
    exercise: Exercise
    evaluation_date: dt.date


class UnavailableReason(StrEnum):
    """Why an engine could not produce a sensitivity."""

    NOT_PROVIDED = "not_provided"
    ENGINE_ERROR = "engine_error"
    NOT_FINITE = "not_finite"


@dataclass(frozen=True)
class GreekUnavailable:
    """Typed failure returned in place of a sensitivity value."""

    greek: str
    reason: UnavailableReason
    detail: str = ""


GreekOutcome = float | GreekUnavailable


class VanillaOption:
    """Single-asset option bound to one evaluation clock.

    Results are recomputed on every call so that bumped quotes or a shifted
    clock are always reflected.
    """

    def __init__(
        self,
        payoff: PlainVanillaPayoff,
        exercise: Exercise,
        clock: EvaluationClock,
    ) -> None:
        self.payoff = payoff
        self.exercise = exercise
        self.clock = clock
        self._engine: PricingEngine | None = None

    def set_pricing_engine(self, engine: PricingEngine) -> None:
        self._engine = engine

    def is_expired(self) -> bool:
        return self.exercise.latest_date <= self.clock.evaluation_date

    def arguments(self) -> PricingArguments:
        return PricingArguments(
            payoff=self.payoff,
            exercise=self.exercise,
            evaluation_date=self.clock.evaluation_date,
        )

    def results(self) -> EngineResults:
        """Run the engine; raises whatever the engine raises."""
        if self.is_expired():
            return EngineResults.expired()
        if self._engine is None:
            raise RuntimeError("no pricing engine set")
        return self._engine.calculate(self.arguments())

    def npv(self) -> float:
        return self.results().value

    def greek(self, name: str) -> GreekOutcome:
        """Return one sensitivity or a `GreekUnavailable` describing why not."""
        if name not in GREEK_NAMES:
            raise ValueError(f"unknown greek: {name!r}")
        try:
            value = getattr(self.results(), name)
        except Exception as exc:
            return GreekUnavailable(name, UnavailableReason.ENGINE_ERROR, str(exc))
        if value is None:
            return GreekUnavailable(name, UnavailableReason.NOT_PROVIDED)
        if not math.isfinite(value):
            return GreekUnavailable(name, UnavailableReason.NOT_FINITE, repr(value))
        return float(value)

    def delta(self) -> GreekOutcome:
        return self.greek("delta")

    def gamma(self) -> GreekOutcome:
        return self.greek("gamma")

    def vega(self) -> GreekOutcome:
        return self.greek("vega")

    def theta(self) -> GreekOutcome:
        return self.greek("theta")

    def rho(self) -> GreekOutcome:
        return self.greek("rho")

    def elasticity(self) -> GreekOutcome:
        return self.greek("elasticity")

    def implied_volatility(
        self,
        target_value: float,
        process: BlackScholesMertonProcess,
        engine_factory: Callable[[BlackScholesMertonProcess], PricingEngine],
        *,
        accuracy: float = 1.0e-4,
        max_evaluations: int = 100,
        min_vol: float = 1.0e-7,
        max_vol: float = 4.0,
    ) -> float:
        """Invert the engine's NPV for volatility.

        Works on a clone of `process` with its own volatility quote, so the
        caller's quotes are never touched.

        Raises:
            ValueError: If the option is expired, the target is not positive,
                or no bracketing volatility exists in `[min_vol, max_vol]`.
        """
        if self.is_expired():
            raise ValueError("option expired")
        if not target_value > 0:
            raise ValueError(f"target value must be positive, got {target_value}")

        guess = process.volatility.black_vol()
        if not min_vol < guess < max_vol:
            guess = 0.2

        vol_quote = SimpleQuote("volatility", guess)
        probe = VanillaOption(self.payoff, self.exercise, self.clock)
        probe.set_pricing_engine(engine_factory(process.with_volatility(vol_quote)))

        def objective(sigma: float) -> float:
            vol_quote.set_value(sigma)
            return probe.npv() - target_value

        if objective(guess) == 0.0:
            return guess
        low, high = _bracket(objective, guess, min_vol, max_vol, max_evaluations)
        return float(
            brentq(objective, low, high, xtol=accuracy, maxiter=max_evaluations)
        )


def _bracket(
    objective: Callable[[float], float],
    guess: float,
    min_vol: float,
    max_vol: float,
    max_evaluations: int,
    growth: float = 1.6,
) -> tuple[float, float]:
    """Grow `[low, high]` geometrically around `guess` until it brackets a root."""
    low = high = guess
    f_low = f_high = objective(guess)
    for _ in range(max_evaluations):
        if f_low * f_high <= 0 and low < high:
            return low, high
        if low <= min_vol and high >= max_vol:
            break
        if low > min_vol:
            low = max(min_vol, low / growth)
            f_low = objective(low)
        if high < max_vol:
            high = min(max_vol, high * growth)
            f_high = objective(high)
    raise ValueError(
        f"no volatility in [{min_vol}, {max_vol}] reproduces the target price"
    )
