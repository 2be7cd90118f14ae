"""Black-Scholes-Merton process assembled from four market quotes."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from option_valuation.market.calendar import Actual365Fixed
from option_valuation.market.quotes import BlackConstantVol, FlatForward, SimpleQuote


@dataclass(frozen=True)
class ProcessSnapshot:
    """Scalar process inputs frozen for one engine call."""

    spot: float
    rate: float
    dividend_yield: float
    volatility: float
    time_to_expiry: float


@dataclass(frozen=True)
class MarketQuotes:
    """The four quotes owned by one evaluation."""

    spot: SimpleQuote
    dividend_yield: SimpleQuote
    risk_free_rate: SimpleQuote
    volatility: SimpleQuote

    @classmethod
    def create(
        cls,
        *,
        spot: float,
        dividend_yield: float,
        risk_free_rate: float,
        volatility: float,
    ) -> MarketQuotes:
        return cls(
            spot=SimpleQuote("spot", spot),
            dividend_yield=SimpleQuote("dividend_yield", dividend_yield),
            risk_free_rate=SimpleQuote("risk_free_rate", risk_free_rate),
            volatility=SimpleQuote("volatility", volatility),
        )

    def values(self) -> dict[str, float]:
        return {
            "spot": self.spot.value(),
            "dividend_yield": self.dividend_yield.value(),
            "risk_free_rate": self.risk_free_rate.value(),
            "volatility": self.volatility.value(),
        }


@dataclass(frozen=True)
class BlackScholesMertonProcess:
    """Geometric Brownian motion with continuous dividend yield.

    The process holds handles, not numbers: every `snapshot` reads the
    current quote values, so bump-and-reprice works through the quotes.
    """

    spot: SimpleQuote
    dividend_yield: FlatForward
    risk_free_rate: FlatForward
    volatility: BlackConstantVol
    day_counter: Actual365Fixed = Actual365Fixed()

    @classmethod
    def from_quotes(
        cls,
        quotes: MarketQuotes,
        day_counter: Actual365Fixed | None = None,
    ) -> BlackScholesMertonProcess:
        dc = day_counter or Actual365Fixed()
        return cls(
            spot=quotes.spot,
            dividend_yield=FlatForward(quotes.dividend_yield, dc),
            risk_free_rate=FlatForward(quotes.risk_free_rate, dc),
            volatility=BlackConstantVol(quotes.volatility, dc),
            day_counter=dc,
        )

    def with_volatility(self, volatility: SimpleQuote) -> BlackScholesMertonProcess:
        """Clone the process onto a different volatility quote."""
        return BlackScholesMertonProcess(
            spot=self.spot,
            dividend_yield=self.dividend_yield,
            risk_free_rate=self.risk_free_rate,
            volatility=BlackConstantVol(volatility, self.day_counter),
            day_counter=self.day_counter,
        )

    def time_to(self, evaluation_date: dt.date, date: dt.date) -> float:
        return self.day_counter.year_fraction(evaluation_date, date)

    def snapshot(
        self, evaluation_date: dt.date, maturity_date: dt.date
    ) -> ProcessSnapshot:
        return ProcessSnapshot(
            spot=self.spot.value(),
            rate=self.risk_free_rate.zero_rate(),
            dividend_yield=self.dividend_yield.zero_rate(),
            volatility=self.volatility.black_vol(),
            time_to_expiry=self.time_to(evaluation_date, maturity_date),
        )
