"""Mutable market quotes and the flat term structures built on top of them.

A quote is a single named scalar owned by one evaluation. Term structures read
the quote on every query, so bumping a quote is enough to reprice anything
built from it.
"""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from option_valuation.market.calendar import Actual365Fixed


class SimpleQuote:
    """Named mutable scalar backing one input of a stochastic process."""

    def __init__(self, name: str, value: float) -> None:
        self.name = name
        self._value = float(value)

    def value(self) -> float:
        return self._value

    def set_value(self, value: float) -> None:
        self._value = float(value)

    @contextmanager
    def bumped(self, step: float) -> Iterator[float]:
        """Shift the quote by `step` for the duration of the block.

        The original value is restored on every exit path, including errors
        raised inside the block. Yields the unbumped value.
        """
        initial = self._value
        self._value = initial + step
        try:
            yield initial
        finally:
            self._value = initial

    def __repr__(self) -> str:
        return f"SimpleQuote({self.name!r}, {self._value!r})"


@dataclass(frozen=True)
class FlatForward:
    """Flat continuously-compounded yield curve driven by a quote.

    The curve has no fixed reference date: times are measured from whatever
    evaluation date the caller passes in.
    """

    rate: SimpleQuote
    day_counter: Actual365Fixed = Actual365Fixed()

    def zero_rate(self) -> float:
        return self.rate.value()

    def discount(self, reference_date: dt.date, date: dt.date) -> float:
        t = self.day_counter.year_fraction(reference_date, date)
        return math.exp(-self.zero_rate() * t)


@dataclass(frozen=True)
class BlackConstantVol:
    """Flat Black volatility surface driven by a quote."""

    volatility: SimpleQuote
    day_counter: Actual365Fixed = Actual365Fixed()

    def black_vol(self) -> float:
        return self.volatility.value()

    def black_variance(self, reference_date: dt.date, date: dt.date) -> float:
        t = self.day_counter.year_fraction(reference_date, date)
        return self.black_vol() ** 2 * t
