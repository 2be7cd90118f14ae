"""Shared option contract, security, and market observation dataclasses."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal, TypeAlias


class OptionRight(StrEnum):
    """Canonical option right labels used across valuation code."""

    CALL = "call"
    PUT = "put"


class OptionStyle(StrEnum):
    """Exercise style declared by the listed contract."""

    EUROPEAN = "european"
    AMERICAN = "american"


# Tolerant input type accepted at system boundaries (vendor data/tests).
OptionRightInput: TypeAlias = OptionRight | Literal["call", "put", "C", "P"]

# Opaque per-evaluation market context handed through to estimators.
MarketContext: TypeAlias = Any


def normalize_option_right(right: OptionRightInput) -> OptionRight:
    """Normalize option right labels to `OptionRight`."""
    if isinstance(right, OptionRight):
        return right
    if right in ("call", "C"):
        return OptionRight.CALL
    if right in ("put", "P"):
        return OptionRight.PUT
    raise ValueError("option right must be one of {'call', 'put', 'C', 'P'}")


def _as_date(value: dt.date | dt.datetime) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class OptionContract:
    """Listed contract terms observed at `time`.

    `market_price` is the quoted option price used to back out implied
    volatility; it is `0.0` when no quote is available.
    """

    strike: float
    right: OptionRightInput
    expiry: dt.date | dt.datetime
    time: dt.date | dt.datetime
    style: OptionStyle = OptionStyle.AMERICAN
    market_price: float = 0.0
    symbol: str = ""

    def __post_init__(self) -> None:
        if not self.strike > 0:
            raise ValueError("strike must be > 0")
        if self.market_price < 0:
            raise ValueError("market_price must be >= 0")
        object.__setattr__(self, "right", normalize_option_right(self.right))
        object.__setattr__(self, "style", OptionStyle(self.style))

    @property
    def expiry_date(self) -> dt.date:
        return _as_date(self.expiry)

    @property
    def observation_date(self) -> dt.date:
        return _as_date(self.time)


@dataclass(frozen=True)
class UnderlyingObservation:
    """Read-only snapshot of the underlying price at observation time."""

    price: float
    time: dt.datetime | None = None

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError("underlying price must be >= 0")


@dataclass(frozen=True)
class OptionSecurity:
    """Option security as seen by the valuation layer.

    `volatility` is the security's own volatility model reading for the
    underlying; the default volatility estimator returns it.
    """

    symbol: str
    underlying: UnderlyingObservation
    volatility: float = 0.0

    @property
    def underlying_price(self) -> float:
        return self.underlying.price
