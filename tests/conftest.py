from __future__ import annotations

import datetime as dt

import pytest

from option_valuation.market import TradingCalendar
from option_valuation.settings import PricingSettings, set_settings
from option_valuation.types import (
    OptionContract,
    OptionSecurity,
    OptionStyle,
    UnderlyingObservation,
)

OBSERVATION = dt.date(2024, 2, 1)
EXPIRY = dt.date(2024, 3, 1)


@pytest.fixture(autouse=True)
def default_settings():
    previous = set_settings(PricingSettings())
    yield
    set_settings(previous)


@pytest.fixture
def make_security():
    def _make(price: float = 100.0, volatility: float = 0.2) -> OptionSecurity:
        return OptionSecurity(
            symbol="SPY",
            underlying=UnderlyingObservation(price=price),
            volatility=volatility,
        )

    return _make


@pytest.fixture
def make_contract():
    def _make(
        strike: float = 100.0,
        right: str = "call",
        style: OptionStyle = OptionStyle.EUROPEAN,
        expiry: dt.date = EXPIRY,
        time: dt.date = OBSERVATION,
        market_price: float = 0.0,
    ) -> OptionContract:
        return OptionContract(
            strike=strike,
            right=right,
            expiry=expiry,
            time=time,
            style=style,
            market_price=market_price,
            symbol=f"SPY-{right}-{strike:g}",
        )

    return _make


@pytest.fixture
def time_to_maturity():
    """Actual/365 year fraction between settlement and maturity (3-session lag)."""

    def _t(contract: OptionContract, settlement_days: int = 3) -> float:
        cal = TradingCalendar()
        start = cal.advance(contract.observation_date, settlement_days)
        end = cal.advance(contract.expiry_date, settlement_days)
        return (end - start).days / 365.0

    return _t
