"""Payoff and exercise policies used by price models.

A policy maps the listed contract onto the instrument actually priced. Some
catalog entries force an exercise style regardless of the contract's own
style; pairing such a model with a contract of the other style is the
caller's choice and is not checked here.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable

from option_valuation.instruments import (
    Exercise,
    PlainVanillaPayoff,
    american_exercise,
    european_exercise,
)
from option_valuation.types import OptionContract, OptionStyle

ExerciseFunc = Callable[[OptionContract, dt.date, dt.date], Exercise]
PayoffFunc = Callable[[OptionContract], PlainVanillaPayoff]


def european_exercise_policy(
    contract: OptionContract, settlement_date: dt.date, maturity_date: dt.date
) -> Exercise:
    """Exercise at maturity only, whatever the contract says."""
    return european_exercise(maturity_date)


def american_exercise_policy(
    contract: OptionContract, settlement_date: dt.date, maturity_date: dt.date
) -> Exercise:
    """Exercise any time between settlement and maturity, whatever the contract says."""
    return american_exercise(settlement_date, maturity_date)


def contract_style_exercise_policy(
    contract: OptionContract, settlement_date: dt.date, maturity_date: dt.date
) -> Exercise:
    """Follow the contract's own exercise style."""
    if contract.style == OptionStyle.AMERICAN:
        return american_exercise_policy(contract, settlement_date, maturity_date)
    return european_exercise_policy(contract, settlement_date, maturity_date)


def plain_vanilla_payoff(contract: OptionContract) -> PlainVanillaPayoff:
    return PlainVanillaPayoff(right=contract.right, strike=float(contract.strike))
