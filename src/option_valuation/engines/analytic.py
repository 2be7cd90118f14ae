"""Closed-form Black-Scholes-Merton engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from option_valuation.engines.base import EngineResults, market_inputs, require_exercise
from option_valuation.market.process import BlackScholesMertonProcess
from option_valuation.models.black_scholes import bs_greeks
from option_valuation.types import OptionStyle

if TYPE_CHECKING:
    from option_valuation.instruments import PricingArguments


@dataclass(frozen=True)
class AnalyticEuropeanEngine:
    """Exact European pricer; the only engine that reports every Greek."""

    process: BlackScholesMertonProcess

    def calculate(self, arguments: PricingArguments) -> EngineResults:
        require_exercise(arguments, OptionStyle.EUROPEAN, "AnalyticEuropeanEngine")
        state = market_inputs(self.process, arguments)
        out = bs_greeks(
            S=state.spot,
            K=arguments.payoff.strike,
            T=state.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
            q=state.dividend_yield,
            option_type=arguments.payoff.right,
        )
        return EngineResults(
            value=out["price"],
            delta=out["delta"],
            gamma=out["gamma"],
            vega=out["vega"],
            theta=out["theta"],
            rho=out["rho"],
            elasticity=out["elasticity"],
        )
