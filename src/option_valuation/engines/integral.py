"""Numerical-integration engine for European options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from option_valuation.engines.base import EngineResults, market_inputs, require_exercise
from option_valuation.market.process import BlackScholesMertonProcess
from option_valuation.models.integral import integral_price
from option_valuation.types import OptionStyle

if TYPE_CHECKING:
    from option_valuation.instruments import PricingArguments


@dataclass(frozen=True)
class IntegralEngine:
    """Integrates the payoff against the terminal density; value only."""

    process: BlackScholesMertonProcess

    def calculate(self, arguments: PricingArguments) -> EngineResults:
        require_exercise(arguments, OptionStyle.EUROPEAN, "IntegralEngine")
        state = market_inputs(self.process, arguments)
        value = integral_price(
            S=state.spot,
            K=arguments.payoff.strike,
            T=state.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
            q=state.dividend_yield,
            option_type=arguments.payoff.right,
        )
        return EngineResults(value=value)
