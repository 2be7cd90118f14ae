"""American approximation engines (value only)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from option_valuation.engines.base import EngineResults, market_inputs, require_exercise
from option_valuation.market.process import BlackScholesMertonProcess
from option_valuation.models.american_approximations import (
    barone_adesi_whaley_price,
    bjerksund_stensland_price,
)
from option_valuation.types import OptionStyle

if TYPE_CHECKING:
    from option_valuation.instruments import PricingArguments


@dataclass(frozen=True)
class BaroneAdesiWhaleyEngine:
    """Barone-Adesi & Whaley (1987) quadratic approximation."""

    process: BlackScholesMertonProcess

    def calculate(self, arguments: PricingArguments) -> EngineResults:
        require_exercise(arguments, OptionStyle.AMERICAN, "BaroneAdesiWhaleyEngine")
        state = market_inputs(self.process, arguments)
        value = barone_adesi_whaley_price(
            S=state.spot,
            K=arguments.payoff.strike,
            T=state.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
            q=state.dividend_yield,
            option_type=arguments.payoff.right,
        )
        return EngineResults(value=value)


@dataclass(frozen=True)
class BjerksundStenslandEngine:
    """Bjerksund & Stensland (1993) flat-boundary approximation."""

    process: BlackScholesMertonProcess

    def calculate(self, arguments: PricingArguments) -> EngineResults:
        require_exercise(arguments, OptionStyle.AMERICAN, "BjerksundStenslandEngine")
        state = market_inputs(self.process, arguments)
        value = bjerksund_stensland_price(
            S=state.spot,
            K=arguments.payoff.strike,
            T=state.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
            q=state.dividend_yield,
            option_type=arguments.payoff.right,
        )
        return EngineResults(value=value)
