"""Crank-Nicolson finite-difference engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from option_valuation.engines.base import EngineResults, market_inputs
from option_valuation.market.process import BlackScholesMertonProcess
from option_valuation.models.finite_difference import crank_nicolson_price

if TYPE_CHECKING:
    from option_valuation.instruments import PricingArguments


@dataclass(frozen=True)
class FiniteDifferenceEngine:
    """PDE pricer on a `time_steps` x `grid_points` mesh.

    `american=True` applies early exercise at every time layer. Delta, gamma
    and theta come from the grid; vega, rho and elasticity are not provided.
    """

    process: BlackScholesMertonProcess
    time_steps: int = 100
    grid_points: int = 99
    american: bool = False

    def __post_init__(self) -> None:
        if self.time_steps < 1:
            raise ValueError("time_steps must be >= 1")
        if self.grid_points < 5:
            raise ValueError("grid_points must be >= 5")

    def calculate(self, arguments: PricingArguments) -> EngineResults:
        state = market_inputs(self.process, arguments)
        out = crank_nicolson_price(
            S=state.spot,
            K=arguments.payoff.strike,
            T=state.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
            q=state.dividend_yield,
            option_type=arguments.payoff.right,
            time_steps=self.time_steps,
            grid_points=self.grid_points,
            american=self.american,
        )
        return EngineResults(
            value=out.value, delta=out.delta, gamma=out.gamma, theta=out.theta
        )
