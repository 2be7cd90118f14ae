"""Binomial-tree engine parameterized by a tree-construction rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from option_valuation.engines.base import EngineResults, market_inputs
from option_valuation.market.process import BlackScholesMertonProcess
from option_valuation.models.binomial_tree import TREE_RULES, binomial_tree_price

if TYPE_CHECKING:
    from option_valuation.instruments import PricingArguments


@dataclass(frozen=True)
class BinomialVanillaEngine:
    """Tree pricer honouring the option's exercise style.

    This engine reports value, delta and gamma only; other Greeks are left
    to bump-and-reprice.
    """

    process: BlackScholesMertonProcess
    rule: str = "cox_ross_rubinstein"
    steps: int = 100

    def __post_init__(self) -> None:
        if self.steps < 1:
            raise ValueError("steps must be >= 1")
        if self.rule not in TREE_RULES:
            raise ValueError(
                f"Unknown tree rule: {self.rule!r}; expected one of {sorted(TREE_RULES)}"
            )

    def calculate(self, arguments: PricingArguments) -> EngineResults:
        state = market_inputs(self.process, arguments)
        out = binomial_tree_price(
            S=state.spot,
            K=arguments.payoff.strike,
            T=state.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
            q=state.dividend_yield,
            option_type=arguments.payoff.right,
            steps=self.steps,
            american=arguments.exercise.is_american,
            rule=self.rule,
        )
        return EngineResults(value=out.value, delta=out.delta, gamma=out.gamma)
