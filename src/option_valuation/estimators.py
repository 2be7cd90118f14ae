"""Market input estimators feeding the valuation process.

Each estimator turns (security, market context, contract) into one scalar:
the underlying volatility, the risk-free rate, or the dividend yield. The
defaults are constants; custom estimators only need an `estimate` method.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from option_valuation.types import MarketContext, OptionContract, OptionSecurity


@runtime_checkable
class VolatilityEstimator(Protocol):
    """Annualized underlying volatility provider."""

    def estimate(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> float:
        """Return volatility (decimal) for the contract."""


@runtime_checkable
class RiskFreeRateEstimator(Protocol):
    """Continuously-compounded risk-free rate provider."""

    def estimate(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> float:
        """Return risk-free rate (decimal) for the contract."""


@runtime_checkable
class DividendYieldEstimator(Protocol):
    """Continuous dividend yield provider."""

    def estimate(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> float:
        """Return dividend yield (decimal) for the contract."""


@dataclass(frozen=True)
class ConstantVolatilityEstimator:
    """Fixed volatility, or the security's own volatility reading when unset."""

    volatility: float | None = None

    def __post_init__(self) -> None:
        if self.volatility is not None and self.volatility < 0:
            raise ValueError("volatility must be >= 0")

    def estimate(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> float:
        _ = market_context, contract
        if self.volatility is None:
            return float(security.volatility)
        return float(self.volatility)


@dataclass(frozen=True)
class ConstantRiskFreeRateEstimator:
    """Constant risk-free rate."""

    rate: float = 0.0

    def estimate(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> float:
        _ = security, market_context, contract
        return float(self.rate)


@dataclass(frozen=True)
class ConstantDividendYieldEstimator:
    """Constant dividend yield."""

    dividend_yield: float = 0.0

    def estimate(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> float:
        _ = security, market_context, contract
        return float(self.dividend_yield)
