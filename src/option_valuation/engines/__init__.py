"""Pricing engines plugged into the valuation orchestrator."""

from .analytic import AnalyticEuropeanEngine
from .approximations import BaroneAdesiWhaleyEngine, BjerksundStenslandEngine
from .base import EngineResults, PricingEngine
from .binomial import BinomialVanillaEngine
from .finite_difference import FiniteDifferenceEngine
from .integral import IntegralEngine

__all__ = [
    "EngineResults",
    "PricingEngine",
    "AnalyticEuropeanEngine",
    "BaroneAdesiWhaleyEngine",
    "BjerksundStenslandEngine",
    "IntegralEngine",
    "FiniteDifferenceEngine",
    "BinomialVanillaEngine",
]
