"""Interface for pluggable pricing engines.

An engine is built from a process and turns `PricingArguments` into
`EngineResults`. The value is mandatory; each sensitivity is optional and
left as `None` when the engine does not compute it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from option_valuation.market.process import BlackScholesMertonProcess, ProcessSnapshot
from option_valuation.types import OptionStyle

if TYPE_CHECKING:
    from option_valuation.instruments import PricingArguments


@dataclass(frozen=True)
class EngineResults:
    """Net present value plus whichever sensitivities the engine provides."""

    value: float
    delta: float | None = None
    gamma: float | None = None
    vega: float | None = None
    theta: float | None = None
    rho: float | None = None
    elasticity: float | None = None

    @classmethod
    def expired(cls) -> EngineResults:
        return cls(
            value=0.0,
            delta=0.0,
            gamma=0.0,
            vega=0.0,
            theta=0.0,
            rho=0.0,
            elasticity=0.0,
        )


@runtime_checkable
class PricingEngine(Protocol):
    """Minimum capability every catalog engine provides."""

    process: BlackScholesMertonProcess

    def calculate(self, arguments: PricingArguments) -> EngineResults:
        """Value one option at `arguments.evaluation_date`."""


def market_inputs(
    process: BlackScholesMertonProcess, arguments: PricingArguments
) -> ProcessSnapshot:
    """Read the process at the evaluation date and reject degenerate inputs."""
    snapshot = process.snapshot(
        arguments.evaluation_date, arguments.exercise.latest_date
    )
    if not snapshot.spot > 0:
        raise ValueError(f"spot must be positive, got {snapshot.spot}")
    if not snapshot.volatility > 0:
        raise ValueError(f"volatility must be positive, got {snapshot.volatility}")
    if not snapshot.time_to_expiry > 0:
        raise ValueError("option has no time to expiry")
    return snapshot


def require_exercise(arguments: PricingArguments, style: OptionStyle, engine: str) -> None:
    if arguments.exercise.style != style:
        raise ValueError(f"{engine} requires {style.value} exercise")
