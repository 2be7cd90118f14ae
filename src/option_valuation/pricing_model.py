"""Valuation orchestrator: one (security, contract, model) -> price, IV, Greeks.

Lifecycle of one `evaluate` call:

1. settlement/maturity dates = observation/expiry advanced by the settlement
   lag on the exchange calendar (Actual/365 Fixed day count)
2. four fresh quotes (spot, dividend, risk-free, volatility) -> process
3. payoff and exercise from the model's policies
4. a fresh `EvaluationClock` at the settlement date
5. engine attached to a fresh option; NPV evaluated eagerly (NaN/inf -> 0)
6. implied volatility and Greeks deferred; Greeks the engine cannot produce
   are bump-and-repriced (elasticity excepted) when approximation is enabled

Nothing raises past `evaluate`: any failure degrades to a zero result.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from collections.abc import Callable

from option_valuation.engines.base import PricingEngine
from option_valuation.estimators import (
    ConstantDividendYieldEstimator,
    ConstantRiskFreeRateEstimator,
    ConstantVolatilityEstimator,
    DividendYieldEstimator,
    RiskFreeRateEstimator,
    VolatilityEstimator,
)
from option_valuation.instruments import GreekOutcome, GreekUnavailable, VanillaOption
from option_valuation.market.calendar import EvaluationClock, TradingCalendar
from option_valuation.market.process import BlackScholesMertonProcess, MarketQuotes
from option_valuation.policies import (
    ExerciseFunc,
    PayoffFunc,
    european_exercise_policy,
    plain_vanilla_payoff,
)
from option_valuation.results import Greeks, OptionPriceModelResult
from option_valuation.settings import PricingSettings, get_settings
from option_valuation.types import MarketContext, OptionContract, OptionSecurity

logger = logging.getLogger(__name__)

PricingEngineFunc = Callable[[BlackScholesMertonProcess], PricingEngine]
PricingEngineFuncEx = Callable[[OptionContract, BlackScholesMertonProcess], PricingEngine]

SPOT_STEP = 0.01
VOLATILITY_STEP = 0.001
RATE_STEP = 0.001
THETA_DAYS = 1
THETA_STEP = THETA_DAYS / 365.0


def _contract_label(contract: object) -> object:
    return getattr(contract, "symbol", None) or getattr(contract, "strike", contract)


def evaluate_option(option: VanillaOption) -> float:
    """Option NPV with engine failures and non-finite values reported as 0."""
    try:
        npv = option.npv()
    except Exception as exc:
        logger.debug("Option NPV evaluation failed, using 0: %s", exc)
        return 0.0
    if not math.isfinite(npv):
        logger.debug("Option NPV is not finite (%r), using 0", npv)
        return 0.0
    return float(npv)


class OptionValuation:
    """All state owned by one evaluation: quotes, process, clock and option.

    The NPV is computed on construction. Every other quantity is recomputed
    on each call; bumps of quotes and of the clock are scoped and always
    undone before the call returns.
    """

    def __init__(
        self,
        *,
        contract: OptionContract,
        option: VanillaOption,
        process: BlackScholesMertonProcess,
        quotes: MarketQuotes,
        clock: EvaluationClock,
        engine_factory: Callable[[BlackScholesMertonProcess], PricingEngine],
        enable_greek_approximation: bool = True,
    ) -> None:
        self.contract = contract
        self.option = option
        self.process = process
        self.quotes = quotes
        self.clock = clock
        self.engine_factory = engine_factory
        self.enable_greek_approximation = enable_greek_approximation
        self.npv = evaluate_option(option)

    def implied_volatility(self) -> float:
        try:
            return self.option.implied_volatility(
                self.contract.market_price, self.process, self.engine_factory
            )
        except Exception as exc:
            logger.debug(
                "Implied volatility failed for %s (market price %s): %s",
                _contract_label(self.contract),
                getattr(self.contract, "market_price", None),
                exc,
            )
            return 0.0

    def _fallback_allowed(self, failures: list[GreekUnavailable]) -> bool:
        for failure in failures:
            logger.debug(
                "Engine did not produce %s (%s)%s",
                failure.greek,
                failure.reason.value,
                f": {failure.detail}" if failure.detail else "",
            )
        return self.enable_greek_approximation

    def _greek_or_reevaluate(
        self, outcome: GreekOutcome, reevaluate: Callable[[], float]
    ) -> float:
        if not isinstance(outcome, GreekUnavailable):
            return outcome
        if not self._fallback_allowed([outcome]):
            return 0.0
        return reevaluate()

    def delta_gamma(self) -> tuple[float, float]:
        delta, gamma = self.option.delta(), self.option.gamma()
        failures = [g for g in (delta, gamma) if isinstance(g, GreekUnavailable)]
        if not failures:
            return delta, gamma
        if not self._fallback_allowed(failures):
            return 0.0, 0.0

        with self.quotes.spot.bumped(-SPOT_STEP):
            npv_minus = evaluate_option(self.option)
        with self.quotes.spot.bumped(SPOT_STEP):
            npv_plus = evaluate_option(self.option)

        return (
            (npv_plus - npv_minus) / (2.0 * SPOT_STEP),
            (npv_plus - 2.0 * self.npv + npv_minus) / SPOT_STEP**2,
        )

    def _reevaluate_vega(self) -> float:
        with self.quotes.volatility.bumped(VOLATILITY_STEP):
            npv_plus = evaluate_option(self.option)
        return (npv_plus - self.npv) / VOLATILITY_STEP

    def _reevaluate_theta(self) -> float:
        with self.clock.shifted(-THETA_DAYS):
            npv_minus = evaluate_option(self.option)
        return (self.npv - npv_minus) / THETA_STEP

    def _reevaluate_rho(self) -> float:
        with self.quotes.risk_free_rate.bumped(RATE_STEP):
            npv_plus = evaluate_option(self.option)
        return (npv_plus - self.npv) / RATE_STEP

    def vega(self) -> float:
        return self._greek_or_reevaluate(self.option.vega(), self._reevaluate_vega)

    def theta(self) -> float:
        return self._greek_or_reevaluate(self.option.theta(), self._reevaluate_theta)

    def rho(self) -> float:
        return self._greek_or_reevaluate(self.option.rho(), self._reevaluate_rho)

    def elasticity(self) -> float:
        # Never approximated numerically.
        outcome = self.option.elasticity()
        if isinstance(outcome, GreekUnavailable):
            self._fallback_allowed([outcome])
            return 0.0
        return outcome

    def greeks(self) -> Greeks:
        return Greeks(
            delta_gamma=self.delta_gamma,
            vega=self.vega,
            theta=self.theta,
            rho=self.rho,
            elasticity=self.elasticity,
        )

    def to_result(self) -> OptionPriceModelResult:
        return OptionPriceModelResult(
            self.npv,
            implied_volatility=self.implied_volatility,
            greeks=self.greeks,
        )


class OptionPriceModel:
    """Pricing recipe: engine constructor, exercise/payoff policies, estimators.

    The engine is built either from the process alone (`pricing_engine_func`)
    or from the contract and the process (`pricing_engine_func_ex`); exactly
    one of the two must be given.

    The model itself is stateless across evaluations; everything mutable is
    created per call inside `prepare`.
    """

    def __init__(
        self,
        pricing_engine_func: PricingEngineFunc | None = None,
        volatility_estimator: VolatilityEstimator | None = None,
        risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
        dividend_yield_estimator: DividendYieldEstimator | None = None,
        exercise_func: ExerciseFunc | None = None,
        payoff_func: PayoffFunc | None = None,
        *,
        pricing_engine_func_ex: PricingEngineFuncEx | None = None,
        name: str = "custom",
        settings: PricingSettings | None = None,
    ) -> None:
        if (pricing_engine_func is None) == (pricing_engine_func_ex is None):
            raise TypeError(
                "exactly one of pricing_engine_func or pricing_engine_func_ex is required"
            )
        for label, func in (
            ("pricing_engine_func", pricing_engine_func),
            ("pricing_engine_func_ex", pricing_engine_func_ex),
            ("exercise_func", exercise_func),
            ("payoff_func", payoff_func),
        ):
            if func is not None and not callable(func):
                raise TypeError(f"{label} must be callable")

        cfg = settings or get_settings()
        self.name = name
        self.settings = cfg
        self.pricing_engine_func = pricing_engine_func
        self.pricing_engine_func_ex = pricing_engine_func_ex
        self.volatility_estimator = volatility_estimator or ConstantVolatilityEstimator()
        self.risk_free_rate_estimator = (
            risk_free_rate_estimator
            or ConstantRiskFreeRateEstimator(cfg.default_risk_free_rate)
        )
        self.dividend_yield_estimator = (
            dividend_yield_estimator
            or ConstantDividendYieldEstimator(cfg.default_dividend_rate)
        )
        self.exercise_func = exercise_func or european_exercise_policy
        self.payoff_func = payoff_func or plain_vanilla_payoff
        self.enable_greek_approximation = cfg.enable_greek_approximation
        self.calendar = TradingCalendar(cfg.calendar)

    def build_engine(
        self, contract: OptionContract, process: BlackScholesMertonProcess
    ) -> PricingEngine:
        """Engine for one contract on the given process."""
        if self.pricing_engine_func_ex is not None:
            return self.pricing_engine_func_ex(contract, process)
        return self.pricing_engine_func(process)

    def settlement_dates(self, contract: OptionContract) -> tuple[dt.date, dt.date]:
        """Settlement and maturity dates after the settlement lag."""
        lag = self.settings.settlement_days
        settlement = self.calendar.advance(contract.observation_date, lag)
        maturity = self.calendar.advance(contract.expiry_date, lag)
        return settlement, maturity

    def prepare(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> OptionValuation:
        """Build the per-evaluation state and value the option; may raise."""
        settlement_date, maturity_date = self.settlement_dates(contract)

        inputs = (security, market_context, contract)
        quotes = MarketQuotes.create(
            spot=security.underlying_price,
            dividend_yield=self.dividend_yield_estimator.estimate(*inputs),
            risk_free_rate=self.risk_free_rate_estimator.estimate(*inputs),
            volatility=self.volatility_estimator.estimate(*inputs),
        )
        process = BlackScholesMertonProcess.from_quotes(quotes)
        payoff = self.payoff_func(contract)
        exercise = self.exercise_func(contract, settlement_date, maturity_date)

        clock = EvaluationClock(settlement_date)
        option = VanillaOption(payoff, exercise, clock)

        def engine_factory(p: BlackScholesMertonProcess) -> PricingEngine:
            return self.build_engine(contract, p)

        option.set_pricing_engine(engine_factory(process))

        return OptionValuation(
            contract=contract,
            option=option,
            process=process,
            quotes=quotes,
            clock=clock,
            engine_factory=engine_factory,
            enable_greek_approximation=self.enable_greek_approximation,
        )

    def evaluate(
        self,
        security: OptionSecurity,
        market_context: MarketContext,
        contract: OptionContract,
    ) -> OptionPriceModelResult:
        """Theoretical price with deferred implied volatility and Greeks.

        Never raises; a failure anywhere returns `OptionPriceModelResult.zero()`.
        """
        try:
            return self.prepare(security, market_context, contract).to_result()
        except Exception as exc:
            logger.debug(
                "%s.evaluate() error for %s: %s", self.name, _contract_label(contract), exc
            )
            return OptionPriceModelResult.zero()

    def __repr__(self) -> str:
        return f"OptionPriceModel(name={self.name!r})"
