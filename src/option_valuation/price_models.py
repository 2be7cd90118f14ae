"""Catalog of ready-made price models.

Each factory pairs an engine with an exercise policy. Analytic, integral and
binomial models price European exercise; the two approximations price
American exercise; Crank-Nicolson follows the contract's own style. Tree and
grid sizes come from the current `PricingSettings`.
"""

from __future__ import annotations

from collections.abc import Callable

from option_valuation.engines import (
    AnalyticEuropeanEngine,
    BaroneAdesiWhaleyEngine,
    BinomialVanillaEngine,
    BjerksundStenslandEngine,
    FiniteDifferenceEngine,
    IntegralEngine,
)
from option_valuation.estimators import (
    DividendYieldEstimator,
    RiskFreeRateEstimator,
    VolatilityEstimator,
)
from option_valuation.market.process import BlackScholesMertonProcess
from option_valuation.policies import (
    ExerciseFunc,
    PayoffFunc,
    american_exercise_policy,
    contract_style_exercise_policy,
    european_exercise_policy,
)
from option_valuation.pricing_model import (
    OptionPriceModel,
    PricingEngineFunc,
    PricingEngineFuncEx,
)
from option_valuation.settings import get_settings
from option_valuation.types import OptionContract, OptionStyle

PriceModelFactory = Callable[..., OptionPriceModel]


def create_price_model(
    pricing_engine_func: PricingEngineFunc | None = None,
    volatility_estimator: VolatilityEstimator | None = None,
    risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
    dividend_yield_estimator: DividendYieldEstimator | None = None,
    exercise_func: ExerciseFunc | None = None,
    payoff_func: PayoffFunc | None = None,
    *,
    pricing_engine_func_ex: PricingEngineFuncEx | None = None,
    name: str = "custom",
) -> OptionPriceModel:
    """Build a price model around an arbitrary engine constructor.

    Pass `pricing_engine_func(process)` for engines that only need the
    process, or `pricing_engine_func_ex(contract, process)` for engines that
    also depend on the contract (exactly one of the two).

    Unset estimators default to the constant ones seeded from the current
    settings; unset policies default to European exercise and a plain
    vanilla payoff.

    Raises:
        TypeError: If neither or both engine constructors are given, or if a
            given constructor or policy is not callable.
    """
    return OptionPriceModel(
        pricing_engine_func,
        volatility_estimator,
        risk_free_rate_estimator,
        dividend_yield_estimator,
        exercise_func,
        payoff_func,
        pricing_engine_func_ex=pricing_engine_func_ex,
        name=name,
    )


def black_scholes(
    volatility_estimator: VolatilityEstimator | None = None,
    risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
    dividend_yield_estimator: DividendYieldEstimator | None = None,
) -> OptionPriceModel:
    return create_price_model(
        AnalyticEuropeanEngine,
        volatility_estimator,
        risk_free_rate_estimator,
        dividend_yield_estimator,
        european_exercise_policy,
        name="black_scholes",
    )


def barone_adesi_whaley(
    volatility_estimator: VolatilityEstimator | None = None,
    risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
    dividend_yield_estimator: DividendYieldEstimator | None = None,
) -> OptionPriceModel:
    return create_price_model(
        BaroneAdesiWhaleyEngine,
        volatility_estimator,
        risk_free_rate_estimator,
        dividend_yield_estimator,
        american_exercise_policy,
        name="barone_adesi_whaley",
    )


def bjerksund_stensland(
    volatility_estimator: VolatilityEstimator | None = None,
    risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
    dividend_yield_estimator: DividendYieldEstimator | None = None,
) -> OptionPriceModel:
    return create_price_model(
        BjerksundStenslandEngine,
        volatility_estimator,
        risk_free_rate_estimator,
        dividend_yield_estimator,
        american_exercise_policy,
        name="bjerksund_stensland",
    )


def integral(
    volatility_estimator: VolatilityEstimator | None = None,
    risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
    dividend_yield_estimator: DividendYieldEstimator | None = None,
) -> OptionPriceModel:
    return create_price_model(
        IntegralEngine,
        volatility_estimator,
        risk_free_rate_estimator,
        dividend_yield_estimator,
        european_exercise_policy,
        name="integral",
    )


def crank_nicolson_fd(
    volatility_estimator: VolatilityEstimator | None = None,
    risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
    dividend_yield_estimator: DividendYieldEstimator | None = None,
) -> OptionPriceModel:
    """Crank-Nicolson grid; American scheme iff the contract is American."""
    time_steps = get_settings().time_steps_fd

    def engine(
        contract: OptionContract, process: BlackScholesMertonProcess
    ) -> FiniteDifferenceEngine:
        return FiniteDifferenceEngine(
            process,
            time_steps=time_steps,
            grid_points=time_steps - 1,
            american=contract.style == OptionStyle.AMERICAN,
        )

    return create_price_model(
        None,
        volatility_estimator,
        risk_free_rate_estimator,
        dividend_yield_estimator,
        contract_style_exercise_policy,
        pricing_engine_func_ex=engine,
        name="crank_nicolson_fd",
    )


def _binomial(rule: str, name: str) -> PriceModelFactory:
    def factory(
        volatility_estimator: VolatilityEstimator | None = None,
        risk_free_rate_estimator: RiskFreeRateEstimator | None = None,
        dividend_yield_estimator: DividendYieldEstimator | None = None,
    ) -> OptionPriceModel:
        steps = get_settings().time_steps_binomial
        return create_price_model(
            lambda process: BinomialVanillaEngine(
                process, rule=rule, steps=steps
            ),
            volatility_estimator,
            risk_free_rate_estimator,
            dividend_yield_estimator,
            european_exercise_policy,
            name=name,
        )

    factory.__name__ = name
    factory.__doc__ = f"European binomial tree ({rule.replace('_', ' ')} rule)."
    return factory


binomial_jarrow_rudd = _binomial("jarrow_rudd", "binomial_jarrow_rudd")
binomial_cox_ross_rubinstein = _binomial(
    "cox_ross_rubinstein", "binomial_cox_ross_rubinstein"
)
additive_equiprobabilities = _binomial(
    "additive_equiprobabilities", "additive_equiprobabilities"
)
binomial_trigeorgis = _binomial("trigeorgis", "binomial_trigeorgis")
binomial_tian = _binomial("tian", "binomial_tian")
binomial_leisen_reimer = _binomial("leisen_reimer", "binomial_leisen_reimer")
binomial_joshi = _binomial("joshi", "binomial_joshi")


PRICE_MODELS: dict[str, PriceModelFactory] = {
    "black_scholes": black_scholes,
    "barone_adesi_whaley": barone_adesi_whaley,
    "bjerksund_stensland": bjerksund_stensland,
    "integral": integral,
    "crank_nicolson_fd": crank_nicolson_fd,
    "binomial_jarrow_rudd": binomial_jarrow_rudd,
    "binomial_cox_ross_rubinstein": binomial_cox_ross_rubinstein,
    "additive_equiprobabilities": additive_equiprobabilities,
    "binomial_trigeorgis": binomial_trigeorgis,
    "binomial_tian": binomial_tian,
    "binomial_leisen_reimer": binomial_leisen_reimer,
    "binomial_joshi": binomial_joshi,
}


def get_price_model(name: str, **estimators) -> OptionPriceModel:
    """Construct a catalog model by name.

    Raises:
        KeyError: If `name` is not in `PRICE_MODELS`.
    """
    try:
        factory = PRICE_MODELS[name]
    except KeyError as e:
        raise KeyError(
            f"Unknown price model {name!r}; expected one of {sorted(PRICE_MODELS)}"
        ) from e
    return factory(**estimators)
