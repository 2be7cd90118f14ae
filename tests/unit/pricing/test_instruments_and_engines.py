from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

import pytest

from option_valuation.engines import (
    AnalyticEuropeanEngine,
    BaroneAdesiWhaleyEngine,
    BinomialVanillaEngine,
    BjerksundStenslandEngine,
    EngineResults,
    FiniteDifferenceEngine,
    IntegralEngine,
    PricingEngine,
)
from option_valuation.instruments import (
    GreekUnavailable,
    PlainVanillaPayoff,
    UnavailableReason,
    VanillaOption,
    american_exercise,
    european_exercise,
)
from option_valuation.market import (
    BlackScholesMertonProcess,
    EvaluationClock,
    MarketQuotes,
)
from option_valuation.models import bs_price
from option_valuation.types import OptionRight

SETTLEMENT = dt.date(2024, 2, 6)
MATURITY = dt.date(2024, 3, 6)
T = 29 / 365.0


def _process(volatility: float = 0.2) -> BlackScholesMertonProcess:
    quotes = MarketQuotes.create(
        spot=100.0, dividend_yield=0.0, risk_free_rate=0.01, volatility=volatility
    )
    return BlackScholesMertonProcess.from_quotes(quotes)


def _option(engine: PricingEngine | None, american: bool = False) -> VanillaOption:
    exercise = (
        american_exercise(SETTLEMENT, MATURITY) if american else european_exercise(MATURITY)
    )
    option = VanillaOption(
        PlainVanillaPayoff(OptionRight.CALL, 100.0), exercise, EvaluationClock(SETTLEMENT)
    )
    if engine is not None:
        option.set_pricing_engine(engine)
    return option


@dataclass(frozen=True)
class _FixedEngine:
    process: BlackScholesMertonProcess
    results: EngineResults

    def calculate(self, arguments):
        return self.results


@dataclass(frozen=True)
class _RaisingEngine:
    process: BlackScholesMertonProcess

    def calculate(self, arguments):
        raise RuntimeError("solver diverged")


@pytest.mark.parametrize(
    ("engine_cls", "american", "provided"),
    [
        (AnalyticEuropeanEngine, False, {"delta", "gamma", "vega", "theta", "rho", "elasticity"}),
        (BaroneAdesiWhaleyEngine, True, set()),
        (BjerksundStenslandEngine, True, set()),
        (IntegralEngine, False, set()),
        (FiniteDifferenceEngine, False, {"delta", "gamma", "theta"}),
        (BinomialVanillaEngine, False, {"delta", "gamma"}),
    ],
)
def test_engine_capability_sets(engine_cls, american: bool, provided: set[str]):
    engine = engine_cls(_process())
    assert isinstance(engine, PricingEngine)

    results = _option(engine, american=american).results()

    assert results.value > 0
    for name in ("delta", "gamma", "vega", "theta", "rho", "elasticity"):
        assert (getattr(results, name) is not None) == (name in provided)


@pytest.mark.parametrize(
    ("engine_cls", "american"),
    [
        (AnalyticEuropeanEngine, True),
        (IntegralEngine, True),
        (BaroneAdesiWhaleyEngine, False),
        (BjerksundStenslandEngine, False),
    ],
)
def test_engines_refuse_wrong_exercise_style(engine_cls, american: bool):
    option = _option(engine_cls(_process()), american=american)

    with pytest.raises(ValueError, match="exercise"):
        option.npv()


def test_engines_refuse_non_positive_volatility():
    option = _option(AnalyticEuropeanEngine(_process(volatility=0.0)))

    with pytest.raises(ValueError, match="volatility"):
        option.npv()
    outcome = option.delta()
    assert isinstance(outcome, GreekUnavailable)
    assert outcome.reason == UnavailableReason.ENGINE_ERROR


def test_analytic_engine_uses_clock_date():
    option = _option(AnalyticEuropeanEngine(_process()))
    expected = bs_price(S=100.0, K=100.0, T=T, sigma=0.2, r=0.01, option_type="call")

    assert option.npv() == pytest.approx(expected)
    with option.clock.shifted(-1):
        assert option.npv() > expected
    assert option.npv() == pytest.approx(expected)


def test_greek_outcomes_are_typed():
    missing = _option(BaroneAdesiWhaleyEngine(_process()), american=True).vega()
    assert missing == GreekUnavailable("vega", UnavailableReason.NOT_PROVIDED)

    inf_engine = _FixedEngine(_process(), EngineResults(value=1.0, delta=float("inf")))
    not_finite = _option(inf_engine).delta()
    assert isinstance(not_finite, GreekUnavailable)
    assert not_finite.reason == UnavailableReason.NOT_FINITE

    failing = _option(_RaisingEngine(_process())).gamma()
    assert failing.reason == UnavailableReason.ENGINE_ERROR
    assert "diverged" in failing.detail

    value = _option(AnalyticEuropeanEngine(_process())).delta()
    assert isinstance(value, float)
    assert 0.0 < value < 1.0


def test_unknown_greek_name_is_rejected():
    with pytest.raises(ValueError, match="unknown greek"):
        _option(AnalyticEuropeanEngine(_process())).greek("vanna")


def test_expired_option_is_worth_zero_with_zero_greeks():
    option = VanillaOption(
        PlainVanillaPayoff(OptionRight.PUT, 100.0),
        european_exercise(SETTLEMENT),
        EvaluationClock(SETTLEMENT),
    )
    option.set_pricing_engine(_RaisingEngine(_process()))

    assert option.is_expired()
    assert option.npv() == 0.0
    assert option.delta() == 0.0
    assert option.elasticity() == 0.0


def test_option_without_engine_raises_runtime_error():
    with pytest.raises(RuntimeError, match="no pricing engine"):
        _option(None).npv()


def test_american_exercise_window_must_be_ordered():
    with pytest.raises(ValueError, match="ends before it starts"):
        american_exercise(MATURITY, SETTLEMENT)


def test_implied_volatility_recovers_input_without_touching_quotes():
    process = _process(volatility=0.35)
    target = bs_price(S=100.0, K=100.0, T=T, sigma=0.2, r=0.01, option_type="call")
    option = _option(AnalyticEuropeanEngine(process))

    implied = option.implied_volatility(target, process, AnalyticEuropeanEngine)

    assert implied == pytest.approx(0.2, abs=1e-3)
    assert process.volatility.black_vol() == 0.35


def test_implied_volatility_rejects_unreachable_targets():
    process = _process()
    option = _option(AnalyticEuropeanEngine(process))

    with pytest.raises(ValueError, match="positive"):
        option.implied_volatility(0.0, process, AnalyticEuropeanEngine)
    with pytest.raises(ValueError, match="reproduces the target"):
        option.implied_volatility(150.0, process, AnalyticEuropeanEngine)
