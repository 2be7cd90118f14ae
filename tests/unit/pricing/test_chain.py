from __future__ import annotations

from types import SimpleNamespace

import pandas as pd
import pytest

from option_valuation.chain import CHAIN_COLUMNS, evaluate_chain
from option_valuation.engines import AnalyticEuropeanEngine
from option_valuation.price_models import black_scholes, create_price_model


def test_evaluate_chain_returns_one_row_per_contract(make_security, make_contract):
    contracts = [
        make_contract(strike=95.0, right="call"),
        make_contract(strike=100.0, right="call"),
        make_contract(strike=105.0, right="put"),
    ]

    frame = evaluate_chain(black_scholes(), make_security(), None, contracts)

    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == CHAIN_COLUMNS
    assert frame["strike"].tolist() == [95.0, 100.0, 105.0]
    assert frame["right"].tolist() == ["call", "call", "put"]
    assert (frame["price"] > 0).all()
    assert frame["delta"].iloc[0] > frame["delta"].iloc[1] > 0 > frame["delta"].iloc[2]


def test_evaluate_chain_keeps_going_past_a_failing_contract(make_security, make_contract):
    def engine(contract, process):
        if contract.strike == 100.0:
            raise RuntimeError("bad strike")
        return AnalyticEuropeanEngine(process)

    contracts = [make_contract(strike=k) for k in (95.0, 100.0, 105.0)]

    model = create_price_model(pricing_engine_func_ex=engine)
    frame = evaluate_chain(model, make_security(), None, contracts)

    assert len(frame) == 3
    failed = frame.iloc[1]
    assert failed["price"] == 0.0
    assert failed[["implied_volatility", "delta", "gamma", "vega", "theta", "rho"]].eq(0.0).all()
    assert frame.iloc[0]["price"] > 0
    assert frame.iloc[2]["price"] > 0


def test_evaluate_chain_reports_implied_volatility(make_security, make_contract):
    quoted = black_scholes().evaluate(make_security(volatility=0.25), None, make_contract()).price
    contracts = [make_contract(market_price=quoted)]

    frame = evaluate_chain(black_scholes(), make_security(volatility=0.2), None, contracts)

    assert frame["implied_volatility"].iloc[0] == pytest.approx(0.25, abs=1e-3)
    assert frame["market_price"].iloc[0] == pytest.approx(quoted)


def test_evaluate_chain_empty_input(make_security):
    frame = evaluate_chain(black_scholes(), make_security(), None, [])

    assert frame.empty
    assert list(frame.columns) == CHAIN_COLUMNS


def test_evaluate_chain_survives_unreadable_contract(make_security, make_contract):
    contracts = [
        make_contract(strike=95.0),
        SimpleNamespace(strike=100.0),
        make_contract(strike=105.0),
    ]

    frame = evaluate_chain(black_scholes(), make_security(), None, contracts)

    assert len(frame) == 3
    broken = frame.iloc[1]
    assert pd.isna(broken["symbol"])
    assert pd.isna(broken["strike"])
    assert broken["price"] == 0.0
    assert broken[["implied_volatility", "delta", "vega", "elasticity"]].eq(0.0).all()
    assert frame["strike"].iloc[[0, 2]].tolist() == [95.0, 105.0]
