import numpy as np
import pytest

from option_valuation.models import (
    barone_adesi_whaley_price,
    bjerksund_stensland_price,
    bs_d1_d2,
    bs_delta,
    bs_elasticity,
    bs_greeks,
    bs_price,
    integral_price,
)


def test_black_scholes_reference_values():
    call = bs_price(S=100.0, K=100.0, T=1.0, sigma=0.2, r=0.05, option_type="call")
    put = bs_price(S=100.0, K=100.0, T=1.0, sigma=0.2, r=0.05, option_type="put")

    assert call == pytest.approx(10.4506, abs=1e-4)
    assert put == pytest.approx(5.5735, abs=1e-4)


def test_black_scholes_put_call_parity_with_dividends():
    S, K, T, sigma, r, q = 105.0, 100.0, 0.75, 0.3, 0.03, 0.02
    call = bs_price(S, K, T, sigma, r, q, "C")
    put = bs_price(S, K, T, sigma, r, q, "P")

    assert call - put == pytest.approx(S * np.exp(-q * T) - K * np.exp(-r * T))


def test_d1_d2_rejects_degenerate_inputs():
    with pytest.raises(ValueError, match="positive"):
        bs_d1_d2(S=100.0, K=100.0, T=0.0, sigma=0.2)
    with pytest.raises(ValueError, match="positive"):
        bs_d1_d2(S=100.0, K=100.0, T=1.0, sigma=0.0)


def test_greeks_dict_contains_elasticity_consistent_with_delta():
    out = bs_greeks(S=100.0, K=95.0, T=0.5, sigma=0.25, r=0.01, q=0.0, option_type="call")

    assert set(out) == {"price", "delta", "gamma", "vega", "theta", "rho", "elasticity"}
    assert out["elasticity"] == pytest.approx(out["delta"] * 100.0 / out["price"])
    assert out["elasticity"] > 1.0


@pytest.mark.parametrize(("right", "sign"), [("call", 1.0), ("put", -1.0)])
def test_elasticity_sign_follows_delta(right: str, sign: float):
    value = bs_elasticity(S=100.0, K=100.0, T=0.25, sigma=0.2, r=0.01, option_type=right)
    delta = bs_delta(S=100.0, K=100.0, T=0.25, sigma=0.2, r=0.01, option_type=right)

    assert np.sign(value) == sign
    assert np.sign(delta) == sign


@pytest.mark.parametrize("right", ["call", "put"])
def test_integral_matches_black_scholes(right: str):
    args = dict(S=102.0, K=100.0, T=45 / 365.0, sigma=0.25, r=0.03, q=0.01)

    assert integral_price(**args, option_type=right) == pytest.approx(
        bs_price(**args, option_type=right), rel=1e-6
    )


def test_barone_adesi_whaley_call_without_dividend_is_european():
    args = dict(S=100.0, K=100.0, T=0.5, sigma=0.2, r=0.05, q=0.0, option_type="call")

    assert barone_adesi_whaley_price(**args) == pytest.approx(bs_price(**args))


def test_barone_adesi_whaley_put_without_rate_is_european():
    args = dict(S=100.0, K=100.0, T=0.5, sigma=0.2, r=0.0, q=0.01, option_type="put")

    assert barone_adesi_whaley_price(**args) == pytest.approx(bs_price(**args))


@pytest.mark.parametrize("pricer", [barone_adesi_whaley_price, bjerksund_stensland_price])
@pytest.mark.parametrize(("right", "q"), [("put", 0.0), ("call", 0.05)])
def test_american_approximations_are_not_below_european(pricer, right: str, q: float):
    args = dict(S=100.0, K=100.0, T=1.0, sigma=0.25, r=0.05, q=q, option_type=right)
    european = bs_price(**args)
    american = pricer(**args)

    assert american >= european - 1e-10


def test_american_approximations_agree_on_a_standard_put():
    args = dict(S=90.0, K=100.0, T=0.5, sigma=0.3, r=0.08, q=0.0, option_type="put")

    baw = barone_adesi_whaley_price(**args)
    bs93 = bjerksund_stensland_price(**args)

    assert baw == pytest.approx(bs93, abs=0.25)
    assert baw >= 10.0


def test_deep_in_the_money_american_put_is_worth_intrinsic():
    value = barone_adesi_whaley_price(
        S=40.0, K=100.0, T=0.5, sigma=0.2, r=0.05, q=0.0, option_type="put"
    )

    assert value == pytest.approx(60.0)
