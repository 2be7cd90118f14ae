"""Closed-form approximations for American vanilla options.

- Barone-Adesi & Whaley (1987): quadratic approximation of the early-exercise
  premium with a critical price found by root search.
- Bjerksund & Stensland (1993): flat exercise boundary approximation; puts
  are priced through the put-call transformation.
"""

from __future__ import annotations

import numpy as np
from scipy.optimize import brentq
from scipy.stats import norm

from option_valuation.models.black_scholes import bs_d1_d2, bs_price
from option_valuation.types import OptionRight, OptionRightInput, normalize_option_right


def _check_inputs(S: float, K: float, T: float, sigma: float) -> None:
    if S <= 0 or K <= 0:
        raise ValueError("S and K must be positive")
    if T <= 0 or sigma <= 0:
        raise ValueError("T and sigma must be positive")


def _baw_m_over_k(r: float, T: float, sigma: float) -> float:
    # 2r / (sigma^2 (1 - e^{-rT})) tends to 2 / (sigma^2 T) as r -> 0.
    if abs(r * T) < 1e-12:
        return 2.0 / (sigma**2 * T)
    return 2.0 * r / (sigma**2 * (1.0 - np.exp(-r * T)))


def baw_critical_price(
    K: float,
    T: float,
    sigma: float,
    r: float,
    q: float,
    option_type: OptionRightInput,
    max_doublings: int = 100,
) -> float:
    """Spot level beyond which immediate exercise is optimal."""
    right = normalize_option_right(option_type)
    n = 2.0 * (r - q) / sigma**2
    disc_q = np.exp(-q * T)
    root = np.sqrt((n - 1.0) ** 2 + 4.0 * _baw_m_over_k(r, T, sigma))

    if right == OptionRight.CALL:
        q2 = 0.5 * (-(n - 1.0) + root)

        def excess(s: float) -> float:
            d1, _ = bs_d1_d2(s, K, T, sigma, r, q)
            european = bs_price(s, K, T, sigma, r, q, right)
            return s - K - european - (1.0 - disc_q * norm.cdf(d1)) * s / q2

        low, high = K, 2.0 * K
        for _ in range(max_doublings):
            if excess(high) > 0:
                break
            low, high = high, 2.0 * high
        else:
            raise ValueError("could not bracket the critical call price")
        return float(brentq(excess, low, high, xtol=1e-10 * K))

    q1 = 0.5 * (-(n - 1.0) - root)

    def shortfall(s: float) -> float:
        d1, _ = bs_d1_d2(s, K, T, sigma, r, q)
        european = bs_price(s, K, T, sigma, r, q, right)
        return K - s - european + (1.0 - disc_q * norm.cdf(-d1)) * s / q1

    low = K * 1e-8
    if shortfall(low) <= 0:
        raise ValueError("could not bracket the critical put price")
    return float(brentq(shortfall, low, K, xtol=1e-10 * K))


def barone_adesi_whaley_price(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
) -> float:
    """Barone-Adesi & Whaley American option value.

    Calls on non-dividend-paying underlyings and puts with non-positive rates
    carry no early-exercise premium and are priced as European.
    """
    _check_inputs(S, K, T, sigma)
    right = normalize_option_right(option_type)
    european = bs_price(S, K, T, sigma, r, q, right)

    if right == OptionRight.CALL and q <= 0:
        return european
    if right == OptionRight.PUT and r <= 0:
        return european

    n = 2.0 * (r - q) / sigma**2
    root = np.sqrt((n - 1.0) ** 2 + 4.0 * _baw_m_over_k(r, T, sigma))
    disc_q = np.exp(-q * T)
    critical = baw_critical_price(K, T, sigma, r, q, right)
    d1_star, _ = bs_d1_d2(critical, K, T, sigma, r, q)

    if right == OptionRight.CALL:
        if S >= critical:
            return float(S - K)
        q2 = 0.5 * (-(n - 1.0) + root)
        a2 = (critical / q2) * (1.0 - disc_q * norm.cdf(d1_star))
        return float(european + a2 * (S / critical) ** q2)

    if S <= critical:
        return float(K - S)
    q1 = 0.5 * (-(n - 1.0) - root)
    a1 = -(critical / q1) * (1.0 - disc_q * norm.cdf(-d1_star))
    return float(european + a1 * (S / critical) ** q1)


def _bs93_phi(
    S: float, T: float, gamma: float, H: float, I: float, r: float, b: float, sigma: float
) -> float:
    sqrt_t = np.sqrt(T)
    lam = (-r + gamma * b + 0.5 * gamma * (gamma - 1.0) * sigma**2) * T
    d = -(np.log(S / H) + (b + (gamma - 0.5) * sigma**2) * T) / (sigma * sqrt_t)
    kappa = 2.0 * b / sigma**2 + (2.0 * gamma - 1.0)
    return float(
        np.exp(lam)
        * S**gamma
        * (
            norm.cdf(d)
            - (I / S) ** kappa * norm.cdf(d - 2.0 * np.log(I / S) / (sigma * sqrt_t))
        )
    )


def _bs93_call(S: float, K: float, T: float, r: float, b: float, sigma: float) -> float:
    """Bjerksund-Stensland call with cost of carry `b`."""
    if b >= r:
        return bs_price(S, K, T, sigma, r, r - b, OptionRight.CALL)

    beta = (0.5 - b / sigma**2) + np.sqrt((b / sigma**2 - 0.5) ** 2 + 2.0 * r / sigma**2)
    b_inf = beta / (beta - 1.0) * K
    b_zero = max(K, r / (r - b) * K)
    ht = -(b * T + 2.0 * sigma * np.sqrt(T)) * b_zero / (b_inf - b_zero)
    trigger = b_zero + (b_inf - b_zero) * (1.0 - np.exp(ht))

    if S >= trigger:
        return float(S - K)

    alpha = (trigger - K) * trigger ** (-beta)
    return float(
        alpha * S**beta
        - alpha * _bs93_phi(S, T, beta, trigger, trigger, r, b, sigma)
        + _bs93_phi(S, T, 1.0, trigger, trigger, r, b, sigma)
        - _bs93_phi(S, T, 1.0, K, trigger, r, b, sigma)
        - K * _bs93_phi(S, T, 0.0, trigger, trigger, r, b, sigma)
        + K * _bs93_phi(S, T, 0.0, K, trigger, r, b, sigma)
    )


def bjerksund_stensland_price(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
) -> float:
    """Bjerksund & Stensland (1993) American option value."""
    _check_inputs(S, K, T, sigma)
    right = normalize_option_right(option_type)
    b = r - q
    if right == OptionRight.CALL:
        return _bs93_call(S, K, T, r, b, sigma)
    # Put-call transformation: P(S, K, r, b) = C(K, S, r - b, -b).
    return _bs93_call(K, S, T, r - b, -b, sigma)
