"""Black-Scholes-Merton pricing and Greeks for European options."""

from __future__ import annotations

import numpy as np
from scipy.stats import norm

from option_valuation.types import OptionRight, OptionRightInput, normalize_option_right


def bs_d1_d2(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
) -> tuple[float, float]:
    """Compute d1 and d2 for Black-Scholes with continuous dividend yield."""
    if T <= 0 or sigma <= 0:
        raise ValueError("T and sigma must be positive")
    d1 = (np.log(S / K) + (r - q + 0.5 * sigma**2) * T) / (sigma * np.sqrt(T))
    d2 = d1 - sigma * np.sqrt(T)
    return d1, d2


def bs_price(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
) -> float:
    """Black-Scholes price with continuous dividend yield."""
    right = normalize_option_right(option_type)
    d1, d2 = bs_d1_d2(S, K, T, sigma, r, q)

    if right == OptionRight.CALL:
        return float(
            S * np.exp(-q * T) * norm.cdf(d1) - K * np.exp(-r * T) * norm.cdf(d2)
        )
    return float(
        K * np.exp(-r * T) * norm.cdf(-d2) - S * np.exp(-q * T) * norm.cdf(-d1)
    )


def bs_delta(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
) -> float:
    """Black-Scholes spot delta."""
    right = normalize_option_right(option_type)
    d1, _ = bs_d1_d2(S, K, T, sigma, r, q)
    delta_call = np.exp(-q * T) * norm.cdf(d1)
    if right == OptionRight.CALL:
        return float(delta_call)
    return float(delta_call - np.exp(-q * T))


def bs_gamma(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
) -> float:
    """Black-Scholes gamma."""
    d1, _ = bs_d1_d2(S, K, T, sigma, r, q)
    return float(np.exp(-q * T) * norm.pdf(d1) / (S * sigma * np.sqrt(T)))


def bs_vega(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
) -> float:
    """Black-Scholes vega per +1.0 volatility."""
    d1, _ = bs_d1_d2(S, K, T, sigma, r, q)
    return float(S * np.exp(-q * T) * norm.pdf(d1) * np.sqrt(T))


def bs_theta(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
) -> float:
    """Black-Scholes theta per +1.0 calendar year."""
    right = normalize_option_right(option_type)
    d1, d2 = bs_d1_d2(S, K, T, sigma, r, q)
    term1 = -(S * np.exp(-q * T) * norm.pdf(d1) * sigma) / (2 * np.sqrt(T))

    if right == OptionRight.CALL:
        term2 = q * S * np.exp(-q * T) * norm.cdf(d1)
        term3 = -r * K * np.exp(-r * T) * norm.cdf(d2)
    else:
        term2 = -q * S * np.exp(-q * T) * norm.cdf(-d1)
        term3 = r * K * np.exp(-r * T) * norm.cdf(-d2)

    return float(term1 + term2 + term3)


def bs_rho(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
) -> float:
    """Black-Scholes rho per +1.0 rate."""
    right = normalize_option_right(option_type)
    _, d2 = bs_d1_d2(S, K, T, sigma, r, q)
    if right == OptionRight.CALL:
        return float(K * T * np.exp(-r * T) * norm.cdf(d2))
    return float(-K * T * np.exp(-r * T) * norm.cdf(-d2))


def bs_elasticity(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
    eps: float = 1e-12,
) -> float:
    """Percentage price change per percentage spot change (delta * S / price).

    A worthless option with no delta has zero elasticity; a worthless option
    with non-zero delta has no finite elasticity and returns +/-inf.
    """
    price = bs_price(S, K, T, sigma, r, q, option_type)
    delta = bs_delta(S, K, T, sigma, r, q, option_type)
    if price > eps:
        return float(delta * S / price)
    if abs(delta) < eps:
        return 0.0
    return float(np.inf) if delta > 0 else float(-np.inf)


def bs_greeks(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
) -> dict[str, float]:
    """Return Black-Scholes price and every Greek for one option."""
    return {
        "price": bs_price(S, K, T, sigma, r, q, option_type),
        "delta": bs_delta(S, K, T, sigma, r, q, option_type),
        "gamma": bs_gamma(S, K, T, sigma, r, q),
        "vega": bs_vega(S, K, T, sigma, r, q),
        "theta": bs_theta(S, K, T, sigma, r, q, option_type),
        "rho": bs_rho(S, K, T, sigma, r, q, option_type),
        "elasticity": bs_elasticity(S, K, T, sigma, r, q, option_type),
    }
