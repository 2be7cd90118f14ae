"""European vanilla pricing by integrating the payoff against the lognormal density."""

from __future__ import annotations

import numpy as np
from scipy.integrate import quad
from scipy.stats import norm

from option_valuation.types import OptionRight, OptionRightInput, normalize_option_right


def integral_price(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
    width: float = 12.0,
) -> float:
    """Discounted risk-neutral expectation of the payoff.

    The integral runs over the standard-normal driver `z` in `[-width, width]`
    with the payoff kink passed to the quadrature as a breakpoint.
    """
    if S <= 0 or K <= 0:
        raise ValueError("S and K must be positive")
    if T <= 0 or sigma <= 0:
        raise ValueError("T and sigma must be positive")

    right = normalize_option_right(option_type)
    drift = (r - q - 0.5 * sigma**2) * T
    vol = sigma * np.sqrt(T)

    def integrand(z: float) -> float:
        terminal = S * np.exp(drift + vol * z)
        if right == OptionRight.CALL:
            payoff = max(terminal - K, 0.0)
        else:
            payoff = max(K - terminal, 0.0)
        return payoff * norm.pdf(z)

    kink = (np.log(K / S) - drift) / vol
    points = [kink] if -width < kink < width else None
    value, _ = quad(integrand, -width, width, points=points, limit=200)
    return float(np.exp(-r * T) * value)
