"""Recombining binomial trees for vanilla options.

Every tree-construction rule reduces to the same log-space lattice:

    S(i, j) = S * exp(i * drift_step + (2 * j - i) * dx),  j = 0..i

with up-move probability `pu`. Rules differ only in how they choose
`drift_step`, `dx` and `pu` (and, for Leisen-Reimer/Joshi, an odd step count).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from option_valuation.types import OptionRight, OptionRightInput, normalize_option_right


@dataclass(frozen=True)
class BinomialLattice:
    """Node layout and branching probability of one tree."""

    spot: float
    steps: int
    dt: float
    drift_step: float
    dx: float
    pu: float

    def __post_init__(self) -> None:
        if self.steps < 1:
            raise ValueError("steps must be >= 1")
        if not 0.0 <= self.pu <= 1.0:
            raise ValueError(
                "Invalid risk-neutral probability; increase steps or check inputs."
            )

    def underlying(self, step: int) -> np.ndarray:
        j = np.arange(step + 1)
        return self.spot * np.exp(step * self.drift_step + (2 * j - step) * self.dx)


@dataclass(frozen=True)
class TreeInputs:
    spot: float
    strike: float
    T: float
    sigma: float
    r: float
    q: float
    steps: int

    @property
    def dt(self) -> float:
        return self.T / self.steps

    @property
    def drift_per_step(self) -> float:
        return (self.r - self.q - 0.5 * self.sigma**2) * self.dt

    @property
    def variance_per_step(self) -> float:
        return self.sigma**2 * self.dt


TreeRule = Callable[[TreeInputs], BinomialLattice]


def _from_moves(inputs: TreeInputs, up: float, down: float, pu: float) -> BinomialLattice:
    log_up, log_down = np.log(up), np.log(down)
    return BinomialLattice(
        spot=inputs.spot,
        steps=inputs.steps,
        dt=inputs.dt,
        drift_step=0.5 * (log_up + log_down),
        dx=0.5 * (log_up - log_down),
        pu=pu,
    )


def _odd(steps: int) -> int:
    return steps if steps % 2 == 1 else steps + 1


def jarrow_rudd(inputs: TreeInputs) -> BinomialLattice:
    """Equal probabilities, drift carried by the node grid."""
    return BinomialLattice(
        spot=inputs.spot,
        steps=inputs.steps,
        dt=inputs.dt,
        drift_step=inputs.drift_per_step,
        dx=np.sqrt(inputs.variance_per_step),
        pu=0.5,
    )


def cox_ross_rubinstein(inputs: TreeInputs) -> BinomialLattice:
    """Equal jumps, drift carried by the probability."""
    dx = np.sqrt(inputs.variance_per_step)
    return BinomialLattice(
        spot=inputs.spot,
        steps=inputs.steps,
        dt=inputs.dt,
        drift_step=0.0,
        dx=dx,
        pu=0.5 + 0.5 * inputs.drift_per_step / dx,
    )


def additive_equiprobabilities(inputs: TreeInputs) -> BinomialLattice:
    """Equal probabilities with the jump matching the second moment exactly."""
    drift = inputs.drift_per_step
    dx = -0.5 * drift + 0.5 * np.sqrt(
        4.0 * inputs.variance_per_step - 3.0 * drift**2
    )
    return BinomialLattice(
        spot=inputs.spot,
        steps=inputs.steps,
        dt=inputs.dt,
        drift_step=drift,
        dx=dx,
        pu=0.5,
    )


def trigeorgis(inputs: TreeInputs) -> BinomialLattice:
    """Equal jumps sized from variance plus squared drift."""
    drift = inputs.drift_per_step
    dx = np.sqrt(inputs.variance_per_step + drift**2)
    return BinomialLattice(
        spot=inputs.spot,
        steps=inputs.steps,
        dt=inputs.dt,
        drift_step=0.0,
        dx=dx,
        pu=0.5 + 0.5 * drift / dx,
    )


def tian(inputs: TreeInputs) -> BinomialLattice:
    """Moves matching the first three moments of the lognormal step."""
    qv = np.exp(inputs.variance_per_step)
    growth = np.exp(inputs.drift_per_step) * np.sqrt(qv)
    root = np.sqrt(qv * qv + 2.0 * qv - 3.0)
    up = 0.5 * growth * qv * (qv + 1.0 + root)
    down = 0.5 * growth * qv * (qv + 1.0 - root)
    return _from_moves(inputs, up, down, (growth - down) / (up - down))


def _peizer_pratt_inversion(z: float, n: int) -> float:
    if n % 2 != 1:
        raise ValueError("Peizer-Pratt inversion requires an odd number of steps")
    x = (z / (n + 1.0 / 3.0 + 0.1 / (n + 1.0))) ** 2
    x = np.exp(-x * (n + 1.0 / 6.0))
    return 0.5 + np.sign(z) * np.sqrt(0.25 * (1.0 - x))


def _joshi_up_probability(k: float, dj: float) -> float:
    alpha = dj / np.sqrt(8.0)
    alpha2 = alpha * alpha
    alpha3 = alpha * alpha2
    alpha5 = alpha3 * alpha2
    alpha7 = alpha5 * alpha2
    beta = -0.375 * alpha - alpha3
    gamma = (5.0 / 6.0) * alpha5 + (13.0 / 12.0) * alpha3 + (25.0 / 128.0) * alpha
    delta = -0.1025 * alpha - 0.9285 * alpha3 - 1.43 * alpha5 - 0.5 * alpha7
    rootk = np.sqrt(k)
    p = 0.5
    p += alpha / rootk
    p += beta / (k * rootk)
    p += gamma / (k * k * rootk)
    p += delta / (k * k * k * rootk)
    return p


def _strike_centered(
    inputs: TreeInputs, up_probability: Callable[[float, int], float]
) -> BinomialLattice:
    odd = TreeInputs(
        spot=inputs.spot,
        strike=inputs.strike,
        T=inputs.T,
        sigma=inputs.sigma,
        r=inputs.r,
        q=inputs.q,
        steps=_odd(inputs.steps),
    )
    total_variance = inputs.sigma**2 * inputs.T
    growth = np.exp((inputs.r - inputs.q) * odd.dt)
    d2 = (
        np.log(inputs.spot / inputs.strike) + odd.drift_per_step * odd.steps
    ) / np.sqrt(total_variance)
    pu = up_probability(d2, odd.steps)
    pdash = up_probability(d2 + np.sqrt(total_variance), odd.steps)
    up = growth * pdash / pu
    down = (growth - pu * up) / (1.0 - pu)
    return _from_moves(odd, up, down, pu)


def leisen_reimer(inputs: TreeInputs) -> BinomialLattice:
    """Strike-centred tree using Peizer-Pratt normal inversion."""
    return _strike_centered(inputs, _peizer_pratt_inversion)


def joshi(inputs: TreeInputs) -> BinomialLattice:
    """Joshi's fourth-order strike-centred tree."""
    return _strike_centered(
        inputs, lambda dj, n: _joshi_up_probability((n - 1.0) / 2.0, dj)
    )


TREE_RULES: dict[str, TreeRule] = {
    "jarrow_rudd": jarrow_rudd,
    "cox_ross_rubinstein": cox_ross_rubinstein,
    "additive_equiprobabilities": additive_equiprobabilities,
    "trigeorgis": trigeorgis,
    "tian": tian,
    "leisen_reimer": leisen_reimer,
    "joshi": joshi,
}


@dataclass(frozen=True)
class TreeSolution:
    value: float
    delta: float | None
    gamma: float | None


def _intrinsic_value(
    spot: np.ndarray | float, strike: float, right: OptionRight
) -> np.ndarray:
    if right == OptionRight.CALL:
        return np.maximum(np.asarray(spot, dtype=float) - strike, 0.0)
    return np.maximum(strike - np.asarray(spot, dtype=float), 0.0)


def binomial_tree_price(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionRightInput = OptionRight.CALL,
    steps: int = 100,
    american: bool = False,
    rule: TreeRule | str = cox_ross_rubinstein,
) -> TreeSolution:
    """Price a vanilla option by backward induction on a binomial tree.

    Delta and gamma are read from the second time layer; they are `None`
    when the tree has fewer than two steps.

    Raises:
        ValueError: If `steps < 1`, if `T` or `sigma` is not positive, if the
            rule name is unknown, or if the rule yields an invalid probability.
    """
    if steps < 1:
        raise ValueError("steps must be >= 1")
    if T <= 0 or sigma <= 0:
        raise ValueError("T and sigma must be positive")
    if isinstance(rule, str):
        try:
            rule = TREE_RULES[rule]
        except KeyError as e:
            raise ValueError(f"Unknown tree rule: {rule!r}") from e

    right = normalize_option_right(option_type)
    lattice = rule(
        TreeInputs(spot=S, strike=K, T=T, sigma=sigma, r=r, q=q, steps=steps)
    )
    disc = np.exp(-r * lattice.dt)
    pu = lattice.pu

    option_vals = _intrinsic_value(lattice.underlying(lattice.steps), K, right)
    second_layer = option_vals.copy() if lattice.steps == 2 else None

    for step in range(lattice.steps - 1, -1, -1):
        option_vals = disc * (pu * option_vals[1:] + (1.0 - pu) * option_vals[:-1])
        if american:
            intrinsic = _intrinsic_value(lattice.underlying(step), K, right)
            option_vals = np.maximum(option_vals, intrinsic)
        if step == 2:
            second_layer = option_vals.copy()

    if second_layer is None:
        return TreeSolution(value=float(option_vals[0]), delta=None, gamma=None)

    s_dn, s_mid, s_up = lattice.underlying(2)
    p_dn, p_mid, p_up = second_layer
    delta = (p_up - p_dn) / (s_up - s_dn)
    gamma = ((p_up - p_mid) / (s_up - s_mid) - (p_mid - p_dn) / (s_mid - s_dn)) / (
        0.5 * (s_up - s_dn)
    )
    return TreeSolution(value=float(option_vals[0]), delta=float(delta), gamma=float(gamma))
