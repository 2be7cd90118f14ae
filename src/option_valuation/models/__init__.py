"""Pure numerical option-pricing models used by the engines."""

from .american_approximations import (
    barone_adesi_whaley_price,
    baw_critical_price,
    bjerksund_stensland_price,
)
from .binomial_tree import (
    TREE_RULES,
    BinomialLattice,
    TreeSolution,
    binomial_tree_price,
)
from .black_scholes import (
    bs_d1_d2,
    bs_delta,
    bs_elasticity,
    bs_gamma,
    bs_greeks,
    bs_price,
    bs_rho,
    bs_theta,
    bs_vega,
)
from .finite_difference import FDSolution, crank_nicolson_price
from .integral import integral_price

__all__ = [
    "bs_d1_d2",
    "bs_price",
    "bs_delta",
    "bs_gamma",
    "bs_vega",
    "bs_theta",
    "bs_rho",
    "bs_elasticity",
    "bs_greeks",
    "barone_adesi_whaley_price",
    "baw_critical_price",
    "bjerksund_stensland_price",
    "integral_price",
    "crank_nicolson_price",
    "FDSolution",
    "binomial_tree_price",
    "BinomialLattice",
    "TreeSolution",
    "TREE_RULES",
]
