"""Evaluate a whole option chain into a pandas DataFrame."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd

from option_valuation.pricing_model import OptionPriceModel
from option_valuation.types import MarketContext, OptionContract, OptionSecurity

logger = logging.getLogger(__name__)

CONTRACT_COLUMNS = ["symbol", "strike", "right", "style", "expiry", "market_price"]
CHAIN_COLUMNS = CONTRACT_COLUMNS + [
    "price",
    "implied_volatility",
    "delta",
    "gamma",
    "vega",
    "theta",
    "rho",
    "elasticity",
]


def _contract_columns(contract: OptionContract) -> dict[str, object]:
    return {
        "symbol": contract.symbol,
        "strike": float(contract.strike),
        "right": contract.right.value,
        "style": contract.style.value,
        "expiry": contract.expiry_date,
        "market_price": float(contract.market_price),
    }


def evaluate_chain(
    model: OptionPriceModel,
    security: OptionSecurity,
    market_context: MarketContext,
    contracts: Iterable[OptionContract],
) -> pd.DataFrame:
    """Value each contract once; one row per contract, in input order.

    Implied volatility and every Greek are read exactly once per contract.
    A contract whose evaluation fails contributes a row of zeros; contract
    fields that cannot be read are left empty.
    """
    rows = []
    for contract in contracts:
        result = model.evaluate(security, market_context, contract)
        try:
            columns = _contract_columns(contract)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.debug("Cannot describe contract %r: %s", contract, exc)
            columns = dict.fromkeys(CONTRACT_COLUMNS)
        rows.append(
            {
                **columns,
                "price": result.price,
                "implied_volatility": result.implied_volatility(),
                **result.greeks().to_dict(),
            }
        )

    logger.info(
        "Evaluated %d contracts on %s with %s",
        len(rows),
        getattr(security, "symbol", security),
        model.name,
    )
    return pd.DataFrame(rows, columns=CHAIN_COLUMNS)
