"""Compare every catalog price model on one contract.

This script demonstrates the valuation flow:
1) describe the security and the listed contract,
2) build each model from the catalog,
3) evaluate it and read implied volatility and Greeks,
4) print the comparison table.
"""

from __future__ import annotations

import argparse
import datetime as dt

import pandas as pd

from option_valuation import (
    PRICE_MODELS,
    OptionContract,
    OptionSecurity,
    OptionStyle,
    UnderlyingObservation,
    get_price_model,
)
from option_valuation.utils import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare catalog price models.")
    parser.add_argument("--spot", type=float, default=100.0)
    parser.add_argument("--strike", type=float, default=100.0)
    parser.add_argument("--right", choices=["call", "put"], default="put")
    parser.add_argument("--volatility", type=float, default=0.25)
    parser.add_argument("--days", type=int, default=60)
    parser.add_argument("--market-price", type=float, default=4.0)
    parser.add_argument("--diagnostics", action="store_true")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    setup_logging("INFO", colored=True, diagnostics=args.diagnostics)

    today = dt.date.today()
    security = OptionSecurity(
        symbol="DEMO",
        underlying=UnderlyingObservation(price=args.spot),
        volatility=args.volatility,
    )
    contract = OptionContract(
        strike=args.strike,
        right=args.right,
        expiry=today + dt.timedelta(days=args.days),
        time=today,
        style=OptionStyle.AMERICAN,
        market_price=args.market_price,
    )

    rows = []
    for name in PRICE_MODELS:
        result = get_price_model(name).evaluate(security, None, contract)
        rows.append(
            {
                "model": name,
                "price": result.price,
                "implied_volatility": result.implied_volatility(),
                **result.greeks().to_dict(),
            }
        )

    with pd.option_context("display.width", 160, "display.float_format", "{:.4f}".format):
        print(pd.DataFrame(rows).set_index("model"))


if __name__ == "__main__":
    main()
