#!/usr/bin/env python
"""Value an option chain described in a YAML file.

Typical usage:
    python -m option_valuation.apps.evaluate_chain --config config/evaluate_chain.yml
    python -m option_valuation.apps.evaluate_chain --config chain.yml --model binomial_tian --output out.csv
    option-valuation-chain --config config/evaluate_chain.yml --diagnostics

Config precedence: CLI > YAML > defaults.

Chain layout:

    underlying: {symbol: SPY, price: 450.0, volatility: 0.18}
    contracts:
      - {strike: 450, right: call, expiry: 2024-03-15, time: 2024-02-01}
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

import pandas as pd

from option_valuation.chain import evaluate_chain
from option_valuation.cli import (
    add_config_arg,
    add_logging_args,
    add_model_arg,
    add_print_config_arg,
    logging_overrides_from_args,
    pricing_overrides_from_args,
    print_config,
    resolve_path,
    setup_logging_from_config,
)
from option_valuation.price_models import get_price_model
from option_valuation.settings import AppConfig, load_config, set_settings
from option_valuation.types import OptionContract, OptionSecurity, UnderlyingObservation


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Value an option chain from YAML.")
    add_config_arg(parser)
    add_model_arg(parser, default=None)
    add_logging_args(parser)
    add_print_config_arg(parser)
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional CSV path for the valued chain.",
    )
    return parser.parse_args(argv)


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    pricing = pricing_overrides_from_args(args)
    if pricing:
        overrides["pricing"] = pricing

    logging_overrides = logging_overrides_from_args(args)
    if logging_overrides:
        overrides["logging"] = logging_overrides

    if args.model is not None:
        overrides["model"] = args.model
    if args.output is not None:
        overrides["output"] = args.output

    return overrides


def _security_from_config(data: dict[str, Any] | None) -> OptionSecurity:
    if not data or "price" not in data:
        raise ValueError("underlying.price must be set.")
    return OptionSecurity(
        symbol=str(data.get("symbol", "")),
        underlying=UnderlyingObservation(price=float(data["price"])),
        volatility=float(data.get("volatility", 0.0)),
    )


def _contracts_from_config(items: list[dict[str, Any]] | None) -> list[OptionContract]:
    if not items:
        raise ValueError("contracts must be a non-empty list.")
    return [OptionContract(**item) for item in items]


def run(config: AppConfig) -> pd.DataFrame:
    """Value the configured chain with the configured model."""
    logger = logging.getLogger(__name__)

    set_settings(config.pricing)
    model_name = config.extra.get("model") or "black_scholes"
    model = get_price_model(model_name)
    security = _security_from_config(config.extra.get("underlying"))
    contracts = _contracts_from_config(config.extra.get("contracts"))

    logger.info("Model:      %s", model_name)
    logger.info("Underlying: %s @ %s", security.symbol, security.underlying_price)
    logger.info("Contracts:  %d", len(contracts))
    logger.info("Settings:   %s", config.pricing.to_dict())

    return evaluate_chain(model, security, None, contracts)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    config = load_config(args.config, _build_overrides(args))

    if args.print_config:
        print_config(
            {"pricing": config.pricing.to_dict(), "logging": config.logging, **config.extra}
        )
        return

    setup_logging_from_config(config.logging)
    logger = logging.getLogger(__name__)

    frame = run(config)
    print(frame.to_string(index=False))

    output = resolve_path(config.extra.get("output"))
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(output, index=False)
        logger.info("Wrote %d rows to %s", len(frame), output)


if __name__ == "__main__":
    main()
