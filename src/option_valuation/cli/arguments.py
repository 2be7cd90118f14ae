from __future__ import annotations

import datetime as dt
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any


def add_config_arg(parser, *, default: str | None = None) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=default,
        help="Path to a YAML file with `pricing`, `logging`, and chain sections.",
    )


def add_model_arg(parser, *, default: str = "black_scholes") -> None:
    parser.add_argument(
        "--model",
        type=str,
        default=default,
        help="Catalog name of the pricing model (see PRICE_MODELS).",
    )
    parser.add_argument(
        "--no-greek-approximation",
        dest="enable_greek_approximation",
        action="store_false",
        help="Report 0 for Greeks the engine cannot compute instead of bumping.",
    )
    parser.set_defaults(enable_greek_approximation=None)


def pricing_overrides_from_args(args) -> dict[str, Any]:
    value = getattr(args, "enable_greek_approximation", None)
    if value is None:
        return {}
    return {"enable_greek_approximation": value}


def resolve_path(value: str | Path | None) -> Path | None:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    expanded = os.path.expandvars(os.path.expanduser(str(value)))
    return Path(expanded)


def add_print_config_arg(parser) -> None:
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print the merged config (JSON) and exit.",
    )


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, (Path, dt.date)):
        return str(obj)
    if isinstance(obj, Mapping):
        return {str(k): _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(v) for v in obj]
    return obj


def print_config(config: Mapping[str, Any]) -> None:
    print(json.dumps(_jsonable(config), indent=2, sort_keys=True))
