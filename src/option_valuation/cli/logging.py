from __future__ import annotations

from typing import Any, Mapping

from option_valuation.settings import DEFAULT_LOGGING
from option_valuation.utils.logging_config import setup_logging


def add_logging_args(parser) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (e.g., INFO, DEBUG).",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional log file path.",
    )
    parser.add_argument(
        "--diagnostics",
        dest="log_diagnostics",
        action="store_true",
        default=None,
        help="Show DEBUG records for degraded prices and Greek fallbacks.",
    )
    parser.add_argument(
        "--no-color",
        dest="log_color",
        action="store_false",
        help="Disable colored console logs.",
    )
    parser.set_defaults(log_color=None)


def logging_overrides_from_args(args) -> dict[str, Any]:
    """Map parsed `--log-*` flags onto `logging:` config keys (unset flags skipped)."""
    pairs = {
        "level": getattr(args, "log_level", None),
        "file": getattr(args, "log_file", None),
        "color": getattr(args, "log_color", None),
        "diagnostics": getattr(args, "log_diagnostics", None),
    }
    return {key: value for key, value in pairs.items() if value is not None}


def _normalize_logging_config(
    config: Mapping[str, Any] | None
) -> dict[str, Any]:
    merged = dict(DEFAULT_LOGGING)
    if not config:
        return merged

    for key in DEFAULT_LOGGING:
        if key in config and config[key] is not None:
            merged[key] = config[key]
    return merged


def setup_logging_from_config(config: Mapping[str, Any] | None) -> None:
    log_cfg = _normalize_logging_config(config)
    setup_logging(
        log_cfg["level"],
        fmt_console=log_cfg["format"],
        log_file=log_cfg["file"],
        colored=log_cfg["color"],
        diagnostics=log_cfg["diagnostics"],
    )
