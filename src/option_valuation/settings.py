"""Process-wide pricing defaults and their YAML configuration layer.

Settings are resolved in three layers, later layers winning key by key:

1. `DEFAULT_CONFIG` below
2. an optional YAML file (top-level mapping, `pricing:` and `logging:` keys)
3. explicit overrides passed by the caller (e.g. parsed CLI flags)

Price models read the current settings once, when they are constructed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_LOGGING: dict[str, Any] = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)s %(shortname)s - %(message)s",
    "file": None,
    "color": True,
    "diagnostics": False,
}

DEFAULT_CONFIG: dict[str, Any] = {
    "pricing": {
        "enable_greek_approximation": True,
        "default_risk_free_rate": 0.01,
        "default_dividend_rate": 0.0,
        "settlement_days": 3,
        "calendar": "XNYS",
        "time_steps_binomial": 100,
        "time_steps_fd": 100,
    },
    "logging": DEFAULT_LOGGING,
}


@dataclass(frozen=True)
class PricingSettings:
    """Defaults applied by the model catalog and the valuation orchestrator."""

    enable_greek_approximation: bool = True
    default_risk_free_rate: float = 0.01
    default_dividend_rate: float = 0.0
    settlement_days: int = 3
    calendar: str = "XNYS"
    time_steps_binomial: int = 100
    time_steps_fd: int = 100

    def __post_init__(self) -> None:
        if self.settlement_days < 0:
            raise ValueError("settlement_days must be >= 0")
        if self.time_steps_binomial < 2:
            raise ValueError("time_steps_binomial must be >= 2")
        if self.time_steps_fd < 2:
            raise ValueError("time_steps_fd must be >= 2")
        if not self.calendar:
            raise ValueError("calendar must be a non-empty exchange code")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> PricingSettings:
        if not data:
            return cls()
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown pricing settings: {unknown}")
        return cls(**dict(data))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AppConfig:
    """Fully resolved configuration for scripts."""

    pricing: PricingSettings = field(default_factory=PricingSettings)
    logging: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOGGING))
    extra: dict[str, Any] = field(default_factory=dict)


def load_yaml_mapping(path: str | Path | None) -> dict[str, Any]:
    """Read a YAML file whose top level must be a mapping (`{}` for `None`)."""
    if path is None:
        return {}

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")

    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a YAML mapping at the top level.")
    return data


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge `updates` into a copy of `base`; lists are replaced."""
    merged: dict[str, Any] = {
        key: deep_merge(value, {}) if isinstance(value, Mapping) else value
        for key, value in base.items()
    }
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Resolve defaults < YAML file < overrides into an `AppConfig`."""
    config = deep_merge(DEFAULT_CONFIG, load_yaml_mapping(path))
    if overrides:
        config = deep_merge(config, overrides)

    extra = {k: v for k, v in config.items() if k not in ("pricing", "logging")}
    return AppConfig(
        pricing=PricingSettings.from_mapping(config["pricing"]),
        logging=dict(config["logging"] or {}),
        extra=extra,
    )


def load_settings(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> PricingSettings:
    """Resolve only the `pricing` section; `overrides` are pricing keys."""
    pricing_overrides = {"pricing": dict(overrides)} if overrides else None
    return load_config(path, pricing_overrides).pricing


_current = PricingSettings()


def get_settings() -> PricingSettings:
    return _current


def set_settings(settings: PricingSettings) -> PricingSettings:
    """Install new process-wide defaults and return the previous ones."""
    global _current
    if not isinstance(settings, PricingSettings):
        raise TypeError("settings must be a PricingSettings instance")
    previous, _current = _current, settings
    return previous
