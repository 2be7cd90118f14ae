from __future__ import annotations

import importlib
from pathlib import Path

import pytest

from option_valuation.settings import PricingSettings, get_settings, set_settings


def test_load_yaml_mapping_none_returns_empty() -> None:
    mod = importlib.import_module("option_valuation.settings")
    assert mod.load_yaml_mapping(None) == {}


def test_load_yaml_mapping_missing_file_raises(tmp_path: Path) -> None:
    mod = importlib.import_module("option_valuation.settings")
    with pytest.raises(FileNotFoundError):
        mod.load_yaml_mapping(tmp_path / "missing.yml")


def test_load_yaml_mapping_non_mapping_raises(write_yaml) -> None:
    mod = importlib.import_module("option_valuation.settings")
    path = write_yaml("bad.yml", ["a", "b"])
    with pytest.raises(ValueError, match="YAML mapping"):
        mod.load_yaml_mapping(path)


def test_deep_merge_merges_nested_and_replaces_lists() -> None:
    mod = importlib.import_module("option_valuation.settings")
    base = {"a": 1, "b": {"c": 1, "d": 2}, "e": [1, 2]}
    updates = {"b": {"c": 99}, "e": [3], "f": 5}

    merged = mod.deep_merge(base, updates)

    assert merged == {"a": 1, "b": {"c": 99, "d": 2}, "e": [3], "f": 5}
    assert base["b"] == {"c": 1, "d": 2}


def test_load_settings_defaults() -> None:
    mod = importlib.import_module("option_valuation.settings")
    settings = mod.load_settings()

    assert settings == PricingSettings()
    assert settings.enable_greek_approximation is True
    assert settings.default_risk_free_rate == 0.01
    assert settings.default_dividend_rate == 0.0
    assert settings.settlement_days == 3
    assert settings.calendar == "XNYS"
    assert (settings.time_steps_binomial, settings.time_steps_fd) == (100, 100)


def test_load_settings_precedence_defaults_yaml_overrides(write_yaml) -> None:
    mod = importlib.import_module("option_valuation.settings")
    path = write_yaml(
        "cfg.yml",
        {"pricing": {"default_risk_free_rate": 0.04, "settlement_days": 1}},
    )

    settings = mod.load_settings(path, {"settlement_days": 0})

    assert settings.default_risk_free_rate == 0.04
    assert settings.settlement_days == 0
    assert settings.time_steps_fd == 100


def test_load_config_splits_sections(write_yaml) -> None:
    mod = importlib.import_module("option_valuation.settings")
    path = write_yaml(
        "cfg.yml",
        {
            "pricing": {"time_steps_binomial": 201},
            "logging": {"level": "DEBUG"},
            "model": "binomial_tian",
        },
    )

    config = mod.load_config(path, {"logging": {"color": False}})

    assert config.pricing.time_steps_binomial == 201
    assert config.logging["level"] == "DEBUG"
    assert config.logging["color"] is False
    assert config.extra == {"model": "binomial_tian"}


def test_unknown_pricing_key_is_rejected(write_yaml) -> None:
    mod = importlib.import_module("option_valuation.settings")
    path = write_yaml("cfg.yml", {"pricing": {"risk_free": 0.02}})

    with pytest.raises(ValueError, match="Unknown pricing settings"):
        mod.load_settings(path)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"settlement_days": -1},
        {"time_steps_binomial": 1},
        {"time_steps_fd": 0},
        {"calendar": ""},
    ],
)
def test_pricing_settings_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        PricingSettings(**kwargs)


def test_set_settings_returns_previous_and_type_checks() -> None:
    custom = PricingSettings(default_risk_free_rate=0.05)

    previous = set_settings(custom)

    assert previous == PricingSettings()
    assert get_settings() is custom
    with pytest.raises(TypeError):
        set_settings({"default_risk_free_rate": 0.05})
