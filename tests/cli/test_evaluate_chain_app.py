from __future__ import annotations

import datetime as dt
import importlib
import json

import pandas as pd
import pytest

from option_valuation.settings import get_settings

CHAIN = {
    "pricing": {"settlement_days": 0},
    "logging": {"level": "WARNING", "color": False},
    "model": "black_scholes",
    "underlying": {"symbol": "SPY", "price": 100.0, "volatility": 0.2},
    "contracts": [
        {"strike": 95.0, "right": "call", "expiry": dt.date(2024, 3, 1), "time": dt.date(2024, 2, 1)},
        {"strike": 105.0, "right": "put", "expiry": dt.date(2024, 3, 1), "time": dt.date(2024, 2, 1)},
    ],
}


def _chain_yaml(write_yaml, **updates):
    data = {**CHAIN, **updates}
    return write_yaml("chain.yml", data)


def test_main_writes_csv(write_yaml, tmp_path, capsys, monkeypatch) -> None:
    mod = importlib.import_module("option_valuation.apps.evaluate_chain")
    monkeypatch.setattr(mod, "setup_logging_from_config", lambda cfg: None)
    path = _chain_yaml(write_yaml)
    output = tmp_path / "out" / "chain.csv"

    mod.main(["--config", str(path), "--output", str(output)])

    frame = pd.read_csv(output)
    assert len(frame) == 2
    assert frame["strike"].tolist() == [95.0, 105.0]
    assert (frame["price"] > 0).all()
    assert "implied_volatility" in capsys.readouterr().out


def test_cli_flags_override_config(write_yaml, monkeypatch) -> None:
    mod = importlib.import_module("option_valuation.apps.evaluate_chain")
    path = _chain_yaml(write_yaml)
    captured = {}

    def _run(config):
        captured["config"] = config
        return pd.DataFrame()

    monkeypatch.setattr(mod, "run", _run)
    monkeypatch.setattr(mod, "setup_logging_from_config", lambda cfg: None)

    mod.main(
        ["--config", str(path), "--model", "binomial_tian", "--no-greek-approximation"]
    )

    config = captured["config"]
    assert config.extra["model"] == "binomial_tian"
    assert config.pricing.enable_greek_approximation is False
    assert config.pricing.settlement_days == 0


def test_run_installs_pricing_settings(write_yaml) -> None:
    mod = importlib.import_module("option_valuation.apps.evaluate_chain")
    settings_mod = importlib.import_module("option_valuation.settings")
    config = settings_mod.load_config(_chain_yaml(write_yaml))

    frame = mod.run(config)

    assert get_settings().settlement_days == 0
    assert frame["symbol"].tolist() == ["", ""]


def test_print_config_outputs_json(write_yaml, capsys) -> None:
    mod = importlib.import_module("option_valuation.apps.evaluate_chain")
    path = _chain_yaml(write_yaml)

    mod.main(["--config", str(path), "--print-config"])

    printed = json.loads(capsys.readouterr().out)
    assert printed["model"] == "black_scholes"
    assert printed["pricing"]["settlement_days"] == 0
    assert printed["contracts"][0]["expiry"] == "2024-03-01"


def test_missing_contracts_is_an_error(write_yaml) -> None:
    mod = importlib.import_module("option_valuation.apps.evaluate_chain")
    settings_mod = importlib.import_module("option_valuation.settings")
    config = settings_mod.load_config(_chain_yaml(write_yaml, contracts=[]))

    with pytest.raises(ValueError, match="contracts"):
        mod.run(config)
