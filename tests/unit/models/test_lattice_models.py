import pytest

from option_valuation.models import (
    TREE_RULES,
    BinomialLattice,
    binomial_tree_price,
    bs_delta,
    bs_gamma,
    bs_price,
    bs_theta,
    crank_nicolson_price,
)

MARKET = dict(S=102.0, K=100.0, T=45 / 365.0, sigma=0.25, r=0.03, q=0.01)


@pytest.mark.parametrize("rule", sorted(TREE_RULES))
@pytest.mark.parametrize("right", ["call", "put"])
def test_every_tree_rule_converges_to_black_scholes(rule: str, right: str):
    tree = binomial_tree_price(**MARKET, option_type=right, steps=100, rule=rule)
    bs = bs_price(**MARKET, option_type=right)

    assert tree.value == pytest.approx(bs, rel=1e-2)
    assert tree.delta == pytest.approx(bs_delta(**MARKET, option_type=right), abs=2e-2)


@pytest.mark.parametrize("rule", ["leisen_reimer", "joshi"])
def test_strike_centred_trees_are_tight_with_few_steps(rule: str):
    tree = binomial_tree_price(**MARKET, option_type="call", steps=51, rule=rule)

    assert tree.value == pytest.approx(bs_price(**MARKET, option_type="call"), abs=1e-3)
    assert tree.gamma == pytest.approx(bs_gamma(**MARKET), rel=5e-2)


def test_tree_with_single_step_has_no_delta_or_gamma():
    tree = binomial_tree_price(**MARKET, steps=1)

    assert tree.value > 0
    assert tree.delta is None
    assert tree.gamma is None


def test_tree_with_two_steps_reads_sensitivities_from_terminal_layer():
    tree = binomial_tree_price(**MARKET, steps=2)

    assert tree.delta is not None
    assert 0.0 < tree.delta < 1.0


def test_american_tree_put_is_not_below_european():
    args = dict(S=98.0, K=100.0, T=90 / 365.0, sigma=0.22, r=0.02, q=0.0, option_type="put")

    european = binomial_tree_price(**args, steps=300, american=False)
    american = binomial_tree_price(**args, steps=300, american=True)

    assert american.value >= european.value


def test_tree_rejects_unknown_rule_and_degenerate_inputs():
    with pytest.raises(ValueError, match="Unknown tree rule"):
        binomial_tree_price(**MARKET, rule="nope")
    with pytest.raises(ValueError, match="steps"):
        binomial_tree_price(**MARKET, steps=0)
    with pytest.raises(ValueError, match="positive"):
        binomial_tree_price(S=100.0, K=100.0, T=0.5, sigma=0.0)


def test_lattice_rejects_invalid_probability():
    with pytest.raises(ValueError, match="risk-neutral probability"):
        BinomialLattice(spot=100.0, steps=10, dt=0.1, drift_step=0.0, dx=0.01, pu=1.2)


@pytest.mark.parametrize("right", ["call", "put"])
def test_crank_nicolson_european_matches_black_scholes(right: str):
    out = crank_nicolson_price(**MARKET, option_type=right, time_steps=100, grid_points=99)

    assert out.value == pytest.approx(bs_price(**MARKET, option_type=right), rel=1e-2)
    assert out.delta == pytest.approx(bs_delta(**MARKET, option_type=right), abs=1e-2)
    assert out.gamma == pytest.approx(bs_gamma(**MARKET), rel=5e-2)
    assert out.theta == pytest.approx(bs_theta(**MARKET, option_type=right), rel=5e-2)


def test_crank_nicolson_american_put_carries_early_exercise_premium():
    args = dict(S=90.0, K=100.0, T=1.0, sigma=0.25, r=0.08, q=0.0, option_type="put")

    european = crank_nicolson_price(**args, american=False)
    american = crank_nicolson_price(**args, american=True)

    assert american.value > european.value
    assert american.value >= 10.0 - 1e-8
