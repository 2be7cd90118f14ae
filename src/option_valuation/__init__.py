"""Option valuation: price models, engines, and lazy Greeks."""

from .chain import evaluate_chain
from .estimators import (
    ConstantDividendYieldEstimator,
    ConstantRiskFreeRateEstimator,
    ConstantVolatilityEstimator,
    DividendYieldEstimator,
    RiskFreeRateEstimator,
    VolatilityEstimator,
)
from .instruments import GreekUnavailable, UnavailableReason, VanillaOption
from .policies import (
    american_exercise_policy,
    contract_style_exercise_policy,
    european_exercise_policy,
    plain_vanilla_payoff,
)
from .price_models import PRICE_MODELS, create_price_model, get_price_model
from .pricing_model import OptionPriceModel, OptionValuation
from .results import Greeks, OptionPriceModelResult
from .settings import PricingSettings, get_settings, load_settings, set_settings
from .types import (
    OptionContract,
    OptionRight,
    OptionSecurity,
    OptionStyle,
    UnderlyingObservation,
)

__all__ = [
    "OptionRight",
    "OptionStyle",
    "OptionContract",
    "OptionSecurity",
    "UnderlyingObservation",
    "VolatilityEstimator",
    "RiskFreeRateEstimator",
    "DividendYieldEstimator",
    "ConstantVolatilityEstimator",
    "ConstantRiskFreeRateEstimator",
    "ConstantDividendYieldEstimator",
    "VanillaOption",
    "GreekUnavailable",
    "UnavailableReason",
    "european_exercise_policy",
    "american_exercise_policy",
    "contract_style_exercise_policy",
    "plain_vanilla_payoff",
    "OptionPriceModel",
    "OptionValuation",
    "OptionPriceModelResult",
    "Greeks",
    "PRICE_MODELS",
    "create_price_model",
    "get_price_model",
    "evaluate_chain",
    "PricingSettings",
    "get_settings",
    "set_settings",
    "load_settings",
]
