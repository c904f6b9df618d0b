from .market import MarketParameters, OptionKind
from .path_generator import GBMPathGenerator
from .pricer import DiscountedPricer, PricingResult
from .lookback_options import (
    LookbackOption,
    LookbackCall,
    LookbackPut,
    create_option,
    option_from_params,
)

__all__ = [
    "MarketParameters", "OptionKind", "GBMPathGenerator",
    "DiscountedPricer", "PricingResult",
    "LookbackOption", "LookbackCall", "LookbackPut",
    "create_option", "option_from_params",
]
