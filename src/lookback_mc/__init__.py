"""
Lookback Monte Carlo Engine
=============================

Floating-strike lookback options priced by antithetic GBM simulation, with
pathwise delta/vega and common-random-number theta/rho.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

__version__ = "1.0.0"

from .exceptions import (
    LookbackError,
    InvalidParameterError,
    InvalidOptionKindError,
    InvalidDomainError,
)
from .models import (
    MarketParameters,
    OptionKind,
    GBMPathGenerator,
    DiscountedPricer,
    LookbackOption,
    LookbackCall,
    LookbackPut,
    create_option,
)

__all__ = [
    "LookbackError", "InvalidParameterError", "InvalidOptionKindError",
    "InvalidDomainError", "MarketParameters", "OptionKind",
    "GBMPathGenerator", "DiscountedPricer",
    "LookbackOption", "LookbackCall", "LookbackPut", "create_option",
]
