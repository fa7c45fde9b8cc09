"""
Option pricing implementations.

Provides:
- Standard normal PDF/CDF (Abramowitz & Stegun, error < 7.5e-8)
- Black-Scholes analytical pricing with memoized Greeks
"""

from ito_pricing.options.pricing.black_scholes import (
    BlackScholesModel,
    BSResult,
    Greeks,
    MarketParameters,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_put,
    implied_volatility,
    put_call_parity_check,
)
from ito_pricing.options.pricing.normal import normal_cdf, normal_pdf

__all__ = [
    # Normal primitives
    "normal_cdf",
    "normal_pdf",
    # Black-Scholes
    "BlackScholesModel",
    "BSResult",
    "Greeks",
    "MarketParameters",
    "black_scholes_call",
    "black_scholes_greeks",
    "black_scholes_put",
    "implied_volatility",
    "put_call_parity_check",
]
