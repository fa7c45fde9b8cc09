"""
Option payoffs.

Provides:
- OptionType enumeration
- Vectorized European call/put payoffs
"""

from ito_pricing.options.payoffs.base import (
    OptionType,
    call_payoff,
    european_payoff,
    put_payoff,
)

__all__ = [
    "OptionType",
    "call_payoff",
    "european_payoff",
    "put_payoff",
]
