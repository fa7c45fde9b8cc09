"""
ito-pricing: European option pricing, analytical and Monte Carlo.

Quick Start
-----------
>>> from ito_pricing import BlackScholesModel, MonteCarloEngine, SimulationConfig
>>> model = BlackScholesModel.from_values(100.0, 100.0, 0.05, 0.20, 1.0)
>>> engine = MonteCarloEngine(SimulationConfig(n_trials=100_000, seed=42))
>>> paired = engine.price_european_call_and_put(100.0, 100.0, 0.05, 0.20, 1.0)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Errors
# =============================================================================
from ito_pricing.errors import DegenerateSampleError, InvalidParameterError

# =============================================================================
# Analytical Pricing
# =============================================================================
from ito_pricing.options.payoffs.base import OptionType
from ito_pricing.options.pricing import (
    BlackScholesModel,
    BSResult,
    Greeks,
    MarketParameters,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_put,
    implied_volatility,
    normal_cdf,
    normal_pdf,
    put_call_parity_check,
)

# =============================================================================
# Monte Carlo
# =============================================================================
from ito_pricing.options.simulation import (
    EstimationResult,
    ExecutionPolicy,
    MonteCarloEngine,
    PairedEstimationResult,
    SimulationConfig,
    convergence_analysis,
    price_vanilla_mc,
)

# =============================================================================
# Configuration
# =============================================================================
from ito_pricing.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Errors
    "DegenerateSampleError",
    "InvalidParameterError",
    # Analytical
    "OptionType",
    "BlackScholesModel",
    "BSResult",
    "Greeks",
    "MarketParameters",
    "black_scholes_call",
    "black_scholes_greeks",
    "black_scholes_put",
    "implied_volatility",
    "normal_cdf",
    "normal_pdf",
    "put_call_parity_check",
    # Monte Carlo
    "EstimationResult",
    "ExecutionPolicy",
    "MonteCarloEngine",
    "PairedEstimationResult",
    "SimulationConfig",
    "convergence_analysis",
    "price_vanilla_mc",
    # Config
    "SETTINGS",
]
