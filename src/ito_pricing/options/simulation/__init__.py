"""
Monte Carlo simulation for option pricing.

Provides:
- GBM terminal-price generation
- Sequential / parallel execution strategies
- Paired call/put Monte Carlo engine
- Convergence analysis tools
"""

from ito_pricing.options.simulation.execution import (
    ExecutionPolicy,
    resolve_policy,
)
from ito_pricing.options.simulation.gbm import (
    simulate_terminal_price,
    terminal_prices,
    validate_gbm_simulation,
)
from ito_pricing.options.simulation.monte_carlo import (
    EstimationResult,
    MonteCarloEngine,
    PairedEstimationResult,
    SimulationConfig,
    compute_statistics,
    convergence_analysis,
    price_vanilla_mc,
)

__all__ = [
    # GBM
    "simulate_terminal_price",
    "terminal_prices",
    "validate_gbm_simulation",
    # Execution
    "ExecutionPolicy",
    "resolve_policy",
    # Monte Carlo
    "EstimationResult",
    "MonteCarloEngine",
    "PairedEstimationResult",
    "SimulationConfig",
    "compute_statistics",
    "convergence_analysis",
    "price_vanilla_mc",
]
