"""
Centralized pytest fixtures for ito-pricing test suite.

Fixture Categories:
1. Market Parameters - Standard market conditions for option pricing
2. Reference Contract - Known call/put prices and Greeks
3. Hull Examples - Textbook examples for validation
4. Engines - Seeded Monte Carlo engines
"""

from dataclasses import dataclass

import numpy as np
import pytest

from ito_pricing.options.pricing.black_scholes import BlackScholesModel, MarketParameters
from ito_pricing.options.simulation.execution import ExecutionPolicy
from ito_pricing.options.simulation.monte_carlo import MonteCarloEngine, SimulationConfig


# =============================================================================
# MARKET PARAMETERS
# =============================================================================

@pytest.fixture
def market_params() -> MarketParameters:
    """Standard ATM market parameters (S=K=100, r=5%, σ=20%, T=1)."""
    return MarketParameters(
        spot=100.0,
        strike=100.0,
        rate=0.05,
        volatility=0.20,
        time_to_maturity=1.0,
    )


@pytest.fixture
def market_params_dict() -> dict[str, float]:
    """Standard market parameters as dictionary."""
    return {
        "spot": 100.0,
        "strike": 100.0,
        "rate": 0.05,
        "volatility": 0.20,
        "time_to_maturity": 1.0,
    }


@pytest.fixture
def bs_model(market_params) -> BlackScholesModel:
    """Black-Scholes model on the standard parameters."""
    return BlackScholesModel(market_params)


# =============================================================================
# REFERENCE CONTRACT
# =============================================================================

@dataclass(frozen=True)
class ReferenceContract:
    """Expected values for S=100, K=100, r=5%, σ=20%, T=1."""

    call_price: float = 10.4506
    put_price: float = 5.5735
    call_delta: float = 0.6368
    call_gamma: float = 0.0188
    call_vega: float = 37.52
    call_theta: float = -6.41
    call_rho: float = 53.23
    put_delta: float = -0.3632


@pytest.fixture(scope="session")
def reference_contract() -> ReferenceContract:
    return ReferenceContract()


# =============================================================================
# HULL TEXTBOOK EXAMPLES
# =============================================================================

@dataclass(frozen=True)
class HullExample:
    """A textbook example from Hull (2021) Options, Futures, and Other Derivatives."""

    name: str
    spot: float
    strike: float
    rate: float
    volatility: float
    time_to_maturity: float
    expected_call: float | None = None
    expected_put: float | None = None
    expected_delta: float | None = None


# Hull (2021) Chapter 15, Example 15.6
HULL_EXAMPLE_15_6 = HullExample(
    name="Hull Example 15.6",
    spot=42.0,
    strike=40.0,
    rate=0.10,
    volatility=0.20,
    time_to_maturity=0.5,
    expected_call=4.76,
    expected_put=0.81,
)

# Hull (2021) Chapter 19, Example 19.1 (20 weeks)
HULL_EXAMPLE_19_1 = HullExample(
    name="Hull Example 19.1 (Delta)",
    spot=49.0,
    strike=50.0,
    rate=0.05,
    volatility=0.20,
    time_to_maturity=0.3846,
    expected_delta=0.522,
)


@pytest.fixture
def hull_example_15_6() -> HullExample:
    return HULL_EXAMPLE_15_6


@pytest.fixture
def hull_example_19_1() -> HullExample:
    return HULL_EXAMPLE_19_1


# =============================================================================
# ENGINES
# =============================================================================

@pytest.fixture
def sequential_engine() -> MonteCarloEngine:
    """Seeded engine forced onto the sequential path."""
    return MonteCarloEngine(
        SimulationConfig(n_trials=50_000, seed=42, policy=ExecutionPolicy.SEQUENTIAL)
    )


@pytest.fixture
def parallel_engine() -> MonteCarloEngine:
    """Seeded engine forced onto the parallel path."""
    return MonteCarloEngine(
        SimulationConfig(
            n_trials=50_000,
            seed=42,
            policy=ExecutionPolicy.PARALLEL,
            max_workers=4,
        )
    )


@pytest.fixture
def reproducible_rng() -> np.random.Generator:
    """Reproducible numpy random generator."""
    return np.random.default_rng(seed=42)
