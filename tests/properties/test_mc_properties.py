"""
Property-based tests for Monte Carlo simulation.

Uses Hypothesis to verify Monte Carlo properties:
1. MC prices and standard errors are non-negative
2. Paired call/put identity: C - P = e^(-rT) * (mean S(T) - K)
3. Sequential and parallel paths agree exactly
4. Common random numbers make prices monotone in strike
5. MC agrees with Black-Scholes within sampling error

References:
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo Methods
    [T1] CLT for MC convergence
"""

from typing import Optional

import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from ito_pricing.options.pricing.black_scholes import BlackScholesModel
from ito_pricing.options.simulation.execution import ExecutionPolicy
from ito_pricing.options.simulation.monte_carlo import MonteCarloEngine, SimulationConfig

# =============================================================================
# Strategy Definitions
# =============================================================================

# More constrained strategies for MC (expensive to run)
spot_strategy = st.floats(min_value=50.0, max_value=200.0, allow_nan=False, allow_infinity=False)
strike_strategy = st.floats(min_value=50.0, max_value=200.0, allow_nan=False, allow_infinity=False)
rate_strategy = st.floats(min_value=-0.02, max_value=0.10, allow_nan=False, allow_infinity=False)
vol_strategy = st.floats(min_value=0.10, max_value=0.50, allow_nan=False, allow_infinity=False)
time_strategy = st.floats(min_value=0.25, max_value=2.0, allow_nan=False, allow_infinity=False)
seed_strategy = st.integers(min_value=0, max_value=2**32 - 1)


def _engine(
    n_trials: int,
    seed: int,
    policy: ExecutionPolicy = ExecutionPolicy.AUTO,
    max_workers: Optional[int] = None,
) -> MonteCarloEngine:
    return MonteCarloEngine(
        SimulationConfig(n_trials=n_trials, seed=seed, policy=policy, max_workers=max_workers)
    )


class TestMCBasicProperties:
    """Properties that hold for every sample, not just in expectation."""

    @given(
        spot=spot_strategy,
        strike=strike_strategy,
        rate=rate_strategy,
        vol=vol_strategy,
        time=time_strategy,
        seed=seed_strategy,
    )
    @settings(max_examples=50)  # Fewer examples due to MC cost
    def test_non_negative(
        self, spot: float, strike: float, rate: float, vol: float, time: float, seed: int
    ) -> None:
        """[T1] Payoffs are non-negative, so prices and SEs are too."""
        result = _engine(5_000, seed).price_european_call_and_put(spot, strike, rate, vol, time)

        assert result.call.price >= 0.0
        assert result.put.price >= 0.0
        assert result.call.standard_error >= 0.0
        assert result.put.standard_error >= 0.0

    @given(
        spot=spot_strategy,
        strike=strike_strategy,
        rate=rate_strategy,
        vol=vol_strategy,
        time=time_strategy,
        seed=seed_strategy,
    )
    @settings(max_examples=50)
    def test_paired_identity(
        self, spot: float, strike: float, rate: float, vol: float, time: float, seed: int
    ) -> None:
        """[T1] max(x, 0) - max(-x, 0) = x, trial by trial."""
        n = 5_000
        result = _engine(n, seed).price_european_call_and_put(spot, strike, rate, vol, time)

        z = np.random.default_rng(seed).standard_normal(n)
        terminal = spot * np.exp((rate - 0.5 * vol**2) * time + vol * np.sqrt(time) * z)
        expected = np.exp(-rate * time) * (terminal.mean() - strike)

        assert abs(result.parity_difference - expected) < 1e-9 * max(1.0, spot, strike)


class TestExecutionEquivalence:
    """Both execution paths compute the same estimates."""

    @given(
        n_trials=st.integers(min_value=2, max_value=60_000),
        seed=seed_strategy,
        workers=st.integers(min_value=1, max_value=6),
    )
    @settings(max_examples=25, deadline=None)
    def test_sequential_equals_parallel(self, n_trials: int, seed: int, workers: int) -> None:
        args = (100.0, 105.0, 0.03, 0.25, 0.5)
        seq = _engine(n_trials, seed, ExecutionPolicy.SEQUENTIAL).price_european_call_and_put(*args)
        par = _engine(
            n_trials, seed, ExecutionPolicy.PARALLEL, max_workers=workers
        ).price_european_call_and_put(*args)

        assert seq == par


class TestCommonRandomNumbers:
    """[T1] With a shared seed, payoffs are pathwise monotone in strike."""

    @given(
        spot=spot_strategy,
        strike=strike_strategy,
        bump=st.floats(min_value=0.5, max_value=25.0),
        seed=seed_strategy,
    )
    @settings(max_examples=50)
    def test_monotone_in_strike(self, spot: float, strike: float, bump: float, seed: int) -> None:
        low = _engine(5_000, seed).price_european_call_and_put(spot, strike, 0.05, 0.2, 1.0)
        high = _engine(5_000, seed).price_european_call_and_put(
            spot, strike + bump, 0.05, 0.2, 1.0
        )

        assert high.call.price <= low.call.price
        assert high.put.price >= low.put.price


class TestMCConvergenceProperty:
    """[T1] MC converges to Black-Scholes."""

    @given(
        spot=spot_strategy,
        strike=strike_strategy,
        rate=rate_strategy,
        vol=vol_strategy,
        time=time_strategy,
    )
    @settings(max_examples=30, deadline=None)
    def test_within_sampling_error(
        self, spot: float, strike: float, rate: float, vol: float, time: float
    ) -> None:
        """|MC - BS| < 5 SE; absolute floor for deep out-of-the-money sides."""
        model = BlackScholesModel.from_values(spot, strike, rate, vol, time)
        result = _engine(20_000, 42).price_european_call_and_put(spot, strike, rate, vol, time)

        for estimate, analytical in (
            (result.call, model.call_price()),
            (result.put, model.put_price()),
        ):
            tolerance = 5.0 * estimate.standard_error + 0.01
            assert abs(estimate.price - analytical) < tolerance, (
                f"MC {estimate.price} vs BS {analytical} (SE {estimate.standard_error})"
            )
