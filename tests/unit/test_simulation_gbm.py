"""
Tests for GBM terminal-price simulation.

[T1] S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)
"""

import numpy as np
import pytest

from ito_pricing.options.pricing.black_scholes import MarketParameters
from ito_pricing.options.simulation.gbm import (
    log_diffusion,
    log_drift,
    simulate_terminal_price,
    terminal_prices,
    validate_gbm_simulation,
)


class TestLogTerms:
    """Tests for drift and diffusion."""

    def test_drift(self):
        assert log_drift(0.05, 0.20, 1.0) == pytest.approx(0.03)
        assert log_drift(0.05, 0.20, 0.5) == pytest.approx(0.015)

    def test_diffusion(self):
        assert log_diffusion(0.20, 4.0) == pytest.approx(0.40)
        assert log_diffusion(0.0, 1.0) == 0.0


class TestTerminalPrices:
    """Tests for the variate -> S(T) map."""

    def test_zero_variate_gives_drifted_spot(self):
        result = terminal_prices(np.zeros(3), 100.0, 0.03, 0.20)
        np.testing.assert_allclose(result, 100.0 * np.exp(0.03))

    def test_matches_closed_form(self, reproducible_rng):
        z = reproducible_rng.standard_normal(1_000)
        result = terminal_prices(z, 50.0, 0.01, 0.3)
        np.testing.assert_allclose(result, 50.0 * np.exp(0.01 + 0.3 * z), rtol=1e-14)

    def test_out_buffer(self, reproducible_rng):
        z = reproducible_rng.standard_normal(10)
        out = np.empty_like(z)
        result = terminal_prices(z, 100.0, 0.03, 0.2, out=out)
        assert result is out

    def test_input_not_modified_without_out(self):
        z = np.array([0.5, -0.5])
        terminal_prices(z, 100.0, 0.03, 0.2)
        np.testing.assert_array_equal(z, [0.5, -0.5])

    def test_slices_match_whole(self, reproducible_rng):
        """Elementwise: mapping halves separately gives the same array."""
        z = reproducible_rng.standard_normal(1_001)
        whole = terminal_prices(z, 100.0, 0.03, 0.2)
        halves = np.concatenate(
            [terminal_prices(z[:500], 100.0, 0.03, 0.2), terminal_prices(z[500:], 100.0, 0.03, 0.2)]
        )
        np.testing.assert_allclose(whole, halves, rtol=1e-15)

    def test_float32_preserved(self):
        z = np.linspace(-2, 2, 5, dtype=np.float32)
        assert terminal_prices(z, 100.0, 0.03, 0.2).dtype == np.float32

    def test_always_positive(self):
        z = np.array([-8.0, -3.0, 0.0, 3.0, 8.0])
        assert np.all(terminal_prices(z, 100.0, 0.03, 0.5) > 0)


class TestSimulateTerminalPrice:
    """Tests for the single-draw helper."""

    def test_advances_generator_once(self):
        rng = np.random.default_rng(0)
        reference = np.random.default_rng(0)
        value = simulate_terminal_price(rng, 100.0, 0.05, 0.20, 1.0)
        z = reference.standard_normal()
        assert value == pytest.approx(100.0 * np.exp(0.03 + 0.20 * z))
        assert rng.standard_normal() == reference.standard_normal()

    def test_returns_float(self, reproducible_rng):
        assert isinstance(simulate_terminal_price(reproducible_rng, 100.0, 0.05, 0.2, 1.0), float)

    def test_zero_volatility_deterministic(self, reproducible_rng):
        value = simulate_terminal_price(reproducible_rng, 100.0, 0.05, 0.0, 2.0)
        assert value == pytest.approx(100.0 * np.exp(0.10))


class TestValidateGBM:
    """Tests for validate_gbm_simulation."""

    def test_moments_match(self, market_params):
        result = validate_gbm_simulation(market_params, n_trials=100_000, seed=42)
        assert result["validation_passed"]
        assert result["theoretical_mean"] == pytest.approx(100.0 * np.exp(0.05))
        assert result["theoretical_log_variance"] == pytest.approx(0.04)
        assert result["variance_error_pct"] < 2.0

    def test_reports_inputs(self, market_params):
        result = validate_gbm_simulation(market_params, n_trials=1_000, seed=1)
        assert result["n_trials"] == 1_000
        assert result["mean_se"] > 0

    def test_negative_rate(self):
        params = MarketParameters(100.0, 100.0, -0.01, 0.30, 2.0)
        result = validate_gbm_simulation(params, n_trials=50_000, seed=7)
        assert abs(result["mean_z_score"]) < 4.0
