"""
Anti-pattern test: Vectorized payoffs must match scalar implementation.

[T1] Both implementations must produce identical results.
This prevents bugs where the in-place vectorized version diverges from
the textbook definition, or where call and put read different prices.
"""

import numpy as np
import pytest

from ito_pricing.options.payoffs.base import (
    OptionType,
    call_payoff,
    european_payoff,
    put_payoff,
)

# =============================================================================
# Test Data
# =============================================================================

# Terminal prices including edge cases around K = 100
TEST_TERMINALS = np.array([
    0.0,     # Worthless underlying
    50.0,    # Deep OTM call
    99.999,  # Just below strike
    100.0,   # Exactly at strike
    100.001, # Just above strike
    150.0,   # Deep ITM call
    1e6,     # Extreme
])

STRIKE = 100.0


class TestVectorizedConsistency:
    """Vectorized payoffs equal max() applied element by element."""

    @pytest.mark.anti_pattern
    def test_call_matches_scalar(self) -> None:
        expected = [max(s - STRIKE, 0.0) for s in TEST_TERMINALS]
        np.testing.assert_array_equal(call_payoff(TEST_TERMINALS, STRIKE), expected)

    @pytest.mark.anti_pattern
    def test_put_matches_scalar(self) -> None:
        expected = [max(STRIKE - s, 0.0) for s in TEST_TERMINALS]
        np.testing.assert_array_equal(put_payoff(TEST_TERMINALS, STRIKE), expected)

    @pytest.mark.anti_pattern
    def test_dispatch(self) -> None:
        np.testing.assert_array_equal(
            european_payoff(TEST_TERMINALS, STRIKE, OptionType.CALL),
            call_payoff(TEST_TERMINALS, STRIKE),
        )
        np.testing.assert_array_equal(
            european_payoff(TEST_TERMINALS, STRIKE, OptionType.PUT),
            put_payoff(TEST_TERMINALS, STRIKE),
        )

    @pytest.mark.anti_pattern
    def test_call_minus_put_is_forward_payoff(self) -> None:
        """[T1] max(S-K, 0) - max(K-S, 0) = S - K."""
        diff = call_payoff(TEST_TERMINALS, STRIKE) - put_payoff(TEST_TERMINALS, STRIKE)
        np.testing.assert_allclose(diff, TEST_TERMINALS - STRIKE, rtol=0, atol=1e-9)

    @pytest.mark.anti_pattern
    def test_out_buffer_leaves_input_intact(self) -> None:
        terminal = TEST_TERMINALS.copy()
        out = np.empty_like(terminal)
        result = call_payoff(terminal, STRIKE, out=out)

        assert result is out
        np.testing.assert_array_equal(terminal, TEST_TERMINALS)

    @pytest.mark.anti_pattern
    def test_slice_writes_are_disjoint(self) -> None:
        """Writing payoffs slice by slice fills the array exactly once."""
        out = np.full_like(TEST_TERMINALS, np.nan)
        for s in (slice(0, 3), slice(3, 5), slice(5, None)):
            put_payoff(TEST_TERMINALS[s], STRIKE, out=out[s])
        np.testing.assert_array_equal(out, put_payoff(TEST_TERMINALS, STRIKE))

    @pytest.mark.anti_pattern
    def test_float32_preserved(self) -> None:
        terminal = TEST_TERMINALS[:-1].astype(np.float32)
        assert call_payoff(terminal, STRIKE).dtype == np.float32
        assert put_payoff(terminal, STRIKE).dtype == np.float32
