"""
Centralized tolerance framework for option pricing.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Approximation): Bounded by the normal CDF approximation
    Tier 3 (Stochastic): CLT-derived, Monte Carlo estimates

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Abramowitz & Stegun (1964) 26.2.17
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: No-arbitrage bounds: option price in [0, S] or [0, K*exp(-rT)]
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: Put-call parity: C - P = S - K*exp(-rT)
#: Put is derived from the call through parity, so only rounding remains.
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-10

#: Normal CDF symmetry: Phi(x) + Phi(-x) = 1
CDF_SYMMETRY_TOLERANCE: Final[float] = 1e-10

#: Cached reads must be bit-identical; kept for registry completeness
IDEMPOTENCE_TOLERANCE: Final[float] = 0.0


# =============================================================================
# Tier 2: Approximation Tolerances
# =============================================================================

#: Documented maximum absolute error of Abramowitz-Stegun 26.2.17
NORMAL_CDF_MAX_ERROR: Final[float] = 7.5e-8

#: Reference-value comparisons for the CDF (rounded up from the A&S bound)
NORMAL_CDF_TOLERANCE: Final[float] = 1e-7

#: Textbook examples quoted to 2 decimal places
HULL_EXAMPLE_TOLERANCE: Final[float] = 0.01

#: Greeks quoted to 4 significant figures in the reference contract
GREEKS_REFERENCE_TOLERANCE: Final[float] = 1e-2

#: Put/call gamma and vega equality
GREEKS_SYMMETRY_TOLERANCE: Final[float] = 1e-6


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_trials: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_trials : int
        Number of Monte Carlo trials
    sigma : float
        Estimated relative volatility of payoff (default 0.20)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Relative tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(float(mc_tolerance(10_000)), 4)
    0.006
    """
    return confidence * sigma / np.sqrt(n_trials)


def mc_parity_tolerance(
    call_standard_error: float,
    put_standard_error: float,
    confidence: float = 4.0,
) -> float:
    """
    Tolerance for Monte Carlo put-call parity on paired samples.

    [T1] sd(C - P) <= sd(C) + sd(P), so the sum of standard errors bounds
    the standard error of the parity difference.

    Parameters
    ----------
    call_standard_error : float
        Standard error of the call estimate
    put_standard_error : float
        Standard error of the put estimate
    confidence : float, default 4.0
        Number of standard errors allowed

    Returns
    -------
    float
        Absolute tolerance on (C - P) - (S - K*exp(-rT))
    """
    return confidence * (call_standard_error + put_standard_error)


#: MC tolerance for 10,000 trials: 3 * 0.20 / sqrt(10000) = 0.006
MC_10K_TOLERANCE: Final[float] = 0.006

#: MC tolerance for 100,000 trials (conservative)
MC_100K_TOLERANCE: Final[float] = 0.01

#: Minimum empirical coverage of the 95% CI over repeated seeds
CI_COVERAGE_MINIMUM: Final[float] = 0.88


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    "cdf_symmetry": CDF_SYMMETRY_TOLERANCE,
    "idempotence": IDEMPOTENCE_TOLERANCE,
    # Tier 2: Approximation
    "normal_cdf_max_error": NORMAL_CDF_MAX_ERROR,
    "normal_cdf": NORMAL_CDF_TOLERANCE,
    "hull_example": HULL_EXAMPLE_TOLERANCE,
    "greeks_reference": GREEKS_REFERENCE_TOLERANCE,
    "greeks_symmetry": GREEKS_SYMMETRY_TOLERANCE,
    # Tier 3: Stochastic
    "mc_10k": MC_10K_TOLERANCE,
    "mc_100k": MC_100K_TOLERANCE,
    "ci_coverage_minimum": CI_COVERAGE_MINIMUM,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
