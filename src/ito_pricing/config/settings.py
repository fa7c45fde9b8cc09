"""
Frozen configuration settings for option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Tolerances live in config/tolerances.py.
"""

import os
from dataclasses import dataclass
from typing import Optional

from ito_pricing.config.tolerances import (
    NORMAL_CDF_MAX_ERROR,
    PUT_CALL_PARITY_TOLERANCE,
)

# =============================================================================
# Simulation Configuration
# =============================================================================

MAX_WORKERS_ENV_VAR = "ITO_PRICING_MAX_WORKERS"


def _resolve_max_workers() -> Optional[int]:
    """
    Resolve default thread-pool size with environment variable override.

    Priority:
    1. ITO_PRICING_MAX_WORKERS environment variable (if set)
    2. None (engine falls back to os.cpu_count())

    Returns
    -------
    int or None
        Worker count, or None to defer to the CPU count
    """
    env_value = os.environ.get(MAX_WORKERS_ENV_VAR)
    if not env_value:
        return None
    try:
        workers = int(env_value)
    except ValueError:
        raise ValueError(
            f"CRITICAL: {MAX_WORKERS_ENV_VAR} must be an integer, got {env_value!r}"
        ) from None
    if workers < 1:
        raise ValueError(f"CRITICAL: {MAX_WORKERS_ENV_VAR} must be >= 1, got {workers}")
    return workers


@dataclass(frozen=True)
class SimulationSettings:
    """
    Immutable Monte Carlo configuration defaults.

    Attributes
    ----------
    n_trials : int
        Default number of simulated terminal prices
    parallel_threshold : int
        AUTO policy switches to the parallel path at or above this many trials.
        Below it, thread dispatch overhead dominates.
    confidence_z : float
        z-score for the 95% normal-approximation confidence interval
    min_chunk_size : int
        Smallest slice handed to a worker in the parallel path
    max_workers : int, optional
        Thread-pool size. Override with ITO_PRICING_MAX_WORKERS.
    """

    n_trials: int = 100_000
    parallel_threshold: int = 10_000
    confidence_z: float = 1.96  # [T1] Phi^-1(0.975)
    min_chunk_size: int = 16_384
    max_workers: Optional[int] = None  # Set in __post_init__

    def __post_init__(self) -> None:
        """Initialize max_workers from the environment."""
        # Frozen dataclass workaround: use object.__setattr__
        if self.max_workers is None:
            object.__setattr__(self, "max_workers", _resolve_max_workers())


# =============================================================================
# Normal Approximation Configuration
# =============================================================================

@dataclass(frozen=True)
class NormalApproximationSettings:
    """
    Abramowitz & Stegun (1964) 26.2.17 constants. [T1]

    Changing any coefficient invalidates the documented error bound.
    """

    a1: float = 0.319381530
    a2: float = -0.356563782
    a3: float = 1.781477937
    a4: float = -1.821255978
    a5: float = 1.330274429
    p: float = 0.2316419
    max_abs_error: float = NORMAL_CDF_MAX_ERROR


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationSettings:
    """
    Immutable validation configuration.

    Attributes
    ----------
    put_call_parity_tolerance : float
        Default tolerance for put_call_parity_check
    implied_vol_min, implied_vol_max : float
        Newton-Raphson search bounds for implied volatility
    implied_vol_max_iterations : int
        Iteration cap before giving up
    """

    put_call_parity_tolerance: float = PUT_CALL_PARITY_TOLERANCE

    # Implied vol bounds [T2]
    implied_vol_min: float = 0.0
    implied_vol_max: float = 5.0  # 500% annual vol
    implied_vol_initial_guess: float = 0.20
    implied_vol_max_iterations: int = 100
    implied_vol_tolerance: float = 1e-8


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from ito_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.parallel_threshold
    10000
    """

    simulation: SimulationSettings = SimulationSettings()
    normal: NormalApproximationSettings = NormalApproximationSettings()
    validation: ValidationSettings = ValidationSettings()


# Singleton instance - import this
SETTINGS = Settings()
