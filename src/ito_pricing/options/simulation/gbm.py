"""
Geometric Brownian Motion terminal prices.

[T1] GBM SDE under the risk-neutral measure: dS = rS dt + σS dW
[T1] Exact terminal solution: S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)

European payoffs only need S(T), so no intermediate time steps are
simulated. The variate -> price map is pure and elementwise; it can run
on any slice of a variate array in any order.

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

from typing import Optional

import numpy as np

from ito_pricing.options.pricing.black_scholes import MarketParameters


def log_drift(rate: float, volatility: float, time_to_maturity: float) -> float:
    """[T1] Total log drift: (r - σ²/2) * T."""
    return (rate - 0.5 * volatility**2) * time_to_maturity


def log_diffusion(volatility: float, time_to_maturity: float) -> float:
    """[T1] Total log diffusion scale: σ * √T."""
    return float(volatility * np.sqrt(time_to_maturity))


def terminal_prices(
    variates: np.ndarray,
    spot: float,
    drift: float,
    diffusion: float,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Map standard normal variates to GBM terminal prices.

    Parameters
    ----------
    variates : np.ndarray
        Standard normal draws Z
    spot : float
        Initial price S(0)
    drift : float
        Total log drift, see log_drift
    diffusion : float
        Total log diffusion, see log_diffusion
    out : np.ndarray, optional
        Preallocated output of the same shape as variates

    Returns
    -------
    np.ndarray
        S(T) for each variate
    """
    result = np.multiply(variates, diffusion, out=out)
    np.add(result, drift, out=result)
    np.exp(result, out=result)
    np.multiply(result, spot, out=result)
    return result


def simulate_terminal_price(
    rng: np.random.Generator,
    spot: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
) -> float:
    """
    Draw a single GBM terminal price from rng.

    Parameters
    ----------
    rng : np.random.Generator
        Variate source; advanced by one draw
    spot, rate, volatility, time_to_maturity : float
        GBM inputs

    Returns
    -------
    float
        One sample of S(T)
    """
    z = rng.standard_normal()
    drift = log_drift(rate, volatility, time_to_maturity)
    diffusion = log_diffusion(volatility, time_to_maturity)
    return float(spot * np.exp(drift + diffusion * z))


def validate_gbm_simulation(
    params: MarketParameters,
    n_trials: int = 100_000,
    seed: int = 42,
) -> dict:
    """
    Validate GBM simulation against theoretical moments.

    [T1] Under risk-neutral measure:
    - E[S(T)] = S(0) * exp(r*T) (forward price)
    - Var[log(S(T)/S(0))] = σ²T

    Parameters
    ----------
    params : MarketParameters
        Market inputs (strike is unused)
    n_trials : int, default 100000
        Number of terminal prices
    seed : int, default 42
        Random seed

    Returns
    -------
    dict
        Validation results with theoretical vs simulated values
    """
    rng = np.random.default_rng(seed)
    z = rng.standard_normal(n_trials)
    terminal = terminal_prices(
        z,
        params.spot,
        log_drift(params.rate, params.volatility, params.time_to_maturity),
        log_diffusion(params.volatility, params.time_to_maturity),
    )

    # Theoretical values
    expected_mean = params.spot * np.exp(params.rate * params.time_to_maturity)
    expected_log_var = params.volatility**2 * params.time_to_maturity

    # Simulated values
    simulated_mean = terminal.mean()
    simulated_log_var = np.log(terminal / params.spot).var(ddof=1)

    se_mean = terminal.std(ddof=1) / np.sqrt(n_trials)
    mean_z_score = (
        (simulated_mean - expected_mean) / se_mean if se_mean > 0 else 0.0
    )
    variance_error_pct = (
        abs(simulated_log_var - expected_log_var) / expected_log_var * 100
        if expected_log_var > 0
        else 0.0
    )

    return {
        "n_trials": n_trials,
        "theoretical_mean": float(expected_mean),
        "simulated_mean": float(simulated_mean),
        "mean_error": float(abs(simulated_mean - expected_mean)),
        "mean_se": float(se_mean),
        "mean_z_score": float(mean_z_score),
        "theoretical_log_variance": float(expected_log_var),
        "simulated_log_variance": float(simulated_log_var),
        "variance_error_pct": float(variance_error_pct),
        "validation_passed": bool(abs(mean_z_score) < 4.0),
    }
