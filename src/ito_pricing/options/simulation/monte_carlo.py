"""
Monte Carlo option pricing engine.

Prices a European call and put together from one sample of GBM terminal
prices (common random numbers), so the two estimates are positively
correlated and Monte Carlo put-call parity holds up to the sampling error
of the forward alone.

Per call the engine: selects a strategy, draws N standard normals from
its own generator (always single-threaded), maps them to terminal prices
and payoffs (sequentially or on a thread pool), then reduces each payoff
sample to a discounted mean and standard error.

[T1] MC converges to analytical price at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Optional, Sequence, Union

import numpy as np
from scipy import stats

from ito_pricing.config.settings import SETTINGS
from ito_pricing.errors import DegenerateSampleError, InvalidParameterError
from ito_pricing.options.payoffs.base import OptionType, call_payoff, put_payoff
from ito_pricing.options.pricing.black_scholes import BlackScholesModel, MarketParameters
from ito_pricing.options.simulation.execution import (
    ExecutionPolicy,
    chunk_slices,
    fork_join,
    resolve_max_workers,
    resolve_policy,
)
from ito_pricing.options.simulation.gbm import (
    log_diffusion,
    log_drift,
    simulate_terminal_price,
    terminal_prices,
)

logger = logging.getLogger(__name__)

_SUPPORTED_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo configuration.

    Attributes
    ----------
    n_trials : int, default 100000
        Number of simulated terminal prices (N >= 2)
    seed : int, optional
        Random seed; None draws entropy from the operating system
    policy : ExecutionPolicy, default AUTO
        SEQUENTIAL, PARALLEL, or AUTO (parallel from 10,000 trials)
    max_workers : int, optional
        Thread-pool size for the parallel path
    dtype : type, default np.float64
        Floating type of variates, prices and payoffs (float32 or float64)
    """

    n_trials: int = SETTINGS.simulation.n_trials
    seed: Optional[int] = None
    policy: Union[ExecutionPolicy, str] = ExecutionPolicy.AUTO
    max_workers: Optional[int] = None
    dtype: type = np.float64

    def __post_init__(self) -> None:
        """Validate configuration."""
        if isinstance(self.n_trials, bool) or not isinstance(self.n_trials, (int, np.integer)):
            raise InvalidParameterError(
                f"CRITICAL: n_trials must be an integer, got {self.n_trials!r}"
            )
        if self.n_trials <= 0:
            raise InvalidParameterError(f"CRITICAL: n_trials must be > 0, got {self.n_trials}")
        if self.n_trials < 2:
            raise DegenerateSampleError(
                f"CRITICAL: n_trials must be >= 2 for a standard error, got {self.n_trials}"
            )
        if self.seed is not None and (
            isinstance(self.seed, bool)
            or not isinstance(self.seed, (int, np.integer))
            or self.seed < 0
        ):
            raise InvalidParameterError(
                f"CRITICAL: seed must be a non-negative integer or None, got {self.seed!r}"
            )
        if self.max_workers is not None and (
            isinstance(self.max_workers, bool)
            or not isinstance(self.max_workers, (int, np.integer))
        ):
            raise InvalidParameterError(
                f"CRITICAL: max_workers must be an integer or None, got {self.max_workers!r}"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidParameterError(
                f"CRITICAL: max_workers must be >= 1, got {self.max_workers}"
            )

        try:
            dtype = np.dtype(self.dtype)
        except TypeError:
            raise InvalidParameterError(
                f"CRITICAL: dtype must be a floating type, got {self.dtype!r}"
            ) from None
        if dtype not in _SUPPORTED_DTYPES:
            raise InvalidParameterError(
                f"CRITICAL: dtype must be float32 or float64, got {dtype}"
            )

        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "n_trials", int(self.n_trials))
        if self.max_workers is not None:
            object.__setattr__(self, "max_workers", int(self.max_workers))
        object.__setattr__(self, "policy", ExecutionPolicy.coerce(self.policy))
        object.__setattr__(self, "dtype", dtype.type)


@dataclass(frozen=True)
class EstimationResult:
    """
    Monte Carlo estimate of one option price.

    Attributes
    ----------
    price : float
        Discounted mean payoff
    standard_error : float
        Discounted standard error of the mean
    n_trials : int
        Sample size
    """

    price: float
    standard_error: float
    n_trials: int

    def confidence_interval(self, z: float = SETTINGS.simulation.confidence_z) -> float:
        """
        Half-width of the normal-approximation confidence interval.

        [T1] z * SE; z = 1.96 gives 95% asymptotically (CLT).
        """
        return z * self.standard_error

    @property
    def bounds(self) -> tuple[float, float]:
        """95% confidence interval (lower, upper)."""
        half_width = self.confidence_interval()
        return self.price - half_width, self.price + half_width

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    def contains(self, value: float) -> bool:
        """Whether value lies inside the 95% confidence interval."""
        lower, upper = self.bounds
        return lower <= value <= upper


@dataclass(frozen=True)
class PairedEstimationResult:
    """
    Call and put estimates built from the same terminal-price sample.

    Attributes
    ----------
    call : EstimationResult
    put : EstimationResult
    """

    call: EstimationResult
    put: EstimationResult

    @property
    def parity_difference(self) -> float:
        """C - P; compare against S - K*e^(-rT)."""
        return self.call.price - self.put.price

    def __getitem__(self, option_type: OptionType) -> EstimationResult:
        return self.call if option_type == OptionType.CALL else self.put


def compute_statistics(payoffs: np.ndarray, discount_factor: float) -> EstimationResult:
    """
    Reduce an undiscounted payoff sample to a priced estimate.

    [T1] mean = Σ payoff / N
    [T1] var = Σ (payoff - mean)² / (N - 1)
    [T1] SE = √(var / N)

    Parameters
    ----------
    payoffs : np.ndarray
        Undiscounted payoffs
    discount_factor : float
        e^(-rT)

    Returns
    -------
    EstimationResult
        Discounted price and standard error

    Raises
    ------
    DegenerateSampleError
        If fewer than 2 payoffs are given
    """
    n = len(payoffs)
    if n < 2:
        raise DegenerateSampleError(
            f"CRITICAL: need at least 2 payoffs for a standard error, got {n}"
        )

    mean_payoff = payoffs.mean(dtype=np.float64)
    variance = payoffs.var(ddof=1, dtype=np.float64)
    se = np.sqrt(variance / n)

    return EstimationResult(
        price=float(discount_factor * mean_payoff),
        standard_error=float(discount_factor * se),
        n_trials=n,
    )


def sequential_payoffs(
    variates: np.ndarray,
    params: MarketParameters,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Single-threaded variate -> terminal price -> (call, put) payoffs.

    Both payoffs of trial i come from the same S(T)_i.
    """
    drift = log_drift(params.rate, params.volatility, params.time_to_maturity)
    diffusion = log_diffusion(params.volatility, params.time_to_maturity)

    terminal = terminal_prices(
        variates, params.spot, drift, diffusion, out=np.empty_like(variates)
    )
    calls = call_payoff(terminal, params.strike, out=np.empty_like(terminal))
    puts = put_payoff(terminal, params.strike, out=np.empty_like(terminal))
    return calls, puts


def parallel_payoffs(
    variates: np.ndarray,
    params: MarketParameters,
    max_workers: Optional[int] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Fork-join version of sequential_payoffs on a thread pool.

    Stage 1 maps variate slices to terminal prices; stage 2 maps the
    terminal-price slices to call and put payoffs in one fork. Every task
    writes to its own slice, and the variates are never regenerated.
    """
    workers = resolve_max_workers(max_workers)
    drift = log_drift(params.rate, params.volatility, params.time_to_maturity)
    diffusion = log_diffusion(params.volatility, params.time_to_maturity)

    terminal = np.empty_like(variates)
    calls = np.empty_like(variates)
    puts = np.empty_like(variates)
    slices = chunk_slices(len(variates), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        fork_join(
            executor,
            [
                partial(
                    terminal_prices, variates[s], params.spot, drift, diffusion, out=terminal[s]
                )
                for s in slices
            ],
        )
        fork_join(
            executor,
            [partial(call_payoff, terminal[s], params.strike, out=calls[s]) for s in slices]
            + [partial(put_payoff, terminal[s], params.strike, out=puts[s]) for s in slices],
        )

    return calls, puts


class MonteCarloEngine:
    """
    Monte Carlo pricing engine for European calls and puts.

    The engine owns one generator seeded from its config. Every pricing
    call advances it, so repeated calls give fresh estimates while two
    engines with the same seed produce identical sequences. The generator
    is not safe for concurrent draws: share an engine across threads only
    with external serialization.

    Parameters
    ----------
    config : SimulationConfig, optional
        Trial count, seed, policy and dtype (defaults if omitted)

    Examples
    --------
    >>> engine = MonteCarloEngine(SimulationConfig(n_trials=100_000, seed=42))
    >>> result = engine.price_european_call_and_put(100, 100, 0.05, 0.20, 1.0)
    >>> print(f"Call: {result.call.price:.4f} ± {result.call.confidence_interval():.4f}")  # doctest: +SKIP
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config if config is not None else SimulationConfig()
        self._seed_sequence = np.random.SeedSequence(self.config.seed)
        self._rng = np.random.default_rng(self._seed_sequence)

    @property
    def n_trials(self) -> int:
        return self.config.n_trials

    @property
    def seed(self) -> Optional[int]:
        return self.config.seed

    @property
    def entropy(self) -> int:
        """Seed entropy actually used; pass as seed to reproduce an unseeded run."""
        return self._seed_sequence.entropy

    def price_european_call_and_put(
        self,
        spot: float,
        strike: float,
        rate: float,
        volatility: float,
        time_to_maturity: float,
    ) -> PairedEstimationResult:
        """
        Price a European call and put on one shared terminal-price sample.

        [T1] Call payoff: max(S(T) - K, 0)
        [T1] Put payoff: max(K - S(T), 0)

        Parameters
        ----------
        spot : float
            Initial spot price S(0)
        strike : float
            Strike price
        rate : float
            Risk-free rate (decimal)
        volatility : float
            Volatility (decimal)
        time_to_maturity : float
            Time to maturity in years

        Returns
        -------
        PairedEstimationResult
            Call and put estimates with standard errors

        Raises
        ------
        InvalidParameterError
            If market inputs are invalid; raised before any draw
        """
        params = MarketParameters(
            spot=spot,
            strike=strike,
            rate=rate,
            volatility=volatility,
            time_to_maturity=time_to_maturity,
        )

        strategy = resolve_policy(self.config.policy, self.config.n_trials)
        if strategy == ExecutionPolicy.PARALLEL:
            workers = resolve_max_workers(self.config.max_workers)
            logger.debug(
                f"Pricing {self.config.n_trials} trials on parallel path ({workers} workers)"
            )
            compute_payoffs = partial(parallel_payoffs, max_workers=workers)
        else:
            logger.debug(f"Pricing {self.config.n_trials} trials on sequential path")
            compute_payoffs = sequential_payoffs

        variates = self._draw_variates()
        calls, puts = compute_payoffs(variates, params)

        df = params.discount_factor
        return PairedEstimationResult(
            call=compute_statistics(calls, df),
            put=compute_statistics(puts, df),
        )

    def simulate_terminal_price(
        self,
        spot: float,
        rate: float,
        volatility: float,
        time_to_maturity: float,
    ) -> float:
        """
        Draw one GBM terminal price from the engine's generator.

        [T1] S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)
        """
        # Strike is irrelevant to S(T); spot stands in so validation runs
        params = MarketParameters(
            spot=spot,
            strike=spot,
            rate=rate,
            volatility=volatility,
            time_to_maturity=time_to_maturity,
        )
        return simulate_terminal_price(
            self._rng, params.spot, params.rate, params.volatility, params.time_to_maturity
        )

    def _draw_variates(self) -> np.ndarray:
        """All N standard normals, drawn in order on the calling thread."""
        return self._rng.standard_normal(self.config.n_trials, dtype=self.config.dtype)


def price_vanilla_mc(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
    option_type: OptionType,
    n_trials: int = SETTINGS.simulation.n_trials,
    seed: Optional[int] = None,
    policy: Union[ExecutionPolicy, str] = ExecutionPolicy.AUTO,
) -> EstimationResult:
    """
    Convenience function to price one vanilla option via MC.

    Parameters
    ----------
    spot, strike, rate, volatility, time_to_maturity : float
        Market and contract inputs
    option_type : OptionType
        CALL or PUT
    n_trials : int, default 100000
        Number of trials
    seed : int, optional
        Random seed
    policy : ExecutionPolicy, default AUTO
        Execution policy

    Returns
    -------
    EstimationResult
        Monte Carlo estimate for the requested side
    """
    engine = MonteCarloEngine(SimulationConfig(n_trials=n_trials, seed=seed, policy=policy))
    result = engine.price_european_call_and_put(spot, strike, rate, volatility, time_to_maturity)
    return result[option_type]


def convergence_analysis(
    params: MarketParameters,
    trial_counts: Sequence[int] = (1_000, 5_000, 10_000, 50_000, 100_000, 500_000),
    seed: int = 42,
    option_type: OptionType = OptionType.CALL,
) -> dict:
    """
    Analyze MC convergence to the analytical price.

    [T1] MC error should converge at rate 1/√N, i.e. a log-log slope of -0.5.

    Parameters
    ----------
    params : MarketParameters
        Market and contract inputs
    trial_counts : Sequence[int]
        Sample sizes to test
    seed : int
        Random seed (each sample size uses a fresh engine)
    option_type : OptionType
        Side to analyze

    Returns
    -------
    dict
        Per-size results, the standard-error slope ("convergence_rate")
        and the absolute-error slope ("error_rate")
    """
    model = BlackScholesModel(params)
    analytical_price = model.price(option_type)

    results = []
    for n in trial_counts:
        engine = MonteCarloEngine(SimulationConfig(n_trials=n, seed=seed))
        estimate = engine.price_european_call_and_put(
            params.spot,
            params.strike,
            params.rate,
            params.volatility,
            params.time_to_maturity,
        )[option_type]

        error = abs(estimate.price - analytical_price)
        results.append(
            {
                "n_trials": n,
                "mc_price": estimate.price,
                "analytical_price": analytical_price,
                "absolute_error": error,
                "relative_error": error / analytical_price if analytical_price > 0 else float("inf"),
                "standard_error": estimate.standard_error,
                "within_ci": estimate.contains(analytical_price),
            }
        )

    log_n = np.log([r["n_trials"] for r in results])
    se_fit = stats.linregress(log_n, np.log([r["standard_error"] for r in results]))
    error_fit = stats.linregress(log_n, np.log([r["absolute_error"] + 1e-10 for r in results]))

    return {
        "results": results,
        "convergence_rate": float(se_fit.slope),
        "error_rate": float(error_fit.slope),
    }
