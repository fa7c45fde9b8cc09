"""
Black-Scholes-Merton pricing with Greeks.

Implements analytical pricing for European options on a non-dividend
underlying. BlackScholesModel owns one validated MarketParameters and
memoizes d1/d2 and the call/put Greeks; the model is immutable, so cached
values stay valid for its lifetime.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from ito_pricing.config.settings import SETTINGS
from ito_pricing.errors import InvalidParameterError
from ito_pricing.options.payoffs.base import OptionType
from ito_pricing.options.pricing.normal import normal_cdf, normal_pdf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketParameters:
    """
    Immutable market inputs for a single option contract.

    Attributes
    ----------
    spot : float
        Current price of the underlying (S > 0)
    strike : float
        Strike price (K > 0)
    rate : float
        Risk-free rate, annualized decimal (any sign)
    volatility : float
        Volatility, annualized decimal (σ >= 0)
    time_to_maturity : float
        Time to maturity in years (τ > 0)
    """

    spot: float
    strike: float
    rate: float
    volatility: float
    time_to_maturity: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        self.validate()

    def validate(self) -> None:
        """
        Check every precondition, raising on the first violation.

        Raises
        ------
        InvalidParameterError
            If any input is non-finite, or spot <= 0, strike <= 0,
            volatility < 0, or time_to_maturity <= 0.
        """
        for name in ("spot", "strike", "rate", "volatility", "time_to_maturity"):
            value = getattr(self, name)
            if not np.isfinite(value):
                raise InvalidParameterError(f"CRITICAL: {name} must be finite, got {value}")
        if self.spot <= 0:
            raise InvalidParameterError(f"CRITICAL: spot must be > 0, got {self.spot}")
        if self.strike <= 0:
            raise InvalidParameterError(f"CRITICAL: strike must be > 0, got {self.strike}")
        if self.volatility < 0:
            raise InvalidParameterError(
                f"CRITICAL: volatility must be >= 0, got {self.volatility}"
            )
        if self.time_to_maturity <= 0:
            raise InvalidParameterError(
                f"CRITICAL: time_to_maturity must be > 0, got {self.time_to_maturity}"
            )
        # Negative rates are market-valid

    @property
    def discount_factor(self) -> float:
        """e^(-rτ)."""
        return float(np.exp(-self.rate * self.time_to_maturity))

    @property
    def parity_value(self) -> float:
        """[T1] S - K*e^(-rτ), the model-free value of C - P."""
        return self.spot - self.strike * self.discount_factor


@dataclass(frozen=True)
class Greeks:
    """
    Option sensitivities in raw (per unit) terms.

    Attributes
    ----------
    delta : float
        dV/dS
    gamma : float
        d²V/dS²
    vega : float
        dV/dσ
    theta : float
        dV/dt, per year
    rho : float
        dV/dr
    """

    delta: float = 0.0
    gamma: float = 0.0
    vega: float = 0.0
    theta: float = 0.0
    rho: float = 0.0

    def per_market_convention(self) -> "Greeks":
        """Vega and rho per 1% move, theta per calendar day."""
        return replace(
            self,
            vega=self.vega * 0.01,
            theta=self.theta / 365.0,
            rho=self.rho * 0.01,
        )


@dataclass(frozen=True)
class BSResult:
    """
    Immutable Black-Scholes pricing result.

    Attributes
    ----------
    price : float
        Option price
    delta, gamma, vega, theta, rho : float
        Raw Greeks (see Greeks)
    d1 : float
        d1 parameter
    d2 : float
        d2 parameter
    """

    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float
    d1: float
    d2: float

    @property
    def greeks(self) -> Greeks:
        return Greeks(
            delta=self.delta,
            gamma=self.gamma,
            vega=self.vega,
            theta=self.theta,
            rho=self.rho,
        )


class BlackScholesModel:
    """
    Closed-form European option model with memoized intermediates.

    Each cached quantity (d1/d2, call Greeks, put Greeks) is None until
    first read and holds its computed value afterwards.

    Parameters
    ----------
    params : MarketParameters
        Validated market inputs

    Examples
    --------
    >>> model = BlackScholesModel.from_values(100, 100, 0.05, 0.20, 1.0)
    >>> round(model.call_price(), 2)
    10.45
    >>> round(model.put_price(), 2)
    5.57
    """

    def __init__(self, params: MarketParameters):
        params.validate()
        self._params = params

        self._d_terms: Optional[tuple[float, float]] = None
        self._call_greeks: Optional[Greeks] = None
        self._put_greeks: Optional[Greeks] = None

    @classmethod
    def from_values(
        cls,
        spot: float,
        strike: float,
        rate: float,
        volatility: float,
        time_to_maturity: float,
    ) -> "BlackScholesModel":
        """Build the model straight from scalar inputs."""
        return cls(
            MarketParameters(
                spot=spot,
                strike=strike,
                rate=rate,
                volatility=volatility,
                time_to_maturity=time_to_maturity,
            )
        )

    @property
    def params(self) -> MarketParameters:
        return self._params

    def __repr__(self) -> str:
        p = self._params
        return (
            f"BlackScholesModel(spot={p.spot}, strike={p.strike}, rate={p.rate}, "
            f"volatility={p.volatility}, time_to_maturity={p.time_to_maturity})"
        )

    def compute_d(self) -> tuple[float, float]:
        """
        Calculate (or return cached) d1 and d2.

        [T1] d1 = (ln(S/K) + (r + σ²/2)τ) / (σ√τ)
        [T1] d2 = d1 - σ√τ

        At σ = 0 the limits are used: ±inf by the sign of ln(S/K) + rτ,
        or 0 when the spot equals the discounted strike.

        Returns
        -------
        tuple[float, float]
            (d1, d2)
        """
        if self._d_terms is not None:
            return self._d_terms

        p = self._params
        sigma_sqrt_t = p.volatility * np.sqrt(p.time_to_maturity)
        numerator = (
            np.log(p.spot / p.strike)
            + (p.rate + 0.5 * p.volatility**2) * p.time_to_maturity
        )

        if sigma_sqrt_t == 0.0:
            d1 = 0.0 if numerator == 0.0 else float(np.copysign(np.inf, numerator))
            d2 = d1
        else:
            d1 = float(numerator / sigma_sqrt_t)
            d2 = float(d1 - sigma_sqrt_t)

        self._d_terms = (d1, d2)
        return self._d_terms

    def call_price(self) -> float:
        """
        Price the European call.

        [T1] C = S*Φ(d1) - K*e^(-rτ)*Φ(d2)
        """
        d1, d2 = self.compute_d()
        p = self._params
        return float(
            p.spot * normal_cdf(d1) - p.strike * p.discount_factor * normal_cdf(d2)
        )

    def put_price(self) -> float:
        """
        Price the European put through put-call parity.

        [T1] P = C - S + K*e^(-rτ)

        Equivalent to the direct K*e^(-rτ)*Φ(-d2) - S*Φ(-d1) up to rounding.
        """
        p = self._params
        return self.call_price() - p.spot + p.strike * p.discount_factor

    def price(self, option_type: OptionType) -> float:
        if option_type == OptionType.CALL:
            return self.call_price()
        return self.put_price()

    def call_greeks(self) -> Greeks:
        """
        Call Greeks, computed on first access.

        [T1] Delta = Φ(d1)
        [T1] Gamma = φ(d1) / (S * σ * √τ)
        [T1] Vega = S * φ(d1) * √τ
        [T1] Theta = -S*φ(d1)*σ/(2√τ) - r*K*e^(-rτ)*Φ(d2)
        [T1] Rho = K * τ * e^(-rτ) * Φ(d2)
        """
        if self._call_greeks is None:
            d1, d2 = self.compute_d()
            p = self._params
            sqrt_t, exp_rate, n_d1 = self._shared_terms(d1)
            gamma, vega = self._curvature(n_d1, sqrt_t)
            N_d2 = normal_cdf(d2)

            self._call_greeks = Greeks(
                delta=float(normal_cdf(d1)),
                gamma=gamma,
                vega=vega,
                theta=float(
                    -p.spot * n_d1 * p.volatility / (2 * sqrt_t)
                    - p.rate * p.strike * exp_rate * N_d2
                ),
                rho=float(p.strike * p.time_to_maturity * exp_rate * N_d2),
            )
        return self._call_greeks

    def put_greeks(self) -> Greeks:
        """
        Put Greeks, computed on first access.

        [T1] Delta = Φ(d1) - 1
        [T1] Gamma, Vega = same as call
        [T1] Theta = -S*φ(d1)*σ/(2√τ) + r*K*e^(-rτ)*Φ(-d2)
        [T1] Rho = -K * τ * e^(-rτ) * Φ(-d2)
        """
        if self._put_greeks is None:
            d1, d2 = self.compute_d()
            p = self._params
            sqrt_t, exp_rate, n_d1 = self._shared_terms(d1)
            gamma, vega = self._curvature(n_d1, sqrt_t)
            N_neg_d2 = normal_cdf(-d2)

            self._put_greeks = Greeks(
                delta=float(normal_cdf(d1) - 1.0),
                gamma=gamma,
                vega=vega,
                theta=float(
                    -p.spot * n_d1 * p.volatility / (2 * sqrt_t)
                    + p.rate * p.strike * exp_rate * N_neg_d2
                ),
                rho=float(-p.strike * p.time_to_maturity * exp_rate * N_neg_d2),
            )
        return self._put_greeks

    def greeks(self, option_type: OptionType) -> Greeks:
        if option_type == OptionType.CALL:
            return self.call_greeks()
        return self.put_greeks()

    def _shared_terms(self, d1: float) -> tuple[float, float, float]:
        """√τ, e^(-rτ) and φ(d1)."""
        p = self._params
        return float(np.sqrt(p.time_to_maturity)), p.discount_factor, normal_pdf(d1)

    def _curvature(self, n_d1: float, sqrt_t: float) -> tuple[float, float]:
        """Gamma and vega; both are zero in the σ = 0 limit."""
        p = self._params
        if p.volatility == 0.0:
            return 0.0, 0.0
        gamma = n_d1 / (p.spot * p.volatility * sqrt_t)
        vega = p.spot * n_d1 * sqrt_t
        return float(gamma), float(vega)


# =============================================================================
# Functional interface
# =============================================================================


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
) -> float:
    """
    Price European call option using Black-Scholes.

    Examples
    --------
    >>> round(black_scholes_call(42, 40, 0.10, 0.20, 0.5), 2)
    4.76
    """
    return BlackScholesModel.from_values(
        spot, strike, rate, volatility, time_to_maturity
    ).call_price()


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
) -> float:
    """
    Price European put option using Black-Scholes.

    Examples
    --------
    >>> round(black_scholes_put(42, 40, 0.10, 0.20, 0.5), 2)
    0.81
    """
    return BlackScholesModel.from_values(
        spot, strike, rate, volatility, time_to_maturity
    ).put_price()


def black_scholes_greeks(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
    option_type: OptionType,
) -> BSResult:
    """
    Calculate Black-Scholes price and all Greeks.

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    time_to_maturity : float
        Time to maturity (years)
    option_type : OptionType
        Call or put

    Returns
    -------
    BSResult
        Price, raw Greeks, d1 and d2
    """
    model = BlackScholesModel.from_values(spot, strike, rate, volatility, time_to_maturity)
    d1, d2 = model.compute_d()
    greeks = model.greeks(option_type)

    return BSResult(
        price=model.price(option_type),
        delta=greeks.delta,
        gamma=greeks.gamma,
        vega=greeks.vega,
        theta=greeks.theta,
        rho=greeks.rho,
        d1=d1,
        d2=d2,
    )


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    time_to_maturity: float,
    tolerance: float = SETTINGS.validation.put_call_parity_tolerance,
) -> tuple[bool, float]:
    """
    Verify put-call parity holds.

    [T1] Put-Call Parity: C - P = S - K*e^(-rT)

    Parameters
    ----------
    call_price : float
        Call option price
    put_price : float
        Put option price
    spot : float
        Spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate
    time_to_maturity : float
        Time to maturity
    tolerance : float, default 1e-10
        Acceptable error

    Returns
    -------
    tuple[bool, float]
        (parity_holds, error)
    """
    actual_diff = call_price - put_price
    expected_diff = spot - strike * np.exp(-rate * time_to_maturity)

    error = float(abs(actual_diff - expected_diff))
    return error < tolerance, error


def implied_volatility(
    market_price: float,
    spot: float,
    strike: float,
    rate: float,
    time_to_maturity: float,
    option_type: OptionType,
    initial_guess: float = SETTINGS.validation.implied_vol_initial_guess,
    max_iterations: int = SETTINGS.validation.implied_vol_max_iterations,
    tolerance: float = SETTINGS.validation.implied_vol_tolerance,
) -> Optional[float]:
    """
    Calculate implied volatility using Newton-Raphson on model vega.

    Parameters
    ----------
    market_price : float
        Observed market price
    spot, strike, rate, time_to_maturity : float
        Contract and market inputs
    option_type : OptionType
        Call or put
    initial_guess : float, default 0.20
        Initial volatility guess
    max_iterations : int, default 100
        Maximum iterations
    tolerance : float, default 1e-8
        Convergence tolerance on price

    Returns
    -------
    float or None
        Implied volatility, or None if not converged
    """
    vol = initial_guess

    for iteration in range(max_iterations):
        model = BlackScholesModel.from_values(spot, strike, rate, vol, time_to_maturity)
        price_diff = model.price(option_type) - market_price

        if abs(price_diff) < tolerance:
            return vol

        vega = model.greeks(option_type).vega
        if abs(vega) < 1e-10:
            logger.debug(f"Implied vol: vega vanished at iteration {iteration} (vol={vol})")
            return None

        vol = vol - price_diff / vega

        # Bounds check
        if (
            vol <= SETTINGS.validation.implied_vol_min
            or vol > SETTINGS.validation.implied_vol_max
        ):
            logger.debug(f"Implied vol: iterate {vol} left search bounds")
            return None

    logger.debug(f"Implied vol: no convergence after {max_iterations} iterations")
    return None
