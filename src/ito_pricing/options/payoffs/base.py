"""
Vanilla European payoffs.

Payoffs are pure elementwise maps from terminal price to cash flow, so
they can run on any slice of a terminal-price sample independently.
"""

from enum import Enum
from typing import Optional

import numpy as np


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


def call_payoff(
    terminal: np.ndarray,
    strike: float,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    [T1] Call payoff: max(S(T) - K, 0)

    Parameters
    ----------
    terminal : np.ndarray
        Terminal prices S(T)
    strike : float
        Strike price K
    out : np.ndarray, optional
        Preallocated output of the same shape

    Returns
    -------
    np.ndarray
        Undiscounted call payoffs
    """
    diff = np.subtract(terminal, strike, out=out)
    return np.maximum(diff, 0, out=diff)


def put_payoff(
    terminal: np.ndarray,
    strike: float,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    [T1] Put payoff: max(K - S(T), 0)

    Parameters
    ----------
    terminal : np.ndarray
        Terminal prices S(T)
    strike : float
        Strike price K
    out : np.ndarray, optional
        Preallocated output of the same shape

    Returns
    -------
    np.ndarray
        Undiscounted put payoffs
    """
    diff = np.subtract(strike, terminal, out=out)
    return np.maximum(diff, 0, out=diff)


def european_payoff(
    terminal: np.ndarray,
    strike: float,
    option_type: OptionType,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Dispatch to call_payoff or put_payoff."""
    if option_type == OptionType.CALL:
        return call_payoff(terminal, strike, out=out)
    return put_payoff(terminal, strike, out=out)
