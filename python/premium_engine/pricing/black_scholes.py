"""
Black-Scholes-Merton pricing and delta-targeted strike selection.

Implements:
- Price: closed-form European call/put premium
- Delta: N(d1) for calls, N(d1) - 1 for puts
- Strike search: bisection for the strike whose delta hits a target

Assumptions:
- European-style options (no early exercise)
- No dividends
- Constant risk-free rate and volatility

The normal CDF uses the Abramowitz-Stegun 26.2.17 rational approximation
(absolute error below 7.5e-8). Pass exact=True to use scipy's erf-based CDF.
"""

import logging
from dataclasses import dataclass
from typing import Literal, Union

import numpy as np
from scipy.stats import norm

from ..core.errors import InvalidInputError, NumericalNonConvergenceError

logger = logging.getLogger(__name__)

OptionType = Literal['call', 'put']

# Abramowitz & Stegun 26.2.17
_AS_P = 0.2316419
_AS_PDF = 0.3989423  # 1/sqrt(2*pi), truncated
_AS_B = (0.3193815, -0.3565638, 1.781478, -1.821256, 1.330274)

MAX_VOLATILITY = 2.0
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = 0.001


def norm_cdf(x: Union[float, np.ndarray], exact: bool = False) -> Union[float, np.ndarray]:
    """
    Standard normal cumulative distribution function.

    Parameters:
    -----------
    x : float or ndarray
        Point(s) at which to evaluate N(x)
    exact : bool
        Use scipy.stats.norm.cdf instead of the polynomial approximation

    Returns:
    --------
    float or ndarray
        N(x), same shape as x
    """
    if exact:
        result = norm.cdf(x)
        return float(result) if np.ndim(result) == 0 else result

    x_arr = np.asarray(x, dtype=float)
    t = 1.0 / (1.0 + _AS_P * np.abs(x_arr))
    d = _AS_PDF * np.exp(-x_arr * x_arr / 2.0)
    b1, b2, b3, b4, b5 = _AS_B
    tail = d * t * (b1 + t * (b2 + t * (b3 + t * (b4 + t * b5))))
    result = np.where(x_arr > 0, 1.0 - tail, tail)

    if result.ndim == 0:
        return float(result)
    return result


def _validate_inputs(S: float, K: float, T: float, sigma: float) -> None:
    """
    Enforce the hard preconditions of the model.

    Raises:
        InvalidInputError: if S, K or T is not strictly positive, or sigma
            is outside (0, 2]
    """
    if not S > 0:
        raise InvalidInputError(f"Spot price must be positive, got {S}")
    if not K > 0:
        raise InvalidInputError(f"Strike must be positive, got {K}")
    if not T > 0:
        raise InvalidInputError(f"Time to expiration must be positive, got {T}")
    if not 0 < sigma <= MAX_VOLATILITY:
        raise InvalidInputError(f"Volatility must be in (0, {MAX_VOLATILITY}], got {sigma}")


def _validate_option_type(option_type: str) -> None:
    if option_type not in ('call', 'put'):
        raise InvalidInputError(f"option_type must be 'call' or 'put', got {option_type!r}")


def _calculate_d1(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    d1 = (ln(S/K) + (r + 0.5*sigma^2)*T) / (sigma * sqrt(T))
    """
    return (np.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * np.sqrt(T))


def calculate_price(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType,
    exact: bool = False
) -> float:
    """
    Calculate option premium (per unit of underlying) using Black-Scholes.

    Call = S * N(d1) - K * exp(-r*T) * N(d2)
    Put = K * exp(-r*T) * N(-d2) - S * N(-d1)

    Parameters:
    -----------
    S : float
        Current underlying price
    K : float
        Strike price
    T : float
        Time to expiration in years
    r : float
        Risk-free interest rate (annualized)
    sigma : float
        Implied volatility (annualized)
    option_type : str
        'call' or 'put'
    exact : bool
        Use the exact normal CDF

    Returns:
    --------
    float
        Theoretical option price
    """
    _validate_inputs(S, K, T, sigma)
    _validate_option_type(option_type)

    d1 = _calculate_d1(S, K, T, r, sigma)
    d2 = d1 - sigma * np.sqrt(T)
    discounted_strike = K * np.exp(-r * T)

    if option_type == 'call':
        price = S * norm_cdf(d1, exact) - discounted_strike * norm_cdf(d2, exact)
    else:
        price = discounted_strike * norm_cdf(-d2, exact) - S * norm_cdf(-d1, exact)
    return float(price)


def calculate_delta(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType,
    exact: bool = False
) -> float:
    """
    Calculate option delta using Black-Scholes model.

    Call Delta = N(d1)           (ranges from 0 to 1)
    Put Delta = N(d1) - 1        (ranges from -1 to 0)

    Parameters: Same as calculate_price

    Returns:
    --------
    float
        Option delta
    """
    _validate_inputs(S, K, T, sigma)
    _validate_option_type(option_type)

    n_d1 = norm_cdf(_calculate_d1(S, K, T, r, sigma), exact)
    if option_type == 'call':
        return float(n_d1)
    return float(n_d1 - 1.0)


def calculate_strangle_premium(
    S: float,
    put_strike: float,
    call_strike: float,
    dte: float,
    sigma: float,
    r: float = 0.045
) -> float:
    """Combined put + call premium for a strangle expiring in `dte` calendar days."""
    T = dte / 365.0
    put_premium = calculate_price(S, put_strike, T, r, sigma, 'put')
    call_premium = calculate_price(S, call_strike, T, r, sigma, 'call')
    return put_premium + call_premium


@dataclass(frozen=True)
class StrikeSearchResult:
    """Outcome of a delta-targeted strike search."""
    strike: float
    delta: float
    target_delta: float
    iterations: int
    converged: bool


def find_strike_for_delta(
    S: float,
    target_delta: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
    strict: bool = False
) -> StrikeSearchResult:
    """
    Find the OTM strike whose delta matches target_delta by bisection.

    Puts are searched in [0.5*S, S] against -|target_delta|; calls in
    [S, 1.5*S] against +|target_delta|. Delta decreases monotonically in
    strike for both kinds, so each step keeps the half of the bracket that
    still contains the target.

    If the iteration cap is reached first, the midpoint of the final bracket
    is returned with converged=False (best effort). With strict=True that
    case raises NumericalNonConvergenceError instead.

    Parameters:
    -----------
    S : float
        Current underlying price
    target_delta : float
        Desired delta magnitude (sign is taken from option_type)
    T, r, sigma : float
        As in calculate_price
    option_type : str
        'call' or 'put'
    max_iterations : int
        Bisection step cap
    tolerance : float
        Absolute delta tolerance for early exit

    Returns:
    --------
    StrikeSearchResult
    """
    _validate_inputs(S, S, T, sigma)
    _validate_option_type(option_type)

    if option_type == 'put':
        adjusted_delta = -abs(target_delta)
        lower, upper = S * 0.5, S
    else:
        adjusted_delta = abs(target_delta)
        lower, upper = S, S * 1.5

    for iteration in range(1, max_iterations + 1):
        mid = (lower + upper) / 2
        current_delta = calculate_delta(S, mid, T, r, sigma, option_type)

        if abs(current_delta - adjusted_delta) < tolerance:
            return StrikeSearchResult(
                strike=mid,
                delta=current_delta,
                target_delta=adjusted_delta,
                iterations=iteration,
                converged=True,
            )

        # Delta above target means the strike is too low (too far ITM for
        # calls, too far OTM for puts)
        if current_delta > adjusted_delta:
            lower = mid
        else:
            upper = mid

    strike = (lower + upper) / 2
    final_delta = calculate_delta(S, strike, T, r, sigma, option_type)
    message = (
        f"Strike search for {option_type} delta {adjusted_delta:+.3f} did not converge "
        f"in {max_iterations} iterations (S={S}, sigma={sigma}); best strike {strike:.4f} "
        f"has delta {final_delta:+.4f}"
    )
    if strict:
        raise NumericalNonConvergenceError(message)
    logger.warning(message)

    return StrikeSearchResult(
        strike=strike,
        delta=final_delta,
        target_delta=adjusted_delta,
        iterations=max_iterations,
        converged=False,
    )


def strike_for_delta(
    S: float,
    target_delta: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType
) -> float:
    """Strike-only shortcut for find_strike_for_delta with default settings."""
    return find_strike_for_delta(S, target_delta, T, r, sigma, option_type).strike
