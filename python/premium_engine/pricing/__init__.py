"""
Option pricing: Black-Scholes-Merton premiums, deltas and strike search.
"""

from .black_scholes import (
    StrikeSearchResult,
    calculate_delta,
    calculate_price,
    calculate_strangle_premium,
    find_strike_for_delta,
    norm_cdf,
    strike_for_delta,
)

__all__ = [
    'StrikeSearchResult',
    'calculate_delta',
    'calculate_price',
    'calculate_strangle_premium',
    'find_strike_for_delta',
    'norm_cdf',
    'strike_for_delta',
]
