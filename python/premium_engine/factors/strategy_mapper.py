"""
Strategy Mapper: Signal -> Premium-Selling Structure

Fixed mapping, not configurable per call:
- buy     -> short put      (bullish: collect premium below the market)
- sell    -> short call     (bearish: collect premium above the market)
- neutral -> short strangle (sell both wings)
"""

from types import MappingProxyType
from typing import Mapping

from ..core.models import Signal, StrategyType


SIGNAL_TO_STRATEGY: Mapping[Signal, StrategyType] = MappingProxyType({
    Signal.BUY: StrategyType.SHORT_PUT,
    Signal.SELL: StrategyType.SHORT_CALL,
    Signal.NEUTRAL: StrategyType.SHORT_STRANGLE,
})


def get_strategy_type(signal: Signal) -> StrategyType:
    """
    Map a signal to the structure sold for it.

    Raises:
        ValueError: if signal is not a Signal member
    """
    if not isinstance(signal, Signal):
        raise ValueError(f"Unknown signal: {signal!r}")
    return SIGNAL_TO_STRATEGY[signal]
