"""
Macro Factor Engine

Scores macro conditions per asset class and maps the resulting signals to
option-selling structures.
"""

from .macro_scorer import MacroScorer, determine_signal
from .strategy_mapper import SIGNAL_TO_STRATEGY, get_strategy_type

__all__ = [
    'MacroScorer',
    'determine_signal',
    'SIGNAL_TO_STRATEGY',
    'get_strategy_type',
]
