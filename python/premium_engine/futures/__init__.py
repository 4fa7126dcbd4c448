"""
Futures contract universe and position sizing.
"""

from .contract_specs import DEFAULT_CONTRACT_SPECS, build_spec_table, get_contract_spec
from .position_sizer import (
    PositionSizer,
    PositionSizeResult,
    buying_power_pct,
    calculate_buying_power,
)

__all__ = [
    'DEFAULT_CONTRACT_SPECS',
    'build_spec_table',
    'get_contract_spec',
    'PositionSizer',
    'PositionSizeResult',
    'buying_power_pct',
    'calculate_buying_power',
]
