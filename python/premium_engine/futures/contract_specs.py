"""
Futures contract specifications for the tradeable universe.

One row per supported instrument; the table is read-only at runtime.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..core.models import AssetClass, AssetSpecification

DEFAULT_MAX_NOTIONAL = 500_000.0


def _spec(symbol, name, asset_class, multiplier, tick_size, tick_value, contract_size, exchange):
    return AssetSpecification(
        symbol=symbol,
        name=name,
        asset_class=asset_class,
        multiplier=multiplier,
        max_notional=DEFAULT_MAX_NOTIONAL,
        exchange=exchange,
        tick_size=tick_size,
        tick_value=tick_value,
        contract_size=contract_size,
    )


_DEFAULT_SPECS = (
    _spec('ES', 'E-mini S&P 500', AssetClass.EQUITY_INDICES, 50, 0.25, 12.50, '$50 x S&P 500 Index', 'CME'),
    _spec('NQ', 'E-mini Nasdaq', AssetClass.EQUITY_INDICES, 20, 0.25, 5.00, '$20 x Nasdaq-100 Index', 'CME'),
    _spec('GC', 'Gold Futures', AssetClass.PRECIOUS_METALS, 100, 0.10, 10.00, '100 troy oz', 'COMEX'),
    _spec('SI', 'Silver Futures', AssetClass.PRECIOUS_METALS, 5000, 0.005, 25.00, '5,000 troy oz', 'COMEX'),
    _spec('CL', 'Crude Oil', AssetClass.ENERGY, 1000, 0.01, 10.00, '1,000 barrels', 'NYMEX'),
    _spec('NG', 'Natural Gas', AssetClass.ENERGY, 10000, 0.001, 10.00, '10,000 MMBtu', 'NYMEX'),
    _spec('HG', 'Copper Futures', AssetClass.INDUSTRIAL_METALS, 25000, 0.0005, 12.50, '25,000 lbs', 'COMEX'),
    _spec('ZW', 'Wheat Futures', AssetClass.AGRICULTURE, 5000, 0.0025, 12.50, '5,000 bushels', 'CBOT'),
    _spec('MBT', 'Micro Bitcoin Futures', AssetClass.CRYPTOCURRENCY, 0.1, 5.00, 0.50, '0.1 BTC', 'CME'),
)

DEFAULT_CONTRACT_SPECS: Mapping[str, AssetSpecification] = MappingProxyType(
    {spec.symbol: spec for spec in _DEFAULT_SPECS}
)


def build_spec_table(specs: Iterable[AssetSpecification]) -> Mapping[str, AssetSpecification]:
    """
    Index specifications by symbol into a read-only mapping.

    Raises:
        ValueError: on duplicate symbols
    """
    table = {}
    for spec in specs:
        if spec.symbol in table:
            raise ValueError(f"Duplicate contract spec for {spec.symbol}")
        table[spec.symbol] = spec
    return MappingProxyType(table)


def get_contract_spec(
    symbol: str,
    specs: Optional[Mapping[str, AssetSpecification]] = None
) -> Optional[AssetSpecification]:
    """Look up a symbol's specification, or None if unsupported."""
    return (specs if specs is not None else DEFAULT_CONTRACT_SPECS).get(symbol)
