#!/usr/bin/env python3
"""
Core data model for the premium engine.

Inputs (MacroSnapshot, AssetMarketData, AssetSpecification) are produced
upstream and treated as read-only. Derived records (AssetClassScore,
OptionStrategyResult, PortfolioMetrics) are built once by pure functions
and never mutated.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Type, TypeVar

from .errors import InvalidInputError, MalformedSnapshotError

logger = logging.getLogger(__name__)


# ============================================================================
# ENUMS
# ============================================================================

class BusinessCycle(Enum):
    """Business-cycle phase."""
    EXPANSION = 'expansion'
    PEAK = 'peak'
    CONTRACTION = 'contraction'
    TROUGH = 'trough'


class LiquidityCondition(Enum):
    """Global liquidity condition."""
    ABUNDANT = 'abundant'
    ADEQUATE = 'adequate'
    TIGHT = 'tight'
    CRISIS = 'crisis'


class RateDirection(Enum):
    RISING = 'rising'
    STABLE = 'stable'
    FALLING = 'falling'


class PolicyStance(Enum):
    """Monetary policy stance. Only QE is easing and only QT is tightening."""
    QE = 'qe'
    QT = 'qt'
    NEUTRAL = 'neutral'
    PRINTING = 'printing'


class ValuationLevel(Enum):
    CHEAP = 'cheap'
    FAIR = 'fair'
    EXPENSIVE = 'expensive'


class CommodityBias(Enum):
    BULLISH = 'bullish'
    NEUTRAL = 'neutral'
    BEARISH = 'bearish'


class AssetClass(Enum):
    """Scored asset classes. Values match the upstream display names."""
    EQUITY_INDICES = 'Equity Indices'
    PRECIOUS_METALS = 'Precious Metals'
    ENERGY = 'Energy'
    INDUSTRIAL_METALS = 'Industrial Metals'
    AGRICULTURE = 'Agriculture'
    CRYPTOCURRENCY = 'Cryptocurrency'
    FIXED_INCOME = 'Fixed Income'


class Signal(Enum):
    BUY = 'buy'
    SELL = 'sell'
    NEUTRAL = 'neutral'


class OptionKind(Enum):
    CALL = 'call'
    PUT = 'put'


class StrategyType(Enum):
    """Premium-selling structures the engine can produce."""
    SHORT_PUT = 'short_put'
    SHORT_CALL = 'short_call'
    SHORT_STRANGLE = 'short_strangle'

    @property
    def legs(self) -> Tuple[OptionKind, ...]:
        """Option kinds sold by this structure, put leg first."""
        if self is StrategyType.SHORT_PUT:
            return (OptionKind.PUT,)
        if self is StrategyType.SHORT_CALL:
            return (OptionKind.CALL,)
        return (OptionKind.PUT, OptionKind.CALL)


E = TypeVar('E', bound=Enum)


def parse_enum(enum_cls: Type[E], value: Any) -> Optional[E]:
    """
    Parse an upstream string into an enum member, case-insensitively.

    Returns None for missing or unrecognised values.
    """
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return None
    text = str(value).strip().lower()
    for member in enum_cls:
        if member.value.lower() == text:
            return member
    return None


# ============================================================================
# MACRO SNAPSHOT
# ============================================================================

@dataclass(frozen=True)
class InterestRateView:
    country: str
    direction: Optional[RateDirection]
    policy: Optional[PolicyStance]
    current_rate: Optional[float] = None

    def __post_init__(self):
        # Upstream strings are accepted; unrecognised values become None
        object.__setattr__(self, 'direction', parse_enum(RateDirection, self.direction))
        object.__setattr__(self, 'policy', parse_enum(PolicyStance, self.policy))

    @property
    def is_easing(self) -> bool:
        return self.direction is RateDirection.FALLING or self.policy is PolicyStance.QE

    @property
    def is_tightening(self) -> bool:
        return self.direction is RateDirection.RISING or self.policy is PolicyStance.QT


@dataclass(frozen=True)
class ValuationView:
    index: str
    level: Optional[ValuationLevel]

    def __post_init__(self):
        object.__setattr__(self, 'level', parse_enum(ValuationLevel, self.level))


@dataclass(frozen=True)
class CommodityView:
    name: str
    bias: Optional[CommodityBias]

    def __post_init__(self):
        object.__setattr__(self, 'bias', parse_enum(CommodityBias, self.bias))


@dataclass(frozen=True)
class MacroSnapshot:
    """
    Qualitative macro state filled in upstream (questionnaire or AI fill).

    business_cycle and global_liquidity are required; the per-country,
    per-index and per-commodity rows may be partial. A cycle or liquidity
    string that is present but unrecognised is stored as None and scores 0.
    """
    business_cycle: Optional[BusinessCycle]
    global_liquidity: Optional[LiquidityCondition]
    interest_rates: Tuple[InterestRateView, ...] = ()
    valuations: Tuple[ValuationView, ...] = ()
    commodities: Tuple[CommodityView, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, 'business_cycle', _required_enum(BusinessCycle, self.business_cycle, 'business_cycle')
        )
        object.__setattr__(
            self, 'global_liquidity', _required_enum(LiquidityCondition, self.global_liquidity, 'global_liquidity')
        )
        # Normalise list inputs so the snapshot stays hashable and immutable
        object.__setattr__(self, 'interest_rates', tuple(self.interest_rates))
        object.__setattr__(self, 'valuations', tuple(self.valuations))
        object.__setattr__(self, 'commodities', tuple(self.commodities))

    def rate_for(self, country: str) -> Optional[InterestRateView]:
        for rate in self.interest_rates:
            if rate.country == country:
                return rate
        return None

    def valuation_for(self, index: str) -> Optional[ValuationView]:
        for valuation in self.valuations:
            if valuation.index == index:
                return valuation
        return None

    def commodity_for(self, name: str) -> Optional[CommodityView]:
        for commodity in self.commodities:
            if commodity.name == name:
                return commodity
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MacroSnapshot':
        """
        Build a snapshot from the upstream JSON shape.

        Expected keys: businessCycle, globalLiquidity, interestRates
        [{country, direction, policy}], valuations [{index, level}],
        commodities [{name, bias}]. snake_case keys are accepted too.

        Raises:
            MalformedSnapshotError: if data is not a mapping, or the cycle or
                liquidity value is missing
        """
        if not isinstance(data, dict):
            raise MalformedSnapshotError(f"Snapshot must be a mapping, got {type(data).__name__}")

        rates = tuple(
            InterestRateView(
                country=str(row.get('country', '')),
                direction=row.get('direction'),
                policy=row.get('policy'),
                current_rate=_optional_float(row.get('currentRate', row.get('current_rate'))),
            )
            for row in _rows(data.get('interestRates', data.get('interest_rates')))
        )
        valuations = tuple(
            ValuationView(index=str(row.get('index', '')), level=row.get('level'))
            for row in _rows(data.get('valuations'))
        )
        commodities = tuple(
            CommodityView(name=str(row.get('name', '')), bias=row.get('bias'))
            for row in _rows(data.get('commodities'))
        )

        return cls(
            business_cycle=data.get('businessCycle', data.get('business_cycle')),
            global_liquidity=data.get('globalLiquidity', data.get('global_liquidity')),
            interest_rates=rates,
            valuations=valuations,
            commodities=commodities,
        )


def _required_enum(enum_cls: Type[E], value: Any, field_name: str) -> Optional[E]:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MalformedSnapshotError(f"{field_name} is missing")
    if not isinstance(value, (enum_cls, str)):
        raise MalformedSnapshotError(f"{field_name} must be a {enum_cls.__name__} or string, got {value!r}")
    member = parse_enum(enum_cls, value)
    if member is None:
        logger.warning("Unrecognised %s %r; factor contributes 0", field_name, value)
    return member


def _rows(value: Any) -> Iterable[Dict[str, Any]]:
    if not value:
        return ()
    return [row for row in value if isinstance(row, dict)]


def _optional_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


# ============================================================================
# ASSET INPUTS
# ============================================================================

@dataclass(frozen=True)
class AssetSpecification:
    """Static contract specification for one tradeable futures instrument."""
    symbol: str
    name: str
    asset_class: AssetClass
    multiplier: float
    max_notional: float
    exchange: str
    tick_size: float = 0.0
    tick_value: float = 0.0
    contract_size: str = ''

    def __post_init__(self):
        asset_class = parse_enum(AssetClass, self.asset_class)
        if asset_class is None:
            raise InvalidInputError(f"{self.symbol}: unknown asset class {self.asset_class!r}")
        object.__setattr__(self, 'asset_class', asset_class)
        if not self.multiplier > 0:
            raise InvalidInputError(f"{self.symbol}: multiplier must be positive, got {self.multiplier}")
        if not self.max_notional > 0:
            raise InvalidInputError(f"{self.symbol}: max_notional must be positive, got {self.max_notional}")

    def notional_per_contract(self, spot_price: float) -> float:
        return spot_price * self.multiplier


@dataclass(frozen=True)
class AssetMarketData:
    """Live per-asset inputs for one evaluation cycle."""
    symbol: str
    asset_class: AssetClass
    spot_price: float
    implied_volatility: float
    iv_rank: float = 50.0

    def __post_init__(self):
        asset_class = parse_enum(AssetClass, self.asset_class)
        if asset_class is None:
            raise InvalidInputError(f"{self.symbol}: unknown asset class {self.asset_class!r}")
        object.__setattr__(self, 'asset_class', asset_class)

    def validate(self) -> 'AssetMarketData':
        """
        Check ranges accepted by the pricing model.

        Raises:
            InvalidInputError: spot <= 0, IV outside (0, 2], or IV rank outside [0, 100]
        """
        if not self.spot_price > 0:
            raise InvalidInputError(f"{self.symbol}: spot price must be positive, got {self.spot_price}")
        if not 0 < self.implied_volatility <= 2:
            raise InvalidInputError(
                f"{self.symbol}: implied volatility must be in (0, 2], got {self.implied_volatility}"
            )
        if not 0 <= self.iv_rank <= 100:
            raise InvalidInputError(f"{self.symbol}: IV rank must be in [0, 100], got {self.iv_rank}")
        return self


# ============================================================================
# DERIVED RECORDS
# ============================================================================

@dataclass(frozen=True)
class AssetClassScore:
    """Factor breakdown and signal for one asset class (rounded to 0.1)."""
    asset_class: AssetClass
    business_cycle_score: float
    liquidity_score: float
    interest_rate_score: float
    valuation_score: float
    commodity_score: float
    total_score: float
    signal: Signal


@dataclass(frozen=True)
class OptionStrategyResult:
    """
    Sized premium-selling position for one asset.

    premium_put / premium_call are per-leg totals across all lots;
    premium_per_contract is the combined premium of one lot in dollars.
    """
    symbol: str
    asset_name: str
    asset_class: AssetClass
    signal: Signal
    strategy_type: StrategyType
    number_of_lots: int
    notional_value: float
    dte: int
    spot_price: float
    iv: float
    premium_per_contract: float
    total_premium: float
    buying_power_required: float
    return_on_capital: float
    strike_put: Optional[float] = None
    strike_call: Optional[float] = None
    premium_put: Optional[float] = None
    premium_call: Optional[float] = None
    converged: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'asset_name': self.asset_name,
            'asset_class': self.asset_class.value,
            'signal': self.signal.value,
            'strategy_type': self.strategy_type.value,
            'number_of_lots': self.number_of_lots,
            'notional_value': self.notional_value,
            'dte': self.dte,
            'spot_price': self.spot_price,
            'iv': self.iv,
            'strike_put': self.strike_put,
            'strike_call': self.strike_call,
            'premium_put': self.premium_put,
            'premium_call': self.premium_call,
            'premium_per_contract': self.premium_per_contract,
            'total_premium': self.total_premium,
            'buying_power_required': self.buying_power_required,
            'return_on_capital': self.return_on_capital,
            'converged': self.converged,
        }


@dataclass(frozen=True)
class PortfolioMetrics:
    total_premium: float
    total_buying_power: float
    total_notional: float
    avg_return_on_capital: float
    monthly_return: float
    number_of_trades: int
