"""
Futures Options Position Sizer

Converts spot price, contract specification and strategy type into a lot
count under two independent caps:
- Notional cap:     floor(max_notional / (spot * multiplier))
- Buying-power cap: floor(max_bp_per_trade / (spot * bp_pct * multiplier))

The smaller cap governs, with a floor of one lot. If a single contract
already breaks either cap the asset is blocked (zero lots) instead of being
forced in.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..core.config import RiskLimits
from ..core.errors import ConstraintViolationError, InvalidInputError
from ..core.models import AssetSpecification, StrategyType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionSizeResult:
    """Result of position sizing calculation."""
    symbol: str
    strategy_type: StrategyType
    lots: int
    notional_per_contract: float
    buying_power_per_lot: float
    lots_by_notional: int
    lots_by_buying_power: int
    max_notional: float
    max_buying_power: float
    blocked: bool = False
    block_reason: Optional[str] = None

    @property
    def notional_value(self) -> float:
        return self.notional_per_contract * self.lots

    @property
    def buying_power_required(self) -> float:
        return self.buying_power_per_lot * self.lots

    def raise_if_blocked(self) -> None:
        """For callers that prefer an exception over the blocked flag."""
        if self.blocked:
            raise ConstraintViolationError(f"{self.symbol}: {self.block_reason}")


def buying_power_pct(strategy_type: StrategyType, limits: Optional[RiskLimits] = None) -> float:
    """Collateral as a fraction of notional: 20% single leg, 25% strangle."""
    limits = limits or RiskLimits()
    if strategy_type is StrategyType.SHORT_STRANGLE:
        return limits.bp_pct_strangle
    return limits.bp_pct_single_leg


def calculate_buying_power(
    spot_price: float,
    strategy_type: StrategyType,
    multiplier: float,
    lots: int,
    limits: Optional[RiskLimits] = None
) -> float:
    """Total buying power for `lots` contracts of the given structure."""
    return spot_price * buying_power_pct(strategy_type, limits) * multiplier * lots


class PositionSizer:
    """
    Lot-count sizing for short option positions on futures.

    Usage:
        sizer = PositionSizer(RiskLimits(max_buying_power_per_trade=50_000))
        result = sizer.size(5800.0, DEFAULT_CONTRACT_SPECS['ES'], StrategyType.SHORT_PUT)
        if not result.blocked:
            print(result.lots)
    """

    def __init__(self, limits: Optional[RiskLimits] = None):
        self.limits = limits or RiskLimits()

    def size(
        self,
        spot_price: float,
        spec: AssetSpecification,
        strategy_type: StrategyType,
        max_notional: Optional[float] = None,
        max_buying_power_per_trade: Optional[float] = None
    ) -> PositionSizeResult:
        """
        Calculate lot count with both caps applied.

        Args:
            spot_price: Current futures price
            spec: Contract specification (multiplier, per-asset max notional)
            strategy_type: Structure being sold; sets the buying-power percentage
            max_notional: Override for the notional cap. Defaults to the lower of
                the contract's max_notional and limits.max_notional_per_asset
            max_buying_power_per_trade: Override for the buying-power cap.
                Defaults to limits.max_buying_power_per_trade

        Returns:
            PositionSizeResult; blocked results carry zero lots

        Raises:
            InvalidInputError: if spot_price or a cap is not positive
        """
        if not spot_price > 0:
            raise InvalidInputError(f"{spec.symbol}: spot price must be positive, got {spot_price}")

        if max_notional is None:
            max_notional = min(spec.max_notional, self.limits.max_notional_per_asset)
        if max_buying_power_per_trade is None:
            max_buying_power_per_trade = self.limits.max_buying_power_per_trade
        if max_notional <= 0 or max_buying_power_per_trade <= 0:
            raise InvalidInputError(
                f"{spec.symbol}: caps must be positive, got notional={max_notional}, "
                f"buying power={max_buying_power_per_trade}"
            )

        notional_per_contract = spot_price * spec.multiplier
        lots_by_notional = math.floor(max_notional / notional_per_contract)

        bp_per_lot = spot_price * buying_power_pct(strategy_type, self.limits) * spec.multiplier
        lots_by_bp = math.floor(max_buying_power_per_trade / bp_per_lot)

        block_reason = None
        if notional_per_contract > max_notional:
            block_reason = (
                f"Single contract notional ({notional_per_contract:,.0f}) exceeds "
                f"max notional limit ({max_notional:,.0f})"
            )
        elif bp_per_lot > max_buying_power_per_trade:
            block_reason = (
                f"Single contract buying power ({bp_per_lot:,.0f}) exceeds "
                f"max buying power limit ({max_buying_power_per_trade:,.0f})"
            )

        if block_reason:
            logger.warning(f"{spec.symbol}: {block_reason}; position skipped")
            lots = 0
        else:
            lots = max(1, min(lots_by_notional, lots_by_bp))
            logger.debug(
                f"Position sizing {spec.symbol}: price={spot_price:,.2f}, "
                f"by_notional={lots_by_notional}, by_bp={lots_by_bp}, lots={lots}"
            )

        return PositionSizeResult(
            symbol=spec.symbol,
            strategy_type=strategy_type,
            lots=lots,
            notional_per_contract=notional_per_contract,
            buying_power_per_lot=bp_per_lot,
            lots_by_notional=lots_by_notional,
            lots_by_buying_power=lots_by_bp,
            max_notional=max_notional,
            max_buying_power=max_buying_power_per_trade,
            blocked=block_reason is not None,
            block_reason=block_reason,
        )

    def size_lots(
        self,
        spot_price: float,
        spec: AssetSpecification,
        strategy_type: StrategyType,
        max_notional: Optional[float] = None,
        max_buying_power_per_trade: Optional[float] = None
    ) -> int:
        """Lot count only (0 when blocked)."""
        return self.size(spot_price, spec, strategy_type, max_notional, max_buying_power_per_trade).lots
