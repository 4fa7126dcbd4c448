#!/usr/bin/env python3
"""
Macro Scorer: Macro Snapshot -> Per-Asset-Class Signal

Scores each asset class on five independent macro factors and turns the
total into a discrete buy / sell / neutral signal.

Factors (raw points before per-class modifiers):
- Business cycle:  expansion +2, peak +1, contraction -2, trough -1
- Liquidity:       abundant +3, adequate +1, tight -2, crisis -3
- Interest rates:  falling/QE +2, stable 0, rising/QT -2 (reference country only)
- Valuation:       cheap +2, fair 0, expensive -2 (benchmark index, equities only)
- Commodities:     bullish +2, neutral 0, bearish -2 (averaged over mapped names)

Each factor's per-class adjustment is a table keyed by AssetClass; classes
without an entry fall through to the factor's default modifier.

Missing rows (no rate for the reference country, no benchmark valuation,
no mapped commodity) contribute 0. That is a legitimate "no signal"
outcome, not an error.
"""

import logging
import math
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ..core.config import ScoringConfig
from ..core.errors import MalformedSnapshotError
from ..core.models import (
    AssetClass,
    AssetClassScore,
    BusinessCycle,
    CommodityBias,
    LiquidityCondition,
    MacroSnapshot,
    Signal,
    ValuationLevel,
)

logger = logging.getLogger(__name__)

Modifier = Callable[[float], float]


# ============================================================================
# BASE POINT TABLES
# ============================================================================

BUSINESS_CYCLE_POINTS: Mapping[BusinessCycle, float] = MappingProxyType({
    BusinessCycle.EXPANSION: 2.0,
    BusinessCycle.PEAK: 1.0,
    BusinessCycle.CONTRACTION: -2.0,
    BusinessCycle.TROUGH: -1.0,
})

LIQUIDITY_POINTS: Mapping[LiquidityCondition, float] = MappingProxyType({
    LiquidityCondition.ABUNDANT: 3.0,
    LiquidityCondition.ADEQUATE: 1.0,
    LiquidityCondition.TIGHT: -2.0,
    LiquidityCondition.CRISIS: -3.0,
})

RATE_POINTS = 2.0

VALUATION_POINTS: Mapping[ValuationLevel, float] = MappingProxyType({
    ValuationLevel.CHEAP: 2.0,
    ValuationLevel.FAIR: 0.0,
    ValuationLevel.EXPENSIVE: -2.0,
})

COMMODITY_BIAS_POINTS: Mapping[CommodityBias, float] = MappingProxyType({
    CommodityBias.BULLISH: 2.0,
    CommodityBias.NEUTRAL: 0.0,
    CommodityBias.BEARISH: -2.0,
})

COMMODITY_MAP: Mapping[AssetClass, Tuple[str, ...]] = MappingProxyType({
    AssetClass.PRECIOUS_METALS: ('Gold', 'Silver'),
    AssetClass.ENERGY: ('Crude Oil', 'Natural Gas'),
    AssetClass.INDUSTRIAL_METALS: ('Copper',),
    AssetClass.AGRICULTURE: ('Wheat',),
})


# ============================================================================
# PER-CLASS MODIFIERS
# ============================================================================

def _identity(points: float) -> float:
    return points


def _invert(points: float) -> float:
    return -points


def _scale(factor: float) -> Modifier:
    return lambda points: points * factor


def _half_magnitude(points: float) -> float:
    # Metals gain in both booms and busts
    return abs(points) * 0.5


def _stress_is_bullish(points: float) -> float:
    return abs(points) if points < 0 else points


BUSINESS_CYCLE_MODIFIERS: Mapping[AssetClass, Modifier] = MappingProxyType({
    AssetClass.EQUITY_INDICES: _identity,
    AssetClass.FIXED_INCOME: _invert,
    AssetClass.PRECIOUS_METALS: _half_magnitude,
})
BUSINESS_CYCLE_DEFAULT: Modifier = _scale(0.8)

LIQUIDITY_MODIFIERS: Mapping[AssetClass, Modifier] = MappingProxyType({
    AssetClass.PRECIOUS_METALS: _stress_is_bullish,
    AssetClass.CRYPTOCURRENCY: _scale(1.5),
})
LIQUIDITY_DEFAULT: Modifier = _identity

RATE_MODIFIERS: Mapping[AssetClass, Modifier] = MappingProxyType({
    AssetClass.FIXED_INCOME: _invert,
    AssetClass.EQUITY_INDICES: _identity,
    AssetClass.PRECIOUS_METALS: _scale(1.2),
})
RATE_DEFAULT: Modifier = _scale(0.7)


def _apply(modifiers: Mapping[AssetClass, Modifier], default: Modifier,
           asset_class: AssetClass, points: float) -> float:
    return modifiers.get(asset_class, default)(points)


# ============================================================================
# FACTOR FUNCTIONS
# ============================================================================

def business_cycle_score(macro: MacroSnapshot, asset_class: AssetClass) -> float:
    """Cycle-phase points adjusted for the asset class."""
    points = BUSINESS_CYCLE_POINTS.get(macro.business_cycle, 0.0)
    return _apply(BUSINESS_CYCLE_MODIFIERS, BUSINESS_CYCLE_DEFAULT, asset_class, points)


def liquidity_score(macro: MacroSnapshot, asset_class: AssetClass) -> float:
    """Liquidity points; stress is bullish for precious metals, crypto is levered."""
    points = LIQUIDITY_POINTS.get(macro.global_liquidity, 0.0)
    return _apply(LIQUIDITY_MODIFIERS, LIQUIDITY_DEFAULT, asset_class, points)


def interest_rate_score(
    macro: MacroSnapshot,
    asset_class: AssetClass,
    reference_country: str = 'USA'
) -> float:
    """
    Rate-direction points from the policy-setting country.

    Easing (falling rates or QE) is +2, tightening (rising rates or QT) is
    -2, anything else 0. Easing wins when a row is both.
    """
    rate = macro.rate_for(reference_country)
    if rate is None:
        logger.debug(f"No rate data for {reference_country}; interest-rate factor is 0")
        return 0.0

    if rate.is_easing:
        points = RATE_POINTS
    elif rate.is_tightening:
        points = -RATE_POINTS
    else:
        points = 0.0

    return _apply(RATE_MODIFIERS, RATE_DEFAULT, asset_class, points)


def valuation_score(
    macro: MacroSnapshot,
    asset_class: AssetClass,
    benchmark_index: str = 'S&P 500'
) -> float:
    """Benchmark-index valuation points; applies to equity indices only."""
    if asset_class is not AssetClass.EQUITY_INDICES:
        return 0.0

    valuation = macro.valuation_for(benchmark_index)
    if valuation is None or valuation.level is None:
        logger.debug(f"No valuation for {benchmark_index}; valuation factor is 0")
        return 0.0

    return VALUATION_POINTS.get(valuation.level, 0.0)


def commodity_score(macro: MacroSnapshot, asset_class: AssetClass) -> float:
    """Average bias points over the commodities mapped to the asset class."""
    names = COMMODITY_MAP.get(asset_class)
    if not names:
        return 0.0

    total = 0.0
    count = 0
    for name in names:
        commodity = macro.commodity_for(name)
        if commodity is None:
            continue
        # A row with an unreadable bias still counts, as a neutral reading
        total += COMMODITY_BIAS_POINTS.get(commodity.bias, 0.0)
        count += 1

    if count == 0:
        logger.debug(f"No commodity rows for {asset_class.value}; commodity factor is 0")
        return 0.0
    return total / count


def determine_signal(total_score: float, buy_threshold: float = 5.0, sell_threshold: float = -5.0) -> Signal:
    if total_score >= buy_threshold:
        return Signal.BUY
    if total_score <= sell_threshold:
        return Signal.SELL
    return Signal.NEUTRAL


def _round1(value: float) -> float:
    # Round half up to one decimal, as the reporting layer expects
    return math.floor(value * 10 + 0.5) / 10


# ============================================================================
# SCORER
# ============================================================================

class MacroScorer:
    """
    Scores every configured asset class against a macro snapshot.

    Usage:
        scorer = MacroScorer()
        scores = scorer.score(snapshot)
        signals = {s.asset_class: s.signal for s in scores}
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def score_asset_class(self, macro: MacroSnapshot, asset_class: AssetClass) -> AssetClassScore:
        """
        Score one asset class.

        The signal is decided on the unrounded total; the reported components
        and total are rounded to one decimal.
        """
        components: Dict[str, float] = {
            'business_cycle_score': business_cycle_score(macro, asset_class),
            'liquidity_score': liquidity_score(macro, asset_class),
            'interest_rate_score': interest_rate_score(macro, asset_class, self.config.reference_country),
            'valuation_score': valuation_score(macro, asset_class, self.config.benchmark_index),
            'commodity_score': commodity_score(macro, asset_class),
        }
        total = sum(components.values())
        signal = determine_signal(total, self.config.buy_threshold, self.config.sell_threshold)

        logger.debug(
            f"{asset_class.value}: total={total:+.2f} -> {signal.value} "
            f"({', '.join(f'{k}={v:+.2f}' for k, v in components.items())})"
        )

        return AssetClassScore(
            asset_class=asset_class,
            total_score=_round1(total),
            signal=signal,
            **{name: _round1(value) for name, value in components.items()},
        )

    def score(self, macro: MacroSnapshot) -> List[AssetClassScore]:
        """
        Score all configured asset classes, in configuration order.

        Args:
            macro: Macro snapshot

        Returns:
            One AssetClassScore per configured asset class

        Raises:
            MalformedSnapshotError: if macro is not a MacroSnapshot
        """
        if not isinstance(macro, MacroSnapshot):
            raise MalformedSnapshotError(f"Expected MacroSnapshot, got {type(macro).__name__}")

        scores = [self.score_asset_class(macro, asset_class) for asset_class in self.config.asset_classes]
        logger.info(
            "Scored %d asset classes: %s",
            len(scores),
            ', '.join(f"{s.asset_class.value}={s.signal.value}" for s in scores),
        )
        return scores
