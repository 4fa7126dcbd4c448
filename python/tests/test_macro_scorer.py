#!/usr/bin/env python3
"""
Macro Scorer Tests
==================
Validates factor tables, per-class modifiers, graceful degradation on
missing rows, and the buy / sell / neutral thresholds.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from premium_engine.core.config import ScoringConfig
from premium_engine.core.errors import MalformedSnapshotError
from premium_engine.core.models import (
    AssetClass,
    BusinessCycle,
    CommodityBias,
    CommodityView,
    InterestRateView,
    LiquidityCondition,
    MacroSnapshot,
    PolicyStance,
    RateDirection,
    Signal,
    ValuationLevel,
    ValuationView,
)
from premium_engine.factors.macro_scorer import (
    MacroScorer,
    business_cycle_score,
    commodity_score,
    determine_signal,
    interest_rate_score,
    liquidity_score,
    valuation_score,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def bullish_snapshot() -> MacroSnapshot:
    return MacroSnapshot(
        business_cycle=BusinessCycle.EXPANSION,
        global_liquidity=LiquidityCondition.ABUNDANT,
        interest_rates=(InterestRateView('USA', RateDirection.FALLING, PolicyStance.NEUTRAL),),
        valuations=(ValuationView('S&P 500', ValuationLevel.CHEAP),),
        commodities=(
            CommodityView('Gold', CommodityBias.BULLISH),
            CommodityView('Silver', CommodityBias.BULLISH),
        ),
    )


@pytest.fixture
def bearish_snapshot() -> MacroSnapshot:
    return MacroSnapshot(
        business_cycle=BusinessCycle.CONTRACTION,
        global_liquidity=LiquidityCondition.CRISIS,
        interest_rates=(InterestRateView('USA', RateDirection.RISING, PolicyStance.QT),),
        valuations=(ValuationView('S&P 500', ValuationLevel.EXPENSIVE),),
        commodities=(
            CommodityView('Crude Oil', CommodityBias.BEARISH),
            CommodityView('Natural Gas', CommodityBias.BEARISH),
        ),
    )


@pytest.fixture
def neutral_snapshot() -> MacroSnapshot:
    return MacroSnapshot(
        business_cycle=BusinessCycle.PEAK,
        global_liquidity=LiquidityCondition.ADEQUATE,
        interest_rates=(InterestRateView('USA', RateDirection.STABLE, PolicyStance.NEUTRAL),),
        valuations=(ValuationView('S&P 500', ValuationLevel.FAIR),),
        commodities=tuple(
            CommodityView(name, CommodityBias.NEUTRAL)
            for name in ('Gold', 'Silver', 'Crude Oil', 'Natural Gas', 'Copper', 'Wheat')
        ),
    )


def _by_class(scores):
    return {s.asset_class: s for s in scores}


# =============================================================================
# FACTOR FUNCTIONS
# =============================================================================

class TestBusinessCycleFactor:

    @pytest.mark.parametrize("cycle,expected", [
        (BusinessCycle.EXPANSION, 2.0),
        (BusinessCycle.PEAK, 1.0),
        (BusinessCycle.CONTRACTION, -2.0),
        (BusinessCycle.TROUGH, -1.0),
    ])
    def test_equity_uses_base_points(self, cycle, expected):
        snap = MacroSnapshot(cycle, LiquidityCondition.ADEQUATE)
        assert business_cycle_score(snap, AssetClass.EQUITY_INDICES) == expected

    def test_fixed_income_inverted(self):
        snap = MacroSnapshot(BusinessCycle.EXPANSION, LiquidityCondition.ADEQUATE)
        assert business_cycle_score(snap, AssetClass.FIXED_INCOME) == -2.0

    @pytest.mark.parametrize("cycle,expected", [
        (BusinessCycle.EXPANSION, 1.0),
        (BusinessCycle.CONTRACTION, 1.0),
        (BusinessCycle.TROUGH, 0.5),
    ])
    def test_precious_metals_half_magnitude(self, cycle, expected):
        snap = MacroSnapshot(cycle, LiquidityCondition.ADEQUATE)
        assert business_cycle_score(snap, AssetClass.PRECIOUS_METALS) == expected

    def test_other_classes_scaled(self):
        snap = MacroSnapshot(BusinessCycle.CONTRACTION, LiquidityCondition.ADEQUATE)
        for asset_class in (AssetClass.ENERGY, AssetClass.AGRICULTURE, AssetClass.CRYPTOCURRENCY):
            assert business_cycle_score(snap, asset_class) == pytest.approx(-1.6)


class TestLiquidityFactor:

    def test_base_points(self):
        for condition, expected in ((LiquidityCondition.ABUNDANT, 3.0), (LiquidityCondition.ADEQUATE, 1.0),
                                    (LiquidityCondition.TIGHT, -2.0), (LiquidityCondition.CRISIS, -3.0)):
            snap = MacroSnapshot(BusinessCycle.PEAK, condition)
            assert liquidity_score(snap, AssetClass.ENERGY) == expected

    def test_stress_is_bullish_for_precious_metals(self):
        tight = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.TIGHT)
        abundant = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ABUNDANT)
        assert liquidity_score(tight, AssetClass.PRECIOUS_METALS) == 2.0
        assert liquidity_score(abundant, AssetClass.PRECIOUS_METALS) == 3.0

    def test_crypto_levered(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.TIGHT)
        assert liquidity_score(snap, AssetClass.CRYPTOCURRENCY) == pytest.approx(-3.0)


class TestInterestRateFactor:

    def _snap(self, *rates):
        return MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE, interest_rates=rates)

    def test_easing_by_policy(self):
        snap = self._snap(InterestRateView('USA', RateDirection.STABLE, PolicyStance.QE))
        assert interest_rate_score(snap, AssetClass.EQUITY_INDICES) == 2.0

    def test_tightening_by_direction(self):
        snap = self._snap(InterestRateView('USA', RateDirection.RISING, PolicyStance.NEUTRAL))
        assert interest_rate_score(snap, AssetClass.EQUITY_INDICES) == -2.0

    def test_easing_checked_before_tightening(self):
        snap = self._snap(InterestRateView('USA', RateDirection.RISING, PolicyStance.QE))
        assert interest_rate_score(snap, AssetClass.EQUITY_INDICES) == 2.0

    def test_printing_is_not_easing(self):
        snap = self._snap(InterestRateView('USA', RateDirection.STABLE, PolicyStance.PRINTING))
        assert interest_rate_score(snap, AssetClass.EQUITY_INDICES) == 0.0

    def test_per_class_modifiers(self):
        snap = self._snap(InterestRateView('USA', RateDirection.FALLING, PolicyStance.NEUTRAL))
        assert interest_rate_score(snap, AssetClass.FIXED_INCOME) == -2.0
        assert interest_rate_score(snap, AssetClass.PRECIOUS_METALS) == pytest.approx(2.4)
        assert interest_rate_score(snap, AssetClass.ENERGY) == pytest.approx(1.4)

    def test_only_reference_country_counts(self):
        snap = self._snap(InterestRateView('Japan', RateDirection.FALLING, PolicyStance.QE))
        assert interest_rate_score(snap, AssetClass.EQUITY_INDICES) == 0.0
        assert interest_rate_score(snap, AssetClass.EQUITY_INDICES, reference_country='Japan') == 2.0

    def test_missing_rates_is_zero(self):
        assert interest_rate_score(self._snap(), AssetClass.EQUITY_INDICES) == 0.0


class TestValuationFactor:

    def test_equity_only(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE,
                             valuations=(ValuationView('S&P 500', ValuationLevel.EXPENSIVE),))
        assert valuation_score(snap, AssetClass.EQUITY_INDICES) == -2.0
        assert valuation_score(snap, AssetClass.ENERGY) == 0.0

    def test_missing_benchmark_is_zero(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE,
                             valuations=(ValuationView('Nikkei 225', ValuationLevel.CHEAP),))
        assert valuation_score(snap, AssetClass.EQUITY_INDICES) == 0.0

    def test_unreadable_level_is_zero(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE,
                             valuations=(ValuationView('S&P 500', None),))
        assert valuation_score(snap, AssetClass.EQUITY_INDICES) == 0.0


class TestCommodityFactor:

    def test_averages_present_commodities(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE, commodities=(
            CommodityView('Crude Oil', CommodityBias.BULLISH),
            CommodityView('Natural Gas', CommodityBias.NEUTRAL),
        ))
        assert commodity_score(snap, AssetClass.ENERGY) == 1.0

    def test_single_present_commodity_not_diluted(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE, commodities=(
            CommodityView('Gold', CommodityBias.BULLISH),
        ))
        assert commodity_score(snap, AssetClass.PRECIOUS_METALS) == 2.0

    def test_opposing_biases_cancel(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE, commodities=(
            CommodityView('Gold', CommodityBias.BULLISH),
            CommodityView('Silver', CommodityBias.BEARISH),
        ))
        assert commodity_score(snap, AssetClass.PRECIOUS_METALS) == 0.0

    def test_unmapped_class_is_zero(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE, commodities=(
            CommodityView('Gold', CommodityBias.BULLISH),
        ))
        assert commodity_score(snap, AssetClass.EQUITY_INDICES) == 0.0
        assert commodity_score(snap, AssetClass.CRYPTOCURRENCY) == 0.0

    def test_no_matching_rows_is_zero(self):
        snap = MacroSnapshot(BusinessCycle.PEAK, LiquidityCondition.ADEQUATE, commodities=(
            CommodityView('Gold', CommodityBias.BULLISH),
        ))
        assert commodity_score(snap, AssetClass.AGRICULTURE) == 0.0


# =============================================================================
# SIGNALS
# =============================================================================

class TestSignalThresholds:

    @pytest.mark.parametrize("total,expected", [
        (5.0, Signal.BUY),
        (9.0, Signal.BUY),
        (4.9, Signal.NEUTRAL),
        (0.0, Signal.NEUTRAL),
        (-4.9, Signal.NEUTRAL),
        (-5.0, Signal.SELL),
        (-8.0, Signal.SELL),
    ])
    def test_default_thresholds(self, total, expected):
        assert determine_signal(total) is expected

    def test_custom_thresholds(self):
        assert determine_signal(2.0, buy_threshold=2.0, sell_threshold=-2.0) is Signal.BUY
        assert determine_signal(-2.0, buy_threshold=2.0, sell_threshold=-2.0) is Signal.SELL


# =============================================================================
# SCORER
# =============================================================================

class TestMacroScorer:

    def test_one_score_per_default_class(self, bullish_snapshot):
        scores = MacroScorer().score(bullish_snapshot)
        assert [s.asset_class for s in scores] == [
            AssetClass.EQUITY_INDICES,
            AssetClass.PRECIOUS_METALS,
            AssetClass.ENERGY,
            AssetClass.INDUSTRIAL_METALS,
            AssetClass.AGRICULTURE,
            AssetClass.CRYPTOCURRENCY,
        ]

    def test_bullish_breakdown(self, bullish_snapshot):
        scores = _by_class(MacroScorer().score(bullish_snapshot))

        equity = scores[AssetClass.EQUITY_INDICES]
        assert (equity.business_cycle_score, equity.liquidity_score, equity.interest_rate_score,
                equity.valuation_score, equity.commodity_score) == (2.0, 3.0, 2.0, 2.0, 0.0)
        assert equity.total_score == 9.0
        assert equity.signal is Signal.BUY

        metals = scores[AssetClass.PRECIOUS_METALS]
        assert metals.interest_rate_score == 2.4
        assert metals.commodity_score == 2.0
        assert metals.total_score == 8.4
        assert metals.signal is Signal.BUY

        assert scores[AssetClass.ENERGY].total_score == 6.0
        assert scores[AssetClass.CRYPTOCURRENCY].total_score == 7.5

    def test_bearish_breakdown(self, bearish_snapshot):
        scores = _by_class(MacroScorer().score(bearish_snapshot))

        assert scores[AssetClass.EQUITY_INDICES].total_score == -9.0
        assert scores[AssetClass.EQUITY_INDICES].signal is Signal.SELL
        assert scores[AssetClass.ENERGY].total_score == -8.0
        assert scores[AssetClass.ENERGY].signal is Signal.SELL
        assert scores[AssetClass.CRYPTOCURRENCY].signal is Signal.SELL

        # Stress is bullish for metals, so they land in neutral territory
        metals = scores[AssetClass.PRECIOUS_METALS]
        assert metals.total_score == 1.6
        assert metals.signal is Signal.NEUTRAL

    def test_neutral_conditions_give_neutral_signals(self, neutral_snapshot):
        scores = MacroScorer().score(neutral_snapshot)
        for score in scores:
            assert score.signal is Signal.NEUTRAL, score
            assert score.interest_rate_score == 0.0
            assert score.valuation_score == 0.0
            assert score.commodity_score == 0.0

    def test_fixed_income_when_configured(self, bullish_snapshot):
        config = ScoringConfig(asset_classes=(AssetClass.FIXED_INCOME,))
        [score] = MacroScorer(config).score(bullish_snapshot)
        assert score.asset_class is AssetClass.FIXED_INCOME
        assert score.total_score == -1.0

    def test_sparse_snapshot_degrades_to_zero(self):
        snap = MacroSnapshot(BusinessCycle.TROUGH, LiquidityCondition.TIGHT)
        scores = _by_class(MacroScorer().score(snap))
        equity = scores[AssetClass.EQUITY_INDICES]
        assert equity.interest_rate_score == 0.0
        assert equity.valuation_score == 0.0
        assert equity.total_score == -3.0

    def test_string_rows_score_like_enum_rows(self, bullish_snapshot):
        """Rows built straight from upstream strings are parsed, not zeroed."""
        from_strings = MacroSnapshot(
            business_cycle='Expansion',
            global_liquidity='abundant',
            interest_rates=(InterestRateView('USA', 'falling', 'neutral'),),
            valuations=(ValuationView('S&P 500', 'cheap'),),
            commodities=(CommodityView('Gold', 'bullish'), CommodityView('Silver', 'BULLISH')),
        )
        assert from_strings == bullish_snapshot
        assert MacroScorer().score(from_strings) == MacroScorer().score(bullish_snapshot)
        assert valuation_score(from_strings, AssetClass.EQUITY_INDICES) == 2.0
        assert commodity_score(from_strings, AssetClass.PRECIOUS_METALS) == 2.0

    def test_unrecognised_row_strings_are_zero(self):
        snap = MacroSnapshot(
            BusinessCycle.PEAK, LiquidityCondition.ADEQUATE,
            interest_rates=(InterestRateView('USA', 'sideways', 'unknown'),),
            valuations=(ValuationView('S&P 500', 'bubble'),),
            commodities=(CommodityView('Gold', 'moon'),),
        )
        equity = _by_class(MacroScorer().score(snap))[AssetClass.EQUITY_INDICES]
        assert equity.interest_rate_score == 0.0
        assert equity.valuation_score == 0.0
        assert commodity_score(snap, AssetClass.PRECIOUS_METALS) == 0.0

    def test_unrecognised_cycle_and_liquidity_are_zero(self):
        snap = MacroSnapshot.from_dict({
            'businessCycle': 'recovery',
            'globalLiquidity': 'flooded',
            'valuations': [{'index': 'S&P 500', 'level': 'cheap'}],
        })
        assert snap.business_cycle is None
        assert snap.global_liquidity is None
        equity = _by_class(MacroScorer().score(snap))[AssetClass.EQUITY_INDICES]
        assert equity.business_cycle_score == 0.0
        assert equity.liquidity_score == 0.0
        assert equity.total_score == 2.0

    def test_totals_rounded_to_one_decimal(self, bullish_snapshot):
        for score in MacroScorer().score(bullish_snapshot):
            assert round(score.total_score, 1) == score.total_score

    def test_scoring_is_deterministic(self, bearish_snapshot):
        scorer = MacroScorer()
        assert scorer.score(bearish_snapshot) == scorer.score(bearish_snapshot)

    def test_rejects_non_snapshot(self):
        with pytest.raises(MalformedSnapshotError):
            MacroScorer().score({'businessCycle': 'expansion'})
