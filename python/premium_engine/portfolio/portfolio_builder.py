#!/usr/bin/env python3
"""
Portfolio Builder: Scores + Market Data -> Sized Premium-Selling Portfolio

Per asset:
1. Look up the asset-class score (skip the asset if there is none)
2. Map signal to structure (short put / short call / short strangle)
3. Size lots under the notional and buying-power caps (skip on zero lots)
4. Solve 20-delta strikes for each leg and price them with Black-Scholes
5. Assemble an OptionStrategyResult

Then reduce all results to PortfolioMetrics.

Each asset's pipeline depends only on its own market data and the already
computed class scores, so assets can be processed on a thread pool. A bad
input on one asset is logged and that asset dropped; the others proceed.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import fields
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from ..core.config import EngineConfig
from ..core.errors import InvalidInputError
from ..core.models import (
    AssetClass,
    AssetClassScore,
    AssetMarketData,
    AssetSpecification,
    OptionKind,
    OptionStrategyResult,
    PortfolioMetrics,
)
from ..factors.strategy_mapper import get_strategy_type
from ..futures.contract_specs import DEFAULT_CONTRACT_SPECS, build_spec_table
from ..futures.position_sizer import PositionSizer, calculate_buying_power
from ..pricing.black_scholes import calculate_price, find_strike_for_delta

logger = logging.getLogger(__name__)


class PortfolioBuilder:
    """
    Builds option-selling positions from class scores and market data.

    Usage:
        builder = PortfolioBuilder()
        results = builder.generate(market_data, scores)
        metrics = builder.aggregate(results)
        print(builder.results_to_frame(results))
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        specs: Optional[Mapping[str, AssetSpecification]] = None
    ):
        self.config = config or EngineConfig()
        self.specs = build_spec_table(specs.values()) if specs is not None else DEFAULT_CONTRACT_SPECS
        self.sizer = PositionSizer(self.config.limits)

        logger.info(
            f"PortfolioBuilder initialized with {len(self.specs)} contracts, "
            f"DTE={self.config.pricing.target_dte}, target delta={self.config.pricing.target_delta:.2f}"
        )

    def generate_strategy(
        self,
        asset_data: AssetMarketData,
        score: AssetClassScore
    ) -> Optional[OptionStrategyResult]:
        """
        Build the sized position for one asset.

        Args:
            asset_data: Live inputs for the asset
            score: Score of the asset's class

        Returns:
            OptionStrategyResult, or None if the symbol is unsupported or no
            lot fits inside the caps

        Raises:
            InvalidInputError: if the market data is out of range
        """
        spec = self.specs.get(asset_data.symbol)
        if spec is None:
            logger.warning(f"Skipping {asset_data.symbol}: no contract specification")
            return None

        asset_data.validate()

        pricing = self.config.pricing
        strategy_type = get_strategy_type(score.signal)
        spot = asset_data.spot_price
        iv = asset_data.implied_volatility
        T = pricing.time_to_expiry

        sizing = self.sizer.size(spot, spec, strategy_type)
        if sizing.blocked:
            logger.warning(f"Skipping {asset_data.symbol}: cannot allocate any lots within constraints")
            return None
        lots = sizing.lots

        strikes: Dict[OptionKind, float] = {}
        premiums: Dict[OptionKind, float] = {}
        converged = True
        for kind in strategy_type.legs:
            search = find_strike_for_delta(
                spot,
                pricing.target_delta,
                T,
                pricing.risk_free_rate,
                iv,
                kind.value,
                max_iterations=pricing.max_iterations,
                tolerance=pricing.tolerance,
            )
            converged = converged and search.converged
            strikes[kind] = search.strike
            premiums[kind] = calculate_price(spot, search.strike, T, pricing.risk_free_rate, iv, kind.value)

        premium_per_contract = sum(premiums.values()) * spec.multiplier
        total_premium = premium_per_contract * lots
        buying_power = calculate_buying_power(spot, strategy_type, spec.multiplier, lots, self.config.limits)
        return_on_capital = total_premium / buying_power * 100

        def leg_total(kind: OptionKind) -> Optional[float]:
            if kind not in premiums:
                return None
            return premiums[kind] * spec.multiplier * lots

        return OptionStrategyResult(
            symbol=asset_data.symbol,
            asset_name=spec.name,
            asset_class=asset_data.asset_class,
            signal=score.signal,
            strategy_type=strategy_type,
            number_of_lots=lots,
            notional_value=spot * spec.multiplier * lots,
            dte=pricing.target_dte,
            spot_price=spot,
            iv=iv,
            premium_per_contract=premium_per_contract,
            total_premium=total_premium,
            buying_power_required=buying_power,
            return_on_capital=return_on_capital,
            strike_put=strikes.get(OptionKind.PUT),
            strike_call=strikes.get(OptionKind.CALL),
            premium_put=leg_total(OptionKind.PUT),
            premium_call=leg_total(OptionKind.CALL),
            converged=converged,
        )

    def _generate_one(
        self,
        asset_data: AssetMarketData,
        scores_by_class: Mapping[AssetClass, AssetClassScore]
    ) -> Optional[OptionStrategyResult]:
        score = scores_by_class.get(asset_data.asset_class)
        if score is None:
            logger.debug("Skipping %s: no score for %s", asset_data.symbol, asset_data.asset_class)
            return None
        try:
            return self.generate_strategy(asset_data, score)
        except InvalidInputError as e:
            logger.error(f"Skipping {asset_data.symbol}: {e}")
            return None

    def generate(
        self,
        asset_data_list: Sequence[AssetMarketData],
        scores: Sequence[AssetClassScore],
        max_workers: Optional[int] = None
    ) -> List[OptionStrategyResult]:
        """
        Build positions for every asset that has a class score and fits the caps.

        Args:
            asset_data_list: Market data, one entry per asset
            scores: Class scores (computed beforehand)
            max_workers: Thread count for per-asset work; None or 1 runs inline

        Returns:
            Results in input order, skipped assets omitted
        """
        scores_by_class: Dict[AssetClass, AssetClassScore] = {}
        for score in scores:
            # First score for a class wins
            scores_by_class.setdefault(score.asset_class, score)

        if max_workers and max_workers > 1 and len(asset_data_list) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                outcomes = list(executor.map(
                    lambda data: self._generate_one(data, scores_by_class),
                    asset_data_list,
                ))
        else:
            outcomes = [self._generate_one(data, scores_by_class) for data in asset_data_list]

        results = [r for r in outcomes if r is not None]
        skipped = len(asset_data_list) - len(results)
        logger.info(f"Generated {len(results)} strategies ({skipped} assets skipped)")
        return results

    def aggregate(self, results: Sequence[OptionStrategyResult]) -> PortfolioMetrics:
        """
        Reduce results to portfolio totals.

        avg_return_on_capital = total premium / total buying power * 100;
        monthly_return scales that cycle return by avg_days_per_month / DTE.
        Both are 0 when there is no buying power.
        """
        pricing = self.config.pricing
        total_premium = sum(r.total_premium for r in results)
        total_buying_power = sum(r.buying_power_required for r in results)
        total_notional = sum(r.notional_value for r in results)

        if total_buying_power > 0:
            avg_roc = total_premium / total_buying_power * 100
            monthly_return = avg_roc * (pricing.avg_days_per_month / pricing.target_dte)
        else:
            avg_roc = 0.0
            monthly_return = 0.0

        return PortfolioMetrics(
            total_premium=total_premium,
            total_buying_power=total_buying_power,
            total_notional=total_notional,
            avg_return_on_capital=avg_roc,
            monthly_return=monthly_return,
            number_of_trades=len(results),
        )

    @staticmethod
    def results_to_frame(results: Sequence[OptionStrategyResult]) -> pd.DataFrame:
        """Tabular view of results, one row per position."""
        columns = [f.name for f in fields(OptionStrategyResult)]
        if not results:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([r.to_dict() for r in results], columns=columns)


# ============================================================================
# EXAMPLE RUN
# ============================================================================

if __name__ == '__main__':
    from ..core.models import MacroSnapshot
    from ..factors.macro_scorer import MacroScorer

    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s - %(message)s'
    )

    snapshot = MacroSnapshot.from_dict({
        'businessCycle': 'expansion',
        'globalLiquidity': 'abundant',
        'interestRates': [{'country': 'USA', 'direction': 'falling', 'policy': 'neutral'}],
        'valuations': [{'index': 'S&P 500', 'level': 'fair'}],
        'commodities': [
            {'name': 'Gold', 'bias': 'bullish'},
            {'name': 'Crude Oil', 'bias': 'bearish'},
            {'name': 'Copper', 'bias': 'neutral'},
        ],
    })
    market_data = [
        AssetMarketData('ES', AssetClass.EQUITY_INDICES, 5800.0, 0.15, 35.0),
        AssetMarketData('GC', AssetClass.PRECIOUS_METALS, 2650.0, 0.16, 55.0),
        AssetMarketData('CL', AssetClass.ENERGY, 70.0, 0.35, 60.0),
        AssetMarketData('NG', AssetClass.ENERGY, 3.50, 0.60, 70.0),
        AssetMarketData('HG', AssetClass.INDUSTRIAL_METALS, 4.20, 0.22, 40.0),
    ]

    scores = MacroScorer().score(snapshot)
    builder = PortfolioBuilder()
    results = builder.generate(market_data, scores)
    metrics = builder.aggregate(results)

    print("=" * 80)
    print(builder.results_to_frame(results)[
        ['symbol', 'strategy_type', 'number_of_lots', 'strike_put', 'strike_call',
         'total_premium', 'buying_power_required', 'return_on_capital']
    ])
    print("-" * 80)
    print(f"Premium ${metrics.total_premium:,.0f} on ${metrics.total_buying_power:,.0f} buying power "
          f"-> {metrics.avg_return_on_capital:.2f}% per cycle, {metrics.monthly_return:.2f}% monthly "
          f"({metrics.number_of_trades} trades)")
    print("=" * 80)
