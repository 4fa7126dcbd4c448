"""
Premium Engine

Macro scoring, Black-Scholes strike selection and position sizing for a
futures options-selling portfolio.

Entry points:
    scores = compute_asset_class_scores(snapshot)
    results = generate_portfolio(market_data, scores)
    metrics = aggregate_portfolio_metrics(results)
"""

from typing import List, Mapping, Optional, Sequence

from .core import (
    AssetClass,
    AssetClassScore,
    AssetMarketData,
    AssetSpecification,
    EngineConfig,
    MacroSnapshot,
    OptionStrategyResult,
    PortfolioMetrics,
    Signal,
    StrategyType,
)
from .factors import MacroScorer
from .portfolio import PortfolioBuilder

__version__ = '0.1.0'


def compute_asset_class_scores(
    snapshot: MacroSnapshot,
    config: Optional[EngineConfig] = None
) -> List[AssetClassScore]:
    """Score every configured asset class for a macro snapshot."""
    config = config or EngineConfig()
    return MacroScorer(config.scoring).score(snapshot)


def generate_portfolio(
    market_data: Sequence[AssetMarketData],
    scores: Sequence[AssetClassScore],
    config: Optional[EngineConfig] = None,
    specs: Optional[Mapping[str, AssetSpecification]] = None,
    max_workers: Optional[int] = None
) -> List[OptionStrategyResult]:
    """Build sized option-selling positions for each asset."""
    return PortfolioBuilder(config, specs).generate(market_data, scores, max_workers=max_workers)


def aggregate_portfolio_metrics(
    results: Sequence[OptionStrategyResult],
    config: Optional[EngineConfig] = None
) -> PortfolioMetrics:
    """Portfolio totals, average ROC and monthly-normalised return."""
    return PortfolioBuilder(config).aggregate(results)


__all__ = [
    'AssetClass',
    'AssetClassScore',
    'AssetMarketData',
    'AssetSpecification',
    'EngineConfig',
    'MacroSnapshot',
    'OptionStrategyResult',
    'PortfolioMetrics',
    'Signal',
    'StrategyType',
    'compute_asset_class_scores',
    'generate_portfolio',
    'aggregate_portfolio_metrics',
]
