# Premium Engine Core - data model, configuration and error taxonomy
from .errors import (
    PremiumEngineError,
    InvalidInputError,
    MalformedSnapshotError,
    MissingReferenceDataError,
    ConstraintViolationError,
    NumericalNonConvergenceError,
)
from .models import (
    AssetClass,
    AssetClassScore,
    AssetMarketData,
    AssetSpecification,
    BusinessCycle,
    CommodityBias,
    CommodityView,
    InterestRateView,
    LiquidityCondition,
    MacroSnapshot,
    OptionKind,
    OptionStrategyResult,
    PolicyStance,
    PortfolioMetrics,
    RateDirection,
    Signal,
    StrategyType,
    ValuationLevel,
    ValuationView,
)
from .config import DEFAULT_CONFIG, EngineConfig, PricingConfig, RiskLimits, ScoringConfig

__all__ = [
    'PremiumEngineError', 'InvalidInputError', 'MalformedSnapshotError',
    'MissingReferenceDataError', 'ConstraintViolationError', 'NumericalNonConvergenceError',
    'AssetClass', 'AssetClassScore', 'AssetMarketData', 'AssetSpecification',
    'BusinessCycle', 'CommodityBias', 'CommodityView', 'InterestRateView',
    'LiquidityCondition', 'MacroSnapshot', 'OptionKind', 'OptionStrategyResult',
    'PolicyStance', 'PortfolioMetrics', 'RateDirection', 'Signal', 'StrategyType',
    'ValuationLevel', 'ValuationView',
    'DEFAULT_CONFIG', 'EngineConfig', 'PricingConfig', 'RiskLimits', 'ScoringConfig',
]
