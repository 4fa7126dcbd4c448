"""
Engine configuration.

Plain dataclasses with defaults matching the production run: 52 DTE,
20-delta strikes, 4% risk-free rate, $500k notional per asset and $100k
buying power per trade.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .models import AssetClass


DEFAULT_ASSET_CLASSES: Tuple[AssetClass, ...] = (
    AssetClass.EQUITY_INDICES,
    AssetClass.PRECIOUS_METALS,
    AssetClass.ENERGY,
    AssetClass.INDUSTRIAL_METALS,
    AssetClass.AGRICULTURE,
    AssetClass.CRYPTOCURRENCY,
)


@dataclass(frozen=True)
class ScoringConfig:
    """Macro scoring configuration."""
    buy_threshold: float = 5.0  # total >= buy_threshold -> buy
    sell_threshold: float = -5.0  # total <= sell_threshold -> sell
    reference_country: str = 'USA'  # policy-setting country for the rate factor
    benchmark_index: str = 'S&P 500'  # index used by the valuation factor
    asset_classes: Tuple[AssetClass, ...] = DEFAULT_ASSET_CLASSES

    def __post_init__(self):
        if self.sell_threshold >= self.buy_threshold:
            raise ValueError(
                f"sell_threshold must be below buy_threshold, got {self.sell_threshold} >= {self.buy_threshold}"
            )
        if not self.asset_classes:
            raise ValueError("asset_classes must not be empty")
        object.__setattr__(self, 'asset_classes', tuple(self.asset_classes))


@dataclass(frozen=True)
class PricingConfig:
    """Option pricing and strike-selection configuration."""
    risk_free_rate: float = 0.04
    target_dte: int = 52
    target_delta: float = 0.20
    max_iterations: int = 100
    tolerance: float = 0.001
    days_per_year: float = 365.0
    avg_days_per_month: float = 30.5

    def __post_init__(self):
        if self.target_dte <= 0:
            raise ValueError(f"target_dte must be positive, got {self.target_dte}")
        if not 0 < self.target_delta < 1:
            raise ValueError(f"target_delta must be in (0, 1), got {self.target_delta}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.days_per_year <= 0 or self.avg_days_per_month <= 0:
            raise ValueError("day-count constants must be positive")

    @property
    def time_to_expiry(self) -> float:
        """Target DTE expressed in years."""
        return self.target_dte / self.days_per_year


@dataclass(frozen=True)
class RiskLimits:
    """Position sizing caps."""
    max_notional_per_asset: float = 500_000.0
    max_buying_power_per_trade: float = 100_000.0
    bp_pct_single_leg: float = 0.20  # short put / short call
    bp_pct_strangle: float = 0.25  # two-sided risk

    def __post_init__(self):
        if self.max_notional_per_asset <= 0:
            raise ValueError(f"max_notional_per_asset must be positive, got {self.max_notional_per_asset}")
        if self.max_buying_power_per_trade <= 0:
            raise ValueError(
                f"max_buying_power_per_trade must be positive, got {self.max_buying_power_per_trade}"
            )
        for name in ('bp_pct_single_leg', 'bp_pct_strangle'):
            value = getattr(self, name)
            if value <= 0 or value > 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")


@dataclass(frozen=True)
class EngineConfig:
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    limits: RiskLimits = field(default_factory=RiskLimits)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> 'EngineConfig':
        """
        Build a config from nested mappings, e.g. {'pricing': {'target_dte': 45}}.

        Unknown keys raise TypeError from the dataclass constructors.
        """
        data = data or {}
        scoring = dict(data.get('scoring', {}))
        if 'asset_classes' in scoring:
            scoring['asset_classes'] = tuple(
                c if isinstance(c, AssetClass) else AssetClass(c) for c in scoring['asset_classes']
            )
        return cls(
            scoring=ScoringConfig(**scoring),
            pricing=PricingConfig(**data.get('pricing', {})),
            limits=RiskLimits(**data.get('limits', {})),
        )


DEFAULT_CONFIG = EngineConfig()
