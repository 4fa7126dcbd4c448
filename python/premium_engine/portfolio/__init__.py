"""
Portfolio assembly: per-asset strategy generation and portfolio metrics.
"""

from .portfolio_builder import PortfolioBuilder

__all__ = ['PortfolioBuilder']
