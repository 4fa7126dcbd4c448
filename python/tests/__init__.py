"""
Premium Engine Test Suite

Test Files:
- test_black_scholes.py: Pricing, delta and strike-search checks
- test_macro_scorer.py: Factor tables, per-class modifiers and signals
- test_position_sizer.py: Lot sizing under notional / buying-power caps
- test_portfolio_builder.py: Per-asset pipeline, aggregation and entry points
- test_models_config.py: Snapshot parsing, input validation, configuration

Usage:
    pytest python/tests/ -v
    pytest python/tests/test_black_scholes.py -v
"""
