"""
Error taxonomy for the premium engine.

Fatal conditions raise; recoverable ones are reported through result flags
(StrikeSearchResult.converged, PositionSizeResult.blocked) and logged, so a
single asset can never abort the whole portfolio run.
"""


class PremiumEngineError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(PremiumEngineError, ValueError):
    """Non-positive spot/strike/time or out-of-range volatility. Aborts one asset."""


class MalformedSnapshotError(PremiumEngineError, ValueError):
    """Macro snapshot is structurally invalid. Aborts the scoring pass."""


class MissingReferenceDataError(PremiumEngineError, LookupError):
    """
    A factor could not find the data it needs.

    Factor functions treat this condition as a zero contribution and do not
    raise it; it exists so callers can name the condition in their own code.
    """


class ConstraintViolationError(PremiumEngineError):
    """Not even one contract fits inside the notional / buying-power caps."""


class NumericalNonConvergenceError(PremiumEngineError, ArithmeticError):
    """Strike search ran out of iterations (raised only in strict mode)."""
