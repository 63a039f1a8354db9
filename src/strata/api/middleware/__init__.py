"""HTTP middleware for Strata."""

from strata.api.middleware.correlation import CorrelationMiddleware

__all__ = ["CorrelationMiddleware"]
