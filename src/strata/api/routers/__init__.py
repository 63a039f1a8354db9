"""API routers for Strata."""

from strata.api.routers import health, metrics, orders, products

__all__ = ["health", "metrics", "orders", "products"]
