"""Entity services: products use cache-aside, orders use write-through."""

from strata.services.orders import OrderService
from strata.services.products import ProductService

__all__ = ["OrderService", "ProductService"]
