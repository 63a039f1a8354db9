"""Core domain models and serialization for Strata."""

from strata.core.canonicalize import canonical_bytes_from_model, model_from_bytes
from strata.core.model import (
    DEFAULT_ORDER_STATUS,
    TIMESTAMP_FORMAT,
    Order,
    OrderInput,
    Product,
    ProductCreate,
    ProductUpdate,
    next_timestamp,
    utcnow,
)

__all__ = [
    "DEFAULT_ORDER_STATUS",
    "TIMESTAMP_FORMAT",
    "Order",
    "OrderInput",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "canonical_bytes_from_model",
    "model_from_bytes",
    "next_timestamp",
    "utcnow",
]
