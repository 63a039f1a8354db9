"""Cache key schema for Strata.

Key format: {entity_prefix}:{id}

Where:
- entity_prefix: "product" or "order"
- id: store-assigned integer identifier
"""

from __future__ import annotations


class CacheKeys:
    """Cache key generator following consistent naming convention."""

    PRODUCT = "product"
    ORDER = "order"

    @classmethod
    def for_entity(cls, prefix: str, identifier: int | str) -> str:
        """Key for any entity type."""
        return f"{prefix}:{identifier}"
