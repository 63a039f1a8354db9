"""Product catalog served through the cache-aside strategy."""

from __future__ import annotations

from strata.cache.keys import CacheKeys
from strata.core.model import Product, ProductUpdate, next_timestamp, utcnow
from strata.strategies.cache_aside import CacheAsideAccessor


class ProductService(CacheAsideAccessor[Product]):
    """Cache-aside accessor for catalog products.

    Updates are partial: only ``name`` and ``price`` present in the payload
    change, and ``updatedAt`` is refreshed.
    """

    entity = "Product"
    key_prefix = CacheKeys.PRODUCT
    model = Product

    def prepare_create(self, entity: Product) -> Product:
        return entity.model_copy(update={"id": None, "updated_at": utcnow()})

    def apply_changes(self, current: Product, changes: ProductUpdate) -> Product:
        updated = changes.apply_to(current)
        return updated.model_copy(update={"updated_at": next_timestamp(current.updated_at)})
