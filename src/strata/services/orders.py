"""Order records served through the write-through strategy."""

from __future__ import annotations

from strata.cache.keys import CacheKeys
from strata.core.model import Order, OrderInput, next_timestamp, utcnow
from strata.strategies.write_through import WriteThroughAccessor


class OrderService(WriteThroughAccessor[Order]):
    """Write-through accessor for orders.

    Create stamps ``createdAt == updatedAt``; update replaces every mutable
    field and refreshes ``updatedAt`` while ``createdAt`` stays fixed.
    """

    entity = "Order"
    key_prefix = CacheKeys.ORDER
    model = Order

    def prepare_create(self, entity: Order) -> Order:
        now = utcnow()
        return entity.model_copy(update={"id": None, "created_at": now, "updated_at": now})

    def apply_changes(self, current: Order, changes: OrderInput) -> Order:
        updated = current.overwrite_with(changes)
        return updated.model_copy(update={"updated_at": next_timestamp(current.updated_at)})
