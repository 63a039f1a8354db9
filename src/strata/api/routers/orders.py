"""Order API router (write-through).

- GET    /api/orders        - List all orders (warms the cache)
- POST   /api/orders        - Create in store, then cache
- GET    /api/orders/{id}   - Read through the cache
- PUT    /api/orders/{id}   - Replace mutable fields in store, then cache
- DELETE /api/orders/{id}   - Delete from store and cache
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from strata.api.deps import EntityId, get_order_service
from strata.core.model import Order, OrderInput
from strata.services import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders (write-through)"])


@router.get("", response_model=list[Order])
async def list_orders(service: OrderService = Depends(get_order_service)) -> list[Order]:
    """List every order as stored."""
    return await service.list_all()


@router.post("", response_model=Order, status_code=201)
async def create_order(
    payload: OrderInput,
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Create an order; status defaults to PENDING."""
    logger.info(f"Creating order for customer {payload.customer_name}, product {payload.product}")
    return await service.create(Order.from_input(payload))


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: EntityId,
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Get an order, serving from cache when possible."""
    return await service.read(order_id)


@router.put("/{order_id}", response_model=Order)
async def update_order(
    order_id: EntityId,
    payload: OrderInput,
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Replace the mutable fields of an order."""
    return await service.update(order_id, payload)


@router.delete("/{order_id}", status_code=204)
async def delete_order(
    order_id: EntityId,
    service: OrderService = Depends(get_order_service),
) -> Response:
    """Delete an order."""
    await service.delete(order_id)
    return Response(status_code=204)
