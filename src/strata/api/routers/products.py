"""Product catalog API router (cache-aside).

- GET    /products/{id}   - Read through the cache
- POST   /products        - Create (cache filled on first read)
- PUT    /products/{id}   - Partial update, invalidates the cache entry
- DELETE /products/{id}   - Delete from store and cache
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from strata.api.deps import EntityId, get_product_service
from strata.core.model import Product, ProductCreate, ProductUpdate
from strata.services import ProductService

router = APIRouter(prefix="/products", tags=["Products (cache-aside)"])


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: EntityId,
    service: ProductService = Depends(get_product_service),
) -> Product:
    """Get a product, serving from cache when possible."""
    return await service.read(product_id)


@router.post("", response_model=Product, status_code=201)
async def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> Product:
    """Create a product."""
    return await service.create(payload.to_product())


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: EntityId,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> Product:
    """Apply the fields present in the payload and invalidate the cached copy."""
    return await service.update(product_id, payload)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: EntityId,
    service: ProductService = Depends(get_product_service),
) -> Response:
    """Delete a product."""
    await service.delete(product_id)
    return Response(status_code=204)
