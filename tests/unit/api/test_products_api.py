"""Tests for the cache-aside product endpoints."""

from __future__ import annotations

import orjson
from httpx import AsyncClient

from strata.api.deps import get_product_service
from strata.services import ProductService
from tests.doubles import InMemoryStore


async def _create(client: AsyncClient, name: str = "Lamp", price: float = 10.0) -> dict:
    response = await client.post("/products", json={"name": name, "price": price})
    assert response.status_code == 201
    return response.json()


class TestCreateProduct:
    """Test POST /products."""

    async def test_create_returns_201(self, client: AsyncClient, cache) -> None:
        """Create assigns an id and does not touch the cache."""
        body = await _create(client)

        assert body["id"] == 1
        assert body["name"] == "Lamp"
        assert body["price"] == 10.0
        assert len(body["updatedAt"]) == len("2024-01-01 12:00:00")
        assert cache.calls == []

    async def test_negative_price_rejected(self, client: AsyncClient) -> None:
        """Validation failures return 422."""
        response = await client.post("/products", json={"name": "Lamp", "price": -1})
        assert response.status_code == 422

    async def test_unknown_field_rejected(self, client: AsyncClient) -> None:
        """Payloads with extra fields are rejected."""
        response = await client.post("/products", json={"name": "Lamp", "colour": "red"})
        assert response.status_code == 422


class TestGetProduct:
    """Test GET /products/{id}."""

    async def test_read_populates_cache(self, client: AsyncClient, cache) -> None:
        """The first read caches the product with the cache-aside TTL."""
        created = await _create(client)

        response = await client.get(f"/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created
        cached = orjson.loads(await cache.get("product:1"))
        assert cached == created
        assert cache.ttl("product:1") == 1800

    async def test_second_read_is_a_hit(self, client: AsyncClient, instrumentation) -> None:
        """A repeated read is served from the cache."""
        await _create(client)

        await client.get("/products/1")
        await client.get("/products/1")

        assert instrumentation.misses == ["product"]
        assert instrumentation.hits == ["product"]

    async def test_missing_returns_404(self, client: AsyncClient, cache) -> None:
        """A missing product returns the NotFound error body."""
        response = await client.get("/products/99")

        assert response.status_code == 404
        message = response.json()["messages"][0]
        assert message["code"] == "NotFound"
        assert message["messageType"] == "Error"
        assert "99" in message["text"]
        assert "product:99" not in cache.keys()


class TestUpdateProduct:
    """Test PUT /products/{id}."""

    async def test_update_invalidates_and_next_read_is_fresh(self, client: AsyncClient, cache) -> None:
        """The stale entry is deleted and the next read returns the new price."""
        await _create(client, price=10.0)
        await client.get("/products/1")

        response = await client.put("/products/1", json={"price": 12.0})

        assert response.status_code == 200
        assert response.json()["price"] == 12.0
        assert response.json()["name"] == "Lamp"
        assert "product:1" not in cache.keys()

        fresh = await client.get("/products/1")
        assert fresh.json()["price"] == 12.0
        assert orjson.loads(await cache.get("product:1"))["price"] == 12.0

    async def test_update_missing_returns_404(self, client: AsyncClient) -> None:
        response = await client.put("/products/5", json={"price": 1.0})
        assert response.status_code == 404

    async def test_cache_outage_does_not_fail_update(self, client: AsyncClient, cache) -> None:
        """Invalidation failures are absorbed."""
        await _create(client)
        cache.failing.update({"get", "set", "delete"})

        response = await client.put("/products/1", json={"name": "Desk lamp"})

        assert response.status_code == 200
        assert (await client.get("/products/1")).json()["name"] == "Desk lamp"


class TestDeleteProduct:
    """Test DELETE /products/{id}."""

    async def test_delete_returns_204(self, client: AsyncClient, cache) -> None:
        """Delete removes the row and the cache entry."""
        await _create(client)
        await client.get("/products/1")

        response = await client.delete("/products/1")

        assert response.status_code == 204
        assert "product:1" not in cache.keys()
        assert (await client.get("/products/1")).status_code == 404

    async def test_delete_missing_returns_404(self, client: AsyncClient) -> None:
        response = await client.delete("/products/1")
        assert response.status_code == 404


class TestStoreFailure:
    """Test store outages."""

    async def test_store_failure_returns_503(self, app, client: AsyncClient, cache) -> None:
        """A failing store maps to StoreUnavailable."""
        store = InMemoryStore("Product")
        store.failing.add("find_by_id")
        app.dependency_overrides[get_product_service] = lambda: ProductService(store, cache)

        response = await client.get("/products/1")

        assert response.status_code == 503
        assert response.json()["messages"][0]["code"] == "StoreUnavailable"


class TestInputBounds:
    """Test inputs the store cannot represent."""

    async def test_out_of_range_id_rejected(self, client: AsyncClient, cache) -> None:
        """Ids beyond BIGINT never reach the store or the cache."""
        too_big = 2**63

        responses = [
            await client.get(f"/products/{too_big}"),
            await client.put(f"/products/{too_big}", json={"price": 1.0}),
            await client.delete(f"/products/{too_big}"),
        ]

        assert [r.status_code for r in responses] == [422, 422, 422]
        assert cache.calls == []

    async def test_non_positive_id_rejected(self, client: AsyncClient) -> None:
        assert (await client.get("/products/0")).status_code == 422

    async def test_largest_id_is_a_plain_miss(self, client: AsyncClient) -> None:
        """The BIGINT maximum is accepted and simply not found."""
        response = await client.get(f"/products/{2**63 - 1}")
        assert response.status_code == 404

    async def test_infinite_price_rejected(self, client: AsyncClient, cache) -> None:
        """Non-finite prices fail validation instead of caching as null."""
        headers = {"content-type": "application/json"}

        created = await client.post("/products", content=b'{"name":"x","price":Infinity}', headers=headers)
        await _create(client)
        updated = await client.put("/products/1", content=b'{"price":NaN}', headers=headers)

        assert created.status_code == 422
        assert updated.status_code == 422
        assert (await client.get("/products/1")).json()["price"] == 10.0
