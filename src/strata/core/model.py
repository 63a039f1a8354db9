"""Domain models for the product catalog and order records.

All models use Pydantic v2. Field names are snake_case in Python and
camelCase on the wire (``updatedAt``, ``customerName``), matching the JSON
documents stored in the cache. Timestamps are whole-second naive UTC values
rendered as ``yyyy-MM-dd HH:mm:ss`` so a cached copy is field-identical to the
stored row.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_ORDER_STATUS = "PENDING"


class StrictModel(BaseModel):
    """Base model for all Strata domain models."""

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "validate_default": True,
    }


Timestamp = Annotated[
    datetime,
    PlainSerializer(lambda value: value.strftime(TIMESTAMP_FORMAT), return_type=str, when_used="json"),
]

NonBlank = Annotated[str, Field(min_length=1, pattern=r"\S")]

Money = Annotated[
    Decimal,
    Field(ge=0, max_digits=12, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


def utcnow() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(UTC).replace(tzinfo=None, microsecond=0)


def next_timestamp(previous: datetime | None) -> datetime:
    """Timestamp for an update that never moves backwards."""
    now = utcnow()
    if previous is not None and previous > now:
        return previous
    return now


# -----------------------------------------------------------------------------
# Product (cache-aside)
# -----------------------------------------------------------------------------


class Product(StrictModel):
    """A catalog entry."""

    id: int | None = Field(default=None, description="Store-assigned identifier")
    name: str | None = None
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    updated_at: Timestamp | None = Field(default=None, alias="updatedAt")


class ProductCreate(StrictModel):
    """Payload for creating a product."""

    name: str | None = None
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    def to_product(self) -> Product:
        return Product(name=self.name, price=self.price)


class ProductUpdate(StrictModel):
    """Partial update; only the fields present in the payload are applied."""

    name: str | None = None
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    def apply_to(self, product: Product) -> Product:
        """Return a copy of ``product`` with the present fields overwritten."""
        changes = self.model_dump(include={"name", "price"}, exclude_unset=True)
        return product.model_copy(update=changes)


# -----------------------------------------------------------------------------
# Order (write-through)
# -----------------------------------------------------------------------------


class OrderInput(StrictModel):
    """Payload for creating or replacing an order."""

    customer_name: NonBlank = Field(..., alias="customerName")
    product: NonBlank
    quantity: int = Field(..., gt=0)
    price: Money
    status: str | None = None


class Order(StrictModel):
    """An order record."""

    id: int | None = Field(default=None, description="Store-assigned identifier")
    customer_name: NonBlank = Field(..., alias="customerName")
    product: NonBlank
    quantity: int = Field(..., gt=0)
    price: Money
    status: str = DEFAULT_ORDER_STATUS
    created_at: Timestamp | None = Field(default=None, alias="createdAt")
    updated_at: Timestamp | None = Field(default=None, alias="updatedAt")

    @classmethod
    def from_input(cls, payload: OrderInput) -> Order:
        return cls(
            customer_name=payload.customer_name,
            product=payload.product,
            quantity=payload.quantity,
            price=payload.price,
            status=payload.status or DEFAULT_ORDER_STATUS,
        )

    def overwrite_with(self, payload: OrderInput) -> Order:
        """Return a copy with every mutable field replaced from ``payload``.

        A payload without a status keeps the current one.
        """
        return self.model_copy(
            update={
                "customer_name": payload.customer_name,
                "product": payload.product,
                "quantity": payload.quantity,
                "price": payload.price,
                "status": payload.status or self.status,
            }
        )
