"""
Pydantic Models - Cart Items and Wire Format

Contains the models held by the cart store and the helpers that turn a
cart into the JSON blob kept by the persistence adapter and back:
- Product: catalog entry as handed to add_to_cart
- CartItem: product plus cart quantity
- serialize_cart / parse_cart: stable JSON array format
"""

from typing import Any, Iterable, List, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# ============================================================
# Models
# ============================================================

class Product(BaseModel):
    """Catalog product as produced by catalog/network code.

    The store treats every field except ``id`` as opaque.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Stable product identifier, the merge key")
    title: str = Field(description="Display label")
    image_url: str = Field(description="Product image URL")
    price: Union[int, float] = Field(description="Unit price, never computed on here")

    @classmethod
    def coerce(cls, value: Union["Product", Mapping[str, Any]]) -> "Product":
        """Build a plain Product from a Product, CartItem or mapping.

        Any incoming ``quantity`` is dropped: the store computes it.
        """
        if isinstance(value, Product):
            value = value.model_dump(exclude={"quantity"})
        return cls.model_validate(value)


class CartItem(Product):
    """Product in the cart with its quantity (always >= 1)."""

    quantity: int = Field(ge=1, description="Units of this product in the cart")

    @classmethod
    def from_product(cls, product: Product, quantity: int) -> "CartItem":
        return cls(**product.model_dump(exclude={"quantity"}), quantity=quantity)

    def with_quantity(self, quantity: int) -> "CartItem":
        """Copy of this item with a new quantity (validated)."""
        return CartItem.from_product(self, quantity)


# ============================================================
# Wire format
# ============================================================

_CART_ADAPTER = TypeAdapter(List[CartItem])


def serialize_cart(items: Iterable[CartItem]) -> str:
    """Serialize cart items into the persisted JSON array."""
    return _CART_ADAPTER.dump_json(list(items)).decode("utf-8")


def parse_cart(raw: Union[str, bytes]) -> Tuple[CartItem, ...]:
    """
    Parse a persisted JSON array back into cart items.

    Raises:
        ValueError: undecodable bytes, malformed JSON, invalid items (pydantic
            ValidationError is a ValueError) or duplicate product ids
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    items = tuple(_CART_ADAPTER.validate_json(raw))

    seen = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate product id in persisted cart: {item.id!r}")
        seen.add(item.id)

    return items
