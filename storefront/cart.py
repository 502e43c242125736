"""
Client-side shopping cart for catalog listings.

Amounts are Decimal pesos. CLP has no minor unit, so tax and totals are
rounded to whole pesos.
"""

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from loguru import logger

from storefront.models import Listing, RecordId
from storefront.services.errors import ValidationError

IVA_RATE = Decimal("0.19")
WHOLE_PESO = Decimal("1")


def to_pesos(amount: Any) -> Decimal:
    """Decimal amount rounded half-up to whole pesos."""
    return Decimal(str(amount)).quantize(WHOLE_PESO, rounding=ROUND_HALF_UP)


@dataclass
class CartItem:
    listing_id: RecordId
    nombre: str
    precio: Decimal
    cantidad: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.precio * self.cantidad


class Cart:
    """
    Ordered cart keyed by listing id.

    Usage:
        cart = Cart()
        cart.add(listing)
        cart.add(listing, cantidad=2)   # same listing, quantity becomes 3
        print(cart.subtotal(), cart.tax(), cart.total())
    """

    def __init__(self):
        self._items: dict[RecordId, CartItem] = {}

    @property
    def items(self) -> list[CartItem]:
        return list(self._items.values())

    def add(self, listing: Listing, cantidad: int = 1) -> CartItem:
        _require_positive(cantidad)
        if listing.id is None:
            raise ValidationError("Cannot add a listing without id to the cart")
        if listing.precio is None:
            raise ValidationError(f"Listing {listing.id} has no price")

        item = self._items.get(listing.id)
        if item is None:
            item = CartItem(
                listing_id=listing.id,
                nombre=listing.nombre,
                precio=to_pesos(listing.precio),
                cantidad=cantidad,
            )
            self._items[listing.id] = item
        else:
            item.cantidad += cantidad

        logger.debug(f"Cart: {item.nombre} x{item.cantidad}")
        return item

    def update_quantity(self, listing_id: RecordId, cantidad: int) -> CartItem:
        _require_positive(cantidad)
        item = self._items.get(listing_id)
        if item is None:
            raise ValidationError(f"Listing {listing_id} is not in the cart")
        item.cantidad = cantidad
        return item

    def remove(self, listing_id: RecordId) -> bool:
        return self._items.pop(listing_id, None) is not None

    def clear(self) -> None:
        self._items.clear()

    def item_count(self) -> int:
        return sum(item.cantidad for item in self._items.values())

    def subtotal(self) -> Decimal:
        return to_pesos(sum((item.line_total for item in self._items.values()), Decimal(0)))

    def tax(self) -> Decimal:
        """IVA 19% of the subtotal."""
        return to_pesos(self.subtotal() * IVA_RATE)

    def total(self) -> Decimal:
        return self.subtotal() + self.tax()

    def snapshot(self) -> list[dict[str, Any]]:
        """JSON-able rows for client-side persistence (prices as strings)."""
        return [
            {**asdict(item), "precio": str(item.precio)}
            for item in self._items.values()
        ]

    @classmethod
    def from_snapshot(cls, rows: list[dict[str, Any]]) -> "Cart":
        """Rebuild a cart; rows without id, price or a positive quantity are skipped."""
        cart = cls()
        for row in rows:
            try:
                item = CartItem(
                    listing_id=row["listing_id"],
                    nombre=str(row.get("nombre", "")),
                    precio=to_pesos(row["precio"]),
                    cantidad=int(row.get("cantidad", 1)),
                )
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.warning(f"Skipping invalid cart row {row!r}: {e}")
                continue
            if item.cantidad > 0:
                cart._items[item.listing_id] = item
        return cart

    def __len__(self) -> int:
        return len(self._items)


def _require_positive(cantidad: Any) -> None:
    if isinstance(cantidad, bool) or not isinstance(cantidad, int) or cantidad <= 0:
        raise ValidationError(f"Quantity must be a positive integer, got {cantidad!r}")
