"""Tests for the client-side cart."""

from decimal import Decimal

import pytest

from storefront.cart import Cart
from storefront.models import Listing
from storefront.services.errors import ValidationError


@pytest.fixture
def dj():
    return Listing(id=1, nombre="DJ", precio=150000)


@pytest.fixture
def globos():
    return Listing(id=2, nombre="Globos", precio=9990.5)


def test_add_merges_same_listing(dj):
    cart = Cart()
    cart.add(dj)
    cart.add(dj, cantidad=2)

    assert len(cart) == 1
    assert cart.item_count() == 3
    assert cart.items[0].cantidad == 3


def test_totals_with_iva(dj, globos):
    cart = Cart()
    cart.add(dj)
    cart.add(globos, cantidad=2)

    # 9990.5 rounds to 9991 per unit
    assert cart.subtotal() == Decimal("169982")
    assert cart.tax() == Decimal("32297")
    assert cart.total() == Decimal("202279")


def test_update_remove_clear(dj, globos):
    cart = Cart()
    cart.add(dj)
    cart.add(globos)

    cart.update_quantity(1, 4)
    assert cart.item_count() == 5
    assert cart.remove(2) is True
    assert cart.remove(2) is False
    cart.clear()
    assert cart.item_count() == 0
    assert cart.total() == Decimal("0")


@pytest.mark.parametrize("cantidad", [0, -1, True, 1.5])
def test_quantities_must_be_positive_integers(dj, cantidad):
    cart = Cart()
    with pytest.raises(ValidationError):
        cart.add(dj, cantidad=cantidad)


def test_unpriced_listing_and_unknown_item(dj):
    cart = Cart()
    with pytest.raises(ValidationError):
        cart.add(Listing(id=9, nombre="Consultar"))
    with pytest.raises(ValidationError):
        cart.update_quantity(99, 1)


def test_snapshot_restores_cart(dj, globos):
    cart = Cart()
    cart.add(dj, cantidad=2)
    cart.add(globos)

    restored = Cart.from_snapshot(cart.snapshot() + [{"nombre": "sin id"}, {"listing_id": 5, "precio": "x"}])

    assert restored.total() == cart.total()
    assert restored.item_count() == 3
