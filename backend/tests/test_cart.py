"""Cookie cart."""

import base64
import json
import uuid
from decimal import Decimal

import pytest
from fastapi import Response
from pydantic import ValidationError

from storefront.services.cart import (
    MAX_COOKIE_BYTES,
    MAX_LINE_ITEMS,
    MAX_QUANTITY,
    Cart,
    CartFullError,
    CartItem,
    cookie_name,
    decode_cart,
    encode_cart,
    save_cart,
)


def _item(product_id: uuid.UUID | None = None, **kwargs) -> CartItem:
    values = {"price": Decimal("2.500"), "quantity": 1}
    values.update(kwargs)
    return CartItem(product_id=product_id or uuid.uuid4(), **values)


def test_same_product_and_variant_increments_quantity():
    cart = Cart()
    product_id = uuid.uuid4()
    cart.add(_item(product_id, variant="M"))
    cart.add(_item(product_id, variant="M", quantity=2))
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3


def test_different_variant_is_a_new_line():
    cart = Cart()
    product_id = uuid.uuid4()
    cart.add(_item(product_id, variant="S"))
    cart.add(_item(product_id, variant="L"))
    assert len(cart.items) == 2


def test_totals():
    cart = Cart()
    cart.add(_item(price=Decimal("2.500"), quantity=2))
    cart.add(_item(price=Decimal("1.250")))
    assert cart.item_count == 3
    assert cart.subtotal == Decimal("6.250")
    assert Cart().subtotal == Decimal("0")


def test_quantity_is_capped():
    cart = Cart()
    product_id = uuid.uuid4()
    cart.add(_item(product_id, quantity=MAX_QUANTITY))
    cart.add(_item(product_id, quantity=5))
    assert cart.items[0].quantity == MAX_QUANTITY


def test_line_item_limit():
    cart = Cart(items=[_item() for _ in range(MAX_LINE_ITEMS)])
    with pytest.raises(CartFullError):
        cart.add(_item())


def test_full_cart_of_plain_items_fits_in_cookie():
    cart = Cart()
    for _ in range(MAX_LINE_ITEMS):
        cart.add(_item(price=Decimal("1299.500"), quantity=MAX_QUANTITY))
    assert len(encode_cart(cart)) <= MAX_COOKIE_BYTES


def test_cookie_size_is_capped():
    cart = Cart()
    with pytest.raises(CartFullError):
        for _ in range(MAX_LINE_ITEMS):
            cart.add(_item(variant="Limited edition hand-glazed stoneware, midnight blue"))
    kept = len(cart.items)
    assert 0 < kept < MAX_LINE_ITEMS
    assert len(encode_cart(cart)) <= MAX_COOKIE_BYTES


def test_cookie_keeps_only_what_pricing_needs():
    cart = Cart()
    cart.add(_item(variant="M"))
    value = encode_cart(cart)
    stored = json.loads(base64.urlsafe_b64decode(value + "=" * (-len(value) % 4)))
    assert set(stored["items"][0]) == {"product_id", "price", "quantity", "variant"}


def test_old_cookies_with_titles_still_decode():
    legacy = (
        '{"items": [{"product_id": "6f1c1c9e-8d3b-4c1e-9a55-0f6f1d0c7a01", "title": "Mug", '
        '"price": "2.500", "quantity": 2, "image_url": "https://cdn.example/m.png"}]}'
    )
    cart = decode_cart(base64.urlsafe_b64encode(legacy.encode()).decode())
    assert cart.item_count == 2


def test_oversized_cart_is_not_saved():
    cart = Cart(items=[_item(variant="v" * 200) for _ in range(MAX_LINE_ITEMS)])
    response = Response()
    save_cart(response, "acme", cart)
    assert "set-cookie" not in response.headers


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        _item(price=Decimal("-1"))


def test_cookie_value_decodes_to_same_cart():
    cart = Cart()
    cart.add(_item(variant="Blue"))
    assert decode_cart(encode_cart(cart)) == cart


@pytest.mark.parametrize("value", [None, "", "%%%", "bm90LWpzb24", "eyJpdGVtcyI6IDV9"])
def test_unreadable_cookie_is_empty_cart(value):
    assert decode_cart(value).is_empty


def test_save_empty_cart_deletes_cookie():
    response = Response()
    save_cart(response, "acme", Cart())
    header = response.headers["set-cookie"]
    assert header.startswith(f"{cookie_name('acme')}=")
    assert "Max-Age=0" in header


def test_save_cart_scopes_cookie_to_store():
    response = Response()
    cart = Cart()
    cart.add(_item())
    save_cart(response, "acme", cart)
    header = response.headers["set-cookie"]
    assert "Path=/storefront/acme" in header
    assert "HttpOnly" in header
    assert "SameSite=lax" in header
