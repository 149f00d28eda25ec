"""Per-store shopping cart kept in a cookie.

The cookie ``cart_<slug>`` holds base64url-encoded JSON:
``{"items": [{"product_id", "price", "quantity", "variant"}]}``.
Anything that fails to decode reads as an empty cart. Titles and image URLs
stay out of the cookie; browsers drop cookies over about 4 KB without telling
anyone, so the encoded value is capped at ``MAX_COOKIE_BYTES``.
"""

import base64
import json
import logging
import uuid
from decimal import Decimal

from fastapi import Request, Response
from pydantic import BaseModel, Field

from storefront.core.config import settings

logger = logging.getLogger(__name__)

MAX_LINE_ITEMS = 30
MAX_QUANTITY = 99
# encoded value only; leaves room for the name and attributes under 4096
MAX_COOKIE_BYTES = 3800


class CartFullError(ValueError):
    """The item would push the cart past its line or size limit."""


class CartItem(BaseModel):
    product_id: uuid.UUID
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(1, ge=1, le=MAX_QUANTITY)
    variant: str | None = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Cart(BaseModel):
    items: list[CartItem] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def add(self, item: CartItem) -> None:
        """Add an item; the same product and variant increments quantity.

        Raises ``CartFullError`` and leaves the cart unchanged when the item
        does not fit.
        """
        for existing in self.items:
            if existing.product_id == item.product_id and existing.variant == item.variant:
                existing.quantity = min(existing.quantity + item.quantity, MAX_QUANTITY)
                return
        if len(self.items) >= MAX_LINE_ITEMS:
            raise CartFullError(f"Cart is limited to {MAX_LINE_ITEMS} different items")
        self.items.append(item)
        if len(encode_cart(self)) > MAX_COOKIE_BYTES:
            self.items.pop()
            raise CartFullError("Cart cookie is full")

    def clear(self) -> None:
        self.items.clear()


def cookie_name(slug: str) -> str:
    return f"cart_{slug}"


def encode_cart(cart: Cart) -> str:
    raw = cart.model_dump_json(exclude_none=True).encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def decode_cart(value: str | None) -> Cart:
    if not value:
        return Cart()
    try:
        padded = value + "=" * (-len(value) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode()))
        return Cart.model_validate(data)
    except ValueError:
        # binascii.Error, JSONDecodeError and ValidationError all land here
        logger.info("Ignoring unreadable cart cookie")
        return Cart()


def load_cart(request: Request, slug: str) -> Cart:
    return decode_cart(request.cookies.get(cookie_name(slug)))


def save_cart(response: Response, slug: str, cart: Cart) -> None:
    if cart.is_empty:
        response.delete_cookie(cookie_name(slug), path=f"/storefront/{slug}")
        return
    value = encode_cart(cart)
    if len(value) > MAX_COOKIE_BYTES:
        # only reachable for carts built outside Cart.add; keep the cookie the browser has
        logger.warning("Cart for %s is %d bytes encoded, not saved", slug, len(value))
        return
    response.set_cookie(
        cookie_name(slug),
        value,
        max_age=settings.CART_COOKIE_MAX_AGE,
        path=f"/storefront/{slug}",
        httponly=True,
        samesite="lax",
    )
