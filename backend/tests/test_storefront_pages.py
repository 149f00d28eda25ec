"""Server-rendered storefront pages, backed by a fake public API."""

import uuid
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from httpx import AsyncClient

from storefront.client.api_client import StorefrontApiClient
from storefront.main import app
from storefront.services.cart import Cart, CartItem, cookie_name, decode_cart, encode_cart
from storefront.themes.loader import ThemeBundle, ThemeLoader, get_theme_loader
from storefront.themes.registry import FALLBACK_COLORS
from storefront.web.storefront import get_storefront_api_client

LAMP_ID = uuid.UUID("6f1c1c9e-8d3b-4c1e-9a55-0f6f1d0c7a01")
MUG_ID = uuid.UUID("6f1c1c9e-8d3b-4c1e-9a55-0f6f1d0c7a02")


def _product(product_id: uuid.UUID, title: str, price: str, **extra) -> dict:
    return {
        "id": str(product_id),
        "title": title,
        "price_amount": price,
        "effective_currency": "KWD",
        **extra,
    }


class FakeStorefrontApi:
    """MockTransport handler serving one store, ``acme``."""

    def __init__(self):
        self.theme: dict | None = {"name": "modern", "customizations": {}}
        self.products = [
            _product(LAMP_ID, "Desk Lamp", "12.500", variants=["Black", "White"]),
            _product(MUG_ID, "Coffee Mug", "2.250", compare_at_amount="3.000"),
        ]
        self.next_cursor: str | None = None
        self.reject_cursors = False
        self.down = False
        self.requests: list[httpx.Request] = []

    def product_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/products")]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            return httpx.Response(503, json={"detail": "maintenance"})

        path = request.url.path.removeprefix("/api/v1/storefront/")
        slug, _, rest = path.partition("/")
        if slug != "acme":
            return httpx.Response(404, json={"detail": "Tenant not found"})
        if rest == "":
            return httpx.Response(
                200,
                json={
                    "name": "Acme",
                    "slug": "acme",
                    "currency": "KWD",
                    "settings": {"theme": self.theme},
                },
            )
        if rest == "categories":
            return httpx.Response(200, json=[{"id": str(uuid.uuid4()), "name": "Lighting"}])
        if rest == "products":
            if self.reject_cursors and "cursor" in request.url.params:
                return httpx.Response(400, json={"detail": "Invalid cursor"})
            return httpx.Response(
                200,
                json={
                    "items": self.products,
                    "next_cursor": self.next_cursor,
                    "has_more": self.next_cursor is not None,
                },
            )
        if rest.startswith("products/"):
            product_id = rest.removeprefix("products/")
            for product in self.products:
                if product["id"] == product_id:
                    return httpx.Response(200, json=product)
            return httpx.Response(404, json={"detail": "Product not found"})
        return httpx.Response(404, json={"detail": "Not Found"})


@pytest.fixture
def fake_api() -> FakeStorefrontApi:
    return FakeStorefrontApi()


@pytest.fixture
async def pages(client: AsyncClient, fake_api: FakeStorefrontApi):
    api = StorefrontApiClient(
        "http://api.test/api/v1",
        transport=httpx.MockTransport(fake_api),
        max_retries=1,
        base_delay=0,
    )
    app.dependency_overrides[get_storefront_api_client] = lambda: api
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_storefront_api_client, None)
        await api.aclose()


def _cart_cookie(response: httpx.Response, slug: str = "acme") -> Cart:
    header = response.headers["set-cookie"]
    name, _, rest = header.partition("=")
    assert name == cookie_name(slug)
    return decode_cart(rest.split(";", 1)[0])


def _cart_header(*items: CartItem) -> dict:
    return {"cookie": f"{cookie_name('acme')}={encode_cart(Cart(items=list(items)))}"}


async def test_home_renders_grid_with_theme(pages: AsyncClient, fake_api):
    fake_api.theme = {"name": "modern", "customizations": {"colors": {"accent": "#ff0000"}}}

    resp = await pages.get("/storefront/acme")

    assert resp.status_code == 200
    html = resp.text
    assert "theme-modern bundle-modern" in html
    assert "--theme-accent: #ff0000;" in html
    assert "--theme-primary: #2563eb;" in html
    assert "Desk Lamp" in html
    assert "KD 12.500" in html
    assert "KD 3.000" in html  # compare-at price of the sale item
    assert 'class="hero' in html
    assert "cart-summary" not in html


async def test_quoted_font_stack_rendered_verbatim(pages: AsyncClient, fake_api):
    fake_api.theme = {
        "name": "modern",
        "customizations": {"typography": {"fontFamily": "'Open Sans', sans-serif"}},
    }

    resp = await pages.get("/storefront/acme")

    assert resp.status_code == 200
    assert "--theme-font-family: 'Open Sans', sans-serif;" in resp.text
    assert "--theme-font-family: &#39;" not in resp.text


async def test_alias_theme_uses_mapped_bundle(pages: AsyncClient, fake_api):
    fake_api.theme = {"name": "techy", "customizations": {}}

    resp = await pages.get("/storefront/acme")

    assert resp.status_code == 200
    assert "theme-techy bundle-neon" in resp.text
    assert "+ Cart" in resp.text


async def test_store_without_theme_uses_default(pages: AsyncClient, fake_api):
    fake_api.theme = None

    resp = await pages.get("/storefront/acme")

    assert resp.status_code == 200
    assert "theme-minimal bundle-minimal" in resp.text


async def test_unknown_store_renders_not_found(pages: AsyncClient):
    resp = await pages.get("/storefront/nobody-here")

    assert resp.status_code == 404
    assert "Store Not Found" in resp.text
    assert f"--theme-primary: {FALLBACK_COLORS.primary};" in resp.text
    assert "bundle-" not in resp.text


async def test_api_down_renders_unavailable(pages: AsyncClient, fake_api):
    fake_api.down = True

    resp = await pages.get("/storefront/acme")

    assert resp.status_code == 503
    assert resp.headers["retry-after"] == "30"
    assert "temporarily unavailable" in resp.text
    # first attempt plus one retry
    assert len(fake_api.requests) == 2


async def test_filters_forwarded_to_api(pages: AsyncClient, fake_api):
    resp = await pages.get(
        "/storefront/acme", params={"q": "lamp", "sort": "price_asc", "min_price": ""}
    )

    assert resp.status_code == 200
    params = fake_api.product_requests()[0].url.params
    assert params["q"] == "lamp"
    assert params["sort"] == "price_asc"
    assert "min_price" not in params
    # filtered results skip the hero
    assert 'class="hero' not in resp.text
    assert 'value="lamp"' in resp.text


async def test_inverted_price_range_is_reset(pages: AsyncClient, fake_api):
    resp = await pages.get("/storefront/acme", params={"min_price": "50", "max_price": "10"})

    assert resp.status_code == 200
    assert "Some filters were invalid" in resp.text
    params = fake_api.product_requests()[0].url.params
    assert "min_price" not in params
    assert "max_price" not in params


async def test_non_numeric_price_is_reported(pages: AsyncClient, fake_api):
    resp = await pages.get("/storefront/acme", params={"max_price": "cheap"})

    assert resp.status_code == 200
    assert "Prices must be numbers" in resp.text


async def test_rejected_cursor_shows_first_page(pages: AsyncClient, fake_api):
    fake_api.reject_cursors = True

    resp = await pages.get("/storefront/acme", params={"cursor": "featured|garbage"})

    assert resp.status_code == 200
    assert "Some filters were invalid" in resp.text
    assert "Desk Lamp" in resp.text
    assert "cursor" not in fake_api.product_requests()[-1].url.params


async def test_next_page_link_keeps_filters(pages: AsyncClient, fake_api):
    fake_api.next_cursor = "price_asc|2.250|" + str(MUG_ID)

    resp = await pages.get("/storefront/acme", params={"q": "mug", "sort": "price_asc"})

    assert "More products" in resp.text
    href = resp.text.split('href="?', 1)[1].split('"', 1)[0].replace("&amp;", "&")
    query = parse_qs(href)
    assert query["q"] == ["mug"]
    assert query["sort"] == ["price_asc"]
    assert query["cursor"] == [fake_api.next_cursor]


async def test_incomplete_bundle_renders_loading(pages: AsyncClient):
    broken = ThemeLoader({"minimal": lambda: ThemeBundle(name="minimal")}, aliases={})
    app.dependency_overrides[get_theme_loader] = lambda: broken
    try:
        resp = await pages.get("/storefront/acme")
    finally:
        app.dependency_overrides.pop(get_theme_loader, None)

    assert resp.status_code == 200
    assert "Loading Acme" in resp.text
    assert "Desk Lamp" not in resp.text


async def test_product_page(pages: AsyncClient):
    resp = await pages.get(f"/storefront/acme/products/{LAMP_ID}")

    assert resp.status_code == 200
    assert "product-detail" in resp.text
    assert "<title>Desk Lamp | Acme</title>" in resp.text
    assert '<option value="White">White</option>' in resp.text


async def test_missing_product_renders_not_found(pages: AsyncClient):
    resp = await pages.get(f"/storefront/acme/products/{uuid.uuid4()}")

    assert resp.status_code == 404
    assert "Product Not Found" in resp.text
    assert "Continue shopping" in resp.text


async def test_cart_summary_shown_for_non_empty_cart(pages: AsyncClient):
    item = CartItem(product_id=MUG_ID, price="2.250", quantity=2)

    resp = await pages.get("/storefront/acme", headers=_cart_header(item))

    assert "cart-summary" in resp.text
    assert "2 items" in resp.text
    assert "KD 4.500" in resp.text


async def test_add_to_cart_prices_from_catalog(pages: AsyncClient):
    pages.cookies.clear()
    resp = await pages.post(
        "/storefront/acme/cart",
        data={"product_id": str(LAMP_ID), "quantity": "2", "variant": "White"},
        headers={"referer": "http://test/storefront/acme?q=lamp"},
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/storefront/acme?q=lamp"
    cart = _cart_cookie(resp)
    assert cart.item_count == 2
    assert cart.items[0].product_id == LAMP_ID
    assert str(cart.items[0].price) == "12.500"
    assert cart.items[0].variant == "White"


async def test_add_to_cart_merges_with_existing_cookie(pages: AsyncClient):
    pages.cookies.clear()
    existing = CartItem(product_id=LAMP_ID, price="12.500", variant="Black")
    resp = await pages.post(
        "/storefront/acme/cart",
        data={"product_id": str(LAMP_ID), "variant": "Black"},
        headers=_cart_header(existing),
    )

    cart = _cart_cookie(resp)
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2


async def test_unknown_variant_is_dropped(pages: AsyncClient):
    pages.cookies.clear()
    resp = await pages.post(
        "/storefront/acme/cart", data={"product_id": str(LAMP_ID), "variant": "Purple"}
    )

    assert _cart_cookie(resp).items[0].variant is None


async def test_foreign_referer_redirects_home(pages: AsyncClient):
    pages.cookies.clear()
    resp = await pages.post(
        "/storefront/acme/cart",
        data={"product_id": str(MUG_ID)},
        headers={"referer": "https://evil.example/storefront/acme"},
    )

    assert resp.status_code == 303
    assert urlparse(resp.headers["location"]).path == "/storefront/acme"


async def test_add_missing_product_leaves_cart_alone(pages: AsyncClient):
    pages.cookies.clear()
    resp = await pages.post("/storefront/acme/cart", data={"product_id": str(uuid.uuid4())})

    assert resp.status_code == 303
    assert "set-cookie" not in resp.headers


async def test_clear_cart_deletes_cookie(pages: AsyncClient):
    pages.cookies.clear()
    item = CartItem(product_id=MUG_ID, price="2.250")
    resp = await pages.post("/storefront/acme/cart/clear", headers=_cart_header(item))

    assert resp.status_code == 303
    assert "Max-Age=0" in resp.headers["set-cookie"]
