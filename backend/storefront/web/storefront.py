"""Server-rendered storefront pages.

Pages get their data from the public REST API through
``StorefrontApiClient`` (the same path a headless frontend takes), so store
lookup, RLS scoping and retries all live in one place.
"""

import asyncio
import logging
import uuid
from decimal import Decimal, InvalidOperation
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from storefront.client.api_client import StorefrontApiClient
from storefront.client.errors import (
    ApiError,
    ApiUnavailableError,
    NotFoundError,
    ServerError,
)
from storefront.rendering.renderer import StorefrontRenderer, get_renderer
from storefront.schemas.product import ProductFilters
from storefront.services.cart import CartFullError, CartItem, load_cart, save_cart
from storefront.themes.customization import resolve_store_style
from storefront.themes.loader import ThemeLoader, get_theme_loader

logger = logging.getLogger(__name__)

router = APIRouter()


def get_storefront_api_client(request: Request) -> StorefrontApiClient:
    """Client created in the app lifespan."""
    return request.app.state.storefront_api


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def grid_filters(request: Request) -> tuple[ProductFilters, str | None]:
    """Filters from the page query string.

    Form submissions send empty strings for untouched inputs, and a bad
    price should not take the page down, so unparseable values are dropped
    and reported instead of raising.
    """
    params = request.query_params
    raw: dict = {
        "q": _blank_to_none(params.get("q")),
        "sort": _blank_to_none(params.get("sort")) or "featured",
        "cursor": _blank_to_none(params.get("cursor")),
    }
    error = None
    for key in ("min_price", "max_price"):
        value = _blank_to_none(params.get(key))
        if value is None:
            continue
        try:
            raw[key] = Decimal(value)
        except InvalidOperation:
            error = "Prices must be numbers"
    category = _blank_to_none(params.get("category_id"))
    if category:
        try:
            raw["category_id"] = uuid.UUID(category)
        except ValueError:
            error = "Unknown category"

    try:
        return ProductFilters(**raw), error
    except ValidationError:
        # e.g. min_price above max_price or an unknown sort
        return ProductFilters(q=raw["q"]), "Some filters were invalid and have been reset"


@router.get("/{slug}", response_class=HTMLResponse)
async def storefront_home(
    request: Request,
    slug: str,
    filters_and_error: tuple[ProductFilters, str | None] = Depends(grid_filters),
    api: StorefrontApiClient = Depends(get_storefront_api_client),
    loader: ThemeLoader = Depends(get_theme_loader),
    renderer: StorefrontRenderer = Depends(get_renderer),
):
    filters, filter_error = filters_and_error
    try:
        store = await api.get_storefront_info(slug)
    except NotFoundError:
        return renderer.store_not_found(slug)
    except (ApiUnavailableError, ServerError):
        logger.warning("Storefront API unavailable for %s", slug, exc_info=True)
        return renderer.unavailable(slug)

    theme = store.settings.theme
    style = resolve_store_style(theme)
    bundle = await loader.load(theme.name if theme else None)
    if not bundle.is_complete:
        return renderer.loading(store=store, style=style)

    try:
        page, categories = await asyncio.gather(
            api.get_storefront_products(slug, filters),
            api.get_storefront_categories(slug),
        )
    except (ApiUnavailableError, ServerError):
        logger.warning("Storefront API unavailable for %s", slug, exc_info=True)
        return renderer.unavailable(slug)
    except ApiError as exc:
        if exc.status not in (400, 422):
            raise
        # stale cursor or rejected filter: show the unfiltered first page
        logger.info("Rejected storefront filters for %s: %s", slug, exc.detail)
        filters = ProductFilters(sort=filters.sort)
        filter_error = filter_error or "Some filters were invalid and have been reset"
        page, categories = await asyncio.gather(
            api.get_storefront_products(slug, filters),
            api.get_storefront_categories(slug),
        )

    return renderer.index(
        store=store,
        style=style,
        bundle=bundle,
        page=page,
        filters=filters,
        categories=categories,
        cart=load_cart(request, slug),
        filter_error=filter_error,
    )


@router.get("/{slug}/products/{product_id}", response_class=HTMLResponse)
async def storefront_product(
    request: Request,
    slug: str,
    product_id: uuid.UUID,
    api: StorefrontApiClient = Depends(get_storefront_api_client),
    loader: ThemeLoader = Depends(get_theme_loader),
    renderer: StorefrontRenderer = Depends(get_renderer),
):
    try:
        store = await api.get_storefront_info(slug)
    except NotFoundError:
        return renderer.store_not_found(slug)
    except (ApiUnavailableError, ServerError):
        return renderer.unavailable(slug)

    theme = store.settings.theme
    style = resolve_store_style(theme)
    try:
        product = await api.get_storefront_product(slug, str(product_id))
    except NotFoundError:
        return renderer.product_not_found(store=store, style=style)
    except (ApiUnavailableError, ServerError):
        return renderer.unavailable(slug)

    bundle = await loader.load(theme.name if theme else None)
    return renderer.product(
        store=store,
        style=style,
        bundle=bundle,
        product=product,
        cart=load_cart(request, slug),
    )


def _back_url(request: Request, slug: str) -> str:
    """Referring storefront page, or the store home for anything else."""
    home = f"/storefront/{slug}"
    referer = request.headers.get("referer")
    if not referer:
        return home
    parsed = urlparse(referer)
    if parsed.netloc and parsed.netloc != request.url.netloc:
        return home
    if not (parsed.path == home or parsed.path.startswith(f"{home}/")):
        return home
    return f"{parsed.path}?{parsed.query}" if parsed.query else parsed.path


@router.post("/{slug}/cart")
async def add_to_cart(
    request: Request,
    slug: str,
    product_id: uuid.UUID = Form(...),
    quantity: int = Form(1, ge=1, le=99),
    variant: str | None = Form(None),
    api: StorefrontApiClient = Depends(get_storefront_api_client),
    renderer: StorefrontRenderer = Depends(get_renderer),
):
    """Add a product to the cart, priced from the catalog, then go back."""
    try:
        product = await api.get_storefront_product(slug, str(product_id))
    except NotFoundError:
        return RedirectResponse(_back_url(request, slug), status_code=303)
    except (ApiUnavailableError, ServerError):
        return renderer.unavailable(slug)

    variant = _blank_to_none(variant)
    if variant is not None and variant not in product.variants:
        variant = None

    cart = load_cart(request, slug)
    try:
        cart.add(
            CartItem(
                product_id=product.id,
                price=product.price_amount,
                quantity=quantity,
                variant=variant,
            )
        )
    except CartFullError as exc:
        logger.info("Cart for %s not updated: %s", slug, exc)

    response = RedirectResponse(_back_url(request, slug), status_code=303)
    save_cart(response, slug, cart)
    return response


@router.post("/{slug}/cart/clear")
async def clear_cart(request: Request, slug: str):
    cart = load_cart(request, slug)
    cart.clear()
    response = RedirectResponse(_back_url(request, slug), status_code=303)
    save_cart(response, slug, cart)
    return response
