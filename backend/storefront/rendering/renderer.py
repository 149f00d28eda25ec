"""Render storefront pages from a theme bundle and an effective style."""

from typing import Any

from fastapi.responses import HTMLResponse
from jinja2 import Environment

from storefront.rendering.environment import get_jinja_env
from storefront.schemas.common import PaginatedResponse
from storefront.schemas.product import ProductFilters, PublicProductResponse
from storefront.schemas.storefront import StorefrontInfo
from storefront.services.cart import Cart
from storefront.themes.loader import ThemeBundle
from storefront.themes.registry import DEFAULT_THEME, FALLBACK_COLORS, FALLBACK_TYPOGRAPHY
from storefront.themes.types import EffectiveStyle, ThemeLayout

SORT_LABELS = {
    "featured": "Featured",
    "price_asc": "Price: low to high",
    "price_desc": "Price: high to low",
    "newest": "Newest",
}


def fallback_style() -> EffectiveStyle:
    """Style for pages rendered before (or without) a store's theme."""
    return EffectiveStyle(
        theme_name=DEFAULT_THEME,
        colors=FALLBACK_COLORS,
        typography=FALLBACK_TYPOGRAPHY,
        layout=ThemeLayout(),
    )


class StorefrontRenderer:
    def __init__(self, env: Environment | None = None):
        self.env = env or get_jinja_env()

    def _render(
        self, template: str, context: dict[str, Any], status_code: int = 200
    ) -> HTMLResponse:
        html = self.env.get_template(template).render(**context)
        return HTMLResponse(html, status_code=status_code)

    def index(
        self,
        *,
        store: StorefrontInfo,
        style: EffectiveStyle,
        bundle: ThemeBundle,
        page: PaginatedResponse[PublicProductResponse],
        filters: ProductFilters,
        categories: list[dict],
        cart: Cart,
        filter_error: str | None = None,
    ) -> HTMLResponse:
        if not bundle.is_complete:
            return self.loading(store=store, style=style)
        next_params = None
        if page.has_more and page.next_cursor:
            next_params = {**filters.query_params(), "cursor": page.next_cursor}
        return self._render(
            "storefront/index.html",
            {
                "store": store,
                "style": style,
                "bundle": bundle,
                "products": page.items,
                "next_params": next_params,
                "filters": filters,
                "sort_labels": SORT_LABELS,
                "categories": categories,
                "cart": cart,
                "currency": store.currency,
                "filter_error": filter_error,
            },
        )

    def product(
        self,
        *,
        store: StorefrontInfo,
        style: EffectiveStyle,
        bundle: ThemeBundle,
        product: PublicProductResponse,
        cart: Cart,
    ) -> HTMLResponse:
        if not bundle.is_complete or bundle.product_detail is None:
            return self.loading(store=store, style=style)
        return self._render(
            "storefront/product.html",
            {
                "store": store,
                "style": style,
                "bundle": bundle,
                "product": product,
                "cart": cart,
                "currency": product.effective_currency or store.currency,
            },
        )

    def loading(self, *, store: StorefrontInfo, style: EffectiveStyle) -> HTMLResponse:
        return self._render("storefront/loading.html", {"store": store, "style": style})

    def store_not_found(self, slug: str) -> HTMLResponse:
        return self._render(
            "storefront/not_found.html",
            {
                "style": fallback_style(),
                "heading": "Store Not Found",
                "message": f"There is no store at “{slug}”. Check the address and try again.",
            },
            status_code=404,
        )

    def product_not_found(self, *, store: StorefrontInfo, style: EffectiveStyle) -> HTMLResponse:
        return self._render(
            "storefront/not_found.html",
            {
                "store": store,
                "style": style,
                "heading": "Product Not Found",
                "message": "This product is no longer available.",
            },
            status_code=404,
        )

    def unavailable(self, slug: str) -> HTMLResponse:
        response = self._render(
            "storefront/unavailable.html",
            {"style": fallback_style(), "slug": slug},
            status_code=503,
        )
        response.headers["Retry-After"] = "30"
        return response


def get_renderer() -> StorefrontRenderer:
    return StorefrontRenderer()
