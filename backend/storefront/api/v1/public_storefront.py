"""Public read-only storefront endpoints (anonymous, tenant-scoped by slug).

Flow: slug -> lookup tenant -> app.current_tenant (transaction-local) -> query via RLS.
All in the same DB session. No tenant_id exposed in responses.
"""

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.dependencies import get_public_store
from storefront.core.exceptions import ProblemDetailError
from storefront.models.tenant import Tenant
from storefront.schemas.category import PublicCategoryResponse
from storefront.schemas.common import PaginatedResponse
from storefront.schemas.product import (
    DEFAULT_PAGE_SIZE,
    ProductFilters,
    ProductSort,
    PublicProductResponse,
)
from storefront.schemas.storefront import (
    StorefrontInfo,
    StorefrontSettings,
    StorefrontThemeResponse,
)
from storefront.services import catalog, theme_service
from storefront.themes.customization import resolve_store_style
from storefront.themes.loader import ThemeLoader, get_theme_loader

router = APIRouter()


def product_filters(
    q: str | None = Query(None, max_length=200),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    sort: ProductSort = Query("featured"),
    category_id: uuid.UUID | None = Query(None),
    cursor: str | None = Query(None),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ProductFilters:
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ProblemDetailError(
            status=422,
            title="Validation Error",
            detail="min_price must not exceed max_price",
        )
    return ProductFilters(
        q=q,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        category_id=category_id,
        cursor=cursor,
        limit=limit,
    )


@router.get("/{slug}", response_model=StorefrontInfo)
async def get_storefront_info(
    slug: str,
    db_tenant: tuple[AsyncSession, Tenant] = Depends(get_public_store),
) -> StorefrontInfo:
    """Store name, currency and selected theme."""
    db, tenant = db_tenant
    theme = await theme_service.get_store_theme(db, tenant.id)
    return StorefrontInfo(
        name=tenant.name,
        slug=tenant.slug,
        currency=tenant.default_currency,
        settings=StorefrontSettings(theme=theme),
    )


@router.get("/{slug}/theme", response_model=StorefrontThemeResponse)
async def get_storefront_theme(
    slug: str,
    db_tenant: tuple[AsyncSession, Tenant] = Depends(get_public_store),
    loader: ThemeLoader = Depends(get_theme_loader),
) -> StorefrontThemeResponse:
    db, tenant = db_tenant
    theme = await theme_service.get_store_theme(db, tenant.id)
    return StorefrontThemeResponse(
        theme=theme,
        style=resolve_store_style(theme),
        bundle=loader.resolve_key(theme.name),
    )


@router.get("/{slug}/categories", response_model=list[PublicCategoryResponse])
async def list_public_categories(
    slug: str,
    db_tenant: tuple[AsyncSession, Tenant] = Depends(get_public_store),
) -> list[PublicCategoryResponse]:
    db, tenant = db_tenant
    return await catalog.list_categories(db, tenant)


@router.get("/{slug}/products", response_model=PaginatedResponse[PublicProductResponse])
async def list_public_products(
    slug: str,
    filters: ProductFilters = Depends(product_filters),
    db_tenant: tuple[AsyncSession, Tenant] = Depends(get_public_store),
) -> PaginatedResponse[PublicProductResponse]:
    db, tenant = db_tenant
    return await catalog.list_products(db, tenant, filters)


@router.get("/{slug}/products/{product_id}", response_model=PublicProductResponse)
async def get_public_product(
    slug: str,
    product_id: uuid.UUID,
    db_tenant: tuple[AsyncSession, Tenant] = Depends(get_public_store),
) -> PublicProductResponse:
    db, tenant = db_tenant
    product = await catalog.get_product(db, tenant, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
