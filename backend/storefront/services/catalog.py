"""Public catalog queries: filtered, keyset-paginated product listing.

Cursors are ``|``-joined keys prefixed with the sort they were issued for,
e.g. ``price_asc|12.500|<uuid>``. A cursor is only valid with the same sort.
"""

import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation

from fastapi import HTTPException
from sqlalchemy import Select, not_, or_, select, tuple_
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.product_image import ProductImage
from storefront.models.tenant import Tenant
from storefront.schemas.category import PublicCategoryResponse
from storefront.schemas.common import PaginatedResponse
from storefront.schemas.product import ProductFilters, PublicProductResponse
from storefront.services.storage import public_asset_url

CURSOR_SEPARATOR = "|"


def _invalid_cursor() -> HTTPException:
    return HTTPException(status_code=400, detail="Invalid cursor")


def encode_cursor(sort: str, product: Product) -> str:
    if sort == "featured":
        keys = [str(int(not product.is_featured)), str(product.sort_order)]
    elif sort in ("price_asc", "price_desc"):
        keys = [str(product.price_amount)]
    else:
        keys = [product.created_at.isoformat()]
    return CURSOR_SEPARATOR.join([sort, *keys, str(product.id)])


def _decode_cursor(cursor: str, sort: str) -> list:
    parts = cursor.split(CURSOR_SEPARATOR)
    if not parts or parts[0] != sort:
        raise _invalid_cursor()
    try:
        if sort == "featured" and len(parts) == 4:
            return [parts[1] == "1", int(parts[2]), uuid.UUID(parts[3])]
        if sort in ("price_asc", "price_desc") and len(parts) == 3:
            return [Decimal(parts[1]), uuid.UUID(parts[2])]
        if sort == "newest" and len(parts) == 3:
            return [datetime.fromisoformat(parts[1]), uuid.UUID(parts[2])]
    except (ValueError, InvalidOperation) as exc:
        raise _invalid_cursor() from exc
    raise _invalid_cursor()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _apply_filters(stmt: Select, filters: ProductFilters) -> Select:
    if filters.q:
        pattern = f"%{_escape_like(filters.q.strip())}%"
        stmt = stmt.where(
            or_(
                Product.title.ilike(pattern, escape="\\"),
                Product.description.ilike(pattern, escape="\\"),
            )
        )
    if filters.min_price is not None:
        stmt = stmt.where(Product.price_amount >= filters.min_price)
    if filters.max_price is not None:
        stmt = stmt.where(Product.price_amount <= filters.max_price)
    if filters.category_id is not None:
        stmt = stmt.where(Product.category_id == filters.category_id)
    return stmt


def _apply_ordering(stmt: Select, filters: ProductFilters) -> Select:
    sort = filters.sort
    after = _decode_cursor(filters.cursor, sort) if filters.cursor else None

    if sort == "featured":
        # featured first: NOT is_featured sorts false before true
        key = tuple_(not_(Product.is_featured), Product.sort_order, Product.id)
        stmt = stmt.order_by(not_(Product.is_featured), Product.sort_order, Product.id)
        return stmt.where(key > tuple_(*after)) if after else stmt
    if sort == "price_asc":
        stmt = stmt.order_by(Product.price_amount, Product.id)
        key = tuple_(Product.price_amount, Product.id)
        return stmt.where(key > tuple_(*after)) if after else stmt
    if sort == "price_desc":
        stmt = stmt.order_by(Product.price_amount.desc(), Product.id.desc())
        key = tuple_(Product.price_amount, Product.id)
        return stmt.where(key < tuple_(*after)) if after else stmt

    stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())
    key = tuple_(Product.created_at, Product.id)
    return stmt.where(key < tuple_(*after)) if after else stmt


async def _images_by_product(
    db: AsyncSession, product_ids: list[uuid.UUID]
) -> dict[uuid.UUID, list[str]]:
    """Batch-load image URLs for products, cover image first."""
    images: dict[uuid.UUID, list[str]] = {}
    if not product_ids:
        return images
    result = await db.execute(
        select(ProductImage)
        .where(ProductImage.product_id.in_(product_ids))
        .order_by(ProductImage.position, ProductImage.created_at, ProductImage.id)
    )
    for image in result.scalars().all():
        url = public_asset_url(image.s3_key)
        if url:
            images.setdefault(image.product_id, []).append(url)
    return images


def _public_product(
    product: Product, tenant: Tenant, images: list[str] | None = None
) -> PublicProductResponse:
    images = images or []
    return PublicProductResponse(
        id=product.id,
        category_id=product.category_id,
        title=product.title,
        description=product.description,
        price_amount=product.price_amount,
        compare_at_amount=product.compare_at_amount,
        effective_currency=product.currency or tenant.default_currency,
        variants=product.variants or [],
        is_featured=product.is_featured,
        image_url=images[0] if images else None,
        images=images,
    )


async def list_products(
    db: AsyncSession, tenant: Tenant, filters: ProductFilters
) -> PaginatedResponse[PublicProductResponse]:
    stmt = select(Product).where(Product.tenant_id == tenant.id, Product.is_active.is_(True))
    stmt = _apply_filters(stmt, filters)
    stmt = _apply_ordering(stmt, filters).limit(filters.limit + 1)

    result = await db.execute(stmt)
    rows = list(result.scalars().all())
    has_more = len(rows) > filters.limit
    items = rows[: filters.limit]

    images = await _images_by_product(db, [p.id for p in items])
    return PaginatedResponse(
        items=[_public_product(p, tenant, images.get(p.id)) for p in items],
        next_cursor=encode_cursor(filters.sort, items[-1]) if has_more and items else None,
        has_more=has_more,
    )


async def get_product(
    db: AsyncSession, tenant: Tenant, product_id: uuid.UUID
) -> PublicProductResponse | None:
    result = await db.execute(
        select(Product).where(
            Product.id == product_id,
            Product.tenant_id == tenant.id,
            Product.is_active.is_(True),
        )
    )
    product = result.scalar_one_or_none()
    if product is None:
        return None
    images = await _images_by_product(db, [product.id])
    return _public_product(product, tenant, images.get(product.id))


async def list_categories(db: AsyncSession, tenant: Tenant) -> list[PublicCategoryResponse]:
    result = await db.execute(
        select(Category)
        .where(Category.tenant_id == tenant.id, Category.is_active.is_(True))
        .order_by(Category.sort_order, Category.name)
    )
    return [PublicCategoryResponse.model_validate(c) for c in result.scalars().all()]
