"""Shared helpers for API integration tests."""

import uuid
from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from storefront.core.config import settings
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.product_image import ProductImage
from storefront.models.tenant import Tenant
from storefront.models.tenant_member import TenantMember
from storefront.models.user import User
from tests.conftest import auth_headers


async def create_tenant_get_headers(
    client: AsyncClient,
    *,
    slug_prefix: str = "shop",
    theme: str | None = None,
) -> tuple[dict, str]:
    """Create a tenant via the API and return (auth_headers, slug).

    Uses a unique sub/email per call so each test gets an isolated tenant.
    """
    unique = uuid.uuid4().hex[:8]
    sub = f"{slug_prefix}-sub-{unique}"
    email = f"{slug_prefix}-{unique}@example.com"
    slug = f"{slug_prefix}-{unique}"
    headers = auth_headers(sub=sub, email=email)
    headers["Content-Type"] = "application/json"

    body = {"name": f"Test {slug}", "slug": slug}
    if theme is not None:
        body["theme"] = theme
    resp = await client.post("/api/v1/tenants/", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return headers, slug


async def seed_catalog(
    slug: str,
    products: list[dict],
    categories: tuple[str, ...] = (),
    hidden_categories: tuple[str, ...] = (),
) -> dict[str, uuid.UUID]:
    """Commit categories and products for the tenant behind ``slug``.

    Categories are created in the given order, hidden ones inactive. Product
    dicts take ``Product`` column values plus optional ``category``
    (a name from ``categories``) and ``images`` (S3 keys or URLs). Returns
    ids keyed by product title and category name.
    """
    engine = create_async_engine(settings.DATABASE_URL)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    ids: dict[str, uuid.UUID] = {}
    try:
        async with factory() as session:
            tenant = (
                await session.execute(select(Tenant).where(Tenant.slug == slug))
            ).scalar_one()
            await session.execute(
                text("SELECT set_config('app.current_tenant', :tid, true)"),
                {"tid": str(tenant.id)},
            )

            named = [(name, True) for name in categories]
            named += [(name, False) for name in hidden_categories]
            for position, (name, active) in enumerate(named):
                category = Category(
                    tenant_id=tenant.id, name=name, sort_order=position, is_active=active
                )
                session.add(category)
                await session.flush()
                ids[name] = category.id

            for fields in products:
                values = dict(fields)
                category_name = values.pop("category", None)
                images = values.pop("images", [])
                values["price_amount"] = Decimal(str(values["price_amount"]))
                product = Product(
                    tenant_id=tenant.id,
                    category_id=ids[category_name] if category_name else None,
                    **values,
                )
                session.add(product)
                await session.flush()
                ids[product.title] = product.id
                for position, key in enumerate(images):
                    session.add(
                        ProductImage(
                            tenant_id=tenant.id,
                            product_id=product.id,
                            s3_key=key,
                            position=position,
                        )
                    )
            await session.commit()
    finally:
        await engine.dispose()
    return ids


async def add_store_member(slug: str, *, sub: str, email: str, role: str) -> None:
    """Commit a user with ``role`` on the store behind ``slug``."""
    engine = create_async_engine(settings.DATABASE_URL)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            tenant = (
                await session.execute(select(Tenant).where(Tenant.slug == slug))
            ).scalar_one()
            user = User(cognito_sub=sub, email=email, full_name=email)
            session.add(user)
            await session.flush()
            await session.execute(
                text("SELECT set_config('app.current_tenant', :tid, true)"),
                {"tid": str(tenant.id)},
            )
            session.add(
                TenantMember(tenant_id=tenant.id, user_id=user.id, role=role, status="active")
            )
            await session.commit()
    finally:
        await engine.dispose()
