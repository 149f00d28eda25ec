"""Store (tenant) creation and lookup for merchants."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.dependencies import (
    StoreContext,
    get_current_user,
    get_db,
    get_store_context,
    set_rls_context,
)
from storefront.models.tenant import Tenant
from storefront.models.tenant_member import TenantMember
from storefront.models.user import User
from storefront.schemas.tenant import TenantCreate, TenantResponse
from storefront.services import theme_service
from storefront.themes.types import StoreTheme

router = APIRouter()


@router.post("/", response_model=TenantResponse, status_code=201)
async def create_tenant(
    body: TenantCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Open a store; the caller becomes its owner.

    Works before the caller has any store, so it only needs a user. An
    initial theme goes through the same checks as a later theme change.
    """
    if body.theme is not None:
        theme_service.check_theme_selection(body.theme, current_name=None)

    tenant = Tenant(name=body.name, slug=body.slug, default_currency=body.default_currency)
    db.add(tenant)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Slug already taken") from exc

    # the membership and theme rows below are tenant-scoped
    await set_rls_context(db, "current_tenant", tenant.id)
    db.add(
        TenantMember(
            tenant_id=tenant.id,
            user_id=user.id,
            role="owner",
            status="active",
            joined_at=datetime.now(UTC),
        )
    )
    if body.theme is not None:
        await theme_service.save_store_theme(db, tenant.id, StoreTheme(name=body.theme))
    await db.flush()
    return tenant


@router.get("/me", response_model=TenantResponse)
async def get_current_tenant(ctx: StoreContext = Depends(get_store_context)):
    """The store the caller is working on (``X-Tenant-Id`` or their first)."""
    tenant = await ctx.db.get(Tenant, ctx.tenant_id)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant
