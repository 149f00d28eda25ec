"""FastAPI dependency chain: bearer token → User → store membership → RLS context.

Every tenant-scoped request runs inside one transaction whose
``app.current_user_id`` / ``app.current_tenant`` settings are what the RLS
policies check, so the helpers here must be called on the same session the
handler later queries with.
"""

import uuid
from collections.abc import AsyncGenerator, Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.security import decode_access_token
from storefront.db.session import async_session_factory
from storefront.models.tenant import Tenant
from storefront.models.tenant_member import TenantMember
from storefront.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class StoreContext:
    """The merchant's store for this request, with RLS already scoped to it."""

    db: AsyncSession
    tenant_id: uuid.UUID
    user: User
    membership: TenantMember


async def set_rls_context(db: AsyncSession, name: str, value: uuid.UUID | str) -> None:
    """Set an ``app.*`` setting for the rest of the current transaction."""
    await db.execute(
        text("SELECT set_config(:name, :value, true)"),
        {"name": f"app.{name}", "value": str(value)},
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session. Commits on success, rolls back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_current_user_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Missing authorization header")
    try:
        return await decode_access_token(credentials.credentials)
    except JWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}") from e


async def get_current_user(
    claims: dict = Depends(get_current_user_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Merchant account for the token's ``sub``, created on first sight."""
    cognito_sub = claims.get("sub")
    if not cognito_sub:
        raise HTTPException(status_code=401, detail="Token missing sub claim")

    user = (
        await db.execute(select(User).where(User.cognito_sub == cognito_sub))
    ).scalar_one_or_none()
    if user is None:
        user = User.from_claims(claims)
        db.add(user)
        await db.flush()

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is deactivated")
    return user


async def get_store_context(
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> StoreContext:
    """Resolve the store a merchant is working on.

    ``X-Tenant-Id`` picks one of several stores; without it the oldest
    active membership wins.
    """
    # membership rows are only visible once the user id is set
    await set_rls_context(db, "current_user_id", user.id)

    stmt = select(TenantMember).where(
        TenantMember.user_id == user.id,
        TenantMember.status == "active",
    )
    requested = request.headers.get("X-Tenant-Id")
    if requested:
        try:
            stmt = stmt.where(TenantMember.tenant_id == uuid.UUID(requested))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Invalid X-Tenant-Id header") from exc

    membership = (
        await db.execute(stmt.order_by(TenantMember.joined_at.asc()))
    ).scalars().first()
    if membership is None:
        raise HTTPException(status_code=403, detail="No active tenant membership")

    await set_rls_context(db, "current_tenant", membership.tenant_id)
    return StoreContext(db=db, tenant_id=membership.tenant_id, user=user, membership=membership)


def require_store_role(
    min_role: str,
) -> Callable[..., Coroutine[Any, Any, StoreContext]]:
    """Dependency factory: the store context, if the merchant's role is high enough.

    Usage::

        ctx: StoreContext = Depends(require_store_role("admin"))
    """

    async def _check(ctx: StoreContext = Depends(get_store_context)) -> StoreContext:
        if not ctx.membership.has_role(min_role):
            raise HTTPException(status_code=403, detail=f"Requires {min_role} role or higher")
        return ctx

    return _check


async def get_public_store(
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> tuple[AsyncSession, Tenant]:
    """Active store behind a public ``/storefront/{slug}`` URL, RLS scoped to it.

    No auth: anyone may browse a storefront.
    """
    tenant = (
        await db.execute(select(Tenant).where(Tenant.slug == slug, Tenant.is_active.is_(True)))
    ).scalar_one_or_none()
    if tenant is None:
        raise HTTPException(status_code=404, detail="Storefront not found")

    await set_rls_context(db, "current_tenant", tenant.id)
    return db, tenant
