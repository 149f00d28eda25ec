import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import TenantScopedBase, uuid_pk

# members read a store's theme, admins and owners change it
ROLE_RANK = {"member": 1, "admin": 2, "owner": 3}


class TenantMember(TenantScopedBase):
    """A merchant account's access to one store."""

    __tablename__ = "tenant_members"
    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", name="uq_tenant_members_tenant_user"),
        CheckConstraint("role IN ('owner', 'admin', 'member')", name="ck_tenant_members_role"),
        CheckConstraint("status IN ('active', 'removed')", name="ck_tenant_members_status"),
    )

    id: Mapped[uuid.UUID] = uuid_pk()
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="member")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    joined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    tenant: Mapped["Tenant"] = relationship(back_populates="members")  # noqa: F821
    user: Mapped["User"] = relationship()  # noqa: F821

    def has_role(self, min_role: str) -> bool:
        return self.status == "active" and ROLE_RANK.get(self.role, 0) >= ROLE_RANK[min_role]
