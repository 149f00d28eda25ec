import uuid

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base, TimestampMixin, uuid_pk


class Tenant(TimestampMixin, Base):
    """A merchant store. ``slug`` is the public storefront address."""

    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(63), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    default_currency: Mapped[str] = mapped_column(String(3), nullable=False, server_default="KWD")

    members: Mapped[list["TenantMember"]] = relationship(back_populates="tenant")  # noqa: F821
