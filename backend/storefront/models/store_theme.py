import uuid

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import TenantScopedBase, TimestampMixin, uuid_pk


class StoreThemeRecord(TimestampMixin, TenantScopedBase):
    """Selected theme and merchant customizations, one row per tenant."""

    __tablename__ = "store_themes"
    __table_args__ = (UniqueConstraint("tenant_id", name="uq_store_themes_tenant"),)

    id: Mapped[uuid.UUID] = uuid_pk()
    theme_name: Mapped[str] = mapped_column(String(63), nullable=False)
    # camelCase ThemeCustomization payload
    customizations: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
