import uuid
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import TenantScopedBase, TimestampMixin, uuid_pk


class Product(TimestampMixin, TenantScopedBase):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint(
            "currency IS NULL OR currency ~ '^[A-Z]{3}$'",
            name="ck_products_currency",
        ),
        CheckConstraint("price_amount >= 0", name="ck_products_price_non_negative"),
        Index("ix_products_tenant_price", "tenant_id", "price_amount"),
    )

    id: Mapped[uuid.UUID] = uuid_pk()
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_amount: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    compare_at_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 3), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    # e.g. ["S", "M", "L"]; the cart keys items by product + variant
    variants: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    category: Mapped["Category | None"] = relationship()  # noqa: F821
