"""Create tenancy and catalog tables with RLS

Revision ID: 001
Revises:
Create Date: 2026-10-12

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# NULLIF: an unset GUC reads as '' and must not reach the uuid cast
_TENANT = "NULLIF(current_setting('app.current_tenant', true), '')::uuid"
_USER = "NULLIF(current_setting('app.current_user_id', true), '')::uuid"

_TENANT_TABLES = ["categories", "products", "product_images"]


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _enable_tenant_rls(table: str) -> None:
    op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
    op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
    op.execute(f"""
        CREATE POLICY tenant_isolation_select ON {table}
        FOR SELECT
        USING (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_insert ON {table}
        FOR INSERT
        WITH CHECK (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_update ON {table}
        FOR UPDATE
        USING (tenant_id = {_TENANT})
        WITH CHECK (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_delete ON {table}
        FOR DELETE
        USING (tenant_id = {_TENANT})
    """)


def _drop_tenant_rls(table: str) -> None:
    for action in ("select", "insert", "update", "delete"):
        op.execute(f"DROP POLICY IF EXISTS tenant_isolation_{action} ON {table}")
    op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")


def upgrade() -> None:
    # RLS only applies to a non-superuser role; credentials are set per deployment
    op.execute("""
        DO $$
        BEGIN
            IF NOT EXISTS (SELECT 1 FROM pg_roles WHERE rolname = 'app_user') THEN
                CREATE ROLE app_user NOLOGIN;
            END IF;
        END
        $$;
    """)

    # --- tenants (global, no RLS) ---
    op.create_table(
        "tenants",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(63), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("default_currency", sa.String(3), nullable=False, server_default="KWD"),
        *_timestamps(),
    )

    # --- users (global, no RLS) ---
    op.create_table(
        "users",
        _id_column(),
        sa.Column("cognito_sub", sa.String(255), nullable=False, unique=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
    )

    # --- tenant_members (RLS, readable by own user for tenant resolution) ---
    op.create_table(
        "tenant_members",
        _id_column(),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("tenant_id", "user_id", name="uq_tenant_members_tenant_user"),
        sa.CheckConstraint(
            "role IN ('owner', 'admin', 'member')", name="ck_tenant_members_role"
        ),
        sa.CheckConstraint(
            "status IN ('active', 'removed')", name="ck_tenant_members_status"
        ),
    )
    op.create_index("ix_tenant_members_tenant_id", "tenant_members", ["tenant_id"])
    op.create_index("ix_tenant_members_user_id", "tenant_members", ["user_id"])

    op.execute("ALTER TABLE tenant_members ENABLE ROW LEVEL SECURITY")
    op.execute("ALTER TABLE tenant_members FORCE ROW LEVEL SECURITY")
    op.execute(f"""
        CREATE POLICY tenant_isolation_select ON tenant_members
        FOR SELECT
        USING (tenant_id = {_TENANT} OR user_id = {_USER})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_insert ON tenant_members
        FOR INSERT
        WITH CHECK (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_update ON tenant_members
        FOR UPDATE
        USING (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_delete ON tenant_members
        FOR DELETE
        USING (tenant_id = {_TENANT})
    """)

    # --- categories ---
    op.create_table(
        "categories",
        _id_column(),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.UniqueConstraint("tenant_id", "name", name="uq_categories_tenant_name"),
    )
    op.create_index("ix_categories_tenant_id", "categories", ["tenant_id"])

    # --- products ---
    op.create_table(
        "products",
        _id_column(),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column(
            "category_id",
            sa.UUID(),
            sa.ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_amount", sa.Numeric(12, 3), nullable=False),
        sa.Column("compare_at_amount", sa.Numeric(12, 3), nullable=True),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column("variants", postgresql.JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint(
            "currency IS NULL OR currency ~ '^[A-Z]{3}$'", name="ck_products_currency"
        ),
        sa.CheckConstraint("price_amount >= 0", name="ck_products_price_non_negative"),
    )
    op.create_index("ix_products_tenant_id", "products", ["tenant_id"])
    op.create_index("ix_products_category_id", "products", ["category_id"])
    op.create_index("ix_products_tenant_price", "products", ["tenant_id", "price_amount"])

    # --- product_images ---
    op.create_table(
        "product_images",
        _id_column(),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column(
            "product_id",
            sa.UUID(),
            sa.ForeignKey("products.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("s3_key", sa.Text(), nullable=False),
        sa.Column("alt_text", sa.Text(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_product_images_tenant_id", "product_images", ["tenant_id"])
    op.create_index("ix_product_images_product_id", "product_images", ["product_id"])

    for table in _TENANT_TABLES:
        _enable_tenant_rls(table)

    op.execute(
        "GRANT SELECT, INSERT, UPDATE, DELETE ON ALL TABLES IN SCHEMA public TO app_user"
    )
    op.execute("GRANT USAGE, SELECT ON ALL SEQUENCES IN SCHEMA public TO app_user")


def downgrade() -> None:
    for table in _TENANT_TABLES:
        _drop_tenant_rls(table)
    _drop_tenant_rls("tenant_members")

    op.execute(
        "REVOKE SELECT, INSERT, UPDATE, DELETE ON ALL TABLES IN SCHEMA public FROM app_user"
    )
    op.execute("REVOKE USAGE, SELECT ON ALL SEQUENCES IN SCHEMA public FROM app_user")

    op.drop_table("product_images")
    op.drop_table("products")
    op.drop_table("categories")
    op.drop_table("tenant_members")
    op.drop_table("users")
    op.drop_table("tenants")
