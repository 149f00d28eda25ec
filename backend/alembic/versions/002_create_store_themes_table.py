"""Create store_themes table with RLS

Revision ID: 002
Revises: 001
Create Date: 2026-10-14

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_TENANT = "NULLIF(current_setting('app.current_tenant', true), '')::uuid"


def upgrade() -> None:
    op.create_table(
        "store_themes",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("theme_name", sa.String(63), nullable=False),
        sa.Column(
            "customizations",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("tenant_id", name="uq_store_themes_tenant"),
    )
    op.create_index("ix_store_themes_tenant_id", "store_themes", ["tenant_id"])

    # --- RLS ---
    op.execute("ALTER TABLE store_themes ENABLE ROW LEVEL SECURITY")
    op.execute("ALTER TABLE store_themes FORCE ROW LEVEL SECURITY")
    op.execute(f"""
        CREATE POLICY tenant_isolation_select ON store_themes
        FOR SELECT
        USING (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_insert ON store_themes
        FOR INSERT
        WITH CHECK (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_update ON store_themes
        FOR UPDATE
        USING (tenant_id = {_TENANT})
        WITH CHECK (tenant_id = {_TENANT})
    """)
    op.execute(f"""
        CREATE POLICY tenant_isolation_delete ON store_themes
        FOR DELETE
        USING (tenant_id = {_TENANT})
    """)

    op.execute("GRANT SELECT, INSERT, UPDATE, DELETE ON store_themes TO app_user")


def downgrade() -> None:
    for action in ("select", "insert", "update", "delete"):
        op.execute(f"DROP POLICY IF EXISTS tenant_isolation_{action} ON store_themes")
    op.execute("ALTER TABLE store_themes DISABLE ROW LEVEL SECURITY")
    op.execute("REVOKE SELECT, INSERT, UPDATE, DELETE ON store_themes FROM app_user")
    op.drop_table("store_themes")
