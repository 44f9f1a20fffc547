"""create sales and reports tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "sales",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.String(length=64), nullable=True),
        sa.Column("order_id", sa.String(length=120), nullable=True),
        sa.Column("sku", sa.String(length=255), nullable=False),
        sa.Column("product_name", sa.String(length=255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("unit_price", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("total_amount", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("payment_type", sa.String(length=64), nullable=True),
        sa.Column("staff", sa.String(length=120), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sales_sku", "sales", ["sku"], unique=False)
    op.create_index("ix_sales_order_id", "sales", ["order_id"], unique=False)
    op.create_index("ix_sales_created_at", "sales", ["created_at"], unique=False)

    op.create_table(
        "reports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("kpis", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("sample", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_email", "reports", ["email"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_reports_email", table_name="reports")
    op.drop_table("reports")
    op.drop_index("ix_sales_created_at", table_name="sales")
    op.drop_index("ix_sales_order_id", table_name="sales")
    op.drop_index("ix_sales_sku", table_name="sales")
    op.drop_table("sales")
