"""
db/models/sale.py

One normalized sales transaction row from an uploaded CSV.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

UNKNOWN_SKU = "UNKNOWN"


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    date: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Raw date string as found in the CSV",
    )
    order_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    sku: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=UNKNOWN_SKU,
    )
    product_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    payment_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    staff: Mapped[str | None] = mapped_column(String(120), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Set when the upload was processed",
    )

    __table_args__ = (
        Index("ix_sales_sku", "sku"),
        Index("ix_sales_order_id", "order_id"),
        Index("ix_sales_created_at", "created_at"),
    )
