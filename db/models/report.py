"""
db/models/report.py

Saved KPI report, keyed loosely by the requester's email.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONType, TimestampMixin


class Report(Base, TimestampMixin):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    kpis: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="KPI summary as returned by the upload endpoint",
    )
    sample: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONType,
        nullable=True,
        comment="First rows of the uploaded CSV",
    )

    __table_args__ = (
        Index("ix_reports_email", "email"),
    )
