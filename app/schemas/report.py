"""
app/schemas/report.py

Request and response schemas for saving reports.
"""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, Field


class SaveReportRequest(BaseModel):
    """
    Body of ``POST /api/save``. Fields are optional so a missing email is
    reported as a client error by the handler rather than a schema error.
    """

    email: str | None = None
    kpis: dict[str, Any] | None = None
    sample: list[dict[str, Any]] = Field(default_factory=list)


class SaveReportResponse(BaseModel):
    success: bool = True
    report_id: uuid.UUID
