"""
app/services/report_service.py

Saves a KPI report for later retrieval, keyed loosely by email.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from app.logging_utils import log_event
from app.repositories.sales_repository import SalesStore

logger = logging.getLogger(__name__)


class ReportValidationError(ValueError):
    """
    Raised when a report cannot be saved because input or storage is missing.
    """


class ReportService:
    """
    Thin coordinator between the save endpoint and the store.
    """

    def save_report(
        self,
        *,
        email: str | None,
        kpis: dict[str, Any] | None,
        sample: list[dict[str, Any]] | None,
        store: SalesStore | None,
    ) -> uuid.UUID:
        """
        Persist one report record.

        Raises:
            ReportValidationError: email is blank or no store is configured.
            SalesPersistenceError: the store rejected the write.
        """
        cleaned_email = (email or "").strip()
        if not cleaned_email or store is None:
            raise ReportValidationError("Email and a configured report store are required.")

        report_id = store.save_report(email=cleaned_email, kpis=kpis, sample=sample)
        log_event(logger, logging.INFO, "report_saved", report_id=report_id, email=cleaned_email)
        return report_id


def get_report_service() -> ReportService:
    return ReportService()
