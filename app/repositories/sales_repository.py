"""
app/repositories/sales_repository.py

Persistence layer for normalized sales rows and saved reports.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import Any, Protocol

from sqlalchemy import insert, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.sales import NormalizedSale
from db.models.report import Report
from db.models.sale import Sale

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 1000


class SalesPersistenceError(RuntimeError):
    """
    Raised when the store rejects an insert.
    """


class SalesStore(Protocol):
    """
    Storage seam used by the upload and report endpoints.
    """

    def check_connection(self) -> None:
        ...

    def insert_sales(self, sales: Sequence[NormalizedSale]) -> int:
        ...

    def save_report(
        self,
        *,
        email: str,
        kpis: dict[str, Any] | None,
        sample: list[dict[str, Any]] | None,
    ) -> uuid.UUID:
        ...


class SQLAlchemySalesStore:
    """
    SalesStore backed by the ``sales`` and ``reports`` tables.

    Each call opens its own session and commits once; nothing is retried.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> None:
        self._session_factory = session_factory
        self._batch_size = max(1, batch_size)

    def check_connection(self) -> None:
        """Run SELECT 1; raises on an unreachable database."""
        with self._session_factory() as session:
            session.execute(text("SELECT 1"))

    def insert_sales(self, sales: Sequence[NormalizedSale]) -> int:
        """
        Insert all rows in one transaction, chunked by batch size.
        """

        if not sales:
            return 0

        payloads: list[dict[str, Any]] = [
            {
                "id": uuid.uuid4(),
                "date": sale.date,
                "order_id": sale.order_id,
                "sku": sale.sku,
                "product_name": sale.product_name,
                "quantity": sale.quantity,
                "unit_price": sale.unit_price,
                "total_amount": sale.total_amount,
                "payment_type": sale.payment_type,
                "staff": sale.staff,
                "created_at": sale.created_at,
            }
            for sale in sales
        ]

        inserted = 0
        try:
            with self._session_factory() as session, session.begin():
                for start in range(0, len(payloads), self._batch_size):
                    chunk = payloads[start : start + self._batch_size]
                    session.execute(insert(Sale), chunk)
                    inserted += len(chunk)
        except SQLAlchemyError as exc:
            logger.exception("Sales insert failed rows=%d", len(payloads))
            raise SalesPersistenceError(str(exc)) from exc

        return inserted

    def save_report(
        self,
        *,
        email: str,
        kpis: dict[str, Any] | None,
        sample: list[dict[str, Any]] | None,
    ) -> uuid.UUID:
        report = Report(id=uuid.uuid4(), email=email, kpis=kpis, sample=sample)
        try:
            with self._session_factory() as session, session.begin():
                session.add(report)
        except SQLAlchemyError as exc:
            logger.exception("Report save failed email=%r", email)
            raise SalesPersistenceError(str(exc)) from exc
        return report.id
