"""
app/services/upload_service.py

Service layer for the upload-and-analyze workflow.

One call parses the uploaded CSV fully into memory, aggregates KPIs,
renders the narrative and, when a store is supplied, persists the
normalized rows in one batched write. Storage failures are embedded in
the result instead of failing the request.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import BinaryIO

from app.config import get_app_settings
from app.domain.sales import StorageResult, UploadAnalysis
from app.logging_utils import log_event
from app.mappers.row_normalizer import normalize_sale
from app.repositories.sales_repository import SalesPersistenceError, SalesStore
from app.services.kpi_service import DEFAULT_CURRENCY_SYMBOL, KPIAggregator, generate_insights

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 5


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVParseError(ValueError):
    """
    Raised when the uploaded file cannot be read as a headed CSV.
    """


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _is_blank_line(raw_row: dict[str | None, object]) -> bool:
    values = [value for key, value in raw_row.items() if key is not None]
    present = [value for value in values if value is not None]
    return len(present) <= 1 and all(not str(value).strip() for value in present)


def parse_csv(raw_file: BinaryIO) -> list[dict[str, str]]:
    """
    Read a headed, comma-separated file into trimmed row mappings.

    Blank lines are skipped. A row whose field count differs from the
    header raises :class:`CSVParseError`. An empty file yields no rows.
    """

    raw_file.seek(0)
    text_stream: io.TextIOWrapper | None = None
    rows: list[dict[str, str]] = []

    try:
        text_stream = io.TextIOWrapper(raw_file, encoding="utf-8-sig", newline="")
        reader = csv.DictReader(text_stream)
        if reader.fieldnames is None:
            return rows
        headers = [header.strip() for header in reader.fieldnames]
        reader.fieldnames = headers

        for raw_row in reader:
            if None in raw_row:
                raise CSVParseError(
                    f"Invalid record length on line {reader.line_num}: "
                    f"expected {len(headers)} fields, got more."
                )
            if _is_blank_line(raw_row):
                continue
            if any(value is None for value in raw_row.values()):
                raise CSVParseError(
                    f"Invalid record length on line {reader.line_num}: "
                    f"expected {len(headers)} fields, got fewer."
                )
            rows.append({key: value.strip() for key, value in raw_row.items()})

    except UnicodeDecodeError as exc:
        raise CSVParseError("CSV must be UTF-8 encoded.") from exc
    except csv.Error as exc:
        raise CSVParseError(f"Invalid CSV format: {exc}") from exc
    finally:
        if text_stream is not None:
            try:
                text_stream.detach()
            except ValueError:
                pass

    return rows


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class UploadService:
    """
    Coordinates CSV parsing, KPI aggregation, narrative and optional storage.
    """

    def __init__(
        self,
        *,
        aggregator: KPIAggregator | None = None,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
    ) -> None:
        self._aggregator = aggregator or KPIAggregator()
        self._currency_symbol = currency_symbol
        self._sample_size = max(0, sample_size)

    def analyze_upload(
        self,
        *,
        raw_file: BinaryIO,
        store: SalesStore | None = None,
        filename: str | None = None,
    ) -> UploadAnalysis:
        """
        Parse *raw_file* and compute the full upload response.

        Raises:
            CSVParseError: the file is not a readable headed CSV.
        """
        rows = parse_csv(raw_file)
        kpis = self._aggregator.aggregate(rows)
        insights = generate_insights(kpis, currency_symbol=self._currency_symbol)

        storage_result: StorageResult | None = None
        if store is not None:
            storage_result = self._store_rows(rows=rows, store=store)

        log_event(
            logger,
            logging.INFO,
            "upload_processed",
            filename=filename,
            rows=len(rows),
            revenue=kpis.revenue,
            orders=kpis.orders,
            stored=None if storage_result is None else storage_result.success,
        )
        return UploadAnalysis(
            rows=len(rows),
            sample=rows[: self._sample_size],
            kpis=kpis,
            insights=insights,
            storage_result=storage_result,
        )

    def _store_rows(self, *, rows: list[dict[str, str]], store: SalesStore) -> StorageResult:
        created_at = datetime.now(tz=timezone.utc)
        sales = [normalize_sale(row, created_at=created_at) for row in rows]
        try:
            inserted = store.insert_sales(sales)
        except SalesPersistenceError as exc:
            log_event(logger, logging.WARNING, "sales_store_failed", rows=len(sales), error=str(exc))
            return StorageResult(success=False, error=str(exc))
        log_event(logger, logging.INFO, "sales_stored", inserted=inserted)
        return StorageResult(success=True, inserted=inserted)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_upload_service() -> UploadService:
    """
    Build and cache the upload service with env-driven settings.
    """
    settings = get_app_settings()
    return UploadService(
        aggregator=KPIAggregator(top_sku_limit=settings.top_sku_limit),
        currency_symbol=settings.currency_symbol,
        sample_size=settings.sample_size,
    )
