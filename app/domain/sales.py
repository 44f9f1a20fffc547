"""
app/domain/sales.py

Domain models used by the upload-and-analyze flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from db.models.sale import UNKNOWN_SKU


@dataclass(frozen=True)
class NormalizedSale:
    """
    Canonical transaction shape resolved from one raw CSV row.
    """

    created_at: datetime
    sku: str = UNKNOWN_SKU
    date: str | None = None
    order_id: str | None = None
    product_name: str | None = None
    quantity: int | None = None
    unit_price: float | None = None
    total_amount: float | None = None
    payment_type: str | None = None
    staff: str | None = None


@dataclass(frozen=True)
class TopSKU:
    """
    One entry of the top-selling ranking.
    """

    sku: str
    qty: float


@dataclass(frozen=True)
class KPISummary:
    """
    Metrics derived from one uploaded file.

    ``orders`` is the raw row count, not the number of distinct order ids.
    """

    revenue: float = 0.0
    orders: int = 0
    aov: float = 0.0
    top_skus: tuple[TopSKU, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StorageResult:
    """
    Outcome of persisting normalized rows; failures are reported, not raised.
    """

    success: bool
    inserted: int | None = None
    error: str | None = None


@dataclass(frozen=True)
class UploadAnalysis:
    """
    Everything computed for one upload request.
    """

    rows: int
    sample: list[dict[str, str]]
    kpis: KPISummary
    insights: str
    storage_result: StorageResult | None = None
