"""
app/services/kpi_service.py

Deterministic KPI calculation for one uploaded sales file.

Formulas
--------
Revenue  = sum of resolved row totals, rounded to 2 decimal places
Orders   = number of rows (line items, not distinct order ids)
AOV      = revenue / orders, rounded to 2 decimal places; 0 when orders == 0
Top SKUs = SKUs ranked by summed ranking quantity, descending, first 5;
           SKUs whose summed quantity is not positive are left out

The calculation layer performs no I/O. Rows are the trimmed mappings
produced by the CSV parser in :mod:`app.services.upload_service`.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from app.domain.sales import KPISummary, TopSKU
from app.mappers.row_normalizer import ranking_quantity, resolve_row_total, resolve_sku

logger = logging.getLogger(__name__)

DEFAULT_TOP_SKU_LIMIT = 5
DEFAULT_CURRENCY_SYMBOL = "£"

LOYALTY_INSIGHT = "Track repeat customers and consider loyalty offers."
NO_REVENUE_INSIGHT = "No revenue detected. Check your CSV columns."


def _round_money(value: float) -> float:
    return round(value, 2)


def _format_amount(value: float) -> str:
    """Render whole numbers without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class KPIAggregator:
    """
    Stateless, single-pass KPI aggregation over an ordered row sequence.

    Usage::

        summary = KPIAggregator().aggregate([{"sku": "A", "quantity": "2", "unit_price": "10"}])
        print(summary.revenue)  # 20.0
    """

    def __init__(self, *, top_sku_limit: int = DEFAULT_TOP_SKU_LIMIT) -> None:
        self._top_sku_limit = max(0, top_sku_limit)

    def aggregate(self, rows: Iterable[Mapping[str, str | None]]) -> KPISummary:
        """
        Fold *rows* into a :class:`KPISummary`.

        Defined for an empty sequence: every metric is zero and the ranking
        is empty. Never raises on malformed values; they contribute zero.
        """
        revenue = 0.0
        orders = 0
        sku_quantities: dict[str, float] = {}

        for row in rows:
            revenue += resolve_row_total(row)
            orders += 1
            sku = resolve_sku(row)
            sku_quantities[sku] = sku_quantities.get(sku, 0.0) + ranking_quantity(row)

        revenue = _round_money(revenue)
        aov = _round_money(revenue / orders) if orders > 0 else 0.0

        # sorted() is stable and dicts keep insertion order, so equal
        # quantities stay in first-seen order. Negative quantities can cancel
        # a SKU out; those are not ranked.
        ranked = sorted(
            ((sku, qty) for sku, qty in sku_quantities.items() if qty > 0),
            key=lambda item: item[1],
            reverse=True,
        )
        top_skus = tuple(TopSKU(sku=sku, qty=qty) for sku, qty in ranked[: self._top_sku_limit])

        logger.debug(
            "KPIs computed orders=%d revenue=%.2f distinct_skus=%d",
            orders,
            revenue,
            len(sku_quantities),
        )
        return KPISummary(revenue=revenue, orders=orders, aov=aov, top_skus=top_skus)


def generate_insights(kpis: KPISummary, *, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Render the short narrative for *kpis*, one suggestion per line.
    """
    insights: list[str] = []
    if kpis.revenue > 0:
        insights.append(
            f"Revenue: {currency_symbol}{_format_amount(kpis.revenue)}. "
            "Consider a short promotion for the top product."
        )
    else:
        insights.append(NO_REVENUE_INSIGHT)

    if kpis.top_skus:
        top = kpis.top_skus[0]
        insights.append(f"Top SKU: {top.sku} (qty {_format_amount(top.qty)}). Bundle or promote it.")

    insights.append(LOYALTY_INSIGHT)
    return "\n".join(insights)
