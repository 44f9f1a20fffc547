"""
tests/test_kpi_service.py

Pytest unit tests for KPIAggregator and generate_insights.

All tests are pure Python: no database, no I/O, in-memory rows only.

Coverage
--------
- Revenue, order count and AOV arithmetic
- AOV rounding and the zero-orders guard
- Top-SKU ranking: ordering, truncation, tie-break, UNKNOWN fallback
- Empty input
- Narrative branches
- KPISummary structure contracts
"""

from __future__ import annotations

import pytest

from app.domain.sales import KPISummary, TopSKU
from app.services.kpi_service import (
    LOYALTY_INSIGHT,
    NO_REVENUE_INSIGHT,
    KPIAggregator,
    generate_insights,
)
from db.models.sale import UNKNOWN_SKU


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def aggregator() -> KPIAggregator:
    """Fresh KPIAggregator instance for each test."""
    return KPIAggregator()


# ---------------------------------------------------------------------------
# KPISummary contract
# ---------------------------------------------------------------------------


class TestKPISummaryContract:
    def test_is_frozen(self) -> None:
        summary = KPISummary(revenue=10.0, orders=1, aov=10.0)
        with pytest.raises((AttributeError, TypeError)):
            summary.revenue = 0.0  # type: ignore[misc]

    def test_defaults_are_zero(self) -> None:
        summary = KPISummary()
        assert summary.revenue == 0.0
        assert summary.orders == 0
        assert summary.aov == 0.0
        assert summary.top_skus == ()


# ---------------------------------------------------------------------------
# Revenue / orders / AOV
# ---------------------------------------------------------------------------


class TestRevenueAndAOV:
    def test_quantity_times_price_rows(self, aggregator: KPIAggregator) -> None:
        rows = [
            {"sku": "A", "quantity": "2", "unit_price": "10"},
            {"sku": "B", "quantity": "1", "unit_price": "5"},
        ]
        summary = aggregator.aggregate(rows)

        assert summary.revenue == pytest.approx(25.0)
        assert summary.orders == 2
        assert summary.aov == pytest.approx(12.5)

    def test_orders_counts_rows_not_distinct_order_ids(self, aggregator: KPIAggregator) -> None:
        rows = [
            {"order_id": "1", "total": "10"},
            {"order_id": "1", "total": "20"},
            {"order_id": "2", "total": "30"},
        ]
        assert aggregator.aggregate(rows).orders == 3

    def test_revenue_rounded_to_two_places(self, aggregator: KPIAggregator) -> None:
        rows = [{"total": "0.1"}, {"total": "0.2"}, {"total": "£1,000.004"}]
        assert aggregator.aggregate(rows).revenue == 1000.3

    @pytest.mark.parametrize(
        "totals, expected_aov",
        [
            (["10", "10", "10.01"], 10.0),
            (["1", "2"], 1.5),
            (["100"], 100.0),
            (["0.01", "0.01", "0.02"], 0.01),
        ],
    )
    def test_aov_is_rounded_revenue_over_orders(
        self, aggregator: KPIAggregator, totals: list[str], expected_aov: float
    ) -> None:
        summary = aggregator.aggregate([{"total": value} for value in totals])
        assert summary.aov == expected_aov
        assert summary.aov == round(summary.revenue / summary.orders, 2)

    def test_malformed_values_contribute_zero(self, aggregator: KPIAggregator) -> None:
        rows = [{"total": "n/a"}, {"total": ""}, {"total": "12"}]
        summary = aggregator.aggregate(rows)
        assert summary.revenue == 12.0
        assert summary.orders == 3
        assert summary.aov == 4.0


# ---------------------------------------------------------------------------
# Top SKUs
# ---------------------------------------------------------------------------


class TestTopSkus:
    def test_sorted_descending_by_quantity(self, aggregator: KPIAggregator) -> None:
        rows = [
            {"sku": "A", "qty": "1"},
            {"sku": "B", "qty": "5"},
            {"sku": "A", "qty": "2"},
            {"sku": "C", "qty": "4"},
        ]
        top = aggregator.aggregate(rows).top_skus
        assert [(item.sku, item.qty) for item in top] == [("B", 5.0), ("C", 4.0), ("A", 3.0)]

    def test_truncated_to_five(self, aggregator: KPIAggregator) -> None:
        rows = [{"sku": f"S{i}", "quantity": str(i)} for i in range(1, 9)]
        top = aggregator.aggregate(rows).top_skus
        assert len(top) == 5
        assert [item.sku for item in top] == ["S8", "S7", "S6", "S5", "S4"]

    def test_limit_is_configurable(self) -> None:
        rows = [{"sku": "A"}, {"sku": "B"}, {"sku": "C"}]
        assert len(KPIAggregator(top_sku_limit=2).aggregate(rows).top_skus) == 2

    def test_ties_keep_first_seen_order(self, aggregator: KPIAggregator) -> None:
        rows = [
            {"sku": "X", "qty": "1"},
            {"sku": "Y", "qty": "1"},
            {"sku": "Z", "qty": "2"},
            {"sku": "W", "qty": "1"},
        ]
        top = aggregator.aggregate(rows).top_skus
        assert [item.sku for item in top] == ["Z", "X", "Y", "W"]

    def test_rows_without_sku_or_quantity_rank_as_unknown(self, aggregator: KPIAggregator) -> None:
        rows = [{"total": "5"}, {"total": "7"}]
        top = aggregator.aggregate(rows).top_skus
        assert top == (TopSKU(sku=UNKNOWN_SKU, qty=2.0),)

    def test_never_longer_than_distinct_skus(self, aggregator: KPIAggregator) -> None:
        rows = [{"sku": "A"}, {"sku": "A"}, {"sku": "B"}]
        assert len(aggregator.aggregate(rows).top_skus) == 2

    def test_non_positive_totals_are_not_ranked(self, aggregator: KPIAggregator) -> None:
        rows = [
            {"sku": "A", "qty": "3"},
            {"sku": "A", "qty": "-3"},
            {"sku": "B", "qty": "-2"},
            {"sku": "C", "qty": "1"},
        ]
        top = aggregator.aggregate(rows).top_skus
        assert top == (TopSKU(sku="C", qty=1.0),)


# ---------------------------------------------------------------------------
# Empty input
# ---------------------------------------------------------------------------


class TestEmptyInput:
    def test_all_metrics_zero(self, aggregator: KPIAggregator) -> None:
        summary = aggregator.aggregate([])
        assert summary == KPISummary(revenue=0.0, orders=0, aov=0.0, top_skus=())

    def test_accepts_any_iterable(self, aggregator: KPIAggregator) -> None:
        summary = aggregator.aggregate(iter([{"total": "3"}]))
        assert summary.orders == 1

    def test_stateless_across_calls(self, aggregator: KPIAggregator) -> None:
        aggregator.aggregate([{"sku": "A", "total": "10"}])
        assert aggregator.aggregate([]).revenue == 0.0


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------


class TestInsights:
    def test_revenue_and_top_sku_lines(self) -> None:
        kpis = KPISummary(revenue=25.0, orders=2, aov=12.5, top_skus=(TopSKU(sku="A", qty=2.0),))
        lines = generate_insights(kpis).split("\n")

        assert lines == [
            "Revenue: £25. Consider a short promotion for the top product.",
            "Top SKU: A (qty 2). Bundle or promote it.",
            LOYALTY_INSIGHT,
        ]

    def test_fractional_amounts_are_kept(self) -> None:
        kpis = KPISummary(revenue=10.5, orders=1, aov=10.5, top_skus=(TopSKU(sku="B", qty=1.5),))
        text = generate_insights(kpis, currency_symbol="$")
        assert "Revenue: $10.5." in text
        assert "(qty 1.5)" in text

    def test_no_revenue_branch_without_top_sku(self) -> None:
        lines = generate_insights(KPISummary()).split("\n")
        assert lines == [NO_REVENUE_INSIGHT, LOYALTY_INSIGHT]
        assert NO_REVENUE_INSIGHT.startswith("No revenue detected")

    def test_no_revenue_with_top_sku(self) -> None:
        kpis = KPISummary(revenue=0.0, orders=1, aov=0.0, top_skus=(TopSKU(sku=UNKNOWN_SKU, qty=1.0),))
        lines = generate_insights(kpis).split("\n")
        assert lines[0] == NO_REVENUE_INSIGHT
        assert lines[1].startswith(f"Top SKU: {UNKNOWN_SKU}")
        assert lines[-1] == LOYALTY_INSIGHT
