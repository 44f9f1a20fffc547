from __future__ import annotations

import io
from collections.abc import Sequence

import pytest

from app.domain.sales import NormalizedSale
from app.repositories.sales_repository import SalesPersistenceError
from app.services.upload_service import CSVParseError, UploadService, parse_csv


def _csv(text: str) -> io.BytesIO:
    return io.BytesIO(text.encode("utf-8"))


class _RecordingStore:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sales: list[NormalizedSale] = []

    def check_connection(self) -> None:
        return None

    def insert_sales(self, sales: Sequence[NormalizedSale]) -> int:
        if self.fail:
            raise SalesPersistenceError("relation \"sales\" does not exist")
        self.sales.extend(sales)
        return len(sales)

    def save_report(self, **_: object) -> None:
        raise AssertionError("not used by uploads")


# ---------------------------------------------------------------------------
# parse_csv
# ---------------------------------------------------------------------------


class TestParseCSV:
    def test_header_keys_and_values_are_trimmed(self) -> None:
        rows = parse_csv(_csv(" sku , quantity \n A , 2 \n"))
        assert rows == [{"sku": "A", "quantity": "2"}]

    def test_blank_lines_are_skipped(self) -> None:
        rows = parse_csv(_csv("sku,total\nA,1\n\n   \nB,2\n"))
        assert [row["sku"] for row in rows] == ["A", "B"]

    def test_byte_order_mark_is_ignored(self) -> None:
        rows = parse_csv(io.BytesIO("\ufeffsku,total\nA,1\n".encode("utf-8")))
        assert list(rows[0]) == ["sku", "total"]

    def test_quoted_fields_keep_commas(self) -> None:
        rows = parse_csv(_csv('sku,total\nA,"£1,234.50"\n'))
        assert rows[0]["total"] == "£1,234.50"

    def test_empty_file_has_no_rows(self) -> None:
        assert parse_csv(_csv("")) == []

    def test_header_only_has_no_rows(self) -> None:
        assert parse_csv(_csv("sku,quantity,unit_price\n")) == []

    def test_extra_fields_raise(self) -> None:
        with pytest.raises(CSVParseError, match="Invalid record length"):
            parse_csv(_csv("a,b\n1,2,3\n"))

    def test_missing_fields_raise(self) -> None:
        with pytest.raises(CSVParseError, match="Invalid record length"):
            parse_csv(_csv("a,b,c\n1,2\n"))

    def test_non_utf8_raises(self) -> None:
        with pytest.raises(CSVParseError, match="UTF-8"):
            parse_csv(io.BytesIO(b"sku,total\n\xff\xfe,1\n"))

    def test_source_stream_stays_open(self) -> None:
        raw = _csv("sku\nA\n")
        parse_csv(raw)
        assert not raw.closed


# ---------------------------------------------------------------------------
# UploadService
# ---------------------------------------------------------------------------


class TestUploadService:
    def test_analysis_without_store(self) -> None:
        analysis = UploadService().analyze_upload(
            raw_file=_csv("sku,quantity,unit_price\nA,2,10\nB,1,5\n"),
        )

        assert analysis.rows == 2
        assert analysis.sample == [
            {"sku": "A", "quantity": "2", "unit_price": "10"},
            {"sku": "B", "quantity": "1", "unit_price": "5"},
        ]
        assert analysis.kpis.revenue == 25.0
        assert analysis.kpis.aov == 12.5
        assert analysis.storage_result is None
        assert analysis.insights.startswith("Revenue: £25.")

    def test_sample_is_limited(self) -> None:
        body = "sku,total\n" + "".join(f"S{i},{i}\n" for i in range(8))
        analysis = UploadService(sample_size=3).analyze_upload(raw_file=_csv(body))

        assert analysis.rows == 8
        assert [row["sku"] for row in analysis.sample] == ["S0", "S1", "S2"]

    def test_rows_are_normalized_and_stored(self) -> None:
        store = _RecordingStore()
        analysis = UploadService().analyze_upload(
            raw_file=_csv("sku,qty,price,staff\nA,2,10,Ana\nB,,5,\n"),
            store=store,
        )

        assert analysis.storage_result is not None
        assert analysis.storage_result.success is True
        assert analysis.storage_result.inserted == 2
        first, second = store.sales
        assert (first.sku, first.quantity, first.total_amount, first.staff) == ("A", 2, 20.0, "Ana")
        assert (second.sku, second.quantity, second.staff) == ("B", None, None)
        assert first.created_at == second.created_at

    def test_store_failure_is_reported_inline(self) -> None:
        analysis = UploadService().analyze_upload(
            raw_file=_csv("sku,total\nA,5\n"),
            store=_RecordingStore(fail=True),
        )

        assert analysis.kpis.revenue == 5.0
        assert analysis.storage_result is not None
        assert analysis.storage_result.success is False
        assert "does not exist" in (analysis.storage_result.error or "")

    def test_parse_failure_propagates(self) -> None:
        with pytest.raises(CSVParseError):
            UploadService().analyze_upload(raw_file=_csv("a,b\n1,2,3\n"), store=_RecordingStore())
