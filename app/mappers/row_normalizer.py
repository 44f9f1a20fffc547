"""
app/mappers/row_normalizer.py

Heuristic resolution of free-form sales CSV rows into a canonical shape.

Every logical field has an ordered tuple of candidate column names. The
first candidate present in the row wins, looked up by :func:`first_present`.
Numeric values go through :func:`to_number`, which never raises and falls
back to ``0.0`` for anything it cannot read.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Mapping, Sequence

from app.domain.sales import NormalizedSale
from db.models.sale import UNKNOWN_SKU

# Explicit line totals. Checked before any quantity x price derivation.
EXPLICIT_TOTAL_COLUMNS: tuple[str, ...] = ("total_amount", "total", "amount")

# Full total priority order; price-like columns act as totals only when the
# row carries no quantity to multiply them by.
TOTAL_COLUMNS: tuple[str, ...] = EXPLICIT_TOTAL_COLUMNS + ("price", "unit_price")

QUANTITY_COLUMNS: tuple[str, ...] = ("quantity", "qty")
UNIT_PRICE_COLUMNS: tuple[str, ...] = ("unit_price", "price")
SKU_COLUMNS: tuple[str, ...] = ("sku", "item", "product", "product_name")

DATE_COLUMNS: tuple[str, ...] = ("date", "order_date", "transaction_date", "sale_date")
ORDER_ID_COLUMNS: tuple[str, ...] = ("order_id", "order_number", "transaction_id", "invoice")
PRODUCT_NAME_COLUMNS: tuple[str, ...] = ("product_name", "product", "item_name", "description")
PAYMENT_TYPE_COLUMNS: tuple[str, ...] = ("payment_type", "payment_method", "payment", "tender")
STAFF_COLUMNS: tuple[str, ...] = ("staff", "staff_name", "cashier", "employee", "server")

CURRENCY_SYMBOLS: tuple[str, ...] = ("£", "$", "€", ",")

# Leading numeric prefix, read the way a lenient float parser would.
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_NON_DIGITS = re.compile(r"\D")

# Upper bound of the 32-bit `sales.quantity` column.
MAX_STORED_QUANTITY = 2**31 - 1

_MISSING = object()


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.
    """

    return "".join(ch for ch in header.strip().lower() if ch.isalnum())


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def first_present(
    row: Mapping[str, str | None],
    candidates: Sequence[str],
    *,
    skip_blank: bool = False,
    default: object = None,
) -> object:
    """
    Return the value of the first candidate column present in *row*.

    An exact key match is preferred; otherwise the candidate is compared
    against the normalized form of each header, so ``"Unit Price"`` answers
    for ``unit_price``. With ``skip_blank`` a present-but-empty column does
    not count. Returns *default* when no candidate matches.
    """

    normalized: dict[str, str | None] | None = None
    for candidate in candidates:
        value = row.get(candidate, _MISSING)
        if value is _MISSING:
            if normalized is None:
                normalized = {}
                for header, header_value in row.items():
                    if header is None:
                        continue
                    normalized.setdefault(normalize_header(header), header_value)
            value = normalized.get(normalize_header(candidate), _MISSING)
        if value is _MISSING or value is None:
            continue
        if skip_blank and _is_blank(value):
            continue
        return value
    return default


def has_any(row: Mapping[str, str | None], candidates: Sequence[str]) -> bool:
    return first_present(row, candidates, default=_MISSING) is not _MISSING


def to_number(value: object) -> float:
    """
    Coerce a currency-formatted string into a float.

    Currency glyphs and thousands separators are stripped and the leading
    numeric prefix is parsed. Missing, empty, non-numeric and non-finite
    input all yield ``0.0``.
    """

    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    text = str(value)
    for symbol in CURRENCY_SYMBOLS:
        text = text.replace(symbol, "")
    match = _NUMERIC_PREFIX.match(text.strip())
    if match is None:
        return 0.0
    try:
        number = float(match.group(0))
    except (OverflowError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_optional_number(value: object) -> float | None:
    if value is None:
        return None
    return to_number(value)


def to_optional_int(value: object) -> int | None:
    """
    Keep only the digits of *value*; None when nothing is left or the
    result does not fit the stored quantity column.
    """

    if value is None:
        return None
    digits = _NON_DIGITS.sub("", str(value))
    if not digits or len(digits.lstrip("0")) > len(str(MAX_STORED_QUANTITY)):
        return None
    number = int(digits)
    return number if number <= MAX_STORED_QUANTITY else None


def _optional_text(value: object) -> str | None:
    if _is_blank(value):
        return None
    return str(value).strip()


def resolve_row_total(row: Mapping[str, str | None]) -> float:
    """
    Resolve the monetary total of one row.

    1. The first explicit total column present wins, even when it is zero.
    2. Otherwise quantity x unit price when both kinds of column exist.
    3. Otherwise the first price-like column present.
    4. Otherwise ``0.0``.
    """

    explicit = first_present(row, EXPLICIT_TOTAL_COLUMNS, default=_MISSING)
    if explicit is not _MISSING:
        return to_number(explicit)

    quantity = first_present(row, QUANTITY_COLUMNS, default=_MISSING)
    unit_price = first_present(row, UNIT_PRICE_COLUMNS, default=_MISSING)
    if quantity is not _MISSING and unit_price is not _MISSING:
        return to_number(quantity) * to_number(unit_price)

    price = first_present(row, TOTAL_COLUMNS, default=_MISSING)
    if price is not _MISSING:
        return to_number(price)
    return 0.0


def resolve_sku(row: Mapping[str, str | None]) -> str:
    sku = first_present(row, SKU_COLUMNS, skip_blank=True)
    if sku is None:
        return UNKNOWN_SKU
    return str(sku).strip()


def ranking_quantity(row: Mapping[str, str | None]) -> float:
    """
    Units a row contributes to its SKU's ranking; never less than one unit
    when the quantity is missing or zero.
    """

    quantity = to_number(first_present(row, QUANTITY_COLUMNS, skip_blank=True))
    return quantity or 1.0


def _persisted_total(row: Mapping[str, str | None]) -> float | None:
    if has_any(row, EXPLICIT_TOTAL_COLUMNS) or has_any(row, UNIT_PRICE_COLUMNS):
        return resolve_row_total(row)
    return None


def normalize_sale(row: Mapping[str, str | None], *, created_at: datetime) -> NormalizedSale:
    """
    Build the persisted shape of one row. Absent fields stay None.
    """

    return NormalizedSale(
        created_at=created_at,
        sku=resolve_sku(row),
        date=_optional_text(first_present(row, DATE_COLUMNS, skip_blank=True)),
        order_id=_optional_text(first_present(row, ORDER_ID_COLUMNS, skip_blank=True)),
        product_name=_optional_text(first_present(row, PRODUCT_NAME_COLUMNS, skip_blank=True)),
        quantity=to_optional_int(first_present(row, QUANTITY_COLUMNS, skip_blank=True)),
        unit_price=to_optional_number(first_present(row, UNIT_PRICE_COLUMNS, skip_blank=True)),
        total_amount=_persisted_total(row),
        payment_type=_optional_text(first_present(row, PAYMENT_TYPE_COLUMNS, skip_blank=True)),
        staff=_optional_text(first_present(row, STAFF_COLUMNS, skip_blank=True)),
    )
