"""
app/mappers package marker.
"""

from app.mappers.row_normalizer import (
    first_present,
    normalize_sale,
    ranking_quantity,
    resolve_row_total,
    resolve_sku,
    to_number,
)

__all__ = [
    "first_present",
    "normalize_sale",
    "ranking_quantity",
    "resolve_row_total",
    "resolve_sku",
    "to_number",
]
