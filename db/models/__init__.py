"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.report import Report
from db.models.sale import UNKNOWN_SKU, Sale

__all__ = [
    "Report",
    "Sale",
    "UNKNOWN_SKU",
]
