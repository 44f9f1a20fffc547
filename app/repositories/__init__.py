"""
app/repositories package marker.
"""

from app.repositories.sales_repository import (
    SalesPersistenceError,
    SalesStore,
    SQLAlchemySalesStore,
)

__all__ = [
    "SalesPersistenceError",
    "SalesStore",
    "SQLAlchemySalesStore",
]
