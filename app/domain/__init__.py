"""
app/domain package marker.
"""

from app.domain.sales import KPISummary, NormalizedSale, StorageResult, TopSKU, UploadAnalysis

__all__ = [
    "KPISummary",
    "NormalizedSale",
    "StorageResult",
    "TopSKU",
    "UploadAnalysis",
]
