"""
app/schemas package marker.
"""

from app.schemas.report import SaveReportRequest, SaveReportResponse
from app.schemas.upload import (
    ErrorResponse,
    KPISummaryResponse,
    StorageResultResponse,
    TopSKUResponse,
    UploadAnalysisResponse,
)

__all__ = [
    "ErrorResponse",
    "KPISummaryResponse",
    "SaveReportRequest",
    "SaveReportResponse",
    "StorageResultResponse",
    "TopSKUResponse",
    "UploadAnalysisResponse",
]
