"""
app/services package marker.
"""

from app.services.kpi_service import KPIAggregator, generate_insights
from app.services.report_service import (
    ReportService,
    ReportValidationError,
    get_report_service,
)
from app.services.upload_service import (
    CSVParseError,
    UploadService,
    get_upload_service,
    parse_csv,
)

__all__ = [
    "CSVParseError",
    "KPIAggregator",
    "ReportService",
    "ReportValidationError",
    "UploadService",
    "generate_insights",
    "get_report_service",
    "get_upload_service",
    "parse_csv",
]
