"""
app/api/routers package marker.
"""

from app.api.routers.report_router import router as report_router
from app.api.routers.upload_router import router as upload_router

__all__ = [
    "report_router",
    "upload_router",
]
