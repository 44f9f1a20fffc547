"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and storage access.
"""

from __future__ import annotations

from fastapi import File, Request, UploadFile, status

from app.api.errors import APIError
from app.repositories.sales_repository import SalesStore


def get_upload_file(file: UploadFile | None = File(default=None)) -> UploadFile:
    """
    Require the multipart ``file`` field; report its absence as a 400.
    """

    if file is None or not (file.filename or "").strip():
        raise APIError(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="No file uploaded",
        )
    return file


def get_sales_store(request: Request) -> SalesStore | None:
    """
    Return the store built at startup, or None when persistence is disabled.
    """

    return getattr(request.app.state, "sales_store", None)
