"""
app/api/routers/upload_router.py

CSV upload-and-analyze endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, UploadFile

from app.api.dependencies import get_sales_store, get_upload_file
from app.api.errors import server_error
from app.repositories.sales_repository import SalesStore
from app.schemas.upload import ErrorResponse, UploadAnalysisResponse
from app.services.upload_service import CSVParseError, UploadService, get_upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])


@router.post(
    "/upload",
    response_model=UploadAnalysisResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def upload_sales_csv(
    file: UploadFile = Depends(get_upload_file),
    store: SalesStore | None = Depends(get_sales_store),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadAnalysisResponse:
    """
    Parse one sales CSV and return KPIs, a sample, and insights.

    Storage failures are reported in ``storage_result``; parse failures
    return HTTP 500 with the parser message in ``details``.
    """

    try:
        analysis = upload_service.analyze_upload(
            raw_file=file.file,
            store=store,
            filename=file.filename,
        )
    except CSVParseError as exc:
        logger.warning("Upload rejected filename=%r: %s", file.filename, exc)
        raise server_error(str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Upload error filename=%r", file.filename)
        raise server_error(str(exc)) from exc
    finally:
        try:
            file.file.close()
        except OSError as exc:
            logger.debug("Temporary upload cleanup failed filename=%r: %s", file.filename, exc)

    return UploadAnalysisResponse.from_domain(analysis)
