"""
app/api/routers/report_router.py

Report save endpoint.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from app.api.dependencies import get_sales_store
from app.api.errors import APIError
from app.repositories.sales_repository import SalesPersistenceError, SalesStore
from app.schemas.report import SaveReportRequest, SaveReportResponse
from app.schemas.upload import ErrorResponse
from app.services.report_service import ReportService, ReportValidationError, get_report_service

logger = logging.getLogger(__name__)

SAVE_REPORT_ERROR = "Email and storage required"


def _describe_validation_errors(exc: RequestValidationError) -> str:
    return "; ".join(str(error.get("msg", "invalid request")) for error in exc.errors())


class ReportRoute(APIRoute):
    """
    Route class that reports unreadable request bodies as a 400 in the
    flat error shape instead of the framework's 422.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def report_route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as exc:
                raise APIError(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    error=SAVE_REPORT_ERROR,
                    details=_describe_validation_errors(exc),
                ) from exc

        return report_route_handler


router = APIRouter(prefix="/api", tags=["reports"], route_class=ReportRoute)


@router.post(
    "/save",
    response_model=SaveReportResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def save_report(
    body: SaveReportRequest | None = Body(default=None),
    store: SalesStore | None = Depends(get_sales_store),
    report_service: ReportService = Depends(get_report_service),
) -> SaveReportResponse:
    """
    Persist a report built from a previous upload's KPIs and sample.

    A missing body counts as a missing email.

    Raises HTTP 400 when the body is unreadable or the email is blank.
    Raises HTTP 400 when persistence is disabled.
    Raises HTTP 500 when the store rejects the write.
    """

    body = body or SaveReportRequest()
    try:
        report_id = report_service.save_report(
            email=body.email,
            kpis=body.kpis,
            sample=body.sample,
            store=store,
        )
    except ReportValidationError as exc:
        raise APIError(
            status_code=status.HTTP_400_BAD_REQUEST,
            error=SAVE_REPORT_ERROR,
            details=str(exc),
        ) from exc
    except SalesPersistenceError as exc:
        raise APIError(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error="Unable to save report.",
            details=str(exc),
        ) from exc

    return SaveReportResponse(report_id=report_id)
