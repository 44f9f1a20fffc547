"""
app/api/errors.py

Error responses in the ``{"error": ..., "details": ...}`` shape.
"""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse


class APIError(Exception):
    """
    Raised by handlers to return a flat JSON error body.
    """

    def __init__(
        self,
        *,
        status_code: int,
        error: str,
        details: str | None = None,
    ) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_dict(self) -> dict[str, str]:
        payload = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        return payload


def server_error(details: str) -> APIError:
    return APIError(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="server error",
        details=details,
    )


async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
