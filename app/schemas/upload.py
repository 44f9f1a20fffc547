"""
app/schemas/upload.py

Response schemas for the upload-and-analyze endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.domain.sales import KPISummary, StorageResult, UploadAnalysis


class TopSKUResponse(BaseModel):
    sku: str
    qty: float


class KPISummaryResponse(BaseModel):
    """
    API response model for the computed KPIs.
    """

    revenue: float
    orders: int = Field(..., ge=0)
    aov: float
    top_skus: list[TopSKUResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, kpis: KPISummary) -> "KPISummaryResponse":
        return cls(
            revenue=kpis.revenue,
            orders=kpis.orders,
            aov=kpis.aov,
            top_skus=[TopSKUResponse(sku=item.sku, qty=item.qty) for item in kpis.top_skus],
        )


class StorageResultResponse(BaseModel):
    success: bool
    inserted: int | None = None
    error: str | None = None

    @classmethod
    def from_domain(cls, result: StorageResult) -> "StorageResultResponse":
        return cls(success=result.success, inserted=result.inserted, error=result.error)


class UploadAnalysisResponse(BaseModel):
    """
    API response model for one analyzed upload.

    ``storage_result`` is omitted when persistence is not configured.
    """

    rows: int = Field(..., ge=0)
    sample: list[dict[str, str]] = Field(default_factory=list)
    kpis: KPISummaryResponse
    insights: str
    storage_result: StorageResultResponse | None = Field(
        default=None,
        description=(
            "Outcome of storing the uploaded rows. Clients of the earlier "
            "hosted-storage API read this from `supabaseResult`."
        ),
    )

    @classmethod
    def from_domain(cls, analysis: UploadAnalysis) -> "UploadAnalysisResponse":
        return cls(
            rows=analysis.rows,
            sample=analysis.sample,
            kpis=KPISummaryResponse.from_domain(analysis.kpis),
            insights=analysis.insights,
            storage_result=(
                None
                if analysis.storage_result is None
                else StorageResultResponse.from_domain(analysis.storage_result)
            ),
        )


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
