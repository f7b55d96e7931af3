"""
Pydantic schemas for dashboard refresh results.

A refresh produces one ``DashboardSnapshot``: the folded metrics plus a
report of every source that was fetched to compute them.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from rooflink_dashboard.constants import InvocationStatus
from rooflink_dashboard.mcp.schemas import ToolCatalog
from rooflink_dashboard.metrics.schemas import MetricsAccumulator


class SourceReport(BaseModel):
    """Outcome of fetching one business path or tool."""

    name: str = Field(..., description="Business path or tool name")
    kind: str = Field(..., description="'business_path' or 'tool'")
    status: InvocationStatus = Field(..., description="Invocation status")
    record_count: int = Field(0, description="Records extracted from the response")
    elapsed_ms: float = Field(0.0, description="Wall time of the invocation")
    data_size: int = Field(0, description="Size of the serialized response in bytes")
    error: str | None = Field(None, description="Diagnostic message for failures")


class CollectionSummary(BaseModel):
    """Totals across all sources of a refresh."""

    total_sources: int = Field(0, description="Sources fetched")
    successful: int = Field(0, description="Sources that returned ok")
    degraded: int = Field(0, description="Sources that fell back to mock data")
    failed: int = Field(0, description="Sources that failed without a fallback")
    total_records: int = Field(0, description="Records extracted across sources")
    total_data_size: int = Field(0, description="Bytes received across sources")
    average_response_ms: float = Field(0.0, description="Mean invocation time")

    @classmethod
    def from_reports(cls, reports: list[SourceReport]) -> "CollectionSummary":
        if not reports:
            return cls()
        return cls(
            total_sources=len(reports),
            successful=sum(1 for r in reports if r.status == InvocationStatus.OK),
            degraded=sum(1 for r in reports if r.status == InvocationStatus.DEGRADED),
            failed=sum(1 for r in reports if r.status == InvocationStatus.ERROR),
            total_records=sum(r.record_count for r in reports),
            total_data_size=sum(r.data_size for r in reports),
            average_response_ms=round(
                sum(r.elapsed_ms for r in reports) / len(reports), 2
            ),
        )


class DashboardSnapshot(BaseModel):
    """Metrics and source report of one refresh cycle."""

    metrics: MetricsAccumulator = Field(..., description="Folded metrics")
    catalog: ToolCatalog = Field(..., description="Tools discovered for this cycle")
    sources: list[SourceReport] = Field(default_factory=list, description="Per-source outcome")
    summary: CollectionSummary = Field(
        default_factory=CollectionSummary, description="Totals across sources"
    )
    degraded: bool = Field(
        False, description="Discovery or at least one source fell back"
    )
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the cycle finished"
    )
