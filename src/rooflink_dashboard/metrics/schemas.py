"""
Pydantic schemas for the metrics pipeline.

This module contains the reporting window, per-record classification, the
normalized record summary and the metrics accumulator.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Breakdown dimensions tracked by the accumulator
BREAKDOWN_DIMENSIONS = ("status", "region", "lead_source", "sales_rep")


class DateWindow(BaseModel):
    """Reporting window a metrics cycle was computed for."""

    model_config = ConfigDict(frozen=True)

    start_date: date = Field(..., description="First day of the window")
    end_date: date = Field(..., description="Last day of the window")
    label: str = Field(..., description="Display label, e.g. 'October 2026'")


class RecordSummary(BaseModel):
    """Normalized view of a record, independent of upstream field names."""

    id: str | None = Field(None, description="Record identifier")
    name: str | None = Field(None, description="Record name (jobs use the address)")
    job_type: str | None = Field(None, description="Job type code")
    status: str | None = Field(None, description="Final status label")
    address: str | None = Field(None, description="Street address")
    region: str | None = Field(None, description="Region name")
    lead_source: str | None = Field(None, description="Lead source name")
    customer_name: str | None = Field(None, description="Customer name")
    customer_email: str | None = Field(None, description="Customer email")
    customer_phone: str | None = Field(None, description="Customer phone")
    sales_rep: str | None = Field(None, description="Sales representative")
    revenue: float | None = Field(None, description="First revenue amount found")
    date_created: str | None = Field(None, description="Creation date as sent upstream")
    date_approved: str | None = Field(None, description="Approval date as sent upstream")
    date_closed: str | None = Field(None, description="Close date as sent upstream")


class RecordClassification(BaseModel):
    """Everything the aggregator needs to know about one record."""

    model_config = ConfigDict(frozen=True)

    region_match: bool = Field(..., description="Record belongs to the target region")
    is_door_knock: bool = Field(..., description="Lead came from door knocking")
    is_company_lead: bool = Field(..., description="Lead was company generated")
    is_approved: bool = Field(..., description="Job approved (contract signed)")
    is_verified: bool = Field(..., description="Lead verified (inspection done)")
    is_claim: bool = Field(..., description="Record is an insurance claim")
    claim_approved: bool = Field(False, description="Claim was approved")
    in_backlog: bool = Field(False, description="Approved but not in a terminal status")
    revenue: float = Field(0.0, description="Revenue attributed to the record")
    revenue_estimated: bool = Field(
        False, description="Revenue is a job-type estimate, not an upstream amount"
    )
    status: str | None = Field(None, description="Final status label")
    region: str | None = Field(None, description="Region name")
    lead_source: str | None = Field(None, description="Lead source name")
    sales_rep: str | None = Field(None, description="Sales representative")


class MetricsAccumulator(BaseModel):
    """Business metrics for one fetch cycle.

    Counters are plain sums, so folding classifications in any order gives
    the same accumulator.
    """

    window: DateWindow = Field(..., description="Window the cycle was computed for")
    region: str = Field(..., description="Target region label")
    include_all_regions: bool = Field(
        False, description="Count records outside the target region too"
    )

    records_seen: int = Field(0, description="Records classified, counted or not")
    region_matched_count: int = Field(0, description="Records inside the target region")
    approved_count: int = Field(0, description="Contracts signed (approved jobs)")
    estimated_revenue_total: float = Field(0.0, description="Sold revenue of approved jobs")
    estimated_revenue_count: int = Field(
        0, description="Approved jobs whose revenue was estimated from the job type"
    )
    door_knock_lead_count: int = Field(0, description="Door knocking leads")
    company_lead_count: int = Field(0, description="Company generated leads")
    verified_count: int = Field(0, description="Verified leads (inspections)")
    claims_filed_count: int = Field(0, description="Insurance claims filed")
    claims_approved_count: int = Field(0, description="Insurance claims approved")
    backlog_count: int = Field(0, description="Approved jobs not yet in a terminal status")

    breakdowns: dict[str, dict[str, int]] = Field(
        default_factory=lambda: {dimension: {} for dimension in BREAKDOWN_DIMENSIONS},
        description="Counted records per status, region, lead source and sales rep",
    )

    @property
    def total_leads(self) -> int:
        return self.door_knock_lead_count + self.company_lead_count

    @property
    def lead_conversion_percentage(self) -> float:
        """Verified leads over all leads, in percent; 0 when there are no leads."""
        if self.total_leads == 0:
            return 0.0
        return self.verified_count / self.total_leads * 100

    @property
    def claims_approval_rate(self) -> float:
        if self.claims_filed_count == 0:
            return 0.0
        return self.claims_approved_count / self.claims_filed_count * 100

    @property
    def average_revenue_per_contract(self) -> float:
        if self.approved_count == 0:
            return 0.0
        return self.estimated_revenue_total / self.approved_count

    def counters(self) -> dict[str, Any]:
        """Counter values and derived ratios, for rendering."""
        return {
            **self.model_dump(exclude={"window", "region", "include_all_regions", "breakdowns"}),
            "total_leads": self.total_leads,
            "lead_conversion_percentage": self.lead_conversion_percentage,
            "claims_approval_rate": self.claims_approval_rate,
            "average_revenue_per_contract": self.average_revenue_per_contract,
        }
