"""Record extraction, classification and aggregation for dashboard metrics."""

from rooflink_dashboard.metrics.aggregator import (
    calculate_lead_conversion_percentage,
    create_accumulator,
    fold,
    fold_all,
)
from rooflink_dashboard.metrics.classifier import classify, matches_region
from rooflink_dashboard.metrics.extractor import extract_records, probe, summarize_record
from rooflink_dashboard.metrics.schemas import (
    DateWindow,
    MetricsAccumulator,
    RecordClassification,
    RecordSummary,
)
from rooflink_dashboard.metrics.windows import date_window_for

__all__ = [
    "DateWindow",
    "MetricsAccumulator",
    "RecordClassification",
    "RecordSummary",
    "calculate_lead_conversion_percentage",
    "classify",
    "create_accumulator",
    "date_window_for",
    "extract_records",
    "fold",
    "fold_all",
    "matches_region",
    "probe",
    "summarize_record",
]
