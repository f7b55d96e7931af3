"""
Metrics aggregation.

``fold`` adds one classification to an accumulator and returns a new
accumulator. It only sums and counts, so the order records arrive in never
changes the result.
"""

from collections.abc import Iterable

from rooflink_dashboard.metrics.constants import UNKNOWN_LABEL
from rooflink_dashboard.metrics.schemas import (
    BREAKDOWN_DIMENSIONS,
    DateWindow,
    MetricsAccumulator,
    RecordClassification,
)


def create_accumulator(
    window: DateWindow, region: str, include_all_regions: bool = False
) -> MetricsAccumulator:
    """Fresh accumulator for one fetch cycle."""
    return MetricsAccumulator(
        window=window, region=region, include_all_regions=include_all_regions
    )


def is_counted(accumulator: MetricsAccumulator, classification: RecordClassification) -> bool:
    return classification.region_match or accumulator.include_all_regions


def _add_breakdowns(
    breakdowns: dict[str, dict[str, int]], classification: RecordClassification
) -> dict[str, dict[str, int]]:
    updated = {dimension: dict(counts) for dimension, counts in breakdowns.items()}
    for dimension in BREAKDOWN_DIMENSIONS:
        label = getattr(classification, dimension) or UNKNOWN_LABEL
        counts = updated.setdefault(dimension, {})
        counts[label] = counts.get(label, 0) + 1
    return updated


def fold(
    accumulator: MetricsAccumulator, classification: RecordClassification
) -> MetricsAccumulator:
    """
    Add one classified record to the metrics.

    Records outside the target region are only counted as seen, unless the
    accumulator includes all regions. Claims count toward the claim counters
    only; every other counted record is a lead in exactly one bucket.

    Args:
        accumulator: Current metrics (left untouched)
        classification: Classified record

    Returns:
        MetricsAccumulator: New accumulator with the record added
    """
    update: dict = {"records_seen": accumulator.records_seen + 1}

    if not is_counted(accumulator, classification):
        return accumulator.model_copy(update=update)

    if classification.region_match:
        update["region_matched_count"] = accumulator.region_matched_count + 1

    if classification.is_claim:
        update["claims_filed_count"] = accumulator.claims_filed_count + 1
        if classification.claim_approved:
            update["claims_approved_count"] = accumulator.claims_approved_count + 1
    else:
        if classification.is_door_knock:
            update["door_knock_lead_count"] = accumulator.door_knock_lead_count + 1
        elif classification.is_company_lead:
            update["company_lead_count"] = accumulator.company_lead_count + 1

        if classification.is_approved:
            update["approved_count"] = accumulator.approved_count + 1
            update["estimated_revenue_total"] = (
                accumulator.estimated_revenue_total + classification.revenue
            )
            if classification.revenue_estimated:
                update["estimated_revenue_count"] = accumulator.estimated_revenue_count + 1
            if classification.in_backlog:
                update["backlog_count"] = accumulator.backlog_count + 1

        if classification.is_verified:
            update["verified_count"] = accumulator.verified_count + 1

    update["breakdowns"] = _add_breakdowns(accumulator.breakdowns, classification)
    return accumulator.model_copy(update=update)


def fold_all(
    accumulator: MetricsAccumulator, classifications: Iterable[RecordClassification]
) -> MetricsAccumulator:
    for classification in classifications:
        accumulator = fold(accumulator, classification)
    return accumulator


def calculate_lead_conversion_percentage(
    verified: int, door_knock_leads: int, company_leads: int
) -> float:
    """Verified leads over all leads, in percent; 0 when there are no leads."""
    total_leads = door_knock_leads + company_leads
    if total_leads == 0:
        return 0.0
    return verified / total_leads * 100
