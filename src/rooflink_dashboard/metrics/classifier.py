"""
Record classification for dashboard metrics.

Turns one extracted record into a ``RecordClassification``: region match,
lead-source bucket, approval, verification, claim state, backlog membership
and revenue.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from rooflink_dashboard.metrics.constants import (
    APPROVAL_STATUS_KEYS,
    APPROVED_DATE_KEYS,
    APPROVED_FLAG_KEYS,
    APPROVED_VALUES,
    CLAIM_KEYS,
    CLAIM_SOURCE_KEYWORD,
    CLAIM_STATUS_KEYS,
    DEFAULT_REVENUE_ESTIMATE,
    DOOR_KNOCK_SOURCES,
    JOB_TYPE_KEYS,
    JOB_TYPE_REVENUE_ESTIMATES,
    LEAD_SOURCE_KEYS,
    LOCATION_KEYS,
    REGION_ADDRESS_KEYS,
    REGION_KEYS,
    SALES_REP_KEYS,
    STATUS_KEYS,
    TARGET_REGION_REVENUE_UPLIFT,
    TERMINAL_DATE_KEYS,
    TERMINAL_STATUSES,
    TRUTHY_VALUES,
    VERIFIED_FLAG_KEYS,
    VERIFIED_VALUES,
)
from rooflink_dashboard.metrics.extractor import lookup, probe, probe_amount, probe_text
from rooflink_dashboard.metrics.schemas import RecordClassification

DEFAULT_REGION_CODES = frozenset({"la", "louisiana", "monroe"})

_ZIP = re.compile(r"\d{5}(?:-\d{4})?")
_TRAILING_ZIP = re.compile(r"\s+\d{5}(?:-\d{4})?$")


def _normalize(value: Any) -> str:
    return str(value).strip().lower()


def _is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return _normalize(value) in TRUTHY_VALUES
    return False


def _any_truthy(record: Mapping[str, Any], paths: Iterable[str]) -> bool:
    return any(_is_truthy(lookup(record, path)) for path in paths)


def _any_value_in(record: Mapping[str, Any], paths: Iterable[str], values: frozenset[str]) -> bool:
    for path in paths:
        value = lookup(record, path)
        if isinstance(value, str) and _normalize(value) in values:
            return True
    return False


def _has_any(record: Mapping[str, Any], paths: Iterable[str]) -> bool:
    return probe(record, paths) is not None


def _address_state(address: str) -> str | None:
    """State component of a "street, city, ST 12345" address, if any."""
    parts = [part.strip() for part in address.split(",") if part.strip()]
    has_zip = bool(parts) and _ZIP.fullmatch(parts[-1]) is not None
    if has_zip:
        parts.pop()
    elif parts and _TRAILING_ZIP.search(parts[-1]):
        has_zip = True
    # Without a zip the last part is only a state when street and city precede it
    if len(parts) < (2 if has_zip else 3):
        return None
    state = _TRAILING_ZIP.sub("", parts[-1]).strip()
    return state or None


# ============================================================================
# INDIVIDUAL CLASSIFIERS
# ============================================================================


def matches_region(record: Mapping[str, Any], region_codes: Iterable[str] = DEFAULT_REGION_CODES) -> bool:
    """
    Check whether a record belongs to the target region.

    Region, state and city fields decide whenever any of them is present:
    one of them must equal a region code exactly. Only records without such
    fields fall back to the address, where just the state component
    ("Monroe, LA 71202" gives "LA") is compared, so street and city words
    such as "Monroe St" or "La Grange" never match.

    Args:
        record: Extracted record
        region_codes: Lower-case region codes

    Returns:
        bool: True if the record's region indicators match
    """
    codes = {_normalize(code) for code in region_codes}
    if not codes:
        return False

    region_values = [
        value
        for value in (lookup(record, path) for path in REGION_KEYS + LOCATION_KEYS)
        if isinstance(value, str) and value.strip()
    ]
    if region_values:
        return any(_normalize(value) in codes for value in region_values)

    for path in REGION_ADDRESS_KEYS:
        value = lookup(record, path)
        if not isinstance(value, str):
            continue
        state = _address_state(value)
        if state and _normalize(state) in codes:
            return True
    return False


def is_door_knock_source(lead_source: str | None) -> bool:
    """Door knocking when the source mentions any door-knock term."""
    if not lead_source:
        return False
    source = lead_source.lower()
    return any(term in source for term in DOOR_KNOCK_SOURCES)


def is_approved(record: Mapping[str, Any]) -> bool:
    return (
        _has_any(record, APPROVED_DATE_KEYS)
        or _any_truthy(record, APPROVED_FLAG_KEYS)
        or _any_value_in(record, APPROVAL_STATUS_KEYS, APPROVED_VALUES)
    )


def is_verified(record: Mapping[str, Any]) -> bool:
    return _any_truthy(record, VERIFIED_FLAG_KEYS) or _any_value_in(
        record, STATUS_KEYS, VERIFIED_VALUES
    )


def is_claim(record: Mapping[str, Any], source: str | None = None) -> bool:
    if source and CLAIM_SOURCE_KEYWORD in source.lower():
        return True
    return _has_any(record, CLAIM_KEYS)


def is_claim_approved(record: Mapping[str, Any]) -> bool:
    return _any_truthy(record, APPROVED_FLAG_KEYS) or _any_value_in(
        record, CLAIM_STATUS_KEYS, APPROVED_VALUES
    )


def is_terminal(record: Mapping[str, Any]) -> bool:
    """Closed, deleted, completed or scheduled, by status label or terminal date."""
    status = probe_text(record, STATUS_KEYS)
    if status and _normalize(status) in TERMINAL_STATUSES:
        return True
    return _has_any(record, TERMINAL_DATE_KEYS)


def estimate_revenue(record: Mapping[str, Any], region_match: bool) -> float:
    """Job-type revenue estimate for approved jobs that carry no amount."""
    job_type = probe_text(record, JOB_TYPE_KEYS)
    estimate = JOB_TYPE_REVENUE_ESTIMATES.get(
        _normalize(job_type) if job_type else "", DEFAULT_REVENUE_ESTIMATE
    )
    if region_match:
        estimate = round(estimate * TARGET_REGION_REVENUE_UPLIFT)
    return float(estimate)


# ============================================================================
# CLASSIFY
# ============================================================================


def classify(
    record: Mapping[str, Any],
    source: str | None = None,
    region_codes: Iterable[str] = DEFAULT_REGION_CODES,
) -> RecordClassification:
    """
    Classify a record for aggregation.

    Claims are tracked separately: they never count as contracts or leads.
    Records without a lead source count as company generated.

    Args:
        record: Extracted record
        source: Path or tool the record came from, used as a claim hint
        region_codes: Lower-case region codes of the target region

    Returns:
        RecordClassification
    """
    region_match = matches_region(record, region_codes)
    lead_source = probe_text(record, LEAD_SOURCE_KEYS)
    claim = is_claim(record, source)

    door_knock = not claim and is_door_knock_source(lead_source)
    approved = not claim and is_approved(record)

    revenue = 0.0
    revenue_estimated = False
    if approved:
        amount = probe_amount(record)
        if amount is None:
            revenue = estimate_revenue(record, region_match)
            revenue_estimated = True
        else:
            revenue = amount

    return RecordClassification(
        region_match=region_match,
        is_door_knock=door_knock,
        is_company_lead=not claim and not door_knock,
        is_approved=approved,
        is_verified=not claim and is_verified(record),
        is_claim=claim,
        claim_approved=claim and is_claim_approved(record),
        in_backlog=approved and not is_terminal(record),
        revenue=revenue,
        revenue_estimated=revenue_estimated,
        status=probe_text(record, STATUS_KEYS),
        region=probe_text(record, REGION_KEYS),
        lead_source=lead_source,
        sales_rep=probe_text(record, SALES_REP_KEYS),
    )
