"""
Record extraction for RoofLink responses.

Finds the record collection inside whichever envelope shape a response
used, and reads logical attributes through ranked alias lists.
"""

import json
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from rooflink_dashboard.constants import InvocationStatus
from rooflink_dashboard.mcp.schemas import InvocationResult
from rooflink_dashboard.metrics.constants import (
    ADDRESS_KEYS,
    APPROVED_DATE_KEYS,
    CUSTOMER_EMAIL_KEYS,
    CUSTOMER_NAME_KEYS,
    CUSTOMER_PHONE_KEYS,
    DATE_CLOSED_KEYS,
    DATE_CREATED_KEYS,
    ID_KEYS,
    JOB_TYPE_KEYS,
    LEAD_SOURCE_KEYS,
    NAME_KEYS,
    REGION_KEYS,
    REVENUE_KEYS,
    SALES_REP_KEYS,
    STATUS_KEYS,
)
from rooflink_dashboard.metrics.schemas import RecordSummary
from rooflink_dashboard.utils.logger import logger

ExtractedRecord = dict[str, Any]

_AMOUNT_NOISE = re.compile(r"[,$\s]")

# ============================================================================
# FIELD PROBING
# ============================================================================


def lookup(record: Mapping[str, Any], path: str) -> Any:
    """Walk a dotted path through nested mappings; None when any step is missing."""
    value: Any = record
    for key in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def probe(record: Mapping[str, Any], candidates: Iterable[str]) -> Any:
    """
    Return the first present, non-null value among ranked candidate paths.

    Args:
        record: Record to read
        candidates: Dotted paths, best first

    Returns:
        The first present value, or None
    """
    for path in candidates:
        value = lookup(record, path)
        if _is_present(value):
            return value
    return None


def probe_text(record: Mapping[str, Any], candidates: Iterable[str]) -> str | None:
    """Like ``probe`` but only accepts scalar values, returned as stripped text.

    Nested objects are skipped so ``lead_source`` can be listed after
    ``lead_source.name`` without ever returning the whole object.
    """
    for path in candidates:
        value = lookup(record, path)
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def probe_all(record: Mapping[str, Any], candidates: Iterable[str]) -> list[Any]:
    """Every present value among the candidate paths, in rank order."""
    return [
        value
        for value in (lookup(record, path) for path in candidates)
        if _is_present(value)
    ]


def to_amount(value: Any) -> float | None:
    """Coerce numbers and currency strings ("$12,500.00") to a finite float."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        try:
            amount = float(_AMOUNT_NOISE.sub("", value))
        except ValueError:
            return None
    else:
        return None
    # NaN and infinity would poison every revenue total
    return amount if math.isfinite(amount) else None


def probe_amount(record: Mapping[str, Any], candidates: Iterable[str] = REVENUE_KEYS) -> float | None:
    """First candidate that holds a usable amount."""
    for path in candidates:
        amount = to_amount(lookup(record, path))
        if amount is not None:
            return amount
    return None


# ============================================================================
# EXTRACTION
# ============================================================================


def _records_only(items: Iterable[Any]) -> list[ExtractedRecord]:
    return [dict(item) for item in items if isinstance(item, Mapping)]


def _extract_from_content(content: list[Any]) -> list[ExtractedRecord]:
    records: list[ExtractedRecord] = []
    for item in content:
        if not isinstance(item, Mapping) or item.get("type") != "text":
            continue
        text = item.get("text")
        if not isinstance(text, str):
            continue
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Skipping unparseable content text", error=str(e), preview=text[:200])
            continue
        records.extend(extract_records(parsed))
    return records


def _extract_from_result_data(data: Any) -> list[ExtractedRecord]:
    # Records sit under content or sampleItems; any other payload is extracted as is
    if isinstance(data, Mapping) and (
        isinstance(data.get("content"), list) or isinstance(data.get("sampleItems"), list)
    ):
        return extract_records({"data": data})
    return extract_records(data)


def extract_records(raw: Any) -> list[ExtractedRecord]:
    """
    Locate the record collection inside a response.

    Shapes, in priority order:
        1. ``{"results": [...]}``
        2. ``{"data": [...]}``
        3. ``{"data": {"content": [{"type": "text", "text": "<json>"}]}}``,
           each text parsed and extracted recursively
        4. ``{"data": {"sampleItems": [...]}}``
        5. ``[...]``
        6. any other mapping is a single record

    Args:
        raw: Response mapping, list or InvocationResult

    Returns:
        list of records; non-mapping items are dropped
    """
    if isinstance(raw, InvocationResult):
        # Degraded and failed results only carry a mock payload
        if raw.status != InvocationStatus.OK:
            return []
        return _extract_from_result_data(raw.data)

    if isinstance(raw, list):
        return _records_only(raw)
    if not isinstance(raw, Mapping):
        return []

    results = raw.get("results")
    if isinstance(results, list):
        return _records_only(results)

    data = raw.get("data")
    if isinstance(data, list):
        return _records_only(data)

    if isinstance(data, Mapping):
        content = data.get("content")
        if isinstance(content, list):
            return _extract_from_content(content)

        sample_items = data.get("sampleItems")
        if isinstance(sample_items, list):
            return _records_only(sample_items)

    return [dict(raw)]


def summarize_record(record: Mapping[str, Any]) -> RecordSummary:
    """Normalized view of a record for display and breakdowns."""
    return RecordSummary(
        id=probe_text(record, ID_KEYS),
        name=probe_text(record, NAME_KEYS),
        job_type=probe_text(record, JOB_TYPE_KEYS),
        status=probe_text(record, STATUS_KEYS),
        address=probe_text(record, ADDRESS_KEYS),
        region=probe_text(record, REGION_KEYS),
        lead_source=probe_text(record, LEAD_SOURCE_KEYS),
        customer_name=probe_text(record, CUSTOMER_NAME_KEYS),
        customer_email=probe_text(record, CUSTOMER_EMAIL_KEYS),
        customer_phone=probe_text(record, CUSTOMER_PHONE_KEYS),
        sales_rep=probe_text(record, SALES_REP_KEYS),
        revenue=probe_amount(record),
        date_created=probe_text(record, DATE_CREATED_KEYS),
        date_approved=probe_text(record, APPROVED_DATE_KEYS),
        date_closed=probe_text(record, DATE_CLOSED_KEYS),
    )
