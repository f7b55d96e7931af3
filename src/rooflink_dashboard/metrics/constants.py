"""
Field aliases and classification vocabularies for RoofLink records.

Upstream payloads are inconsistently shaped, so every logical attribute is
read through a ranked tuple of candidate paths (dotted paths walk nested
objects). Schema drift upstream is fixed by editing the tuples here.
"""

# ============================================================================
# FIELD ALIASES (ranked, first present non-null value wins)
# ============================================================================

ID_KEYS = ("id", "ID", "Id", "jnid")
NAME_KEYS = ("name", "customer.name", "title")
JOB_TYPE_KEYS = ("job_type", "type", "bid_type")

REVENUE_KEYS = (
    "estimate_total",
    "total_amount",
    "amount",
    "revenue",
    "estimate_amount",
    "job_amount",
    "contract_amount",
    "total",
    "value",
    "price",
)

CUSTOMER_NAME_KEYS = ("customer.name", "customer_name", "contact_name")
CUSTOMER_EMAIL_KEYS = ("customer.email", "customer_email", "email")
CUSTOMER_PHONE_KEYS = ("customer.cell", "customer.phone", "customer_phone", "cell", "phone")

LEAD_SOURCE_KEYS = (
    "customer.lead_source.name",
    "customer.lead_source",
    "lead_source.name",
    "lead_source",
    "source.name",
    "source",
    "source_name",
    "sourceName",
)

REGION_KEYS = (
    "region.name",
    "region",
    "customer.region.name",
    "customer.region",
    "region_name",
)
LOCATION_KEYS = (
    "state",
    "city",
    "state_text",
    "stateText",
    "customer.state",
    "customer.city",
)
ADDRESS_KEYS = (
    "full_address",
    "address",
    "customer_address",
    "customer.address",
    "job.address",
)
# Job names are usually the street address
REGION_ADDRESS_KEYS = ADDRESS_KEYS + ("name",)

STATUS_KEYS = (
    "job_status.label",
    "job_status_label",
    "job_status",
    "status.label",
    "status",
    "status_name",
    "statusName",
)
# Status-like values that may say "approved"
APPROVAL_STATUS_KEYS = STATUS_KEYS + ("category", "approval_status")

APPROVED_DATE_KEYS = ("date_approved", "approved_at", "approved_date")
APPROVED_FLAG_KEYS = ("approved", "is_approved")
VERIFIED_FLAG_KEYS = (
    "pipeline.verify_lead.complete",
    "verified",
    "is_verified",
    "inspection_complete",
    "inspection_completed",
)
TERMINAL_DATE_KEYS = ("date_closed", "closed_at", "date_deleted", "deleted_at")

CLAIM_KEYS = ("claim_number", "claim_id", "claim_status", "insurance_claim", "claim")
CLAIM_STATUS_KEYS = ("claim_status", "claim.status") + APPROVAL_STATUS_KEYS

SALES_REP_KEYS = (
    "customer.rep.name",
    "rep.name",
    "sales_rep_name",
    "salesRepName",
    "sales_rep",
)

DATE_CREATED_KEYS = ("date_created", "created_at", "created", "dateCreated")
DATE_CLOSED_KEYS = ("date_closed", "closed_at")
NOTES_KEYS = ("notes", "last_note", "description")

# ============================================================================
# VOCABULARIES
# ============================================================================

DOOR_KNOCK_SOURCES = (
    "door knocking",
    "door knock",
    "knocks",
    "rabbit",
    "salesrabbit",
    "canvass",
    "canvassing",
)

APPROVED_VALUES = frozenset({"approved"})
VERIFIED_VALUES = frozenset({"verified", "inspected", "inspection complete"})
TRUTHY_VALUES = frozenset({"true", "yes", "y", "1", "complete", "completed"})

# Final statuses that take an approved job out of the backlog
TERMINAL_STATUSES = frozenset({"scheduled", "deleted", "completed", "closed"})

CLAIM_SOURCE_KEYWORD = "claim"

# ============================================================================
# REVENUE ESTIMATES (approved jobs without an amount)
# ============================================================================

JOB_TYPE_REVENUE_ESTIMATES = {
    "c": 25000.0,  # commercial
    "r": 15000.0,  # residential
}
DEFAULT_REVENUE_ESTIMATE = 20000.0
TARGET_REGION_REVENUE_UPLIFT = 1.1

UNKNOWN_LABEL = "Unknown"
