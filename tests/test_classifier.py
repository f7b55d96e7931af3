"""Tests for record classification."""

import pytest

from rooflink_dashboard.metrics.classifier import (
    classify,
    estimate_revenue,
    is_door_knock_source,
    matches_region,
)


class TestRegionMatching:
    """Test cases for matches_region."""

    def test_region_name(self, approved_job):
        assert matches_region(approved_job)

    def test_address_state_without_region_fields(self):
        assert matches_region({"full_address": "8440 Beebe Dr, Greenwood, LA 71033"})
        assert matches_region({"name": "1700 Orange Street, Monroe, LA, 71202"})

    def test_other_state(self, prospect_job):
        assert not matches_region(prospect_job)

    def test_region_field_wins_over_address(self, build_next_week_job):
        assert not matches_region(build_next_week_job)
        build_next_week_job["customer"]["region"]["name"] = "Louisiana"
        assert matches_region(build_next_week_job)

    @pytest.mark.parametrize(
        "record",
        [
            {"city": "Atlanta", "full_address": "1 Main St, Atlanta, GA 30301"},
            {"city": "Dallas", "full_address": "1 Main St, Dallas, TX 75201"},
            {"full_address": "1 Main St, Lafayette Square, GA 30301"},
            {
                "full_address": "100 Monroe St, Chicago, IL 60603",
                "customer": {"region": {"name": "Illinois"}},
            },
            {"full_address": "100 Monroe St, Chicago, IL 60603"},
            {"full_address": "12 Main St, La Grange, TX 78945", "region": "Texas"},
            {"full_address": "12 Main St, La Grange, TX 78945"},
            {"full_address": "55 Pine Ave, Monroe"},
        ],
    )
    def test_no_substring_matches(self, record):
        assert not matches_region(record)

    def test_state_field(self):
        assert matches_region({"state": "Louisiana"})

    def test_custom_codes(self, prospect_job):
        assert matches_region(prospect_job, ["kansas"])
        assert not matches_region(prospect_job, [])


class TestClassify:
    """Test cases for classify."""

    def test_salesrabbit_is_door_knock(self):
        classification = classify({"lead_source": "SalesRabbit"})
        assert classification.is_door_knock
        assert not classification.is_company_lead

    def test_referral_is_company_lead(self):
        classification = classify({"lead_source": "Customer Referral"})
        assert not classification.is_door_knock
        assert classification.is_company_lead

    def test_missing_source_is_company_lead(self):
        assert classify({"id": 1}).is_company_lead

    @pytest.mark.parametrize("source", ["Door Knocking", "door knock", "Canvassing", "KNOCKS"])
    def test_door_knock_vocabulary(self, source):
        assert is_door_knock_source(source)

    def test_closed_job_is_not_backlog(self, approved_job):
        classification = classify(approved_job)

        assert classification.is_approved
        assert not classification.in_backlog
        assert classification.status == "Closed"

    def test_build_next_week_is_backlog(self, build_next_week_job):
        classification = classify(build_next_week_job)

        assert classification.is_approved
        assert classification.in_backlog

    def test_terminal_date_ends_backlog(self, build_next_week_job):
        build_next_week_job["date_deleted"] = "09/01/2025 9:00AM"
        assert not classify(build_next_week_job).in_backlog

    def test_prospect(self, prospect_job):
        classification = classify(prospect_job)

        assert not classification.region_match
        assert not classification.is_approved
        assert not classification.is_verified
        assert classification.is_door_knock
        assert classification.lead_source == "SalesRabbit"
        assert classification.sales_rep == "Lisa Wilson"

    def test_verified_lead(self, prospect_job):
        prospect_job["pipeline"]["verify_lead"]["complete"] = True
        assert classify(prospect_job).is_verified

    def test_approved_without_amount_is_estimated(self, approved_job):
        classification = classify(approved_job)

        assert classification.revenue_estimated
        assert classification.revenue == 27500.0

    def test_approved_with_amount(self, approved_job):
        approved_job["estimate_total"] = "$18,250.00"
        classification = classify(approved_job)

        assert not classification.revenue_estimated
        assert classification.revenue == 18250.0

    def test_unapproved_has_no_revenue(self, prospect_job):
        prospect_job["amount"] = 5000
        assert classify(prospect_job).revenue == 0.0

    def test_revenue_estimates_by_job_type(self):
        assert estimate_revenue({"job_type": "r"}, region_match=False) == 15000.0
        assert estimate_revenue({"job_type": "x"}, region_match=False) == 20000.0
        assert estimate_revenue({"job_type": "r"}, region_match=True) == 16500.0

    def test_claim_from_source(self, approved_job):
        classification = classify(approved_job, source="/light/claims/")

        assert classification.is_claim
        assert not classification.is_approved
        assert not classification.is_door_knock
        assert not classification.is_company_lead
        assert classification.revenue == 0.0

    def test_claim_fields(self):
        classification = classify({"claim_number": "C-1", "claim_status": "Approved"})

        assert classification.is_claim
        assert classification.claim_approved

    def test_pending_claim(self):
        assert not classify({"claim_number": "C-2", "claim_status": "Pending"}).claim_approved
