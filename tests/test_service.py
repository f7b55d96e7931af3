"""Tests for the dashboard metrics service."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, call, patch

import pytest

from rooflink_dashboard.constants import InvocationStatus
from rooflink_dashboard.dependencies import create_client, create_dashboard_service
from rooflink_dashboard.metrics.schemas import DateWindow
from rooflink_dashboard.service import DashboardMetricsService
from tests.fakes import DEFAULT_TOOLS, FakeMCPServer, paginated, text_result

OCTOBER = DateWindow(start_date=date(2026, 10, 1), end_date=date(2026, 10, 31), label="October 2026")


@pytest.fixture
async def service(settings, server):
    dashboard_service = create_dashboard_service(settings, transport=server.transport)
    yield dashboard_service
    await dashboard_service.client.aclose()


class TestDashboardMetricsService:
    """Test cases for DashboardMetricsService.refresh."""

    @pytest.mark.asyncio
    async def test_end_to_end_cycle(self, service, server):
        snapshot = await service.refresh(OCTOBER)

        metrics = snapshot.metrics
        assert metrics.approved_count == 1
        assert metrics.backlog_count == 0
        assert metrics.door_knock_lead_count == 1
        assert metrics.verified_count == 0
        assert metrics.records_seen == 2
        assert metrics.region_matched_count == 1
        assert metrics.estimated_revenue_total == 27500.0
        assert metrics.window == OCTOBER
        assert metrics.region == "Monroe, LA"

        assert not snapshot.degraded
        assert snapshot.summary.total_sources == 4
        assert snapshot.summary.successful == 4
        assert snapshot.summary.total_records == 2
        assert [source.name for source in snapshot.sources] == service.settings.metric_paths
        assert service.last_snapshot is snapshot

        assert server.methods()[:3] == ["initialize", "notifications/initialized", "tools/list"]
        assert server.methods().count("tools/call") == 4

    @pytest.mark.asyncio
    async def test_default_window_is_today(self, service):
        snapshot = await service.refresh()
        assert snapshot.metrics.window.label == "Today"

    @pytest.mark.asyncio
    async def test_refresh_reuses_connection(self, service, server):
        await service.refresh(OCTOBER)
        await service.refresh(OCTOBER)

        assert server.methods().count("initialize") == 1

    @pytest.mark.asyncio
    async def test_cycles_are_not_merged(self, service):
        first = await service.refresh(OCTOBER)
        second = await service.refresh(OCTOBER)

        assert second.metrics.approved_count == first.metrics.approved_count == 1
        assert service.last_snapshot is second

    @pytest.mark.asyncio
    async def test_degraded_source_is_reported(self, service, server):
        server.fail("/light/jobs/prospect/", 500)

        snapshot = await service.refresh(OCTOBER)

        assert snapshot.degraded
        assert snapshot.summary.degraded == 1
        prospect = next(s for s in snapshot.sources if s.name == "/light/jobs/prospect/")
        assert prospect.status == InvocationStatus.DEGRADED
        assert prospect.record_count == 0
        assert "http_failure" in prospect.error
        assert snapshot.metrics.approved_count == 1
        assert snapshot.metrics.records_seen == 1

    @pytest.mark.asyncio
    async def test_unreachable_server_yields_empty_metrics(self, service, server):
        server.fail("initialize", 503)

        snapshot = await service.refresh(OCTOBER)

        assert snapshot.degraded
        assert snapshot.catalog.degraded
        assert snapshot.summary.successful == 0
        assert snapshot.metrics.records_seen == 0
        assert snapshot.metrics.lead_conversion_percentage == 0.0

    @pytest.mark.asyncio
    async def test_metric_tools_are_invoked(self, settings):
        claim = {"claim_number": "C-1", "claim_status": "Approved", "state": "LA"}
        server = FakeMCPServer(
            tools=DEFAULT_TOOLS + [{"name": "get_claims", "description": "Insurance claims"}],
            tool_results={"get_claims": text_result(paginated([claim]))},
        )
        service = create_dashboard_service(settings, transport=server.transport)
        try:
            snapshot = await service.refresh(OCTOBER)
        finally:
            await service.client.aclose()

        tool_report = snapshot.sources[-1]
        assert tool_report.name == "get_claims"
        assert tool_report.kind == "tool"
        assert snapshot.metrics.claims_filed_count == 1
        assert snapshot.metrics.claims_approved_count == 1
        assert snapshot.metrics.total_leads == 0

    @pytest.mark.asyncio
    async def test_calls_are_spaced_by_configured_delays(self, settings):
        settings = settings.model_copy(update={"business_call_delay": 0.2, "tool_call_delay": 0.1})
        server = FakeMCPServer(
            tools=DEFAULT_TOOLS + [{"name": "get_leads"}],
            tool_results={"get_leads": text_result(paginated([]))},
        )
        service = DashboardMetricsService(create_client(settings, transport=server.transport))

        with patch("rooflink_dashboard.service.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await service.refresh(OCTOBER)
        await service.client.aclose()

        delays = [c for c in sleep.await_args_list if c != call(0)]
        assert delays == [call(0.2), call(0.2), call(0.2), call(0.1)]

    @pytest.mark.asyncio
    async def test_concurrent_refresh_is_ignored(self, service):
        gate = asyncio.Event()
        list_tools = service.client.list_tools

        async def slow_list_tools():
            await gate.wait()
            return await list_tools()

        service.client.list_tools = slow_list_tools

        first = asyncio.create_task(service.refresh(OCTOBER))
        await asyncio.sleep(0)

        assert service.is_refreshing
        assert await service.refresh(OCTOBER) is None

        gate.set()
        snapshot = await first

        assert snapshot is not None
        assert not service.is_refreshing
        assert service.last_snapshot is snapshot

    @pytest.mark.asyncio
    async def test_include_all_regions(self, settings, server):
        service = create_dashboard_service(
            settings, transport=server.transport, include_all_regions=True
        )
        try:
            snapshot = await service.refresh(OCTOBER)
        finally:
            await service.client.aclose()

        assert snapshot.metrics.include_all_regions
        assert snapshot.metrics.door_knock_lead_count == 2
        assert snapshot.metrics.region_matched_count == 1
