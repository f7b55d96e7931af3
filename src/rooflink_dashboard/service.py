"""
Dashboard metrics service.

Runs one fetch cycle against the RoofLink MCP server: discover tools, fetch
every metric source one at a time, then extract, classify and fold the
records into a ``DashboardSnapshot``.
"""

import asyncio
import json

from rooflink_dashboard.config import DashboardSettings
from rooflink_dashboard.constants import InvocationStatus
from rooflink_dashboard.mcp.client import RoofLinkMCPClient
from rooflink_dashboard.mcp.discovery import select_metric_tools
from rooflink_dashboard.mcp.schemas import InvocationResult
from rooflink_dashboard.metrics.aggregator import create_accumulator, fold
from rooflink_dashboard.metrics.classifier import classify
from rooflink_dashboard.metrics.extractor import extract_records
from rooflink_dashboard.metrics.schemas import DateWindow, MetricsAccumulator
from rooflink_dashboard.metrics.windows import date_window_for
from rooflink_dashboard.schemas import CollectionSummary, DashboardSnapshot, SourceReport
from rooflink_dashboard.utils.logger import logger

BUSINESS_PATH_SOURCE = "business_path"
TOOL_SOURCE = "tool"


def _data_size(data: object) -> int:
    try:
        return len(json.dumps(data, default=str).encode("utf-8"))
    except (TypeError, ValueError):
        return 0


class DashboardMetricsService:
    """Service class for dashboard refresh cycles."""

    def __init__(
        self,
        client: RoofLinkMCPClient,
        settings: DashboardSettings | None = None,
        include_all_regions: bool = False,
    ):
        """
        Initialize the dashboard service.

        Args:
            client: MCP client used for every call of a cycle
            settings: Dashboard settings; defaults to the client's settings
            include_all_regions: Count records outside the target region too
        """
        self.client = client
        self.settings = settings or client.settings
        self.include_all_regions = include_all_regions
        self.last_snapshot: DashboardSnapshot | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def is_refreshing(self) -> bool:
        return self._refresh_lock.locked()

    async def refresh(self, window: DateWindow | None = None) -> DashboardSnapshot | None:
        """
        Run one fetch cycle and store its snapshot.

        A refresh requested while another is running is ignored.

        Args:
            window: Reporting window; defaults to today

        Returns:
            DashboardSnapshot, or None if a refresh was already running
        """
        if self._refresh_lock.locked():
            logger.info("Refresh already in progress, ignoring request")
            return None

        async with self._refresh_lock:
            window = window or date_window_for()
            logger.info("Starting dashboard refresh", window_label=window.label)

            if not self.client.is_connected:
                await self.client.connect()

            catalog = await self.client.list_tools()
            metric_tools = select_metric_tools(catalog)

            accumulator = create_accumulator(
                window, self.settings.region_label, self.include_all_regions
            )
            reports: list[SourceReport] = []
            first_call = True

            for path in self.settings.metric_paths:
                if not first_call:
                    await asyncio.sleep(self.settings.business_call_delay)
                first_call = False
                result = await self.client.invoke_business_path(path)
                accumulator = self._absorb(accumulator, path, result, reports, BUSINESS_PATH_SOURCE)

            for tool_name in metric_tools:
                if not first_call:
                    await asyncio.sleep(self.settings.tool_call_delay)
                first_call = False
                result = await self.client.invoke(tool_name, {})
                accumulator = self._absorb(accumulator, tool_name, result, reports, TOOL_SOURCE)

            summary = CollectionSummary.from_reports(reports)
            snapshot = DashboardSnapshot(
                metrics=accumulator,
                catalog=catalog,
                sources=reports,
                summary=summary,
                degraded=catalog.degraded
                or any(report.status != InvocationStatus.OK for report in reports),
            )
            self.last_snapshot = snapshot

            logger.info(
                "Dashboard refresh complete",
                sources=summary.total_sources,
                successful=summary.successful,
                records=summary.total_records,
                contracts_signed=accumulator.approved_count,
                degraded=snapshot.degraded,
            )
            return snapshot

    def _absorb(
        self,
        accumulator: MetricsAccumulator,
        source: str,
        result: InvocationResult,
        reports: list[SourceReport],
        kind: str,
    ) -> MetricsAccumulator:
        records = extract_records(result)
        for record in records:
            accumulator = fold(
                accumulator,
                classify(record, source=source, region_codes=self.settings.region_codes),
            )

        reports.append(
            SourceReport(
                name=source,
                kind=kind,
                status=result.status,
                record_count=len(records),
                elapsed_ms=result.elapsed_ms,
                data_size=_data_size(result.data),
                error=result.error,
            )
        )
        if result.status != InvocationStatus.OK:
            logger.warning("Source degraded", source=source, error=result.error)
        else:
            logger.info("Fetched source", source=source, record_count=len(records))
        return accumulator
