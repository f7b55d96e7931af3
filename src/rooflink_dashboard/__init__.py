"""RoofLink dashboard metrics core: MCP client and metrics pipeline."""

from rooflink_dashboard.config import DashboardSettings, get_dashboard_settings
from rooflink_dashboard.dependencies import create_client, create_dashboard_service
from rooflink_dashboard.mcp.client import RoofLinkMCPClient
from rooflink_dashboard.schemas import CollectionSummary, DashboardSnapshot, SourceReport
from rooflink_dashboard.service import DashboardMetricsService

__all__ = [
    "CollectionSummary",
    "DashboardMetricsService",
    "DashboardSettings",
    "DashboardSnapshot",
    "RoofLinkMCPClient",
    "SourceReport",
    "create_client",
    "create_dashboard_service",
    "get_dashboard_settings",
]
