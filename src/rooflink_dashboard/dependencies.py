"""
Composition root for the dashboard core.

Clients are constructed explicitly and owned by the caller; nothing here
is cached process-wide.
"""

import httpx

from rooflink_dashboard.config import DashboardSettings, get_dashboard_settings
from rooflink_dashboard.mcp.client import RoofLinkMCPClient
from rooflink_dashboard.service import DashboardMetricsService


def create_client(
    settings: DashboardSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RoofLinkMCPClient:
    """
    Build an MCP client.

    Args:
        settings: Dashboard settings; the global settings when omitted
        transport: Optional httpx transport, e.g. a mock server in tests

    Returns:
        RoofLinkMCPClient: A new, unconnected client
    """
    return RoofLinkMCPClient(settings or get_dashboard_settings(), transport=transport)


def create_dashboard_service(
    settings: DashboardSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    include_all_regions: bool = False,
) -> DashboardMetricsService:
    """
    Build a dashboard service with its own client.

    The caller owns the client and should close it with
    ``await service.client.aclose()``.
    """
    settings = settings or get_dashboard_settings()
    return DashboardMetricsService(
        create_client(settings, transport),
        settings,
        include_all_regions=include_all_regions,
    )
