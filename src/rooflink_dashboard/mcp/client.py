"""RoofLink MCP client: wires the codec, connection, discovery and gateway."""

from typing import Any

import httpx

from rooflink_dashboard.config import DashboardSettings, get_dashboard_settings
from rooflink_dashboard.constants import TransportMode
from rooflink_dashboard.mcp.codec import TransportCodec
from rooflink_dashboard.mcp.connection import ConnectionManager
from rooflink_dashboard.mcp.discovery import ToolDiscoveryService
from rooflink_dashboard.mcp.gateway import ToolInvocationGateway
from rooflink_dashboard.mcp.schemas import ConnectionState, InvocationResult, ToolCatalog
from rooflink_dashboard.mcp.transports import (
    BusinessTransport,
    DirectTransport,
    ToolBackedTransport,
)
from rooflink_dashboard.utils.logger import logger


class RoofLinkMCPClient:
    """Async client for the RoofLink MCP server.

    Each instance holds its own connection state and HTTP client, so several
    clients (e.g. one per test) never share state. Use it as an async context
    manager or call ``aclose()`` when done.
    """

    def __init__(
        self,
        settings: DashboardSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Dashboard settings; loaded from the environment when omitted
            transport: Optional httpx transport (e.g. ``httpx.MockTransport`` in tests)
        """
        self.settings = settings or get_dashboard_settings()
        self.http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.request_timeout),
            transport=transport,
        )

        self.codec = TransportCodec(
            self.http_client,
            self.settings.mcp_url,
            timeout=self.settings.request_timeout,
        )
        self.connection = ConnectionManager(self.codec, self.settings)
        self.discovery = ToolDiscoveryService(self.codec, self.connection)
        self.business_transport = self._create_business_transport()
        self.gateway = ToolInvocationGateway(
            self.codec, self.connection, self.business_transport, self.settings
        )

        logger.info(
            "RoofLinkMCPClient initialized",
            mcp_url=self.settings.mcp_url,
            transport_mode=self.settings.transport_mode.value,
        )

    def _create_business_transport(self) -> BusinessTransport:
        if self.settings.transport_mode == TransportMode.DIRECT:
            return DirectTransport(
                self.http_client,
                self.connection,
                self.settings.business_api_base_url,
                timeout=self.settings.request_timeout,
            )
        return ToolBackedTransport(
            self.codec, self.connection, self.settings.business_api_base_url
        )

    async def __aenter__(self) -> "RoofLinkMCPClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Disconnect and close the HTTP client."""
        self.connection.disconnect()
        await self.http_client.aclose()

    # Connection

    async def connect(self) -> bool:
        return await self.connection.connect()

    def disconnect(self) -> None:
        self.connection.disconnect()

    def status(self) -> ConnectionState | None:
        return self.connection.status()

    @property
    def is_connected(self) -> bool:
        return self.connection.is_connected

    def set_api_key(self, api_key: str | None) -> None:
        self.connection.set_api_key(api_key)

    # Discovery

    async def list_tools(self) -> ToolCatalog:
        return await self.discovery.list_tools()

    async def get_server_info(self) -> dict[str, Any]:
        return await self.discovery.get_server_info()

    # Invocation

    async def invoke(
        self, tool_name: str, arguments: dict[str, Any] | None = None
    ) -> InvocationResult:
        return await self.gateway.invoke(tool_name, arguments)

    async def invoke_business_path(self, path: str) -> InvocationResult:
        return await self.gateway.invoke_business_path(path)
