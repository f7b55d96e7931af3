"""Tool discovery for the RoofLink MCP server."""

from typing import Any

from pydantic import ValidationError

from rooflink_dashboard.constants import ToolAvailability
from rooflink_dashboard.exceptions import DiscoveryError, NotConnectedError, TransportError
from rooflink_dashboard.mcp.codec import TransportCodec
from rooflink_dashboard.mcp.connection import ConnectionManager
from rooflink_dashboard.mcp.constants import (
    FALLBACK_TOOLS,
    METRIC_TOOL_KEYWORDS,
    MCPMethod,
)
from rooflink_dashboard.mcp.schemas import ToolCatalog, ToolDescriptor
from rooflink_dashboard.utils.logger import logger


def fallback_catalog(reason: str) -> ToolCatalog:
    """Static list of well-known tools, flagged as degraded."""
    return ToolCatalog(
        tools=[
            ToolDescriptor(
                name=name,
                description=description,
                availability=ToolAvailability.AVAILABLE,
            )
            for name, description in FALLBACK_TOOLS
        ],
        degraded=True,
        reason=reason,
    )


def _to_descriptor(tool: dict[str, Any]) -> ToolDescriptor:
    return ToolDescriptor(
        name=tool["name"],
        description=tool.get("description"),
        input_schema=tool.get("inputSchema"),
        availability=ToolAvailability.AVAILABLE,
    )


def select_metric_tools(catalog: ToolCatalog) -> list[str]:
    """
    Names of discovered tools that look like metric sources.

    A degraded catalog holds only the generic fallback tools, so it never
    yields metric sources.

    Args:
        catalog: Result of a discovery call

    Returns:
        Tool names mentioning jobs, leads or claims, in catalog order
    """
    if catalog.degraded:
        return []
    return [
        tool.name
        for tool in catalog.tools
        if tool.availability == ToolAvailability.AVAILABLE
        and any(keyword in tool.name.lower() for keyword in METRIC_TOOL_KEYWORDS)
    ]


class ToolDiscoveryService:
    """Lists the server's tools and fetches its handshake info."""

    def __init__(self, codec: TransportCodec, connection: ConnectionManager) -> None:
        self.codec = codec
        self.connection = connection

    async def list_tools(self) -> ToolCatalog:
        """
        Get the tools the server exposes.

        Never raises: when the server cannot be asked, the static fallback
        catalog is returned with ``degraded=True``.

        Returns:
            ToolCatalog: Discovered or fallback tools
        """
        try:
            self.connection.require_connection()
            envelope = await self.codec.send(MCPMethod.TOOLS_LIST.value, {})
            tools = (envelope.result or {}).get("tools")
            if not isinstance(tools, list):
                raise DiscoveryError("tools/list result carried no tools array")

            catalog = ToolCatalog(
                tools=[_to_descriptor(tool) for tool in tools if isinstance(tool, dict)],
                degraded=False,
            )
            logger.info("Discovered MCP tools", count=len(catalog.tools))
            return catalog

        except (NotConnectedError, TransportError, DiscoveryError) as e:
            reason = str(e)
        except (KeyError, ValidationError) as e:
            reason = f"Malformed tool descriptor: {e}"

        logger.warning("Tool discovery degraded, using fallback tools", reason=reason)
        return fallback_catalog(reason)

    async def get_server_info(self) -> dict[str, Any]:
        """
        Run the initialize handshake and return the server's result.

        Returns:
            dict: initialize result (protocolVersion, capabilities, serverInfo)

        Raises:
            DiscoveryError: If not connected or the handshake fails
        """
        try:
            self.connection.require_connection()
            return await self.connection.handshake()
        except (NotConnectedError, TransportError) as e:
            logger.error("Error getting server info", error=str(e))
            raise DiscoveryError(f"Failed to get server info: {e}", original_error=e) from e
