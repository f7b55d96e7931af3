"""MCP tool protocol client for the RoofLink business API."""

from rooflink_dashboard.mcp.client import RoofLinkMCPClient
from rooflink_dashboard.mcp.codec import EventStreamDecoder, JsonDecoder, TransportCodec
from rooflink_dashboard.mcp.connection import ConnectionManager
from rooflink_dashboard.mcp.discovery import ToolDiscoveryService
from rooflink_dashboard.mcp.gateway import ToolInvocationGateway
from rooflink_dashboard.mcp.schemas import (
    ConnectionState,
    InvocationResult,
    RpcError,
    RpcRequest,
    RpcResponse,
    ToolCatalog,
    ToolDescriptor,
)

__all__ = [
    "ConnectionManager",
    "ConnectionState",
    "EventStreamDecoder",
    "InvocationResult",
    "JsonDecoder",
    "RoofLinkMCPClient",
    "RpcError",
    "RpcRequest",
    "RpcResponse",
    "ToolCatalog",
    "ToolDescriptor",
    "ToolDiscoveryService",
    "ToolInvocationGateway",
    "TransportCodec",
]
