"""
Pydantic schemas for the MCP tool protocol.

This module contains the JSON-RPC envelopes, tool descriptors, connection
state and the tagged invocation result returned by the gateway.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rooflink_dashboard.constants import InvocationStatus, ToolAvailability
from rooflink_dashboard.mcp.constants import JSONRPC_VERSION

# ============================================================================
# JSON-RPC ENVELOPES
# ============================================================================


class RpcRequest(BaseModel):
    """JSON-RPC request envelope."""

    jsonrpc: str = Field(default=JSONRPC_VERSION, description="Protocol version tag")
    method: str = Field(..., description="Remote method name")
    params: dict[str, Any] = Field(default_factory=dict, description="Method parameters")
    id: int | None = Field(
        None, description="Correlation id; None for notifications"
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize the envelope, leaving out the id for notifications."""
        return self.model_dump(exclude_none=True)


class RpcError(BaseModel):
    """JSON-RPC error object."""

    model_config = ConfigDict(extra="allow")

    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    data: Any = Field(None, description="Optional error details")


class RpcResponse(BaseModel):
    """JSON-RPC response envelope."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: str = Field(default=JSONRPC_VERSION, description="Protocol version tag")
    id: int | str | None = Field(None, description="Echoed correlation id")
    result: dict[str, Any] | None = Field(None, description="Method result")
    error: RpcError | None = Field(None, description="Error object, if the call failed")


# ============================================================================
# TOOLS
# ============================================================================


class ToolDescriptor(BaseModel):
    """A named, remotely invocable operation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique tool name")
    description: str | None = Field(None, description="Human readable description")
    input_schema: dict[str, Any] | None = Field(
        None, description="JSON schema of the tool arguments"
    )
    availability: ToolAvailability = Field(
        default=ToolAvailability.AVAILABLE, description="Whether the tool can be called"
    )


class ToolCatalog(BaseModel):
    """Result of a discovery call."""

    tools: list[ToolDescriptor] = Field(..., description="Discovered tools")
    degraded: bool = Field(
        ..., description="True when the list is the static fallback, not server data"
    )
    reason: str | None = Field(None, description="Why discovery degraded")

    def names(self) -> list[str]:
        return [tool.name for tool in self.tools]

    def get(self, name: str) -> ToolDescriptor | None:
        return next((tool for tool in self.tools if tool.name == name), None)


# ============================================================================
# CONNECTION
# ============================================================================


class ConnectionState(BaseModel):
    """State of the single logical MCP connection held by a client."""

    connected: bool = Field(..., description="Whether the last handshake succeeded")
    endpoint_url: str = Field(..., description="MCP endpoint URL")
    credential: str | None = Field(None, description="Business API key, if set")
    last_connected_at: datetime | None = Field(
        None, description="Time of the last successful handshake (UTC)"
    )
    server_info: dict[str, Any] | None = Field(
        None, description="initialize result of the last successful handshake"
    )


# ============================================================================
# INVOCATION
# ============================================================================


class InvocationResult(BaseModel):
    """Tagged result of a tool or business path invocation.

    ``status`` is required: callers branch on it instead of inspecting the
    payload. ``data`` is always present; for degraded results it holds the
    mock payload built by the gateway.
    """

    status: InvocationStatus = Field(..., description="ok, degraded or error")
    endpoint: str = Field(..., description="Tool name or business path invoked")
    data: Any = Field(..., description="Tool result or mock payload")
    error: str | None = Field(None, description="Diagnostic message for failures")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the call settled"
    )
    elapsed_ms: float = Field(default=0.0, description="Wall time of the call")

    @property
    def mock(self) -> bool:
        return self.status != InvocationStatus.OK

    @property
    def is_trustworthy(self) -> bool:
        return self.status == InvocationStatus.OK
