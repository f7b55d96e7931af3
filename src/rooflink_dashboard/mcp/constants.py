"""MCP protocol constants."""

from enum import Enum

JSONRPC_VERSION = "2.0"

# Sent on every protocol call; servers may answer with either media type
REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json, text/event-stream",
}

API_KEY_HEADER = "X-API-KEY"

EXECUTE_REQUEST_TOOL = "execute-request"

EVENT_STREAM_DATA_PREFIX = "data: "


class MCPMethod(str, Enum):
    """JSON-RPC methods used by the dashboard."""

    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"


class MediaType(str, Enum):
    """Response media types the codec knows how to decode."""

    JSON = "application/json"
    EVENT_STREAM = "text/event-stream"


# Well-known RoofLink MCP tools, served when tools/list cannot be reached
FALLBACK_TOOLS: tuple[tuple[str, str], ...] = (
    ("list-endpoints", "Lists all API paths and their HTTP methods"),
    ("get-endpoint", "Gets detailed information about a specific API endpoint"),
    (EXECUTE_REQUEST_TOOL, "Executes an API request with given HAR"),
    ("search-specs", "Searches paths, operations, and schemas"),
    ("get-code-snippet", "Gets a code snippet for a specific API endpoint"),
)

# Tool names that hint at metric data when a server exposes them directly
METRIC_TOOL_KEYWORDS: tuple[str, ...] = (
    "jobs",
    "approved",
    "prospect",
    "lead",
    "claim",
)
