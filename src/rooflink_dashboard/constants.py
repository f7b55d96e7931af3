"""
Dashboard-wide constants and enums.

This module contains the enums shared by the MCP client, the metrics
pipeline and the dashboard service.
"""

from enum import Enum


class TransportMode(str, Enum):
    """How business API paths are fetched."""

    MCP = "mcp"
    DIRECT = "direct"


class TransportErrorKind(str, Enum):
    """Failure kinds surfaced by the transport codec."""

    HTTP_FAILURE = "http_failure"
    PARSE_FAILURE = "parse_failure"
    REMOTE_ERROR = "remote_error"
    TOOL_RESULT_ERROR = "tool_result_error"
    TIMEOUT = "timeout"
    CONNECTION_FAILURE = "connection_failure"


class InvocationStatus(str, Enum):
    """Outcome of a gateway invocation."""

    OK = "ok"
    DEGRADED = "degraded"
    ERROR = "error"


class ToolAvailability(str, Enum):
    """Availability of a discovered tool."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class DateRangeType(str, Enum):
    """Reporting window presets."""

    TODAY = "today"
    CURRENT_WEEK = "current_week"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"
