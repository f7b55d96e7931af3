"""Custom exception classes for the RoofLink dashboard core."""

from rooflink_dashboard.constants import TransportErrorKind


class RoofLinkError(Exception):
    """Base exception for all RoofLink dashboard errors."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        """Initialize RoofLinkError.

        Args:
            message: Error message
            error_code: Optional machine-readable code (e.g., "NOT_CONNECTED")
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class NotConnectedError(RoofLinkError):
    """Raised when an operation needs an established MCP connection."""

    def __init__(self, message: str = "Not connected to MCP server") -> None:
        super().__init__(message, "NOT_CONNECTED")


class DiscoveryError(RoofLinkError):
    """Raised when server discovery fails and no fallback applies."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, "DISCOVERY_FAILED")
        self.original_error = original_error


class TransportError(RoofLinkError):
    """Base exception for failures while exchanging an RPC envelope."""

    kind: TransportErrorKind = TransportErrorKind.CONNECTION_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message, self.kind.value.upper())

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.kind.value}: {self.message}"


class HttpFailureError(TransportError):
    """Exception raised for non-2xx HTTP responses."""

    kind = TransportErrorKind.HTTP_FAILURE

    def __init__(self, status_code: int, reason: str | None = None) -> None:
        message = f"HTTP {status_code}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.status_code = status_code


class ParseFailureError(TransportError):
    """Exception raised when a response body is neither JSON nor an event stream."""

    kind = TransportErrorKind.PARSE_FAILURE

    def __init__(self, message: str = "Response body could not be decoded", body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


class RemoteError(TransportError):
    """Exception raised when the envelope carries a JSON-RPC error object."""

    kind = TransportErrorKind.REMOTE_ERROR

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        return f"{self.kind.value} ({self.code}): {self.message}"


class ToolResultError(TransportError):
    """Exception raised when a tool ran but reported a business-level failure."""

    kind = TransportErrorKind.TOOL_RESULT_ERROR

    def __init__(self, tool_name: str, message: str) -> None:
        super().__init__(message)
        self.tool_name = tool_name


class TransportTimeoutError(TransportError):
    """Exception raised for request timeout errors."""

    kind = TransportErrorKind.TIMEOUT

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_duration: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_duration = timeout_duration


class TransportConnectionError(TransportError):
    """Exception raised when the server cannot be reached."""

    kind = TransportErrorKind.CONNECTION_FAILURE

    def __init__(
        self,
        message: str = "Failed to reach MCP server",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.original_error = original_error
