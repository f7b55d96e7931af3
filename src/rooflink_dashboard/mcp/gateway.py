"""
Tool invocation gateway.

The gateway is the boundary where failures stop propagating. Every call
returns an ``InvocationResult``; failures come back as ``degraded`` results
carrying a deterministic mock payload and the diagnostic message, so callers
never need a try/except around an invocation.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

from rooflink_dashboard.config import DashboardSettings
from rooflink_dashboard.constants import InvocationStatus
from rooflink_dashboard.exceptions import NotConnectedError, RoofLinkError
from rooflink_dashboard.mcp.codec import TransportCodec
from rooflink_dashboard.mcp.connection import ConnectionManager
from rooflink_dashboard.mcp.schemas import InvocationResult
from rooflink_dashboard.mcp.transports import BusinessTransport
from rooflink_dashboard.utils.logger import logger


def build_mock_payload(endpoint: str, error: str) -> dict[str, Any]:
    """Mock payload substituted for a failed invocation.

    It carries no records (``sampleItems`` is empty) so degraded data can
    never inflate metrics.
    """
    return {
        "mock": True,
        "message": f"Mock data for {endpoint}",
        "error": error,
        "sampleItems": [],
    }


class ToolInvocationGateway:
    """Invokes tools and business paths without ever raising."""

    def __init__(
        self,
        codec: TransportCodec,
        connection: ConnectionManager,
        business_transport: BusinessTransport,
        settings: DashboardSettings,
    ) -> None:
        self.codec = codec
        self.connection = connection
        self.business_transport = business_transport
        self.settings = settings

    async def invoke(
        self, tool_name: str, arguments: dict[str, Any] | None = None
    ) -> InvocationResult:
        """
        Invoke a named tool.

        Args:
            tool_name: Tool to call
            arguments: Tool arguments

        Returns:
            InvocationResult: ``ok`` with the tool result, or a degraded result
        """

        async def call() -> dict[str, Any]:
            self.connection.require_connection()
            return await self.codec.call_tool(tool_name, arguments)

        return await self._guarded(tool_name, call)

    async def invoke_business_path(self, path: str) -> InvocationResult:
        """
        Fetch a business API path through the configured transport.

        Args:
            path: API path, e.g. ``/light/jobs/approved/``

        Returns:
            InvocationResult: ``ok`` with the tool-shaped result, or a degraded result
        """

        async def call() -> dict[str, Any]:
            if self.business_transport.requires_connection:
                self.connection.require_connection()
            return await self.business_transport.fetch(path)

        return await self._guarded(path, call)

    async def _guarded(
        self, endpoint: str, call: Callable[[], Awaitable[dict[str, Any]]]
    ) -> InvocationResult:
        started = time.perf_counter()
        try:
            data = await call()
            if data is None:
                raise RoofLinkError(f"{endpoint} returned no result", "MISSING_RESULT")

        except NotConnectedError as e:
            return self._failed(endpoint, e.message, started)
        except RoofLinkError as e:
            logger.warning(
                "Invocation failed",
                endpoint=endpoint,
                error_code=e.error_code,
                error=str(e),
            )
            return self._failed(endpoint, str(e), started)
        except Exception as e:
            logger.exception("Unexpected error during invocation", endpoint=endpoint)
            return self._failed(endpoint, f"Unexpected error: {e}", started)

        logger.info("Invocation succeeded", endpoint=endpoint)
        return InvocationResult(
            status=InvocationStatus.OK,
            endpoint=endpoint,
            data=data,
            elapsed_ms=_elapsed_ms(started),
        )

    def _failed(self, endpoint: str, error: str, started: float) -> InvocationResult:
        if self.settings.mock_fallback_enabled:
            return InvocationResult(
                status=InvocationStatus.DEGRADED,
                endpoint=endpoint,
                data=build_mock_payload(endpoint, error),
                error=error,
                elapsed_ms=_elapsed_ms(started),
            )
        return InvocationResult(
            status=InvocationStatus.ERROR,
            endpoint=endpoint,
            data={},
            error=error,
            elapsed_ms=_elapsed_ms(started),
        )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
