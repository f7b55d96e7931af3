"""
Pluggable transports for reaching the RoofLink business API.

Both transports return the same shape, the ``tools/call`` result of the
``execute-request`` tool (``{"content": [{"type": "text", "text": ...}]}``),
so extraction downstream does not depend on how the data was fetched.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

import httpx

from rooflink_dashboard.exceptions import (
    HttpFailureError,
    TransportConnectionError,
    TransportTimeoutError,
)
from rooflink_dashboard.mcp.codec import JsonDecoder, TransportCodec
from rooflink_dashboard.mcp.connection import ConnectionManager
from rooflink_dashboard.mcp.constants import EXECUTE_REQUEST_TOOL, MediaType
from rooflink_dashboard.utils.logger import logger


class BusinessTransport(ABC):
    """Fetches a business API path and returns a tool-shaped result."""

    # Whether the MCP handshake must have succeeded before fetching
    requires_connection: bool = True

    def __init__(self, connection: ConnectionManager, base_url: str) -> None:
        self.connection = connection
        self.base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    @abstractmethod
    async def fetch(self, path: str) -> dict[str, Any]:
        """
        Fetch a business path.

        Args:
            path: API path relative to the business base URL

        Returns:
            dict: Tool result with the response body as text content

        Raises:
            TransportError: If the call fails
        """
        pass


class ToolBackedTransport(BusinessTransport):
    """Reaches the business API through the ``execute-request`` MCP tool."""

    requires_connection = True

    def __init__(
        self, codec: TransportCodec, connection: ConnectionManager, base_url: str
    ) -> None:
        super().__init__(connection, base_url)
        self.codec = codec

    def build_har_request(self, path: str) -> dict[str, Any]:
        """HAR request the execute-request tool replays against the API."""
        return {
            "method": "get",
            "url": self.url_for(path),
            "headers": [
                {"name": name, "value": value}
                for name, value in self.connection.business_headers().items()
            ],
        }

    async def fetch(self, path: str) -> dict[str, Any]:
        har_request = self.build_har_request(path)
        logger.debug("Executing business request via MCP", url=har_request["url"])
        return await self.codec.call_tool(
            EXECUTE_REQUEST_TOOL, {"harRequest": har_request}
        )


class DirectTransport(BusinessTransport):
    """Calls the business API over HTTPS, bypassing the MCP server."""

    requires_connection = False

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        connection: ConnectionManager,
        base_url: str,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(connection, base_url)
        self.http_client = http_client
        self.timeout = timeout

    async def fetch(self, path: str) -> dict[str, Any]:
        url = self.url_for(path)
        logger.debug("Executing business request directly", url=url)
        try:
            response = await self.http_client.get(
                url,
                headers={"Accept": MediaType.JSON.value, **self.connection.business_headers()},
                timeout=httpx.Timeout(self.timeout),
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"GET {path} timed out after {self.timeout}s",
                timeout_duration=self.timeout,
            ) from e
        except httpx.RequestError as e:
            raise TransportConnectionError(f"Request error: {e}", original_error=e) from e

        if not response.is_success:
            raise HttpFailureError(response.status_code, response.reason_phrase)

        body = JsonDecoder().decode(response.text)
        return {"content": [{"type": "text", "text": json.dumps(body)}]}
