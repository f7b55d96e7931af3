"""Connection lifecycle for the RoofLink MCP server."""

from datetime import UTC, datetime
from typing import Any

from rooflink_dashboard.config import DashboardSettings
from rooflink_dashboard.exceptions import NotConnectedError, TransportError
from rooflink_dashboard.mcp.codec import TransportCodec
from rooflink_dashboard.mcp.constants import API_KEY_HEADER, MCPMethod
from rooflink_dashboard.mcp.schemas import ConnectionState
from rooflink_dashboard.utils.logger import logger


class ConnectionManager:
    """Tracks the single logical connection of a client.

    ``connect`` runs the ``initialize`` handshake and only marks the
    connection live when it succeeds. The API key is kept here so it survives
    reconnects; it is attached to business calls only, never to handshakes.
    """

    def __init__(self, codec: TransportCodec, settings: DashboardSettings) -> None:
        self.codec = codec
        self.settings = settings
        self._state: ConnectionState | None = None
        self._credential: str | None = settings.api_key

    def initialize_params(self) -> dict[str, Any]:
        return {
            "protocolVersion": self.settings.protocol_version,
            "capabilities": {"tools": {}},
            "clientInfo": {
                "name": self.settings.client_name,
                "version": self.settings.client_version,
            },
        }

    async def handshake(self) -> dict[str, Any]:
        """
        Run the initialize call and return the server's result object.

        Raises:
            TransportError: If the handshake fails
        """
        envelope = await self.codec.send(
            MCPMethod.INITIALIZE.value, self.initialize_params()
        )
        return envelope.result or {}

    async def connect(self) -> bool:
        """
        Connect (or reconnect) to the MCP server.

        Returns:
            bool: True if the handshake succeeded
        """
        logger.info("Connecting to RoofLink MCP server", mcp_url=self.codec.endpoint_url)
        try:
            server_info = await self.handshake()
        except TransportError as e:
            logger.error(
                "Failed to connect to MCP server",
                mcp_url=self.codec.endpoint_url,
                error=str(e),
            )
            self._state = None
            return False

        try:
            await self.codec.notify(MCPMethod.INITIALIZED.value)
        except TransportError as e:
            logger.warning("initialized notification was not accepted", error=str(e))

        self._state = ConnectionState(
            connected=True,
            endpoint_url=self.codec.endpoint_url,
            credential=self._credential,
            last_connected_at=datetime.now(UTC),
            server_info=server_info,
        )
        logger.info(
            "Connected to RoofLink MCP server",
            server_name=server_info.get("serverInfo", {}).get("name"),
            protocol_version=server_info.get("protocolVersion"),
        )
        return True

    def disconnect(self) -> None:
        """Clear connection state. Safe to call when already disconnected."""
        self._state = None
        logger.info("Disconnected from RoofLink MCP server")

    def status(self) -> ConnectionState | None:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is not None and self._state.connected

    def require_connection(self) -> ConnectionState:
        """
        Return the live connection state.

        Raises:
            NotConnectedError: If no handshake has succeeded
        """
        if not self.is_connected:
            raise NotConnectedError()
        return self._state

    def set_api_key(self, api_key: str | None) -> None:
        """Set the business API key used on every subsequent business call."""
        self._credential = api_key or None
        if self._state is not None:
            self._state = self._state.model_copy(update={"credential": self._credential})
        logger.info("API key updated", has_api_key=self._credential is not None)

    @property
    def api_key(self) -> str | None:
        return self._credential

    def business_headers(self) -> dict[str, str]:
        """Headers for calls that reach the business API."""
        if not self._credential:
            return {}
        return {API_KEY_HEADER: self._credential}
