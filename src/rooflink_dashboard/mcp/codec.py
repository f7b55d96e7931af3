"""
Transport codec for the MCP JSON-RPC protocol.

Builds request envelopes, posts them over HTTP and decodes the response,
which the server may send either as a plain JSON document or as an event
stream of ``data: <json>`` lines.
"""

import itertools
import json
from typing import Any

import httpx
from pydantic import ValidationError

from rooflink_dashboard.exceptions import (
    HttpFailureError,
    ParseFailureError,
    RemoteError,
    ToolResultError,
    TransportConnectionError,
    TransportTimeoutError,
)
from rooflink_dashboard.mcp.constants import (
    EVENT_STREAM_DATA_PREFIX,
    REQUEST_HEADERS,
    MCPMethod,
    MediaType,
)
from rooflink_dashboard.mcp.schemas import RpcRequest, RpcResponse
from rooflink_dashboard.utils.logger import logger


class JsonDecoder:
    """Decodes a body holding a single JSON document."""

    media_type = MediaType.JSON

    def decode(self, body: str, correlation_id: int | None = None) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ParseFailureError(f"Invalid JSON body: {e}", body=body) from e


class EventStreamDecoder:
    """Decodes a ``text/event-stream`` body.

    Every event's ``data:`` lines are joined and parsed as JSON. The envelope
    whose ``id`` matches the request's correlation id wins; otherwise the last
    parseable envelope is returned. Unparseable events are skipped.
    """

    media_type = MediaType.EVENT_STREAM

    def _iter_event_payloads(self, body: str):
        data_lines: list[str] = []
        for line in body.splitlines():
            if not line.strip():
                if data_lines:
                    yield "\n".join(data_lines)
                    data_lines = []
                continue
            if line.startswith("data:"):
                payload = line[len("data:"):]
                data_lines.append(payload[1:] if payload.startswith(" ") else payload)
        if data_lines:
            yield "\n".join(data_lines)

    def decode(self, body: str, correlation_id: int | None = None) -> Any:
        envelopes: list[Any] = []
        for payload in self._iter_event_payloads(body):
            try:
                envelopes.append(json.loads(payload))
            except json.JSONDecodeError:
                logger.debug("Skipping unparseable event", preview=payload[:200])

        if not envelopes:
            raise ParseFailureError("Event stream carried no JSON payload", body=body)

        if correlation_id is not None:
            for envelope in envelopes:
                if isinstance(envelope, dict) and envelope.get("id") == correlation_id:
                    return envelope
        return envelopes[-1]


def select_decoder(content_type: str | None, body: str) -> JsonDecoder | EventStreamDecoder:
    """
    Pick the decoder for a response.

    The content type decides when the server sends a known one. Without it the
    body is sniffed for the event stream ``data: `` prefix.

    Args:
        content_type: Value of the Content-Type header, if any
        body: Raw response body

    Returns:
        The decoder to use
    """
    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type == MediaType.EVENT_STREAM.value:
        return EventStreamDecoder()
    if media_type == MediaType.JSON.value or media_type.endswith("+json"):
        return JsonDecoder()
    if EVENT_STREAM_DATA_PREFIX in body:
        return EventStreamDecoder()
    return JsonDecoder()


class TransportCodec:
    """Sends JSON-RPC envelopes to a single MCP endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint_url: str,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the codec.

        Args:
            http_client: Shared async HTTP client (owned by the caller)
            endpoint_url: MCP endpoint URL
            timeout: Per-call timeout in seconds
        """
        self.http_client = http_client
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._ids = itertools.count(1)

    def build_request(
        self, method: str, params: dict[str, Any] | None = None, notification: bool = False
    ) -> RpcRequest:
        """Build an envelope with the next correlation id (none for notifications)."""
        return RpcRequest(
            method=method,
            params=params or {},
            id=None if notification else next(self._ids),
        )

    async def _post(
        self, request: RpcRequest, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        try:
            response = await self.http_client.post(
                self.endpoint_url,
                json=request.to_wire(),
                headers={**REQUEST_HEADERS, **(headers or {})},
                timeout=httpx.Timeout(self.timeout),
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"{request.method} timed out after {self.timeout}s",
                timeout_duration=self.timeout,
            ) from e
        except httpx.RequestError as e:
            raise TransportConnectionError(f"Request error: {e}", original_error=e) from e

        if not response.is_success:
            raise HttpFailureError(response.status_code, response.reason_phrase)
        return response

    def decode_response(
        self,
        body: str,
        content_type: str | None = None,
        correlation_id: int | None = None,
    ) -> RpcResponse:
        """
        Decode a raw body into a response envelope.

        Raises:
            ParseFailureError: If the body is not a JSON-RPC envelope or answers
                another request
            RemoteError: If the envelope carries an error object
        """
        decoder = select_decoder(content_type, body)
        payload = decoder.decode(body, correlation_id)

        try:
            envelope = RpcResponse.model_validate(payload)
        except ValidationError as e:
            raise ParseFailureError(f"Invalid response envelope: {e}", body=body) from e

        # Servers answer unreadable requests with a null id
        if correlation_id is not None and envelope.id is not None and envelope.id != correlation_id:
            raise ParseFailureError(
                f"Response id {envelope.id!r} does not match request id {correlation_id}",
                body=body,
            )

        if envelope.error is not None:
            raise RemoteError(envelope.error.code, envelope.error.message)
        return envelope

    async def send(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> RpcResponse:
        """
        Send a request and return its response envelope.

        Args:
            method: JSON-RPC method name
            params: Method parameters
            headers: Extra HTTP headers for this call

        Returns:
            RpcResponse: The decoded envelope

        Raises:
            TransportError: For any HTTP, decoding or remote failure
        """
        request = self.build_request(method, params)
        logger.debug("Sending RPC", method=method, correlation_id=request.id)

        response = await self._post(request, headers)
        return self.decode_response(
            response.text,
            content_type=response.headers.get("content-type"),
            correlation_id=request.id,
        )

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        """Send a notification. No response envelope is expected."""
        request = self.build_request(method, params, notification=True)
        await self._post(request)

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Invoke a tool and return its result object.

        Raises:
            ToolResultError: If the tool reported ``isError``
            ParseFailureError: If the envelope carried no result
            TransportError: For any other transport failure
        """
        envelope = await self.send(
            MCPMethod.TOOLS_CALL.value,
            {"name": name, "arguments": arguments or {}},
            headers=headers,
        )
        if envelope.result is None:
            raise ParseFailureError(f"Envelope for tool {name} carried no result")

        if envelope.result.get("isError"):
            raise ToolResultError(name, _result_text(envelope.result) or "Tool reported an error")
        return envelope.result


def _result_text(result: dict[str, Any]) -> str:
    content = result.get("content")
    if not isinstance(content, list):
        return ""
    texts = [
        item.get("text", "")
        for item in content
        if isinstance(item, dict) and item.get("type") == "text"
    ]
    return "\n".join(text for text in texts if text)
