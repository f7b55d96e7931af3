"""Tests for the tool invocation gateway."""

import json

import httpx
import pytest

from rooflink_dashboard.constants import InvocationStatus
from rooflink_dashboard.mcp.client import RoofLinkMCPClient
from rooflink_dashboard.mcp.gateway import build_mock_payload
from tests.fakes import FakeMCPServer, paginated, text_result


class TestToolInvocationGateway:
    """Test cases for invoke and invoke_business_path."""

    @pytest.mark.asyncio
    async def test_business_path_through_execute_request(self, connected_client, server, approved_job):
        result = await connected_client.invoke_business_path("/light/jobs/approved/")

        assert result.status == InvocationStatus.OK
        assert result.is_trustworthy
        assert not result.mock
        assert result.endpoint == "/light/jobs/approved/"
        body = json.loads(result.data["content"][0]["text"])
        assert body["results"][0]["id"] == approved_job["id"]

        call = server.requests[-1]
        assert call["method"] == "tools/call"
        assert call["params"]["name"] == "execute-request"
        assert call["params"]["arguments"]["harRequest"] == {
            "method": "get",
            "url": "https://api.test/light/jobs/approved/",
            "headers": [{"name": "X-API-KEY", "value": "test-api-key"}],
        }

    @pytest.mark.asyncio
    async def test_named_tool(self, settings):
        server = FakeMCPServer(tool_results={"get_leads": text_result(paginated([]))})
        async with RoofLinkMCPClient(settings=settings, transport=server.transport) as client:
            await client.connect()
            result = await client.invoke("get_leads", {"page": 1})

        assert result.status == InvocationStatus.OK
        assert server.requests[-1]["params"] == {"name": "get_leads", "arguments": {"page": 1}}

    @pytest.mark.asyncio
    async def test_disconnected_is_degraded_without_network(self, client, server):
        result = await client.invoke("get_leads")

        assert result.status == InvocationStatus.DEGRADED
        assert result.data == build_mock_payload("get_leads", "Not connected to MCP server")
        assert result.data["sampleItems"] == []
        assert server.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "failure,expected",
        [
            (500, "http_failure"),
            (httpx.ReadTimeout("timed out"), "timeout"),
            (httpx.ConnectError("connection refused"), "connection_failure"),
            (RuntimeError("boom"), "Unexpected error"),
        ],
    )
    async def test_failures_never_raise(self, connected_client, server, failure, expected):
        server.fail("/light/leads/", failure)

        result = await connected_client.invoke_business_path("/light/leads/")

        assert result.status == InvocationStatus.DEGRADED
        assert result.mock
        assert expected in result.error
        assert result.data["mock"] is True
        assert result.data["message"] == "Mock data for /light/leads/"
        assert result.data["error"] == result.error

    @pytest.mark.asyncio
    async def test_unknown_tool_is_degraded(self, connected_client):
        result = await connected_client.invoke("does-not-exist")

        assert result.status == InvocationStatus.DEGRADED
        assert "remote_error" in result.error

    @pytest.mark.asyncio
    async def test_tool_error_is_degraded(self, settings):
        server = FakeMCPServer(
            tool_results={
                "get_claims": {"isError": True, "content": [{"type": "text", "text": "Forbidden"}]}
            }
        )
        async with RoofLinkMCPClient(settings=settings, transport=server.transport) as client:
            await client.connect()
            result = await client.invoke("get_claims")

        assert result.status == InvocationStatus.DEGRADED
        assert result.error == "tool_result_error: Forbidden"

    @pytest.mark.asyncio
    async def test_mock_fallback_disabled_reports_error(self, settings, server):
        settings = settings.model_copy(update={"mock_fallback_enabled": False})
        async with RoofLinkMCPClient(settings=settings, transport=server.transport) as client:
            result = await client.invoke("get_leads")

        assert result.status == InvocationStatus.ERROR
        assert result.data == {}
        assert result.error == "Not connected to MCP server"
