"""Shared fixtures for the dashboard tests."""

import copy

import pytest

from rooflink_dashboard.config import DashboardSettings
from rooflink_dashboard.mcp.client import RoofLinkMCPClient
from tests.fakes import (
    APPROVED_JOB,
    BUILD_NEXT_WEEK_JOB,
    BUSINESS_BASE_URL,
    MCP_URL,
    PROSPECT_JOB,
    FakeMCPServer,
    paginated,
)


@pytest.fixture
def approved_job():
    return copy.deepcopy(APPROVED_JOB)


@pytest.fixture
def build_next_week_job():
    return copy.deepcopy(BUILD_NEXT_WEEK_JOB)


@pytest.fixture
def prospect_job():
    return copy.deepcopy(PROSPECT_JOB)


@pytest.fixture
def settings():
    """Test settings with no politeness delays."""
    return DashboardSettings(
        mcp_url=MCP_URL,
        business_api_base_url=BUSINESS_BASE_URL,
        api_key="test-api-key",
        request_timeout=5.0,
        tool_call_delay=0,
        business_call_delay=0,
    )


@pytest.fixture
def server(approved_job, prospect_job):
    return FakeMCPServer(
        business_responses={
            "/light/jobs/approved/": paginated([approved_job]),
            "/light/jobs/prospect/": paginated([prospect_job]),
        }
    )


@pytest.fixture
async def client(settings, server):
    mcp_client = RoofLinkMCPClient(settings=settings, transport=server.transport)
    yield mcp_client
    await mcp_client.aclose()


@pytest.fixture
async def connected_client(client):
    assert await client.connect()
    return client
