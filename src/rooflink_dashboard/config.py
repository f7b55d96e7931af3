"""
Configuration management for the RoofLink dashboard core.

This module handles environment variable configuration and validation
for the MCP client and the metrics pipeline using Pydantic settings.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rooflink_dashboard.constants import TransportMode
from rooflink_dashboard.utils.logger import logger


class DashboardSettings(BaseSettings):
    """Configuration for the RoofLink dashboard using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="ROOFLINK_"
    )

    # MCP server
    mcp_url: str = Field(
        default="https://developers.rooflink.com/mcp",
        description="MCP endpoint that all JSON-RPC calls are posted to",
    )
    protocol_version: str = Field(
        default="2024-11-05", description="MCP protocol version sent on initialize"
    )
    client_name: str = Field(
        default="rooflink-dashboard", description="clientInfo.name sent on initialize"
    )
    client_version: str = Field(
        default="1.0.0", description="clientInfo.version sent on initialize"
    )

    # Business API
    business_api_base_url: str = Field(
        default="https://api.roof.link",
        description="Base URL that business paths are appended to",
    )
    api_key: str | None = Field(
        default=None, description="RoofLink API key sent as X-API-KEY"
    )
    transport_mode: TransportMode = Field(
        default=TransportMode.MCP,
        description="Fetch business paths through the execute-request tool or directly",
    )

    # Request behaviour
    request_timeout: float = Field(
        default=30.0, gt=0, description="HTTP request timeout in seconds"
    )
    tool_call_delay: float = Field(
        default=0.1, ge=0, description="Delay in seconds between tool invocations"
    )
    business_call_delay: float = Field(
        default=0.2, ge=0, description="Delay in seconds between business API calls"
    )
    mock_fallback_enabled: bool = Field(
        default=True,
        description="Substitute a mock payload when an invocation fails",
    )

    # Metrics
    region_label: str = Field(
        default="Monroe, LA", description="Display label of the target region"
    )
    region_codes: list[str] = Field(
        default_factory=lambda: ["la", "louisiana", "monroe"],
        description="Region codes a record must match exactly to be counted",
    )
    metric_paths: list[str] = Field(
        default_factory=lambda: [
            "/light/jobs/approved/",
            "/light/jobs/prospect/",
            "/light/leads/",
            "/light/claims/",
        ],
        description="Business API paths fetched on every refresh",
    )

    @field_validator("region_codes")
    @classmethod
    def normalize_region_codes(cls, value: list[str]) -> list[str]:
        """Lower-case and strip region codes so matching is exact."""
        return [code.strip().lower() for code in value if code and code.strip()]

    @field_validator("mcp_url", "business_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Drop trailing slashes so paths can be appended verbatim."""
        return value.rstrip("/")


# Global settings instance
_dashboard_settings: DashboardSettings | None = None


def get_dashboard_settings() -> DashboardSettings:
    """
    Get the global dashboard settings instance.

    Returns:
        DashboardSettings: The global settings instance
    """
    global _dashboard_settings
    if _dashboard_settings is None:
        _dashboard_settings = DashboardSettings()
        logger.info(
            "DashboardSettings loaded",
            mcp_url=_dashboard_settings.mcp_url,
            transport_mode=_dashboard_settings.transport_mode.value,
        )
        if _dashboard_settings.api_key:
            logger.info(
                "RoofLink API Key (first 5 chars)",
                api_key_preview=f"{_dashboard_settings.api_key[:5]}...",
            )
    return _dashboard_settings


def set_dashboard_settings(settings: DashboardSettings | None) -> None:
    """
    Set the global dashboard settings instance.

    Args:
        settings: The settings to set, or None to reload from the environment
    """
    global _dashboard_settings
    _dashboard_settings = settings
