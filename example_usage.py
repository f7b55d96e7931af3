#!/usr/bin/env python3
"""Example usage of the RoofLink dashboard core.

This script runs one dashboard refresh against the RoofLink MCP server and
prints the metrics. Make sure to set the ROOFLINK_API_KEY environment
variable before running.

Usage:
    ROOFLINK_API_KEY=your-api-key python example_usage.py
"""

import asyncio
import os

from rooflink_dashboard import DashboardSettings, create_dashboard_service
from rooflink_dashboard.constants import DateRangeType, InvocationStatus
from rooflink_dashboard.metrics import date_window_for


async def main():
    """Main example function."""
    if not os.getenv("ROOFLINK_API_KEY"):
        print("❌ Please set the ROOFLINK_API_KEY environment variable")
        print("   Example: ROOFLINK_API_KEY=your-api-key python example_usage.py")
        return

    print("🚀 RoofLink Dashboard Example")
    print("=" * 50)

    settings = DashboardSettings()
    window = date_window_for(DateRangeType.MONTHLY)
    print(f"📅 Window: {window.label} ({window.start_date} to {window.end_date})")
    print(f"📍 Region: {settings.region_label}")
    print()

    service = create_dashboard_service(settings)
    try:
        # Example 1: Server info and tools
        print("🔌 Connecting...")
        if not await service.client.connect():
            print("   Could not reach the MCP server; metrics will be empty")
        else:
            info = await service.client.get_server_info()
            server = info.get("serverInfo", {})
            print(f"   Connected to {server.get('name')} {server.get('version')}")

        catalog = await service.client.list_tools()
        flag = " (fallback)" if catalog.degraded else ""
        print(f"   {len(catalog.tools)} tools{flag}: {', '.join(catalog.names())}")
        print()

        # Example 2: Refresh the dashboard
        print("📊 Refreshing dashboard...")
        snapshot = await service.refresh(window)
        if snapshot is None:
            print("   A refresh is already running")
            return

        for source in snapshot.sources:
            marker = "✅" if source.status == InvocationStatus.OK else "⚠️"
            print(
                f"   {marker} {source.name}: {source.record_count} records "
                f"in {source.elapsed_ms:.0f}ms"
            )
            if source.error:
                print(f"      {source.error}")
        print()

        # Example 3: Metrics
        metrics = snapshot.metrics
        print("📈 Metrics")
        print(f"   Contracts signed:       {metrics.approved_count}")
        print(f"   Sold revenue:           ${metrics.estimated_revenue_total:,.0f}")
        if metrics.estimated_revenue_count:
            print(f"     ({metrics.estimated_revenue_count} estimated from job type)")
        print(f"   Door knocking leads:    {metrics.door_knock_lead_count}")
        print(f"   Company leads:          {metrics.company_lead_count}")
        print(f"   Lead conversion:        {metrics.lead_conversion_percentage:.1f}%")
        print(f"   Claims filed/approved:  {metrics.claims_filed_count}/{metrics.claims_approved_count}")
        print(f"   Backlog:                {metrics.backlog_count}")

        print("   Lead sources:")
        for lead_source, count in metrics.breakdowns["lead_source"].items():
            print(f"     {lead_source}: {count}")

        if snapshot.degraded:
            print()
            print("⚠️  Some data fell back to mock payloads; numbers may be incomplete")

    finally:
        await service.client.aclose()

    print()
    print("✅ Example completed successfully!")
    print()
    print("💡 Tips:")
    print("   - Use environment variables for configuration (ROOFLINK_MCP_URL, ROOFLINK_REQUEST_TIMEOUT, etc.)")
    print("   - Set ROOFLINK_TRANSPORT_MODE=direct to call the business API without the MCP server")
    print("   - Set LOG_LEVEL=DEBUG to see every RPC sent")


if __name__ == "__main__":
    asyncio.run(main())
