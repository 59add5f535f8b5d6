"""MCP server for route-navigator.

Registers all tools and runs via stdio transport.
"""

import json
import logging
import sys

from mcp.server.fastmcp import FastMCP

from .settings import get_settings
from .state import state
from .tools.waypoints import register_waypoint_tools
from .tools.route import register_route_tools
from .tools.export import register_export_tools
from .tools.session import register_session_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "route-navigator",
    instructions="Plan road-level navigation between itinerary waypoints and export it for map display",
)

# Register all tool groups
register_waypoint_tools(mcp)
register_route_tools(mcp)
register_export_tools(mcp)
register_session_tools(mcp)
register_status_tools(mcp)


@mcp.resource("state://session")
def session_state() -> str:
    """Current itinerary state as JSON."""
    return json.dumps(state.summary(), indent=2)


def main():
    # stdout carries the MCP protocol
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
