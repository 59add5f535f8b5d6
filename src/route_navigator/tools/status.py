"""Status tool: get_status."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state


def register_status_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Report where the itinerary stands.

        Lists the waypoint names and how many have coordinates, the travel
        mode and city code, and, once plan_route has run, the leg count,
        totals and how many legs fell back to straight lines.
        **Next:** add waypoints or plan_route if nothing is planned yet.
        """
        return json.dumps(state.summary(), indent=2)
