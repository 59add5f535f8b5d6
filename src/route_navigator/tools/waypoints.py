"""Waypoint tools: add_waypoint, set_waypoints, set_waypoints_from_gpx, clear_waypoints."""

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state
from ..core.gpx import parse_gpx_waypoints
from ..models import Coordinate, Waypoint


def _describe(waypoints: list[Waypoint]) -> str:
    located = sum(1 for wp in waypoints if wp.is_located)
    return f"{len(waypoints)} waypoint(s), {located} with coordinates"


def register_waypoint_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def add_waypoint(
        name: str,
        lat: float | None = None,
        lon: float | None = None,
        address: str | None = None,
    ) -> str:
        """Append a stop to the end of the itinerary.

        Stops without lat/lon are kept but skipped when planning.
        **Next:** add more waypoints, then set_travel_mode and plan_route.

        Args:
            name: Display name of the stop.
            lat: Latitude in degrees.
            lon: Longitude in degrees.
            address: Optional street address.
        """
        if (lat is None) != (lon is None):
            return "Error: Provide both lat and lon, or neither."

        coordinate = None
        if lat is not None:
            try:
                coordinate = Coordinate(lat=lat, lon=lon)
            except ValidationError as e:
                return f"Error: Invalid coordinate — {e.errors()[0]['msg']}"

        state.waypoints.append(Waypoint(name=name, coordinate=coordinate, address=address))
        state.navigation = None
        return f"Waypoint {len(state.waypoints)} added: {name}. Itinerary has {_describe(state.waypoints)}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def set_waypoints(waypoints: list[Waypoint]) -> str:
        """Replace the whole itinerary with an ordered list of waypoints.

        **Next:** set_travel_mode (optional), then plan_route.

        Args:
            waypoints: Ordered stops, each {name, coordinate: {lat, lon}?, address?, id?}.
        """
        state.waypoints = list(waypoints)
        state.navigation = None
        return f"Itinerary set: {_describe(state.waypoints)}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def set_waypoints_from_gpx(file_path: str) -> str:
        """Load itinerary waypoints from a GPX file (<wpt> entries, else the first <rte>).

        **Next:** set_travel_mode (optional), then plan_route.

        Args:
            file_path: Absolute path to a .gpx file.
        """
        try:
            waypoints = parse_gpx_waypoints(file_path)
        except FileNotFoundError:
            return f"Error: GPX file not found at {file_path}"

        if not waypoints:
            return "Error: GPX file has no waypoints or route points."

        state.waypoints = waypoints
        state.navigation = None
        return f"Loaded {_describe(waypoints)} from {file_path}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_waypoints() -> str:
        """Remove all waypoints and the planned route."""
        state.waypoints = []
        state.navigation = None
        return "Itinerary cleared."
