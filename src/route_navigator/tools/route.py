"""Route tools: set_travel_mode, plan_route, get_route_summary."""

import json
import logging

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..core.errors import RouteNavigationError, user_message
from ..core.geo import path_length_m, region_for_coordinates
from ..core.models import NavigationPath, RouteSegment
from ..core.navigation import plan_navigation_route
from ..models import TravelMode
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _format_distance(meters: int) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f}km"
    return f"{meters}m"


def _format_duration(seconds: int) -> str:
    minutes = round(seconds / 60)
    if minutes >= 60:
        return f"{minutes // 60}h{minutes % 60:02d}m"
    return f"{minutes}min"


def _segment_summary(index: int, segment: RouteSegment) -> dict:
    return {
        "index": index,
        "points": len(segment.path_coordinates),
        "distance_m": segment.distance,
        "duration_s": segment.duration,
        "is_fallback": segment.is_fallback,
        "straight_line_m": round(segment.straight_line_distance),
        "geometry_length_m": round(path_length_m(segment.path_coordinates)),
    }


def route_summary(path: NavigationPath) -> dict:
    coords = path.all_coordinates
    summary = {
        "travel_mode": path.travel_mode.value,
        "segments": [_segment_summary(i, s) for i, s in enumerate(path.segments)],
        "total_distance_m": path.total_distance,
        "total_duration_s": path.total_duration,
        "has_fallback_segments": path.has_fallback_segments,
        "fallback_segment_count": path.fallback_segment_count,
        "points": len(coords),
    }
    if coords:
        region = region_for_coordinates(coords)
        summary["region"] = {
            "center": {"lat": region.center.lat, "lon": region.center.lon},
            "lat_span": region.lat_span,
            "lon_span": region.lon_span,
        }
    return summary


def register_route_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_travel_mode(mode: str, city_code: str | None = None) -> str:
        """Choose how the itinerary is travelled.

        **Next:** plan_route.

        Args:
            mode: 'walking', 'public_transport' or 'driving'.
            city_code: AMap city code (e.g. '0571'). Needed for public_transport;
                without it the provider usually rejects transit requests and those
                legs fall back to straight lines.
        """
        try:
            travel_mode = TravelMode(mode)
        except ValueError:
            options = ", ".join(m.value for m in TravelMode)
            return f"Error: Unknown travel mode {mode!r}. Options: {options}"

        state.travel_mode = travel_mode
        state.city_code = city_code or None
        state.navigation = None

        message = f"Travel mode set to {travel_mode.display_name}"
        if travel_mode is TravelMode.PUBLIC_TRANSPORT and not state.city_code:
            message += " (warning: no city_code, transit legs may degrade to straight lines)"
        return message + "."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def plan_route(ctx: Context) -> str:
        """Plan road-level navigation between consecutive waypoints.

        Calls the routing provider once per leg, in order, respecting its rate
        limit. Legs the provider cannot route are drawn as straight lines and
        reported as fallbacks.
        **Requires:** at least two waypoints with coordinates.
        **Next:** get_route_summary, export_geojson or export_gpx.
        """
        try:
            require_state(state, waypoints=True)
        except ValueError as e:
            return f"Error: {e}"

        async def report(index: int, total: int, segment: RouteSegment) -> None:
            await ctx.report_progress(index + 1, total)

        # Tools may edit the itinerary while planning is suspended
        waypoints, travel_mode, city_code = inputs = (
            list(state.waypoints), state.travel_mode, state.city_code,
        )
        try:
            path = await plan_navigation_route(
                waypoints, travel_mode,
                region_hint=city_code, on_segment=report,
            )
        except RouteNavigationError as e:
            logger.error("Route planning failed: %s", e)
            return f"Error: {user_message(e)} ({e})"

        if (state.waypoints, state.travel_mode, state.city_code) != inputs:
            logger.warning("Itinerary changed while planning; discarding the planned route")
            return "Error: The itinerary changed while the route was being planned. Run plan_route again."
        state.navigation = path

        message = (
            f"Route planned: {len(path.segments)} leg(s), "
            f"{_format_distance(path.total_distance)}, "
            f"{_format_duration(path.total_duration)} by {path.travel_mode.display_name.lower()}"
        )
        if path.has_fallback_segments:
            message += (
                f". Warning: {path.fallback_segment_count} leg(s) could not be routed "
                "and are shown as straight lines"
            )
        return message + "."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_route_summary() -> str:
        """Return per-leg metrics, totals and the map region for the planned route."""
        try:
            require_state(state, navigation=True)
        except ValueError as e:
            return f"Error: {e}"
        return json.dumps(route_summary(state.navigation), indent=2)
