"""Export tools: export_geojson, export_gpx."""

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..exporters.geojson import export_geojson as do_export_geojson
from ..exporters.gpx import export_gpx as do_export_gpx
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _validate_output_path(output_path: str) -> None:
    """Raise ValueError if output_path resolves outside the user's home directory."""
    resolved = Path(output_path).resolve()
    home = Path.home().resolve()
    try:
        resolved.relative_to(home)
    except ValueError:
        raise ValueError(
            f"Output path {output_path!r} is outside the home directory. "
            "Use a path within your home directory."
        )


def register_export_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def export_geojson(output_path: str) -> str:
        """Export the planned route as GeoJSON (one LineString per leg plus waypoint Points).

        **Requires:** plan_route.

        Args:
            output_path: Destination .geojson file inside your home directory.
        """
        try:
            require_state(state, navigation=True)
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        do_export_geojson(state.navigation, state.waypoints, output_path)
        logger.info("GeoJSON exported to %s", output_path)
        return f"GeoJSON exported to {output_path} ({len(state.navigation.segments)} leg(s))"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def export_gpx(output_path: str, name: str = "Planned route") -> str:
        """Export the planned route as GPX (one track segment per leg plus waypoints).

        **Requires:** plan_route.

        Args:
            output_path: Destination .gpx file inside your home directory.
            name: Track name written into the file.
        """
        try:
            require_state(state, navigation=True)
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        do_export_gpx(state.navigation, state.waypoints, output_path, name=name)
        logger.info("GPX exported to %s", output_path)
        return f"GPX exported to {output_path} ({len(state.navigation.all_coordinates)} points)"
