"""Session persistence tools: save_session, load_session."""

import json
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state
from ..core.models import NavigationPath
from ..models import TravelMode, Waypoint

logger = logging.getLogger(__name__)


def _default_path() -> Path:
    return Path.home() / ".cache" / "route-navigator" / "session.json"


def register_session_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def save_session(path: str | None = None) -> str:
        """Save the itinerary and planned route to a JSON file.

        The planned route is stored verbatim, so loading it back does not call
        the routing provider again.
        **Next:** load_session in a future session to restore it.

        Args:
            path: Where to save. Default: ~/.cache/route-navigator/session.json
        """
        save_path = Path(path) if path else _default_path()
        save_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "waypoints": [wp.model_dump(mode="json") for wp in state.waypoints],
            "travel_mode": state.travel_mode.value,
            "city_code": state.city_code,
            "navigation": (
                state.navigation.model_dump(mode="json") if state.navigation else None
            ),
        }

        with open(save_path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info("Session saved to %s", save_path)
        return f"Session saved to {save_path}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_session(path: str | None = None) -> str:
        """Load a previously saved itinerary and planned route.

        Args:
            path: Path to load from. Default: ~/.cache/route-navigator/session.json
        """
        load_path = Path(path) if path else _default_path()

        if not load_path.exists():
            return f"Error: Session file not found at {load_path}"

        try:
            with open(load_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return f"Error: Invalid session file — {e}"
        if not isinstance(data, dict):
            return "Error: Invalid session file — expected a JSON object at the top level"

        try:
            waypoints = [Waypoint.model_validate(wp) for wp in data.get("waypoints") or []]
            travel_mode = TravelMode(data.get("travel_mode") or TravelMode.WALKING.value)
            navigation = (
                NavigationPath.model_validate(data["navigation"])
                if data.get("navigation") else None
            )
        except (ValidationError, ValueError) as e:
            return f"Error: Invalid session file — {e}"

        state.waypoints = waypoints
        state.travel_mode = travel_mode
        state.city_code = data.get("city_code")
        state.navigation = navigation

        restored = [f"{len(waypoints)} waypoint(s)", f"mode {travel_mode.value}"]
        if navigation is not None:
            restored.append(f"route with {len(navigation.segments)} leg(s)")
        return f"Session restored from {load_path}. Restored: {', '.join(restored)}."
