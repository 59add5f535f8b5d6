"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, waypoints: bool = False, navigation: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, waypoints=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if waypoints and len(state.located_waypoints) < 2:
        raise ValueError(
            "Add at least two waypoints with coordinates first "
            "with add_waypoint, set_waypoints or set_waypoints_from_gpx."
        )
    if navigation and state.navigation is None:
        raise ValueError(
            "Plan a route first with plan_route."
        )
