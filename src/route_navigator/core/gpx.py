"""GPX file parsing into itinerary waypoints."""

import gpxpy

from route_navigator.models import Coordinate, Waypoint


def parse_gpx_waypoints(filepath: str) -> list[Waypoint]:
    """Read waypoints from a GPX file.

    Uses the <wpt> entries; if there are none, the points of the first
    <rte> are used instead. Order is preserved.
    """
    with open(filepath, "r") as f:
        gpx = gpxpy.parse(f)

    points = list(gpx.waypoints)
    if not points and gpx.routes:
        points = list(gpx.routes[0].points)

    waypoints = []
    for i, point in enumerate(points):
        waypoints.append(Waypoint(
            name=point.name or f"Waypoint {i + 1}",
            coordinate=Coordinate(lat=point.latitude, lon=point.longitude),
            address=point.description or point.comment or None,
        ))
    return waypoints
