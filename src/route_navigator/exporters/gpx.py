"""GPX export of a planned navigation path."""

import gpxpy.gpx

from route_navigator.core.models import NavigationPath
from route_navigator.models import Waypoint


def navigation_to_gpx(
    path: NavigationPath, waypoints: list[Waypoint], name: str = "Planned route"
) -> gpxpy.gpx.GPX:
    """One track with a track segment per leg, plus the located waypoints."""
    gpx = gpxpy.gpx.GPX()
    gpx.name = name

    for wp in waypoints:
        if not wp.is_located:
            continue
        gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(
            latitude=wp.coordinate.lat,
            longitude=wp.coordinate.lon,
            name=wp.name,
            description=wp.address,
        ))

    track = gpxpy.gpx.GPXTrack(name=name)
    track.type = path.travel_mode.value
    for segment in path.segments:
        track_segment = gpxpy.gpx.GPXTrackSegment()
        for c in segment.path_coordinates:
            track_segment.points.append(gpxpy.gpx.GPXTrackPoint(latitude=c.lat, longitude=c.lon))
        track.segments.append(track_segment)
    gpx.tracks.append(track)
    return gpx


def export_gpx(
    path: NavigationPath, waypoints: list[Waypoint], output_path: str, name: str = "Planned route"
) -> None:
    """Write the navigation path as a GPX 1.1 file."""
    gpx = navigation_to_gpx(path, waypoints, name=name)
    with open(output_path, "w") as f:
        f.write(gpx.to_xml())
