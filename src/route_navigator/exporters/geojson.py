"""GeoJSON export of a planned navigation path for map rendering."""

import json

from route_navigator.core.models import NavigationPath
from route_navigator.models import Waypoint


def navigation_to_geojson(path: NavigationPath, waypoints: list[Waypoint]) -> dict:
    """Build a FeatureCollection: one LineString per leg, one Point per located waypoint."""
    features = []
    for index, segment in enumerate(path.segments):
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [[c.lon, c.lat] for c in segment.path_coordinates],
            },
            "properties": {
                "kind": "segment",
                "index": index,
                "travel_mode": segment.travel_mode.value,
                "distance": segment.distance,
                "duration": segment.duration,
                "is_fallback": segment.is_fallback,
            },
        })

    order = 0
    for wp in waypoints:
        if not wp.is_located:
            continue
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": [wp.coordinate.lon, wp.coordinate.lat],
            },
            "properties": {
                "kind": "waypoint",
                "order": order,
                "id": wp.id,
                "name": wp.name,
                "address": wp.address,
            },
        })
        order += 1

    return {
        "type": "FeatureCollection",
        "features": features,
        "properties": {
            "travel_mode": path.travel_mode.value,
            "total_distance": path.total_distance,
            "total_duration": path.total_duration,
            "fallback_segment_count": path.fallback_segment_count,
        },
    }


def export_geojson(path: NavigationPath, waypoints: list[Waypoint], output_path: str) -> None:
    """Write the navigation path as a GeoJSON file."""
    with open(output_path, "w") as f:
        json.dump(navigation_to_geojson(path, waypoints), f, indent=2)
