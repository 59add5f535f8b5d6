"""Great-circle distance and map-region helpers."""

import math

import numpy as np
from pydantic import BaseModel, Field

from route_navigator.models import Coordinate

EARTH_RADIUS_M = 6_371_008.8


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def path_length_m(coords: list[Coordinate]) -> float:
    """Summed great-circle length of a polyline in meters."""
    if len(coords) < 2:
        return 0.0
    lats = np.radians(np.array([c.lat for c in coords]))
    lons = np.radians(np.array([c.lon for c in coords]))
    dlat = np.diff(lats)
    dlon = np.diff(lons)
    h = np.sin(dlat / 2) ** 2 + np.cos(lats[:-1]) * np.cos(lats[1:]) * np.sin(dlon / 2) ** 2
    return float(np.sum(2 * EARTH_RADIUS_M * np.arcsin(np.minimum(1.0, np.sqrt(h)))))


class MapRegion(BaseModel):
    """Center plus span (degrees) that a map view should show."""
    center: Coordinate
    lat_span: float = Field(gt=0)
    lon_span: float = Field(gt=0)

    @property
    def north(self) -> float:
        return min(90.0, self.center.lat + self.lat_span / 2)

    @property
    def south(self) -> float:
        return max(-90.0, self.center.lat - self.lat_span / 2)

    @property
    def east(self) -> float:
        return self.center.lon + self.lon_span / 2

    @property
    def west(self) -> float:
        return self.center.lon - self.lon_span / 2


def region_for_coordinates(
    coords: list[Coordinate],
    padding_ratio: float = 0.2,
    min_span: float = 0.01,
) -> MapRegion:
    """Region that fits every coordinate, padded on each side by padding_ratio of the span."""
    if not coords:
        raise ValueError("Cannot fit a map region to zero coordinates")

    lats = np.array([c.lat for c in coords])
    lons = np.array([c.lon for c in coords])
    north, south = float(lats.max()), float(lats.min())
    east, west = float(lons.max()), float(lons.min())

    lat_span = max((north - south) * (1 + 2 * padding_ratio), min_span)
    lon_span = max((east - west) * (1 + 2 * padding_ratio), min_span)

    return MapRegion(
        center=Coordinate(lat=(north + south) / 2, lon=(east + west) / 2),
        lat_span=min(lat_span, 180.0),
        lon_span=min(lon_span, 360.0),
    )
