"""Decoding of the provider's "lng,lat;lng,lat" polyline strings."""

import logging
import math

from pydantic import ValidationError

from route_navigator.models import Coordinate

logger = logging.getLogger(__name__)


def _parse_point(token: str) -> Coordinate | None:
    parts = token.split(",")
    if len(parts) != 2:
        return None
    try:
        lon = float(parts[0])
        lat = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    try:
        return Coordinate(lat=lat, lon=lon)
    except ValidationError:
        return None


def decode_polyline(text: str | None) -> list[Coordinate]:
    """Decode a polyline into coordinates, skipping tokens that do not parse.

    Returns an empty list for empty or wholly malformed input.
    """
    if not text:
        return []

    coords = []
    skipped = 0
    for token in text.split(";"):
        token = token.strip()
        if not token:
            continue
        point = _parse_point(token)
        if point is None:
            skipped += 1
            if skipped <= 3:
                logger.debug("Skipping unparseable polyline point %r", token)
            continue
        coords.append(point)

    if skipped:
        logger.debug("Polyline decoded %d points, skipped %d", len(coords), skipped)
    return coords


def encode_polyline(coords: list[Coordinate]) -> str:
    """Encode coordinates in the same lng,lat;lng,lat format."""
    return ";".join(f"{c.lon:.6f},{c.lat:.6f}" for c in coords)
