"""Routing provider interface and the AMap web-service implementation."""

import logging
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel, Field

from route_navigator import __version__
from route_navigator.models import Coordinate
from route_navigator.settings import Settings
from .errors import ProviderError, ProviderErrorKind, ProviderInitializationError

logger = logging.getLogger(__name__)

AMAP_BASE_URL = "https://restapi.amap.com"
USER_AGENT = f"route-navigator/{__version__}"

# AMap infocodes for QPS / access-frequency limits
RATE_LIMIT_INFOCODES = frozenset({"10004", "10014", "10019", "10020", "10021"})

DRIVING_STRATEGY = "32"  # AMap default recommendation
TRANSIT_STRATEGY = "0"  # recommended, includes subway


class ProviderRoute(BaseModel):
    """Normalized provider answer for one origin/destination pair."""
    distance: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)
    polylines: list[str] = Field(default_factory=list)


class RoutingProvider(Protocol):
    async def walking_route(
        self, origin: Coordinate, destination: Coordinate
    ) -> ProviderRoute: ...

    async def driving_route(
        self, origin: Coordinate, destination: Coordinate
    ) -> ProviderRoute: ...

    async def transit_route(
        self, origin: Coordinate, destination: Coordinate, city_code: Optional[str]
    ) -> ProviderRoute: ...


def format_location(coord: Coordinate) -> str:
    """AMap expects 'lng,lat' with at most 6 decimals."""
    return f"{coord.lon:.6f},{coord.lat:.6f}"


def _to_int(value) -> Optional[int]:
    # AMap encodes numbers as strings and missing values as "" or []
    if value is None or value == "" or value == []:
        return None
    try:
        return max(0, int(round(float(value))))
    except (TypeError, ValueError, OverflowError):
        return None


def _duration(item: dict) -> Optional[int]:
    cost = item.get("cost")
    if isinstance(cost, dict):
        seconds = _to_int(cost.get("duration"))
        if seconds is not None:
            return seconds
    return _to_int(item.get("duration"))


def _polyline_text(value) -> Optional[str]:
    """Polylines arrive either as a bare string or wrapped as {"polyline": "..."}."""
    if isinstance(value, dict):
        value = value.get("polyline")
    if isinstance(value, str) and value:
        return value
    return None


def _step_polylines(steps) -> list[str]:
    polylines = []
    for step in steps or []:
        text = _polyline_text(step.get("polyline"))
        if text:
            polylines.append(text)
    return polylines


def parse_path_response(data: dict) -> ProviderRoute:
    """Parse a walking or driving direction response (first path only)."""
    try:
        route = data["route"]
        paths = route.get("paths") or []
        if not paths:
            raise ProviderError(ProviderErrorKind.NO_ROUTE, "Provider returned no paths")
        first = paths[0]
        return ProviderRoute(
            distance=_to_int(first.get("distance")),
            duration=_duration(first),
            polylines=_step_polylines(first.get("steps")),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ProviderError(
            ProviderErrorKind.INVALID_RESPONSE, f"Malformed path response: {exc!r}"
        ) from exc


def parse_transit_response(data: dict) -> ProviderRoute:
    """Parse a transit direction response (first transit plan only).

    Geometry is collected per transfer segment in order: walking steps,
    bus lines, then railway via-stop locations.
    """
    try:
        route = data["route"]
        transits = route.get("transits") or []
        if not transits:
            raise ProviderError(ProviderErrorKind.NO_ROUTE, "Provider returned no transit plans")
        first = transits[0]

        polylines = []
        for segment in first.get("segments") or []:
            walking = segment.get("walking") or {}
            polylines.extend(_step_polylines(walking.get("steps")))

            bus = segment.get("bus") or {}
            buslines = bus.get("buslines") or segment.get("buslines") or []
            for busline in buslines:
                text = _polyline_text(busline.get("polyline"))
                if text:
                    polylines.append(text)

            railway = segment.get("railway") or {}
            stops = [
                stop["location"]
                for stop in railway.get("via_stops") or []
                if isinstance(stop.get("location"), str) and stop["location"]
            ]
            if stops:
                polylines.append(";".join(stops))

        return ProviderRoute(
            distance=_to_int(first.get("distance")),
            duration=_duration(first),
            polylines=polylines,
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ProviderError(
            ProviderErrorKind.INVALID_RESPONSE, f"Malformed transit response: {exc!r}"
        ) from exc


class AMapRoutingProvider:
    """AMap v5 direction API client.

    Every failure surfaces as ProviderError with a classified kind; the
    caller decides whether to retry.
    """

    def __init__(self, api_key: str, base_url: str = AMAP_BASE_URL, timeout: float = 10.0):
        if not api_key:
            raise ProviderInitializationError(
                "AMap API key is not configured. Set AMAP_API_KEY or ROUTE_NAV_AMAP_KEY."
            )
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "AMapRoutingProvider":
        return cls(
            api_key=settings.amap_key,
            base_url=settings.amap_base_url,
            timeout=settings.request_timeout,
        )

    async def _request(self, path: str, params: dict) -> dict:
        query = {"key": self.api_key, "output": "json", **params}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers={"User-Agent": USER_AGENT}
            ) as client:
                response = await client.get(f"{self.base_url}{path}", params=query)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            raise ProviderError(ProviderErrorKind.TIMEOUT, f"{path} timed out") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            kind = ProviderErrorKind.RATE_LIMITED if status == 429 else ProviderErrorKind.TRANSPORT
            raise ProviderError(kind, f"{path} returned HTTP {status}", code=str(status)) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(ProviderErrorKind.TRANSPORT, f"{path} failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(
                ProviderErrorKind.INVALID_RESPONSE, f"{path} returned invalid JSON"
            ) from exc

        if not isinstance(data, dict):
            raise ProviderError(ProviderErrorKind.INVALID_RESPONSE, f"{path} returned non-object JSON")

        if str(data.get("status")) != "1":
            infocode = str(data.get("infocode") or "") or None
            info = data.get("info") or "unknown error"
            kind = (
                ProviderErrorKind.RATE_LIMITED
                if infocode in RATE_LIMIT_INFOCODES
                else ProviderErrorKind.REJECTED
            )
            raise ProviderError(kind, str(info), code=infocode)
        return data

    async def walking_route(self, origin: Coordinate, destination: Coordinate) -> ProviderRoute:
        logger.debug("Walking route request %s -> %s", origin, destination)
        data = await self._request("/v5/direction/walking", {
            "origin": format_location(origin),
            "destination": format_location(destination),
            "show_fields": "cost,polyline",
        })
        return parse_path_response(data)

    async def driving_route(self, origin: Coordinate, destination: Coordinate) -> ProviderRoute:
        logger.debug("Driving route request %s -> %s", origin, destination)
        data = await self._request("/v5/direction/driving", {
            "origin": format_location(origin),
            "destination": format_location(destination),
            "strategy": DRIVING_STRATEGY,
            "show_fields": "cost,polyline",
        })
        return parse_path_response(data)

    async def transit_route(
        self, origin: Coordinate, destination: Coordinate, city_code: Optional[str]
    ) -> ProviderRoute:
        params = {
            "origin": format_location(origin),
            "destination": format_location(destination),
            "strategy": TRANSIT_STRATEGY,
            "nightflag": "0",
            "show_fields": "cost,polyline",
        }
        if city_code:
            params["city1"] = city_code
            params["city2"] = city_code
        else:
            logger.warning("Transit route requested without a city code; provider may reject it")
        logger.debug("Transit route request %s -> %s (city=%s)", origin, destination, city_code)
        data = await self._request("/v5/direction/transit/integrated", params)
        return parse_transit_response(data)
