"""Single-leg planning with bounded retry on provider rate limits."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from route_navigator.models import Coordinate, TravelMode
from .errors import ProviderError, RoutePlanningError
from .models import RouteSegment
from .polyline import decode_polyline
from .provider import ProviderRoute, RoutingProvider
from .throttle import RequestThrottle

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_BACKOFF = 0.5  # seconds


def stitch_polylines(polylines: list[str]) -> list[Coordinate]:
    """Decode step polylines in order, dropping repeated points at step joins."""
    coords: list[Coordinate] = []
    for text in polylines:
        for point in decode_polyline(text):
            if coords and coords[-1] == point:
                continue
            coords.append(point)
    return coords


def build_segment(
    origin: Coordinate,
    destination: Coordinate,
    travel_mode: TravelMode,
    route: ProviderRoute,
) -> RouteSegment:
    """Turn a provider answer into a segment anchored on the waypoint coordinates.

    Zero decodable points keeps the provider's metrics but degrades the
    geometry to a straight line.
    """
    coords = stitch_polylines(route.polylines)
    if not coords:
        logger.warning(
            "Provider returned no usable geometry for %s -> %s; using straight line",
            origin, destination,
        )
        return RouteSegment(
            origin=origin,
            destination=destination,
            path_coordinates=[origin, destination],
            travel_mode=travel_mode,
            distance=route.distance,
            duration=route.duration,
            is_fallback=True,
        )

    if coords[0] != origin:
        coords.insert(0, origin)
    if coords[-1] != destination:
        coords.append(destination)
    if len(coords) < 2:
        # origin == destination and the provider echoed that single point
        coords = [origin, destination]
    return RouteSegment(
        origin=origin,
        destination=destination,
        path_coordinates=coords,
        travel_mode=travel_mode,
        distance=route.distance,
        duration=route.duration,
        is_fallback=False,
    )


class SegmentPlanner:
    """Resolves one origin/destination pair through the routing provider.

    When a throttle is attached every attempt, retries included, acquires it
    before calling the provider.
    """

    def __init__(
        self,
        provider: RoutingProvider,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        throttle: Optional[RequestThrottle] = None,
    ):
        if max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {max_retries}")
        self.provider = provider
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self._sleep = sleep
        self.throttle = throttle

    async def _fetch(
        self,
        origin: Coordinate,
        destination: Coordinate,
        travel_mode: TravelMode,
        region_hint: Optional[str],
    ) -> ProviderRoute:
        if travel_mode is TravelMode.WALKING:
            return await self.provider.walking_route(origin, destination)
        if travel_mode is TravelMode.DRIVING:
            return await self.provider.driving_route(origin, destination)
        if travel_mode is TravelMode.PUBLIC_TRANSPORT:
            return await self.provider.transit_route(origin, destination, region_hint)
        raise ValueError(f"Unsupported travel mode: {travel_mode!r}")

    async def plan_segment(
        self,
        origin: Coordinate,
        destination: Coordinate,
        travel_mode: TravelMode,
        region_hint: Optional[str] = None,
    ) -> RouteSegment:
        """Plan one leg.

        Raises:
            RoutePlanningError: the provider failed with a non-retryable error,
                or kept rate-limiting after max_retries extra attempts.
        """
        attempts = 0
        while True:
            if attempts > 0:
                logger.warning(
                    "Provider rate limit hit; retry %d/%d in %.0fms",
                    attempts, self.max_retries, self.retry_backoff * 1000,
                )
                sleep = self._sleep or asyncio.sleep
                await sleep(self.retry_backoff)
            if self.throttle is not None:
                await self.throttle.acquire()
            attempts += 1
            try:
                route = await self._fetch(origin, destination, travel_mode, region_hint)
            except ProviderError as exc:
                if exc.retryable and attempts <= self.max_retries:
                    continue
                raise RoutePlanningError(
                    f"Routing {origin} -> {destination} failed after {attempts} attempt(s): {exc}",
                    kind=exc.kind,
                    attempts=attempts,
                    code=exc.code,
                ) from exc
            return build_segment(origin, destination, travel_mode, route)
