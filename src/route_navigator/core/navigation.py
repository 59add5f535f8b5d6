"""Route navigation orchestration: waypoints in, NavigationPath out."""

import logging
from typing import Awaitable, Callable, Optional

from route_navigator.models import Coordinate, TravelMode, Waypoint
from route_navigator.settings import Settings, get_settings
from .errors import InvalidCoordinateError, RoutePlanningError
from .models import NavigationPath, RouteSegment
from .planner import SegmentPlanner
from .provider import AMapRoutingProvider, RoutingProvider
from .throttle import RequestThrottle

logger = logging.getLogger(__name__)

SegmentCallback = Callable[[int, int, RouteSegment], Awaitable[None]]


def located_coordinates(waypoints: list[Waypoint]) -> list[Coordinate]:
    """Coordinates of the waypoints that have one, in input order."""
    return [wp.coordinate for wp in waypoints if wp.is_located]


class RouteNavigator:
    """Plans every leg of an itinerary one at a time.

    Legs are resolved strictly in sequence, each behind the throttle, so the
    provider never sees concurrent requests from one itinerary.
    """

    def __init__(
        self,
        provider: RoutingProvider,
        throttle: Optional[RequestThrottle] = None,
        planner: Optional[SegmentPlanner] = None,
    ):
        self.provider = provider
        self.throttle = throttle or RequestThrottle()
        self.planner = planner or SegmentPlanner(provider)
        if self.planner.throttle is None:
            self.planner.throttle = self.throttle

    @classmethod
    def from_settings(cls, settings: Settings) -> "RouteNavigator":
        provider = AMapRoutingProvider.from_settings(settings)
        throttle = RequestThrottle(interval=settings.request_interval)
        return cls(
            provider=provider,
            throttle=throttle,
            planner=SegmentPlanner(
                provider,
                max_retries=settings.max_retries,
                retry_backoff=settings.retry_backoff,
                throttle=throttle,
            ),
        )

    async def plan_segment(
        self,
        origin: Coordinate,
        destination: Coordinate,
        travel_mode: TravelMode,
        region_hint: Optional[str] = None,
    ) -> RouteSegment:
        """Throttled single-leg planning; raises RoutePlanningError on failure."""
        return await self.planner.plan_segment(origin, destination, travel_mode, region_hint)

    async def plan_navigation_route(
        self,
        waypoints: list[Waypoint],
        travel_mode: TravelMode,
        region_hint: Optional[str] = None,
        on_segment: Optional[SegmentCallback] = None,
    ) -> NavigationPath:
        """Plan N-1 legs for N located waypoints.

        Legs the provider cannot resolve become straight-line fallbacks; only
        the waypoint precondition (or cancellation) aborts the whole call.

        Raises:
            InvalidCoordinateError: fewer than two waypoints have coordinates.
        """
        coords = located_coordinates(waypoints)
        if len(coords) < 2:
            raise InvalidCoordinateError(
                f"Need at least 2 waypoints with coordinates, got {len(coords)}"
            )

        total = len(coords) - 1
        logger.info("Planning %d %s leg(s)", total, travel_mode.value)

        segments: list[RouteSegment] = []
        for i in range(total):
            origin, destination = coords[i], coords[i + 1]
            try:
                segment = await self.plan_segment(origin, destination, travel_mode, region_hint)
            except RoutePlanningError as exc:
                logger.warning("Leg %d/%d degraded to straight line: %s", i + 1, total, exc)
                segment = RouteSegment.fallback(origin, destination, travel_mode)
            segments.append(segment)
            if on_segment is not None:
                await on_segment(i, total, segment)

        path = NavigationPath(segments=segments, travel_mode=travel_mode)
        logger.info(
            "Planned %d leg(s): %dm, %ds, %d fallback(s)",
            len(path.segments), path.total_distance, path.total_duration,
            path.fallback_segment_count,
        )
        return path


async def plan_navigation_route(
    waypoints: list[Waypoint],
    travel_mode: TravelMode,
    region_hint: Optional[str] = None,
    settings: Optional[Settings] = None,
    on_segment: Optional[SegmentCallback] = None,
) -> NavigationPath:
    """Plan an itinerary against AMap using configured throttle and retry limits.

    Raises:
        InvalidCoordinateError: fewer than two waypoints have coordinates.
        ProviderInitializationError: no AMap key is configured.
    """
    if len(located_coordinates(waypoints)) < 2:
        raise InvalidCoordinateError("Need at least 2 waypoints with coordinates")
    navigator = RouteNavigator.from_settings(settings or get_settings())
    return await navigator.plan_navigation_route(
        waypoints, travel_mode, region_hint=region_hint, on_segment=on_segment,
    )
