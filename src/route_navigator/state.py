"""Session state for the route-navigator MCP server.

Holds the itinerary being planned: ordered waypoints, travel mode, optional
city code for transit requests, and the last planned navigation path.
"""

from typing import Optional

from pydantic import BaseModel, Field

from route_navigator.core.models import NavigationPath
from route_navigator.models import TravelMode, Waypoint


class SessionState(BaseModel):
    waypoints: list[Waypoint] = Field(default_factory=list)
    travel_mode: TravelMode = TravelMode.WALKING
    city_code: Optional[str] = None
    navigation: Optional[NavigationPath] = None

    @property
    def located_waypoints(self) -> list[Waypoint]:
        return [wp for wp in self.waypoints if wp.is_located]

    def summary(self) -> dict:
        nav = self.navigation
        return {
            "waypoints": {
                "count": len(self.waypoints),
                "located": len(self.located_waypoints),
                "names": [wp.name for wp in self.waypoints],
            },
            "travel": {
                "mode": self.travel_mode.value,
                "city_code": self.city_code,
            },
            "navigation": {
                "planned": True,
                "segments": len(nav.segments),
                "points": len(nav.all_coordinates),
                "total_distance_m": nav.total_distance,
                "total_duration_s": nav.total_duration,
                "fallback_segments": nav.fallback_segment_count,
            } if nav is not None else {"planned": False},
        }


# Global session state, one per MCP server process
state = SessionState()
