"""Pydantic models for planned route geometry."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from route_navigator.models import Coordinate, TravelMode
from .geo import haversine_m


class RouteSegment(BaseModel):
    """One directed leg between two consecutive waypoints."""
    model_config = ConfigDict(frozen=True)

    origin: Coordinate
    destination: Coordinate
    path_coordinates: list[Coordinate] = Field(min_length=2)
    travel_mode: TravelMode
    distance: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)
    is_fallback: bool = False

    @model_validator(mode="after")
    def path_must_join_endpoints(self) -> "RouteSegment":
        if self.path_coordinates[0] != self.origin:
            raise ValueError("path_coordinates must start at origin")
        if self.path_coordinates[-1] != self.destination:
            raise ValueError("path_coordinates must end at destination")
        return self

    @model_validator(mode="after")
    def fallback_is_straight_line(self) -> "RouteSegment":
        if self.is_fallback and len(self.path_coordinates) != 2:
            raise ValueError(
                f"Fallback segment must have exactly 2 points, got {len(self.path_coordinates)}"
            )
        return self

    @classmethod
    def fallback(
        cls, origin: Coordinate, destination: Coordinate, travel_mode: TravelMode
    ) -> "RouteSegment":
        """Straight-line connector used when the provider cannot supply a path."""
        return cls(
            origin=origin,
            destination=destination,
            path_coordinates=[origin, destination],
            travel_mode=travel_mode,
            distance=None,
            duration=None,
            is_fallback=True,
        )

    @property
    def straight_line_distance(self) -> float:
        return haversine_m(self.origin, self.destination)


class NavigationPath(BaseModel):
    """Ordered legs covering a whole itinerary."""
    model_config = ConfigDict(frozen=True)

    segments: list[RouteSegment] = Field(default_factory=list)
    travel_mode: TravelMode

    @model_validator(mode="after")
    def segments_must_be_continuous(self) -> "NavigationPath":
        for i in range(len(self.segments) - 1):
            if self.segments[i].destination != self.segments[i + 1].origin:
                raise ValueError(
                    f"Segment {i} ends where segment {i + 1} does not start"
                )
        return self

    @property
    def all_coordinates(self) -> list[Coordinate]:
        """Merged geometry; each leg after the first drops its shared start point."""
        coordinates: list[Coordinate] = []
        for index, segment in enumerate(self.segments):
            if index == 0:
                coordinates.extend(segment.path_coordinates)
            else:
                coordinates.extend(segment.path_coordinates[1:])
        return coordinates

    @computed_field
    @property
    def total_distance(self) -> int:
        return sum(s.distance for s in self.segments if s.distance is not None)

    @computed_field
    @property
    def total_duration(self) -> int:
        return sum(s.duration for s in self.segments if s.duration is not None)

    @computed_field
    @property
    def has_fallback_segments(self) -> bool:
        return any(s.is_fallback for s in self.segments)

    @computed_field
    @property
    def fallback_segment_count(self) -> int:
        return sum(1 for s in self.segments if s.is_fallback)
