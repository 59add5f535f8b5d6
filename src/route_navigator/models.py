"""Pydantic domain models for waypoints and travel modes."""

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class TravelMode(str, Enum):
    WALKING = "walking"
    PUBLIC_TRANSPORT = "public_transport"
    DRIVING = "driving"

    @property
    def display_name(self) -> str:
        return {
            TravelMode.WALKING: "Walking",
            TravelMode.PUBLIC_TRANSPORT: "Public transport",
            TravelMode.DRIVING: "Driving",
        }[self]


class Waypoint(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    coordinate: Optional[Coordinate] = None
    address: Optional[str] = None

    @property
    def is_located(self) -> bool:
        return self.coordinate is not None
