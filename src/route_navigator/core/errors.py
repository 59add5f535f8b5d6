"""Exceptions raised while planning navigation routes."""

from enum import Enum
from typing import Optional


class ProviderErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    NO_ROUTE = "no_route"
    INVALID_RESPONSE = "invalid_response"
    REJECTED = "rejected"
    TRANSPORT = "transport"


class RouteNavigationError(Exception):
    """Base class for route navigation failures."""


class InvalidCoordinateError(RouteNavigationError):
    """Fewer than two waypoints carry a coordinate."""


class ProviderInitializationError(RouteNavigationError):
    """The routing provider could not be set up (e.g. missing API key)."""


class ProviderError(RouteNavigationError):
    """A single routing provider request failed."""

    def __init__(self, kind: ProviderErrorKind, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code

    @property
    def retryable(self) -> bool:
        return self.kind is ProviderErrorKind.RATE_LIMITED

    def __str__(self) -> str:
        if self.code:
            return f"{self.kind.value} ({self.code}): {self.message}"
        return f"{self.kind.value}: {self.message}"


class RoutePlanningError(RouteNavigationError):
    """One leg could not be planned; the orchestrator substitutes a fallback."""

    def __init__(
        self, message: str, kind: ProviderErrorKind, attempts: int, code: Optional[str] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.attempts = attempts
        self.code = code


def user_message(error: Exception) -> str:
    """Short user-facing explanation for a planning error."""
    if isinstance(error, InvalidCoordinateError):
        return "At least two located waypoints are needed to plan a route."
    if isinstance(error, ProviderInitializationError):
        return "Route planning is not configured. Set an AMap API key and retry."
    if isinstance(error, (ProviderError, RoutePlanningError)):
        code = error.code
        if code and code.isdigit():
            value = int(code)
            if 10000 <= value < 20000:
                return "The routing service refused the key or its quota is exhausted."
            if 20000 <= value < 30000:
                return "The route request was invalid. Check the waypoints and city code."
            if 30000 <= value < 40000:
                return "The routing service is temporarily unavailable. Try again later."
            if value >= 40000:
                return "The routing service quota is exhausted for today."
        if error.kind is ProviderErrorKind.RATE_LIMITED:
            return "Too many route requests. Wait a moment and retry."
        if error.kind in (ProviderErrorKind.TIMEOUT, ProviderErrorKind.TRANSPORT):
            return "Could not reach the routing service. Check the network connection."
        if error.kind is ProviderErrorKind.NO_ROUTE:
            return "No route was found between these places."
    return "Route planning failed. Try again later."
