import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_state():
    """Reset the process-wide session state between tests."""
    from route_navigator.state import state
    from route_navigator.models import TravelMode

    state.waypoints = []
    state.travel_mode = TravelMode.WALKING
    state.city_code = None
    state.navigation = None
    yield state
