"""Tests for the AMap routing provider with mocked HTTP."""
import logging
import pytest
from unittest.mock import patch, AsyncMock, MagicMock
import httpx

from route_navigator.models import Coordinate, TravelMode, Waypoint

ORIGIN = Coordinate(lat=39.90, lon=116.39)
DEST = Coordinate(lat=39.91, lon=116.39)

WALKING_OK = {
    "status": "1",
    "info": "OK",
    "infocode": "10000",
    "count": "1",
    "route": {
        "origin": "116.390000,39.900000",
        "destination": "116.390000,39.910000",
        "paths": [{
            "distance": "1200",
            "cost": {"duration": "900"},
            "steps": [
                {"instruction": "Head north", "polyline": "116.390000,39.900000;116.390500,39.905000"},
                {"instruction": "Continue", "polyline": "116.390500,39.905000;116.390000,39.910000"},
                {"instruction": "Arrive"},
            ],
        }],
    },
}

TRANSIT_OK = {
    "status": "1",
    "info": "OK",
    "infocode": "10000",
    "route": {
        "transits": [{
            "distance": "5300",
            "cost": {"duration": "1800"},
            "segments": [
                {
                    "walking": {"steps": [{"polyline": {"polyline": "120.10,30.20;120.11,30.21"}}]},
                    "bus": {"buslines": [{"name": "K7", "polyline": {"polyline": "120.11,30.21;120.15,30.25"}}]},
                },
                {
                    "railway": {"via_stops": [{"location": "120.15,30.25"}, {"location": "120.20,30.30"}]},
                },
            ],
        }],
    },
}


def _response(payload=None, json_error=None, status_error=None):
    # raise_for_status() and json() are sync in httpx
    resp = MagicMock()
    resp.raise_for_status = MagicMock(side_effect=status_error)
    if json_error is not None:
        resp.json = MagicMock(side_effect=json_error)
    else:
        resp.json = MagicMock(return_value=payload)
    return resp


def _mock_client(mock_client_cls, get):
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client.get = get
    mock_client_cls.return_value = mock_client
    return mock_client


def _provider():
    from route_navigator.core.provider import AMapRoutingProvider
    return AMapRoutingProvider(api_key="test-key", base_url="https://amap.test")


def test_missing_key_fails_initialization():
    from route_navigator.core.provider import AMapRoutingProvider
    from route_navigator.core.errors import ProviderInitializationError
    with pytest.raises(ProviderInitializationError, match="API key"):
        AMapRoutingProvider(api_key="")


def test_from_settings():
    from route_navigator.core.provider import AMapRoutingProvider
    from route_navigator.settings import Settings
    provider = AMapRoutingProvider.from_settings(
        Settings(amap_key="abc", amap_base_url="https://example.test/", request_timeout=3.0)
    )
    assert provider.api_key == "abc"
    assert provider.base_url == "https://example.test"
    assert provider.timeout == 3.0


def test_format_location_is_lng_lat():
    from route_navigator.core.provider import format_location
    assert format_location(Coordinate(lat=30.25, lon=120.15)) == "120.150000,30.250000"


@pytest.mark.anyio
async def test_walking_route_parses_metrics_and_step_polylines():
    with patch("httpx.AsyncClient") as mock_client_cls:
        client = _mock_client(mock_client_cls, AsyncMock(return_value=_response(WALKING_OK)))
        route = await _provider().walking_route(ORIGIN, DEST)

    assert route.distance == 1200
    assert route.duration == 900
    assert len(route.polylines) == 2

    url = client.get.call_args.args[0]
    params = client.get.call_args.kwargs["params"]
    assert url == "https://amap.test/v5/direction/walking"
    assert params["key"] == "test-key"
    assert params["origin"] == "116.390000,39.900000"
    assert params["destination"] == "116.390000,39.910000"
    assert "polyline" in params["show_fields"]


@pytest.mark.anyio
async def test_driving_route_uses_recommended_strategy():
    with patch("httpx.AsyncClient") as mock_client_cls:
        client = _mock_client(mock_client_cls, AsyncMock(return_value=_response(WALKING_OK)))
        await _provider().driving_route(ORIGIN, DEST)

    assert client.get.call_args.args[0].endswith("/v5/direction/driving")
    assert client.get.call_args.kwargs["params"]["strategy"] == "32"


@pytest.mark.anyio
async def test_transit_route_collects_walk_bus_and_rail_geometry():
    with patch("httpx.AsyncClient") as mock_client_cls:
        client = _mock_client(mock_client_cls, AsyncMock(return_value=_response(TRANSIT_OK)))
        route = await _provider().transit_route(ORIGIN, DEST, "0571")

    assert route.distance == 5300
    assert route.duration == 1800
    assert route.polylines == [
        "120.10,30.20;120.11,30.21",
        "120.11,30.21;120.15,30.25",
        "120.15,30.25;120.20,30.30",
    ]
    params = client.get.call_args.kwargs["params"]
    assert params["city1"] == "0571"
    assert params["city2"] == "0571"


@pytest.mark.anyio
async def test_transit_without_city_code_warns_and_still_requests(caplog):
    with caplog.at_level(logging.WARNING, logger="route_navigator.core.provider"):
        with patch("httpx.AsyncClient") as mock_client_cls:
            client = _mock_client(mock_client_cls, AsyncMock(return_value=_response(TRANSIT_OK)))
            await _provider().transit_route(ORIGIN, DEST, None)

    params = client.get.call_args.kwargs["params"]
    assert "city1" not in params
    assert any("city code" in r.message for r in caplog.records)


@pytest.mark.anyio
@pytest.mark.parametrize("infocode", ["10021", "10004", "10014", "10019", "10020"])
async def test_qps_infocodes_classified_as_rate_limit(infocode):
    from route_navigator.core.errors import ProviderError, ProviderErrorKind
    payload = {"status": "0", "info": "CUQPS_HAS_EXCEEDED_THE_LIMIT", "infocode": infocode}
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(return_value=_response(payload)))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().walking_route(ORIGIN, DEST)

    assert excinfo.value.kind is ProviderErrorKind.RATE_LIMITED
    assert excinfo.value.code == infocode
    assert excinfo.value.retryable


@pytest.mark.anyio
async def test_other_infocode_is_rejected_not_retryable():
    from route_navigator.core.errors import ProviderError, ProviderErrorKind
    payload = {"status": "0", "info": "INVALID_USER_KEY", "infocode": "10001"}
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(return_value=_response(payload)))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().driving_route(ORIGIN, DEST)

    assert excinfo.value.kind is ProviderErrorKind.REJECTED
    assert not excinfo.value.retryable
    assert "INVALID_USER_KEY" in str(excinfo.value)


@pytest.mark.anyio
async def test_timeout_classified():
    from route_navigator.core.errors import ProviderError, ProviderErrorKind
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(side_effect=httpx.TimeoutException("timeout")))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().walking_route(ORIGIN, DEST)
    assert excinfo.value.kind is ProviderErrorKind.TIMEOUT


@pytest.mark.anyio
async def test_connect_error_classified_as_transport():
    from route_navigator.core.errors import ProviderError, ProviderErrorKind
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(side_effect=httpx.ConnectError("refused")))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().walking_route(ORIGIN, DEST)
    assert excinfo.value.kind is ProviderErrorKind.TRANSPORT


@pytest.mark.anyio
@pytest.mark.parametrize("status, kind", [(429, "rate_limited"), (503, "transport")])
async def test_http_status_errors(status, kind):
    from route_navigator.core.errors import ProviderError
    response_obj = MagicMock()
    response_obj.status_code = status
    error = httpx.HTTPStatusError(f"{status}", request=MagicMock(), response=response_obj)
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(return_value=_response(status_error=error)))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().walking_route(ORIGIN, DEST)
    assert excinfo.value.kind.value == kind
    assert excinfo.value.code == str(status)


@pytest.mark.anyio
async def test_invalid_json_classified():
    from route_navigator.core.errors import ProviderError, ProviderErrorKind
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(return_value=_response(json_error=ValueError("bad json"))))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().walking_route(ORIGIN, DEST)
    assert excinfo.value.kind is ProviderErrorKind.INVALID_RESPONSE


@pytest.mark.anyio
async def test_empty_paths_is_no_route():
    from route_navigator.core.errors import ProviderError, ProviderErrorKind
    payload = {"status": "1", "info": "OK", "route": {"paths": []}}
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(return_value=_response(payload)))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().walking_route(ORIGIN, DEST)
    assert excinfo.value.kind is ProviderErrorKind.NO_ROUTE


@pytest.mark.anyio
async def test_missing_route_is_invalid_response():
    from route_navigator.core.errors import ProviderError, ProviderErrorKind
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(return_value=_response({"status": "1"})))
        with pytest.raises(ProviderError) as excinfo:
            await _provider().transit_route(ORIGIN, DEST, "010")
    assert excinfo.value.kind is ProviderErrorKind.INVALID_RESPONSE


@pytest.mark.anyio
async def test_client_sends_user_agent():
    captured_init_kwargs = {}

    class CapturingClient:
        def __init__(self, **kwargs):
            captured_init_kwargs.update(kwargs)
            self._inner = AsyncMock()
            self._inner.get = AsyncMock(return_value=_response(WALKING_OK))

        async def __aenter__(self):
            return self._inner

        async def __aexit__(self, *args):
            pass

    with patch("httpx.AsyncClient", CapturingClient):
        await _provider().walking_route(ORIGIN, DEST)

    assert "route-navigator" in captured_init_kwargs["headers"]["User-Agent"]
    assert captured_init_kwargs["timeout"] == 10.0


def test_parse_path_response_handles_v3_duration_and_missing_metrics():
    from route_navigator.core.provider import parse_path_response
    route = parse_path_response({"route": {"paths": [{"distance": "", "duration": "75", "steps": []}]}})
    assert route.distance is None
    assert route.duration == 75
    assert route.polylines == []


def test_parse_transit_response_accepts_flat_buslines():
    from route_navigator.core.provider import parse_transit_response
    route = parse_transit_response({"route": {"transits": [{
        "distance": "100",
        "duration": "60",
        "segments": [{"buslines": [{"polyline": "1.0,2.0;1.1,2.1"}], "walking": []}],
    }]}})
    assert route.polylines == ["1.0,2.0;1.1,2.1"]


@pytest.mark.parametrize("value", ["1e400", "inf", "-inf", "nan"])
def test_non_finite_metrics_are_treated_as_missing(value):
    from route_navigator.core.provider import parse_path_response
    route = parse_path_response({"route": {"paths": [{"distance": value, "duration": value, "steps": []}]}})
    assert route.distance is None
    assert route.duration is None


@pytest.mark.anyio
async def test_overflowing_distance_does_not_abort_itinerary():
    from route_navigator.core.navigation import RouteNavigator
    payload = {"status": "1", "route": {"paths": [{
        "distance": "1e400",
        "cost": {"duration": "60"},
        "steps": [{"polyline": "116.390000,39.900000;116.390000,39.910000"}],
    }]}}
    with patch("httpx.AsyncClient") as mock_client_cls:
        _mock_client(mock_client_cls, AsyncMock(return_value=_response(payload)))
        path = await RouteNavigator(_provider()).plan_navigation_route(
            [Waypoint(name="a", coordinate=ORIGIN), Waypoint(name="b", coordinate=DEST)],
            TravelMode.WALKING,
        )
    assert path.segments[0].distance is None
    assert path.segments[0].duration == 60
