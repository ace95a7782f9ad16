"""
Tests for LiveDataSource (mocking the HTTP client).
"""
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from satrisk.adapters.sources.live import (
    LiveDataSource,
    closest_entry,
    parse_cloud_cover,
    parse_wind_speed,
)
from satrisk.core.domain.features import Coordinates


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def mock_client():
    with patch("satrisk.adapters.sources.live.httpx.AsyncClient") as MockClient:
        yield MockClient.return_value


@pytest.fixture
def source():
    return LiveDataSource(
        stac_url="http://stac.test/",
        swpc_url="http://swpc.test",
        weather_url="http://weather.test",
        cmr_url="http://cmr.test",
        earthdata_token="secret",
        seed=3,
    )


def test_parse_wind_speed():
    assert parse_wind_speed("5 to 10 mph") == pytest.approx(5 * 0.44704)
    assert parse_wind_speed("calm") == 0
    assert parse_wind_speed(None) == 0


@pytest.mark.parametrize("forecast, cover", [
    ("Sunny", 0),
    ("Partly Cloudy", 30),
    ("Mostly Cloudy", 70),
    ("Cloudy", 90),
    ("Chance Rain Showers", 80),
    ("Patchy Fog", 50),
])
def test_parse_cloud_cover(forecast, cover):
    assert parse_cloud_cover(forecast) == cover


def test_closest_entry():
    entries = [
        {"time_tag": "2024-07-15T00:00:00Z", "speed": 1},
        {"time_tag": "2024-07-17T02:00:00Z", "speed": 2},
        {"time_tag": "2024-07-20T00:00:00Z", "speed": 3},
    ]
    target = datetime(2024, 7, 17, tzinfo=timezone.utc)
    assert closest_entry(entries, target)["speed"] == 2
    assert closest_entry([], target) is None


@pytest.mark.asyncio
async def test_fetch_scenes(source, mock_client):
    mock_client.get = AsyncMock(return_value=_response({
        "features": [
            {"properties": {"datetime": "2024-07-01T15:30:00Z", "eo:cloud_cover": 12.5,
                            "platform": "LANDSAT_9", "landsat:scene_id": "LC90140322024183LGN00"}},
            {"properties": {"datetime": "2024-07-02T15:30:00Z", "platform": "LANDSAT_9",
                            "landsat:scene_id": "LC90140322024184LGN00"}},
        ]
    }))

    scenes = await source.fetch_scenes("landsat-9", date(2024, 7, 1), date(2024, 7, 2))

    assert list(scenes["date"]) == [date(2024, 7, 1), date(2024, 7, 2)]
    assert list(scenes["cloud_cover"]) == [12.5, 0.0]
    args, kwargs = mock_client.get.call_args
    assert args[0] == "http://stac.test/search"
    assert kwargs["params"]["datetime"] == "2024-07-01T00:00:00Z/2024-07-02T23:59:59Z"
    assert kwargs["params"]["limit"] == 1000


@pytest.mark.asyncio
async def test_fetch_space_weather(source, mock_client):
    kp = [
        {"time_tag": "2024-07-01T00:00:00", "kp_index": 4},
        {"time_tag": "2024-07-01T12:00:00", "kp_index": 6},
        {"time_tag": "2024-06-01T12:00:00", "kp_index": 9},
    ]
    flux = [{"time_tag": "2024-07-02T00:00:00", "flux": 150}]

    async def get(url, **kwargs):
        return _response(kp if "planetary_k_index" in url else flux)

    mock_client.get = AsyncMock(side_effect=get)

    weather = await source.fetch_space_weather(date(2024, 7, 1), date(2024, 7, 3))

    assert list(weather["kp_index"]) == [5, 0, 0]
    assert list(weather["geomagnetic_storm"]) == [True, False, False]
    assert list(weather["solar_flux"]) == [100, 150, 100]


@pytest.mark.asyncio
async def test_fetch_space_weather_flux_failure(source, mock_client):
    async def get(url, **kwargs):
        if "magnetics" in url:
            raise httpx.ConnectError("down")
        return _response([{"time_tag": "2024-07-01T00:00:00", "kp_index": 2}])

    mock_client.get = AsyncMock(side_effect=get)

    weather = await source.fetch_space_weather(date(2024, 7, 1), date(2024, 7, 1))

    assert weather.iloc[0]["kp_index"] == 2
    assert weather.iloc[0]["solar_flux"] == 100


@pytest.mark.asyncio
async def test_fetch_weather(source, mock_client):
    points = {"properties": {"forecastHourly": "http://weather.test/gridpoints/OKX/33,35/forecast/hourly"}}
    hourly = {"properties": {"periods": [
        {"startTime": "2024-07-16T20:00:00-04:00", "temperature": 86, "windSpeed": "10 mph",
         "shortForecast": "Sunny", "relativeHumidity": {"value": 40},
         "probabilityOfPrecipitation": {"value": 0}},
        {"startTime": "2024-07-17T08:00:00-04:00", "temperature": 50, "windSpeed": "5 to 10 mph",
         "shortForecast": "Mostly Cloudy", "relativeHumidity": {"value": None},
         "probabilityOfPrecipitation": {"value": 30}},
    ]}}

    async def get(url, **kwargs):
        return _response(points if "/points/" in url else hourly)

    mock_client.get = AsyncMock(side_effect=get)

    weather = await source.fetch_weather(Coordinates(lat=40.7, lon=-74.0), date(2024, 7, 17))

    # 2024-07-17T00:00Z is closest to the 20:00-04:00 period
    assert weather.temperature == pytest.approx(30)
    assert weather.humidity == 40
    assert weather.cloud_cover == 0
    assert weather.wind_speed == pytest.approx(10 * 0.44704)
    assert weather.pressure == 1013.25


@pytest.mark.asyncio
async def test_fetch_weather_null_island(source, mock_client):
    mock_client.get = AsyncMock(side_effect=httpx.ConnectError("down"))

    with pytest.raises(httpx.ConnectError):
        await source.fetch_weather(Coordinates(lat=0, lon=0), date(2024, 7, 17))

    assert mock_client.get.call_args[0][0] == "http://weather.test/points/40.7128,-74.006"


@pytest.mark.asyncio
async def test_fetch_solar(source, mock_client):
    async def get(url, **kwargs):
        if "sunspot" in url:
            return _response([{"time_tag": "2024-07", "sunspot_number": 120}])
        if "swepam" in url:
            return _response([{"time_tag": "2024-07-17T00:01:00Z", "speed": 520}])
        return _response([])

    mock_client.get = AsyncMock(side_effect=get)

    solar = await source.fetch_solar(date(2024, 7, 17))

    assert solar.solar_flux == 100
    assert solar.sunspot_number == 120
    assert solar.solar_wind_speed == 520
    assert solar.geomagnetic_activity == 2


@pytest.mark.asyncio
async def test_fetch_region_scenes(source, mock_client, nyc):
    mock_client.get = AsyncMock(return_value=_response({"feed": {"entry": [
        {"concept_id": "G1", "time_start": "2024-07-03T15:00:00.000Z",
         "umm": {"AdditionalAttributes": [{"Name": "CLOUD_COVER", "Values": ["42.0"]}]}},
        {"concept_id": "G2", "time_start": "2024-07-19T15:00:00.000Z"},
    ]}}))

    scenes = await source.fetch_region_scenes(nyc, date(2024, 7, 1), date(2024, 7, 31))

    assert list(scenes["scene_id"]) == ["G1", "G2"]
    assert list(scenes["cloud_cover"]) == [42.0, 0.0]
    _, kwargs = mock_client.get.call_args
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["timeout"] == 15.0


@pytest.mark.asyncio
async def test_http_errors_propagate(source, mock_client):
    response = MagicMock()
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "503", request=MagicMock(), response=MagicMock()
    )
    mock_client.get = AsyncMock(return_value=response)

    with pytest.raises(httpx.HTTPStatusError):
        await source.fetch_scenes("landsat-9", date(2024, 7, 1), date(2024, 7, 2))


@pytest.mark.asyncio
async def test_close(source, mock_client):
    mock_client.aclose = AsyncMock()
    await source._get_client()
    await source.close()
    mock_client.aclose.assert_awaited_once()
