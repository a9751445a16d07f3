import asyncio
from datetime import date

import httpx
import pytest

from app.core.errors import UpstreamServiceError, WeatherServiceError
from app.services.weather_service import WeatherService

START = 1_751_328_000  # 2025-07-01T00:00:00Z


def current_payload(name="Kochi"):
    return {
        "coord": {"lat": 9.93, "lon": 76.26},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "main": {
            "temp": 29.1,
            "feels_like": 33.4,
            "temp_min": 28.0,
            "temp_max": 30.2,
            "pressure": 1007,
            "humidity": 79,
        },
        "visibility": 10000,
        "wind": {"speed": 4.1, "deg": 250},
        "dt": START,
        "sys": {"country": "IN"},
        "name": name,
    }


def forecast_payload():
    items = []
    for index in range(40):
        items.append(
            {
                "dt": START + index * 3 * 3600,
                "main": {
                    "temp": 27.0 + index * 0.05,
                    "feels_like": 30.0,
                    "temp_min": 25.0,
                    "temp_max": 31.0,
                    "pressure": 1006,
                    "humidity": 82,
                },
                "weather": [{"main": "Rain", "description": "moderate rain", "icon": "10d"}],
                "wind": {"speed": 5.0, "deg": 240},
                "rain": {"3h": 4.5},
            }
        )
    return {"list": items}


def service_with(handler, api_key="test-key"):
    return WeatherService(api_key=api_key, transport=httpx.MockTransport(handler))


def test_current_by_city_builds_query_and_snapshot():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        seen["path"] = request.url.path
        return httpx.Response(200, json=current_payload())

    snapshot = asyncio.run(service_with(handler).current_by_city("Kochi", "Kerala"))

    assert seen["path"].endswith("/weather")
    assert seen["q"] == "Kochi,Kerala,IN"
    assert seen["units"] == "metric"
    assert seen["appid"] == "test-key"
    assert snapshot.location.name == "Kochi"
    assert snapshot.current.visibility == pytest.approx(10.0)
    assert snapshot.current.description == "light rain"
    assert snapshot.forecast is None


def test_forecast_takes_one_reading_per_day():
    def handler(request):
        if request.url.path.endswith("/forecast"):
            return httpx.Response(200, json=forecast_payload())
        return httpx.Response(200, json=current_payload())

    snapshot = asyncio.run(service_with(handler).forecast(9.93, 76.26))

    assert len(snapshot.forecast) == 5
    assert [day.date for day in snapshot.forecast] == [
        "2025-07-01",
        "2025-07-02",
        "2025-07-03",
        "2025-07-04",
        "2025-07-05",
    ]
    assert snapshot.forecast[0].rainfall == 4.5
    assert snapshot.forecast[0].weather == "moderate rain"


def test_extended_forecast_adds_insights():
    def handler(request):
        if request.url.path.endswith("/forecast"):
            return httpx.Response(200, json=forecast_payload())
        return httpx.Response(200, json=current_payload())

    snapshot = asyncio.run(
        service_with(handler).extended_forecast(9.93, 76.26, today=date(2025, 7, 10))
    )

    assert snapshot.seasonal_insights.current_season == "Kharif"
    assert snapshot.seasonal_insights.climate_zone == "Tropical Coastal (Kerala)"
    assert snapshot.agricultural_recommendations.planting.soil_moisture == "Adequate moisture"
    assert snapshot.extended_outlook.outlook[0].month == "July"
    assert len(snapshot.extended_outlook.outlook) == 4


def test_upstream_error_message_is_surfaced():
    def handler(request):
        return httpx.Response(401, json={"cod": 401, "message": "Invalid API key"})

    with pytest.raises(WeatherServiceError) as excinfo:
        asyncio.run(service_with(handler).current_by_coords(9.9, 76.2))

    assert excinfo.value.message == "Failed to fetch weather data: Invalid API key"
    assert excinfo.value.service == "weather"
    assert isinstance(excinfo.value, UpstreamServiceError)


def test_network_failure_raises_weather_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(WeatherServiceError):
        asyncio.run(service_with(handler).current_by_coords(9.9, 76.2))


def test_unexpected_payload_raises_weather_error():
    def handler(request):
        return httpx.Response(200, json={"cod": 200})

    with pytest.raises(WeatherServiceError):
        asyncio.run(service_with(handler).current_by_coords(9.9, 76.2))


def test_missing_api_key():
    def handler(request):
        raise AssertionError("no request expected without an API key")

    with pytest.raises(WeatherServiceError, match="API key not configured"):
        asyncio.run(service_with(handler, api_key="").current_by_city("Kochi"))
