import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.core.errors import WeatherServiceError
from app.models.weather import (
    CurrentConditions,
    CurrentWeatherResponse,
    DailyForecast,
    ForecastResponse,
    WeatherLocation,
    WeatherSnapshot,
)
from app.services import weather_insights

logger = logging.getLogger(__name__)

BASE_URL = "https://api.openweathermap.org/data/2.5"
READINGS_PER_DAY = 8
FORECAST_DAYS = 5


def _error_message(exc: httpx.HTTPStatusError) -> str:
    try:
        payload = exc.response.json()
    except ValueError:
        return exc.response.text or str(exc)
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return str(exc)


def to_snapshot(current: CurrentWeatherResponse) -> WeatherSnapshot:
    return WeatherSnapshot(
        location=WeatherLocation(
            name=current.name,
            country=current.sys.country,
            lat=current.coord.lat,
            lon=current.coord.lon,
        ),
        current=CurrentConditions(
            temp=current.main.temp,
            feels_like=current.main.feels_like,
            humidity=current.main.humidity,
            pressure=current.main.pressure,
            visibility=current.visibility / 1000,
            wind_speed=current.wind.speed,
            wind_deg=current.wind.deg,
            weather=current.weather,
        ),
    )


def daily_forecast(forecast: ForecastResponse) -> List[DailyForecast]:
    """One reading per day from the 3-hourly list, at most five days."""
    days = []
    for item in forecast.list[::READINGS_PER_DAY][:FORECAST_DAYS]:
        condition = item.weather[0] if item.weather else None
        rainfall = item.rain.three_hours if item.rain and item.rain.three_hours else 0.0
        days.append(
            DailyForecast(
                date=item.dt.date().isoformat(),
                temp_min=item.main.temp_min,
                temp_max=item.main.temp_max,
                temp_avg=item.main.temp,
                humidity=item.main.humidity,
                rainfall=rainfall,
                wind_speed=item.wind.speed,
                pressure=item.main.pressure,
                weather=condition.description if condition else "unknown",
                icon=condition.icon if condition else None,
            )
        )
    return days


class WeatherService:
    """
    OpenWeatherMap client returning typed WeatherSnapshot objects.

    Every upstream failure (missing key, HTTP error, timeout, unexpected payload)
    raises WeatherServiceError.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = 20.0,
        base_url: str = BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url
        self._transport = transport

    async def _get(self, client: httpx.AsyncClient, path: str, params: Dict[str, Any]) -> Any:
        params = {**params, "appid": self.api_key, "units": "metric"}
        try:
            response = await client.get(f"{self.base_url}/{path}", params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            message = _error_message(exc)
            logger.error("OpenWeather %s returned %s: %s", path, exc.response.status_code, message)
            raise WeatherServiceError(f"Failed to fetch weather data: {message}") from exc
        except httpx.HTTPError as exc:
            logger.error("OpenWeather %s request failed: %s", path, exc)
            raise WeatherServiceError(f"Failed to fetch weather data: {exc}") from exc
        except ValueError as exc:
            raise WeatherServiceError("Weather service returned an invalid response") from exc

    def _client(self) -> httpx.AsyncClient:
        if not self.api_key:
            raise WeatherServiceError("OpenWeather API key not configured")
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _fetch_current(self, client: httpx.AsyncClient, params: Dict[str, Any]) -> CurrentWeatherResponse:
        data = await self._get(client, "weather", params)
        try:
            return CurrentWeatherResponse(**data)
        except (TypeError, ValidationError) as exc:
            raise WeatherServiceError("Weather service returned an unexpected payload") from exc

    async def _fetch_forecast(self, client: httpx.AsyncClient, lat: float, lon: float) -> ForecastResponse:
        data = await self._get(client, "forecast", {"lat": lat, "lon": lon})
        try:
            return ForecastResponse(**data)
        except (TypeError, ValidationError) as exc:
            raise WeatherServiceError("Forecast service returned an unexpected payload") from exc

    async def current_by_city(self, city: str, state: Optional[str] = None) -> WeatherSnapshot:
        query = f"{city},{state},IN" if state else f"{city},IN"
        async with self._client() as client:
            current = await self._fetch_current(client, {"q": query})
        return to_snapshot(current)

    async def current_by_coords(self, lat: float, lon: float) -> WeatherSnapshot:
        async with self._client() as client:
            current = await self._fetch_current(client, {"lat": lat, "lon": lon})
        return to_snapshot(current)

    async def forecast(self, lat: float, lon: float) -> WeatherSnapshot:
        async with self._client() as client:
            current, forecast = await asyncio.gather(
                self._fetch_current(client, {"lat": lat, "lon": lon}),
                self._fetch_forecast(client, lat, lon),
            )
        snapshot = to_snapshot(current)
        snapshot.forecast = daily_forecast(forecast)
        return snapshot

    async def extended_forecast(
        self, lat: float, lon: float, today: Optional[date] = None
    ) -> WeatherSnapshot:
        """Current weather, five-day forecast, seasonal insights and a four-month outlook."""
        today = today or date.today()
        snapshot = await self.forecast(lat, lon)
        days = snapshot.forecast or []
        insights = weather_insights.seasonal_insights(lat, lon, days, today.month)

        snapshot.seasonal_insights = insights
        snapshot.agricultural_recommendations = weather_insights.agricultural_recommendations(
            snapshot.current, days, insights.current_season
        )
        snapshot.extended_outlook = weather_insights.extended_outlook(today)
        return snapshot
