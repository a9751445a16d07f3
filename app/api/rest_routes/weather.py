import math
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.state import AdvisoryState, get_advisory_state
from app.models.api import ApiResponse
from app.models.weather import WeatherSnapshot

router = APIRouter(prefix="/api/weather", tags=["Weather"])


def parse_coordinates(
    lat: Optional[str], lon: Optional[str], missing: str
) -> Tuple[float, float]:
    if not lat or not lon:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=missing)
    try:
        latitude, longitude = float(lat), float(lon)
    except ValueError:
        latitude = longitude = math.nan
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid latitude or longitude values",
        )
    return latitude, longitude


@router.get("/current")
async def get_current_weather_data(
    city: Optional[str] = Query(None, description="City name"),
    state: Optional[str] = Query(None, description="State name, narrows the city lookup"),
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Get current weather for a city in India.
    """
    if not city:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="City parameter is required",
        )
    weather = await advisory.weather.current_by_city(city, state)
    return ApiResponse[WeatherSnapshot](data=weather).render()


@router.get("/coords")
async def get_weather_by_coordinates(
    lat: Optional[str] = Query(None, description="Latitude"),
    lon: Optional[str] = Query(None, description="Longitude"),
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Get current weather for a specific location.
    """
    latitude, longitude = parse_coordinates(
        lat, lon, "Latitude and longitude parameters are required"
    )
    weather = await advisory.weather.current_by_coords(latitude, longitude)
    return ApiResponse[WeatherSnapshot](data=weather).render()


@router.get("/forecast")
async def get_weather_forecast(
    lat: Optional[str] = Query(None, description="Latitude"),
    lon: Optional[str] = Query(None, description="Longitude"),
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Get current weather plus a 5-day forecast for a specific location.
    """
    latitude, longitude = parse_coordinates(
        lat, lon, "Latitude and longitude parameters are required"
    )
    weather = await advisory.weather.forecast(latitude, longitude)
    return ApiResponse[WeatherSnapshot](data=weather).render()


@router.get("/extended")
async def get_extended_forecast(
    lat: Optional[str] = Query(None, description="Latitude"),
    lon: Optional[str] = Query(None, description="Longitude"),
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Get the 5-day forecast with seasonal insights, agricultural
    recommendations and a four-month outlook.
    """
    latitude, longitude = parse_coordinates(lat, lon, "Latitude and longitude are required")
    weather = await advisory.weather.extended_forecast(latitude, longitude)
    return ApiResponse[WeatherSnapshot](
        data=weather,
        message="Extended weather forecast with agricultural insights retrieved successfully",
    ).render()
