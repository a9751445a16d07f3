from pathlib import Path

import pytest

from app.models.region import ClimateZone, Region, RegionMatch, StateCode
from app.models.weather import (
    CurrentConditions,
    DailyForecast,
    WeatherCondition,
    WeatherLocation,
    WeatherSnapshot,
)

DATA_ROOT = Path(__file__).resolve().parent.parent / "data"


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def data_root() -> Path:
    return DATA_ROOT


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kerala_region() -> Region:
    return Region(
        state=StateCode.KERALA,
        district="Ernakulam",
        climate_zone=ClimateZone.TROPICAL_COASTAL,
        confidence=1.0,
        matched_by=RegionMatch.BOUNDING_BOX,
    )


@pytest.fixture
def jharkhand_region() -> Region:
    return Region(
        state=StateCode.JHARKHAND,
        district="Ranchi",
        climate_zone=ClimateZone.SUBTROPICAL_HUMID,
        confidence=1.0,
        matched_by=RegionMatch.BOUNDING_BOX,
    )


def make_forecast_day(day: int, temp: float = 28.0, rainfall: float = 0.0) -> DailyForecast:
    return DailyForecast(
        date=f"2025-09-{day:02d}",
        temp_min=temp - 4,
        temp_max=temp + 4,
        temp_avg=temp,
        humidity=70,
        rainfall=rainfall,
        wind_speed=3.0,
        pressure=1008,
        weather="light rain" if rainfall else "clear sky",
    )


def make_snapshot(temp: float = 29.5, humidity: int = 78, with_forecast: bool = True) -> WeatherSnapshot:
    return WeatherSnapshot(
        location=WeatherLocation(name="Kochi", country="IN", lat=9.93, lon=76.26),
        current=CurrentConditions(
            temp=temp,
            feels_like=temp + 2,
            humidity=humidity,
            pressure=1008,
            visibility=8.0,
            wind_speed=3.6,
            wind_deg=240,
            weather=[WeatherCondition(main="Clouds", description="scattered clouds")],
        ),
        forecast=[make_forecast_day(day) for day in range(1, 6)] if with_forecast else None,
    )


@pytest.fixture
def weather_snapshot() -> WeatherSnapshot:
    return make_snapshot()


@pytest.fixture
def snapshot_factory():
    return make_snapshot


@pytest.fixture
def forecast_day_factory():
    return make_forecast_day
