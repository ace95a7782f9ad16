"""
Feature Domain Models - Snapshots collected from upstream feeds and the flat
feature records the estimators consume.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date as Date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(CamelModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


# --- Single-day snapshots ---

class WeatherSnapshot(CamelModel):
    """Terrestrial weather at a location for one day."""

    date: Date
    temperature: float = 20.0  # Celsius
    humidity: float = 50.0  # percent
    pressure: float = 1013.25  # hPa
    wind_speed: float = 0.0  # m/s
    visibility: float = 10.0  # km
    cloud_cover: float = 50.0  # percent
    precipitation: float = 0.0  # mm


class SolarSnapshot(CamelModel):
    """Solar activity for one day."""

    date: Date
    solar_flux: float = 100.0
    sunspot_number: float = 0.0
    solar_wind_speed: float = 400.0  # km/s
    geomagnetic_activity: float = 2.0  # Kp


class RainfallSnapshot(CamelModel):
    date: Date
    precipitation: float = 0.0  # mm
    quality: Literal["high", "medium", "low"] = "medium"


# --- Feature records ---

class FeatureRecord(CamelModel):
    """
    One satellite-day worth of features.

    Every field has a default so scoring never fails on a sparse record.
    ``downtime_flag`` is only set on training samples.
    """

    # Historical / supply
    scene_count: float = 0.0
    expected_scenes: float = Field(default=200.0, gt=0)
    avg_cloud_cover: float = 0.0
    quality_score: float = 0.0

    # Space weather
    kp_index: float = 0.0
    geomagnetic_storm: bool = False
    solar_flux: float = 0.0
    sunspot_number: float = 0.0
    solar_wind_speed: float = 400.0

    # Environmental
    temperature: float = 0.0
    humidity: float = 50.0
    pressure: float = 1013.25
    wind_speed: float = 0.0
    visibility: float = 10.0
    avg_rainfall: float = 0.0
    gpm_rainfall: float = 0.0
    weather_quality: float = 0.5

    # Temporal
    day_of_week: int = 0  # Sunday = 0
    month: int = 0  # January = 0
    season: int = 0  # spring = 0 .. winter = 3

    # Target
    downtime_flag: int | None = Field(default=None, ge=0, le=1)


class PricingFeatures(CamelModel):
    """Regional supply, demand and environment features for a pricing quote."""

    observation_density: float = 0.0  # scenes per day over the window
    average_cloud_cover: float = 0.5  # 0-1
    data_quality: float = 0.5  # 0-1
    demand_volume: float = 0.0  # summed booking demand
    seasonal_demand: float = 1.0
    weather_risk: float = 0.3  # 0-1
    rainfall_frequency: float = 0.2  # 0-1
    season: int = 0  # spring = 0 .. winter = 3
    month: int = 0  # January = 0
    day_of_week: int = 0  # Sunday = 0


class PricingSample(CamelModel):
    features: PricingFeatures
    actual_multiplier: float
