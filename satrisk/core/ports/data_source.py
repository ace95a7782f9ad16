"""
DataSource Port - Interface for the upstream feeds the estimators learn from.
Tabular feeds are returned as Pandas DataFrames, point lookups as snapshots.
"""

from abc import ABC, abstractmethod
from datetime import date as Date

import pandas as pd
from pydantic import BaseModel, ConfigDict

from satrisk.core.domain.features import (
    Coordinates,
    RainfallSnapshot,
    SolarSnapshot,
    WeatherSnapshot,
)

SCENE_COLUMNS = ["date", "sat_id", "cloud_cover", "scene_id"]
SPACE_WEATHER_COLUMNS = ["date", "kp_index", "solar_flux", "geomagnetic_storm"]
RAINFALL_COLUMNS = ["date", "precipitation"]
BOOKING_COLUMNS = ["date", "region", "service_type", "demand_volume", "price_paid"]


class DataSource(BaseModel, ABC):
    """
    Abstract interface for satellite, space-weather and environmental feeds.
    Also serves as a Pydantic Model for configuration validation.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @abstractmethod
    async def fetch_scenes(self, satellite: str, start: Date, end: Date) -> pd.DataFrame:
        """
        Scenes acquired by a satellite between two dates (inclusive).

        Returns:
            DataFrame with SCENE_COLUMNS, cloud cover in percent
        """
        ...

    @abstractmethod
    async def fetch_space_weather(self, start: Date, end: Date) -> pd.DataFrame:
        """
        One row per day between two dates (inclusive).

        Returns:
            DataFrame with SPACE_WEATHER_COLUMNS
        """
        ...

    @abstractmethod
    async def fetch_weather(self, coords: Coordinates, day: Date) -> WeatherSnapshot | None:
        """Terrestrial weather at a location."""
        ...

    @abstractmethod
    async def fetch_solar(self, day: Date) -> SolarSnapshot | None:
        """Solar activity for a day."""
        ...

    @abstractmethod
    async def fetch_rainfall(self, coords: Coordinates, day: Date) -> RainfallSnapshot | None:
        """Rainfall estimate at a location for a day."""
        ...

    @abstractmethod
    async def fetch_region_scenes(
        self,
        coords: Coordinates,
        start: Date,
        end: Date,
        radius: float = 0.1,
    ) -> pd.DataFrame:
        """
        Scenes covering a bounding box around a location.

        Args:
            coords: Centre of the box
            start: First day
            end: Last day
            radius: Half-width of the box in degrees (~11 km at 0.1)

        Returns:
            DataFrame with SCENE_COLUMNS
        """
        ...

    @abstractmethod
    async def fetch_rainfall_history(self, coords: Coordinates, start: Date, end: Date) -> pd.DataFrame:
        """
        Daily rainfall at a location.

        Returns:
            DataFrame with RAINFALL_COLUMNS, precipitation in mm per day
        """
        ...

    @abstractmethod
    async def fetch_bookings(self, coords: Coordinates, start: Date, end: Date) -> pd.DataFrame:
        """
        Booking log for the region around a location.

        Returns:
            DataFrame with BOOKING_COLUMNS
        """
        ...

    async def close(self) -> None:
        """Release any held connections."""
        return None
