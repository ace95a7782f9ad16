"""
Collection Service - Gathers every feed the estimators need.

All requests for one collection are issued concurrently and awaited jointly.
Extraction starts only after every source has settled; a failed source is
replaced by its default and logged, never propagated.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date as Date, timedelta

import pandas as pd

from satrisk.core.domain.features import (
    Coordinates,
    FeatureRecord,
    RainfallSnapshot,
    SolarSnapshot,
    WeatherSnapshot,
)
from satrisk.core.ports.data_source import (
    BOOKING_COLUMNS,
    RAINFALL_COLUMNS,
    SCENE_COLUMNS,
    SPACE_WEATHER_COLUMNS,
    DataSource,
)
from satrisk.core.services.features import (
    build_feature_records,
    daily_availability,
    enhance_features,
    expected_scenes_per_day,
    temporal_features,
)

logger = logging.getLogger(__name__)


def default_weather(day: Date) -> WeatherSnapshot:
    return WeatherSnapshot(
        date=day,
        temperature=20.0,
        humidity=50.0,
        pressure=1013.25,
        wind_speed=10.0,
        visibility=10.0,
        cloud_cover=30.0,
        precipitation=0.0,
    )


def default_solar(day: Date) -> SolarSnapshot:
    return SolarSnapshot(date=day)


@dataclass
class Conditions:
    """Point-in-time conditions at a location."""

    weather: WeatherSnapshot | None
    solar: SolarSnapshot | None
    rainfall: RainfallSnapshot | None


@dataclass
class PricingInputs:
    scenes: pd.DataFrame
    rainfall: pd.DataFrame
    bookings: pd.DataFrame


class DataCollector:
    """
    Collects feature inputs from a DataSource.
    """

    def __init__(self, source: DataSource):
        """
        Args:
            source: Port to the upstream feeds
        """
        self.source = source

    @staticmethod
    def _settled(result, name: str, default):
        if isinstance(result, BaseException):
            logger.warning(f"{name} collection failed, using defaults: {result}")
            return default
        if result is None:
            return default
        return result

    async def collect_history(self, satellite: str, start: Date, end: Date) -> list[FeatureRecord]:
        """
        Labeled feature records for each day the satellite produced scenes.
        """
        logger.info(f"Collecting history for {satellite} from {start} to {end}")
        scenes, space_weather = await asyncio.gather(
            self.source.fetch_scenes(satellite, start, end),
            self.source.fetch_space_weather(start, end),
            return_exceptions=True,
        )
        scenes = self._settled(scenes, "Scene", pd.DataFrame(columns=SCENE_COLUMNS))
        space_weather = self._settled(
            space_weather, "Space weather", pd.DataFrame(columns=SPACE_WEATHER_COLUMNS)
        )

        availability = daily_availability(scenes, satellite)
        records = build_feature_records(availability, space_weather)
        logger.info(f"Built {len(records)} feature records for {satellite}")
        return records

    async def collect_conditions(self, coords: Coordinates, day: Date) -> Conditions:
        """Weather, solar and rainfall snapshots for one day."""
        weather, solar, rainfall = await asyncio.gather(
            self.source.fetch_weather(coords, day),
            self.source.fetch_solar(day),
            self.source.fetch_rainfall(coords, day),
            return_exceptions=True,
        )
        return Conditions(
            weather=self._settled(weather, "Weather", default_weather(day)),
            solar=self._settled(solar, "Solar activity", default_solar(day)),
            rainfall=self._settled(rainfall, "Rainfall", None),
        )

    async def collect_current(
        self,
        satellite: str,
        coords: Coordinates,
        day: Date,
        history_days: int,
    ) -> tuple[FeatureRecord, list[FeatureRecord]]:
        """
        Unlabeled enhanced record for ``day`` plus the history it was built from.

        The record carries the most recent day's scene statistics and space
        weather, the calendar of ``day`` and that day's conditions.
        """
        start = day - timedelta(days=history_days)
        history, conditions = await asyncio.gather(
            self.collect_history(satellite, start, day),
            self.collect_conditions(coords, day),
        )

        if history:
            base = history[-1]
        else:
            base = FeatureRecord(expected_scenes=expected_scenes_per_day(satellite))

        current = base.model_copy(update={"downtime_flag": None, **temporal_features(day)})
        current = enhance_features(current, conditions.weather, conditions.solar, conditions.rainfall)

        enhanced_history = [
            enhance_features(record, conditions.weather, conditions.solar, conditions.rainfall)
            for record in history
        ]
        return current, enhanced_history

    async def collect_pricing_inputs(self, coords: Coordinates, start: Date, end: Date) -> PricingInputs:
        """Regional scenes, rainfall history and bookings for a window."""
        scenes, rainfall, bookings = await asyncio.gather(
            self.source.fetch_region_scenes(coords, start, end),
            self.source.fetch_rainfall_history(coords, start, end),
            self.source.fetch_bookings(coords, start, end),
            return_exceptions=True,
        )
        return PricingInputs(
            scenes=self._settled(scenes, "Regional scene", pd.DataFrame(columns=SCENE_COLUMNS)),
            rainfall=self._settled(rainfall, "Rainfall history", pd.DataFrame(columns=RAINFALL_COLUMNS)),
            bookings=self._settled(bookings, "Booking", pd.DataFrame(columns=BOOKING_COLUMNS)),
        )
