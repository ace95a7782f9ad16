"""
Synthetic Data Source - Seeded generator standing in for the live feeds.

Used for offline runs, demos and tests. Two sources built with the same seed
produce the same data for the same sequence of calls.
"""

import logging
import math
from datetime import date as Date, timedelta

import numpy as np
import pandas as pd
from pydantic import PrivateAttr

from satrisk.adapters.sources.climatology import days_between, estimate_rainfall, simulate_bookings
from satrisk.core.domain.features import (
    Coordinates,
    RainfallSnapshot,
    SolarSnapshot,
    WeatherSnapshot,
)
from satrisk.core.ports.data_source import (
    RAINFALL_COLUMNS,
    SCENE_COLUMNS,
    SPACE_WEATHER_COLUMNS,
    DataSource,
)
from satrisk.core.services.features import expected_scenes_per_day

logger = logging.getLogger(__name__)

DOWNTIME_RATE = 0.1
DOWNTIME_SCENE_FRACTION = 0.3
STORM_KP = 5
REGION_SCENE_INTERVAL_DAYS = 15


class SyntheticDataSource(DataSource):
    """
    Data source drawing every feed from a numpy random generator.
    """
    seed: int | None = None

    _rng: np.random.Generator = PrivateAttr()

    def model_post_init(self, __context):
        self._rng = np.random.default_rng(self.seed)

    async def fetch_scenes(self, satellite: str, start: Date, end: Date) -> pd.DataFrame:
        expected = expected_scenes_per_day(satellite)
        frames = []
        for day in days_between(start, end):
            is_downtime = self._rng.random() < DOWNTIME_RATE
            count = math.floor(expected * DOWNTIME_SCENE_FRACTION) if is_downtime else expected
            frames.append(pd.DataFrame({
                "date": [day] * count,
                "sat_id": satellite,
                "cloud_cover": self._rng.random(count) * 100,
                "scene_id": [f"{satellite}_{day.isoformat()}_{i}" for i in range(count)],
            }))

        if not frames:
            return pd.DataFrame(columns=SCENE_COLUMNS)
        scenes = pd.concat(frames, ignore_index=True)
        logger.info(f"Generated {len(scenes)} synthetic scenes for {satellite}")
        return scenes[SCENE_COLUMNS]

    async def fetch_space_weather(self, start: Date, end: Date) -> pd.DataFrame:
        rows = []
        for day in days_between(start, end):
            kp = self._rng.random() * 9
            rows.append({
                "date": day,
                "kp_index": kp,
                "solar_flux": self._rng.random() * 200 + 50,
                "geomagnetic_storm": kp >= STORM_KP,
            })
        return pd.DataFrame(rows, columns=SPACE_WEATHER_COLUMNS)

    async def fetch_weather(self, coords: Coordinates, day: Date) -> WeatherSnapshot | None:
        month = day.month - 1
        return WeatherSnapshot(
            date=day,
            temperature=20 + math.sin((month / 12) * 2 * math.pi) * 10 + (self._rng.random() - 0.5) * 5,
            humidity=50 + self._rng.random() * 30,
            pressure=1013.25 + (self._rng.random() - 0.5) * 20,
            wind_speed=self._rng.random() * 10,
            visibility=10 + self._rng.random() * 5,
            cloud_cover=self._rng.random() * 100,
            precipitation=self._rng.random() * 5,
        )

    async def fetch_solar(self, day: Date) -> SolarSnapshot | None:
        return SolarSnapshot(
            date=day,
            solar_flux=100 + self._rng.random() * 50,
            sunspot_number=math.floor(self._rng.random() * 50),
            solar_wind_speed=400 + self._rng.random() * 200,
            geomagnetic_activity=self._rng.random() * 9,
        )

    async def fetch_rainfall(self, coords: Coordinates, day: Date) -> RainfallSnapshot | None:
        return RainfallSnapshot(
            date=day,
            precipitation=estimate_rainfall(coords, day, self._rng),
            quality="medium",
        )

    async def fetch_region_scenes(
        self,
        coords: Coordinates,
        start: Date,
        end: Date,
        radius: float = 0.1,
    ) -> pd.DataFrame:
        rows = []
        day = start
        while day <= end:
            rows.append({
                "date": day,
                "sat_id": "landsat",
                "cloud_cover": self._rng.random() * 80,
                "scene_id": f"LANDSAT_{day.isoformat()}",
            })
            day += timedelta(days=REGION_SCENE_INTERVAL_DAYS)
        return pd.DataFrame(rows, columns=SCENE_COLUMNS)

    async def fetch_rainfall_history(self, coords: Coordinates, start: Date, end: Date) -> pd.DataFrame:
        days = days_between(start, end)
        return pd.DataFrame(
            {"date": days, "precipitation": self._rng.random(len(days)) * 20},
            columns=RAINFALL_COLUMNS,
        )

    async def fetch_bookings(self, coords: Coordinates, start: Date, end: Date) -> pd.DataFrame:
        return simulate_bookings(coords, start, end, self._rng)
