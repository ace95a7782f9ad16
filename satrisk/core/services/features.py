"""
Feature Extraction - Turns collected frames and snapshots into feature records.

Frame layouts follow ``satrisk.core.ports.data_source``.
"""

from datetime import date as Date
from typing import Literal

import pandas as pd

from satrisk.core.domain.features import (
    FeatureRecord,
    PricingFeatures,
    RainfallSnapshot,
    SolarSnapshot,
    WeatherSnapshot,
)

Quality = Literal["high", "medium", "low"]

AVAILABILITY_COLUMNS = [
    "date", "sat_id", "scene_count", "expected_scenes",
    "downtime_flag", "avg_cloud_cover", "quality_score",
]

EXPECTED_SCENES_PER_DAY = {
    "landsat-8": 250,
    "landsat-9": 250,
    "smap": 1000,
    "gpm": 2000,
    "oco-2": 100,
    "oco-3": 100,
}
DEFAULT_EXPECTED_SCENES = 200

ROLLING_WINDOW_DAYS = 7

# Spring, summer, fall, winter
SEASONAL_DEMAND = (1.1, 1.3, 0.9, 0.7)


def assess_quality(cloud_cover: float) -> Quality:
    if cloud_cover < 20:
        return "high"
    if cloud_cover < 50:
        return "medium"
    return "low"


def get_season(month: int) -> int:
    """Season index for a 0-indexed month: 0 spring, 1 summer, 2 fall, 3 winter."""
    if 2 <= month <= 4:
        return 0
    if 5 <= month <= 7:
        return 1
    if 8 <= month <= 10:
        return 2
    return 3


def temporal_features(day: Date) -> dict[str, int]:
    """Calendar fields with Sunday = 0 and January = 0."""
    month = day.month - 1
    return {
        "day_of_week": (day.weekday() + 1) % 7,
        "month": month,
        "season": get_season(month),
    }


def expected_scenes_per_day(satellite: str) -> int:
    return EXPECTED_SCENES_PER_DAY.get(satellite.lower(), DEFAULT_EXPECTED_SCENES)


def seasonal_demand_multiplier(season: int) -> float:
    return SEASONAL_DEMAND[season]


def rolling_scene_mean(scene_counts: pd.Series) -> float:
    """
    Mean scene count over the most recent dates in the dataset.

    Args:
        scene_counts: Scene counts indexed by date
    """
    if scene_counts.empty:
        return 0.0
    return float(scene_counts.sort_index().tail(ROLLING_WINDOW_DAYS).mean())


def daily_availability(scenes: pd.DataFrame, satellite: str) -> pd.DataFrame:
    """
    Aggregate scenes into one availability row per date.

    A day is flagged as downtime when it produced fewer than 60% of the
    recent rolling mean or fewer than half of the expected scenes.

    Args:
        scenes: Frame with columns ['date', 'sat_id', 'cloud_cover', 'scene_id']
        satellite: Satellite identifier used for the expected-scene lookup

    Returns:
        Frame with AVAILABILITY_COLUMNS, sorted by date
    """
    if scenes.empty:
        return pd.DataFrame(columns=AVAILABILITY_COLUMNS)

    df = scenes.copy()
    df["date"] = pd.to_datetime(df["date"]).dt.date
    df["cloud_cover"] = df["cloud_cover"].fillna(0).astype(float)
    df["is_high"] = df["cloud_cover"].map(assess_quality) == "high"

    daily = df.groupby("date").agg(
        scene_count=("scene_id", "size"),
        avg_cloud_cover=("cloud_cover", "mean"),
        quality_score=("is_high", "mean"),
    ).sort_index()

    expected = expected_scenes_per_day(satellite)
    recent_mean = rolling_scene_mean(daily["scene_count"])

    daily["downtime_flag"] = (
        (daily["scene_count"] < recent_mean * 0.6)
        | (daily["scene_count"] < expected * 0.5)
    ).astype(int)
    daily["expected_scenes"] = expected
    daily["sat_id"] = satellite

    return daily.reset_index()[AVAILABILITY_COLUMNS]


def build_feature_records(
    availability: pd.DataFrame,
    space_weather: pd.DataFrame,
) -> list[FeatureRecord]:
    """
    Join availability rows with same-day space weather.

    Days without space weather get Kp 0, solar flux 0 and no storm.
    Rainfall and temperature stay at 0 until enhanced.
    """
    weather_by_date: dict[Date, dict] = {}
    if not space_weather.empty:
        sw = space_weather.copy()
        sw["date"] = pd.to_datetime(sw["date"]).dt.date
        weather_by_date = {row["date"]: row for row in sw.to_dict("records")}

    records = []
    for row in availability.to_dict("records"):
        day = pd.Timestamp(row["date"]).date()
        sw_row = weather_by_date.get(day, {})
        records.append(FeatureRecord(
            scene_count=float(row["scene_count"]),
            expected_scenes=float(row["expected_scenes"]),
            avg_cloud_cover=float(row["avg_cloud_cover"]),
            quality_score=float(row["quality_score"]),
            kp_index=float(sw_row.get("kp_index", 0.0)),
            solar_flux=float(sw_row.get("solar_flux", 0.0)),
            geomagnetic_storm=bool(sw_row.get("geomagnetic_storm", False)),
            avg_rainfall=0.0,
            temperature=0.0,
            downtime_flag=int(row["downtime_flag"]),
            **temporal_features(day),
        ))
    return records


def weather_quality(weather: WeatherSnapshot | None) -> float:
    """Observation-friendliness of the weather, 0.5 when unknown."""
    if weather is None:
        return 0.5

    quality = 0.5
    if weather.visibility > 10:
        quality += 0.2
    elif weather.visibility > 5:
        quality += 0.1

    if weather.cloud_cover < 30:
        quality += 0.2
    elif weather.cloud_cover < 60:
        quality += 0.1

    if weather.precipitation < 1:
        quality += 0.1

    return max(0.0, min(1.0, quality))


def enhance_features(
    record: FeatureRecord,
    weather: WeatherSnapshot | None = None,
    solar: SolarSnapshot | None = None,
    rainfall: RainfallSnapshot | None = None,
) -> FeatureRecord:
    """Fill the solar, weather and rainfall fields of a record from snapshots."""
    return record.model_copy(update={
        "solar_flux": solar.solar_flux if solar else record.solar_flux,
        "sunspot_number": solar.sunspot_number if solar else 0.0,
        "solar_wind_speed": solar.solar_wind_speed if solar else 400.0,
        "temperature": weather.temperature if weather else record.temperature,
        "humidity": weather.humidity if weather else 50.0,
        "pressure": weather.pressure if weather else 1013.25,
        "wind_speed": weather.wind_speed if weather else 0.0,
        "visibility": weather.visibility if weather else 10.0,
        "gpm_rainfall": rainfall.precipitation if rainfall else 0.0,
        "weather_quality": weather_quality(weather),
    })


def extract_pricing_features(
    scenes: pd.DataFrame,
    rainfall: pd.DataFrame,
    bookings: pd.DataFrame,
    target_date: Date,
) -> PricingFeatures:
    """
    Regional pricing features for ``target_date``.

    Args:
        scenes: Frame with a 'cloud_cover' column (percent)
        rainfall: Frame with a 'precipitation' column (mm per day)
        bookings: Frame with a 'demand_volume' column
        target_date: Day being priced
    """
    calendar = temporal_features(target_date)

    if scenes.empty:
        observation_density = 0.0
        average_cloud_cover = 50.0
        data_quality = 0.5
    else:
        cloud = scenes["cloud_cover"].astype(float)
        observation_density = len(scenes) / 30
        average_cloud_cover = float(cloud.mean())
        data_quality = float((cloud.map(assess_quality) == "high").mean())

    demand_volume = float(bookings["demand_volume"].sum()) if not bookings.empty else 0.0

    if rainfall.empty:
        weather_risk = 0.3
        rainfall_frequency = 0.2
    else:
        precipitation = rainfall["precipitation"].astype(float)
        weather_risk = float((precipitation > 5).mean())
        rainfall_frequency = float((precipitation > 0.1).mean())

    return PricingFeatures(
        observation_density=observation_density,
        average_cloud_cover=average_cloud_cover / 100,
        data_quality=data_quality,
        demand_volume=demand_volume,
        seasonal_demand=seasonal_demand_multiplier(calendar["season"]),
        weather_risk=weather_risk,
        rainfall_frequency=rainfall_frequency,
        **calendar,
    )
