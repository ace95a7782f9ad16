"""
Per-feature normalizations used by the downtime models.

Each table maps a weight name to the function that turns a FeatureRecord into
the value multiplied by that weight. The same value feeds the gradient
accumulation during training.
"""

from collections.abc import Callable

from satrisk.core.domain.features import FeatureRecord

Normalizer = Callable[[FeatureRecord], float]


def _storm(f: FeatureRecord) -> float:
    return 1.0 if f.geomagnetic_storm else 0.0


BASIC_NORMALIZERS: dict[str, Normalizer] = {
    # Space weather
    "kpIndex": lambda f: f.kp_index,
    "geomagneticStorm": _storm,
    "solarFlux": lambda f: (f.solar_flux - 100) / 100,
    # Environmental
    "avgCloudCover": lambda f: f.avg_cloud_cover / 100,
    "avgRainfall": lambda f: f.avg_rainfall / 20,
    "temperature": lambda f: (f.temperature - 20) / 20,
    # Historical
    "sceneCount": lambda f: (f.scene_count - f.expected_scenes) / f.expected_scenes,
    "qualityScore": lambda f: f.quality_score - 0.5,
    # Temporal
    "dayOfWeek": lambda f: f.day_of_week / 7,
    "month": lambda f: f.month / 12,
    "season": lambda f: f.season / 4,
}


ENHANCED_NORMALIZERS: dict[str, Normalizer] = {
    # Satellite
    "sceneCount": lambda f: min(f.scene_count / 10, 1),
    "expectedScenes": lambda f: 0.0,  # carried in the table, never scored
    "avgCloudCover": lambda f: f.avg_cloud_cover / 100,
    "qualityScore": lambda f: f.quality_score,
    # Space weather
    "kpIndex": lambda f: min(f.kp_index / 9, 1),
    "geomagneticStorm": _storm,
    "solarFlux": lambda f: max(0.0, (f.solar_flux - 100) / 100),
    "sunspotNumber": lambda f: min(f.sunspot_number / 200, 1),
    "solarWindSpeed": lambda f: max(0.0, (f.solar_wind_speed - 400) / 200),
    # Environmental
    "avgRainfall": lambda f: min(f.avg_rainfall / 50, 1),
    "temperature": lambda f: abs(f.temperature - 20) / 20,
    "humidity": lambda f: abs(f.humidity - 50) / 50,
    "pressure": lambda f: abs(f.pressure - 1013.25) / 50,
    "windSpeed": lambda f: min(f.wind_speed / 30, 1),
    "visibility": lambda f: max(0.0, (10 - f.visibility) / 10),
    "gpmRainfall": lambda f: min(f.gpm_rainfall / 20, 1),
    "weatherQuality": lambda f: 1 - f.weather_quality,
    # Temporal
    "dayOfWeek": lambda f: f.day_of_week / 7,
    "month": lambda f: f.month / 12,
    "season": lambda f: f.season / 4,
}


def normalize(features: FeatureRecord, table: dict[str, Normalizer]) -> dict[str, float]:
    """Evaluate every normalizer in ``table`` against ``features``."""
    return {name: float(fn(features)) for name, fn in table.items()}
