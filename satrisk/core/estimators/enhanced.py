"""
Enhanced Downtime Model - adds solar, terrestrial weather and rainfall
features to the basic model, a lower base risk, a decaying learning rate and
a small symmetric noise term on every score.
"""

import numpy as np

from satrisk.core.domain.features import FeatureRecord
from satrisk.core.estimators.confidence import enhanced_confidence
from satrisk.core.estimators.downtime import LinearDowntimeModel, clamp_unit
from satrisk.core.estimators.normalization import ENHANCED_NORMALIZERS
from satrisk.core.estimators.recommendation import ENHANCED_RECOMMENDATIONS
from satrisk.core.estimators.trainer import BatchTrainer

# Scores are perturbed by up to +/- NOISE_AMPLITUDE / 2
NOISE_AMPLITUDE = 0.05


class EnhancedDowntimeModel(LinearDowntimeModel):
    """
    Downtime model over every collected feed.

    Args:
        trainer: Override the default 150-epoch decaying trainer
        rng: Random generator for score noise
        seed: Seed for a fresh generator when ``rng`` is not given
    """

    name = "enhanced"
    BASE_PROBABILITY = 0.25
    SCORE_RANGE = (0.02, 0.95)
    DEFAULT_WEIGHTS = {
        # Satellite
        "sceneCount": -0.30,
        "expectedScenes": 0.0,
        "avgCloudCover": 0.35,
        "qualityScore": -0.25,
        # Space weather
        "kpIndex": 0.40,
        "geomagneticStorm": 0.35,
        "solarFlux": 0.20,
        "sunspotNumber": 0.15,
        "solarWindSpeed": 0.10,
        # Environmental
        "avgRainfall": 0.20,
        "temperature": 0.05,
        "humidity": 0.08,
        "pressure": 0.05,
        "windSpeed": 0.03,
        "visibility": 0.05,
        "gpmRainfall": 0.12,
        "weatherQuality": -0.10,
        # Temporal
        "dayOfWeek": 0.05,
        "month": 0.10,
        "season": 0.15,
    }
    NORMALIZERS = ENHANCED_NORMALIZERS
    RECOMMENDATIONS = ENHANCED_RECOMMENDATIONS

    def __init__(
        self,
        trainer: BatchTrainer | None = None,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ):
        super().__init__(trainer)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    @classmethod
    def default_trainer(cls) -> BatchTrainer:
        return BatchTrainer(epochs=150, learning_rate=0.01, decay=True, log_every=30)

    def weighted_sum(self, features: FeatureRecord, weights: dict[str, float]) -> float:
        total = 0.0
        for name, fn in self.NORMALIZERS.items():
            weight = weights[name]
            # Poor weather always adds risk, whatever sign training gives the weight
            if name == "weatherQuality":
                weight = abs(weight)
            total += fn(features) * weight
        return total

    def noise(self) -> float:
        return (self.rng.random() - 0.5) * NOISE_AMPLITUDE

    def confidence(self, features: FeatureRecord) -> float:
        return enhanced_confidence(features, self.training_samples)

    def factors(self, features: FeatureRecord) -> dict[str, float]:
        space_weather = features.kp_index * 0.1 + (0.3 if features.geomagnetic_storm else 0)
        environmental = features.avg_cloud_cover / 100 * 0.2 + features.gpm_rainfall / 10 * 0.1
        temporal = features.season / 4 * 0.1 + features.month / 12 * 0.05
        historical = (features.expected_scenes - features.scene_count) / features.expected_scenes * 0.3
        weather = features.weather_quality * 0.2 + features.humidity / 100 * 0.1
        solar = features.solar_flux / 200 * 0.15 + features.sunspot_number / 100 * 0.1

        return {
            "spaceWeather": clamp_unit(space_weather),
            "environmental": clamp_unit(environmental),
            "temporal": clamp_unit(temporal),
            "historical": clamp_unit(historical),
            "weather": clamp_unit(weather),
            "solar": clamp_unit(solar),
        }
