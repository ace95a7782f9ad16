"""
Confidence estimates derived from data volume and quality, independent of the
score itself. Each starts at 0.5, adds non-negative bonuses and caps at 1.0.
"""

from satrisk.core.domain.features import FeatureRecord, PricingFeatures

BASE_CONFIDENCE = 0.5


def basic_confidence(features: FeatureRecord, training_samples: int) -> float:
    confidence = BASE_CONFIDENCE
    confidence += min(features.scene_count / 100, 0.3)
    confidence += features.quality_score * 0.2
    confidence += min(training_samples / 1000, 0.2)
    return min(confidence, 1.0)


def enhanced_confidence(features: FeatureRecord, training_samples: int) -> float:
    confidence = BASE_CONFIDENCE
    confidence += min(features.scene_count / 100, 0.2)
    confidence += features.quality_score * 0.15
    confidence += features.weather_quality * 0.1
    confidence += min(training_samples / 1000, 0.2)

    # Populated auxiliary feeds
    if features.solar_flux > 0:
        confidence += 0.1
    if features.gpm_rainfall > 0:
        confidence += 0.1
    if features.humidity > 0:
        confidence += 0.05

    return min(confidence, 1.0)


def pricing_confidence(features: PricingFeatures) -> float:
    confidence = BASE_CONFIDENCE
    confidence += min(features.observation_density / 5, 0.3)
    confidence += features.data_quality * 0.2
    confidence += min(features.demand_volume / 50, 0.2)
    return min(confidence, 1.0)
