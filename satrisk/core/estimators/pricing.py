"""
Pricing Model Engine - Price multiplier from supply, demand, environmental
and temporal factors.

``multiplier = intercept + sum(factor * factor_bias) + sum(feature * weight)``
clamped to [0.8, 1.6]. The engine ships with fixed weights and is ready to
quote from construction.
"""

import logging
import math
import threading

from satrisk.core.domain.errors import ModelNotReadyError
from satrisk.core.domain.features import PricingFeatures, PricingSample
from satrisk.core.domain.result import PriceQuote, PricingMetrics
from satrisk.core.estimators.confidence import pricing_confidence

logger = logging.getLogger(__name__)

MIN_MULTIPLIER = 0.8
MAX_MULTIPLIER = 1.6

DEFAULT_WEIGHTS = {
    "observationDensity": -0.15,  # more supply, lower price
    "averageCloudCover": 0.25,
    "dataQuality": -0.20,
    "demandVolume": 0.30,
    "seasonalDemand": 0.10,
    "weatherRisk": 0.35,
    "rainfallFrequency": 0.20,
    "season": 0.05,
    "month": 0.02,
    "dayOfWeek": 0.01,
}

DEFAULT_BIAS = {
    "intercept": 1.0,
    "supplyBias": -0.1,
    "demandBias": 0.2,
    "environmentalBias": 0.15,
    "temporalBias": 0.05,
}


def supply_factor(features: PricingFeatures) -> float:
    # Density is normalized against 10 scenes
    density = min(features.observation_density / 10, 1)
    return (1 - density) * 0.5 + (1 - features.data_quality) * 0.5


def demand_factor(features: PricingFeatures) -> float:
    demand = min(features.demand_volume / 100, 1)
    return demand * 0.7 + (features.seasonal_demand - 1) * 0.3


def environmental_factor(features: PricingFeatures) -> float:
    return features.weather_risk * 0.6 + features.rainfall_frequency * 0.4


def temporal_factor(features: PricingFeatures) -> float:
    seasonal = math.sin((features.season / 4) * 2 * math.pi) * 0.1
    # Growing season
    monthly = 0.1 if 3 <= features.month <= 8 else -0.05
    weekly = 0.05 if 1 <= features.day_of_week <= 5 else -0.05
    return seasonal + monthly + weekly


def _feature_values(features: PricingFeatures) -> dict[str, float]:
    return {
        "observationDensity": features.observation_density,
        "averageCloudCover": features.average_cloud_cover,
        "dataQuality": features.data_quality,
        "demandVolume": features.demand_volume,
        "seasonalDemand": features.seasonal_demand,
        "weatherRisk": features.weather_risk,
        "rainfallFrequency": features.rainfall_frequency,
        "season": features.season,
        "month": features.month,
        "dayOfWeek": features.day_of_week,
    }


class PricingModelEngine:
    """
    Price multiplier estimator.

    Training does not move the weights: it reports the mean absolute error
    of the current weights against the observed multipliers.
    """

    def __init__(self):
        self.weights: dict[str, float] = dict(DEFAULT_WEIGHTS)
        self.bias: dict[str, float] = dict(DEFAULT_BIAS)
        self._trained = True
        self._lock = threading.RLock()

    @property
    def is_trained(self) -> bool:
        return self._trained

    def raw_multiplier(self, features: PricingFeatures) -> float:
        """Unclamped multiplier."""
        base = (
            self.bias["intercept"]
            + supply_factor(features) * self.bias["supplyBias"]
            + demand_factor(features) * self.bias["demandBias"]
            + environmental_factor(features) * self.bias["environmentalBias"]
            + temporal_factor(features) * self.bias["temporalBias"]
        )
        contribution = sum(
            value * self.weights[name] for name, value in _feature_values(features).items()
        )
        return base + contribution

    def predict(self, features: PricingFeatures, base_price: float) -> PriceQuote:
        with self._lock:
            if not self._trained:
                raise ModelNotReadyError("Pricing model not trained yet")

            multiplier = max(MIN_MULTIPLIER, min(MAX_MULTIPLIER, self.raw_multiplier(features)))
            return PriceQuote(
                base_price=base_price,
                multiplier=multiplier,
                confidence=pricing_confidence(features),
                factors={
                    "supply": supply_factor(features),
                    "demand": demand_factor(features),
                    "environmental": environmental_factor(features),
                    "temporal": temporal_factor(features),
                },
            )

    def average_error(self, samples: list[PricingSample]) -> float:
        """Mean absolute error of predicted against observed multipliers."""
        if not samples:
            return 0.0
        total = 0.0
        for sample in samples:
            # Base price does not affect the multiplier
            quote = self.predict(sample.features, 100)
            total += abs(quote.multiplier - sample.actual_multiplier)
        return total / len(samples)

    def train(self, samples: list[PricingSample]) -> None:
        logger.info(f"Training pricing model with {len(samples)} samples")
        with self._lock:
            avg_error = self.average_error(samples)
            self._trained = True
        logger.info(f"Pricing model training completed. Average error: {avg_error:.4f}")

    def metrics(self) -> PricingMetrics:
        with self._lock:
            return PricingMetrics(
                is_trained=self._trained,
                weights=dict(self.weights),
                bias=dict(self.bias),
            )
