"""
Result Domain Models - Data structures for predictions, quotes and metrics.
"""

from dataclasses import dataclass, field


@dataclass
class DowntimePrediction:
    """Downtime risk for one satellite-day."""

    downtime_probability: float
    confidence: float
    factors: dict[str, float]
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "downtimeProbability": self.downtime_probability,
            "confidence": self.confidence,
            "factors": dict(self.factors),
            "recommendation": self.recommendation,
        }


@dataclass
class PriceQuote:
    """Price multiplier for a base price."""

    base_price: float
    multiplier: float  # 0.8x to 1.6x
    confidence: float
    factors: dict[str, float]

    @property
    def final_price(self) -> float:
        return self.base_price * self.multiplier

    def to_dict(self) -> dict:
        return {
            "basePrice": self.base_price,
            "finalPrice": self.final_price,
            "multiplier": self.multiplier,
            "confidence": self.confidence,
            "factors": dict(self.factors),
        }


@dataclass
class ModelMetrics:
    """Snapshot of a downtime estimator's state."""

    is_trained: bool
    weights: dict[str, float]
    training_samples: int
    accuracy: float

    def feature_importance(self) -> list[dict]:
        """Weights ordered by absolute magnitude, largest first."""
        ranked = sorted(self.weights.items(), key=lambda item: abs(item[1]), reverse=True)
        return [{"feature": name, "weight": weight} for name, weight in ranked]

    def to_dict(self) -> dict:
        return {
            "isTrained": self.is_trained,
            "weights": dict(self.weights),
            "trainingSamples": self.training_samples,
            "accuracy": self.accuracy,
        }


@dataclass
class PricingMetrics:
    is_trained: bool
    weights: dict[str, float]
    bias: dict[str, float]

    def to_dict(self) -> dict:
        return {
            "isTrained": self.is_trained,
            "weights": dict(self.weights),
            "bias": dict(self.bias),
        }


@dataclass
class ForecastDay:
    """One day of a multi-day downtime forecast."""

    date: str
    day_name: str
    downtime_risk: float
    confidence: float
    factors: dict[str, float]
    recommendation: str
    forecast_data: dict[str, float] = field(default_factory=dict)

    @property
    def reliability(self) -> float:
        return 1.0 - self.downtime_risk

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "dayName": self.day_name,
            "downtimeRisk": self.downtime_risk,
            "reliability": self.reliability,
            "confidence": self.confidence,
            "factors": dict(self.factors),
            "recommendation": self.recommendation,
            "forecastData": dict(self.forecast_data),
        }


@dataclass
class HistoryAnalysis:
    """Summary of the history window behind a prediction."""

    total_scenes: float
    days: int
    downtime_events: int
    avg_kp_index: float
    geomagnetic_storms: int
    avg_cloud_cover: float
    avg_rainfall: float

    def to_dict(self) -> dict:
        return {
            "historicalData": {
                "totalScenes": self.total_scenes,
                "dailyAvailability": self.days,
                "downtimeEvents": self.downtime_events,
            },
            "spaceWeather": {
                "avgKpIndex": self.avg_kp_index,
                "geomagneticStorms": self.geomagnetic_storms,
            },
            "environmental": {
                "avgCloudCover": self.avg_cloud_cover,
                "avgRainfall": self.avg_rainfall,
            },
        }
