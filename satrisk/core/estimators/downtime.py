"""
Downtime Models - Linear downtime-risk scoring over normalized features.

``score = base + sum(normalized_i * weight_i)`` clamped to the model's range.
The basic model scores scene history, space weather and calendar features;
the enhanced model (``satrisk.core.estimators.enhanced``) adds solar, weather
and rainfall features on top of the same machinery.
"""

import logging
import threading

from satrisk.core.domain.errors import ModelNotReadyError
from satrisk.core.domain.features import FeatureRecord
from satrisk.core.domain.result import DowntimePrediction, ModelMetrics
from satrisk.core.estimators.confidence import basic_confidence
from satrisk.core.estimators.normalization import BASIC_NORMALIZERS, Normalizer
from satrisk.core.estimators.recommendation import BASIC_RECOMMENDATIONS, recommend
from satrisk.core.estimators.trainer import BatchTrainer
from satrisk.core.ports.estimator import DowntimeEstimator

logger = logging.getLogger(__name__)


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


class LinearDowntimeModel(DowntimeEstimator):
    """
    Shared scoring, training and reporting for the downtime models.

    Subclasses provide the constants, the confidence and the factor breakdown.
    The weight table and the retained batch are guarded by a re-entrant lock:
    training swaps in a fully trained table, predictions wait for it.
    """

    name = "linear"
    BASE_PROBABILITY: float = 0.5
    SCORE_RANGE: tuple[float, float] = (0.0, 1.0)
    DEFAULT_WEIGHTS: dict[str, float] = {}
    NORMALIZERS: dict[str, Normalizer] = {}
    RECOMMENDATIONS: tuple[str, ...] = BASIC_RECOMMENDATIONS

    def __init__(self, trainer: BatchTrainer | None = None):
        self.weights: dict[str, float] = dict(self.DEFAULT_WEIGHTS)
        self.trainer = trainer or self.default_trainer()
        self._trained = False
        self._training_data: list[FeatureRecord] = []
        self._lock = threading.RLock()

    @classmethod
    def default_trainer(cls) -> BatchTrainer:
        return BatchTrainer(epochs=100)

    @property
    def is_trained(self) -> bool:
        return self._trained

    @property
    def training_samples(self) -> int:
        return len(self._training_data)

    # --- Scoring ---

    def weighted_sum(self, features: FeatureRecord, weights: dict[str, float]) -> float:
        return sum(fn(features) * weights[name] for name, fn in self.NORMALIZERS.items())

    def noise(self) -> float:
        return 0.0

    def noise_free_score(self, features: FeatureRecord, weights: dict[str, float] | None = None) -> float:
        """Unclamped score without any noise term."""
        weights = self.weights if weights is None else weights
        return self.BASE_PROBABILITY + self.weighted_sum(features, weights)

    def score(self, features: FeatureRecord, weights: dict[str, float] | None = None) -> float:
        """Clamped score, including noise for models that add it."""
        raw = self.noise_free_score(features, weights) + self.noise()
        low, high = self.SCORE_RANGE
        return max(low, min(high, raw))

    def confidence(self, features: FeatureRecord) -> float:
        raise NotImplementedError

    def factors(self, features: FeatureRecord) -> dict[str, float]:
        raise NotImplementedError

    # --- DowntimeEstimator ---

    def train(self, samples: list[FeatureRecord]) -> None:
        if not samples:
            logger.warning(f"Empty training batch for {self.name} model, keeping current state")
            return

        logger.info(f"Training {self.name} model with {len(samples)} samples")
        with self._lock:
            self.weights = self.trainer.fit(self.weights, samples, self.score, self.NORMALIZERS)
            self._training_data = list(samples)
            self._trained = True
        logger.info(f"{self.name} model trained with {len(samples)} samples")

    def predict(self, features: FeatureRecord) -> DowntimePrediction:
        with self._lock:
            if not self._trained:
                raise ModelNotReadyError(f"{self.name} model not trained yet")

            probability = self.score(features)
            return DowntimePrediction(
                downtime_probability=probability,
                confidence=self.confidence(features),
                factors=self.factors(features),
                recommendation=recommend(probability, self.RECOMMENDATIONS),
            )

    def metrics(self) -> ModelMetrics:
        with self._lock:
            accuracy = 0.0
            if self._training_data:
                correct = sum(
                    1 for sample in self._training_data
                    if (1 if self.score(sample) > 0.5 else 0) == sample.downtime_flag
                )
                accuracy = correct / len(self._training_data)

            return ModelMetrics(
                is_trained=self._trained,
                weights=dict(self.weights),
                training_samples=len(self._training_data),
                accuracy=accuracy,
            )


class BasicDowntimeModel(LinearDowntimeModel):
    """Downtime model over scene history, space weather and calendar features."""

    name = "basic"
    BASE_PROBABILITY = 0.5
    SCORE_RANGE = (0.0, 1.0)
    DEFAULT_WEIGHTS = {
        # Space weather
        "kpIndex": 0.25,
        "geomagneticStorm": 0.35,
        "solarFlux": 0.15,
        # Environmental
        "avgCloudCover": 0.20,
        "avgRainfall": 0.10,
        "temperature": 0.05,
        # Historical: more scenes and better quality lower the risk
        "sceneCount": -0.30,
        "qualityScore": -0.25,
        # Temporal
        "dayOfWeek": 0.05,
        "month": 0.10,
        "season": 0.15,
    }
    NORMALIZERS = BASIC_NORMALIZERS
    RECOMMENDATIONS = BASIC_RECOMMENDATIONS

    def confidence(self, features: FeatureRecord) -> float:
        return basic_confidence(features, self.training_samples)

    def factors(self, features: FeatureRecord) -> dict[str, float]:
        space_weather = features.kp_index * 0.1 + (0.3 if features.geomagnetic_storm else 0)
        environmental = features.avg_cloud_cover / 100 * 0.2 + features.avg_rainfall / 20 * 0.1
        temporal = features.season / 4 * 0.1 + features.month / 12 * 0.05
        historical = (features.expected_scenes - features.scene_count) / features.expected_scenes * 0.3

        return {
            "spaceWeather": clamp_unit(space_weather),
            "environmental": clamp_unit(environmental),
            "temporal": clamp_unit(temporal),
            "historical": clamp_unit(historical),
        }
