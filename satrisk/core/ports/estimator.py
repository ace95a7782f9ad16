"""
DowntimeEstimator Port - Interface for downtime-risk models.
"""

from abc import ABC, abstractmethod

from satrisk.core.domain.features import FeatureRecord
from satrisk.core.domain.result import DowntimePrediction, ModelMetrics


class DowntimeEstimator(ABC):
    """
    Abstract interface for a trainable downtime-risk model.

    Implementations:
    - BasicDowntimeModel: scene, space weather and temporal features
    - EnhancedDowntimeModel: adds solar, weather and rainfall features
    """

    name: str

    @property
    @abstractmethod
    def is_trained(self) -> bool:
        ...

    @abstractmethod
    def train(self, samples: list[FeatureRecord]) -> None:
        """
        Fit the weight table to a batch of labeled records.

        Args:
            samples: Records with ``downtime_flag`` set. The batch replaces
                any previously retained batch.
        """
        ...

    @abstractmethod
    def predict(self, features: FeatureRecord) -> DowntimePrediction:
        """
        Score a single record.

        Raises:
            ModelNotReadyError: if the model has never been trained
        """
        ...

    @abstractmethod
    def metrics(self) -> ModelMetrics:
        """Report training state, weights and accuracy on the retained batch."""
        ...
