"""
Batch Trainer - Fixed-epoch, error-driven weight updates.

Every epoch scores each sample with the model's own (clamped, possibly noisy)
score, accumulates ``error * normalized_value`` per weight over the whole
batch, then applies ``rate * gradient / batch_size``. There is no loss
function and no convergence check; the number of epochs is fixed.
"""

import logging
from collections.abc import Callable

from satrisk.core.domain.features import FeatureRecord
from satrisk.core.estimators.normalization import Normalizer, normalize

logger = logging.getLogger(__name__)

ScoreFn = Callable[[FeatureRecord, dict[str, float]], float]


class BatchTrainer:
    """
    Runs the update rule over a batch.

    Args:
        epochs: Number of passes over the batch
        learning_rate: Base learning rate
        decay: Decay the rate linearly to zero across epochs
        log_every: Log the mean absolute error every N epochs
    """

    def __init__(
        self,
        epochs: int,
        learning_rate: float = 0.01,
        decay: bool = False,
        log_every: int = 20,
    ):
        self.epochs = epochs
        self.learning_rate = learning_rate
        self.decay = decay
        self.log_every = log_every

    def rate_for(self, epoch: int) -> float:
        if self.decay:
            return self.learning_rate * (1 - epoch / self.epochs)
        return self.learning_rate

    def run_epoch(
        self,
        weights: dict[str, float],
        samples: list[FeatureRecord],
        score: ScoreFn,
        normalized: list[dict[str, float]],
        rate: float,
    ) -> float:
        """
        Apply one batch update to ``weights`` in place.

        Returns:
            Mean absolute error over the batch before the update.
        """
        gradients = dict.fromkeys(weights, 0.0)
        total_error = 0.0

        for sample, values in zip(samples, normalized):
            error = sample.downtime_flag - score(sample, weights)
            total_error += abs(error)
            for name in gradients:
                gradients[name] += error * values.get(name, 0.0)

        for name, gradient in gradients.items():
            weights[name] += rate * gradient / len(samples)

        return total_error / len(samples)

    def fit(
        self,
        weights: dict[str, float],
        samples: list[FeatureRecord],
        score: ScoreFn,
        normalizers: dict[str, Normalizer],
    ) -> dict[str, float]:
        """
        Train a copy of ``weights`` and return it.

        The caller's table is left untouched so a batch is never half applied.
        """
        trained = dict(weights)
        if not samples:
            return trained

        for sample in samples:
            if sample.downtime_flag is None:
                raise ValueError("Training samples require a downtime_flag label")

        # Normalized values do not depend on the weights
        normalized = [normalize(sample, normalizers) for sample in samples]

        for epoch in range(self.epochs):
            avg_error = self.run_epoch(trained, samples, score, normalized, self.rate_for(epoch))
            if epoch % self.log_every == 0:
                logger.info(f"Epoch {epoch}: Average Error = {avg_error:.4f}")

        return trained
