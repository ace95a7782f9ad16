"""
Training Loop Service - Collects a history window and trains a downtime model.
"""

import asyncio
import logging
from datetime import date as Date, timedelta

from satrisk.core.domain.features import Coordinates, FeatureRecord
from satrisk.core.ports.estimator import DowntimeEstimator
from satrisk.core.services.collection import DataCollector
from satrisk.core.services.features import enhance_features

logger = logging.getLogger(__name__)


class TrainingLoop:
    """
    Service to run the training loop for one downtime estimator.
    """

    def __init__(self, collector: DataCollector, estimator: DowntimeEstimator):
        self.collector = collector
        self.estimator = estimator

    async def run_training(
        self,
        satellite: str,
        coords: Coordinates,
        end: Date,
        history_days: int,
        enhance: bool = True,
    ) -> int:
        """
        Execute the training pipeline.

        Args:
            satellite: Satellite whose scene history labels the samples
            coords: Location used for the weather, solar and rainfall snapshots
            end: Last day of the history window
            history_days: Length of the window
            enhance: Fill the enhanced fields from the conditions at ``end``

        Returns:
            int: Number of samples trained on, 0 when nothing was collected
        """
        start = end - timedelta(days=history_days)
        logger.info(f"Starting {self.estimator.name} training for {satellite} ({start} to {end})")

        samples = await self.collector.collect_history(satellite, start, end)
        if not samples:
            logger.warning(f"No training data collected for {satellite}")
            return 0

        if enhance:
            conditions = await self.collector.collect_conditions(coords, end)
            samples = [
                enhance_features(sample, conditions.weather, conditions.solar, conditions.rainfall)
                for sample in samples
            ]

        # Epochs run off the event loop
        await asyncio.to_thread(self.train_samples, samples)
        return len(samples)

    def train_samples(self, samples: list[FeatureRecord]) -> int:
        """Train directly on supplied labeled records."""
        self.estimator.train(samples)
        logger.info(f"Training complete for {self.estimator.name} model ({len(samples)} samples)")
        return len(samples)
