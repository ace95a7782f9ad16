"""
Model Registry - Owns the estimator instances for the lifetime of the app.
"""

import logging
from typing import Literal

from satrisk.core.domain.errors import MalformedInputError
from satrisk.core.domain.settings import SystemSettings
from satrisk.core.estimators.downtime import BasicDowntimeModel
from satrisk.core.estimators.enhanced import EnhancedDowntimeModel
from satrisk.core.estimators.pricing import PricingModelEngine
from satrisk.core.ports.estimator import DowntimeEstimator

logger = logging.getLogger(__name__)

Variant = Literal["basic", "enhanced"]


class ModelRegistry:
    """
    One pricing engine and one estimator per downtime variant.
    """

    def __init__(
        self,
        basic: BasicDowntimeModel | None = None,
        enhanced: EnhancedDowntimeModel | None = None,
        pricing: PricingModelEngine | None = None,
    ):
        self.basic = basic or BasicDowntimeModel()
        self.enhanced = enhanced or EnhancedDowntimeModel()
        self.pricing = pricing or PricingModelEngine()

    @classmethod
    def from_settings(cls, settings: SystemSettings) -> "ModelRegistry":
        logger.info("Initializing model registry")
        return cls(enhanced=EnhancedDowntimeModel(seed=settings.noise_seed))

    def downtime(self, variant: str) -> DowntimeEstimator:
        if variant == "basic":
            return self.basic
        if variant == "enhanced":
            return self.enhanced
        raise MalformedInputError(f"Unknown downtime model variant: {variant}")
