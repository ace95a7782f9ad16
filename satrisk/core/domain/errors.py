"""
Domain errors surfaced to callers of the estimators and services.
"""


class SatRiskError(Exception):
    """Base class for SatRisk errors."""


class ModelNotReadyError(SatRiskError, RuntimeError):
    """Raised when a prediction is requested before the model was trained."""


class MalformedInputError(SatRiskError, ValueError):
    """Raised when a request is missing required fields or is inconsistent."""
