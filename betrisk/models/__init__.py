"""Prediction types and classification."""

from betrisk.models.types import (
    RawInput,
    ValidatedPayload,
    ValidationFailure,
    PredictionResult,
    RiskTier,
    RiskAssessment,
)
from betrisk.models.classifier import decode_prediction, classify, tier_for_cluster

__all__ = [
    "RawInput",
    "ValidatedPayload",
    "ValidationFailure",
    "PredictionResult",
    "RiskTier",
    "RiskAssessment",
    "decode_prediction",
    "classify",
    "tier_for_cluster",
]
