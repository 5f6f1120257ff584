"""Prediction response decoding and risk tier classification.

Both functions are pure: the same body always decodes to the same
PredictionResult and the same result always classifies to the same
RiskAssessment.
"""

from typing import Any
import math

from betrisk.constants import (
    CLUSTER_TIERS,
    CONFIDENCE_PERCENT_MAX,
    CONFIDENCE_PERCENT_MIN,
)
from betrisk.exceptions import DecodeError
from betrisk.models.types import PredictionResult, RiskAssessment, RiskTier


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decode_prediction(body: Any) -> PredictionResult:
    """Validate the shape of a decoded /predict response.

    Raises:
        DecodeError: If the body is not an object with a non-negative
            integer ``cluster`` and a finite numeric ``confidence``.
    """
    if not isinstance(body, dict):
        raise DecodeError(f"expected a JSON object, got {type(body).__name__}", body=body)

    if "cluster" not in body:
        raise DecodeError("missing 'cluster'", body=body)
    cluster = body["cluster"]
    if not isinstance(cluster, int) or isinstance(cluster, bool):
        raise DecodeError(f"'cluster' must be an integer, got {cluster!r}", body=body)
    if cluster < 0:
        raise DecodeError(f"'cluster' must be non-negative, got {cluster}", body=body)

    if "confidence" not in body:
        raise DecodeError("missing 'confidence'", body=body)
    confidence = body["confidence"]
    if not _is_number(confidence):
        raise DecodeError(f"'confidence' must be a finite number, got {confidence!r}", body=body)
    try:
        confidence = float(confidence)
    except OverflowError as e:
        # JSON integers have no size limit
        raise DecodeError("'confidence' is too large", body=body) from e
    if not math.isfinite(confidence):
        raise DecodeError(f"'confidence' must be a finite number, got {confidence!r}", body=body)

    return PredictionResult(cluster=cluster, confidence=confidence)


def tier_for_cluster(cluster: int) -> RiskTier:
    tier = CLUSTER_TIERS.get(cluster)
    if tier is None:
        return RiskTier.UNKNOWN
    return RiskTier(tier)


def classify(result: PredictionResult) -> RiskAssessment:
    """Map a prediction to a risk tier with a confidence in [0, 100]."""
    percent = result.confidence * 100
    percent = max(CONFIDENCE_PERCENT_MIN, min(CONFIDENCE_PERCENT_MAX, percent))
    return RiskAssessment(
        tier=tier_for_cluster(result.cluster),
        confidence_percent=percent,
        cluster=result.cluster,
    )
