"""Plain-text rendering of submission outcomes."""

from typing import List

from betrisk.constants import FIELD_LABELS
from betrisk.exceptions import ValidationError
from betrisk.models.types import RiskAssessment
from betrisk.submission.state import Failed, Idle, SubmissionState, Submitting, Success

BAR_WIDTH = 20


def confidence_bar(percent: float, width: int = BAR_WIDTH) -> str:
    filled = int(round(width * percent / 100))
    filled = max(0, min(width, filled))
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def format_assessment(assessment: RiskAssessment) -> str:
    lines = [
        "Risk Assessment Result",
        f"  {assessment.tier.label}",
        f"  Cluster {assessment.cluster}",
        f"  Confidence Score {confidence_bar(assessment.confidence_percent)} "
        f"{assessment.confidence_percent:.1f}%",
    ]
    return "\n".join(lines)


def format_validation_errors(error: ValidationError) -> str:
    lines: List[str] = ["Please fix the following fields:"]
    for field, message in error.errors.items():
        lines.append(f"  {FIELD_LABELS.get(field, field)}: {message}")
    return "\n".join(lines)


def format_state(state: SubmissionState) -> str:
    if isinstance(state, Success):
        return format_assessment(state.assessment)
    if isinstance(state, Failed):
        if isinstance(state.error, ValidationError):
            return format_validation_errors(state.error)
        return f"Assessment failed ({state.kind}): {state.error}"
    if isinstance(state, Submitting):
        return "Processing your data..."
    if isinstance(state, Idle):
        return ""
    raise TypeError(f"Unknown state: {state!r}")
