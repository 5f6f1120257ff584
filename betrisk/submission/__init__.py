"""Submission lifecycle: controller and view state."""

from betrisk.submission.state import (
    Idle,
    Submitting,
    Success,
    Failed,
    SubmissionState,
    ViewState,
)
from betrisk.submission.controller import SubmissionController

__all__ = [
    "Idle",
    "Submitting",
    "Success",
    "Failed",
    "SubmissionState",
    "ViewState",
    "SubmissionController",
]
