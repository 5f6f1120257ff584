"""Rendering and file output."""

from betrisk.reporting.console import (
    confidence_bar,
    format_assessment,
    format_validation_errors,
    format_state,
)
from betrisk.reporting.csv_output import write_results_csv

__all__ = [
    "confidence_bar",
    "format_assessment",
    "format_validation_errors",
    "format_state",
    "write_results_csv",
]
