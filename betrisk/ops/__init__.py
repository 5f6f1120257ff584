"""Operational helpers."""

from betrisk.ops.metrics import MetricsRecorder, InMemoryMetricsRecorder, get_metrics_recorder

__all__ = ["MetricsRecorder", "InMemoryMetricsRecorder", "get_metrics_recorder"]
