"""
Pytest configuration and shared fixtures for betrisk tests.
"""

import pytest

from betrisk.models.types import RawInput
from betrisk.ops.metrics import InMemoryMetricsRecorder


@pytest.fixture
def valid_raw_input():
    """A fully well-formed form snapshot."""
    return RawInput(
        bet="25.5",
        total_games="40",
        total_profit="-120.75",
        total_losses="300",
        cashed_out="180.25",
        model_name="randforest",
    )


@pytest.fixture
def metrics():
    return InMemoryMetricsRecorder()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "BETRISK_API_BASE",
        "BETRISK_REQUEST_TIMEOUT",
        "BETRISK_TRANSPORT",
        "BETRISK_DEFAULT_MODEL",
        "BETRISK_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
