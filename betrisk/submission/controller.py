"""Submission controller.

Runs one submission at a time through validate -> send -> decode ->
classify -> publish. Every attempt that reaches the network gets a
fresh token; a newer ``submit`` or a ``reset`` retires the current
token, and whatever the retired request later returns is dropped
without touching the view state.

Usage:
    import asyncio
    from betrisk.client import AiohttpTransport
    from betrisk.models import RawInput
    from betrisk.submission import SubmissionController

    async def main():
        controller = SubmissionController(AiohttpTransport("http://localhost:8000"))
        controller.subscribe(print)
        await controller.submit(RawInput(bet="10", total_games="4", ...))

    asyncio.run(main())
"""

import asyncio
import logging
import uuid
from typing import Callable, Optional

from betrisk.client.transport import PredictTransport
from betrisk.exceptions import BetRiskError, TransportError, ValidationError
from betrisk.models.classifier import classify, decode_prediction
from betrisk.models.types import RawInput, ValidationFailure
from betrisk.ops.metrics import MetricsRecorder, get_metrics_recorder
from betrisk.submission.state import (
    Failed,
    Idle,
    StateListener,
    SubmissionState,
    Submitting,
    Success,
    ViewState,
)
from betrisk.validation import validate_input

logger = logging.getLogger(__name__)


def _new_token() -> str:
    return uuid.uuid4().hex


class SubmissionController:
    """
    Owns the view state and the single in-flight request token.

    All calls must come from one event loop; token comparison after the
    network await is the only ordering guard.
    """

    def __init__(
        self,
        transport: PredictTransport,
        metrics: Optional[MetricsRecorder] = None,
        view_state: Optional[ViewState] = None,
        token_factory: Callable[[], str] = _new_token,
    ):
        self._transport = transport
        self._metrics = metrics or get_metrics_recorder()
        self._view_state = view_state or ViewState()
        self._token_factory = token_factory
        self._current_token: Optional[str] = None

    @property
    def state(self) -> SubmissionState:
        return self._view_state.current

    @property
    def in_flight(self) -> bool:
        return self._current_token is not None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._view_state.subscribe(listener)

    def reset(self) -> None:
        """Drop any result or pending request and return to Idle."""
        if self._current_token is not None:
            logger.debug("Reset retired in-flight token %s", self._current_token)
        self._current_token = None
        self._view_state.replace(Idle())

    async def submit(self, raw: RawInput) -> Optional[SubmissionState]:
        """
        Validate and submit one input snapshot.

        Returns:
            The terminal state this call published, or None when a newer
            submit or a reset superseded it before its response arrived.
        """
        if self._current_token is not None:
            logger.debug("Superseding in-flight token %s", self._current_token)
        self._current_token = None

        outcome = validate_input(raw)
        if isinstance(outcome, ValidationFailure):
            self._metrics.increment("submissions.validation_failed")
            logger.info("Submission rejected, invalid fields: %s", ", ".join(outcome.fields))
            return self._publish(Failed(ValidationError(outcome.errors)))

        token = self._token_factory()
        self._current_token = token
        self._metrics.increment("submissions.started")
        self._publish(Submitting(token))
        logger.debug("Submitting %s with model %s", token, outcome.model_name)

        try:
            with self._metrics.timer("predict.latency_ms"):
                body = await self._transport.predict(outcome.to_wire())
        except asyncio.CancelledError:
            if self._is_current(token):
                self._current_token = None
                self._publish(Idle())
            raise
        except BetRiskError as e:
            return self._finish(token, error=e)
        except Exception as e:
            logger.exception("Unexpected transport failure for %s", token)
            return self._finish(token, error=TransportError("unexpected error", original_error=e))

        return self._finish(token, body=body)

    def _finish(self, token: str, body=None, error: Optional[BetRiskError] = None) -> Optional[SubmissionState]:
        if not self._is_current(token):
            self._metrics.increment("submissions.stale")
            logger.debug("Discarding stale response for %s", token)
            return None

        if error is None:
            try:
                assessment = classify(decode_prediction(body))
            except BetRiskError as e:
                error = e
            else:
                self._current_token = None
                self._metrics.increment("submissions.succeeded")
                logger.info(
                    "Assessment %s: cluster %d, %.1f%% confidence",
                    assessment.tier.label,
                    assessment.cluster,
                    assessment.confidence_percent,
                )
                return self._publish(Success(assessment, token))

        self._current_token = None
        self._metrics.increment("submissions.failed")
        logger.warning("Submission %s failed: %s", token, error)
        return self._publish(Failed(error, token))

    def _is_current(self, token: str) -> bool:
        return self._current_token == token

    def _publish(self, state: SubmissionState) -> SubmissionState:
        self._view_state.replace(state)
        return state
