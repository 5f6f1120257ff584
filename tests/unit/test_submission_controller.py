"""Unit tests for the submission controller and its view state."""

import asyncio
import json
from dataclasses import replace

import pytest

from betrisk.exceptions import (
    DecodeError,
    InvalidTransitionError,
    TransportError,
    ValidationError,
)
from betrisk.models import RiskAssessment, RiskTier
from betrisk.submission import (
    Failed,
    Idle,
    SubmissionController,
    Submitting,
    Success,
    ViewState,
)
from tests.mocks import ControlledTransport, StaticTransport, TokenSequence


async def _settle():
    """Let scheduled tasks run up to their next real suspension."""
    for _ in range(5):
        await asyncio.sleep(0)


def _make_controller(transport, metrics):
    controller = SubmissionController(transport, metrics=metrics, token_factory=TokenSequence())
    transitions = []
    controller.subscribe(transitions.append)
    return controller, transitions


def _terminal(transitions):
    return [s for s in transitions if isinstance(s, (Success, Failed))]


class TestSubmitSinglePath:

    @pytest.mark.asyncio
    async def test_success_publishes_assessment(self, valid_raw_input, metrics):
        transport = StaticTransport(body={"cluster": 0, "confidence": 0.5})
        controller, transitions = _make_controller(transport, metrics)

        state = await controller.submit(valid_raw_input)

        expected = Success(RiskAssessment(RiskTier.LOW, 50.0, 0), "t1")
        assert state == expected
        assert transitions == [Submitting("t1"), expected]
        assert controller.state == expected
        assert not controller.in_flight
        assert transport.requests == [{
            "Bet": 25.5,
            "TotalGames": 40,
            "TotalProfit": -120.75,
            "TotalLosses": 300.0,
            "CashedOut": 180.25,
            "model_name": "randforest",
        }]
        assert metrics.count("submissions.started") == 1
        assert metrics.count("submissions.succeeded") == 1
        assert metrics.snapshot()["timings"]["predict.latency_ms"]["count"] == 1

    @pytest.mark.asyncio
    async def test_invalid_model_never_reaches_network(self, valid_raw_input, metrics):
        transport = StaticTransport(body={"cluster": 0, "confidence": 0.5})
        controller, transitions = _make_controller(transport, metrics)

        state = await controller.submit(replace(valid_raw_input, model_name="bogus"))

        assert transport.requests == []
        assert len(transitions) == 1
        assert isinstance(state, Failed)
        assert isinstance(state.error, ValidationError)
        assert state.kind == "validation"
        assert state.error.fields == ["model_name"]
        assert state.token is None
        assert metrics.count("submissions.validation_failed") == 1
        assert metrics.count("submissions.started") == 0

    @pytest.mark.asyncio
    async def test_malformed_body_is_decode_failure(self, valid_raw_input, metrics):
        transport = StaticTransport(body={"cluster": "high"})
        controller, transitions = _make_controller(transport, metrics)

        state = await controller.submit(valid_raw_input)

        assert isinstance(state, Failed)
        assert isinstance(state.error, DecodeError)
        assert state.token == "t1"
        assert not any(isinstance(s, Success) for s in transitions)
        assert metrics.count("submissions.failed") == 1

    @pytest.mark.asyncio
    async def test_oversized_confidence_is_decode_failure(self, valid_raw_input, metrics):
        # json.loads keeps arbitrarily long integers exact
        body = json.loads('{"cluster": 0, "confidence": 1' + "0" * 400 + "}")
        controller, _ = _make_controller(StaticTransport(body=body), metrics)

        state = await controller.submit(valid_raw_input)

        assert isinstance(state, Failed)
        assert isinstance(state.error, DecodeError)
        assert controller.state == state
        assert not controller.in_flight

    @pytest.mark.asyncio
    async def test_transport_error_is_failure(self, valid_raw_input, metrics):
        error = TransportError("unexpected status", status_code=503)
        controller, transitions = _make_controller(StaticTransport(error=error), metrics)

        state = await controller.submit(valid_raw_input)

        assert state == Failed(error, "t1")
        assert state.kind == "transport"
        assert state.error.retryable
        assert transitions == [Submitting("t1"), state]

    @pytest.mark.asyncio
    async def test_unexpected_exception_wrapped_as_transport_error(self, valid_raw_input, metrics):
        boom = RuntimeError("boom")
        controller, _ = _make_controller(StaticTransport(error=boom), metrics)

        state = await controller.submit(valid_raw_input)

        assert isinstance(state.error, TransportError)
        assert state.error.original_error is boom

    @pytest.mark.asyncio
    async def test_resubmit_after_terminal_state(self, valid_raw_input, metrics):
        transport = StaticTransport(body={"cluster": 2, "confidence": 0.9})
        controller, transitions = _make_controller(transport, metrics)

        await controller.submit(replace(valid_raw_input, bet="oops"))
        state = await controller.submit(valid_raw_input)

        assert isinstance(transitions[0], Failed)
        assert transitions[1] == Submitting("t1")
        assert state.assessment.tier is RiskTier.HIGH


class TestSupersession:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resolve_order", [(0, 1), (1, 0)])
    async def test_last_submission_wins(self, valid_raw_input, metrics, resolve_order):
        transport = ControlledTransport()
        controller, transitions = _make_controller(transport, metrics)
        bodies = [{"cluster": 0, "confidence": 0.1}, {"cluster": 2, "confidence": 0.9}]

        first = asyncio.ensure_future(controller.submit(valid_raw_input))
        await _settle()
        second = asyncio.ensure_future(controller.submit(replace(valid_raw_input, bet="99")))
        await _settle()

        for index in resolve_order:
            transport.pending[index].set_result(bodies[index])
            await _settle()

        first_state, second_state = await asyncio.gather(first, second)

        assert first_state is None
        assert second_state.token == "t2"
        assert second_state.assessment.tier is RiskTier.HIGH
        assert _terminal(transitions) == [second_state]
        assert transitions == [Submitting("t1"), Submitting("t2"), second_state]
        assert controller.state == second_state
        assert metrics.count("submissions.stale") == 1

    @pytest.mark.asyncio
    async def test_stale_failure_is_discarded(self, valid_raw_input, metrics):
        transport = ControlledTransport()
        controller, transitions = _make_controller(transport, metrics)

        first = asyncio.ensure_future(controller.submit(valid_raw_input))
        await _settle()
        second = asyncio.ensure_future(controller.submit(valid_raw_input))
        await _settle()

        transport.pending[0].set_exception(TransportError("connection reset"))
        await _settle()
        assert controller.state == Submitting("t2")

        transport.pending[1].set_result({"cluster": 1, "confidence": 0.6})
        assert await first is None
        state = await second
        assert state.assessment.tier is RiskTier.MEDIUM
        assert len(_terminal(transitions)) == 1

    @pytest.mark.asyncio
    async def test_invalid_resubmit_supersedes_in_flight(self, valid_raw_input, metrics):
        transport = ControlledTransport()
        controller, transitions = _make_controller(transport, metrics)

        first = asyncio.ensure_future(controller.submit(valid_raw_input))
        await _settle()
        rejected = await controller.submit(replace(valid_raw_input, total_games="-1"))

        transport.pending[0].set_result({"cluster": 0, "confidence": 0.5})
        assert await first is None

        assert controller.state == rejected
        assert isinstance(rejected.error, ValidationError)
        assert len(transport.requests) == 1
        assert _terminal(transitions) == [rejected]

    @pytest.mark.asyncio
    async def test_reset_discards_late_response(self, valid_raw_input, metrics):
        transport = ControlledTransport()
        controller, transitions = _make_controller(transport, metrics)

        pending = asyncio.ensure_future(controller.submit(valid_raw_input))
        await _settle()
        assert controller.in_flight

        controller.reset()
        assert controller.state == Idle()
        assert not controller.in_flight

        transport.pending[0].set_result({"cluster": 2, "confidence": 0.99})
        assert await pending is None
        assert controller.state == Idle()
        assert transitions == [Submitting("t1"), Idle()]

    @pytest.mark.asyncio
    async def test_reset_clears_terminal_result(self, valid_raw_input, metrics):
        controller, _ = _make_controller(StaticTransport(body={"cluster": 1, "confidence": 0.5}), metrics)

        await controller.submit(valid_raw_input)
        controller.reset()

        assert controller.state == Idle()

    @pytest.mark.asyncio
    async def test_cancelled_task_returns_to_idle(self, valid_raw_input, metrics):
        transport = ControlledTransport()
        controller, transitions = _make_controller(transport, metrics)

        task = asyncio.ensure_future(controller.submit(valid_raw_input))
        await _settle()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert controller.state == Idle()
        assert not controller.in_flight
        assert transitions == [Submitting("t1"), Idle()]


class TestViewState:

    def test_initial_state_is_idle(self):
        assert ViewState().current == Idle()

    def test_network_outcome_requires_matching_submission(self):
        view = ViewState()
        outcome = Success(RiskAssessment(RiskTier.LOW, 10.0, 0), "t1")

        with pytest.raises(InvalidTransitionError):
            view.replace(outcome)

        view.replace(Submitting("t2"))
        with pytest.raises(InvalidTransitionError):
            view.replace(outcome)
        with pytest.raises(InvalidTransitionError):
            view.replace(Failed(TransportError("reset"), "t1"))

        view.replace(Submitting("t1"))
        view.replace(outcome)
        assert view.current == outcome

    def test_validation_failure_allowed_from_any_state(self):
        view = ViewState()
        failure = Failed(ValidationError({"bet": "is required"}))
        view.replace(failure)
        assert view.current == failure

    def test_failing_listener_does_not_block_others(self):
        view = ViewState()
        seen = []

        def broken(state):
            raise RuntimeError("listener bug")

        view.subscribe(broken)
        view.subscribe(seen.append)
        view.replace(Submitting("t1"))

        assert seen == [Submitting("t1")]
        assert view.current == Submitting("t1")

    def test_unsubscribe(self):
        view = ViewState()
        seen = []
        unsubscribe = view.subscribe(seen.append)

        view.replace(Submitting("t1"))
        unsubscribe()
        view.replace(Idle())

        assert seen == [Submitting("t1")]
