"""Submission view state.

The state is a single immutable value, replaced on every transition.
``SubmissionController`` is its only writer; renderers subscribe to it.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Union
import logging

from betrisk.exceptions import BetRiskError, InvalidTransitionError, ValidationError
from betrisk.models.types import RiskAssessment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Submitting:
    token: str


@dataclass(frozen=True)
class Success:
    assessment: RiskAssessment
    token: str


@dataclass(frozen=True)
class Failed:
    error: BetRiskError
    token: Optional[str] = None

    @property
    def kind(self) -> str:
        return self.error.kind


SubmissionState = Union[Idle, Submitting, Success, Failed]
StateListener = Callable[[SubmissionState], None]

TERMINAL_STATES = (Success, Failed)


def _allowed(current: SubmissionState, new: SubmissionState) -> bool:
    if isinstance(new, (Idle, Submitting)):
        return True
    if isinstance(new, Failed) and isinstance(new.error, ValidationError):
        return True
    # Network outcomes only close the attempt that is in flight
    return isinstance(current, Submitting) and new.token == current.token


class ViewState:
    """Holder for the current SubmissionState with change listeners."""

    def __init__(self) -> None:
        self._current: SubmissionState = Idle()
        self._listeners: List[StateListener] = []

    @property
    def current(self) -> SubmissionState:
        return self._current

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(self, new_state: SubmissionState) -> None:
        if not _allowed(self._current, new_state):
            raise InvalidTransitionError(
                type(self._current).__name__,
                type(new_state).__name__,
            )
        self._current = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("State listener %r failed", listener)
