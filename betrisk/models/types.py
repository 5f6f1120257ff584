"""Value types shared by the submission pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from betrisk.constants import DEFAULT_MODEL, WIRE_FIELD_NAMES


@dataclass(frozen=True)
class RawInput:
    """Text snapshot of the input form, taken once per submission."""
    bet: str = ""
    total_games: str = ""
    total_profit: str = ""
    total_losses: str = ""
    cashed_out: str = ""
    model_name: str = DEFAULT_MODEL


@dataclass(frozen=True)
class ValidatedPayload:
    """Typed, numerically valid form of a RawInput.

    Only built by ``betrisk.validation.validate_input``.
    """
    bet: float
    total_games: int
    total_profit: float
    total_losses: float
    cashed_out: float
    model_name: str

    def to_wire(self) -> Dict[str, Union[float, int, str]]:
        """Request body for POST /predict."""
        return {
            WIRE_FIELD_NAMES["bet"]: self.bet,
            WIRE_FIELD_NAMES["total_games"]: self.total_games,
            WIRE_FIELD_NAMES["total_profit"]: self.total_profit,
            WIRE_FIELD_NAMES["total_losses"]: self.total_losses,
            WIRE_FIELD_NAMES["cashed_out"]: self.cashed_out,
            WIRE_FIELD_NAMES["model_name"]: self.model_name,
        }


@dataclass(frozen=True)
class ValidationFailure:
    """Every field that failed validation, mapped to its message."""
    errors: Dict[str, str]

    @property
    def fields(self):
        return list(self.errors)


@dataclass(frozen=True)
class PredictionResult:
    cluster: int
    confidence: float


class RiskTier(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        if self is RiskTier.UNKNOWN:
            return "Unknown"
        return f"{self.value.capitalize()} Risk"


@dataclass(frozen=True)
class RiskAssessment:
    """Display value derived from a PredictionResult."""
    tier: RiskTier
    confidence_percent: float
    cluster: int
