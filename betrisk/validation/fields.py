"""Field rules for the input form."""

from typing import Dict, Optional, Tuple, Union
import math
import re

from betrisk.constants import INTEGER_FIELDS, MODEL_NAMES, NUMERIC_FIELDS
from betrisk.models.types import RawInput, ValidatedPayload, ValidationFailure

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")

# (value, error message); exactly one of the two is set
FieldResult = Tuple[Optional[Union[float, int, str]], Optional[str]]


def parse_real(text: Optional[str]) -> FieldResult:
    """Parse decimal text into a finite float."""
    if text is None or not str(text).strip():
        return None, "is required"
    candidate = str(text).strip()
    if not _DECIMAL_RE.fullmatch(candidate):
        return None, "must be a number"
    value = float(candidate)
    if not math.isfinite(value):
        return None, "must be a finite number"
    return value, None


def parse_count(text: Optional[str]) -> FieldResult:
    """Parse decimal text into a non-negative whole number."""
    if text is not None and _INTEGER_RE.fullmatch(str(text).strip()):
        # Exact for integers beyond float precision
        try:
            value = int(str(text).strip())
        except ValueError:
            return None, "is too large"
        if value < 0:
            return None, "must be zero or greater"
        return value, None

    value, error = parse_real(text)
    if error:
        return None, error
    if not float(value).is_integer():
        return None, "must be a whole number"
    if value < 0:
        return None, "must be zero or greater"
    return int(value), None


def parse_model_name(text: Optional[str]) -> FieldResult:
    if text in MODEL_NAMES:
        return text, None
    return None, f"must be one of: {', '.join(MODEL_NAMES)}"


def validate_input(raw: RawInput) -> Union[ValidatedPayload, ValidationFailure]:
    """Check every field of a RawInput independently.

    Returns a ValidatedPayload when all fields pass, otherwise a
    ValidationFailure naming every field that failed. There are no
    cross-field rules.
    """
    values: Dict[str, Union[float, int, str]] = {}
    errors: Dict[str, str] = {}

    for field in NUMERIC_FIELDS:
        parser = parse_count if field in INTEGER_FIELDS else parse_real
        value, error = parser(getattr(raw, field))
        if error:
            errors[field] = error
        else:
            values[field] = value

    model_name, error = parse_model_name(raw.model_name)
    if error:
        errors["model_name"] = error
    else:
        values["model_name"] = model_name

    if errors:
        return ValidationFailure(errors=errors)
    return ValidatedPayload(**values)
