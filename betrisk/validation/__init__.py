"""Input validation."""

from betrisk.validation.fields import (
    parse_real,
    parse_count,
    parse_model_name,
    validate_input,
)

__all__ = ["parse_real", "parse_count", "parse_model_name", "validate_input"]
