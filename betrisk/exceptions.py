"""
Custom exceptions for the risk assessment client.

The submission pipeline reports every user-visible failure as one of
these exceptions held in a ``Failed`` state, so callers can branch on
the class or on its ``kind``.

Usage:
    from betrisk.exceptions import TransportError, DecodeError

    try:
        body = await transport.predict(payload)
    except TransportError as e:
        print(f"Service unreachable: {e}")
    except DecodeError as e:
        print(f"Bad response: {e}")
"""

from typing import Any, Dict, List, Optional


class BetRiskError(Exception):
    """
    Base exception for all risk assessment client errors.

    All custom exceptions inherit from this, allowing:
        except BetRiskError:
            # Catch any client error
    """

    kind = "error"


# =============================================================================
# SUBMISSION ERRORS
# =============================================================================

class ValidationError(BetRiskError):
    """
    One or more input fields failed validation.

    Raised when:
    - A numeric field is empty or not a finite number
    - Total games is negative or not a whole number
    - The model name is not one of the supported identifiers

    No request is sent when this happens.
    """

    kind = "validation"

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        details = "; ".join(f"{field} {message}" for field, message in self.errors.items())
        super().__init__(f"Invalid input: {details}")

    @property
    def fields(self) -> List[str]:
        return list(self.errors)


class TransportError(BetRiskError):
    """
    The prediction request did not complete.

    Raised when:
    - The service is unreachable or the connection is reset
    - The request times out
    - The service answers with a non-2xx status code
    """

    kind = "transport"
    retryable = True

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        self.original_error = original_error
        msg = f"Prediction request failed: {message}"
        if status_code:
            msg += f" (status: {status_code})"
        if original_error:
            msg += f" (caused by: {type(original_error).__name__}: {original_error})"
        super().__init__(msg)


class DecodeError(BetRiskError):
    """
    The prediction response does not have the expected shape.

    Raised when:
    - The body is not JSON or not a JSON object
    - ``cluster`` is missing, not an integer, or negative
    - ``confidence`` is missing or not a finite number
    """

    kind = "decode"

    def __init__(self, message: str, body: Any = None):
        self.body = body
        super().__init__(f"Malformed prediction response: {message}")


# =============================================================================
# INTERNAL ERRORS
# =============================================================================

class InvalidTransitionError(BetRiskError):
    """A state change outside the submission state graph was attempted."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move from {current} to {requested}")


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(BetRiskError):
    """
    Configuration or setup error.

    Raised when:
    - The API base URL is not an http(s) URL
    - An unknown transport or default model is configured
    - The request timeout is not a positive number
    """

    kind = "configuration"

    def __init__(self, setting: str, message: str):
        self.setting = setting
        super().__init__(f"Configuration error ({setting}): {message}")
