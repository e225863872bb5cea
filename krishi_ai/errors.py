"""
Error taxonomy for Krishi AI flows.

Model failures are tagged with an ErrorKind so the retry policy can decide
whether another attempt is worthwhile. Errors raised by code we don't own
(the Gemini SDK, network stack) are classified from their message text.
"""
from enum import Enum
from typing import Optional

from google.genai import errors as genai_errors


# Substrings that mark a throttling / quota failure in an upstream message
RETRYABLE_MARKERS = ("quota", "limit", "429", "rate")


class ErrorKind(str, Enum):
    RETRYABLE = "retryable"
    FATAL = "fatal"


class KrishiAIError(Exception):
    """Base class for errors raised inside the service."""


class ConfigurationError(KrishiAIError):
    """Raised when the model client cannot be configured (e.g. no API key)."""


class ModelCallError(KrishiAIError):
    """A remote model call failed.

    Args:
        message: Human-readable reason, usually the upstream message
        kind: Classification used by the retry policy; resolved from the
            message when not given
    """

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.kind = kind if kind is not None else classify_message(message)


class OutputValidationError(ModelCallError):
    """The model answered, but the payload was empty or failed schema validation."""

    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.RETRYABLE)


def classify_message(message: Optional[str]) -> ErrorKind:
    """Classify an error message by looking for rate-limit markers."""
    text = (message or "").casefold()
    if any(marker in text for marker in RETRYABLE_MARKERS):
        return ErrorKind.RETRYABLE
    return ErrorKind.FATAL


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception to RETRYABLE or FATAL.

    Typed errors carry their own kind. Gemini API errors are retryable on
    HTTP 429 / RESOURCE_EXHAUSTED. Anything else goes through the message
    substring check.
    """
    if isinstance(error, ModelCallError):
        return error.kind
    if isinstance(error, ConfigurationError):
        return ErrorKind.FATAL

    if isinstance(error, genai_errors.APIError):
        if error.code == 429 or (error.status or "").upper() == "RESOURCE_EXHAUSTED":
            return ErrorKind.RETRYABLE

    return classify_message(str(error))


def from_api_error(error: BaseException) -> ModelCallError:
    """Wrap an upstream exception in a ModelCallError with its kind resolved."""
    return ModelCallError(str(error) or error.__class__.__name__, kind=classify_error(error))
