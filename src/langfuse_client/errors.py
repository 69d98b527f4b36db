"""Exception taxonomy for the Langfuse client.

Three families of failure are kept apart:

- local failures (``PreconditionError``, ``PromptTypeMismatchError``,
  ``ConfigurationError``) raised before or after the network call and never
  replaced by a fallback prompt;
- remote failures (``LangfuseApiError`` and its subclasses) raised by the
  transport, which the prompt service may swallow when a fallback is given;
- cancellation, which is plain ``asyncio.CancelledError`` and is not part of
  this hierarchy.
"""

from enum import Enum
from typing import Any


class StatusClass(str, Enum):
    """Coarse classification of a transport outcome."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    TRANSPORT_FAILURE = "transport_failure"


def classify_status(status_code: int | None) -> StatusClass:
    """Map an HTTP status code to a StatusClass.

    ``None`` means no response was received at all.
    """
    if status_code is None:
        return StatusClass.TRANSPORT_FAILURE
    if 200 <= status_code < 300:
        return StatusClass.SUCCESS
    if 400 <= status_code < 500:
        return StatusClass.CLIENT_ERROR
    return StatusClass.SERVER_ERROR


class LangfuseError(Exception):
    """Base exception for the Langfuse client."""

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class PreconditionError(LangfuseError):
    """A required argument is missing or malformed. Raised before any I/O."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__("PRECONDITION_FAILED", message, details)


class ConfigurationError(LangfuseError):
    """Client settings are incomplete or invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class PromptTypeMismatchError(LangfuseError):
    """The fetched prompt is not of the kind the caller asked for."""

    def __init__(self, name: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        other = "get_chat_prompt" if actual == "chat" else "get_prompt"
        super().__init__(
            "PROMPT_TYPE_MISMATCH",
            f"Expected {expected} prompt '{name}' but got {actual}. Use {other} for {actual} prompts.",
            {"name": name, "expected": expected, "actual": actual},
        )


class LangfuseApiError(LangfuseError):
    """The remote call failed.

    Attributes:
        status_code: HTTP status, or None when no response was received
        body: Decoded JSON error payload, raw text, or None
    """

    code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
        details: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        self.body = body
        merged = {"status_code": status_code, "body": body}
        merged.update(details or {})
        super().__init__(type(self).code, message, merged)

    @property
    def status_class(self) -> StatusClass:
        return classify_status(self.status_code)

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"[{self.status_code}] {self.message}"


class AuthenticationError(LangfuseApiError):
    """Credentials were rejected (401/403)."""

    code = "AUTHENTICATION_ERROR"


class NotFoundError(LangfuseApiError):
    """The requested resource does not exist (404)."""

    code = "NOT_FOUND"


class ClientError(LangfuseApiError):
    """Any other 4xx response."""

    code = "CLIENT_ERROR"


class ServerError(LangfuseApiError):
    """5xx or otherwise unexpected non-2xx response."""

    code = "SERVER_ERROR"


class TransportFailureError(LangfuseApiError):
    """No response was received (connection, timeout, protocol error)."""

    code = "TRANSPORT_FAILURE"


class ResponseDecodeError(LangfuseApiError):
    """A 2xx response carried a body that could not be decoded."""

    code = "RESPONSE_DECODE_ERROR"

    @property
    def status_class(self) -> StatusClass:
        return StatusClass.SERVER_ERROR


def error_for_status(status_code: int, body: Any = None, message: str | None = None) -> LangfuseApiError:
    """Build the typed error for a non-2xx response."""
    message = message or f"Langfuse API request failed with status {status_code}"
    if status_code in (401, 403):
        return AuthenticationError(message, status_code, body)
    if status_code == 404:
        return NotFoundError(message, status_code, body)
    if 400 <= status_code < 500:
        return ClientError(message, status_code, body)
    return ServerError(message, status_code, body)
