"""
Typed error hierarchy for the voyagekit SDK.

Every failure the SDK can surface is a subclass of VoyageError, so callers
can catch the whole family in one place or react to a specific kind:

    • ValidationError  — malformed or missing request fields (also used for
                         4xx responses other than 401/403/429)
    • AuthError        — credential missing or rejected (401/403)
    • RateLimitError   — quota exceeded (429), after the single retry
    • TransportError   — network failure, timeout, or 5xx, after retries
    • NotFoundError    — operation‑specific "nothing to return"

Retryable failures are retried inside the transport; callers only ever see
the final outcome.
"""

from typing import Optional


class VoyageError(Exception):
    """
    Base class for all SDK errors.

    Parameters
    ----------
    message : str
        Human‑readable description.
    status_code : int | None
        HTTP status that produced the error, when there was one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def kind(self) -> str:
        """Short error kind used by the CLI, e.g. "AuthError"."""
        return self.__class__.__name__

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ValidationError(VoyageError):
    """A request was malformed, either locally or according to the server."""


class AuthError(VoyageError):
    """The API key is missing or was rejected."""


class RateLimitError(VoyageError):
    """The API quota was exceeded."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 429,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message, status_code)
        self.retry_after = retry_after


class TransportError(VoyageError):
    """Network‑level failure, timeout, or server error."""


class NotFoundError(VoyageError):
    """The operation had nothing to return (e.g. no documents to rank)."""


# Exit codes used by the CLI, one per error kind.
EXIT_CODES = {
    ValidationError: 2,
    AuthError: 3,
    RateLimitError: 4,
    TransportError: 5,
    NotFoundError: 6,
}


def exit_code_for(error: VoyageError) -> int:
    """Map an error to its CLI exit code (1 for anything unrecognised)."""
    for error_type, code in EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return 1
