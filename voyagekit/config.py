"""
Client configuration.

A ClientConfig is an explicit, immutable value owned by one client instance.
There is no module‑level mutable state: `ClientConfig.from_env()` reads the
environment (after loading a local .env file with python-dotenv) once and
returns a frozen value.

Environment variables
---------------------
VOYAGE_API_KEY       required
VOYAGE_BASE_URL      optional, defaults to https://api.voyageai.com/v1
VOYAGE_TIMEOUT       optional, seconds (float)
VOYAGE_MAX_RETRIES   optional, retries for server/network failures (int)
"""

import os
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from voyagekit.errors import AuthError, ValidationError

DEFAULT_BASE_URL = "https://api.voyageai.com/v1"
DEFAULT_TIMEOUT = 30.0

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry tuning for the transport.

    Attributes
    ----------
    max_retries : int
        Extra attempts after the first one for 5xx / network failures.
    backoff_base : float
        Delay before the first retry, in seconds.
    backoff_factor : float
        Multiplier applied per subsequent retry.
    backoff_max : float
        Upper bound for a single backoff delay.
    rate_limit_delay : float
        Delay before the single 429 retry when the server sends no
        Retry-After header.
    """

    max_retries: int = 3
    backoff_base: float = 0.5
    backoff_factor: float = 2.0
    backoff_max: float = 8.0
    rate_limit_delay: float = 1.0

    def backoff(self, attempt: int) -> float:
        """Delay before retry number `attempt` (0‑based)."""
        return min(self.backoff_max, self.backoff_base * (self.backoff_factor ** attempt))


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    embedding_model: str = "voyage-3-large"
    rerank_model: str = "rerank-2"

    def __post_init__(self) -> None:
        if not self.api_key:
            raise AuthError("API key required. Set VOYAGE_API_KEY or pass api_key.")
        if self.timeout <= 0:
            raise ValidationError("timeout must be positive")
        # Normalize once so URL joins never produce a double slash.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def with_overrides(self, **changes: object) -> "ClientConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, api_key: Optional[str] = None) -> "ClientConfig":
        """
        Build a config from the environment.

        Parameters
        ----------
        api_key : str | None
            Explicit key; takes precedence over VOYAGE_API_KEY.

        Raises
        ------
        AuthError
            If no API key is available.
        ValidationError
            If a numeric variable cannot be parsed.
        """
        load_dotenv()

        key = api_key or os.getenv("VOYAGE_API_KEY")
        if not key:
            raise AuthError("API key required. Set VOYAGE_API_KEY or pass api_key.")

        retry = RetryPolicy()
        max_retries = _env("VOYAGE_MAX_RETRIES", int)
        if max_retries is not None:
            retry = replace(retry, max_retries=max_retries)

        timeout = _env("VOYAGE_TIMEOUT", float)

        return cls(
            api_key=key,
            base_url=os.getenv("VOYAGE_BASE_URL") or DEFAULT_BASE_URL,
            timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            retry=retry,
        )


def _env(name: str, parse: Callable[[str], T]) -> Optional[T]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return parse(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a valid {parse.__name__}, got {raw!r}") from exc
