"""
HTTP transport adapter for the Voyage REST API.

One logical operation is one POST with a JSON body. HTTP failures are mapped
to the typed errors in voyagekit.errors:

    401 / 403        → AuthError         (not retried)
    429              → RateLimitError    (retried once, Retry-After or default delay)
    5xx / network    → TransportError    (retried with exponential backoff;
                                          also undecodable bodies)
    other 4xx        → ValidationError   (not retried)

Retries happen here, inside the call; the caller sees only the final outcome.
Each call opens its own httpx.AsyncClient, so concurrent calls share nothing
but the immutable ClientConfig.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from voyagekit import __version__
from voyagekit.config import ClientConfig
from voyagekit.errors import (
    AuthError,
    RateLimitError,
    TransportError,
    ValidationError,
    VoyageError,
)
from voyagekit.logging_utils import setup_logger

logger = setup_logger("voyagekit.transport")

SleepFn = Callable[[float], Awaitable[None]]


def _error_message(response: httpx.Response) -> str:
    """Pull the most useful message out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.text or response.reason_phrase


def _retry_after(response: httpx.Response) -> Optional[float]:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        return None


def classify_response(response: httpx.Response) -> VoyageError:
    """Map a non‑success response to the matching typed error."""
    status = response.status_code
    message = _error_message(response)

    if status in (401, 403):
        return AuthError(f"Authentication failed: {message}", status)
    if status == 429:
        return RateLimitError(
            f"Rate limit exceeded: {message}", status, retry_after=_retry_after(response)
        )
    if status >= 500:
        return TransportError(f"Server error: {message}", status)
    return ValidationError(f"Request rejected: {message}", status)


class HttpTransport:
    """
    Authenticated JSON POSTs with retry handling.

    Parameters
    ----------
    config : ClientConfig
        API key, base URL, timeout and retry policy.
    transport : httpx.AsyncBaseTransport | None
        Optional httpx transport; tests pass an httpx.MockTransport here.
    sleep : callable
        Coroutine used for backoff delays. Defaults to asyncio.sleep.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.config = config
        self._transport = transport
        self._sleep = sleep

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"voyagekit/{__version__}",
        }

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url}/{path.lstrip('/')}"

    async def _send(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout),
            transport=self._transport,
        ) as client:
            return await client.post(url, json=payload, headers=self.headers)

    async def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST `payload` to `path` and return the decoded JSON object.

        Raises
        ------
        AuthError, RateLimitError, TransportError, ValidationError
            After the retry policy has been applied.
        """
        url = self.url_for(path)
        policy = self.config.retry
        server_retries = 0
        rate_limit_retried = False

        while True:
            logger.debug("POST %s (attempt %d)", url, server_retries + int(rate_limit_retried) + 1)
            try:
                response = await self._send(url, payload)
            except httpx.TimeoutException as exc:
                error: VoyageError = TransportError(f"Request to {url} timed out: {exc}")
            except httpx.TransportError as exc:
                error = TransportError(f"Network error calling {url}: {exc}")
            except httpx.HTTPError as exc:
                error = TransportError(f"Unreadable response from {url}: {exc}")
            else:
                if response.is_success:
                    return self._decode(response)
                error = classify_response(response)

            if isinstance(error, RateLimitError) and not rate_limit_retried:
                rate_limit_retried = True
                delay = error.retry_after if error.retry_after is not None else policy.rate_limit_delay
                logger.warning("Rate limited by %s; retrying once in %.2fs", url, delay)
                await self._sleep(delay)
                continue

            if isinstance(error, TransportError) and server_retries < policy.max_retries:
                delay = policy.backoff(server_retries)
                server_retries += 1
                logger.warning(
                    "%s; retry %d/%d in %.2fs", error, server_retries, policy.max_retries, delay
                )
                await self._sleep(delay)
                continue

            logger.debug("Giving up on %s: %s", url, error)
            raise error

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError("Response body is not valid JSON", response.status_code) from exc
        if not isinstance(body, dict):
            raise TransportError("Response body is not a JSON object", response.status_code)
        return body
