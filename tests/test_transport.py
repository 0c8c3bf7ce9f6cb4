"""
Tests for HttpTransport: authentication headers, error classification and
the retry policy. The fake API's queued responses drive each scenario; the
`sleeps` fixture records backoff delays instead of waiting.
"""

import asyncio

import httpx
import pytest

from voyagekit import __version__
from voyagekit.config import ClientConfig, RetryPolicy
from voyagekit.errors import AuthError, RateLimitError, TransportError, ValidationError
from voyagekit.transport import HttpTransport, classify_response

PAYLOAD = {"input": ["a"], "model": "voyage-3-large"}
OK = {"data": [{"embedding": [1.0], "index": 0}], "model": "voyage-3-large"}


@pytest.fixture
def transport(config, fake_api, sleeps) -> HttpTransport:
    return HttpTransport(config, transport=fake_api.transport, sleep=sleeps)


def post(transport: HttpTransport):
    return asyncio.run(transport.post("embeddings", PAYLOAD))


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------
def test_post_sends_bearer_token_and_json_body(transport, fake_api):
    body = post(transport)

    request = fake_api.requests[0]
    assert str(request.url) == "https://api.test/v1/embeddings"
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["User-Agent"] == f"voyagekit/{__version__}"
    assert fake_api.bodies("embeddings") == [PAYLOAD]
    assert body["model"] == "voyage-3-large"


def test_base_url_trailing_slash_is_normalized():
    config = ClientConfig(api_key="k", base_url="https://api.test/v1/")

    assert HttpTransport(config).url_for("/rerank") == "https://api.test/v1/rerank"


# ---------------------------------------------------------------------------
# Server and network failures
# ---------------------------------------------------------------------------
def test_server_errors_are_retried_with_backoff_then_raised(transport, fake_api, sleeps):
    fake_api.queue("embeddings", 503, 503, 503, 503)

    with pytest.raises(TransportError) as excinfo:
        post(transport)

    assert excinfo.value.status_code == 503
    assert fake_api.calls() == 4
    assert sleeps.delays == [0.5, 1.0, 2.0]


def test_server_error_then_success_returns_body(transport, fake_api):
    fake_api.queue("embeddings", 500, OK)

    assert post(transport) == OK
    assert fake_api.calls() == 2


def test_max_retries_zero_means_single_attempt(fake_api, sleeps):
    config = ClientConfig(api_key="k", retry=RetryPolicy(max_retries=0))
    transport = HttpTransport(config, transport=fake_api.transport, sleep=sleeps)
    fake_api.queue("embeddings", 502)

    with pytest.raises(TransportError):
        post(transport)

    assert fake_api.calls() == 1
    assert sleeps.delays == []


def test_network_errors_become_transport_errors(transport, fake_api):
    fake_api.queue("embeddings", *[httpx.ConnectError("connection refused")] * 4)

    with pytest.raises(TransportError, match="Network error"):
        post(transport)

    assert fake_api.calls() == 4


def test_timeouts_are_retried(transport, fake_api):
    fake_api.queue("embeddings", httpx.ReadTimeout("too slow"), OK)

    assert post(transport) == OK
    assert fake_api.calls() == 2


def test_corrupt_encoded_body_is_a_transport_error(fake_api, sleeps):
    config = ClientConfig(api_key="k", retry=RetryPolicy(max_retries=0))
    transport = HttpTransport(config, transport=fake_api.transport, sleep=sleeps)
    fake_api.queue(
        "embeddings",
        httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"not gzip"),
        ),
    )

    with pytest.raises(TransportError, match="Unreadable response"):
        post(transport)

    assert fake_api.calls() == 1


def test_non_json_success_body_is_a_transport_error(transport, fake_api):
    fake_api.queue("embeddings", httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(TransportError, match="not valid JSON"):
        post(transport)


# ---------------------------------------------------------------------------
# Authentication and client errors
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("status", [401, 403])
def test_auth_failures_are_not_retried(transport, fake_api, sleeps, status):
    fake_api.queue("embeddings", status)

    with pytest.raises(AuthError):
        post(transport)

    assert fake_api.calls() == 1
    assert sleeps.delays == []


def test_other_client_errors_are_validation_errors(transport, fake_api):
    fake_api.queue("embeddings", httpx.Response(400, json={"detail": "Model foo is not supported"}))

    with pytest.raises(ValidationError, match="Model foo is not supported"):
        post(transport)

    assert fake_api.calls() == 1


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------
def test_rate_limit_is_retried_once_honouring_retry_after(transport, fake_api, sleeps):
    fake_api.queue(
        "embeddings",
        httpx.Response(429, headers={"Retry-After": "2"}, json={"detail": "slow down"}),
        OK,
    )

    assert post(transport) == OK
    assert sleeps.delays == [2.0]


def test_second_rate_limit_is_raised(transport, fake_api, sleeps):
    fake_api.queue("embeddings", 429, 429)

    with pytest.raises(RateLimitError):
        post(transport)

    assert fake_api.calls() == 2
    assert sleeps.delays == [1.0]


def test_classify_response_reads_retry_after():
    error = classify_response(httpx.Response(429, headers={"Retry-After": "3.5"}))

    assert isinstance(error, RateLimitError)
    assert error.retry_after == 3.5
