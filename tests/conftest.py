"""
Shared pytest configuration for the voyagekit test suite.

This file centralizes reusable testing utilities so that:
    • every test talks to the same deterministic fake API
    • retries never actually sleep (delays are recorded instead)
    • CLI tests share one Typer CliRunner setup
"""

import pytest
from typer.testing import CliRunner

from tests.fake_api import FakeVoyageApi
from voyagekit.client import VoyageClient
from voyagekit.config import ClientConfig, RetryPolicy


# ============================================================================
# SHARED TEST INFRASTRUCTURE
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provides a fresh Typer CliRunner instance for CLI tests."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real VOYAGE_* settings from leaking into tests."""
    for name in ("VOYAGE_API_KEY", "VOYAGE_BASE_URL", "VOYAGE_TIMEOUT", "VOYAGE_MAX_RETRIES"):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# FAKE API + CLIENT FIXTURES
# ============================================================================


@pytest.fixture
def fake_api() -> FakeVoyageApi:
    """Deterministic fake Voyage API; see tests/fake_api.py."""
    return FakeVoyageApi()


@pytest.fixture
def sleeps():
    """
    Records retry delays instead of sleeping.

    Exposes:
        • .delays → list of requested delays, in order
        • awaitable call signature matching asyncio.sleep
    """

    class SleepRecorder:
        def __init__(self):
            self.delays = []

        async def __call__(self, delay: float) -> None:
            self.delays.append(delay)

    return SleepRecorder()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(api_key="test-key", base_url="https://api.test/v1", retry=RetryPolicy())


@pytest.fixture
def client(config, fake_api, sleeps) -> VoyageClient:
    """A VoyageClient wired to the fake API, with recorded (not real) sleeps."""
    return VoyageClient(config, transport=fake_api.transport, sleep=sleeps)
