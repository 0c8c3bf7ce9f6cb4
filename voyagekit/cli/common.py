"""
Shared plumbing for the voyagekit CLI commands.

Every command:
    1. builds a VoyageClient from flags / environment (build_client)
    2. runs one coroutine to completion (run), with DEBUG logs under --verbose
    3. on a VoyageError prints "<Kind>: <message>" to stderr and exits with
       the error's code from voyagekit.errors.EXIT_CODES
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer

from voyagekit.client import VoyageClient
from voyagekit.config import ClientConfig
from voyagekit.errors import VoyageError, exit_code_for
from voyagekit.logging_utils import debug_logging, log_verbose

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Options shared by all commands
# ---------------------------------------------------------------------------
API_KEY_OPTION = typer.Option(
    None,
    "--api-key",
    envvar="VOYAGE_API_KEY",
    help="Voyage API key (defaults to $VOYAGE_API_KEY).",
    show_default=False,
)
BASE_URL_OPTION = typer.Option(None, "--base-url", help="Override the API base URL.")
TIMEOUT_OPTION = typer.Option(None, "--timeout", help="Per-request timeout in seconds.")
JSON_OPTION = typer.Option(False, "--json", help="Print machine-readable JSON.")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show progress and debug logs.")


def fail(error: VoyageError) -> typer.Exit:
    """Report `error` on stderr and return the Exit to raise."""
    typer.echo(f"{error.kind}: {error}", err=True)
    return typer.Exit(code=exit_code_for(error))


def build_client(
    api_key: Optional[str],
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    verbose: bool = False,
    **overrides: Any,
) -> VoyageClient:
    """
    Create the client for one CLI invocation.

    Flags take precedence over VOYAGE_* environment variables. Extra keyword
    arguments (e.g. embedding_model) are applied to the ClientConfig.
    """
    try:
        config = ClientConfig.from_env(api_key=api_key)
        if base_url:
            overrides["base_url"] = base_url
        if timeout is not None:
            overrides["timeout"] = timeout
        overrides = {key: value for key, value in overrides.items() if value is not None}
        if overrides:
            config = config.with_overrides(**overrides)
    except VoyageError as exc:
        raise fail(exc)

    log_verbose(f"Using API at {config.base_url}", verbose)
    return VoyageClient(config)


def run(call: Callable[[], Awaitable[T]], verbose: bool = False) -> T:
    """
    Run one async CLI action, turning SDK errors into exit codes.

    With `verbose`, library loggers log at DEBUG for the duration of the
    call only.
    """
    try:
        with debug_logging(verbose):
            return asyncio.run(_invoke(call))
    except VoyageError as exc:
        raise fail(exc)


async def _invoke(call: Callable[[], Awaitable[T]]) -> T:
    return await call()
