"""`voyagekit search` — semantic search over a handful of documents."""

import json
from typing import List, Optional

import typer

from voyagekit.cli import common
from voyagekit.errors import ValidationError
from voyagekit.logging_utils import log_verbose
from voyagekit.models import SearchRequest, SearchType, as_documents


def search_command(
    query: str = typer.Option(..., "--query", "-q", help="Search query."),
    document: List[str] = typer.Option(
        ..., "--document", "-d", help="Document text (repeatable)."
    ),
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", help="Only show the best K."),
    mode: SearchType = typer.Option(
        SearchType.SIMILARITY, "--mode", help="Score by embedding similarity or by rerank."
    ),
    api_key: Optional[str] = common.API_KEY_OPTION,
    base_url: Optional[str] = common.BASE_URL_OPTION,
    timeout: Optional[float] = common.TIMEOUT_OPTION,
    as_json: bool = common.JSON_OPTION,
    verbose: bool = common.VERBOSE_OPTION,
) -> None:
    """Search documents by meaning."""
    client = common.build_client(api_key, base_url, timeout, verbose=verbose)

    try:
        request = SearchRequest(
            query=query, documents=as_documents(document), top_k=top_k, search_type=mode
        )
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError subclass
        raise common.fail(ValidationError(f"Invalid search: {exc}"))

    log_verbose(f"Searching {len(document)} document(s) ({mode.value})...", verbose)
    results = common.run(lambda: _search(client, request), verbose)

    if as_json:
        typer.echo(json.dumps([item.model_dump(mode="json") for item in results]))
        return

    for item in results:
        typer.echo(f"[{item.index}] {item.score:.4f}: {item.document.text}")


async def _search(client, request: SearchRequest):
    return await client.search(request)
