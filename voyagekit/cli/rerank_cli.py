"""
`voyagekit rerank` — order documents by relevance to a query.

    voyagekit rerank -q "capital of France" \\
        -d "Paris is the capital of France." \\
        -d "Berlin is the capital of Germany." --top-k 1

Results are consumed from find_similar_documents as a stream and printed in
rank order.
"""

import json
from typing import List, Optional

import typer

from voyagekit.cli import common
from voyagekit.client import VoyageClient
from voyagekit.logging_utils import log_verbose
from voyagekit.models import DocumentSimilarity


def rerank_command(
    query: str = typer.Option(..., "--query", "-q", help="Query to rank documents against."),
    document: List[str] = typer.Option(
        ..., "--document", "-d", help="Document text (repeatable)."
    ),
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", help="Only show the best K."),
    model: str = typer.Option("rerank-2", "--model", "-m", help="Rerank model."),
    api_key: Optional[str] = common.API_KEY_OPTION,
    base_url: Optional[str] = common.BASE_URL_OPTION,
    timeout: Optional[float] = common.TIMEOUT_OPTION,
    as_json: bool = common.JSON_OPTION,
    verbose: bool = common.VERBOSE_OPTION,
) -> None:
    """Rerank documents based on a query."""
    client = common.build_client(api_key, base_url, timeout, verbose=verbose, rerank_model=model)

    log_verbose(f"Reranking {len(document)} document(s) by relevance to: {query}", verbose)
    results = common.run(lambda: _collect(client, query, document, top_k), verbose)

    if as_json:
        typer.echo(json.dumps([item.model_dump(mode="json") for item in results]))
        return

    typer.echo("Reranked documents by relevance:")
    for item in results:
        typer.echo(f"Score {item.similarity:.4f}: {item.document.text}")


async def _collect(
    client: VoyageClient, query: str, documents: List[str], top_k: Optional[int]
) -> List[DocumentSimilarity]:
    results: List[DocumentSimilarity] = []
    stream = client.find_similar_documents(query, documents, top_k=top_k)
    async for item in stream:
        results.append(item)
        if top_k is not None and len(results) >= top_k:
            break
    await stream.aclose()
    return results
