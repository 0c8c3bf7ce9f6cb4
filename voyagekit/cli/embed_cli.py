"""
`voyagekit embed` — generate embeddings for one or more texts.

    voyagekit embed -t "first text" -t "second text" --input-type document
    voyagekit embed -t "hello" --json
"""

import json
from typing import List, Optional

import typer

from voyagekit.cli import common
from voyagekit.logging_utils import log_verbose
from voyagekit.models import EmbeddingsResponse


def embed_command(
    text: List[str] = typer.Option(..., "--text", "-t", help="Text to embed (repeatable)."),
    model: str = typer.Option("voyage-3-large", "--model", "-m", help="Embedding model."),
    input_type: Optional[str] = typer.Option(
        None, "--input-type", help="Either 'query' or 'document'."
    ),
    api_key: Optional[str] = common.API_KEY_OPTION,
    base_url: Optional[str] = common.BASE_URL_OPTION,
    timeout: Optional[float] = common.TIMEOUT_OPTION,
    as_json: bool = common.JSON_OPTION,
    verbose: bool = common.VERBOSE_OPTION,
) -> None:
    """Generate embeddings for text."""
    client = common.build_client(
        api_key, base_url, timeout, verbose=verbose, embedding_model=model
    )

    log_verbose(f"Embedding {len(text)} text(s) with {model}...", verbose)
    response: EmbeddingsResponse = common.run(
        lambda: _embed(client, text, input_type), verbose
    )
    log_verbose(f"Used {response.usage.total_tokens} tokens.", verbose)

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "model": response.model,
                    "embeddings": response.embeddings,
                    "usage": {"total_tokens": response.usage.total_tokens},
                }
            )
        )
        return

    typer.echo(f"Generated {len(response)} embeddings")
    for i, embedding in enumerate(response.embeddings):
        typer.echo(f"Embedding {i}: {len(embedding)} dimensions")


async def _embed(client, texts: List[str], input_type: Optional[str]) -> EmbeddingsResponse:
    return await client.embed_batch(texts, input_type=input_type)
