"""
Root entrypoint for the voyagekit CLI.

This module defines the top‑level `voyagekit` command and mounts the
commands defined in the other modules under voyagekit/cli/:

    • voyagekit/cli/embed_cli.py   →  `voyagekit embed ...`
    • voyagekit/cli/rerank_cli.py  →  `voyagekit rerank ...`
    • voyagekit/cli/search_cli.py  →  `voyagekit search ...`

Every command needs an API key, given with --api-key or through
VOYAGE_API_KEY (a local .env file is loaded on start‑up).
"""

from dotenv import load_dotenv
import typer

from voyagekit import __version__

from .embed_cli import embed_command
from .rerank_cli import rerank_command
from .search_cli import search_command

# Load environment variables
load_dotenv()

# ---------------------------------------------------------------------------
# Root CLI application
# ---------------------------------------------------------------------------
cli = typer.Typer(
    help=(
        "Voyage AI command-line interface.\n\n"
        "  voyagekit embed  -t <text> [-t <text> ...]\n\n"
        "  voyagekit rerank -q <query> -d <doc> [-d <doc> ...]\n\n"
        "  voyagekit search -q <query> -d <doc> [-d <doc> ...]\n\n"
        "Set VOYAGE_API_KEY or pass --api-key."
    ),
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"voyagekit {__version__}")
        raise typer.Exit()


@cli.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version."
    ),
) -> None:
    """Voyage AI embeddings and reranking from the command line."""


# ---------------------------------------------------------------------------
# Register commands
# ---------------------------------------------------------------------------
cli.command("embed")(embed_command)
cli.command("rerank")(rerank_command)
cli.command("search")(search_command)

# ---------------------------------------------------------------------------
# Entry point for `python -m voyagekit.cli.main`
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    cli()
