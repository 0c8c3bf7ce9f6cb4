"""Allow `python -m voyagekit ...`."""

from voyagekit.cli.main import cli

cli()
