"""Typer command-line interface for voyagekit (`voyagekit.cli.main:cli`)."""
