"""Command line interface."""

from diverse_select.cli.main import cli, main


__all__ = ["cli", "main"]
