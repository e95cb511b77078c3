"""Command modules for the notionhtml CLI."""

from notionhtml.cli.commands import listing, render

__all__ = ["listing", "render"]
