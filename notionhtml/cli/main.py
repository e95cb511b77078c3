#!/usr/bin/env python
"""Command line interface for notionhtml."""

import typer

from notionhtml.cli import utils
from notionhtml.cli.commands import listing, render

app = typer.Typer(help="Render Notion pages to self-contained HTML")

# Register commands
app.command("render")(render.render)
app.command("projects")(listing.projects)
app.command("reports")(listing.reports)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logs"),
):
    """Render Notion pages and list site databases."""
    utils.configure_logging(verbose)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
