"""Database listing commands for the notionhtml CLI."""

import asyncio

from rich.table import Table

from notionhtml.cli import utils

console = utils.console


def projects():
    """List published projects, newest first."""
    settings = utils.load_settings(require_api_key=False)

    async def _fetch():
        async with utils.open_service(settings) as service:
            return await service.projects()

    rows = asyncio.run(_fetch())
    if not rows:
        console.print("No projects found")
        return

    table = Table("Title", "Slug", "Date", "Summary")
    for p in rows:
        table.add_row(p.title, p.slug, p.date, p.summary)
    console.print(table)


def reports():
    """List weekly reports, latest week first."""
    settings = utils.load_settings(require_api_key=False)

    async def _fetch():
        async with utils.open_service(settings) as service:
            return await service.reports()

    rows = asyncio.run(_fetch())
    if not rows:
        console.print("No reports found")
        return

    table = Table("Title", "Slug", "Date")
    for r in rows:
        table.add_row(r.title, r.slug, r.date)
    console.print(table)
