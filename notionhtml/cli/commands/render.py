"""Render command for the notionhtml CLI."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from notionhtml.cli import utils
from notionhtml.config import Settings
from notionhtml.rendering.exporter import write_html
from notionhtml.rendering.renderer import render_page_document

console = utils.console


async def _render(settings: Settings, page_id: str) -> str:
    async with utils.open_service(settings) as service:
        return await service.page_content(page_id)


def render(
    page_id: str = typer.Argument(..., help="ID of the Notion page"),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help="Write HTML to this file instead of stdout"
    ),
    title: str = typer.Option("", help="Document title (defaults to the page id)"),
    full_page: bool = typer.Option(
        False, "--full-page", help="Wrap output in a full HTML page (title, base styles)"
    ),
    cache_dir: Optional[str] = typer.Option(
        None, help="Directory for cached images (default: public/images/notion)"
    ),
    public_prefix: Optional[str] = typer.Option(
        None, help="URL prefix the cache directory is served under"
    ),
):
    """Render the body of a page, caching hosted images locally."""
    settings = utils.load_settings(cache_dir=cache_dir, public_prefix=public_prefix)
    fragment = asyncio.run(_render(settings, page_id))
    doc_title = title or page_id

    if out is None:
        page = render_page_document(doc_title, fragment) if full_page else fragment
        typer.echo(page)
        return

    try:
        path = write_html(
            doc_title,
            fragment,
            str(out.parent),
            full_page=full_page,
            filename=out.name,
        )
    except OSError as e:
        utils.err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    console.print(f"Wrote [bold]{path}[/bold]")
