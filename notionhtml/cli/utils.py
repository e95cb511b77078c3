"""Shared helpers for the notionhtml CLI commands."""

from __future__ import annotations

import dataclasses
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from notionhtml.client import NotionClient
from notionhtml.config import Settings
from notionhtml.service import ContentService

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Rich logging on stderr so rendered HTML on stdout stays clean."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                rich_tracebacks=True,
                markup=False,
                show_time=True,
                log_time_format="%H:%M:%S",
            )
        ],
        force=True,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def load_settings(
    *,
    require_api_key: bool = True,
    cache_dir: Optional[str] = None,
    public_prefix: Optional[str] = None,
) -> Settings:
    """Read settings from the environment (and a local .env file)."""
    load_dotenv()
    settings = Settings.from_env()
    overrides = {
        k: v
        for k, v in {"cache_dir": cache_dir, "public_prefix": public_prefix}.items()
        if v
    }
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    if require_api_key and not settings.api_key:
        err_console.print("[bold red]Error:[/bold red] NOTION_API_KEY is not set")
        raise typer.Exit(1)
    return settings


@asynccontextmanager
async def open_service(settings: Settings) -> AsyncIterator[ContentService]:
    async with NotionClient(settings.api_key or "") as client:
        yield ContentService(client, settings=settings)
