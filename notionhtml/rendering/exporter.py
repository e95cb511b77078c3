"""
File output helpers for rendered pages.

Thin wrappers that turn a rendered fragment into a file on disk, optionally
wrapped in a full HTML document. No global state.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

from .renderer import render_page_document

LOGGER = logging.getLogger(__name__)


def _safe_name(s: Optional[str]) -> str:
    if not s:
        return "untitled"
    s = re.sub(r"\s+", " ", s).strip()
    s = re.sub(r"[^\w\- ]+", "-", s)
    return s[:60] or "untitled"


def write_html(
    title: str,
    html_fragment: str,
    out_dir: str,
    *,
    full_page: bool = False,
    filename: Optional[str] = None,
) -> str:
    os.makedirs(out_dir, exist_ok=True)
    page = render_page_document(title, html_fragment) if full_page else html_fragment
    fname = filename or f"{_safe_name(title)}.html"
    path = os.path.join(out_dir, fname)
    with open(path, "w", encoding="utf-8") as f:
        f.write(page)
    LOGGER.info("Wrote %s (%d bytes)", path, len(page))
    return path
