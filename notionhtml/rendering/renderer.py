"""
Block-tree renderer for Notion pages.

Walks an ordered sibling list left to right. Consecutive list items of the
same type are grouped under one <ul>/<ol>; everything else is rendered one
block at a time by the per-type strategies in `blocks`. Children are fetched
lazily through the RenderContext, so the traversal can run against an
in-memory tree.
"""

from __future__ import annotations

import html
from typing import Dict, List, Optional, Sequence

from ..models.blocks import Block, BlockType
from .asset_cache import AssetCache
from .blocks import render_block
from .options import RenderConfig
from .renderer_iface import BlockChildrenFetcher, RenderContext, TextFetcher

_LIST_TAGS: Dict[BlockType, str] = {
    BlockType.BULLETED_LIST_ITEM: "ul",
    BlockType.NUMBERED_LIST_ITEM: "ol",
}


async def render_blocks(blocks: Sequence[Block], ctx: RenderContext) -> str:
    fragments: List[str] = []
    total = len(blocks)
    i = 0
    while i < total:
        block = blocks[i]
        tag = _LIST_TAGS.get(block.type)
        if tag is None:
            fragments.append(await render_block(block, ctx, render_blocks))
            i += 1
            continue
        # Grouping is by adjacency only: any other block in between closes the list
        fragments.append(f"<{tag}>")
        while i < total and blocks[i].type is block.type:
            fragments.append(await render_block(blocks[i], ctx, render_blocks))
            i += 1
        fragments.append(f"</{tag}>")
    return "".join(fragments)


def render_page_document(title: str, html_fragment: str, extra_css: str = "") -> str:
    return (
        '<!doctype html><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{html.escape(title)}</title>"
        "<style>"
        "body{font-family:-apple-system,BlinkMacSystemFont,Segoe UI,Roboto,Helvetica,Arial,sans-serif;line-height:1.6;max-width:48rem;margin:2rem auto;padding:0 1rem;color:#222}"
        "pre{white-space:pre-wrap;background:#f6f6f6;padding:1em;border-radius:6px}"
        "blockquote{margin:.5em 0 .5em 1em;padding-left:.8em;border-left:3px solid #ddd}"
        "figure{margin:1em 0}figure img{max-width:100%;height:auto}"
        "figcaption{font-size:.85em;color:#666}"
        ".callout{padding:1em;background:#f8f8f8;border-radius:8px;border-left:4px solid #333;margin:1em 0;display:flex;gap:.5em}"
        ".column-list{display:flex;gap:1em}.column{flex:1;min-width:0}"
        "details>summary{cursor:pointer;font-weight:bold}"
        ".notion-table{width:100%;border-collapse:collapse;margin:1em 0}"
        ".notion-table td{border:1px solid #ddd;padding:8px;vertical-align:top}"
        ".notice{padding:1em;background:#fffbeb;color:#92400e;border:1px solid #fde68a;border-radius:6px;margin:1em 0;font-size:.9em}"
        ".notice strong{display:block}"
        ".markdown-attachment{background:#f9f9f9;padding:1.5em;border-radius:8px;margin:1em 0;border:1px solid #eee}"
        ".markdown-attachment-title{margin:0 0 1em 0;font-size:.85em;color:#666}"
        ".embed{margin:20px 0}"
        f'{extra_css}</style><article class="notion-content">{html_fragment}</article>'
    )


class BlockRenderer:
    """Class-based interface for block tree rendering."""

    def __init__(
        self,
        fetch_children: BlockChildrenFetcher,
        *,
        fetch_text: Optional[TextFetcher] = None,
        assets: Optional[AssetCache] = None,
        config: Optional[RenderConfig] = None,
    ):
        self.context = RenderContext(
            fetch_children=fetch_children,
            fetch_text=fetch_text,
            assets=assets,
            config=config or RenderConfig(),
        )

    async def render(self, blocks: Sequence[Block]) -> str:
        """Render an ordered sibling list to an HTML fragment string."""
        return await render_blocks(blocks, self.context)

    async def render_block(self, block: Block) -> str:
        """Render a single block (list items come out as a bare <li>)."""
        return await render_block(block, self.context, render_blocks)

    def render_full_page(self, title: str, html_fragment: str) -> str:
        """Wrap an HTML fragment in a full page with CSS."""
        return render_page_document(title, html_fragment)
