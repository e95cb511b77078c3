"""
Per-type block rendering strategies.

A small dispatcher maps a block's `BlockType` to a renderer. Renderers may
suspend on I/O (child fetch, asset download, attachment fetch) through the
`RenderContext`; they never raise on a failed fetch.

Design:
  - Renderers: small classes implementing `render(block, ctx, render_tree)`
  - Dispatcher: one entry per BlockType member, checked at import
  - `render_tree` is the sibling-list renderer, passed in so containers can
    recurse into children without a cyclic import.
"""

from __future__ import annotations

import html
import logging
from typing import Dict, Optional
from urllib.parse import urlsplit

from tinyhtml import h

from ..models.blocks import Block, BlockType
from .markdown import markdown_to_html
from .options import RenderConfig
from .renderer_iface import RenderContext, TreeRenderer
from .rich_text import escape_text, format_rich_text, plain_text
from .table_builder import render_row, render_table

LOGGER = logging.getLogger(__name__)


async def render_children(
    block: Block, ctx: RenderContext, render_tree: TreeRenderer
) -> str:
    children = await ctx.children_of(block)
    if not children:
        return ""
    return await render_tree(children, ctx)


def _link(url: str, label: str, config: RenderConfig, cls: str) -> str:
    return h(
        "a",
        href=url,
        target=config.link_target,
        rel=config.link_rel,
        **{"class": cls},
    )(label).render()


def _notice(title: str, detail: Optional[str] = None) -> str:
    parts = [h("strong")(title)]
    if detail:
        parts.append(h("span")(detail))
    return h("div", role="note", **{"class": "notice warning"})(*parts).render()


class _Renderer:
    async def render(
        self, block: Block, ctx: RenderContext, render_tree: TreeRenderer
    ) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class _ParagraphRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        runs = block.rich_text
        out = ""
        if plain_text(runs).strip():
            out = f"<p>{format_rich_text(runs, ctx.config)}</p>"
        return out + await render_children(block, ctx, render_tree)


class _HeadingRenderer(_Renderer):
    def __init__(self, level: int):
        self.tag = f"h{level}"

    async def render(self, block, ctx, render_tree):
        body = format_rich_text(block.rich_text, ctx.config)
        # Toggleable headings carry their body as children
        children = await render_children(block, ctx, render_tree)
        return f"<{self.tag}>{body}</{self.tag}>{children}"


class _ListItemRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        body = format_rich_text(block.rich_text, ctx.config)
        children = await render_children(block, ctx, render_tree)
        return f"<li>{body}{children}</li>"


class _ImageRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        asset = block.asset
        if asset is None:
            return ""
        src = asset.url
        # Only the API's own storage expires; external images are left alone
        if asset.is_hosted and ctx.assets is not None:
            src = await ctx.assets.resolve(src)
        caption = block.caption
        alt = plain_text(caption)
        return (
            f'<figure><img src="{html.escape(src)}" alt="{html.escape(alt)}" loading="lazy" />'
            f"<figcaption>{format_rich_text(caption, ctx.config)}</figcaption></figure>"
        )


class _CodeRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        return f"<pre><code>{escape_text(plain_text(block.rich_text))}</code></pre>"


class _QuoteRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        body = format_rich_text(block.rich_text, ctx.config)
        children = await render_children(block, ctx, render_tree)
        return f"<blockquote>{body}{children}</blockquote>"


class _DividerRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        return "<hr />"


class _CalloutRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        icon = block.icon or ctx.config.default_callout_icon
        body = format_rich_text(block.rich_text, ctx.config)
        children = await render_children(block, ctx, render_tree)
        return (
            f'<div class="callout"><span class="callout-icon">{escape_text(icon)}</span> '
            f'<div class="callout-body">{body}{children}</div></div>'
        )


class _ToggleRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        summary = format_rich_text(block.rich_text, ctx.config)
        children = await render_children(block, ctx, render_tree)
        return f"<details><summary>{summary}</summary>{children}</details>"


class _ContainerRenderer(_Renderer):
    def __init__(self, cls: str):
        self.cls = cls

    async def render(self, block, ctx, render_tree):
        children = await render_children(block, ctx, render_tree)
        return f'<div class="{self.cls}">{children}</div>'


def _is_markdown(label: str, url: str) -> bool:
    try:
        path = urlsplit(url).path
    except ValueError:
        path = url
    return label.lower().endswith(".md") or path.lower().endswith(".md")


class _FileRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        conf = ctx.config
        asset = block.asset
        if asset is None:
            return ""
        url = asset.url
        label = plain_text(block.caption).strip() or asset.name or conf.default_file_label
        if conf.is_internal(url):
            return _notice(conf.unsupported_file_notice, conf.unsupported_file_detail)
        if _is_markdown(label, url):
            return await self._render_markdown(label, url, ctx)
        return f"<p>{_link(url, f'📎 {label} (Download)', conf, 'file-link')}</p>"

    async def _render_markdown(self, label: str, url: str, ctx: RenderContext) -> str:
        text: Optional[str] = None
        if ctx.fetch_text is not None:
            try:
                text = await ctx.fetch_text(url)
            except Exception as exc:
                LOGGER.warning("Failed to fetch attachment %s: %s", label, exc)
                text = None
        if text is None:
            return _notice(f"⚠️ Could not load {label}")
        return (
            '<div class="markdown-attachment">'
            f'<h4 class="markdown-attachment-title">📄 {escape_text(label)}</h4>'
            f'<div class="markdown-body">{markdown_to_html(text)}</div>'
            "</div>"
        )


class _PdfRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        asset = block.asset
        if asset is None:
            return ""
        label = plain_text(block.caption).strip() or ctx.config.pdf_label
        return f"<p>{_link(asset.url, label, ctx.config, 'pdf-link')}</p>"


class _BookmarkRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        url = block.url
        if not url:
            return ""
        label = plain_text(block.caption).strip() or url
        return f"<p>{_link(url, f'🔖 {label}', ctx.config, 'bookmark')}</p>"


class _VideoRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        asset = block.asset
        if asset is None:
            return ""
        label = plain_text(block.caption).strip() or ctx.config.video_label
        return f"<p>{_link(asset.url, label, ctx.config, 'video-link')}</p>"


class _EmbedRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        conf = ctx.config
        url = block.url
        if not url:
            return ""
        if conf.is_internal(url):
            return _notice(conf.unsupported_embed_notice)
        frame = h(
            "iframe",
            src=url,
            loading="lazy",
            style=f"width:100%;height:{conf.embed_height_px}px;border:none",
        )()
        return h("div", **{"class": "embed"})(frame).render()


class _TableRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        return await render_table(block, ctx)


class _TableRowRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        return render_row(block)


class _UnsupportedRenderer(_Renderer):
    async def render(self, block, ctx, render_tree):
        # No markup of its own, but children are never dropped
        return await render_children(block, ctx, render_tree)


_LIST_ITEM = _ListItemRenderer()

_BY_TYPE: Dict[BlockType, _Renderer] = {
    BlockType.PARAGRAPH: _ParagraphRenderer(),
    BlockType.HEADING_1: _HeadingRenderer(1),
    BlockType.HEADING_2: _HeadingRenderer(2),
    BlockType.HEADING_3: _HeadingRenderer(3),
    BlockType.BULLETED_LIST_ITEM: _LIST_ITEM,
    BlockType.NUMBERED_LIST_ITEM: _LIST_ITEM,
    BlockType.IMAGE: _ImageRenderer(),
    BlockType.CODE: _CodeRenderer(),
    BlockType.QUOTE: _QuoteRenderer(),
    BlockType.DIVIDER: _DividerRenderer(),
    BlockType.CALLOUT: _CalloutRenderer(),
    BlockType.TOGGLE: _ToggleRenderer(),
    BlockType.COLUMN_LIST: _ContainerRenderer("column-list"),
    BlockType.COLUMN: _ContainerRenderer("column"),
    BlockType.FILE: _FileRenderer(),
    BlockType.PDF: _PdfRenderer(),
    BlockType.BOOKMARK: _BookmarkRenderer(),
    BlockType.EMBED: _EmbedRenderer(),
    BlockType.VIDEO: _VideoRenderer(),
    BlockType.TABLE: _TableRenderer(),
    BlockType.TABLE_ROW: _TableRowRenderer(),
    BlockType.UNSUPPORTED: _UnsupportedRenderer(),
}

_MISSING = set(BlockType) - set(_BY_TYPE)
if _MISSING:
    raise RuntimeError(f"No block renderer for: {sorted(t.value for t in _MISSING)}")


async def render_block(
    block: Block, ctx: RenderContext, render_tree: TreeRenderer
) -> str:
    return await _BY_TYPE[block.type].render(block, ctx, render_tree)
