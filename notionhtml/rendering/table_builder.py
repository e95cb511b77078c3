"""
Table rendering for Notion `table` blocks.

A table's rows are its children (`table_row` blocks), fetched on demand. Cell
contents are rendered as plain text: annotations inside cells are dropped.
"""

from __future__ import annotations

from ..models.blocks import Block, BlockType
from .renderer_iface import RenderContext
from .rich_text import escape_text, plain_text


def render_row(row: Block) -> str:
    cells = "".join(f"<td>{escape_text(plain_text(cell))}</td>" for cell in row.cells)
    return f"<tr>{cells}</tr>"


async def render_table_rows(table: Block, ctx: RenderContext) -> str:
    rows = await ctx.children_of(table)
    return "".join(render_row(r) for r in rows if r.type is BlockType.TABLE_ROW)


async def render_table(table: Block, ctx: RenderContext) -> str:
    if not table.has_children:
        return ""
    rows = await render_table_rows(table, ctx)
    return f'<table class="notion-table"><tbody>{rows}</tbody></table>'
