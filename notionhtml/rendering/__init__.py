"""Rendering support for Notion block trees, transport-agnostic.

Contains:
- renderer_iface: the fetch seams (children, attachment text) and RenderContext
- renderer: sibling-list renderer with list grouping (fragment + page)
- blocks: per-type block strategies
- rich_text / markdown: inline formatting and attached-markdown conversion
- asset_cache: content-addressed local copies of expiring image URLs
"""
