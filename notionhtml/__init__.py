"""Render Notion pages to self-contained HTML with durable image assets."""

from .client import (
    NotionApiError,
    NotionAuthError,
    NotionClient,
    NotionError,
    NotionRateLimited,
)
from .config import Settings
from .rendering.asset_cache import AssetCache
from .rendering.options import CacheConfig, RenderConfig
from .rendering.renderer import BlockRenderer, render_blocks
from .service import ContentService

__all__ = [
    "AssetCache",
    "BlockRenderer",
    "CacheConfig",
    "ContentService",
    "NotionApiError",
    "NotionAuthError",
    "NotionClient",
    "NotionError",
    "NotionRateLimited",
    "RenderConfig",
    "Settings",
    "render_blocks",
]
