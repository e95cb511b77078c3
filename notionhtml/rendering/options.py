"""
Render and cache configuration for Notion → HTML output.

Centralizes behavior flags so callers can tune defaults without touching
core logic. Both dataclasses are passed explicitly to the code that needs
them; nothing here reads process state.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union


@dataclass(frozen=True)
class CacheConfig:
    # Filesystem directory that holds cached assets (created on first download)
    cache_dir: Union[str, Path] = Path("public") / "images" / "notion"
    # URL prefix under which `cache_dir` is served
    public_prefix: str = "/images/notion"

    # Extensions kept when the URL path ends in one of them
    extensions: Tuple[str, ...] = ("jpg", "jpeg", "png", "gif", "webp", "svg", "avif")
    default_extension: str = "jpg"

    @property
    def directory(self) -> Path:
        return Path(self.cache_dir)

    def public_path(self, filename: str) -> str:
        return f"{self.public_prefix.rstrip('/')}/{filename}"


@dataclass(frozen=True)
class RenderConfig:
    # Link behavior
    link_target: str = "_blank"
    link_rel: str = "noopener noreferrer"

    # Labels
    default_file_label: str = "Attached File"
    default_callout_icon: str = "💡"
    pdf_label: str = "📄 View PDF"
    video_label: str = "🎥 Watch Video"

    # Files the API returns under this scheme cannot be fetched from outside
    internal_scheme: str = "attachment:"
    unsupported_file_notice: str = "⚠️ Unsupported file link"
    unsupported_file_detail: str = (
        "Notion internal links (attachment://) cannot be opened from this site."
    )
    unsupported_embed_notice: str = "⚠️ Unsupported embed link"

    # Embeds
    embed_height_px: int = 400

    def is_internal(self, url: str) -> bool:
        return url.startswith(self.internal_scheme)
