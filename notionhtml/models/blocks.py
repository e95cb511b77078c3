"""
Notion "wire" models for block children listings and rich text.

A block arrives as ``{"id": ..., "type": "<tag>", "has_children": ..., "<tag>": {...}}``.
`Block` lifts the type-specific object into `payload` and exposes typed views
over it, so renderers never index raw JSON by the type string.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, JsonValue, TypeAdapter, field_validator, model_validator

from ._base import NotionModel


class BlockType(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    IMAGE = "image"
    CODE = "code"
    QUOTE = "quote"
    DIVIDER = "divider"
    CALLOUT = "callout"
    TOGGLE = "toggle"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    FILE = "file"
    PDF = "pdf"
    BOOKMARK = "bookmark"
    EMBED = "embed"
    VIDEO = "video"
    TABLE = "table"
    TABLE_ROW = "table_row"
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: Any) -> "BlockType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.UNSUPPORTED


class Annotations(NotionModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class RichTextRun(NotionModel):
    type: str = "text"
    plain_text: str = ""
    href: Optional[str] = None
    annotations: Annotations = Field(default_factory=Annotations)
    text: Optional[JsonValue] = None
    mention: Optional[JsonValue] = None
    equation: Optional[JsonValue] = None


_RUNS = TypeAdapter(List[RichTextRun])


def _runs(value: Any) -> List[RichTextRun]:
    # Missing or malformed rich-text arrays render as empty text.
    if not isinstance(value, list):
        return []
    return _RUNS.validate_python(value)


class AssetRef(NotionModel):
    """Where a file-like payload (image/file/pdf/video) points."""

    kind: str  # "external" | "file" | "file_upload"
    url: str
    name: Optional[str] = None

    @property
    def is_hosted(self) -> bool:
        """True when the asset lives on the API's own (expiring) storage."""
        return self.kind == "file"


class Block(NotionModel):
    id: str = ""
    type: BlockType = BlockType.UNSUPPORTED
    raw_type: Optional[str] = None
    has_children: bool = False
    payload: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _lift_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "payload" in data:
            return data
        raw_type = data.get("type")
        payload = data.get(raw_type) if isinstance(raw_type, str) else None
        return {
            "id": data.get("id") or "",
            "type": raw_type,
            "raw_type": raw_type,
            "has_children": bool(data.get("has_children")),
            "payload": payload if isinstance(payload, dict) else {},
        }

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> BlockType:
        return BlockType.parse(v)

    # ----- typed views over payload -----

    @property
    def rich_text(self) -> List[RichTextRun]:
        return _runs(self.payload.get("rich_text"))

    @property
    def caption(self) -> List[RichTextRun]:
        return _runs(self.payload.get("caption"))

    @property
    def asset(self) -> Optional[AssetRef]:
        kind = self.payload.get("type")
        src = self.payload.get(kind) if isinstance(kind, str) else None
        if not isinstance(src, dict) or not src.get("url"):
            return None
        return AssetRef(kind=kind, url=str(src["url"]), name=self.payload.get("name"))

    @property
    def url(self) -> str:
        return str(self.payload.get("url") or "")

    @property
    def icon(self) -> Optional[str]:
        icon = self.payload.get("icon")
        if isinstance(icon, dict) and icon.get("type") == "emoji":
            return icon.get("emoji") or None
        return None

    @property
    def cells(self) -> List[List[RichTextRun]]:
        cells = self.payload.get("cells")
        if not isinstance(cells, list):
            return []
        return [_runs(cell) for cell in cells]


class BlockChildrenPage(NotionModel):
    """One page of GET /blocks/{id}/children."""

    object: str = "list"
    results: List[Block] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None
    type: Optional[str] = None
    block: Optional[JsonValue] = None
    request_id: Optional[str] = None


class DatabaseQueryPage(NotionModel):
    """One page of POST /databases/{id}/query."""

    object: str = "list"
    results: List[Dict[str, Any]] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None
    type: Optional[str] = None
    page_or_database: Optional[JsonValue] = None
    request_id: Optional[str] = None


__all__ = [
    "Annotations",
    "AssetRef",
    "Block",
    "BlockChildrenPage",
    "BlockType",
    "DatabaseQueryPage",
    "RichTextRun",
]
