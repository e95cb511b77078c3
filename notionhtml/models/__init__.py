"""Public exports for notionhtml data models."""

from __future__ import annotations

from .blocks import (
    Annotations,
    AssetRef,
    Block,
    BlockChildrenPage,
    BlockType,
    DatabaseQueryPage,
    RichTextRun,
)
from .dto import ProjectSummary, ReportSummary

__all__ = [
    "Annotations",
    "AssetRef",
    "Block",
    "BlockChildrenPage",
    "BlockType",
    "DatabaseQueryPage",
    "ProjectSummary",
    "ReportSummary",
    "RichTextRun",
]
