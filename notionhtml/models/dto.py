"""High-level data transfer objects for database listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ProjectSummary:
    """One row of the projects database."""

    id: str
    title: str
    slug: str
    summary: str
    date: str
    published: bool
    cover: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class ReportSummary:
    """One row of the weekly reports database."""

    id: str
    title: str
    slug: str
    date: str
    published: bool
    progress: str = ""
    results: str = ""
    plan: str = ""
    tools: str = ""
    insight: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
