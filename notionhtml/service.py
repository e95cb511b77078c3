"""
High-level content service (site-build facing).

Public API:
  - ContentService.page_content(page_id) -> str           (HTML fragment)
  - ContentService.projects() -> List[ProjectSummary]
  - ContentService.reports() -> List[ReportSummary]
  - ContentService.project_by_slug(slug) -> Optional[ProjectSummary]
  - ContentService.raw -> NotionClient (escape hatch)

None of these raise on API failures: the page body degrades to a visible
error fragment, the listings to sample rows.
"""

from __future__ import annotations

import dataclasses
import html
import logging
import re
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from .client import NotionClient
from .config import Settings
from .models.dto import ProjectSummary, ReportSummary
from .rendering.asset_cache import AssetCache
from .rendering.options import RenderConfig
from .rendering.renderer import BlockRenderer

LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T", ProjectSummary, ReportSummary)

PUBLISHED_PROPERTY = "게시여부"
PROJECT_FILTER: Dict[str, Any] = {
    "property": PUBLISHED_PROPERTY,
    "checkbox": {"equals": True},
}
PROJECT_SORTS: List[Dict[str, Any]] = [
    {"timestamp": "created_time", "direction": "descending"}
]


# ------------------------------ Property helpers -----------------------------


def property_value(prop: Optional[Dict[str, Any]], kind: str) -> Any:
    """Extract a plain value from a database page property of the given kind."""
    prop = prop or {}
    if kind in ("title", "rich_text"):
        runs = prop.get(kind) or []
        return "".join(r.get("plain_text", "") for r in runs if isinstance(r, dict))
    if kind == "date":
        return (prop.get("date") or {}).get("start") or ""
    if kind == "checkbox":
        return bool(prop.get("checkbox"))
    if kind == "url":
        return prop.get("url") or ""
    return ""


def _first(props: Dict[str, Any], *names: str) -> Optional[Dict[str, Any]]:
    for name in names:
        if props.get(name) is not None:
            return props[name]
    return None


def _cover_url(page: Dict[str, Any]) -> Optional[str]:
    cover = page.get("cover") or {}
    external = (cover.get("external") or {}).get("url")
    hosted = (cover.get("file") or {}).get("url")
    return external or hosted or None


def project_from_page(page: Dict[str, Any]) -> ProjectSummary:
    props = page.get("properties") or {}
    created = (page.get("created_time") or "").split("T")[0]
    return ProjectSummary(
        id=page.get("id", ""),
        title=property_value(_first(props, "제목", "Title", "Name"), "title"),
        slug=property_value(props.get("Slug"), "rich_text") or page.get("id", ""),
        summary=property_value(_first(props, "설명", "Summary", "요약"), "rich_text"),
        date=property_value(_first(props, "Date", "날짜", "기간"), "date") or created,
        published=property_value(
            _first(props, PUBLISHED_PROPERTY, "Published", "게시"), "checkbox"
        ),
        cover=_cover_url(page),
        raw=props,
    )


def report_from_page(page: Dict[str, Any]) -> ReportSummary:
    props = page.get("properties") or {}
    return ReportSummary(
        id=page.get("id", ""),
        title=property_value(_first(props, "Name", "제목", "Title", "주차"), "title"),
        slug=page.get("id", "").replace("-", ""),
        date=property_value(_first(props, "Date", "날짜", "기간"), "date"),
        published=True,
        progress=property_value(props.get("주요 진행 내용"), "rich_text"),
        results=property_value(props.get("진행 결과"), "rich_text"),
        plan=property_value(props.get("다음 주 계획"), "rich_text"),
        tools=property_value(props.get("사용한 툴 및 기술"), "rich_text"),
        insight=property_value(props.get("인사이트 및 회고"), "rich_text"),
        raw=props,
    )


_YEAR_RE = re.compile(r"(\d{4})년")
_MONTH_RE = re.compile(r"(\d{1,2})월")
_WEEK_RE = re.compile(r"(첫|둘|셋|넷|다섯)째")
_WEEK_NUMBERS = {"첫": 1, "둘": 2, "셋": 3, "넷": 4, "다섯": 5}


def report_sort_key(title: str) -> int:
    """'2025년 1월 첫째 주' → 2025011 (YYYYMMW); unparseable titles sort last."""
    year = _YEAR_RE.search(title)
    month = _MONTH_RE.search(title)
    if not year or not month:
        return 0
    week = _WEEK_RE.search(title)
    week_num = _WEEK_NUMBERS[week.group(1)] if week else 0
    return int(year.group(1)) * 1000 + int(month.group(1)) * 10 + week_num


# ------------------------------ Sample data ----------------------------------


def sample_projects() -> List[ProjectSummary]:
    return [
        ProjectSummary(
            id="1",
            title="Visit Seoul Campaign",
            slug="visit-seoul",
            summary="AI 기반 서울 관광 캠페인 디자인 프로젝트",
            date="2025-01-15",
            published=True,
        ),
        ProjectSummary(
            id="2",
            title="Design Kit Collection",
            slug="design-kit",
            summary="UI/UX 디자인을 위한 종합 키트 제작",
            date="2025-01-10",
            published=True,
        ),
        ProjectSummary(
            id="3",
            title="Brand Identity System",
            slug="brand-identity",
            summary="스타트업을 위한 브랜드 아이덴티티 시스템 구축",
            date="2025-01-05",
            published=True,
        ),
    ]


def sample_reports() -> List[ReportSummary]:
    return [
        ReportSummary(
            id="r1",
            title="Sample Report",
            slug="sample",
            date="2025-01-01",
            published=True,
            progress="Sample progress",
            results="Sample results",
            plan="Sample plan",
            tools="Sample tools",
            insight="Sample insight",
        )
    ]


def _with_error_title(rows: Sequence[_T], exc: Exception) -> List[_T]:
    out = list(rows)
    if out:
        out[0] = dataclasses.replace(out[0], title=f"⚠️ Error: {str(exc)[:100]}")
    return out


def error_fragment(exc: Exception) -> str:
    return (
        '<p class="notice error">⚠️ Failed to load page content: '
        f"{html.escape(str(exc))}</p>"
    )


# ------------------------------ ContentService -------------------------------


class ContentService:
    """
    Site-build API. Uses the raw NotionClient under the hood.
    """

    def __init__(
        self,
        client: NotionClient,
        *,
        settings: Optional[Settings] = None,
        assets: Optional[AssetCache] = None,
        config: Optional[RenderConfig] = None,
    ):
        self._client = client
        self._settings = settings or Settings()
        self._assets = assets or AssetCache(
            self._settings.cache_config(), http=client.http
        )
        self._renderer = BlockRenderer(
            client.fetch_block_children,
            fetch_text=client.fetch_text,
            assets=self._assets,
            config=config,
        )

    @property
    def raw(self) -> NotionClient:
        return self._client

    @property
    def renderer(self) -> BlockRenderer:
        return self._renderer

    async def page_content(self, page_id: str) -> str:
        """Render the body of a page to an HTML fragment; never raises."""
        LOGGER.info("Fetching blocks for page: %s", page_id)
        try:
            blocks = await self._client.fetch_page(page_id)
            if not blocks:
                return ""
            return await self._renderer.render(blocks)
        except Exception as exc:
            LOGGER.error("Failed to fetch page content for %s: %s", page_id, exc)
            return error_fragment(exc)

    async def projects(self) -> List[ProjectSummary]:
        database_id = self._settings.projects_database_id
        if not database_id:
            LOGGER.warning("No projects database id configured; using sample data")
            return sample_projects()
        try:
            rows = await self._client.query_database(
                database_id, filter=PROJECT_FILTER, sorts=PROJECT_SORTS
            )
        except Exception as exc:
            LOGGER.error("Failed to fetch projects: %s", exc)
            return _with_error_title(sample_projects(), exc)
        projects = []
        for page in rows:
            project = project_from_page(page)
            # Hosted covers expire like any other file URL
            cover = (page.get("cover") or {}).get("type")
            if project.cover and cover == "file":
                project = dataclasses.replace(
                    project, cover=await self._assets.resolve(project.cover)
                )
            projects.append(project)
        return projects

    async def reports(self) -> List[ReportSummary]:
        database_id = self._settings.reports_database_id
        if not database_id:
            LOGGER.warning("No reports database id configured; using sample data")
            return sample_reports()
        try:
            rows = await self._client.query_database(database_id)
        except Exception as exc:
            LOGGER.error("Failed to fetch reports: %s", exc)
            return _with_error_title(sample_reports(), exc)
        reports = [report_from_page(page) for page in rows]
        reports.sort(key=lambda r: report_sort_key(r.title), reverse=True)
        return reports

    async def project_by_slug(self, slug: str) -> Optional[ProjectSummary]:
        for project in await self.projects():
            if project.slug == slug:
                return project
        return None
