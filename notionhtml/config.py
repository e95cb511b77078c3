"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .rendering.options import CacheConfig

DEFAULT_CACHE_DIR = os.path.join("public", "images", "notion")
DEFAULT_PUBLIC_PREFIX = "/images/notion"


def _env(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    projects_database_id: Optional[str] = None
    reports_database_id: Optional[str] = None
    cache_dir: str = DEFAULT_CACHE_DIR
    public_prefix: str = DEFAULT_PUBLIC_PREFIX

    @classmethod
    def from_env(cls) -> "Settings":
        """
        NOTION_API_KEY               integration token
        NOTION_DATABASE_ID_PROJECTS  projects database (optional)
        NOTION_DATABASE_ID_REPORTS   reports database (optional)
        NOTIONHTML_CACHE_DIR         asset cache directory (default public/images/notion)
        NOTIONHTML_PUBLIC_PREFIX     URL prefix of the cache dir (default /images/notion)
        """
        return cls(
            api_key=_env("NOTION_API_KEY"),
            projects_database_id=_env("NOTION_DATABASE_ID_PROJECTS"),
            reports_database_id=_env("NOTION_DATABASE_ID_REPORTS"),
            cache_dir=_env("NOTIONHTML_CACHE_DIR") or DEFAULT_CACHE_DIR,
            public_prefix=_env("NOTIONHTML_PUBLIC_PREFIX") or DEFAULT_PUBLIC_PREFIX,
        )

    def cache_config(self) -> CacheConfig:
        return CacheConfig(cache_dir=self.cache_dir, public_prefix=self.public_prefix)
